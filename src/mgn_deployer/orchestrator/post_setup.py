"""Cross-cutting configuration applied once every unit is resolved."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Iterable, List, Optional, Tuple

from ..errors import UnresolvedDependencyError
from .isolation import apply_isolated
from .models import ActionFailure, Handles, IsolationReport, RunContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostSetupCall:
    """An administrative call over resolved handles.

    ``apply`` must be safe to repeat. Calls that are not naturally idempotent
    supply ``already_applied``; when it returns True the call is skipped.
    """

    name: str
    requires: Tuple[str, ...]
    apply: Callable[[Handles, RunContext], Any]
    already_applied: Optional[Callable[[Handles, RunContext], bool]] = None


class PostSetupRunner:
    """Runs a fixed, ordered list of post-setup calls with per-call isolation."""

    def __init__(self, calls: Iterable[PostSetupCall]) -> None:
        self.calls: List[PostSetupCall] = list(calls)

    def apply(self, handles: Handles, context: RunContext) -> IsolationReport:
        report = IsolationReport()
        if not self.calls:
            return report

        logger.info("🔧 Post-setup: %d call(s)", len(self.calls))
        for call in self.calls:
            missing = [name for name in call.requires if name not in handles]
            if missing:
                error = UnresolvedDependencyError(call.name, missing)
                logger.warning("   ⚠️ %s", error)
                report.failures.append(ActionFailure(scope="post-setup", name=call.name, error=error))
                continue

            if call.already_applied is not None:
                try:
                    done = call.already_applied(handles, context)
                except Exception as exc:
                    logger.error("   ❌ [post-setup] %s guard failed: %s", call.name, exc)
                    report.failures.append(ActionFailure(scope="post-setup", name=call.name, error=exc))
                    continue
                if done:
                    logger.info("   ⏭️  [post-setup] %s already applied", call.name)
                    report.skipped.append(call.name)
                    continue

            report.extend(
                apply_isolated([(call.name, partial(call.apply, handles, context))], scope="post-setup")
            )
        return report
