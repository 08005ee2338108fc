"""Uniform catch-report-continue execution of named actions."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Tuple

from .models import ActionFailure, IsolationReport

logger = logging.getLogger(__name__)

NamedCall = Tuple[str, Callable[[], Any]]


def apply_isolated(actions: Iterable[NamedCall], scope: str) -> IsolationReport:
    """Run each ``(name, call)`` in order; a failure is logged and recorded,
    and never stops the calls after it."""
    report = IsolationReport()
    for name, call in actions:
        try:
            call()
        except Exception as exc:
            logger.error("   ❌ [%s] %s failed: %s", scope, name, exc)
            report.failures.append(ActionFailure(scope=scope, name=name, error=exc))
            continue
        logger.info("   ✓ [%s] %s", scope, name)
        report.applied.append(name)
    return report
