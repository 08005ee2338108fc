"""Deployment engine: checkpointed, dependency-ordered provisioning."""

from __future__ import annotations

import logging
from functools import partial
from typing import Dict, Optional, Sequence

from ..checkpoint import CheckpointRecord, CheckpointStore
from ..errors import (
    FactoryFailedError,
    PersistFailedError,
    RehydrationFailedError,
    UnresolvedDependencyError,
)
from .isolation import apply_isolated
from .models import (
    ArtifactHandle,
    Deployer,
    RunContext,
    RunReport,
    UnitDescriptor,
    UnitFailure,
    UnitStatus,
)

logger = logging.getLogger(__name__)


class DeploymentEngine:
    """
    部署引擎

    Walks an already-resolved unit sequence. Units recorded in the checkpoint
    are rehydrated; the rest are deployed and recorded one at a time, with
    the checkpoint persisted before the next unit starts. A failing unit is
    reported and left unresolved; the run always reaches the end of the list.

    A crash between a successful deployment and its checkpoint write means
    that unit is deployed again on the next run. There is no chain-side
    idempotency key to prevent it.
    """

    def __init__(self, deployer: Deployer, store: CheckpointStore) -> None:
        self.deployer = deployer
        self.store = store

    def run(
        self,
        units: Sequence[UnitDescriptor],
        context: RunContext,
        record: Optional[CheckpointRecord] = None,
    ) -> RunReport:
        """
        Provision ``units`` in the given order.

        Args:
            units: Units in dependency order (see ``resolver.resolve``)
            context: Read-only run context handed to every factory
            record: Already-loaded checkpoint record, loaded from the store if omitted

        Returns:
            RunReport: handles plus per-unit outcome
        """
        if record is None:
            record = self.store.load(context.environment)
        report = RunReport()

        logger.info("=" * 60)
        logger.info("🚀 DEPLOYMENT on %s (chain %s)", context.network, context.chain_id)
        logger.info("   Checkpoint: %s", self.store.path_for(context.environment))
        logger.info("   Units: %d (%d already recorded)", len(units),
                    sum(1 for unit in units if self.store.has(record, unit.name)))
        logger.info("=" * 60)

        for index, unit in enumerate(units, 1):
            logger.info("📍 [%d/%d] %s (%s)", index, len(units), unit.name, unit.kind)
            if self.store.has(record, unit.name):
                self._rehydrate(unit, record[unit.name], report)
            else:
                self._provision(unit, context, record, report)

        self._log_summary(report)
        return report

    def _rehydrate(self, unit: UnitDescriptor, identifier: str, report: RunReport) -> None:
        try:
            handle = self.deployer.bind_existing(unit.kind, identifier)
        except Exception as exc:
            error = RehydrationFailedError(unit.name, identifier, exc)
            logger.error("   ❌ %s", error)
            report.failures.append(UnitFailure(unit.name, error))
            report.statuses[unit.name] = UnitStatus.FAILED
            return
        logger.info("   ♻️  Already deployed at %s", identifier)
        report.handles[unit.name] = handle
        report.statuses[unit.name] = UnitStatus.REHYDRATED

    def _provision(
        self,
        unit: UnitDescriptor,
        context: RunContext,
        record: CheckpointRecord,
        report: RunReport,
    ) -> None:
        missing = [name for name in unit.depends_on if name not in report.handles]
        if missing:
            error = UnresolvedDependencyError(unit.name, missing)
            logger.warning("   ⚠️ %s", error)
            report.failures.append(UnitFailure(unit.name, error))
            report.statuses[unit.name] = UnitStatus.SKIPPED
            return

        deps: Dict[str, ArtifactHandle] = {name: report.handles[name] for name in unit.depends_on}
        try:
            handle = unit.factory(self.deployer, deps, context)
        except Exception as exc:
            error = FactoryFailedError(unit.name, exc)
            logger.error("   ❌ %s", error)
            report.failures.append(UnitFailure(unit.name, error))
            report.statuses[unit.name] = UnitStatus.FAILED
            return

        logger.info("   ✅ Deployed at %s", handle.address)
        report.handles[unit.name] = handle
        report.statuses[unit.name] = UnitStatus.DEPLOYED

        # 先落盘，再执行部署后动作
        record[unit.name] = handle.address
        try:
            self.store.save(context.environment, record)
        except PersistFailedError as exc:
            logger.error("   ⚠️ %s (unit '%s' may be redeployed by the next run)", exc, unit.name)
            report.persist_failures.append(unit.name)

        if unit.post_deploy:
            actions = [
                (action.name, partial(action.fn, handle, deps, context))
                for action in unit.post_deploy
            ]
            outcome = apply_isolated(actions, scope=unit.name)
            report.action_failures.extend(outcome.failures)

    def _log_summary(self, report: RunReport) -> None:
        logger.info("=" * 60)
        logger.info(
            "📊 Deployed: %d, reused: %d, failed/skipped: %d",
            len(report.deployed),
            len(report.rehydrated),
            len(report.unresolved),
        )
        for failure in report.action_failures:
            logger.warning("   ⚠️ Action %s.%s failed: %s", failure.scope, failure.name, failure.error)
        for name in report.persist_failures:
            logger.warning("   ⚠️ Not persisted: %s", name)
        if report.unresolved:
            logger.warning("   ⏭️  Unresolved (a re-run will attempt): %s", ", ".join(report.unresolved))
        else:
            logger.info("   🎉 All units resolved")
        logger.info("=" * 60)
