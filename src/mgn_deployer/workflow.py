"""High-level workflow: wire config, chain access and the engine together."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from .checkpoint import CheckpointStore
from .config import AppConfig, NetworkConfig
from .constants import ProtocolConstantsProvider
from .errors import MissingCheckpointEntryError
from .orchestrator import (
    Deployer,
    DeploymentEngine,
    IsolationReport,
    PostSetupRunner,
    RunContext,
    RunReport,
    apply_isolated,
    resolve,
)
from .protocol.tokens import WETH_CHECKPOINT_TEMPLATE, WRAP_AMOUNT
from .tasks import DeploymentTask, get_task
from .utils.logging import get_logger

logger = get_logger(__name__)

# (network) -> (deployer, chain_id)
Connector = Callable[[NetworkConfig], Tuple[Deployer, int]]


def _web3_connector(config: AppConfig) -> Connector:
    def connect(network: NetworkConfig) -> Tuple[Deployer, int]:
        from .chain import ArtifactRegistry, Web3Deployer, create_web3, resolve_chain_id

        web3 = create_web3(network)
        chain_id = resolve_chain_id(web3, network)
        deployer = Web3Deployer(
            web3,
            ArtifactRegistry(config.deployment.artifacts_dir),
            private_key=config.transaction.private_key,
            chain_id=chain_id,
            confirmation_timeout=config.transaction.confirmation_timeout,
            poll_latency=config.transaction.poll_latency,
            gas_multiplier=config.transaction.gas_multiplier,
        )
        return deployer, chain_id

    return connect


@dataclass
class TaskRequest:
    """User-provided task request captured from the CLI."""

    task: str
    network: Optional[str] = None
    redeploy: List[str] = field(default_factory=list)


@dataclass
class TaskOutcome:
    task: str
    checkpoint_path: Path
    report: RunReport
    post_setup: IsolationReport = field(default_factory=IsolationReport)
    post_setup_deferred: bool = False      # 有未解析单元时不执行 post-setup

    @property
    def complete(self) -> bool:
        return (
            self.report.complete
            and not self.report.action_failures
            and not self.post_setup_deferred
            and self.post_setup.ok
        )


@dataclass
class UnitState:
    name: str
    kind: str
    identifier: Optional[str]


class DeploymentWorkflow:
    """Runs deployment tasks against one configured network."""

    def __init__(
        self,
        config: AppConfig,
        *,
        output_dir: Optional[str] = None,
        connector: Optional[Connector] = None,
        constants_provider: Optional[ProtocolConstantsProvider] = None,
    ) -> None:
        self.config = config
        self.output_dir = Path(output_dir or config.deployment.output_dir)
        self.connector = connector or _web3_connector(config)
        self.constants_provider = constants_provider or ProtocolConstantsProvider(
            config.deployment.constants_file
        )

    def store_for(self, task: DeploymentTask) -> CheckpointStore:
        return CheckpointStore(self.output_dir, task.checkpoint_template)

    def _environment(self, network_name: Optional[str]) -> str:
        """Checkpoint key for a network, asking the node only when no chain id is configured."""
        network = self.config.network_for(network_name)
        if network.chain_id is not None:
            return str(network.chain_id)
        _, chain_id = self.connector(network)
        return str(chain_id)

    def _connect(self, network_name: Optional[str]) -> Tuple[Deployer, RunContext]:
        network = self.config.network_for(network_name)
        deployer, chain_id = self.connector(network)
        environment = str(chain_id)
        context = RunContext(
            environment=environment,
            network=network.name,
            chain_id=chain_id,
            constants=self.constants_provider.get(environment),
        )
        return deployer, context

    def run_task(self, request: TaskRequest) -> TaskOutcome:
        """Run one task; structural problems raise before anything is sent."""
        task = get_task(request.task)
        logger.info("📋 Task: %s - %s", task.name, task.description)

        units = resolve(task.build_units())
        unit_names = {unit.name for unit in units}
        unknown = [name for name in request.redeploy if name not in unit_names]
        if unknown:
            raise ValueError(f"Cannot redeploy unknown unit(s) for task {task.name}: {', '.join(unknown)}")
        runner = PostSetupRunner(task.build_post_setup())

        deployer, context = self._connect(request.network)
        store = self.store_for(task)
        if request.redeploy:
            store.discard(context.environment, request.redeploy)
        record = store.load(context.environment)

        engine = DeploymentEngine(deployer, store)
        report = engine.run(units, context, record=record)
        # 角色移交会让部署账户失去权限，必须等所有单元都就绪
        deferred = bool(runner.calls) and not report.complete
        if deferred:
            logger.warning(
                "⏸️  Post-setup deferred; unresolved: %s", ", ".join(report.unresolved)
            )
            post_setup = IsolationReport()
        else:
            post_setup = runner.apply(report.handles, context)

        outcome = TaskOutcome(
            task=task.name,
            checkpoint_path=store.path_for(context.environment),
            report=report,
            post_setup=post_setup,
            post_setup_deferred=deferred,
        )
        if outcome.complete:
            logger.info("🎉 Task %s completed, output: %s", task.name, outcome.checkpoint_path)
        else:
            logger.warning("💥 Task %s finished with failures; re-run to resume", task.name)
        return outcome

    def status(self, task_name: str, network: Optional[str] = None) -> Tuple[Path, List[UnitState]]:
        """Checkpoint state of every unit in a task; protocol constants are not needed."""
        task = get_task(task_name)
        units = resolve(task.build_units())
        environment = self._environment(network)
        store = self.store_for(task)
        path = store.path_for(environment)
        record = store.load(environment) if path.exists() else {}
        states = [UnitState(unit.name, unit.kind, record.get(unit.name)) for unit in units]
        return path, states

    def wrap_ether(self, network: Optional[str] = None, amount: int = WRAP_AMOUNT) -> bool:
        """Deposit ``amount`` wei into the recorded WETH contract."""
        deployer, context = self._connect(network)
        store = CheckpointStore(self.output_dir, WETH_CHECKPOINT_TEMPLATE)
        record = store.load(context.environment)
        if not store.has(record, "weth"):
            raise MissingCheckpointEntryError("weth")

        weth = deployer.bind_existing("WETH", record["weth"])
        logger.info("💧 Wrapping %d wei into %s", amount, weth.address)
        report = apply_isolated(
            [("WETH.deposit", lambda: weth.transact("deposit", value=amount))],
            scope="wrap-ether",
        )
        return report.ok


def summarize(outcome: TaskOutcome) -> Dict[str, object]:
    """Plain-data summary of a task outcome."""
    report = outcome.report
    return {
        "task": outcome.task,
        "checkpoint": str(outcome.checkpoint_path),
        "deployed": report.deployed,
        "rehydrated": report.rehydrated,
        "unresolved": report.unresolved,
        "failures": {failure.unit: str(failure.error) for failure in report.failures},
        "persist_failures": report.persist_failures,
        "post_setup_deferred": outcome.post_setup_deferred,
        "action_failures": [
            f"{failure.scope}.{failure.name}: {failure.error}"
            for failure in report.action_failures + outcome.post_setup.failures
        ],
    }
