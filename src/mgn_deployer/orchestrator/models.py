"""Data models for the deployment engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple, TYPE_CHECKING, runtime_checkable

if TYPE_CHECKING:
    from ..constants import ProtocolConstants


@runtime_checkable
class ArtifactHandle(Protocol):
    """Runtime reference to a deployed unit; ``address`` is its identifier."""

    name: str
    address: str


class Deployer(Protocol):
    """Capability used by factories to put artifacts on chain."""

    def deploy(self, kind: str, *args: Any, libraries: Optional[Dict[str, str]] = None) -> ArtifactHandle:
        ...

    def bind_existing(self, kind: str, address: str) -> ArtifactHandle:
        ...


@dataclass(frozen=True)
class RunContext:
    """Environment-scoped values resolved once per run, read-only."""

    environment: str                # 检查点键（链 ID 字符串）
    network: str
    chain_id: int
    constants: "ProtocolConstants"


Handles = Dict[str, ArtifactHandle]
Factory = Callable[[Deployer, Handles, RunContext], ArtifactHandle]
ActionFn = Callable[[ArtifactHandle, Handles, RunContext], Any]


@dataclass(frozen=True)
class UnitAction:
    """A post-deploy call applied to a freshly created artifact."""

    name: str
    fn: ActionFn


@dataclass(frozen=True)
class UnitDescriptor:
    """Declarative description of one provisionable unit."""

    name: str
    kind: str
    factory: Factory
    depends_on: Tuple[str, ...] = ()
    post_deploy: Tuple[UnitAction, ...] = ()


class UnitStatus(Enum):
    """单元在一次运行中的结果"""
    DEPLOYED = "deployed"
    REHYDRATED = "rehydrated"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class ActionFailure:
    """One failed call inside an isolated batch."""
    scope: str
    name: str
    error: BaseException


@dataclass
class IsolationReport:
    """Outcome of :func:`apply_isolated` over a batch of named actions."""

    applied: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failures: List[ActionFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def extend(self, other: "IsolationReport") -> None:
        self.applied.extend(other.applied)
        self.skipped.extend(other.skipped)
        self.failures.extend(other.failures)


@dataclass
class UnitFailure:
    unit: str
    error: BaseException


@dataclass
class RunReport:
    """Everything a run produced; ``handles`` maps unit name to handle."""

    handles: Dict[str, ArtifactHandle] = field(default_factory=dict)
    statuses: Dict[str, UnitStatus] = field(default_factory=dict)
    failures: List[UnitFailure] = field(default_factory=list)
    persist_failures: List[str] = field(default_factory=list)
    action_failures: List[ActionFailure] = field(default_factory=list)

    @property
    def deployed(self) -> List[str]:
        return [name for name, status in self.statuses.items() if status == UnitStatus.DEPLOYED]

    @property
    def rehydrated(self) -> List[str]:
        return [name for name, status in self.statuses.items() if status == UnitStatus.REHYDRATED]

    @property
    def unresolved(self) -> List[str]:
        return [name for name in self.statuses if name not in self.handles]

    @property
    def complete(self) -> bool:
        return not self.unresolved
