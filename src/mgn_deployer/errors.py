"""Exception hierarchy for mgn-deployer."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence


class DeploymentError(RuntimeError):
    """Base class for every error raised by the deployer."""


# ---------------------------------------------------------------------------
# 结构性错误：在任何链上副作用之前中止运行
# ---------------------------------------------------------------------------


class CycleDetectedError(DeploymentError):
    """Raised when the unit graph contains a dependency cycle."""

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = list(cycle)
        super().__init__(f"Dependency cycle detected: {' -> '.join(self.cycle)}")


class UnknownDependencyError(DeploymentError):
    """Raised when a unit depends on a name that is not declared."""

    def __init__(self, unit: str, dependency: str) -> None:
        self.unit = unit
        self.dependency = dependency
        super().__init__(f"Unit '{unit}' depends on unknown unit '{dependency}'")


class DuplicateUnitError(DeploymentError):
    """Raised when two unit descriptors share the same name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unit '{name}' is declared more than once")


class UnknownEnvironmentError(DeploymentError):
    """Raised when no configuration exists for an environment identifier."""

    def __init__(self, environment: str, detail: Optional[str] = None) -> None:
        self.environment = environment
        message = f"No configuration for environment '{environment}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class CheckpointCorruptError(DeploymentError):
    """Raised when an existing checkpoint file cannot be parsed."""


# ---------------------------------------------------------------------------
# 单元级错误：记录后继续执行
# ---------------------------------------------------------------------------


class FactoryFailedError(DeploymentError):
    """The factory of a unit raised; the unit stays unresolved."""

    def __init__(self, unit: str, cause: BaseException) -> None:
        self.unit = unit
        self.cause = cause
        super().__init__(f"Unit '{unit}' failed: {cause}")


class PersistFailedError(DeploymentError):
    """Writing the checkpoint file failed."""

    def __init__(self, path: str, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Could not persist checkpoint {path}: {cause}")


class UnresolvedDependencyError(DeploymentError):
    """A prerequisite of a unit or call has no handle in this run."""

    def __init__(self, unit: str, missing: Iterable[str]) -> None:
        self.unit = unit
        self.missing = list(missing)
        super().__init__(
            f"'{unit}' skipped, unresolved dependencies: {', '.join(self.missing)}"
        )


class RehydrationFailedError(DeploymentError):
    """Binding a handle to a recorded identifier failed."""

    def __init__(self, unit: str, identifier: str, cause: BaseException) -> None:
        self.unit = unit
        self.identifier = identifier
        self.cause = cause
        super().__init__(f"Could not rehydrate '{unit}' at {identifier}: {cause}")


class MissingCheckpointEntryError(DeploymentError):
    """A unit that can only be rehydrated has no checkpoint entry."""

    def __init__(self, unit: str) -> None:
        self.unit = unit
        super().__init__(
            f"Unit '{unit}' must already be recorded in the checkpoint (run its deployment task first)"
        )


# ---------------------------------------------------------------------------
# 链交互错误
# ---------------------------------------------------------------------------


class DeploymentTimeoutError(DeploymentError):
    """A bounded wait (e.g. transaction confirmation) ran out of time."""

    def __init__(self, operation: str, timeout: float) -> None:
        self.operation = operation
        self.timeout = timeout
        super().__init__(f"{operation} did not complete within {timeout} seconds")


class TransactionRevertedError(DeploymentError):
    """A transaction was mined with a failure status."""

    def __init__(self, operation: str, tx_hash: str) -> None:
        self.operation = operation
        self.tx_hash = tx_hash
        super().__init__(f"{operation} reverted (tx {tx_hash})")


class ArtifactError(DeploymentError):
    """A compiled contract artifact is missing or cannot be linked."""
