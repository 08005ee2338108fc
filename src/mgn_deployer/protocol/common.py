"""Helpers shared by the protocol unit graphs."""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Tuple

from ..errors import MissingCheckpointEntryError
from ..orchestrator.models import ArtifactHandle, Deployer, Handles, RunContext, UnitDescriptor


def contract(
    name: str,
    kind: str,
    args: Callable[[Handles, RunContext], Tuple[Any, ...]] = lambda deps, ctx: (),
    *,
    depends_on: Tuple[str, ...] = (),
    libraries: Optional[Dict[str, str]] = None,
    post_deploy=(),
) -> UnitDescriptor:
    """Describe a plain contract deployment.

    ``args`` builds the constructor arguments from the resolved dependency
    handles and the run context. ``libraries`` maps a library name in the
    artifact to the unit that provides it; those units are added to
    ``depends_on`` automatically.
    """
    libraries = dict(libraries or {})
    all_deps = tuple(depends_on) + tuple(unit for unit in libraries.values() if unit not in depends_on)

    def factory(deployer: Deployer, deps: Handles, ctx: RunContext) -> ArtifactHandle:
        linked = {library: deps[unit].address for library, unit in libraries.items()}
        return deployer.deploy(kind, *args(deps, ctx), libraries=linked or None)

    return UnitDescriptor(
        name=name,
        kind=kind,
        factory=factory,
        depends_on=all_deps,
        post_deploy=tuple(post_deploy),
    )


def existing(name: str, kind: str) -> UnitDescriptor:
    """A unit that must already be in the checkpoint; it is never deployed."""

    def factory(deployer: Deployer, deps: Handles, ctx: RunContext) -> ArtifactHandle:
        raise MissingCheckpointEntryError(name)

    return UnitDescriptor(name=name, kind=kind, factory=factory)


def same_address(left: Any, right: Any) -> bool:
    return str(left).lower() == str(right).lower()
