"""Router-only graph: a new Router over an existing core deployment."""

from __future__ import annotations

from typing import List

from ..orchestrator import UnitDescriptor
from .common import contract, existing


def build_units() -> List[UnitDescriptor]:
    return [
        existing("factoryRegistry", "FactoryRegistry"),
        existing("poolFactory", "PoolFactory"),
        existing("voter", "Voter"),
        contract(
            "router", "Router",
            lambda deps, ctx: (
                deps["factoryRegistry"].address,
                deps["poolFactory"].address,
                deps["voter"].address,
                ctx.constants.weth,
            ),
            depends_on=("factoryRegistry", "poolFactory", "voter"),
        ),
    ]
