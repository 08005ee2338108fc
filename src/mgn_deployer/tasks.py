"""Deployment task registry: which graph, which checkpoint file."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List

from .orchestrator import PostSetupCall, UnitDescriptor
from .protocol import core, router, tokens


def _no_post_setup() -> List[PostSetupCall]:
    return []


@dataclass(frozen=True)
class DeploymentTask:
    """One top-level deployment entry point."""

    name: str
    description: str
    checkpoint_template: str
    build_units: Callable[[], List[UnitDescriptor]]
    build_post_setup: Callable[[], List[PostSetupCall]] = _no_post_setup


TASKS: Dict[str, DeploymentTask] = {
    "core": DeploymentTask(
        name="core",
        description="Deploy the full core protocol graph and hand admin roles to the team",
        checkpoint_template=core.CHECKPOINT_TEMPLATE,
        build_units=core.build_units,
        build_post_setup=core.build_post_setup,
    ),
    "router": DeploymentTask(
        name="router",
        description="Deploy a Router against an existing core deployment",
        # 与 core 共用检查点文件，router 地址写回 CoreOutput
        checkpoint_template=core.CHECKPOINT_TEMPLATE,
        build_units=router.build_units,
    ),
    "stable-erc20": DeploymentTask(
        name="stable-erc20",
        description="Deploy the two test stablecoins",
        checkpoint_template=tokens.STABLE_CHECKPOINT_TEMPLATE,
        build_units=tokens.build_stable_units,
    ),
    "weth": DeploymentTask(
        name="weth",
        description="Deploy the wrapped native token",
        checkpoint_template=tokens.WETH_CHECKPOINT_TEMPLATE,
        build_units=tokens.build_weth_units,
    ),
}


def get_task(name: str) -> DeploymentTask:
    try:
        return TASKS[name]
    except KeyError:
        raise ValueError(f"Unknown task '{name}'. Available: {', '.join(TASKS)}") from None
