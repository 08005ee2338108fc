"""Standalone token graphs: test stablecoins and the wrapped native token."""

from __future__ import annotations

from typing import Dict, List

from ..constants import WrappedNativeDetail
from ..orchestrator import RunContext, UnitDescriptor
from .common import contract

STABLE_CHECKPOINT_TEMPLATE = "StableERC20Output-{environment}.json"
WETH_CHECKPOINT_TEMPLATE = "WethOutput-{environment}.json"

STABLE_MINT_VALUE = 100_000_000_000_000

# 未在常量文件中配置 wrappedNative 时使用
WRAPPED_NATIVE_DEFAULTS: Dict[int, WrappedNativeDetail] = {
    5124: WrappedNativeDetail(name="Wrapped Seismic", symbol="WSMIC"),
}

WRAP_AMOUNT = 3_000_000_000_000_000


def build_stable_units() -> List[UnitDescriptor]:
    return [
        contract(
            "usdc", "StableERC20",
            lambda deps, ctx: ("Magnetar Finance USD", "MGNUSD", STABLE_MINT_VALUE),
        ),
        contract(
            "usdt", "StableERC20",
            lambda deps, ctx: ("Magnetar Finance USD+", "MGNUSD+", STABLE_MINT_VALUE),
        ),
    ]


def wrapped_native_detail(ctx: RunContext) -> WrappedNativeDetail:
    detail = ctx.constants.wrapped_native or WRAPPED_NATIVE_DEFAULTS.get(ctx.chain_id)
    if detail is None:
        raise ValueError(f"No wrapped native token name/symbol configured for chain {ctx.chain_id}")
    return detail


def build_weth_units() -> List[UnitDescriptor]:
    def args(deps, ctx):
        detail = wrapped_native_detail(ctx)
        return (detail.name, detail.symbol)

    return [contract("weth", "WETH", args)]
