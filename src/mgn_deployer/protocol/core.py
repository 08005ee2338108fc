"""The core MGN protocol graph.

Tokens, pool and reward factories, vote escrow with its art proxy, rewards
distributor, voter, minter and router, followed by the hand-over of admin
roles to the team.
"""

from __future__ import annotations

from typing import List

from ..orchestrator import PostSetupCall, UnitAction, UnitDescriptor
from .common import contract, same_address

MINT_VALUE = 1_000_000_000_000_000_000_000_000_000  # 1e9 MGN (18 decimals)

CHECKPOINT_TEMPLATE = "CoreOutput-{environment}.json"


def _mint_to_team(mgn, deps, ctx):
    return mgn.transact("mint", ctx.constants.team, MINT_VALUE)


def _set_art_proxy(art_proxy, deps, ctx):
    return deps["votingEscrow"].transact("setArtProxy", art_proxy.address)


def _set_voter_and_distributor(voter, deps, ctx):
    return deps["votingEscrow"].transact("setVoterAndDistributor", voter.address, deps["distributor"].address)


def _initialize_voter(minter, deps, ctx):
    whitelist = list(ctx.constants.whitelist_tokens) + [deps["MGN"].address]
    return deps["voter"].transact("initialize", whitelist, minter.address)


def build_units() -> List[UnitDescriptor]:
    return [
        contract(
            "MGN", "MGN",
            post_deploy=[UnitAction("mint(team)", _mint_to_team)],
        ),
        contract("poolImplementation", "Pool"),
        contract(
            "poolFactory", "PoolFactory",
            lambda deps, ctx: (deps["poolImplementation"].address,),
            depends_on=("poolImplementation",),
            post_deploy=[
                UnitAction("setFee(stable)", lambda factory, deps, ctx: factory.transact("setFee", True, 1)),
                UnitAction("setFee(volatile)", lambda factory, deps, ctx: factory.transact("setFee", False, 1)),
            ],
        ),
        contract("votingRewardsFactory", "VotingRewardsFactory"),
        contract("gaugeFactory", "GaugeFactory"),
        contract("managedRewardsFactory", "ManagedRewardsFactory"),
        contract(
            "factoryRegistry", "FactoryRegistry",
            lambda deps, ctx: (
                deps["poolFactory"].address,
                deps["votingRewardsFactory"].address,
                deps["gaugeFactory"].address,
                deps["managedRewardsFactory"].address,
            ),
            depends_on=("poolFactory", "votingRewardsFactory", "gaugeFactory", "managedRewardsFactory"),
        ),
        contract("forwarder", "MGNForwarder"),
        contract("balanceLogicLibrary", "BalanceLogicLibrary"),
        contract("delegationLogicLibrary", "DelegationLogicLibrary"),
        contract(
            "votingEscrow", "VotingEscrow",
            lambda deps, ctx: (
                deps["forwarder"].address,
                deps["MGN"].address,
                deps["factoryRegistry"].address,
            ),
            depends_on=("forwarder", "MGN", "factoryRegistry"),
            libraries={
                "BalanceLogicLibrary": "balanceLogicLibrary",
                "DelegationLogicLibrary": "delegationLogicLibrary",
            },
        ),
        contract("trig", "Trig"),
        contract("perlinNoise", "PerlinNoise"),
        contract(
            "artProxy", "VeArtProxy",
            lambda deps, ctx: (deps["votingEscrow"].address,),
            depends_on=("votingEscrow",),
            libraries={"Trig": "trig", "PerlinNoise": "perlinNoise"},
            post_deploy=[UnitAction("votingEscrow.setArtProxy", _set_art_proxy)],
        ),
        contract(
            "distributor", "RewardsDistributor",
            lambda deps, ctx: (deps["votingEscrow"].address,),
            depends_on=("votingEscrow",),
        ),
        contract(
            "voter", "Voter",
            lambda deps, ctx: (
                deps["forwarder"].address,
                deps["votingEscrow"].address,
                deps["factoryRegistry"].address,
            ),
            # distributor 仅用于部署后动作
            depends_on=("forwarder", "votingEscrow", "factoryRegistry", "distributor"),
            post_deploy=[UnitAction("votingEscrow.setVoterAndDistributor", _set_voter_and_distributor)],
        ),
        contract(
            "minter", "Minter",
            lambda deps, ctx: (
                deps["voter"].address,
                deps["votingEscrow"].address,
                deps["distributor"].address,
            ),
            depends_on=("voter", "votingEscrow", "distributor", "MGN"),
            post_deploy=[
                UnitAction("distributor.setMinter",
                           lambda minter, deps, ctx: deps["distributor"].transact("setMinter", minter.address)),
                UnitAction("MGN.setMinter",
                           lambda minter, deps, ctx: deps["MGN"].transact("setMinter", minter.address)),
                UnitAction("voter.initialize", _initialize_voter),
            ],
        ),
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


def _role_call(unit: str, setter: str, getter: str, value) -> PostSetupCall:
    """``unit.setter(value)`` skipped when ``unit.getter()`` already equals it."""
    return PostSetupCall(
        name=f"{unit}.{setter}",
        requires=(unit,),
        apply=lambda handles, ctx: handles[unit].transact(setter, value(handles, ctx)),
        already_applied=lambda handles, ctx: same_address(handles[unit].call(getter), value(handles, ctx)),
    )


def _minter_team_call() -> PostSetupCall:
    # Minter.setTeam 只设置 pendingTeam，需要团队 acceptTeam
    def applied(handles, ctx):
        minter = handles["minter"]
        team = ctx.constants.team
        return same_address(minter.call("team"), team) or same_address(minter.call("pendingTeam"), team)

    return PostSetupCall(
        name="minter.setTeam",
        requires=("minter",),
        apply=lambda handles, ctx: handles["minter"].transact("setTeam", ctx.constants.team),
        already_applied=applied,
    )


def _team(handles, ctx):
    return ctx.constants.team


def build_post_setup() -> List[PostSetupCall]:
    team = _team
    return [
        _role_call("votingEscrow", "setTeam", "team", team),
        _minter_team_call(),
        _role_call("poolFactory", "setPauser", "pauser", team),
        _role_call("voter", "setEmergencyCouncil", "emergencyCouncil",
                   lambda handles, ctx: ctx.constants.emergency_council),
        _role_call("voter", "setEpochGovernor", "epochGovernor", team),
        _role_call("voter", "setGovernor", "governor", team),
        _role_call("factoryRegistry", "transferOwnership", "owner", team),
        _role_call("poolFactory", "setFeeManager", "feeManager",
                   lambda handles, ctx: ctx.constants.fee_manager),
        PostSetupCall(
            name="poolFactory.setVoter",
            requires=("poolFactory", "voter"),
            apply=lambda handles, ctx: handles["poolFactory"].transact("setVoter", handles["voter"].address),
            already_applied=lambda handles, ctx: same_address(
                handles["poolFactory"].call("voter"), handles["voter"].address
            ),
        ),
    ]
