"""Tests for guarded post-setup calls."""

from mgn_deployer.errors import UnresolvedDependencyError
from mgn_deployer.orchestrator import PostSetupCall, PostSetupRunner, apply_isolated

from stubs import FakeDeployer, make_context


def _handles():
    deployer = FakeDeployer()
    return deployer, {"voter": deployer.bind_existing("Voter", "0x" + "01" * 20)}


def test_calls_run_in_order():
    deployer, handles = _handles()
    runner = PostSetupRunner([
        PostSetupCall("first", ("voter",), lambda h, ctx: h["voter"].transact("first")),
        PostSetupCall("second", ("voter",), lambda h, ctx: h["voter"].transact("second")),
    ])
    report = runner.apply(handles, make_context())

    assert report.ok
    assert report.applied == ["first", "second"]
    assert deployer.call_names() == ["Voter.first", "Voter.second"]


def test_guard_skips_applied_call():
    deployer, handles = _handles()
    runner = PostSetupRunner([
        PostSetupCall(
            "voter.setGovernor", ("voter",),
            lambda h, ctx: h["voter"].transact("setGovernor"),
            already_applied=lambda h, ctx: True,
        ),
    ])
    report = runner.apply(handles, make_context())

    assert report.skipped == ["voter.setGovernor"]
    assert report.applied == []
    assert deployer.calls == []


def test_missing_handle_is_reported_and_rest_continues():
    deployer, handles = _handles()
    runner = PostSetupRunner([
        PostSetupCall("minter.setTeam", ("minter",), lambda h, ctx: h["minter"].transact("setTeam")),
        PostSetupCall("voter.setGovernor", ("voter",), lambda h, ctx: h["voter"].transact("setGovernor")),
    ])
    report = runner.apply(handles, make_context())

    assert not report.ok
    assert report.failures[0].name == "minter.setTeam"
    assert isinstance(report.failures[0].error, UnresolvedDependencyError)
    assert report.applied == ["voter.setGovernor"]


def test_failing_call_and_guard_are_isolated():
    deployer = FakeDeployer(failing_calls={("Voter", "setGovernor")})
    handles = {"voter": deployer.bind_existing("Voter", "0x" + "01" * 20)}

    def broken_guard(h, ctx):
        raise ConnectionError("rpc unavailable")

    runner = PostSetupRunner([
        PostSetupCall("voter.setGovernor", ("voter",), lambda h, ctx: h["voter"].transact("setGovernor")),
        PostSetupCall("voter.setEpochGovernor", ("voter",), lambda h, ctx: h["voter"].transact("x"),
                      already_applied=broken_guard),
        PostSetupCall("voter.setEmergencyCouncil", ("voter",),
                      lambda h, ctx: h["voter"].transact("setEmergencyCouncil")),
    ])
    report = runner.apply(handles, make_context())

    assert [failure.name for failure in report.failures] == ["voter.setGovernor", "voter.setEpochGovernor"]
    assert report.applied == ["voter.setEmergencyCouncil"]


def test_empty_runner_is_ok():
    assert PostSetupRunner([]).apply({}, make_context()).ok


def test_apply_isolated_collects_failures():
    def boom():
        raise RuntimeError("nope")

    report = apply_isolated([("a", lambda: 1), ("b", boom), ("c", lambda: 3)], scope="batch")
    assert report.applied == ["a", "c"]
    assert [(f.scope, f.name) for f in report.failures] == [("batch", "b")]
