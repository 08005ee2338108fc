"""Tests for dependency ordering."""

import itertools

import pytest

from mgn_deployer.errors import CycleDetectedError, DuplicateUnitError, UnknownDependencyError
from mgn_deployer.orchestrator import resolve

from stubs import simple_unit


def names(units):
    return [unit.name for unit in units]


def test_chain_is_ordered_regardless_of_declaration_order():
    a = simple_unit("A")
    b = simple_unit("B", "A")
    c = simple_unit("C", "B")
    for permutation in itertools.permutations([a, b, c]):
        assert names(resolve(permutation)) == ["A", "B", "C"]


def test_independent_units_keep_declaration_order():
    units = [simple_unit("Z"), simple_unit("X"), simple_unit("Y")]
    assert names(resolve(units)) == ["Z", "X", "Y"]
    assert names(resolve(units)) == names(resolve(units))


def test_dependencies_follow_declared_order():
    units = [
        simple_unit("top", "right", "left"),
        simple_unit("left"),
        simple_unit("right"),
    ]
    assert names(resolve(units)) == ["right", "left", "top"]


def test_cycle_is_detected_without_invoking_factories():
    invocations = []
    units = [
        simple_unit("A", "B", invocations=invocations),
        simple_unit("B", "A", invocations=invocations),
    ]
    with pytest.raises(CycleDetectedError) as excinfo:
        resolve(units)
    assert set(excinfo.value.cycle) == {"A", "B"}
    assert invocations == []


def test_self_dependency_is_a_cycle():
    with pytest.raises(CycleDetectedError):
        resolve([simple_unit("A", "A")])


def test_unknown_dependency_names_the_missing_unit():
    with pytest.raises(UnknownDependencyError) as excinfo:
        resolve([simple_unit("router", "voter")])
    assert excinfo.value.unit == "router"
    assert excinfo.value.dependency == "voter"


def test_duplicate_names_are_rejected():
    with pytest.raises(DuplicateUnitError):
        resolve([simple_unit("A"), simple_unit("A")])
