"""Dependency ordering for unit descriptors."""

from __future__ import annotations

from typing import Dict, Iterable, List

from ..errors import CycleDetectedError, DuplicateUnitError, UnknownDependencyError
from .models import UnitDescriptor

_VISITING = 1
_VISITED = 2


def resolve(units: Iterable[UnitDescriptor]) -> List[UnitDescriptor]:
    """Return ``units`` ordered so every unit follows its dependencies.

    Depth-first: roots are taken in declaration order and dependencies in the
    order each unit lists them, so the same input always yields the same
    sequence.
    """
    declared: Dict[str, UnitDescriptor] = {}
    for unit in units:
        if unit.name in declared:
            raise DuplicateUnitError(unit.name)
        declared[unit.name] = unit

    marks: Dict[str, int] = {}
    ordered: List[UnitDescriptor] = []
    path: List[str] = []

    def visit(unit: UnitDescriptor) -> None:
        mark = marks.get(unit.name)
        if mark == _VISITED:
            return
        if mark == _VISITING:
            start = path.index(unit.name)
            raise CycleDetectedError(path[start:] + [unit.name])

        marks[unit.name] = _VISITING
        path.append(unit.name)
        for dependency in unit.depends_on:
            if dependency not in declared:
                raise UnknownDependencyError(unit.name, dependency)
            visit(declared[dependency])
        path.pop()
        marks[unit.name] = _VISITED
        ordered.append(unit)

    for unit in declared.values():
        visit(unit)
    return ordered
