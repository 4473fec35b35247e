"""
依赖图查询测试

纯函数，直接构造 EngineRecord，不经过存储
"""

from __future__ import annotations

from typing import Sequence

import pytest

from enginehub.core.engines.base import EngineCategory, EngineRecord
from enginehub.core.engines.dependency_graph import (
    find_cycle,
    find_dangling_references,
    find_enabled_dependents,
    find_missing_dependencies,
    resolve_dependency_closure,
    topological_order,
)
from enginehub.core.exceptions import DependencyCycleException


def _record(
    key: str,
    *,
    installed: bool = True,
    enabled: bool = True,
    depends_on: Sequence[str] = (),
    core: bool = False,
) -> EngineRecord:
    return EngineRecord(
        tenant_id="t",
        key=key,
        title=key.title(),
        category=EngineCategory.OPERATIONS,
        is_core=core,
        is_installed=installed,
        is_enabled=enabled,
        depends_on=tuple(depends_on),
    )


class TestFindMissingDependencies:
    def test_no_dependencies_is_satisfied(self) -> None:
        engine = _record("crm")
        check = find_missing_dependencies(engine, [engine])
        assert check.satisfied
        assert check.missing == []

    def test_reports_exactly_the_unmet_dependencies(self) -> None:
        catalog = [
            _record("reseller", enabled=False),
            _record("crm"),
            _record("lots", installed=False, enabled=False),
            _record("auction", installed=False, enabled=False, depends_on=["crm", "reseller", "lots"]),
        ]
        check = find_missing_dependencies(catalog[3], catalog)

        assert check.missing_keys == ["reseller", "lots"]
        assert check.dangling_keys == []
        assert not check.satisfied

    def test_dangling_key_is_unmet_without_crashing(self) -> None:
        """依赖指向已删除的引擎时视为未满足"""
        engine = _record("auction", depends_on=["reseller", "ghost"])
        catalog = [_record("reseller"), engine]

        check = find_missing_dependencies(engine, catalog)

        assert check.missing == []
        assert check.dangling_keys == ["ghost"]
        assert not check.satisfied


def test_find_enabled_dependents_ignores_disabled_ones() -> None:
    catalog = [
        _record("reseller"),
        _record("auction", depends_on=["reseller"]),
        _record("website", enabled=False, depends_on=["reseller"]),
        _record("crm"),
    ]
    assert [e.key for e in find_enabled_dependents("reseller", catalog)] == ["auction"]


class TestDependencyTraversal:
    def test_closure_is_transitive_and_dependency_first(self) -> None:
        catalog = [
            _record("a", depends_on=["b"]),
            _record("b", depends_on=["c"]),
            _record("c"),
        ]
        assert resolve_dependency_closure("a", catalog) == ["c", "b"]

    def test_closure_detects_cycle(self) -> None:
        catalog = [
            _record("a", depends_on=["b"]),
            _record("b", depends_on=["a"]),
        ]
        with pytest.raises(DependencyCycleException) as exc_info:
            resolve_dependency_closure("a", catalog)
        assert exc_info.value.cycle == ["a", "b", "a"]

    def test_topological_order_puts_prerequisites_first(self) -> None:
        catalog = [
            _record("auction", depends_on=["reseller"]),
            _record("website", depends_on=["reseller"]),
            _record("reseller"),
            _record("crm"),
        ]
        order = topological_order(["auction", "crm", "website", "reseller"], catalog)
        assert order.index("reseller") < order.index("auction")
        assert order.index("reseller") < order.index("website")
        assert sorted(order) == ["auction", "crm", "reseller", "website"]

    def test_topological_order_only_returns_requested_keys(self) -> None:
        catalog = [_record("auction", depends_on=["reseller"]), _record("reseller")]
        assert topological_order(["auction"], catalog) == ["auction"]

    def test_find_cycle(self) -> None:
        acyclic = [_record("a", depends_on=["b"]), _record("b")]
        assert find_cycle(acyclic) is None

        cyclic = [
            _record("x", depends_on=["y"]),
            _record("y", depends_on=["z"]),
            _record("z", depends_on=["x"]),
        ]
        assert find_cycle(cyclic) == ["x", "y", "z", "x"]

    def test_find_dangling_references(self) -> None:
        catalog = [_record("a", depends_on=["b", "missing"]), _record("b")]
        assert find_dangling_references(catalog) == {"a": ["missing"]}
