"""派生视图：排序、过滤与按分类分组"""

from __future__ import annotations

from typing import Iterable, List

from enginehub.core.engines.base import EngineCategory, EngineGroups, EngineRecord


def sort_for_display(engines: Iterable[EngineRecord]) -> List[EngineRecord]:
    """按 sort_order 升序，相同时按 title 升序"""
    return sorted(engines, key=lambda e: (e.sort_order, e.title.casefold(), e.key))


def sort_by_title(engines: Iterable[EngineRecord]) -> List[EngineRecord]:
    return sorted(engines, key=lambda e: (e.title.casefold(), e.key))


def filter_enabled(engines: Iterable[EngineRecord]) -> List[EngineRecord]:
    return [e for e in engines if e.is_installed and e.is_enabled]


def filter_installed(engines: Iterable[EngineRecord]) -> List[EngineRecord]:
    return [e for e in engines if e.is_installed]


def group_by_category(engines: Iterable[EngineRecord]) -> EngineGroups:
    """
    将给定引擎列表划分到五个固定分类

    每个分类内部按 title 升序；没有引擎的分类保留为空列表
    """
    groups = EngineGroups()
    for engine in engines:
        groups[EngineCategory(engine.category)].append(engine)
    for category in EngineCategory:
        groups.groups[category] = sort_by_title(groups.groups[category])
    return groups
