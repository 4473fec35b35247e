"""
依赖图查询

基于调用方已获取的租户引擎列表做纯计算，不访问存储、不修改状态。
depends_on 中指向不存在记录的 key（被删除或改名）视为未满足，不会报错。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from enginehub.core.engines.base import EngineRecord
from enginehub.core.exceptions import DependencyCycleException


@dataclass
class DependencyCheck:
    """直接依赖检查结果"""

    missing: List[EngineRecord] = field(default_factory=list)
    dangling_keys: List[str] = field(default_factory=list)

    @property
    def satisfied(self) -> bool:
        return not self.missing and not self.dangling_keys

    @property
    def missing_keys(self) -> List[str]:
        return [engine.key for engine in self.missing]


def index_by_key(catalog: Iterable[EngineRecord]) -> Dict[str, EngineRecord]:
    return {engine.key: engine for engine in catalog}


def is_active(engine: Optional[EngineRecord]) -> bool:
    """依赖满足条件：记录存在且已安装、已启用"""
    return engine is not None and engine.is_installed and engine.is_enabled


def find_missing_dependencies(
    engine: EngineRecord, catalog: Sequence[EngineRecord]
) -> DependencyCheck:
    """
    找出 engine 的直接依赖中未满足的部分

    missing 按 catalog 顺序返回（与展示顺序一致），dangling_keys 按 depends_on 顺序返回
    """
    if not engine.depends_on:
        return DependencyCheck()

    by_key = index_by_key(catalog)
    unmet = {key for key in engine.depends_on if not is_active(by_key.get(key))}
    return DependencyCheck(
        missing=[dep for dep in catalog if dep.key in unmet],
        dangling_keys=[key for key in engine.depends_on if key not in by_key],
    )


def find_enabled_dependents(key: str, catalog: Sequence[EngineRecord]) -> List[EngineRecord]:
    """找出所有已启用且直接依赖 key 的引擎"""
    return [engine for engine in catalog if engine.is_enabled and key in engine.depends_on]


def resolve_dependency_closure(key: str, catalog: Sequence[EngineRecord]) -> List[str]:
    """
    计算 key 的全部传递依赖（不含自身），依赖在前

    不存在的 key 原样保留在结果中，由调用方决定如何处理；
    遇到环时抛出 DependencyCycleException
    """
    by_key = index_by_key(catalog)
    ordered: List[str] = []
    _visit(key, by_key, ordered, done=set(), path=[])
    return [k for k in ordered if k != key]


def topological_order(keys: Iterable[str], catalog: Sequence[EngineRecord]) -> List[str]:
    """
    对一组 key 排序，使每个引擎的依赖排在它之前

    只输出传入的 key；同层次保持传入顺序
    """
    wanted = list(dict.fromkeys(keys))
    by_key = index_by_key(catalog)
    ordered: List[str] = []
    done: set[str] = set()
    for key in wanted:
        _visit(key, by_key, ordered, done=done, path=[])
    selected = set(wanted)
    return [k for k in ordered if k in selected]


def find_cycle(catalog: Sequence[EngineRecord]) -> Optional[List[str]]:
    """返回目录中的一个依赖环（首尾相同），无环返回 None"""
    by_key = index_by_key(catalog)
    ordered: List[str] = []
    done: set[str] = set()
    for engine in catalog:
        try:
            _visit(engine.key, by_key, ordered, done=done, path=[])
        except DependencyCycleException as e:
            return e.cycle
    return None


def find_dangling_references(catalog: Sequence[EngineRecord]) -> Dict[str, List[str]]:
    """返回 {引擎 key: 指向不存在记录的依赖 key 列表}，仅包含有悬空引用的引擎"""
    by_key = index_by_key(catalog)
    result: Dict[str, List[str]] = {}
    for engine in catalog:
        dangling = [dep for dep in engine.depends_on if dep not in by_key]
        if dangling:
            result[engine.key] = dangling
    return result


def _visit(
    key: str,
    by_key: Dict[str, EngineRecord],
    ordered: List[str],
    done: set[str],
    path: List[str],
) -> None:
    # 深度优先后序遍历，path 记录当前递归链用于环检测
    if key in done:
        return
    if key in path:
        raise DependencyCycleException(path[path.index(key):] + [key])

    engine = by_key.get(key)
    if engine is not None:
        path.append(key)
        for dep in engine.depends_on:
            _visit(dep, by_key, ordered, done, path)
        path.pop()

    done.add(key)
    ordered.append(key)
