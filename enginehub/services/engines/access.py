"""
引擎访问与可见性判断

供路由守卫、侧边栏、启动器使用。禁用不级联，因此依赖未满足的已启用引擎
在这里被视为不可访问、不可见。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from enginehub.core.engines.base import EngineRecord, validate_engine_key
from enginehub.core.engines.dependency_graph import find_missing_dependencies
from enginehub.core.engines.registry import EngineRegistry


class AccessOutcome(str, Enum):
    ALLOWED = "allowed"
    DISABLED = "disabled"  # 记录存在但未启用或依赖未满足
    NOT_FOUND = "not_found"  # 调用方应跳转首页


@dataclass
class EngineAccessDecision:
    outcome: AccessOutcome
    engine: Optional[EngineRecord] = None
    missing_dependencies: List[str] = field(default_factory=list)

    @property
    def allowed(self) -> bool:
        return self.outcome == AccessOutcome.ALLOWED


def check_engine_access(registry: EngineRegistry, tenant_id: str, key: str) -> EngineAccessDecision:
    """判断租户能否进入引擎工作区"""
    validate_engine_key(key)
    catalog = registry.list_all(tenant_id)
    engine = next((e for e in catalog if e.key == key), None)
    if engine is None:
        return EngineAccessDecision(outcome=AccessOutcome.NOT_FOUND)

    check = find_missing_dependencies(engine, catalog)
    unmet = check.missing_keys + check.dangling_keys
    if not engine.is_active or unmet:
        return EngineAccessDecision(
            outcome=AccessOutcome.DISABLED, engine=engine, missing_dependencies=unmet
        )
    return EngineAccessDecision(outcome=AccessOutcome.ALLOWED, engine=engine)


def is_visible(engine: EngineRecord, catalog: List[EngineRecord]) -> bool:
    """已安装、已启用且直接依赖全部满足"""
    return engine.is_active and find_missing_dependencies(engine, catalog).satisfied


def list_visible_engines(registry: EngineRegistry, tenant_id: str) -> List[EngineRecord]:
    """启动器与侧边栏应展示的引擎，按展示顺序"""
    catalog = registry.list_all(tenant_id)
    return [engine for engine in catalog if is_visible(engine, catalog)]
