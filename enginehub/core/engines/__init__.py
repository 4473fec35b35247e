"""
引擎注册中心核心

提供按租户管理的可选功能引擎，支持：
- installed/enabled 双层状态控制
- 直接依赖检查与反向依赖保护
- 核心引擎不可变
- 按分类分组等派生视图
"""

from enginehub.core.engines.base import (
    EngineCategory,
    EngineDefinition,
    EngineGroups,
    EngineRecord,
    EngineStateChange,
    validate_engine_key,
)
from enginehub.core.engines.dependency_graph import DependencyCheck
from enginehub.core.engines.registry import EngineRegistry
from enginehub.core.engines.store import EngineCatalogStore

__all__ = [
    "DependencyCheck",
    "EngineCatalogStore",
    "EngineCategory",
    "EngineDefinition",
    "EngineGroups",
    "EngineRecord",
    "EngineRegistry",
    "EngineStateChange",
    "validate_engine_key",
]
