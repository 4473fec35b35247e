"""
引擎目录

所有标准引擎在此汇总
"""

from typing import List

from enginehub.catalog.definitions import (
    ADMIN_ENGINES,
    BUSINESS_ENGINES,
    OPERATIONS_ENGINES,
    SALES_ENGINES,
    SYSTEM_ENGINES,
)
from enginehub.core.engines.base import EngineDefinition

# 默认开通目录
DEFAULT_ENGINE_CATALOG: List[EngineDefinition] = [
    *OPERATIONS_ENGINES,
    *SALES_ENGINES,
    *BUSINESS_ENGINES,
    *SYSTEM_ENGINES,
    *ADMIN_ENGINES,
]

__all__ = ["DEFAULT_ENGINE_CATALOG"]
