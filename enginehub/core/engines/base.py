"""
引擎基础定义

包含引擎分类、定义、记录快照和状态变更的数据结构
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from enginehub.core.exceptions import InvalidEngineKeyException

ENGINE_KEY_PATTERN = re.compile(r"^[a-z0-9_-]+$")


class EngineCategory(str, Enum):
    """引擎分类（固定五类）"""

    OPERATIONS = "operations"  # 库存、处理、收货等运营
    SALES = "sales"  # 转售、拍卖、网站等销售渠道
    BUSINESS = "business"  # CRM、财务、ESG 等业务管理
    SYSTEM = "system"  # 报表、设置等系统功能
    ADMIN = "admin"  # 用户、公司、应用管理


def validate_engine_key(key: str) -> str:
    """校验引擎 key 格式，非法时抛出 InvalidEngineKeyException"""
    if not isinstance(key, str) or not ENGINE_KEY_PATTERN.match(key):
        raise InvalidEngineKeyException(str(key))
    return key


@dataclass(frozen=True)
class EngineDefinition:
    """
    引擎定义 - 纯数据描述

    用于租户开通时创建引擎记录，不含任何运行状态
    """

    key: str
    title: str
    category: EngineCategory
    description: Optional[str] = None
    icon: str = "Package"
    is_core: bool = False
    depends_on: Tuple[str, ...] = ()

    # 前端导航
    workspace_route: Optional[str] = None
    settings_route: Optional[str] = None

    sort_order: int = 100
    version: str = "1.0.0"


@dataclass(frozen=True)
class EngineRecord:
    """
    引擎记录快照

    存储层读出的某租户某引擎的当前状态，不可变；
    注册中心的所有判断都基于快照进行
    """

    tenant_id: str
    key: str
    title: str
    category: EngineCategory
    is_core: bool
    is_installed: bool
    is_enabled: bool
    depends_on: Tuple[str, ...] = ()

    description: Optional[str] = None
    icon: str = "Package"
    workspace_route: Optional[str] = None
    settings_route: Optional[str] = None
    sort_order: int = 100
    version: str = "1.0.0"

    # 乐观锁版本号，每次状态写入 +1
    revision: int = 1
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        """已安装且已启用"""
        return self.is_installed and self.is_enabled

    def with_state(self, change: EngineStateChange) -> EngineRecord:
        """返回应用状态变更后的新快照（不含 revision 变化）"""
        return replace(
            self,
            is_installed=self.is_installed if change.is_installed is None else change.is_installed,
            is_enabled=self.is_enabled if change.is_enabled is None else change.is_enabled,
        )


@dataclass(frozen=True)
class EngineStateChange:
    """
    状态变更

    None 表示该字段不变
    """

    is_installed: Optional[bool] = None
    is_enabled: Optional[bool] = None

    def is_noop_for(self, engine: EngineRecord) -> bool:
        return engine.with_state(self) == engine

    def as_values(self) -> Dict[str, bool]:
        values: Dict[str, bool] = {}
        if self.is_installed is not None:
            values["is_installed"] = self.is_installed
        if self.is_enabled is not None:
            values["is_enabled"] = self.is_enabled
        return values


INSTALL = EngineStateChange(is_installed=True, is_enabled=True)
UNINSTALL = EngineStateChange(is_installed=False, is_enabled=False)
ENABLE = EngineStateChange(is_enabled=True)
DISABLE = EngineStateChange(is_enabled=False)


@dataclass
class EngineGroups:
    """按分类分组的引擎列表，五个分类始终存在"""

    groups: Dict[EngineCategory, List[EngineRecord]] = field(
        default_factory=lambda: {category: [] for category in EngineCategory}
    )

    def __getitem__(self, category: EngineCategory) -> List[EngineRecord]:
        return self.groups[EngineCategory(category)]

    def as_dict(self) -> Dict[str, List[EngineRecord]]:
        return {category.value: engines for category, engines in self.groups.items()}
