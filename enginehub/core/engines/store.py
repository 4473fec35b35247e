"""
引擎目录存储接口

注册中心只依赖该协议，具体实现见 enginehub.services.engines.catalog_store
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from enginehub.core.engines.base import EngineDefinition, EngineRecord, EngineStateChange


class EngineCatalogStore(Protocol):
    """按 (tenant_id, key) 寻址的引擎记录存储"""

    def fetch_all(self, tenant_id: str) -> List[EngineRecord]:
        """租户全部引擎，按 sort_order、title 升序"""
        ...

    def fetch_one(self, tenant_id: str, key: str) -> Optional[EngineRecord]:
        ...

    def update(
        self,
        tenant_id: str,
        key: str,
        change: EngineStateChange,
        expected_revision: int,
    ) -> EngineRecord:
        """
        比较并交换写入

        记录不存在抛出 EngineNotFoundException；
        revision 与 expected_revision 不一致抛出 ConcurrentModificationException
        """
        ...

    def add(self, tenant_id: str, definition: EngineDefinition) -> EngineRecord:
        """开通时创建记录，初始状态 is_installed = is_enabled = is_core"""
        ...
