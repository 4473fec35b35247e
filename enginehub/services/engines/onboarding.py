"""
租户开通引导

引导流程中用户勾选要使用的引擎，完成时批量启用所选引擎、禁用未选的非核心引擎，
并记录引导完成状态。
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from sqlalchemy.orm import Session

from enginehub.core.engines.base import EngineRecord
from enginehub.core.engines.dependency_graph import (
    index_by_key,
    resolve_dependency_closure,
    topological_order,
)
from enginehub.core.engines.registry import EngineRegistry
from enginehub.core.exceptions import (
    CoreEngineImmutableException,
    DependentsExistException,
    EngineNotFoundException,
)
from enginehub.core.logger import logger
from enginehub.models.database import OnboardingStatus


class OnboardingSelection:
    """
    引导阶段的引擎勾选状态（仅内存，不写库）

    初始包含全部核心引擎；勾选时自动带上传递依赖，
    取消勾选时拒绝核心引擎和仍被其他已勾选引擎依赖的引擎
    """

    def __init__(self, tenant_id: str, catalog: Sequence[EngineRecord]) -> None:
        self.tenant_id = tenant_id
        self._catalog = list(catalog)
        self._by_key = index_by_key(self._catalog)
        self._selected: set[str] = {e.key for e in self._catalog if e.is_core}

    @property
    def keys(self) -> List[str]:
        """已勾选的 key，按目录顺序"""
        return [e.key for e in self._catalog if e.key in self._selected]

    def is_selected(self, key: str) -> bool:
        return key in self._selected

    def select(self, key: str) -> List[str]:
        """勾选引擎，返回本次新增的 key（含依赖）"""
        self._require(key)
        added = [
            k
            for k in resolve_dependency_closure(key, self._catalog) + [key]
            if k in self._by_key and k not in self._selected
        ]
        self._selected.update(added)
        return added

    def deselect(self, key: str) -> None:
        engine = self._require(key)
        if engine.is_core:
            raise CoreEngineImmutableException(engine, "取消选择")

        dependents = [
            e for e in self._catalog if e.key in self._selected and key in e.depends_on
        ]
        if dependents:
            raise DependentsExistException(engine, dependents)
        self._selected.discard(key)

    def _require(self, key: str) -> EngineRecord:
        engine = self._by_key.get(key)
        if engine is None:
            raise EngineNotFoundException(self.tenant_id, key)
        return engine


@dataclass
class OnboardingResult:
    tenant_id: str
    selected: List[str] = field(default_factory=list)
    enabled: List[str] = field(default_factory=list)
    disabled: List[str] = field(default_factory=list)


class OnboardingService:
    """开通引导服务"""

    @staticmethod
    def get_status(db: Session, tenant_id: str) -> Optional[OnboardingStatus]:
        return db.query(OnboardingStatus).filter(OnboardingStatus.company_id == tenant_id).first()

    @staticmethod
    def mark_completed(db: Session, tenant_id: str, selected: List[str]) -> OnboardingStatus:
        """记录引导完成（按租户 upsert）"""
        status = OnboardingService.get_status(db, tenant_id)
        if status is None:
            status = OnboardingStatus(company_id=tenant_id)
            db.add(status)

        status.is_completed = True
        status.modules_selected = list(selected)
        status.completed_at = datetime.now(timezone.utc)

        db.commit()
        db.refresh(status)
        return status

    @staticmethod
    def complete(
        registry: EngineRegistry,
        db: Session,
        tenant_id: str,
        selected: Iterable[str],
    ) -> OnboardingResult:
        """
        完成引导

        1. 按依赖顺序安装并启用所选引擎（含自动补齐的依赖）
        2. 按反向依赖顺序禁用未选中的非核心引擎
        3. 写入引导完成状态

        非事务操作：中途失败时已执行的启用/禁用保持生效
        """
        catalog = registry.list_all(tenant_id)
        selection = OnboardingSelection(tenant_id, catalog)
        for key in selected:
            selection.select(key)

        result = OnboardingResult(tenant_id=tenant_id, selected=selection.keys)
        by_key = index_by_key(catalog)

        for key in topological_order(selection.keys, catalog):
            if not by_key[key].is_active:
                result.enabled.append(key)
            registry.install(tenant_id, key)

        unselected = [
            e.key for e in catalog if not e.is_core and not selection.is_selected(e.key)
        ]
        for key in reversed(topological_order(unselected, catalog)):
            if by_key[key].is_enabled:
                registry.toggle(tenant_id, key, False)
                result.disabled.append(key)

        OnboardingService.mark_completed(db, tenant_id, result.selected)
        logger.info(
            f"Onboarding completed for tenant {tenant_id}: "
            f"enabled={result.enabled}, disabled={result.disabled}"
        )
        return result
