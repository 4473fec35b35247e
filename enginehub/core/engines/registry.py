"""
引擎注册中心

负责引擎的安装、卸载、启用、禁用以及可见性查询。

不变量（每次成功写入后成立）：
1. 核心引擎始终已安装且已启用
2. 已启用 => 已安装
3. 已启用 => depends_on 中的引擎均已安装且已启用（禁用不级联，见 toggle）
4. 仍被已启用引擎依赖时不能卸载
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from enginehub.config import config
from enginehub.core.engines.base import (
    DISABLE,
    ENABLE,
    INSTALL,
    UNINSTALL,
    EngineCategory,
    EngineGroups,
    EngineRecord,
    EngineStateChange,
    validate_engine_key,
)
from enginehub.core.engines.dependency_graph import (
    DependencyCheck,
    find_enabled_dependents,
    find_missing_dependencies,
    index_by_key,
)
from enginehub.core.engines.store import EngineCatalogStore
from enginehub.core.engines.views import (
    filter_enabled,
    filter_installed,
    group_by_category,
    sort_for_display,
)
from enginehub.core.exceptions import (
    ConcurrentModificationException,
    CoreEngineImmutableException,
    DependentsExistException,
    EngineNotFoundException,
    EngineNotInstalledException,
    MissingDependenciesException,
)
from enginehub.core.logger import logger


class EngineRegistry:
    """
    引擎注册中心

    每个操作显式接收 tenant_id；先读取一次租户目录，校验后最多写入一次。
    写入通过存储层的 revision 比较并交换，避免覆盖并发修改。
    """

    def __init__(
        self,
        store: EngineCatalogStore,
        strict_disable: Optional[bool] = None,
        conflict_retries: Optional[int] = None,
    ) -> None:
        self.store = store
        self.strict_disable = (
            config.engine_strict_disable if strict_disable is None else strict_disable
        )
        self.conflict_retries = (
            config.engine_conflict_retries if conflict_retries is None else conflict_retries
        )

    # ========== 状态变更 ==========

    def install(self, tenant_id: str, key: str) -> EngineRecord:
        """
        安装并启用引擎

        所有直接依赖必须已安装且已启用，否则抛出 MissingDependenciesException，不做任何写入。
        重复安装是幂等的。
        """
        engine, catalog = self._load(tenant_id, key)
        self._ensure_dependencies(engine, catalog)

        result = self._apply(engine, INSTALL)
        logger.info(f"Engine [{key}] installed for tenant {tenant_id}")
        return result

    def uninstall(self, tenant_id: str, key: str) -> None:
        """
        卸载引擎（同时禁用）

        核心引擎抛出 CoreEngineImmutableException；
        存在已启用的依赖方时抛出 DependentsExistException
        """
        engine, catalog = self._load(tenant_id, key)

        if engine.is_core:
            logger.warning(f"Engine [{key}] uninstall rejected: core engine")
            raise CoreEngineImmutableException(engine, "卸载")

        self._ensure_no_dependents(engine, catalog)

        self._apply(engine, UNINSTALL)
        logger.info(f"Engine [{key}] uninstalled for tenant {tenant_id}")

    def toggle(self, tenant_id: str, key: str, enabled: bool) -> EngineRecord:
        """
        启用或禁用已安装的引擎

        禁用：核心引擎抛出 CoreEngineImmutableException。默认不级联到依赖方，
        依赖方可能因此处于依赖未满足状态，由可见性层过滤；strict_disable 开启时
        与卸载一致，存在已启用依赖方则拒绝。

        启用：与安装相同的依赖检查；引擎必须已安装，不会自动安装。
        """
        engine, catalog = self._load(tenant_id, key)

        if not enabled:
            if engine.is_core:
                logger.warning(f"Engine [{key}] disable rejected: core engine")
                raise CoreEngineImmutableException(engine, "禁用")
            if self.strict_disable:
                self._ensure_no_dependents(engine, catalog)
            result = self._apply(engine, DISABLE)
            dependents = find_enabled_dependents(key, catalog)
            if dependents and not self.strict_disable:
                logger.warning(
                    f"Engine [{key}] disabled while required by: "
                    f"{', '.join(dep.key for dep in dependents)}"
                )
            logger.info(f"Engine [{key}] disabled for tenant {tenant_id}")
            return result

        self._ensure_dependencies(engine, catalog)
        if not engine.is_installed:
            logger.warning(f"Engine [{key}] enable rejected: not installed")
            raise EngineNotInstalledException(engine)

        result = self._apply(engine, ENABLE)
        logger.info(f"Engine [{key}] enabled for tenant {tenant_id}")
        return result

    def enable_with_dependencies(self, tenant_id: str, key: str) -> None:
        """
        启用引擎及其缺失的直接依赖

        只解析一层依赖：依赖自身的依赖不会被自动启用，此时该依赖的启用会失败。
        非事务操作，中途失败时已启用的依赖保持启用状态。
        遇到并发冲突时按 conflict_retries 整体重试。
        """
        attempts = self.conflict_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                self._enable_with_dependencies_once(tenant_id, key)
                return
            except ConcurrentModificationException:
                if attempt >= attempts:
                    raise
                logger.warning(
                    f"Engine [{key}] enable_with_dependencies conflict, "
                    f"retrying ({attempt}/{self.conflict_retries})"
                )

    def _enable_with_dependencies_once(self, tenant_id: str, key: str) -> None:
        engine, catalog = self._load(tenant_id, key)
        check = find_missing_dependencies(engine, catalog)

        for dep in check.missing:
            self.install(tenant_id, dep.key)
        if check.missing:
            logger.info(
                f"Engine [{key}] dependencies enabled: "
                f"{', '.join(dep.key for dep in check.missing)}"
            )

        self.install(tenant_id, key)

    # ========== 依赖查询 ==========

    def get_missing_dependencies(self, tenant_id: str, key: str) -> List[EngineRecord]:
        """返回 key 的直接依赖中未安装或未启用的引擎；引擎不存在时返回空列表"""
        return self.check_dependencies(tenant_id, key).missing

    def check_dependencies(self, tenant_id: str, key: str) -> DependencyCheck:
        """与 get_missing_dependencies 相同，另外给出悬空的依赖 key"""
        validate_engine_key(key)
        catalog = self.store.fetch_all(tenant_id)
        engine = index_by_key(catalog).get(key)
        if engine is None:
            return DependencyCheck()
        return find_missing_dependencies(engine, catalog)

    # ========== 查询视图 ==========

    def list_all(self, tenant_id: str) -> List[EngineRecord]:
        return sort_for_display(self.store.fetch_all(tenant_id))

    def list_enabled(self, tenant_id: str) -> List[EngineRecord]:
        """已安装且已启用"""
        return filter_enabled(self.list_all(tenant_id))

    def list_installed(self, tenant_id: str) -> List[EngineRecord]:
        return filter_installed(self.list_all(tenant_id))

    def list_by_category(self, tenant_id: str, category: EngineCategory) -> List[EngineRecord]:
        """指定分类下已安装的引擎"""
        category = EngineCategory(category)
        return [e for e in self.list_installed(tenant_id) if e.category == category]

    def get_by_key(self, tenant_id: str, key: str) -> Optional[EngineRecord]:
        validate_engine_key(key)
        return self.store.fetch_one(tenant_id, key)

    def group_by_category(self, tenant_id: str) -> EngineGroups:
        """已安装引擎按分类分组"""
        return group_by_category(self.list_installed(tenant_id))

    def group_enabled_by_category(self, tenant_id: str) -> EngineGroups:
        """已启用引擎按分类分组"""
        return group_by_category(self.list_enabled(tenant_id))

    # ========== 内部方法 ==========

    def _load(self, tenant_id: str, key: str) -> Tuple[EngineRecord, List[EngineRecord]]:
        validate_engine_key(key)
        catalog = self.store.fetch_all(tenant_id)
        engine = index_by_key(catalog).get(key)
        if engine is None:
            raise EngineNotFoundException(tenant_id, key)
        return engine, catalog

    def _ensure_dependencies(self, engine: EngineRecord, catalog: List[EngineRecord]) -> None:
        check = find_missing_dependencies(engine, catalog)
        if not check.satisfied:
            logger.warning(
                f"Engine [{engine.key}] blocked by missing dependencies: "
                f"{', '.join(check.missing_keys + check.dangling_keys)}"
            )
            raise MissingDependenciesException(engine, check.missing, check.dangling_keys)

    def _ensure_no_dependents(self, engine: EngineRecord, catalog: List[EngineRecord]) -> None:
        dependents = [
            dep for dep in find_enabled_dependents(engine.key, catalog) if dep.key != engine.key
        ]
        if dependents:
            logger.warning(
                f"Engine [{engine.key}] blocked by dependents: "
                f"{', '.join(dep.key for dep in dependents)}"
            )
            raise DependentsExistException(engine, dependents)

    def _apply(self, engine: EngineRecord, change: EngineStateChange) -> EngineRecord:
        if change.is_noop_for(engine):
            logger.debug(f"Engine [{engine.key}] already in requested state, skipping write")
            return engine
        return self.store.update(engine.tenant_id, engine.key, change, engine.revision)
