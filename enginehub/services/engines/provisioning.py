"""
租户引擎开通

为租户创建缺失的引擎记录，已存在的记录保持不变；
对引擎数为 0 的租户重复执行即可完成修复。
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from enginehub.catalog import DEFAULT_ENGINE_CATALOG
from enginehub.core.engines.base import EngineDefinition, EngineRecord, validate_engine_key
from enginehub.core.engines.dependency_graph import find_cycle, find_dangling_references
from enginehub.core.engines.store import EngineCatalogStore
from enginehub.core.exceptions import DependencyCycleException
from enginehub.core.logger import logger


@dataclass
class ProvisionResult:
    """开通结果"""

    tenant_id: str
    created: List[str] = field(default_factory=list)
    existing: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.created)


def validate_catalog(catalog: Sequence[EngineDefinition]) -> None:
    """
    校验目录定义

    - key 格式合法且不重复
    - 依赖均指向目录内的引擎
    - 依赖图无环
    """
    seen: set[str] = set()
    for definition in catalog:
        validate_engine_key(definition.key)
        if definition.key in seen:
            raise ValueError(f"Duplicate engine key in catalog: {definition.key}")
        seen.add(definition.key)

    records = [_as_record("__catalog__", definition) for definition in catalog]

    dangling = find_dangling_references(records)
    if dangling:
        detail = "; ".join(f"{key} -> {', '.join(deps)}" for key, deps in dangling.items())
        raise ValueError(f"Catalog references unknown engines: {detail}")

    cycle = find_cycle(records)
    if cycle:
        raise DependencyCycleException(cycle)


def provision_tenant(
    store: EngineCatalogStore,
    tenant_id: str,
    catalog: Optional[Sequence[EngineDefinition]] = None,
) -> ProvisionResult:
    """
    按目录为租户创建引擎记录

    新记录初始状态: is_installed = is_enabled = is_core
    """
    definitions = list(DEFAULT_ENGINE_CATALOG if catalog is None else catalog)
    validate_catalog(definitions)

    existing_keys = {engine.key for engine in store.fetch_all(tenant_id)}
    result = ProvisionResult(tenant_id=tenant_id)

    for definition in definitions:
        if definition.key in existing_keys:
            result.existing.append(definition.key)
            continue
        store.add(tenant_id, definition)
        result.created.append(definition.key)

    if result.created:
        logger.info(
            f"Provisioned {len(result.created)} engines for tenant {tenant_id}: "
            f"{', '.join(result.created)}"
        )
    else:
        logger.debug(f"Tenant {tenant_id} already provisioned, nothing to create")
    return result


def _as_record(tenant_id: str, definition: EngineDefinition) -> EngineRecord:
    return EngineRecord(
        tenant_id=tenant_id,
        key=definition.key,
        title=definition.title,
        category=definition.category,
        is_core=definition.is_core,
        is_installed=definition.is_core,
        is_enabled=definition.is_core,
        depends_on=tuple(definition.depends_on),
    )
