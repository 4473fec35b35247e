"""引擎管理 API 端点"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from enginehub.core.engines import EngineCategory, EngineRecord, EngineRegistry
from enginehub.core.engines.base import EngineGroups
from enginehub.core.exceptions import EngineNotFoundException
from enginehub.database import get_db
from enginehub.services.engines import (
    EngineAuditResult,
    OnboardingService,
    SqlAlchemyEngineCatalogStore,
    audit_engines,
    list_visible_engines,
    provision_tenant,
)

router = APIRouter(prefix="/api/tenants/{tenant_id}/engines", tags=["Admin - Engines"])


def get_engine_registry(db: Session = Depends(get_db)) -> EngineRegistry:
    """每个请求基于当前会话构建注册中心"""
    return EngineRegistry(SqlAlchemyEngineCatalogStore(db))


# ========== Request / Response Models ==========


class EngineResponse(BaseModel):
    """引擎状态响应"""

    key: str
    title: str
    description: Optional[str]
    icon: str
    category: str
    is_core: bool
    is_installed: bool
    is_enabled: bool
    depends_on: List[str]
    workspace_route: Optional[str]
    settings_route: Optional[str]
    sort_order: int
    version: str
    revision: int
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, engine: EngineRecord) -> "EngineResponse":
        return cls(
            key=engine.key,
            title=engine.title,
            description=engine.description,
            icon=engine.icon,
            category=engine.category.value,
            is_core=engine.is_core,
            is_installed=engine.is_installed,
            is_enabled=engine.is_enabled,
            depends_on=list(engine.depends_on),
            workspace_route=engine.workspace_route,
            settings_route=engine.settings_route,
            sort_order=engine.sort_order,
            version=engine.version,
            revision=engine.revision,
            updated_at=engine.updated_at,
        )


def _group_response(groups: EngineGroups) -> Dict[str, List[EngineResponse]]:
    return {
        category: [EngineResponse.from_record(e) for e in engines]
        for category, engines in groups.as_dict().items()
    }


class AuditResultResponse(BaseModel):
    key: str
    title: str
    category: str
    installed: bool
    enabled: bool
    workspace_route: Optional[str]
    route_matches_key: bool
    dependencies_met: bool
    missing_dependencies: List[str]
    visible: bool
    issues: List[str]
    recommendations: List[str]

    @classmethod
    def from_result(cls, result: EngineAuditResult) -> "AuditResultResponse":
        return cls(
            key=result.key,
            title=result.title,
            category=result.category,
            installed=result.installed,
            enabled=result.enabled,
            workspace_route=result.workspace_route,
            route_matches_key=result.route_matches_key,
            dependencies_met=result.dependencies_met,
            missing_dependencies=result.missing_dependencies,
            visible=result.visible,
            issues=result.issues,
            recommendations=result.recommendations,
        )


class SetEngineEnabledRequest(BaseModel):
    """设置引擎启用状态请求"""

    enabled: bool


class OnboardingRequest(BaseModel):
    """完成开通引导请求"""

    selected: List[str] = Field(default_factory=list)


# ========== 查询 ==========


@router.get("", response_model=List[EngineResponse])
async def list_engines(
    tenant_id: str,
    category: Optional[EngineCategory] = None,
    registry: EngineRegistry = Depends(get_engine_registry),
):
    """
    获取租户全部引擎

    **查询参数**:
    - `category`: 仅返回该分类下已安装的引擎
    """
    if category is not None:
        engines = registry.list_by_category(tenant_id, category)
    else:
        engines = registry.list_all(tenant_id)
    return [EngineResponse.from_record(e) for e in engines]


@router.get("/groups", response_model=Dict[str, List[EngineResponse]])
async def get_engine_groups(
    tenant_id: str,
    enabled_only: bool = False,
    registry: EngineRegistry = Depends(get_engine_registry),
):
    """
    按分类分组获取引擎

    五个分类始终返回，分类内按标题排序。

    **查询参数**:
    - `enabled_only`: 仅包含已启用引擎（默认包含全部已安装引擎）
    """
    if enabled_only:
        return _group_response(registry.group_enabled_by_category(tenant_id))
    return _group_response(registry.group_by_category(tenant_id))


@router.get("/visible", response_model=List[EngineResponse])
async def get_visible_engines(
    tenant_id: str, registry: EngineRegistry = Depends(get_engine_registry)
):
    """获取启动器/侧边栏可见的引擎（已启用且依赖满足）"""
    return [EngineResponse.from_record(e) for e in list_visible_engines(registry, tenant_id)]


@router.get("/audit", response_model=List[AuditResultResponse])
async def audit_tenant_engines(
    tenant_id: str, registry: EngineRegistry = Depends(get_engine_registry)
):
    """审计引擎可见性问题"""
    return [AuditResultResponse.from_result(r) for r in audit_engines(registry, tenant_id)]


@router.get("/{key}", response_model=EngineResponse)
async def get_engine(
    tenant_id: str, key: str, registry: EngineRegistry = Depends(get_engine_registry)
):
    """获取单个引擎"""
    engine = registry.get_by_key(tenant_id, key)
    if engine is None:
        raise EngineNotFoundException(tenant_id, key)
    return EngineResponse.from_record(engine)


@router.get("/{key}/missing-dependencies", response_model=List[EngineResponse])
async def get_missing_dependencies(
    tenant_id: str, key: str, registry: EngineRegistry = Depends(get_engine_registry)
):
    """获取引擎未满足的直接依赖（用于提示"是否一并启用"）"""
    return [EngineResponse.from_record(e) for e in registry.get_missing_dependencies(tenant_id, key)]


# ========== 状态变更 ==========


@router.post("/{key}/install", response_model=EngineResponse)
async def install_engine(
    tenant_id: str, key: str, registry: EngineRegistry = Depends(get_engine_registry)
):
    """
    安装并启用引擎

    依赖未满足时返回 409，`details.missing` 为缺失的依赖 key
    """
    return EngineResponse.from_record(registry.install(tenant_id, key))


@router.post("/{key}/uninstall", response_model=EngineResponse)
async def uninstall_engine(
    tenant_id: str, key: str, registry: EngineRegistry = Depends(get_engine_registry)
):
    """
    卸载引擎

    核心引擎或仍被已启用引擎依赖时返回 409
    """
    registry.uninstall(tenant_id, key)
    return await get_engine(tenant_id, key, registry)


@router.put("/{key}/enabled", response_model=EngineResponse)
async def set_engine_enabled(
    tenant_id: str,
    key: str,
    payload: SetEngineEnabledRequest,
    registry: EngineRegistry = Depends(get_engine_registry),
):
    """
    设置引擎启用状态

    **请求体**:
    - `enabled`: 是否启用
    """
    return EngineResponse.from_record(registry.toggle(tenant_id, key, payload.enabled))


@router.post("/{key}/enable-with-dependencies", response_model=EngineResponse)
async def enable_engine_with_dependencies(
    tenant_id: str, key: str, registry: EngineRegistry = Depends(get_engine_registry)
):
    """启用引擎并自动启用其缺失的直接依赖"""
    registry.enable_with_dependencies(tenant_id, key)
    return await get_engine(tenant_id, key, registry)


# ========== 开通 ==========


@router.post("/provision")
async def provision_engines(
    tenant_id: str, registry: EngineRegistry = Depends(get_engine_registry)
) -> Dict[str, Any]:
    """按默认目录创建缺失的引擎记录（可重复执行，用于修复）"""
    result = provision_tenant(registry.store, tenant_id)
    return {"tenant_id": tenant_id, "created": result.created, "existing": result.existing}


@router.post("/onboarding")
async def complete_onboarding(
    tenant_id: str,
    payload: OnboardingRequest,
    db: Session = Depends(get_db),
    registry: EngineRegistry = Depends(get_engine_registry),
) -> Dict[str, Any]:
    """
    完成开通引导

    **请求体**:
    - `selected`: 选择的引擎 key 列表，依赖会被自动补齐
    """
    result = OnboardingService.complete(registry, db, tenant_id, payload.selected)
    return {
        "tenant_id": tenant_id,
        "selected": result.selected,
        "enabled": result.enabled,
        "disabled": result.disabled,
    }
