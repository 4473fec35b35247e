"""
引擎可见性审计

逐个引擎检查路由配置、依赖与启用状态，说明它为什么没有出现在启动器/侧边栏
"""

from dataclasses import dataclass, field
from typing import List, Optional

from enginehub.core.engines.base import EngineRecord
from enginehub.core.engines.dependency_graph import find_missing_dependencies
from enginehub.core.engines.registry import EngineRegistry
from enginehub.core.logger import logger


@dataclass
class EngineAuditResult:
    key: str
    title: str
    category: str
    sort_order: int
    installed: bool
    enabled: bool
    workspace_route: Optional[str]
    has_workspace_route: bool
    route_matches_key: bool
    dependencies_met: bool
    missing_dependencies: List[str] = field(default_factory=list)
    visible: bool = False
    issues: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    @property
    def healthy(self) -> bool:
        return not self.issues


def audit_engine(engine: EngineRecord, catalog: List[EngineRecord]) -> EngineAuditResult:
    issues: List[str] = []
    recommendations: List[str] = []

    expected_route = f"/{engine.key}"
    route_matches_key = engine.workspace_route == expected_route
    if not engine.workspace_route:
        issues.append("No workspace route defined")
        recommendations.append("Set workspace_route on the engine record")
    elif not route_matches_key:
        issues.append(f"Route mismatch: expected {expected_route}, got {engine.workspace_route}")
        recommendations.append(f"Update workspace_route to {expected_route}")

    check = find_missing_dependencies(engine, catalog)
    if not check.satisfied:
        names = [dep.title for dep in check.missing] + check.dangling_keys
        issues.append(f"Missing dependencies: {', '.join(names)}")
        recommendations.append("Enable required dependencies first")

    if not engine.is_installed:
        issues.append("Module not installed")
        recommendations.append("Install module from Apps page")
    elif not engine.is_enabled:
        issues.append("Module installed but disabled")
        recommendations.append("Enable module from Apps page")

    return EngineAuditResult(
        key=engine.key,
        title=engine.title,
        category=engine.category.value,
        sort_order=engine.sort_order,
        installed=engine.is_installed,
        enabled=engine.is_enabled,
        workspace_route=engine.workspace_route,
        has_workspace_route=bool(engine.workspace_route),
        route_matches_key=route_matches_key,
        dependencies_met=check.satisfied,
        missing_dependencies=check.missing_keys + check.dangling_keys,
        visible=engine.is_active and check.satisfied,
        issues=issues,
        recommendations=recommendations,
    )


def audit_engines(registry: EngineRegistry, tenant_id: str) -> List[EngineAuditResult]:
    """审计租户全部引擎"""
    catalog = registry.list_all(tenant_id)
    results = [audit_engine(engine, catalog) for engine in catalog]

    unhealthy = [r.key for r in results if r.installed and r.enabled and not r.visible]
    if unhealthy:
        logger.warning(
            f"Tenant {tenant_id} has enabled engines hidden by unmet dependencies: "
            f"{', '.join(unhealthy)}"
        )
    return results
