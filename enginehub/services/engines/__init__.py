"""引擎注册中心的存储实现与上层服务"""

from enginehub.services.engines.access import (
    AccessOutcome,
    EngineAccessDecision,
    check_engine_access,
    list_visible_engines,
)
from enginehub.services.engines.audit import EngineAuditResult, audit_engines
from enginehub.services.engines.catalog_store import SqlAlchemyEngineCatalogStore
from enginehub.services.engines.onboarding import (
    OnboardingResult,
    OnboardingSelection,
    OnboardingService,
)
from enginehub.services.engines.provisioning import ProvisionResult, provision_tenant

__all__ = [
    "AccessOutcome",
    "EngineAccessDecision",
    "EngineAuditResult",
    "OnboardingResult",
    "OnboardingSelection",
    "OnboardingService",
    "ProvisionResult",
    "SqlAlchemyEngineCatalogStore",
    "audit_engines",
    "check_engine_access",
    "list_visible_engines",
    "provision_tenant",
]
