"""
开通引导测试
"""

from __future__ import annotations

import pytest
from sqlalchemy.orm import Session

from enginehub.core.engines import EngineRegistry
from enginehub.core.exceptions import (
    CoreEngineImmutableException,
    DependentsExistException,
    EngineNotFoundException,
)
from enginehub.services.engines import (
    OnboardingSelection,
    OnboardingService,
    SqlAlchemyEngineCatalogStore,
    provision_tenant,
)

TENANT = "tenant-1"


@pytest.fixture
def provisioned(store: SqlAlchemyEngineCatalogStore) -> None:
    provision_tenant(store, TENANT)


class TestOnboardingSelection:
    """引导勾选状态"""

    def test_starts_with_core_engines(self, registry: EngineRegistry, provisioned: None) -> None:
        selection = OnboardingSelection(TENANT, registry.list_all(TENANT))
        assert set(selection.keys) == {
            "inventory",
            "processing",
            "receiving",
            "settings",
            "users",
            "apps",
        }

    def test_select_adds_dependencies(self, registry: EngineRegistry, provisioned: None) -> None:
        selection = OnboardingSelection(TENANT, registry.list_all(TENANT))

        added = selection.select("auction")

        assert added == ["reseller", "auction"]
        assert selection.is_selected("reseller")

    def test_deselect_required_engine_rejected(
        self, registry: EngineRegistry, provisioned: None
    ) -> None:
        selection = OnboardingSelection(TENANT, registry.list_all(TENANT))
        selection.select("website")

        with pytest.raises(DependentsExistException) as exc_info:
            selection.deselect("reseller")
        assert exc_info.value.dependent_keys == ["website"]

        selection.deselect("website")
        selection.deselect("reseller")
        assert not selection.is_selected("reseller")

    def test_deselect_core_rejected(self, registry: EngineRegistry, provisioned: None) -> None:
        selection = OnboardingSelection(TENANT, registry.list_all(TENANT))
        with pytest.raises(CoreEngineImmutableException):
            selection.deselect("inventory")

    def test_unknown_engine(self, registry: EngineRegistry, provisioned: None) -> None:
        selection = OnboardingSelection(TENANT, registry.list_all(TENANT))
        with pytest.raises(EngineNotFoundException):
            selection.select("nope")


class TestCompleteOnboarding:
    """完成引导"""

    def test_enables_selection_in_dependency_order(
        self, registry: EngineRegistry, db: Session, provisioned: None
    ) -> None:
        # 依赖方排在前面也能成功，因为按依赖顺序启用
        result = OnboardingService.complete(registry, db, TENANT, ["auction", "crm"])

        assert set(result.enabled) == {"auction", "reseller", "crm"}
        assert result.enabled.index("reseller") < result.enabled.index("auction")

        enabled = {e.key for e in registry.list_enabled(TENANT)}
        assert {"auction", "reseller", "crm", "inventory"} <= enabled
        assert "website" not in enabled

        status = OnboardingService.get_status(db, TENANT)
        assert status is not None and status.is_completed
        assert "auction" in status.modules_selected
        assert status.completed_at is not None

    def test_disables_unselected_optional_engines(
        self, registry: EngineRegistry, db: Session, provisioned: None
    ) -> None:
        registry.enable_with_dependencies(TENANT, "website")
        registry.install(TENANT, "crm")

        result = OnboardingService.complete(registry, db, TENANT, ["crm"])

        assert result.disabled.index("website") < result.disabled.index("reseller")
        enabled = {e.key for e in registry.list_enabled(TENANT)}
        assert "website" not in enabled and "reseller" not in enabled
        assert "crm" in enabled
        assert "inventory" in enabled

    def test_completion_is_upserted(
        self, registry: EngineRegistry, db: Session, provisioned: None
    ) -> None:
        OnboardingService.complete(registry, db, TENANT, ["crm"])
        OnboardingService.complete(registry, db, TENANT, ["accounting"])

        status = OnboardingService.get_status(db, TENANT)
        assert status is not None
        assert "accounting" in status.modules_selected
        assert "crm" not in status.modules_selected

    def test_strict_disable_still_completes(
        self, store: SqlAlchemyEngineCatalogStore, db: Session, provisioned: None
    ) -> None:
        """按反向依赖顺序禁用，严格模式下也不会被依赖方阻塞"""
        strict = EngineRegistry(store, strict_disable=True)
        strict.enable_with_dependencies(TENANT, "auction")

        result = OnboardingService.complete(strict, db, TENANT, [])

        assert {"auction", "reseller"} <= set(result.disabled)


def test_core_engines_untouched_by_onboarding(
    registry: EngineRegistry, db: Session, provisioned: None
) -> None:
    OnboardingService.complete(registry, db, TENANT, [])
    for engine in registry.list_all(TENANT):
        if engine.is_core:
            assert engine.is_installed and engine.is_enabled
