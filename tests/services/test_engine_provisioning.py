from __future__ import annotations

import pytest

from enginehub.catalog import DEFAULT_ENGINE_CATALOG
from enginehub.core.engines import EngineRegistry
from enginehub.core.engines.base import EngineCategory, EngineDefinition
from enginehub.core.exceptions import DependencyCycleException, InvalidEngineKeyException
from enginehub.services.engines import SqlAlchemyEngineCatalogStore, provision_tenant
from enginehub.services.engines.provisioning import validate_catalog

TENANT = "tenant-1"


def test_default_catalog_is_valid() -> None:
    validate_catalog(DEFAULT_ENGINE_CATALOG)
    categories = {d.category for d in DEFAULT_ENGINE_CATALOG}
    assert categories == set(EngineCategory)


def test_provision_creates_all_engines_in_initial_state(
    store: SqlAlchemyEngineCatalogStore, registry: EngineRegistry
) -> None:
    result = provision_tenant(store, TENANT)

    assert result.changed
    assert len(result.created) == len(DEFAULT_ENGINE_CATALOG)

    for engine in registry.list_all(TENANT):
        assert engine.is_installed == engine.is_core
        assert engine.is_enabled == engine.is_core

    enabled = {e.key for e in registry.list_enabled(TENANT)}
    assert {"inventory", "processing", "receiving"} <= enabled


def test_provision_is_idempotent_and_repairs_missing_rows(
    store: SqlAlchemyEngineCatalogStore, registry: EngineRegistry
) -> None:
    provision_tenant(store, TENANT, DEFAULT_ENGINE_CATALOG[:3])
    registry.install(TENANT, "inventory")

    result = provision_tenant(store, TENANT)

    assert result.existing == ["inventory", "processing", "receiving"]
    assert "crm" in result.created

    again = provision_tenant(store, TENANT)
    assert not again.changed


def test_catalog_with_cycle_rejected(store: SqlAlchemyEngineCatalogStore) -> None:
    catalog = [
        EngineDefinition(key="a", title="A", category=EngineCategory.SALES, depends_on=("b",)),
        EngineDefinition(key="b", title="B", category=EngineCategory.SALES, depends_on=("a",)),
    ]
    with pytest.raises(DependencyCycleException):
        provision_tenant(store, TENANT, catalog)
    assert store.fetch_all(TENANT) == []


def test_catalog_with_unknown_dependency_rejected() -> None:
    catalog = [
        EngineDefinition(key="a", title="A", category=EngineCategory.SALES, depends_on=("ghost",)),
    ]
    with pytest.raises(ValueError, match="ghost"):
        validate_catalog(catalog)


def test_catalog_with_bad_or_duplicate_keys_rejected() -> None:
    with pytest.raises(InvalidEngineKeyException):
        validate_catalog([EngineDefinition(key="Bad", title="B", category=EngineCategory.ADMIN)])

    duplicate = EngineDefinition(key="crm", title="CRM", category=EngineCategory.BUSINESS)
    with pytest.raises(ValueError, match="Duplicate"):
        validate_catalog([duplicate, duplicate])
