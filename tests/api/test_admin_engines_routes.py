"""
引擎管理 API 测试
"""

from __future__ import annotations

from typing import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from enginehub.api.admin import engines_router
from enginehub.api.exception_handlers import register_exception_handlers
from enginehub.database import get_db

BASE = "/api/tenants/tenant-1/engines"


@pytest.fixture
def client(db: Session) -> Iterator[TestClient]:
    app = FastAPI()
    app.include_router(engines_router)
    register_exception_handlers(app)

    def _override_db() -> Iterator[Session]:
        yield db

    app.dependency_overrides[get_db] = _override_db
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def provisioned(client: TestClient) -> TestClient:
    response = client.post(f"{BASE}/provision")
    assert response.status_code == 200
    return client


class TestEngineQueries:
    """查询端点"""

    def test_list_ordered_by_sort_order(self, provisioned: TestClient) -> None:
        engines = provisioned.get(BASE).json()
        assert engines[0]["key"] == "inventory"
        orders = [e["sort_order"] for e in engines]
        assert orders == sorted(orders)

    def test_list_by_category_only_installed(self, provisioned: TestClient) -> None:
        engines = provisioned.get(BASE, params={"category": "sales"}).json()
        assert engines == []

        provisioned.post(f"{BASE}/reseller/install")
        engines = provisioned.get(BASE, params={"category": "sales"}).json()
        assert [e["key"] for e in engines] == ["reseller"]

    def test_unknown_category_rejected(self, provisioned: TestClient) -> None:
        assert provisioned.get(BASE, params={"category": "games"}).status_code == 422

    def test_groups_always_have_five_categories(self, provisioned: TestClient) -> None:
        groups = provisioned.get(f"{BASE}/groups").json()
        assert list(groups) == ["operations", "sales", "business", "system", "admin"]
        assert groups["sales"] == []
        assert [e["key"] for e in groups["system"]] == ["settings"]
        assert [e["key"] for e in groups["admin"]] == ["apps", "users"]

        enabled_only = provisioned.get(f"{BASE}/groups", params={"enabled_only": True}).json()
        assert list(enabled_only) == list(groups)

    def test_get_engine_not_found(self, provisioned: TestClient) -> None:
        response = provisioned.get(f"{BASE}/ghost")
        assert response.status_code == 404
        assert response.json()["error"]["type"] == "engine_not_found"

    def test_invalid_key(self, provisioned: TestClient) -> None:
        response = provisioned.get(f"{BASE}/Bad.Key")
        assert response.status_code == 400

    def test_missing_dependencies(self, provisioned: TestClient) -> None:
        missing = provisioned.get(f"{BASE}/auction/missing-dependencies").json()
        assert [e["key"] for e in missing] == ["reseller"]


class TestEngineMutations:
    """状态变更端点"""

    def test_install_with_unmet_dependency_conflicts(self, provisioned: TestClient) -> None:
        response = provisioned.post(f"{BASE}/auction/install")
        assert response.status_code == 409
        error = response.json()["error"]
        assert error["type"] == "missing_dependencies"
        assert error["details"]["missing"] == ["reseller"]

        engine = provisioned.get(f"{BASE}/auction").json()
        assert engine["is_installed"] is False

    def test_enable_with_dependencies(self, provisioned: TestClient) -> None:
        response = provisioned.post(f"{BASE}/auction/enable-with-dependencies")
        assert response.status_code == 200
        assert response.json()["is_enabled"] is True

        visible = {e["key"] for e in provisioned.get(f"{BASE}/visible").json()}
        assert {"auction", "reseller"} <= visible

    def test_set_enabled(self, provisioned: TestClient) -> None:
        provisioned.post(f"{BASE}/crm/install")

        response = provisioned.put(f"{BASE}/crm/enabled", json={"enabled": False})
        assert response.status_code == 200
        body = response.json()
        assert (body["is_installed"], body["is_enabled"]) == (True, False)

    def test_disable_core_conflicts(self, provisioned: TestClient) -> None:
        response = provisioned.put(f"{BASE}/inventory/enabled", json={"enabled": False})
        assert response.status_code == 409
        assert response.json()["error"]["type"] == "core_engine_immutable"

    def test_uninstall_blocked_by_dependents(self, provisioned: TestClient) -> None:
        provisioned.post(f"{BASE}/website/enable-with-dependencies")

        response = provisioned.post(f"{BASE}/reseller/uninstall")
        assert response.status_code == 409
        assert response.json()["error"]["details"]["dependents"] == ["website"]

        provisioned.post(f"{BASE}/website/uninstall")
        response = provisioned.post(f"{BASE}/reseller/uninstall")
        assert response.status_code == 200
        assert response.json()["is_installed"] is False


class TestProvisioningAndOnboarding:
    """开通与引导端点"""

    def test_provision_is_repeatable(self, provisioned: TestClient) -> None:
        body = provisioned.post(f"{BASE}/provision").json()
        assert body["created"] == []
        assert "inventory" in body["existing"]

    def test_onboarding(self, provisioned: TestClient) -> None:
        response = provisioned.post(f"{BASE}/onboarding", json={"selected": ["consignment"]})
        assert response.status_code == 200
        body = response.json()
        assert body["enabled"] == ["reseller", "consignment"]
        assert "inventory" in body["selected"]

    def test_onboarding_unknown_engine(self, provisioned: TestClient) -> None:
        response = provisioned.post(f"{BASE}/onboarding", json={"selected": ["ghost"]})
        assert response.status_code == 404
