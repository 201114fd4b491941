"""
Integration tests for end-to-end control plane workflows
"""

import pytest

from src.control_plane.errors import ForbiddenError, NotFoundError
from src.control_plane.kv_store import FileKeyValueStore
from src.control_plane.plan_catalog import PlanCatalog
from src.control_plane.schemas import (
    CreateTenantRequest, TenantQuery, UpdateEntitlementsRequest, validate_create_request
)
from tests.fixtures.sample_data import build_test_plane, org_request


class TestTenantLifecycleFlow:
    """Create, patch, suspend, resume and delete through one control plane"""

    @pytest.fixture
    def plane(self):
        return build_test_plane(seed=5)

    @pytest.mark.asyncio
    async def test_trial_tenant_named_acme(self, plane):
        request = CreateTenantRequest(
            tenantName="acme",
            plan="trial",
            contact={"email": "owner@acme.com"},
            orgProfile={"legalEntity": "Acme Labs"},
        )
        created = await plane.tenants.create_tenant(validate_create_request(request))
        tenant = await plane.tenants.get_tenant(created["tenantId"])

        assert tenant["domain"] == "t-acme.ediworks.com"
        assert tenant["entitlements"] == PlanCatalog().get("trial").default_entitlements
        assert created["tenantId"] != "t-acme-7k2p"

    @pytest.mark.asyncio
    async def test_full_lifecycle(self, plane):
        tenants = plane.tenants
        created = await tenants.create_tenant(org_request("hooli", "starter"))
        tenant_id = created["tenantId"]

        await tenants.update_entitlements(
            tenant_id, UpdateEntitlementsRequest(entitlements={"dcv.maxSessions": 15})
        )
        await tenants.suspend_tenant(tenant_id, "Security review")
        suspended = await tenants.list_tenants(TenantQuery(status="SUSPENDED"))
        assert tenant_id in [t["tenantId"] for t in suspended["items"]]

        await tenants.update_entitlements(
            tenant_id, UpdateEntitlementsRequest(entitlements={"storage.gb": 150})
        )
        await tenants.resume_tenant(tenant_id)
        resumed = await tenants.get_tenant(tenant_id)
        assert resumed["status"] == "READY"
        assert resumed["entitlements"]["dcv.maxSessions"] == 15
        assert resumed["entitlements"]["storage.gb"] == 150

        await tenants.delete_tenant(tenant_id)
        with pytest.raises(NotFoundError):
            await tenants.get_tenant(tenant_id)
        remaining = await tenants.list_tenants()
        assert tenant_id not in [t["tenantId"] for t in remaining["items"]]

        endpoints = [entry.endpoint for entry in plane.call_logger.get_logs()]
        assert "/tenants" in endpoints
        assert f"/tenants/{tenant_id}/actions/suspend" in endpoints
        assert plane.call_logger.summary()["failed"] == 1

    @pytest.mark.asyncio
    async def test_analytics_restricted_to_acme(self, plane):
        analytics = await plane.usage.get_tenant_usage_analytics("acme")
        assert len(analytics["metrics"]["compute"]) == 7

        with pytest.raises(ForbiddenError) as exc_info:
            await plane.usage.get_tenant_usage_analytics("globex")
        entry = plane.call_logger.get_logs()[-1]
        assert entry.status == "error"
        assert entry.response_data is None
        assert exc_info.value.request_id == entry.request_id

    @pytest.mark.asyncio
    async def test_state_survives_restart_with_file_storage(self, tmp_path):
        backend = FileKeyValueStore(str(tmp_path / "console"))
        first = build_test_plane(backend=backend)
        created = await first.tenants.create_tenant(org_request("persisted"))
        first.session.login()

        second = build_test_plane(backend=FileKeyValueStore(str(tmp_path / "console")))
        tenant = await second.tenants.get_tenant(created["tenantId"])
        assert tenant["tenantName"] == "persisted"
        assert second.session.is_authenticated()

        second.session.reset()
        third = build_test_plane(backend=FileKeyValueStore(str(tmp_path / "console")))
        with pytest.raises(NotFoundError):
            await third.tenants.get_tenant(created["tenantId"])
        assert len((await third.tenants.list_tenants())["items"]) == 5
