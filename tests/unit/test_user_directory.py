"""
Unit tests for users, seats and the audit log
"""

import pytest

from src.control_plane.errors import NotFoundError
from src.control_plane.schemas import AuditQuery, InviteUserRequest, UpdateUserRequest, UserQuery
from tests.fixtures.sample_data import build_test_plane, individual_request


class TestUserDirectory:
    """Unit tests for UserDirectory class"""

    @pytest.fixture
    def plane(self):
        return build_test_plane()

    @pytest.fixture
    def directory(self, plane):
        return plane.users

    @pytest.mark.asyncio
    async def test_tenant_users_and_counts(self, directory):
        result = await directory.get_tenant_users("t-acme-7k2p")
        assert len(result["items"]) == 6
        assert result["counts"] == {"active": 4, "invited": 1}

    @pytest.mark.asyncio
    async def test_unknown_tenant_gets_default_users(self, directory):
        result = await directory.get_tenant_users("t-unknown-0000")
        assert [u["userId"] for u in result["items"]] == ["u-0001", "u-0002", "u-0003"]
        assert result["counts"] == {"active": 2, "invited": 1}

    @pytest.mark.asyncio
    async def test_all_users_annotated_with_tenant(self, directory):
        result = await directory.get_all_users()
        assert len(result["items"]) == 13
        first = result["items"][0]
        assert first["tenantId"] == "t-acme-7k2p"
        assert first["tenantName"] == "acme"

    @pytest.mark.asyncio
    async def test_all_users_filters(self, directory):
        admins = await directory.get_all_users(UserQuery(role="TENANT_ADMIN"))
        assert len(admins["items"]) == 4

        disabled = await directory.get_all_users(UserQuery(status="DISABLED"))
        assert {u["email"] for u in disabled["items"]} == {
            "former@acme.com", "bill@initech.com", "peter@initech.com"
        }

        umbrella = await directory.get_all_users(UserQuery(q="umbrella", limit=1))
        assert [u["userId"] for u in umbrella["items"]] == ["u-umbrella-01"]

        globex = await directory.get_all_users(UserQuery(tenantId="t-globex-3m9q", status="ACTIVE"))
        assert len(globex["items"]) == 2

    @pytest.mark.asyncio
    async def test_user_writes_are_acknowledged_only(self, directory):
        await directory.invite_user("t-acme-7k2p", InviteUserRequest(email="new@acme.com"))
        await directory.update_user("t-acme-7k2p", "u-acme-03", UpdateUserRequest(role="BILLING_ADMIN"))
        await directory.delete_user("t-acme-7k2p", "u-acme-04")

        result = await directory.get_tenant_users("t-acme-7k2p")
        assert len(result["items"]) == 6
        assert result["items"][2]["role"] == "MEMBER"

    @pytest.mark.asyncio
    async def test_seats_from_org_profile(self, directory):
        seats = await directory.get_seats("t-acme-7k2p")
        assert seats == {"quota": 100, "used": 4, "pendingInvites": 1}

    @pytest.mark.asyncio
    async def test_seats_for_individual(self, directory):
        seats = await directory.get_seats("t-jdoe-9w4e")
        assert seats["quota"] == 1

    @pytest.mark.asyncio
    async def test_seats_missing_tenant(self, directory):
        with pytest.raises(NotFoundError):
            await directory.get_seats("t-missing-0000")

    @pytest.mark.asyncio
    async def test_update_seats(self, plane, directory):
        await directory.update_seats("t-acme-7k2p", 120)
        assert (await directory.get_seats("t-acme-7k2p"))["quota"] == 120

        created = await plane.tenants.create_tenant(individual_request("solo"))
        await directory.update_seats(created["tenantId"], 3)
        tenant = await plane.tenants.get_tenant(created["tenantId"])
        assert tenant["orgProfile"] == {"legalEntity": "solo", "seats": 3}

    @pytest.mark.asyncio
    async def test_user_stats(self, directory):
        stats = await directory.get_user_stats()

        assert stats["total"] == 13
        assert stats["active"] == 8
        assert stats["invited"] == 2
        assert stats["suspended"] == 3
        assert stats["byTenant"]["t-initech-5x1c"] == {"tenantName": "initech", "count": 2}
        assert stats["byRole"] == {"TENANT_ADMIN": 4, "BILLING_ADMIN": 2, "MEMBER": 7}


class TestAuditLog:
    """Unit tests for AuditLog class"""

    @pytest.fixture
    def audit(self):
        return build_test_plane().audit

    @pytest.mark.asyncio
    async def test_all_entries(self, audit):
        result = await audit.get_audit_log()
        assert len(result["items"]) == 5
        assert result["items"][0]["action"] == "tenant.suspend"

    @pytest.mark.asyncio
    async def test_actor_substring_and_action(self, audit):
        by_actor = await audit.get_audit_log(AuditQuery(actor="reviewer"))
        assert [e["action"] for e in by_actor["items"]] == ["tenant.resume"]

        combined = await audit.get_audit_log(AuditQuery(actor="admin@", action="tenant.create"))
        assert len(combined["items"]) == 1

        # Actor match is case-sensitive
        assert (await audit.get_audit_log(AuditQuery(actor="ADMIN")))["items"] == []

    @pytest.mark.asyncio
    async def test_time_window(self, audit):
        query = AuditQuery(**{"from": "2025-09-22T00:00:00Z", "to": "2025-09-24T23:59:59Z"})
        result = await audit.get_audit_log(query)
        assert [e["action"] for e in result["items"]] == [
            "entitlements.update", "tenant.resume", "tenant.create"
        ]

    def test_tenant_filter_is_ignored(self, audit):
        assert len(audit.entries(AuditQuery(tenantId="t-acme-7k2p"))) == 5

    @pytest.mark.asyncio
    async def test_queries_do_not_alter_history(self, audit):
        await audit.get_audit_log(AuditQuery(action="tenant.suspend"))
        assert len(audit.entries()) == 5
