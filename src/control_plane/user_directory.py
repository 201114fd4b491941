"""
Users and seats, read-only projections keyed by tenant identifier

User records come from a fixture table and are not touched by tenant CRUD.
"""

import logging
from typing import Any, Dict, List, Optional

from .call_logger import CallLogger
from .fixtures import default_users, users_by_tenant
from .models import OrgProfile, Tenant, TenantType, User, UserRole, UserStatus
from .schemas import InviteUserRequest, UpdateUserRequest, UserQuery
from .tenant_manager import TenantManager

logger = logging.getLogger(__name__)

DEFAULT_SEAT_QUOTA = 25
INDIVIDUAL_SEAT_QUOTA = 1


class UserDirectory:
    """Serves user listings, per-tenant counts and seat usage"""

    def __init__(self, tenant_manager: TenantManager, call_logger: CallLogger,
                 users: Optional[Dict[str, List[User]]] = None,
                 fallback_users: Optional[List[User]] = None):
        self.tenant_manager = tenant_manager
        self.call_logger = call_logger
        self.users = users if users is not None else users_by_tenant()
        self.fallback_users = fallback_users if fallback_users is not None else default_users()

    def users_for(self, tenant_id: str) -> List[User]:
        """Fixture users of a tenant, or the default list when it has none"""
        return self.users.get(tenant_id) or self.fallback_users

    def _tenant_names(self) -> Dict[str, str]:
        return {t.tenant_id: t.tenant_name for t in self.tenant_manager.store.list()}

    def directory(self, query: Optional[UserQuery] = None) -> List[Dict[str, Any]]:
        """All fixture users annotated with their tenant, filtered then truncated"""
        query = query or UserQuery()
        names = self._tenant_names()

        rows = []
        for tenant_id, users in self.users.items():
            tenant_name = names.get(tenant_id, tenant_id)
            for user in users:
                rows.append({**user.to_dict(), "tenantId": tenant_id, "tenantName": tenant_name})

        if query.status:
            rows = [r for r in rows if r["status"] == UserStatus(query.status).value]
        if query.role:
            rows = [r for r in rows if r["role"] == UserRole(query.role).value]
        if query.tenant_id:
            rows = [r for r in rows if r["tenantId"] == query.tenant_id]
        if query.q:
            needle = query.q.lower()
            rows = [
                r for r in rows
                if needle in r["email"].lower() or needle in r["tenantName"].lower()
            ]
        if query.limit and query.limit < len(rows):
            rows = rows[:query.limit]
        return rows

    async def get_all_users(self, query: Optional[UserQuery] = None) -> Dict[str, Any]:
        query = query or UserQuery()
        return await self.call_logger.request(
            "GET", "/users", {"params": query.model_dump(by_alias=True, exclude_none=True)},
            lambda: {"items": self.directory(query)},
        )

    async def get_tenant_users(self, tenant_id: str) -> Dict[str, Any]:
        def handler():
            users = self.users_for(tenant_id)
            return {
                "items": [user.to_dict() for user in users],
                "counts": {
                    "active": len([u for u in users if u.status == UserStatus.ACTIVE]),
                    "invited": len([u for u in users if u.status == UserStatus.INVITED]),
                },
            }

        return await self.call_logger.request("GET", f"/tenants/{tenant_id}/users", None, handler)

    # Write endpoints are acknowledged without changing the fixture table
    async def invite_user(self, tenant_id: str, request: InviteUserRequest) -> None:
        logger.info(f"Invite for {request.email} to tenant {tenant_id} acknowledged")
        return await self.call_logger.request(
            "POST", f"/tenants/{tenant_id}/users/invite", request.model_dump(by_alias=True), lambda: None
        )

    async def update_user(self, tenant_id: str, user_id: str, request: UpdateUserRequest) -> None:
        return await self.call_logger.request(
            "PATCH", f"/tenants/{tenant_id}/users/{user_id}",
            request.model_dump(exclude_none=True), lambda: None,
        )

    async def delete_user(self, tenant_id: str, user_id: str) -> None:
        return await self.call_logger.request(
            "DELETE", f"/tenants/{tenant_id}/users/{user_id}", None, lambda: None
        )

    # Seats
    def seat_usage(self, tenant: Tenant) -> Dict[str, int]:
        if tenant.org_profile is not None:
            quota = tenant.org_profile.seats
        elif tenant.tenant_type == TenantType.INDIVIDUAL:
            quota = INDIVIDUAL_SEAT_QUOTA
        else:
            quota = DEFAULT_SEAT_QUOTA

        users = self.users_for(tenant.tenant_id)
        return {
            "quota": quota,
            "used": len([u for u in users if u.status == UserStatus.ACTIVE]),
            "pendingInvites": len([u for u in users if u.status == UserStatus.INVITED]),
        }

    async def get_seats(self, tenant_id: str) -> Dict[str, int]:
        return await self.call_logger.request(
            "GET", f"/tenants/{tenant_id}/seats", None,
            lambda: self.seat_usage(self.tenant_manager.store.get(tenant_id)),
        )

    async def update_seats(self, tenant_id: str, quota: int) -> None:
        """Store a new seat quota on the tenant's organization profile"""

        def change(tenant: Tenant):
            if tenant.org_profile is None:
                tenant.org_profile = OrgProfile(legal_entity=tenant.tenant_name, seats=quota)
            else:
                tenant.org_profile.seats = quota

        def handler():
            self.tenant_manager.mutate_tenant(tenant_id, change)
            logger.info(f"Set seat quota of tenant {tenant_id} to {quota}")
            return None

        return await self.call_logger.request(
            "PATCH", f"/tenants/{tenant_id}/seats", {"quota": quota}, handler
        )

    def user_stats(self) -> Dict[str, Any]:
        names = self._tenant_names()
        stats = {
            "total": 0,
            "active": 0,
            "invited": 0,
            "suspended": 0,
            "byTenant": {},
            "byRole": {},
        }

        for tenant_id, users in self.users.items():
            stats["byTenant"][tenant_id] = {
                "tenantName": names.get(tenant_id, tenant_id),
                "count": len(users),
            }
            stats["total"] += len(users)
            for user in users:
                if user.status == UserStatus.ACTIVE:
                    stats["active"] += 1
                elif user.status == UserStatus.INVITED:
                    stats["invited"] += 1
                elif user.status == UserStatus.DISABLED:
                    stats["suspended"] += 1
                role = user.role.value
                stats["byRole"][role] = stats["byRole"].get(role, 0) + 1

        return stats

    async def get_user_stats(self) -> Dict[str, Any]:
        return await self.call_logger.request("GET", "/users/stats", None, self.user_stats)
