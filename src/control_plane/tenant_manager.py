"""
Tenant Management Service for the control plane console

Handles tenant CRUD, lifecycle actions (suspend/resume/delete), entitlement
patching, domains and the read-only lifecycle views. Every public operation
runs as a simulated remote call through the CallLogger and returns plain data.
"""

import logging
import random
import string
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from .call_logger import CallLogger
from .domain_naming import DomainNamer
from .errors import ValidationError
from .fixtures import lifecycle_events, provisioning_tasks
from .models import (
    Contact, ContactType, IsolationModel, OrgProfile, Tenant, TenantStatus,
    TenantType, utc_now
)
from .plan_catalog import PlanCatalog
from .schemas import CreateTenantRequest, TenantQuery, UpdateEntitlementsRequest
from .tenant_store import TenantStore

logger = logging.getLogger(__name__)

# Fields a generic update may never overwrite
IMMUTABLE_FIELDS = ("tenantId", "createdAt", "updatedAt")
# Changed only through suspend and resume
LIFECYCLE_FIELDS = ("status",)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def matches_query(tenant: Tenant, query: TenantQuery) -> bool:
    """True when the tenant satisfies every supplied filter"""
    if query.type and tenant.tenant_type != TenantType(query.type):
        return False
    if query.plan and tenant.plan != query.plan:
        return False
    if query.status and tenant.status != TenantStatus(query.status):
        return False
    if query.isolation_model and tenant.isolation_model != IsolationModel(query.isolation_model):
        return False
    if query.region and tenant.region != query.region:
        return False
    if query.q:
        needle = query.q.lower()
        return (
            needle in tenant.tenant_name.lower()
            or needle in tenant.tenant_id.lower()
            or any(needle in contact.email.lower() for contact in tenant.contacts)
        )
    return True


class TenantManager:
    """Manages tenant lifecycle, configuration and entitlements"""

    def __init__(self,
                 store: TenantStore,
                 catalog: PlanCatalog,
                 call_logger: CallLogger,
                 namer: Optional[DomainNamer] = None,
                 rng: Optional[random.Random] = None,
                 clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.catalog = catalog
        self.call_logger = call_logger
        self.namer = namer or DomainNamer()
        self._rng = rng or random.Random()
        self._clock = clock

    def _new_tenant_id(self, tenant_name: str, taken: List[str]) -> str:
        while True:
            suffix = "".join(self._rng.choice(_ID_ALPHABET) for _ in range(4))
            tenant_id = f"t-{tenant_name}-{suffix}"
            if tenant_id not in taken:
                return tenant_id

    def _touch(self, tenant: Tenant):
        """Bump updatedAt, strictly later than its previous value"""
        now = self._clock()
        if now <= tenant.updated_at:
            now = tenant.updated_at + timedelta(microseconds=1)
        tenant.updated_at = now

    def mutate_tenant(self, tenant_id: str,
                      change: Callable[[Tenant], Optional[Tenant]]) -> Tenant:
        """Read the collection, apply ``change`` to one tenant, write it all back

        ``change`` either edits the tenant in place or returns a replacement record.
        """
        tenants = self.store.list()
        for index, tenant in enumerate(tenants):
            if tenant.tenant_id == tenant_id:
                updated = change(tenant) or tenant
                self._touch(updated)
                tenants[index] = updated
                self.store.put(tenants)
                return updated
        # Raises NotFoundError
        return self.store.get(tenant_id)

    # Tenants
    def filter_tenants(self, query: Optional[TenantQuery] = None) -> List[Tenant]:
        """Filter then truncate; never mutates the store"""
        query = query or TenantQuery()
        tenants = [t for t in self.store.list() if matches_query(t, query)]
        # A zero limit means no limit
        if query.limit and query.limit < len(tenants):
            tenants = tenants[:query.limit]
        return tenants

    async def list_tenants(self, query: Optional[TenantQuery] = None) -> Dict[str, Any]:
        query = query or TenantQuery()
        # Pagination cursors are not supported; nextCursor is never returned
        return await self.call_logger.request(
            "GET", "/tenants",
            {"params": query.model_dump(by_alias=True, exclude_none=True)},
            lambda: {"items": [t.to_dict() for t in self.filter_tenants(query)]},
        )

    async def get_tenant(self, tenant_id: str) -> Dict[str, Any]:
        return await self.call_logger.request(
            "GET", f"/tenants/{tenant_id}", None,
            lambda: self.store.get(tenant_id).to_dict(),
        )

    def _build_tenant(self, request: CreateTenantRequest, taken: List[str]) -> Tenant:
        plan = self.catalog.resolve(request.plan)
        now = self._clock()
        org_profile = None
        if request.org_profile is not None:
            org_profile = OrgProfile(
                legal_entity=request.org_profile.legal_entity,
                seats=request.org_profile.seats,
            )

        return Tenant(
            tenant_id=self._new_tenant_id(request.tenant_name, taken),
            tenant_type=TenantType(request.tenant_type),
            tenant_name=request.tenant_name,
            plan=request.plan,
            isolation_model=IsolationModel(request.isolation_model),
            region=request.region,
            domain=request.domain or self.namer.derive(request.tenant_name, request.plan),
            entitlements=plan.entitlement_defaults(),
            labels=dict(request.labels),
            tags=dict(request.tags),
            contacts=[Contact(email=request.contact.email, type=ContactType.ADMIN)],
            status=TenantStatus.PROVISIONING,
            created_at=now,
            updated_at=now,
            org_profile=org_profile,
        )

    async def create_tenant(self, request: CreateTenantRequest) -> Dict[str, Any]:
        """Create a tenant in PROVISIONING with its plan's default entitlements"""

        def handler():
            tenants = self.store.list()
            tenant = self._build_tenant(request, [t.tenant_id for t in tenants])
            # Newest first without an explicit sort
            tenants.insert(0, tenant)
            self.store.put(tenants)
            logger.info(f"Created tenant {tenant.tenant_id} for {tenant.tenant_name} on plan {tenant.plan}")
            return {
                "tenantId": tenant.tenant_id,
                "status": tenant.status.value,
                "plan": tenant.plan,
            }

        return await self.call_logger.request(
            "POST", "/tenants", request.model_dump(by_alias=True), handler, delay_ms=1000
        )

    async def update_tenant(self, tenant_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        """Shallow-merge plain-data fields into a tenant

        Identifier, timestamps and status are left untouched; status moves only
        through suspend and resume.
        """

        def change(tenant: Tenant) -> Tenant:
            record = tenant.to_dict()
            try:
                for key, value in updates.items():
                    if key in IMMUTABLE_FIELDS or key in LIFECYCLE_FIELDS:
                        logger.debug(f"Ignoring protected field {key} in update of {tenant_id}")
                        continue
                    if key == "entitlements":
                        # Merge so the baseline keys survive
                        record["entitlements"].update(value or {})
                    else:
                        record[key] = value
                return Tenant.from_dict(record)
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                raise ValidationError("Invalid tenant update", {"tenantId": tenant_id, "error": str(e)})

        def handler():
            tenant = self.mutate_tenant(tenant_id, change)
            logger.info(f"Updated tenant {tenant_id}: {sorted(updates)}")
            return tenant.to_dict()

        return await self.call_logger.request("PATCH", f"/tenants/{tenant_id}", updates, handler)

    async def update_entitlements(self, tenant_id: str,
                                  request: UpdateEntitlementsRequest) -> Dict[str, Any]:
        """Merge supplied entitlement keys; optionally replace plan and isolation"""

        def change(tenant: Tenant):
            if request.plan:
                tenant.plan = request.plan
            for key, value in (request.entitlements or {}).items():
                if value is not None:
                    tenant.entitlements[key] = value
            if request.target_isolation:
                tenant.isolation_model = IsolationModel(request.target_isolation)

        def handler():
            self.mutate_tenant(tenant_id, change)
            logger.info(f"Updated entitlements for tenant {tenant_id}")
            return {"tenantId": tenant_id, "status": "UPDATING"}

        return await self.call_logger.request(
            "PATCH", f"/tenants/{tenant_id}/entitlements",
            request.model_dump(by_alias=True, exclude_none=True), handler, delay_ms=500,
        )

    def _set_status(self, tenant_id: str, status: TenantStatus) -> Tenant:
        def change(tenant: Tenant):
            tenant.status = status
        return self.mutate_tenant(tenant_id, change)

    async def suspend_tenant(self, tenant_id: str, reason: str) -> None:
        """Overwrite status with SUSPENDED; the reason only reaches the call log"""

        def handler():
            self._set_status(tenant_id, TenantStatus.SUSPENDED)
            logger.info(f"Suspended tenant {tenant_id}: {reason}")
            return None

        return await self.call_logger.request(
            "POST", f"/tenants/{tenant_id}/actions/suspend", {"reason": reason}, handler
        )

    async def resume_tenant(self, tenant_id: str) -> None:
        def handler():
            self._set_status(tenant_id, TenantStatus.READY)
            logger.info(f"Resumed tenant {tenant_id}")
            return None

        return await self.call_logger.request(
            "POST", f"/tenants/{tenant_id}/actions/resume", None, handler
        )

    async def delete_tenant(self, tenant_id: str, preserve_data_days: int = 30) -> None:
        """Remove the tenant immediately; preserve_data_days has no retention effect"""

        def handler():
            tenants = self.store.list()
            remaining = [t for t in tenants if t.tenant_id != tenant_id]
            if len(remaining) == len(tenants):
                self.store.get(tenant_id)
            self.store.put(remaining)
            logger.info(f"Deleted tenant {tenant_id}")
            return None

        return await self.call_logger.request(
            "DELETE", f"/tenants/{tenant_id}", {"preserveDataDays": preserve_data_days},
            handler, delay_ms=800,
        )

    # Domains
    async def create_domain(self, tenant_id: str, subdomain: str) -> Dict[str, str]:
        def handler():
            self.store.get(tenant_id)
            return {"domain": self.namer.bare(subdomain), "status": "ISSUED"}

        return await self.call_logger.request(
            "POST", f"/tenants/{tenant_id}/domain",
            {"subdomain": subdomain, "listener": "HTTPS-443"}, handler,
        )

    async def get_domain(self, tenant_id: str) -> Dict[str, str]:
        def handler():
            tenant = self.store.get(tenant_id)
            return {
                "domain": tenant.domain or self.namer.bare(tenant.tenant_name),
                "albRuleId": f"rule-{tenant.tenant_id}",
                "targetGroupArn": f"arn:aws:elasticloadbalancing:{tenant.region}:targetgroup/{tenant.tenant_id}",
                "certificateArn": f"arn:aws:acm:{tenant.region}:certificate/{tenant.tenant_id}",
                "status": "ISSUED",
            }

        return await self.call_logger.request("GET", f"/tenants/{tenant_id}/domain", None, handler)

    async def delete_domain(self, tenant_id: str) -> None:
        def handler():
            self.store.get(tenant_id)
            return None

        return await self.call_logger.request("DELETE", f"/tenants/{tenant_id}/domain", None, handler)

    # Lifecycle views
    async def get_tenant_events(self, tenant_id: str) -> Dict[str, Any]:
        def handler():
            self.store.get(tenant_id)
            return {"items": [event.to_dict() for event in lifecycle_events()]}

        return await self.call_logger.request("GET", f"/tenants/{tenant_id}/events", None, handler)

    async def get_provisioning_tasks(self, tenant_id: str) -> Dict[str, Any]:
        def handler():
            self.store.get(tenant_id)
            return {"items": [task.to_dict() for task in provisioning_tasks()]}

        return await self.call_logger.request("GET", f"/tenants/{tenant_id}/tasks", None, handler)

    # Plans
    async def get_plans(self) -> List[Dict[str, Any]]:
        return await self.call_logger.request(
            "GET", "/plans", None, lambda: [plan.to_dict() for plan in self.catalog.list()]
        )

    async def get_plan(self, plan_id: str) -> Dict[str, Any]:
        return await self.call_logger.request(
            "GET", f"/plans/{plan_id}", None, lambda: self.catalog.get(plan_id).to_dict()
        )
