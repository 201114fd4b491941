"""
Control plane data model: tenants, users, audit entries and lifecycle records

Every record converts to and from the camelCase plain-data shape the console
pages consume, so the same dictionaries can be persisted and returned as-is.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Any, Union
from dataclasses import dataclass, field
from enum import Enum


class TenantType(Enum):
    """Kind of customer account"""
    ORG = "ORG"
    INDIVIDUAL = "INDIVIDUAL"


class IsolationModel(Enum):
    """Degree of infrastructure sharing"""
    POOLED = "Pooled"  # Shared pool
    SILO_IN_VPC = "SiloInVpc"  # Dedicated network
    SILO_ACCOUNT = "SiloAccount"  # Dedicated account


class TenantStatus(Enum):
    """Tenant lifecycle status"""
    PROVISIONING = "PROVISIONING"
    READY = "READY"
    SUSPENDED = "SUSPENDED"
    # Declared for a future orchestration layer; nothing transitions into these yet
    DELETING = "DELETING"
    ERROR = "ERROR"


class ContactType(Enum):
    ADMIN = "ADMIN"
    BILLING = "BILLING"


class UserRole(Enum):
    """Roles a user can hold inside a tenant"""
    TENANT_ADMIN = "TENANT_ADMIN"
    BILLING_ADMIN = "BILLING_ADMIN"
    MEMBER = "MEMBER"


class UserStatus(Enum):
    ACTIVE = "ACTIVE"
    INVITED = "INVITED"
    DISABLED = "DISABLED"


class PlatformRole(Enum):
    """Roles of the operator using the console"""
    PLATFORM_ADMIN = "PLATFORM_ADMIN"
    REVIEWER = "REVIEWER"


# Keys every tenant's entitlement map must carry
BASELINE_ENTITLEMENT_KEYS = (
    "dcv.maxSessions",
    "dcv.gpuClass",
    "session.maxDurationMin",
    "storage.gb",
    "egress.gbPerMonth",
)

EntitlementValue = Union[int, float, str]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO-8601 UTC with a trailing Z"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing Z"""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class Contact:
    email: str
    type: ContactType = ContactType.ADMIN

    def to_dict(self) -> Dict[str, Any]:
        return {"email": self.email, "type": self.type.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Contact":
        return cls(email=data["email"], type=ContactType(data.get("type", "ADMIN")))


@dataclass
class OrgProfile:
    legal_entity: str
    seats: int

    def to_dict(self) -> Dict[str, Any]:
        return {"legalEntity": self.legal_entity, "seats": self.seats}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrgProfile":
        return cls(legal_entity=data["legalEntity"], seats=int(data.get("seats", 0)))


@dataclass
class Tenant:
    """A provisioned customer account"""
    tenant_id: str
    tenant_type: TenantType
    tenant_name: str
    plan: str
    isolation_model: IsolationModel
    region: str
    entitlements: Dict[str, EntitlementValue]
    contacts: List[Contact]
    status: TenantStatus
    created_at: datetime
    updated_at: datetime

    domain: Optional[str] = None
    labels: Dict[str, str] = field(default_factory=dict)
    tags: Dict[str, str] = field(default_factory=dict)
    org_profile: Optional[OrgProfile] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "tenantId": self.tenant_id,
            "tenantType": self.tenant_type.value,
            "tenantName": self.tenant_name,
            "plan": self.plan,
            "isolationModel": self.isolation_model.value,
            "region": self.region,
            "entitlements": dict(self.entitlements),
            "labels": dict(self.labels),
            "tags": dict(self.tags),
            "contacts": [contact.to_dict() for contact in self.contacts],
            "status": self.status.value,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }
        if self.domain is not None:
            data["domain"] = self.domain
        if self.org_profile is not None:
            data["orgProfile"] = self.org_profile.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tenant":
        org_profile = data.get("orgProfile")
        return cls(
            tenant_id=data["tenantId"],
            tenant_type=TenantType(data["tenantType"]),
            tenant_name=data["tenantName"],
            plan=data["plan"],
            isolation_model=IsolationModel(data["isolationModel"]),
            region=data["region"],
            entitlements=dict(data.get("entitlements", {})),
            contacts=[Contact.from_dict(c) for c in data.get("contacts", [])],
            status=TenantStatus(data["status"]),
            created_at=parse_timestamp(data["createdAt"]),
            updated_at=parse_timestamp(data["updatedAt"]),
            domain=data.get("domain"),
            labels=dict(data.get("labels") or {}),
            tags=dict(data.get("tags") or {}),
            org_profile=OrgProfile.from_dict(org_profile) if org_profile else None,
        )


@dataclass
class User:
    """A user account owned by exactly one tenant"""
    user_id: str
    email: str
    role: UserRole
    status: UserStatus

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "email": self.email,
            "role": self.role.value,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class AuditLogEntry:
    """Immutable record of a past privileged action"""
    timestamp: str
    actor: str
    action: str
    before: Any
    after: Any
    request_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "actor": self.actor,
            "action": self.action,
            "before": self.before,
            "after": self.after,
            "requestId": self.request_id,
        }


@dataclass(frozen=True)
class LifecycleEvent:
    event_id: str
    type: str
    created_at: str
    payload: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"eventId": self.event_id, "type": self.type, "createdAt": self.created_at}
        if self.payload is not None:
            data["payload"] = self.payload
        return data


@dataclass(frozen=True)
class ProvisioningTask:
    task_id: str
    name: str
    status: str  # RUNNING, SUCCEEDED, FAILED
    attempt: Optional[int] = None
    duration_sec: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"taskId": self.task_id, "name": self.name, "status": self.status}
        if self.attempt is not None:
            data["attempt"] = self.attempt
        if self.duration_sec is not None:
            data["durationSec"] = self.duration_sec
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class PlatformUser:
    """Operator signed in to the console"""
    sub: str
    platform_role: PlatformRole
    email: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"sub": self.sub, "email": self.email, "platformRole": self.platform_role.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlatformUser":
        return cls(
            sub=data["sub"],
            email=data.get("email"),
            platform_role=PlatformRole(data["platformRole"]),
        )
