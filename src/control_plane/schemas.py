"""
Request models accepted by the control plane services
"""

from typing import Dict, List, Optional, Any, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import ValidationError
from .models import IsolationModel, TenantStatus, TenantType, UserRole, UserStatus


class _CamelModel(BaseModel):
    """Accepts both snake_case names and the camelCase wire aliases"""
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, validate_default=True)


class ContactRequest(_CamelModel):
    email: str = ""


class OrgProfileRequest(_CamelModel):
    legal_entity: str = Field("", alias="legalEntity")
    seats: int = Field(0, ge=0)


class CreateTenantRequest(_CamelModel):
    tenant_type: TenantType = Field(TenantType.ORG, alias="tenantType")
    tenant_name: str = Field(..., alias="tenantName")
    plan: str = "trial"
    isolation_model: IsolationModel = Field(IsolationModel.POOLED, alias="isolationModel")
    region: str = "ap-northeast-2"
    domain: Optional[str] = None
    contact: ContactRequest = Field(default_factory=ContactRequest)
    org_profile: Optional[OrgProfileRequest] = Field(None, alias="orgProfile")
    individual_profile: Optional[Dict[str, Any]] = Field(None, alias="individualProfile")
    labels: Dict[str, str] = Field(default_factory=dict)
    tags: Dict[str, str] = Field(default_factory=dict)


class UpdateEntitlementsRequest(_CamelModel):
    plan: Optional[str] = None
    entitlements: Optional[Dict[str, Optional[Union[int, float, str]]]] = None
    target_isolation: Optional[IsolationModel] = Field(None, alias="targetIsolation")


class TenantQuery(_CamelModel):
    """Conjunctive tenant filter; every supplied field must match"""
    type: Optional[TenantType] = None
    plan: Optional[str] = None
    status: Optional[TenantStatus] = None
    isolation_model: Optional[IsolationModel] = Field(None, alias="isolationModel")
    region: Optional[str] = None
    q: Optional[str] = None
    limit: Optional[int] = Field(None, ge=0)
    cursor: Optional[str] = None


class UserQuery(_CamelModel):
    status: Optional[UserStatus] = None
    role: Optional[UserRole] = None
    tenant_id: Optional[str] = Field(None, alias="tenantId")
    q: Optional[str] = None
    limit: Optional[int] = Field(None, ge=0)
    cursor: Optional[str] = None


class AuditQuery(_CamelModel):
    tenant_id: Optional[str] = Field(None, alias="tenantId")
    actor: Optional[str] = None
    action: Optional[str] = None
    from_: Optional[str] = Field(None, alias="from")
    to: Optional[str] = None


class InviteUserRequest(_CamelModel):
    email: str
    role: UserRole = UserRole.MEMBER
    send_email: bool = Field(True, alias="sendEmail")


class UpdateUserRequest(_CamelModel):
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None


def find_create_request_problems(request: CreateTenantRequest) -> List[str]:
    """Field problems a caller must fix before submitting a create request"""
    problems = []
    if not request.tenant_name.strip():
        problems.append("tenantName is required")
    if not request.contact.email.strip():
        problems.append("contact.email is required")
    elif "@" not in request.contact.email:
        problems.append("contact.email must be an email address")
    if TenantType(request.tenant_type) == TenantType.ORG:
        if request.org_profile is None or not request.org_profile.legal_entity.strip():
            problems.append("orgProfile.legalEntity is required for organizations")
    return problems


def validate_create_request(request: CreateTenantRequest) -> CreateTenantRequest:
    """Caller-side check; the services themselves accept any well-formed request"""
    problems = find_create_request_problems(request)
    if problems:
        raise ValidationError("Invalid tenant request", {"fields": problems})
    return request
