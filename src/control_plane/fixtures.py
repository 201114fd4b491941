"""
Built-in seed data for the console: tenants, users, audit history, lifecycle records

Builders return fresh copies so callers can mutate the result freely.
"""

import copy
from typing import Dict, List, Any

from .models import (
    AuditLogEntry, LifecycleEvent, ProvisioningTask, User, UserRole, UserStatus
)

_TENANTS: List[Dict[str, Any]] = [
    {
        "tenantId": "t-acme-7k2p",
        "tenantType": "ORG",
        "tenantName": "acme",
        "plan": "pro",
        "isolationModel": "SiloInVpc",
        "region": "ap-northeast-2",
        "domain": "p-acme.ediworks.com",
        "entitlements": {
            "dcv.maxSessions": 50,
            "dcv.gpuClass": "g4dn.xlarge",
            "session.maxDurationMin": 480,
            "storage.gb": 500,
            "egress.gbPerMonth": 250,
        },
        "labels": {"env": "prod", "team": "platform"},
        "tags": {"costCenter": "cc-1001"},
        "contacts": [
            {"email": "admin@acme.com", "type": "ADMIN"},
            {"email": "billing@acme.com", "type": "BILLING"},
        ],
        "status": "READY",
        "createdAt": "2025-03-15T10:30:00.000000Z",
        "updatedAt": "2025-03-20T14:15:00.000000Z",
        "orgProfile": {"legalEntity": "Acme Corp Inc.", "seats": 100},
    },
    {
        "tenantId": "t-globex-3m9q",
        "tenantType": "ORG",
        "tenantName": "globex",
        "plan": "enterprise",
        "isolationModel": "SiloAccount",
        "region": "us-east-1",
        "domain": "e-globex.ediworks.com",
        "entitlements": {
            "dcv.maxSessions": 200,
            "dcv.gpuClass": "g5.2xlarge",
            "session.maxDurationMin": 1440,
            "storage.gb": 5000,
            "egress.gbPerMonth": 2000,
            "support.tier": "white-glove",
        },
        "labels": {"env": "prod"},
        "tags": {"costCenter": "cc-2040", "region": "na"},
        "contacts": [{"email": "it@globex.com", "type": "ADMIN"}],
        "status": "READY",
        "createdAt": "2025-02-01T09:00:00.000000Z",
        "updatedAt": "2025-04-11T08:45:00.000000Z",
        "orgProfile": {"legalEntity": "Globex Corporation", "seats": 250},
    },
    {
        "tenantId": "t-initech-5x1c",
        "tenantType": "ORG",
        "tenantName": "initech",
        "plan": "starter",
        "isolationModel": "Pooled",
        "region": "ap-northeast-2",
        "domain": "s-initech.ediworks.com",
        "entitlements": {
            "dcv.maxSessions": 10,
            "dcv.gpuClass": "none",
            "session.maxDurationMin": 240,
            "storage.gb": 100,
            "egress.gbPerMonth": 50,
        },
        "labels": {"env": "staging"},
        "tags": {},
        "contacts": [{"email": "ops@initech.com", "type": "ADMIN"}],
        "status": "SUSPENDED",
        "createdAt": "2025-01-10T12:00:00.000000Z",
        "updatedAt": "2025-05-02T16:20:00.000000Z",
        "orgProfile": {"legalEntity": "Initech LLC", "seats": 25},
    },
    {
        "tenantId": "t-jdoe-9w4e",
        "tenantType": "INDIVIDUAL",
        "tenantName": "jdoe",
        "plan": "trial",
        "isolationModel": "Pooled",
        "region": "us-east-1",
        "domain": "t-jdoe.ediworks.com",
        "entitlements": {
            "dcv.maxSessions": 2,
            "dcv.gpuClass": "none",
            "session.maxDurationMin": 60,
            "storage.gb": 10,
            "egress.gbPerMonth": 5,
        },
        "labels": {},
        "tags": {},
        "contacts": [{"email": "jane.doe@example.com", "type": "ADMIN"}],
        "status": "PROVISIONING",
        "createdAt": "2025-09-18T07:05:00.000000Z",
        "updatedAt": "2025-09-18T07:05:00.000000Z",
    },
    {
        "tenantId": "t-umbrella-2h8r",
        "tenantType": "ORG",
        "tenantName": "umbrella",
        "plan": "pro",
        "isolationModel": "Pooled",
        "region": "us-east-1",
        "domain": "p-umbrella.ediworks.com",
        "entitlements": {
            "dcv.maxSessions": 60,
            "dcv.gpuClass": "g4dn.xlarge",
            "session.maxDurationMin": 480,
            "storage.gb": 750,
            "egress.gbPerMonth": 250,
        },
        "labels": {"env": "prod", "team": "research"},
        "tags": {"costCenter": "cc-3300"},
        "contacts": [
            {"email": "admin@umbrella.io", "type": "ADMIN"},
            {"email": "finance@umbrella.io", "type": "BILLING"},
        ],
        "status": "READY",
        "createdAt": "2025-06-05T03:30:00.000000Z",
        "updatedAt": "2025-08-29T11:10:00.000000Z",
        "orgProfile": {"legalEntity": "Umbrella Research Ltd.", "seats": 40},
    },
]

_DEFAULT_USERS: List[Dict[str, str]] = [
    {"userId": "u-0001", "email": "owner@example.com", "role": "TENANT_ADMIN", "status": "ACTIVE"},
    {"userId": "u-0002", "email": "member@example.com", "role": "MEMBER", "status": "ACTIVE"},
    {"userId": "u-0003", "email": "new.hire@example.com", "role": "MEMBER", "status": "INVITED"},
]

_USERS_BY_TENANT: Dict[str, List[Dict[str, str]]] = {
    "t-acme-7k2p": [
        {"userId": "u-acme-01", "email": "john@acme.com", "role": "TENANT_ADMIN", "status": "ACTIVE"},
        {"userId": "u-acme-02", "email": "mary@acme.com", "role": "BILLING_ADMIN", "status": "ACTIVE"},
        {"userId": "u-acme-03", "email": "dev1@acme.com", "role": "MEMBER", "status": "ACTIVE"},
        {"userId": "u-acme-04", "email": "dev2@acme.com", "role": "MEMBER", "status": "ACTIVE"},
        {"userId": "u-acme-05", "email": "intern@acme.com", "role": "MEMBER", "status": "INVITED"},
        {"userId": "u-acme-06", "email": "former@acme.com", "role": "MEMBER", "status": "DISABLED"},
    ],
    "t-globex-3m9q": [
        {"userId": "u-globex-01", "email": "hank@globex.com", "role": "TENANT_ADMIN", "status": "ACTIVE"},
        {"userId": "u-globex-02", "email": "accounts@globex.com", "role": "BILLING_ADMIN", "status": "ACTIVE"},
        {"userId": "u-globex-03", "email": "analyst@globex.com", "role": "MEMBER", "status": "INVITED"},
    ],
    "t-initech-5x1c": [
        {"userId": "u-initech-01", "email": "bill@initech.com", "role": "TENANT_ADMIN", "status": "DISABLED"},
        {"userId": "u-initech-02", "email": "peter@initech.com", "role": "MEMBER", "status": "DISABLED"},
    ],
    "t-umbrella-2h8r": [
        {"userId": "u-umbrella-01", "email": "alice@umbrella.io", "role": "TENANT_ADMIN", "status": "ACTIVE"},
        {"userId": "u-umbrella-02", "email": "chris@umbrella.io", "role": "MEMBER", "status": "ACTIVE"},
    ],
}

_AUDIT_LOG: List[Dict[str, Any]] = [
    {
        "timestamp": "2025-09-25T09:12:44Z",
        "actor": "admin@ediworks.local",
        "action": "tenant.suspend",
        "before": {"status": "READY"},
        "after": {"status": "SUSPENDED", "reason": "Payment overdue"},
        "requestId": "req-7f3a21",
    },
    {
        "timestamp": "2025-09-24T16:03:10Z",
        "actor": "admin@ediworks.local",
        "action": "entitlements.update",
        "before": {"dcv.maxSessions": 50},
        "after": {"dcv.maxSessions": 60},
        "requestId": "req-5c9e08",
    },
    {
        "timestamp": "2025-09-23T11:47:02Z",
        "actor": "reviewer@ediworks.local",
        "action": "tenant.resume",
        "before": {"status": "SUSPENDED"},
        "after": {"status": "READY"},
        "requestId": "req-2b61d4",
    },
    {
        "timestamp": "2025-09-22T08:30:55Z",
        "actor": "admin@ediworks.local",
        "action": "tenant.create",
        "before": None,
        "after": {"tenantName": "jdoe", "plan": "trial"},
        "requestId": "req-90aa17",
    },
    {
        "timestamp": "2025-09-20T21:15:31Z",
        "actor": "system@ediworks.local",
        "action": "plan.change",
        "before": {"plan": "starter"},
        "after": {"plan": "pro"},
        "requestId": "req-11fe6c",
    },
]

_LIFECYCLE_EVENTS: List[Dict[str, Any]] = [
    {"eventId": "evt-001", "type": "TenantCreated", "createdAt": "2025-03-15T10:30:00Z",
     "payload": {"plan": "pro"}},
    {"eventId": "evt-002", "type": "ProvisioningStarted", "createdAt": "2025-03-15T10:30:05Z"},
    {"eventId": "evt-003", "type": "DomainIssued", "createdAt": "2025-03-15T10:42:18Z",
     "payload": {"listener": "HTTPS-443"}},
    {"eventId": "evt-004", "type": "TenantReady", "createdAt": "2025-03-15T10:44:51Z"},
]

_PROVISIONING_TASKS: List[Dict[str, Any]] = [
    {"taskId": "task-001", "name": "CreateNetwork", "status": "SUCCEEDED", "attempt": 1, "durationSec": 84},
    {"taskId": "task-002", "name": "CreateIdentityPool", "status": "SUCCEEDED", "attempt": 1, "durationSec": 37},
    {"taskId": "task-003", "name": "IssueCertificate", "status": "SUCCEEDED", "attempt": 2, "durationSec": 212},
    {"taskId": "task-004", "name": "RegisterDomain", "status": "RUNNING", "attempt": 1},
]


def seed_tenant_records() -> List[Dict[str, Any]]:
    """Plain-data tenant collection used when nothing is persisted yet"""
    return copy.deepcopy(_TENANTS)


def _to_user(record: Dict[str, str]) -> User:
    return User(
        user_id=record["userId"],
        email=record["email"],
        role=UserRole(record["role"]),
        status=UserStatus(record["status"]),
    )


def default_users() -> List[User]:
    return [_to_user(record) for record in _DEFAULT_USERS]


def users_by_tenant() -> Dict[str, List[User]]:
    return {
        tenant_id: [_to_user(record) for record in records]
        for tenant_id, records in _USERS_BY_TENANT.items()
    }


def audit_log_entries() -> List[AuditLogEntry]:
    return [
        AuditLogEntry(
            timestamp=record["timestamp"],
            actor=record["actor"],
            action=record["action"],
            before=copy.deepcopy(record["before"]),
            after=copy.deepcopy(record["after"]),
            request_id=record["requestId"],
        )
        for record in _AUDIT_LOG
    ]


def lifecycle_events() -> List[LifecycleEvent]:
    return [
        LifecycleEvent(
            event_id=record["eventId"],
            type=record["type"],
            created_at=record["createdAt"],
            payload=copy.deepcopy(record.get("payload")),
        )
        for record in _LIFECYCLE_EVENTS
    ]


def provisioning_tasks() -> List[ProvisioningTask]:
    return [
        ProvisioningTask(
            task_id=record["taskId"],
            name=record["name"],
            status=record["status"],
            attempt=record.get("attempt"),
            duration_sec=record.get("durationSec"),
            error=record.get("error"),
        )
        for record in _PROVISIONING_TASKS
    ]
