"""
Shared builders for control plane tests
"""

import random
from datetime import datetime, timezone

from src.control_plane.bootstrap import build_control_plane
from src.control_plane.config import ControlPlaneConfig
from src.control_plane.kv_store import InMemoryKeyValueStore
from src.control_plane.schemas import CreateTenantRequest

FIXED_NOW = datetime(2025, 9, 27, 12, 0, 0, tzinfo=timezone.utc)

SEEDED_TENANT_IDS = [
    "t-acme-7k2p",
    "t-globex-3m9q",
    "t-initech-5x1c",
    "t-jdoe-9w4e",
    "t-umbrella-2h8r",
]


def fixed_clock():
    return FIXED_NOW


def build_test_plane(seed: int = 42, backend=None, clock=fixed_clock):
    """Control plane with in-memory storage, seeded randomness and no simulated waits"""
    config = ControlPlaneConfig(latency_scale=0.0, random_seed=seed)
    return build_control_plane(
        config,
        backend=backend if backend is not None else InMemoryKeyValueStore(),
        rng=random.Random(seed),
        clock=clock,
    )


def org_request(name: str = "newcorp", plan: str = "pro", **overrides) -> CreateTenantRequest:
    data = {
        "tenantType": "ORG",
        "tenantName": name,
        "plan": plan,
        "isolationModel": "Pooled",
        "region": "ap-northeast-2",
        "contact": {"email": f"admin@{name}.com"},
        "orgProfile": {"legalEntity": f"{name.title()} Inc.", "seats": 50},
    }
    data.update(overrides)
    return CreateTenantRequest(**data)


def individual_request(name: str = "solo", plan: str = "trial") -> CreateTenantRequest:
    return CreateTenantRequest(
        tenantType="INDIVIDUAL",
        tenantName=name,
        plan=plan,
        contact={"email": f"{name}@example.com"},
    )
