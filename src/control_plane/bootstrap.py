"""
Explicit wiring of control plane services for one process or session
"""

import logging
import random
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .audit_log import AuditLog
from .call_logger import CallLogger
from .config import ControlPlaneConfig
from .domain_naming import DomainNamer
from .kv_store import FileKeyValueStore, InMemoryKeyValueStore, KeyValueStore
from .models import utc_now
from .plan_catalog import PlanCatalog
from .session import ConsoleSession
from .tenant_manager import TenantManager
from .tenant_store import TenantStore
from .usage_tracker import UsageTracker
from .user_directory import UserDirectory

logger = logging.getLogger(__name__)


@dataclass
class ControlPlane:
    """Every service of one console instance, sharing a store and call logger"""
    config: ControlPlaneConfig
    store: TenantStore
    catalog: PlanCatalog
    call_logger: CallLogger
    tenants: TenantManager
    users: UserDirectory
    audit: AuditLog
    usage: UsageTracker
    session: ConsoleSession


def build_backend(config: ControlPlaneConfig) -> KeyValueStore:
    if config.storage_backend == "file":
        return FileKeyValueStore(config.storage_path)
    if config.storage_backend != "memory":
        logger.warning(f"Unknown storage backend {config.storage_backend!r}, using memory")
    return InMemoryKeyValueStore()


def build_control_plane(config: Optional[ControlPlaneConfig] = None,
                        backend: Optional[KeyValueStore] = None,
                        rng: Optional[random.Random] = None,
                        clock: Callable[[], datetime] = utc_now) -> ControlPlane:
    """Construct and connect all services; nothing is shared across instances"""
    config = config or ControlPlaneConfig()
    rng = rng or random.Random(config.random_seed)

    store = TenantStore(backend or build_backend(config))
    catalog = PlanCatalog()
    call_logger = CallLogger(
        max_entries=config.max_call_log_entries,
        default_delay_ms=config.default_latency_ms,
        delay_scale=config.latency_scale,
    )
    tenants = TenantManager(
        store, catalog, call_logger,
        namer=DomainNamer(config.domain_suffix), rng=rng, clock=clock,
    )
    users = UserDirectory(tenants, call_logger)
    usage = UsageTracker(
        tenants, users, call_logger,
        distinguished_tenant=config.distinguished_tenant, rng=rng, clock=clock,
    )

    logger.info("Control plane services initialized")
    return ControlPlane(
        config=config,
        store=store,
        catalog=catalog,
        call_logger=call_logger,
        tenants=tenants,
        users=users,
        audit=AuditLog(call_logger),
        usage=usage,
        session=ConsoleSession(store),
    )
