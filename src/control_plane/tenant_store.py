"""
Entity store owning the canonical tenant collection

The whole collection is serialized under a single key and every write is a
full overwrite. There is no conflict detection, so one store instance must
have a single active writer.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Optional

from .errors import NotFoundError
from .fixtures import seed_tenant_records
from .kv_store import KeyValueStore
from .models import Tenant

logger = logging.getLogger(__name__)

TENANTS_KEY = "mock_tenants"
CURRENT_USER_KEY = "auth_user"


class TenantStore:
    """Tenant collection persisted through a key-value backend, seeded on empty"""

    def __init__(self, backend: KeyValueStore,
                 seed: Callable[[], List[Dict[str, Any]]] = seed_tenant_records):
        self.backend = backend
        self._seed = seed
        self._load_records()

    def _load_records(self) -> List[Dict[str, Any]]:
        """Read the persisted collection, seeding it when absent or empty"""
        stored = self.backend.get_item(TENANTS_KEY)
        records: Optional[List[Dict[str, Any]]] = None

        if stored:
            try:
                records = json.loads(stored)
            except json.JSONDecodeError as e:
                logger.error(f"Failed to decode stored tenants, reseeding: {e}")
                records = None

        if not records:
            records = self._seed()
            self.backend.set_item(TENANTS_KEY, json.dumps(records))
            logger.info(f"No stored tenants found, seeded {len(records)} fixture tenants")

        return records

    def list(self) -> List[Tenant]:
        """All tenants in stored order (newest first after creates)"""
        return [Tenant.from_dict(record) for record in self._load_records()]

    def get(self, tenant_id: str) -> Tenant:
        tenant = self.find(tenant_id)
        if tenant is None:
            raise NotFoundError("Tenant not found", {"tenantId": tenant_id})
        return tenant

    def find(self, tenant_id: str) -> Optional[Tenant]:
        for record in self._load_records():
            if record.get("tenantId") == tenant_id:
                return Tenant.from_dict(record)
        return None

    def put(self, tenants: List[Tenant]) -> None:
        """Replace the entire persisted collection"""
        records = [tenant.to_dict() for tenant in tenants]
        self.backend.set_item(TENANTS_KEY, json.dumps(records))
        logger.debug(f"Stored {len(records)} tenants")

    # Current console user record
    def get_current_user_record(self) -> Optional[Dict[str, Any]]:
        stored = self.backend.get_item(CURRENT_USER_KEY)
        if not stored:
            return None
        try:
            return json.loads(stored)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse stored user: {e}")
            return None

    def set_current_user_record(self, record: Dict[str, Any]) -> None:
        self.backend.set_item(CURRENT_USER_KEY, json.dumps(record))

    def clear_current_user_record(self) -> None:
        self.backend.remove_item(CURRENT_USER_KEY)

    def reset(self) -> None:
        """Clear tenants and the current user; the next read reseeds"""
        self.backend.remove_item(TENANTS_KEY)
        self.backend.remove_item(CURRENT_USER_KEY)
        logger.info("Cleared stored tenants and current user")
