"""
Local console session and coarse read/write permission checks

Stands in for a real identity provider during local development. The signed-in
operator is persisted through the tenant store's current-user record.
"""

import logging
from typing import Dict, List, Optional

from .models import PlatformRole, PlatformUser
from .tenant_store import TenantStore

logger = logging.getLogger(__name__)

LOCAL_USER_SUB = "local-user-001"

ROLE_EMAILS: Dict[PlatformRole, str] = {
    PlatformRole.PLATFORM_ADMIN: "admin@ediworks.local",
    PlatformRole.REVIEWER: "reviewer@ediworks.local",
}

ROLE_PERMISSIONS: Dict[PlatformRole, List[str]] = {
    PlatformRole.PLATFORM_ADMIN: ["read", "write"],
    PlatformRole.REVIEWER: ["read"],
}


class ConsoleSession:
    """Signed-in operator for one store instance"""

    def __init__(self, store: TenantStore):
        self.store = store
        self._user: Optional[PlatformUser] = None

    def login(self, role: PlatformRole = PlatformRole.PLATFORM_ADMIN) -> PlatformUser:
        role = PlatformRole(role)
        self._user = PlatformUser(sub=LOCAL_USER_SUB, email=ROLE_EMAILS[role], platform_role=role)
        self.store.set_current_user_record(self._user.to_dict())
        logger.info(f"Signed in as {self._user.email} ({role.value})")
        return self._user

    def get_user(self) -> Optional[PlatformUser]:
        if self._user is None:
            record = self.store.get_current_user_record()
            if record:
                try:
                    self._user = PlatformUser.from_dict(record)
                except (KeyError, ValueError) as e:
                    logger.error(f"Failed to parse stored user: {e}")
        return self._user

    def is_authenticated(self) -> bool:
        return self.get_user() is not None

    def has_permission(self, action: str) -> bool:
        """``read`` for every platform role, ``write`` for admins only"""
        user = self.get_user()
        if user is None:
            return False
        return action in ROLE_PERMISSIONS.get(user.platform_role, [])

    def logout(self):
        self._user = None
        self.store.clear_current_user_record()
        logger.info("Signed out")

    def reset(self):
        """Clear the stored tenants and the signed-in operator"""
        self._user = None
        self.store.reset()
