"""
Audit log queries over the fixed audit history
"""

import logging
from typing import Any, Dict, List, Optional

from .call_logger import CallLogger
from .fixtures import audit_log_entries
from .models import AuditLogEntry, parse_timestamp
from .schemas import AuditQuery

logger = logging.getLogger(__name__)


class AuditLog:
    """Read-only, append-never view of past privileged actions"""

    def __init__(self, call_logger: CallLogger, entries: Optional[List[AuditLogEntry]] = None):
        self.call_logger = call_logger
        self._entries = tuple(entries if entries is not None else audit_log_entries())

    def entries(self, query: Optional[AuditQuery] = None) -> List[AuditLogEntry]:
        """Conjunctive filter: actor by substring, action by exact match, optional time window"""
        query = query or AuditQuery()
        entries = list(self._entries)

        # tenantId is accepted but entries carry no tenant reference
        if query.actor:
            entries = [e for e in entries if query.actor in e.actor]
        if query.action:
            entries = [e for e in entries if e.action == query.action]
        if query.from_:
            start = parse_timestamp(query.from_)
            entries = [e for e in entries if parse_timestamp(e.timestamp) >= start]
        if query.to:
            end = parse_timestamp(query.to)
            entries = [e for e in entries if parse_timestamp(e.timestamp) <= end]
        return entries

    async def get_audit_log(self, query: Optional[AuditQuery] = None) -> Dict[str, Any]:
        query = query or AuditQuery()
        return await self.call_logger.request(
            "GET", "/audit", {"params": query.model_dump(by_alias=True, exclude_none=True)},
            lambda: {"items": [entry.to_dict() for entry in self.entries(query)]},
        )
