"""
Request/response instrumentation for simulated control plane calls
"""

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from .errors import ApiError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class ApiLogEntry:
    """One simulated call, filled in as the request completes"""
    timestamp: str
    method: str
    endpoint: str
    request_id: str
    request_body: Any = None
    response_data: Any = None
    response_time_ms: int = 0
    status: str = "pending"  # pending, success, error
    error: Optional[str] = None


def _snapshot(value: Any) -> Any:
    """Detached JSON-compatible copy so later mutation cannot rewrite history"""
    if value is None:
        return None
    return json.loads(json.dumps(value, default=str))


def _speed_label(response_time_ms: int) -> str:
    if response_time_ms < 100:
        return "fast"
    if response_time_ms < 500:
        return "ok"
    return "slow"


class CallLogger:
    """Wraps every simulated call: logs it, waits out the latency, times it"""

    def __init__(self,
                 max_entries: int = 50,
                 default_delay_ms: int = 300,
                 delay_scale: float = 1.0,
                 enabled: bool = True,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
                 timer: Callable[[], float] = time.perf_counter):
        self.max_entries = max_entries
        self.default_delay_ms = default_delay_ms
        self.delay_scale = delay_scale
        self.enabled = enabled
        self._sleep = sleep
        self._timer = timer
        self.logs: List[ApiLogEntry] = []

    def set_enabled(self, enabled: bool):
        self.enabled = enabled

    def _new_request_id(self) -> str:
        return f"mock-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"

    def log_request(self, method: str, endpoint: str, request_body: Any = None) -> str:
        """Record the outgoing request and return its correlation id"""
        request_id = self._new_request_id()
        if not self.enabled:
            return request_id

        entry = ApiLogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            method=method,
            endpoint=endpoint,
            request_id=request_id,
            request_body=_snapshot(request_body),
        )
        self.logs.append(entry)
        self._trim()

        logger.info(f"API request {method} {endpoint} [{request_id}]")
        if request_body is not None:
            logger.debug(f"Request body [{request_id}]: {json.dumps(entry.request_body)}")
        return request_id

    def log_response(self, request_id: str, response_data: Any, response_time_ms: int,
                     error: Optional[str] = None):
        if not self.enabled:
            return

        status = "error" if error else "success"
        entry = self._find(request_id)
        if entry is None:
            entry = ApiLogEntry(
                timestamp=datetime.now(timezone.utc).isoformat(),
                method="",
                endpoint="",
                request_id=request_id,
            )
            self.logs.append(entry)

        entry.response_data = _snapshot(response_data)
        entry.response_time_ms = response_time_ms
        entry.status = status
        entry.error = error
        self._trim()

        if error:
            logger.warning(f"API response [{request_id}] failed after {response_time_ms}ms: {error}")
        else:
            logger.info(
                f"API response [{request_id}] {status} in {response_time_ms}ms "
                f"({_speed_label(response_time_ms)})"
            )

    async def request(self,
                      method: str,
                      endpoint: str,
                      request_body: Any,
                      handler: Callable[[], T],
                      delay_ms: Optional[int] = None) -> T:
        """Run ``handler`` as a simulated remote call and return its result unchanged"""
        started = self._timer()
        request_id = self.log_request(method, endpoint, request_body)

        try:
            result = handler()
        except ApiError as e:
            e.request_id = request_id
            self.log_response(request_id, None, self._elapsed_ms(started), error=f"{e.code}: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Unexpected failure in {method} {endpoint} [{request_id}]: {e}")
            self.log_response(request_id, None, self._elapsed_ms(started), error=f"{type(e).__name__}: {e}")
            raise

        delay = self.default_delay_ms if delay_ms is None else delay_ms
        if delay > 0 and self.delay_scale > 0:
            await self._sleep(delay * self.delay_scale / 1000.0)

        self.log_response(request_id, result, self._elapsed_ms(started))
        return result

    def _elapsed_ms(self, started: float) -> int:
        return round((self._timer() - started) * 1000)

    def _find(self, request_id: str) -> Optional[ApiLogEntry]:
        for entry in reversed(self.logs):
            if entry.request_id == request_id:
                return entry
        return None

    def _trim(self):
        if len(self.logs) > self.max_entries:
            self.logs = self.logs[-self.max_entries:]

    def get_logs(self) -> List[ApiLogEntry]:
        return list(self.logs)

    def clear_logs(self):
        self.logs = []
        logger.info("API logs cleared")

    def export_logs(self) -> str:
        export_data = {
            "exportTime": datetime.now(timezone.utc).isoformat(),
            "totalLogs": len(self.logs),
            "logs": [asdict(entry) for entry in self.logs],
        }
        return json.dumps(export_data, indent=2, default=str)

    def summary(self) -> Dict[str, Any]:
        """Totals, average response time and request counts per endpoint"""
        completed = [entry for entry in self.logs if entry.status != "pending"]
        by_endpoint: Dict[str, int] = {}
        for entry in self.logs:
            by_endpoint[entry.endpoint] = by_endpoint.get(entry.endpoint, 0) + 1

        average = 0.0
        if completed:
            average = sum(entry.response_time_ms for entry in completed) / len(completed)

        return {
            "total": len(self.logs),
            "successful": len([e for e in self.logs if e.status == "success"]),
            "failed": len([e for e in self.logs if e.status == "error"]),
            "average_response_time_ms": round(average, 2),
            "by_endpoint": by_endpoint,
        }
