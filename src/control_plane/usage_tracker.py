"""
Usage Analytics Engine for the control plane console
Synthesizes believable usage series with weekday/weekend patterns and aggregates them

Nothing here is persisted; every query recomputes from the injected random source,
so a seeded ``random.Random`` makes every series reproducible.
"""

import logging
import math
import random
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Dict, List, Optional

from .call_logger import CallLogger
from .errors import ApiError, ForbiddenError, ValidationError
from .models import UserStatus, format_timestamp, utc_now
from .tenant_manager import TenantManager
from .user_directory import UserDirectory

logger = logging.getLogger(__name__)

# Pinned reporting week for the distinguished tenant (Saturday through Friday)
ANALYTICS_WINDOW_START = date(2025, 9, 20)
ANALYTICS_WINDOW_DAYS = 7

WEEKLY_BASE_COMPUTE = 145
WEEKLY_MIN_COMPUTE = 20
GENERATED_BASE_COMPUTE = 120
GENERATED_MIN_COMPUTE = 5

USAGE_RANGES = {"1d": 1, "7d": 7, "30d": 30}
HISTORY_RANGES = {"7d": 7, "30d": 30, "90d": 90}
PERIOD_DAYS = {"week": 7, "month": 30}
SERIES_STEPS = 24

# Share of a day's usage per bucket for the drill-down view
COMPUTE_BREAKDOWN = [
    ("00:00-06:00", 0.15, "Batch Processing"),
    ("06:00-12:00", 0.35, "Peak Usage"),
    ("12:00-18:00", 0.30, "Business Hours"),
    ("18:00-24:00", 0.20, "Evening Tasks"),
]
STORAGE_BREAKDOWN = [
    ("database", 0.45, "Database"),
    ("logs", 0.25, "Logs"),
    ("backup", 0.20, "Backup"),
    ("temporary", 0.10, "Temporary"),
]
EGRESS_BREAKDOWN = [
    ("api-responses", 0.50, "API Response"),
    ("static-content", 0.30, "Static Content"),
    ("backup-transfer", 0.15, "Backup Transfer"),
    ("other", 0.05, "Other"),
]


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up"""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def weekly_compute_multiplier(day: date, index: int, rng: random.Random) -> float:
    """Compute multiplier for the pinned reporting week"""
    if is_weekend(day):
        # Maintenance windows, reduced load
        return 0.35 + rng.random() * 0.25

    weekday = day.weekday()
    if weekday == 0:
        multiplier = 1.25 + math.sin(index * 0.3) * 0.15
    elif weekday == 1:
        multiplier = 1.45 + math.sin(index * 0.2) * 0.25
    elif weekday == 2:
        multiplier = 1.35 + math.sin(index * 0.25) * 0.2
    elif weekday == 3:
        multiplier = 1.15 + math.sin(index * 0.2) * 0.15
    else:
        multiplier = 1.05 + math.sin(index * 0.15) * 0.1

    # Tuesday/Wednesday batch and reporting peaks
    if weekday in (1, 2):
        multiplier *= 1.15
    return multiplier


def generated_compute_multiplier(day: date, days_ago: int, rng: random.Random) -> float:
    """Compute multiplier for the generic trailing-period generator"""
    if is_weekend(day):
        multiplier = 0.2 + rng.random() * 0.3
    else:
        weekday = day.weekday()
        if weekday == 0:
            multiplier = 1.3 + math.sin(days_ago * 0.2) * 0.2
        elif weekday == 1:
            multiplier = 1.4 + math.sin(days_ago * 0.15) * 0.3
        elif weekday == 2:
            multiplier = 1.5 + math.sin(days_ago * 0.1) * 0.25
        elif weekday == 3:
            multiplier = 1.3 + math.sin(days_ago * 0.12) * 0.2
        else:
            multiplier = 1.0 + math.sin(days_ago * 0.18) * 0.15

    # Occasional heavy-workload spikes and maintenance dips
    if rng.random() > 0.82:
        multiplier *= 1.8
    if rng.random() > 0.92:
        multiplier *= 0.3
    return multiplier


def day_label(day: date) -> str:
    return f"{day.strftime('%b')} {day.day}"


def day_timestamp(day: date) -> str:
    return format_timestamp(datetime.combine(day, time(0, 0), tzinfo=timezone.utc))


def summarize_points(points: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Totals, per-day averages and compute peak, derived only from the points"""
    days = len(points)
    totals = {metric: sum(p[metric] for p in points) for metric in ("compute", "storage", "egress")}

    peak_compute = 0
    peak_date = ""
    for point in points:
        if point["compute"] > peak_compute:
            peak_compute = point["compute"]
            peak_date = point["date"]

    def average(total: int) -> int:
        return round_half_up(total / days) if days else 0

    return {
        "totalCompute": totals["compute"],
        "totalStorage": totals["storage"],
        "totalEgress": totals["egress"],
        "avgCompute": average(totals["compute"]),
        "avgStorage": average(totals["storage"]),
        "avgEgress": average(totals["egress"]),
        "peakCompute": peak_compute,
        "peakComputeDate": peak_date,
    }


def breakdown_day(day: str, compute: int, storage: int, egress: int) -> Dict[str, Any]:
    """Split one day's totals into fixed proportional buckets"""

    def split(total: int, buckets):
        return [
            {"time": slot, "usage": round_half_up(total * share), "type": kind}
            for slot, share, kind in buckets
        ]

    return {
        "date": day,
        "compute": compute,
        "storage": storage,
        "egress": egress,
        "details": {
            "computeBreakdown": split(compute, COMPUTE_BREAKDOWN),
            "storageBreakdown": split(storage, STORAGE_BREAKDOWN),
            "egressBreakdown": split(egress, EGRESS_BREAKDOWN),
        },
    }


class UsageTracker:
    """Synthesizes and aggregates tenant usage analytics"""

    def __init__(self,
                 tenant_manager: TenantManager,
                 user_directory: UserDirectory,
                 call_logger: CallLogger,
                 distinguished_tenant: str = "acme",
                 rng: Optional[random.Random] = None,
                 clock: Callable[[], datetime] = utc_now):
        self.tenant_manager = tenant_manager
        self.user_directory = user_directory
        self.call_logger = call_logger
        self.distinguished_tenant = distinguished_tenant
        self.rng = rng or random.Random()
        self._clock = clock

    def _today(self) -> date:
        return self._clock().date()

    def _authorize_analytics(self, tenant_id: str):
        """Detailed analytics exist only for the distinguished tenant"""
        if tenant_id == self.distinguished_tenant:
            return
        tenant = self.tenant_manager.store.find(tenant_id)
        if tenant is not None and tenant.tenant_name == self.distinguished_tenant:
            return
        logger.warning(f"Rejected usage analytics request for tenant {tenant_id}")
        raise ForbiddenError("Access denied for tenant analytics", {"tenantId": tenant_id})

    def build_weekly_analytics(self, tenant_id: str) -> Dict[str, Any]:
        """Daily compute/storage/egress for the pinned week plus summary statistics"""
        self._authorize_analytics(tenant_id)

        compute_data, storage_data, egress_data, points = [], [], [], []
        days = [ANALYTICS_WINDOW_START + timedelta(days=i) for i in range(ANALYTICS_WINDOW_DAYS)]

        for index, day in enumerate(days):
            multiplier = weekly_compute_multiplier(day, index, self.rng)
            noise = self.rng.random() * 30 - 15
            compute = max(WEEKLY_MIN_COMPUTE, round_half_up(WEEKLY_BASE_COMPUTE * multiplier + noise))
            # Secondary metrics are steady and independent of the weekday
            storage = self.rng.randrange(420, 500)
            egress = self.rng.randrange(25, 60)

            iso_day = day.isoformat()
            stamp = day_timestamp(day)
            label = day_label(day)
            compute_data.append({"date": iso_day, "label": label, "value": compute, "timestamp": stamp})
            storage_data.append({"date": iso_day, "label": label, "value": storage, "timestamp": stamp})
            egress_data.append({"date": iso_day, "label": label, "value": egress, "timestamp": stamp})
            points.append({"date": iso_day, "compute": compute, "storage": storage, "egress": egress})

        return {
            "tenantId": tenant_id,
            "period": "week",
            "dateRange": {"from": days[0].isoformat(), "to": days[-1].isoformat()},
            "metrics": {"compute": compute_data, "storage": storage_data, "egress": egress_data},
            "summary": summarize_points(points),
        }

    async def get_tenant_usage_analytics(self, tenant_id: str) -> Dict[str, Any]:
        return await self.call_logger.request(
            "GET", f"/usage/analytics/{tenant_id}", None,
            lambda: self.build_weekly_analytics(tenant_id),
        )

    def generate_daily_points(self, days: int, today: Optional[date] = None) -> List[Dict[str, Any]]:
        """Trailing ``days`` of synthetic usage ending today, oldest first"""
        today = today or self._today()
        points = []
        for days_ago in range(days - 1, -1, -1):
            day = today - timedelta(days=days_ago)
            multiplier = generated_compute_multiplier(day, days_ago, self.rng)
            noise = self.rng.random() * 30 - 15
            compute = max(GENERATED_MIN_COMPUTE, round_half_up(GENERATED_BASE_COMPUTE * multiplier + noise))
            points.append({
                "date": day.isoformat(),
                "label": day_label(day),
                "compute": compute,
                "storage": self.rng.randrange(420, 500),
                "egress": self.rng.randrange(15, 55),
            })
        return points

    def generate_period_series(self, period: str = "week", today: Optional[date] = None) -> List[Dict[str, Any]]:
        if period not in PERIOD_DAYS:
            raise ValidationError(f"Unsupported period: {period}")
        return self.generate_daily_points(PERIOD_DAYS[period], today)

    async def get_usage_chart(self, tenant_id: str, period: str = "week") -> Dict[str, Any]:
        """Weekly analytics when available, generated trailing data otherwise"""
        try:
            analytics = await self.get_tenant_usage_analytics(tenant_id)
        except ApiError as e:
            logger.warning(f"Analytics unavailable for {tenant_id}, using generated data: {e.message}")
            points = self.generate_period_series(period)
            return {
                "tenantId": tenant_id,
                "source": "generated",
                "period": period,
                "points": points,
                "summary": summarize_points(points),
                "error": e.message,
            }

        metrics = analytics["metrics"]
        points = [
            {
                "date": compute["date"],
                "label": compute["label"],
                "compute": compute["value"],
                "storage": metrics["storage"][i]["value"],
                "egress": metrics["egress"][i]["value"],
            }
            for i, compute in enumerate(metrics["compute"])
        ]
        return {
            "tenantId": tenant_id,
            "source": "analytics",
            "period": analytics["period"],
            "points": points,
            "summary": analytics["summary"],
        }

    def usage_summary(self, tenant_id: Optional[str], range_key: str) -> Dict[str, Any]:
        if range_key not in USAGE_RANGES:
            raise ValidationError(f"Unsupported usage range: {range_key}")
        days = USAGE_RANGES[range_key]
        points = self.generate_daily_points(days)
        active_sessions = self.rng.randint(3, 20)

        return {
            "tenantId": tenant_id or self.distinguished_tenant,
            "range": range_key,
            "metrics": {
                "dcv.sessions.active": active_sessions,
                "dcv.sessions.total": active_sessions + self.rng.randint(days * 5, days * 20),
                "compute.hours": sum(p["compute"] for p in points),
                "storage.gb": points[-1]["storage"],
                "egress.gb": sum(p["egress"] for p in points),
            },
            "updatedAt": format_timestamp(self._clock()),
        }

    async def get_usage(self, tenant_id: Optional[str] = None, range_key: str = "7d") -> Dict[str, Any]:
        return await self.call_logger.request(
            "GET", "/usage", {"params": {"tenantId": tenant_id, "range": range_key}},
            lambda: self.usage_summary(tenant_id, range_key),
        )

    def usage_series(self, start: datetime, end: datetime) -> List[Dict[str, Any]]:
        step = (end - start) / SERIES_STEPS
        return [
            {"ts": format_timestamp(start + step * i), "value": self.rng.randrange(100)}
            for i in range(SERIES_STEPS)
        ]

    async def get_usage_series(self, metric: str, start: datetime, end: datetime,
                               tenant_id: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {
            "tenantId": tenant_id,
            "metric": metric,
            "from": format_timestamp(start),
            "to": format_timestamp(end),
        }
        return await self.call_logger.request(
            "GET", "/usage/series", params, lambda: self.usage_series(start, end)
        )

    def platform_totals(self) -> Dict[str, int]:
        tenant_count = len(self.tenant_manager.store.list())
        return {
            "totalSessions": tenant_count * self.rng.randint(20, 69),
            "totalCompute": tenant_count * self.rng.randint(50, 149),
            "totalStorage": tenant_count * self.rng.randint(100, 299),
            "totalEgress": tenant_count * self.rng.randint(30, 109),
            "totalTenants": tenant_count,
        }

    async def get_usage_analytics(self) -> Dict[str, int]:
        return await self.call_logger.request("GET", "/usage/analytics", None, self.platform_totals)

    def tenant_user_stats(self, tenant_id: str) -> Dict[str, Any]:
        users = self.user_directory.users.get(tenant_id, [])
        now = self._clock()
        breakdown = [
            {
                **user.to_dict(),
                "computeHours": self.rng.randint(10, 109),
                "storageGB": self.rng.randint(5, 54),
                "egressGB": self.rng.randint(2, 21),
                "lastActivity": format_timestamp(now - timedelta(seconds=self.rng.random() * 7 * 24 * 3600)),
            }
            for user in users
        ]
        return {
            "totalUsers": len(users),
            "activeUsers": len([u for u in users if u.status == UserStatus.ACTIVE]),
            "totalComputeHours": sum(row["computeHours"] for row in breakdown),
            "totalStorageGB": sum(row["storageGB"] for row in breakdown),
            "totalEgressGB": sum(row["egressGB"] for row in breakdown),
            "userBreakdown": breakdown,
        }

    async def get_tenant_user_stats(self, tenant_id: str) -> Dict[str, Any]:
        return await self.call_logger.request(
            "GET", f"/usage/analytics/{tenant_id}/users", {},
            lambda: self.tenant_user_stats(tenant_id),
        )

    def user_usage_history(self, user_id: str, range_key: str) -> Dict[str, Any]:
        if range_key not in HISTORY_RANGES:
            raise ValidationError(f"Unsupported history range: {range_key}")
        today = self._today()
        daily_stats = []
        for days_ago in range(HISTORY_RANGES[range_key] - 1, -1, -1):
            day = today - timedelta(days=days_ago)
            daily_stats.append({
                "date": day.isoformat(),
                "sessions": self.rng.randint(1, 8),
                "computeHours": self.rng.randint(2, 13),
                "storageGB": self.rng.randint(1, 5),
                "egressGB": self.rng.randrange(3) + 0.5,
            })

        return {
            "userId": user_id,
            "range": range_key,
            "totalSessions": sum(d["sessions"] for d in daily_stats),
            "totalComputeHours": sum(d["computeHours"] for d in daily_stats),
            "totalStorageGB": sum(d["storageGB"] for d in daily_stats),
            "totalEgressGB": sum(d["egressGB"] for d in daily_stats),
            "dailyStats": daily_stats,
        }

    async def get_user_usage_history(self, user_id: str, range_key: str = "30d") -> Dict[str, Any]:
        return await self.call_logger.request(
            "GET", f"/users/{user_id}/usage", {"range": range_key},
            lambda: self.user_usage_history(user_id, range_key),
        )
