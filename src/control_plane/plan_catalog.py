"""
Subscription plan catalog with default entitlements and billing terms
"""

import copy
import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .errors import NotFoundError
from .models import IsolationModel

logger = logging.getLogger(__name__)


class BillingModel(Enum):
    FREE = "free"
    FLAT = "flat"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Plan:
    """Catalog entry; immutable at runtime"""
    plan_id: str
    display_name: str
    default_isolation: IsolationModel
    default_entitlements: Dict[str, Any]
    billing_model: BillingModel
    base_price: Decimal
    currency: str
    feature_flags: Tuple[str, ...]

    def entitlement_defaults(self) -> Dict[str, Any]:
        """Fresh copy of the default bundle, safe to mutate"""
        return copy.deepcopy(self.default_entitlements)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "planId": self.plan_id,
            "displayName": self.display_name,
            "defaults": {
                "isolationModel": self.default_isolation.value,
                "entitlements": self.entitlement_defaults(),
            },
            "billing": {
                "model": self.billing_model.value,
                "base": float(self.base_price),
                "currency": self.currency,
            },
            "featureFlags": list(self.feature_flags),
        }


def _initialize_plans() -> List[Plan]:
    """Standard plans in catalog order"""
    return [
        Plan(
            plan_id="trial",
            display_name="Trial",
            default_isolation=IsolationModel.POOLED,
            default_entitlements={
                "dcv.maxSessions": 2,
                "dcv.gpuClass": "none",
                "session.maxDurationMin": 60,
                "storage.gb": 10,
                "egress.gbPerMonth": 5,
            },
            billing_model=BillingModel.FREE,
            base_price=Decimal("0"),
            currency="USD",
            feature_flags=(),
        ),
        Plan(
            plan_id="starter",
            display_name="Starter",
            default_isolation=IsolationModel.POOLED,
            default_entitlements={
                "dcv.maxSessions": 10,
                "dcv.gpuClass": "none",
                "session.maxDurationMin": 240,
                "storage.gb": 100,
                "egress.gbPerMonth": 50,
            },
            billing_model=BillingModel.FLAT,
            base_price=Decimal("49.00"),
            currency="USD",
            feature_flags=(),
        ),
        Plan(
            plan_id="pro",
            display_name="Professional",
            default_isolation=IsolationModel.SILO_IN_VPC,
            default_entitlements={
                "dcv.maxSessions": 50,
                "dcv.gpuClass": "g4dn.xlarge",
                "session.maxDurationMin": 480,
                "storage.gb": 500,
                "egress.gbPerMonth": 250,
            },
            billing_model=BillingModel.FLAT,
            base_price=Decimal("199.00"),
            currency="USD",
            feature_flags=("DedicatedSubnet",),
        ),
        Plan(
            plan_id="enterprise",
            display_name="Enterprise",
            default_isolation=IsolationModel.SILO_ACCOUNT,
            default_entitlements={
                "dcv.maxSessions": 200,
                "dcv.gpuClass": "g5.2xlarge",
                "session.maxDurationMin": 1440,
                "storage.gb": 5000,
                "egress.gbPerMonth": 2000,
            },
            billing_model=BillingModel.CUSTOM,
            base_price=Decimal("0"),
            currency="USD",
            feature_flags=("BYOK", "DedicatedSubnet", "WhiteGlove"),
        ),
    ]


class PlanCatalog:
    """Read-only registry of subscription plans"""

    def __init__(self, plans: Optional[List[Plan]] = None):
        self._plans: Tuple[Plan, ...] = tuple(plans if plans is not None else _initialize_plans())
        self._by_id: Dict[str, Plan] = {plan.plan_id: plan for plan in self._plans}

    def list(self) -> List[Plan]:
        return list(self._plans)

    def find(self, plan_id: Optional[str]) -> Optional[Plan]:
        if plan_id is None:
            return None
        return self._by_id.get(plan_id)

    def get(self, plan_id: str) -> Plan:
        plan = self.find(plan_id)
        if plan is None:
            logger.warning(f"Plan lookup failed for {plan_id}")
            raise NotFoundError("Plan not found", {"planId": plan_id})
        return plan

    def default_plan(self) -> Plan:
        """First catalog entry, used when a request names an unknown plan"""
        return self._plans[0]

    def resolve(self, plan_id: Optional[str]) -> Plan:
        return self.find(plan_id) or self.default_plan()
