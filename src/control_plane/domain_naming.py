"""
Deterministic tenant domain names derived from tenant name and plan
"""

import re
from typing import Dict, Optional

DEFAULT_DOMAIN_SUFFIX = "ediworks.com"
FALLBACK_PREFIX = "t"

PLAN_PREFIXES: Dict[str, str] = {
    "trial": "t",
    "starter": "s",
    "pro": "p",
    "enterprise": "e",
}

PREFIX_TO_PLAN: Dict[str, str] = {prefix: plan for plan, prefix in PLAN_PREFIXES.items()}

_PREFIX_PATTERN = re.compile(r"^([a-z])-")


def get_plan_prefix(plan_id: Optional[str]) -> str:
    """One-letter plan code; unknown plans fall back to the trial prefix"""
    return PLAN_PREFIXES.get(plan_id or "", FALLBACK_PREFIX)


def generate_tenant_domain(tenant_name: str, plan_id: Optional[str],
                           suffix: str = DEFAULT_DOMAIN_SUFFIX) -> str:
    return f"{get_plan_prefix(plan_id)}-{tenant_name}.{suffix}"


def get_plan_from_domain(domain: str) -> Optional[str]:
    match = _PREFIX_PATTERN.match(domain)
    if not match:
        return None
    return PREFIX_TO_PLAN.get(match.group(1))


def extract_tenant_name_from_domain(domain: str, suffix: str = DEFAULT_DOMAIN_SUFFIX) -> Optional[str]:
    match = re.match(rf"^[a-z]-(.*?)\.{re.escape(suffix)}$", domain)
    return match.group(1) if match else None


class DomainNamer:
    """Domain naming bound to one configured suffix"""

    def __init__(self, suffix: str = DEFAULT_DOMAIN_SUFFIX):
        self.suffix = suffix

    def derive(self, tenant_name: str, plan_id: Optional[str]) -> str:
        return generate_tenant_domain(tenant_name, plan_id, self.suffix)

    def plan_of(self, domain: str) -> Optional[str]:
        return get_plan_from_domain(domain)

    def tenant_name_of(self, domain: str) -> Optional[str]:
        return extract_tenant_name_from_domain(domain, self.suffix)

    def bare(self, subdomain: str) -> str:
        """Domain for an explicitly chosen subdomain, no plan prefix"""
        return f"{subdomain}.{self.suffix}"
