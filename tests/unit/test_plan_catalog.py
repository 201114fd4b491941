"""
Unit tests for the plan catalog and domain naming
"""

import pytest

from src.control_plane.domain_naming import (
    DomainNamer, extract_tenant_name_from_domain, generate_tenant_domain,
    get_plan_from_domain, get_plan_prefix
)
from src.control_plane.errors import NotFoundError
from src.control_plane.models import BASELINE_ENTITLEMENT_KEYS, IsolationModel
from src.control_plane.plan_catalog import BillingModel, PlanCatalog


class TestPlanCatalog:
    """Unit tests for PlanCatalog class"""

    @pytest.fixture
    def catalog(self):
        return PlanCatalog()

    def test_catalog_order(self, catalog):
        assert [p.plan_id for p in catalog.list()] == ["trial", "starter", "pro", "enterprise"]
        assert catalog.find("pro") is not None

    def test_every_plan_defines_baseline_entitlements(self, catalog):
        for plan in catalog.list():
            assert set(BASELINE_ENTITLEMENT_KEYS) <= set(plan.default_entitlements)

    def test_plan_defaults(self, catalog):
        pro = catalog.get("pro")
        assert pro.default_isolation == IsolationModel.SILO_IN_VPC
        assert pro.default_entitlements["dcv.gpuClass"] == "g4dn.xlarge"
        assert pro.feature_flags == ("DedicatedSubnet",)

        enterprise = catalog.get("enterprise")
        assert enterprise.billing_model == BillingModel.CUSTOM
        assert enterprise.default_entitlements["dcv.maxSessions"] == 200

    def test_entitlement_defaults_are_copies(self, catalog):
        defaults = catalog.get("trial").entitlement_defaults()
        defaults["dcv.maxSessions"] = 999
        assert catalog.get("trial").default_entitlements["dcv.maxSessions"] == 2

    def test_unknown_plan(self, catalog):
        assert catalog.find("platinum") is None
        with pytest.raises(NotFoundError) as exc_info:
            catalog.get("platinum")
        assert exc_info.value.status == 404

    def test_resolve_falls_back_to_first_plan(self, catalog):
        assert catalog.resolve("platinum").plan_id == "trial"
        assert catalog.resolve(None).plan_id == "trial"
        assert catalog.resolve("starter").plan_id == "starter"

    def test_to_dict(self, catalog):
        data = catalog.get("starter").to_dict()
        assert data["planId"] == "starter"
        assert data["defaults"]["isolationModel"] == "Pooled"
        assert data["billing"] == {"model": "flat", "base": 49.0, "currency": "USD"}
        assert data["featureFlags"] == []


class TestDomainNaming:
    """Unit tests for tenant domain derivation"""

    def test_plan_prefixes(self):
        assert get_plan_prefix("trial") == "t"
        assert get_plan_prefix("starter") == "s"
        assert get_plan_prefix("pro") == "p"
        assert get_plan_prefix("enterprise") == "e"
        assert get_plan_prefix("platinum") == "t"
        assert get_plan_prefix(None) == "t"

    def test_generate_domain(self):
        assert generate_tenant_domain("acme", "pro") == "p-acme.ediworks.com"
        assert generate_tenant_domain("acme", "trial") == "t-acme.ediworks.com"
        assert generate_tenant_domain("acme", "unknown") == "t-acme.ediworks.com"

    def test_domain_inverse(self):
        for plan in ("trial", "starter", "pro", "enterprise"):
            domain = generate_tenant_domain("my-co", plan)
            assert get_plan_from_domain(domain) == plan
            assert extract_tenant_name_from_domain(domain) == "my-co"

    def test_unparseable_domains(self):
        assert get_plan_from_domain("acme.ediworks.com") is None
        assert get_plan_from_domain("x-acme.ediworks.com") is None
        assert extract_tenant_name_from_domain("p-acme.example.org") is None

    def test_namer_with_custom_suffix(self):
        namer = DomainNamer("console.test")
        domain = namer.derive("globex", "enterprise")
        assert domain == "e-globex.console.test"
        assert namer.plan_of(domain) == "enterprise"
        assert namer.tenant_name_of(domain) == "globex"
        assert namer.bare("portal") == "portal.console.test"
