"""
Unit tests for the console session, configuration loading and request validation
"""

import pytest

from src.control_plane.bootstrap import build_backend
from src.control_plane.config import ControlPlaneConfig, load_config
from src.control_plane.errors import ValidationError
from src.control_plane.kv_store import FileKeyValueStore, InMemoryKeyValueStore
from src.control_plane.models import PlatformRole
from src.control_plane.schemas import (
    CreateTenantRequest, find_create_request_problems, validate_create_request
)
from src.control_plane.session import ConsoleSession
from src.control_plane.tenant_store import TenantStore
from tests.fixtures.sample_data import individual_request, org_request


class TestConsoleSession:
    """Unit tests for ConsoleSession class"""

    @pytest.fixture
    def store(self):
        return TenantStore(InMemoryKeyValueStore())

    def test_signed_out_by_default(self, store):
        session = ConsoleSession(store)
        assert not session.is_authenticated()
        assert not session.has_permission("read")

    def test_admin_can_write(self, store):
        session = ConsoleSession(store)
        user = session.login(PlatformRole.PLATFORM_ADMIN)

        assert user.email == "admin@ediworks.local"
        assert session.has_permission("read")
        assert session.has_permission("write")

    def test_reviewer_is_read_only(self, store):
        session = ConsoleSession(store)
        session.login("REVIEWER")

        assert session.get_user().email == "reviewer@ediworks.local"
        assert session.has_permission("read")
        assert not session.has_permission("write")

    def test_login_survives_new_session(self, store):
        ConsoleSession(store).login(PlatformRole.REVIEWER)

        restored = ConsoleSession(store).get_user()
        assert restored.sub == "local-user-001"
        assert restored.platform_role == PlatformRole.REVIEWER

    def test_logout(self, store):
        session = ConsoleSession(store)
        session.login()
        session.logout()

        assert not session.is_authenticated()
        assert not ConsoleSession(store).is_authenticated()

    def test_reset_clears_user_and_tenants(self, store):
        session = ConsoleSession(store)
        session.login()
        store.put(store.list()[:1])

        session.reset()

        assert not session.is_authenticated()
        assert len(store.list()) == 5


class TestConfig:

    def test_defaults_when_file_missing(self, tmp_path):
        config = load_config(str(tmp_path / "missing.yaml"))
        assert config == ControlPlaneConfig()

    def test_load_from_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "storage:\n"
            "  backend: file\n"
            f"  path: {tmp_path / 'data'}\n"
            "domain:\n"
            "  suffix: console.test\n"
            "analytics:\n"
            "  seed: 7\n"
            "latency:\n"
            "  scale: 0\n"
            "logging:\n"
            "  level: debug\n"
        )
        config = load_config(str(path))

        assert config.storage_backend == "file"
        assert config.domain_suffix == "console.test"
        assert config.random_seed == 7
        assert config.latency_scale == 0.0
        assert config.log_level == "DEBUG"
        assert config.distinguished_tenant == "acme"
        assert config.max_call_log_entries == 50

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(str(path)) == ControlPlaneConfig()

    def test_build_backend(self, tmp_path):
        file_config = ControlPlaneConfig(storage_backend="file", storage_path=str(tmp_path / "kv"))
        assert isinstance(build_backend(file_config), FileKeyValueStore)
        assert isinstance(build_backend(ControlPlaneConfig()), InMemoryKeyValueStore)
        assert isinstance(build_backend(ControlPlaneConfig(storage_backend="redis")), InMemoryKeyValueStore)


class TestCreateRequestValidation:

    def test_valid_requests(self):
        assert find_create_request_problems(org_request()) == []
        assert find_create_request_problems(individual_request()) == []

    def test_defaults(self):
        request = CreateTenantRequest(tenantName="solo")
        assert request.tenant_type == "ORG"
        assert request.plan == "trial"
        assert request.isolation_model == "Pooled"
        assert request.region == "ap-northeast-2"

    def test_missing_fields(self):
        request = CreateTenantRequest(tenantName=" ", contact={"email": "nobody"})
        problems = find_create_request_problems(request)

        assert "tenantName is required" in problems
        assert "contact.email must be an email address" in problems
        assert "orgProfile.legalEntity is required for organizations" in problems

    def test_individual_needs_no_legal_entity(self):
        request = CreateTenantRequest(tenantType="INDIVIDUAL", tenantName="solo", contact={"email": ""})
        assert find_create_request_problems(request) == ["contact.email is required"]

    def test_validate_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_create_request(CreateTenantRequest(tenantName="x"))
        assert exc_info.value.status == 400
        assert "contact.email is required" in exc_info.value.details["fields"]
