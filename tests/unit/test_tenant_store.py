"""
Unit tests for key-value backends and the tenant store
"""

import json

import pytest

from src.control_plane.errors import NotFoundError
from src.control_plane.kv_store import FileKeyValueStore, InMemoryKeyValueStore
from src.control_plane.models import TenantStatus
from src.control_plane.tenant_store import CURRENT_USER_KEY, TENANTS_KEY, TenantStore
from tests.fixtures.sample_data import SEEDED_TENANT_IDS


class TestKeyValueStores:

    def test_in_memory_store(self):
        backend = InMemoryKeyValueStore({"a": "1"})
        assert backend.get_item("a") == "1"
        assert backend.get_item("missing") is None

        backend.set_item("b", "2")
        backend.remove_item("a")
        backend.remove_item("never-set")
        assert backend.keys() == ["b"]

    def test_file_store_persists_across_instances(self, tmp_path):
        first = FileKeyValueStore(str(tmp_path / "store"))
        first.set_item("mock_tenants", "[]")

        second = FileKeyValueStore(str(tmp_path / "store"))
        assert second.get_item("mock_tenants") == "[]"

        second.remove_item("mock_tenants")
        assert first.get_item("mock_tenants") is None


class TestTenantStore:
    """Unit tests for TenantStore class"""

    @pytest.fixture
    def backend(self):
        return InMemoryKeyValueStore()

    def test_seeds_when_empty(self, backend):
        store = TenantStore(backend)
        assert [t.tenant_id for t in store.list()] == SEEDED_TENANT_IDS
        assert len(json.loads(backend.get_item(TENANTS_KEY))) == 5

    def test_reseeds_empty_collection(self, backend):
        backend.set_item(TENANTS_KEY, "[]")
        store = TenantStore(backend)
        assert len(store.list()) == 5

    def test_reseeds_undecodable_collection(self, backend):
        backend.set_item(TENANTS_KEY, "{not json")
        store = TenantStore(backend)
        assert len(store.list()) == 5

    def test_keeps_existing_collection(self, backend):
        store = TenantStore(backend)
        tenants = store.list()[:2]
        store.put(tenants)

        reopened = TenantStore(backend)
        assert [t.tenant_id for t in reopened.list()] == SEEDED_TENANT_IDS[:2]

    def test_get_and_find(self, backend):
        store = TenantStore(backend)
        acme = store.get("t-acme-7k2p")
        assert acme.tenant_name == "acme"
        assert acme.status == TenantStatus.READY
        assert store.find("t-nope-0000") is None

        with pytest.raises(NotFoundError) as exc_info:
            store.get("t-nope-0000")
        assert exc_info.value.message == "Tenant not found"

    def test_put_overwrites_whole_collection(self, backend):
        store = TenantStore(backend)
        tenants = store.list()
        tenants[0].status = TenantStatus.SUSPENDED
        store.put(tenants)

        assert store.get(tenants[0].tenant_id).status == TenantStatus.SUSPENDED

    def test_current_user_record(self, backend):
        store = TenantStore(backend)
        assert store.get_current_user_record() is None

        store.set_current_user_record({"sub": "local-user-001"})
        assert store.get_current_user_record() == {"sub": "local-user-001"}

        backend.set_item(CURRENT_USER_KEY, "garbage{")
        assert store.get_current_user_record() is None

        store.clear_current_user_record()
        assert backend.get_item(CURRENT_USER_KEY) is None

    def test_reset_restores_seed(self, backend):
        store = TenantStore(backend)
        store.put(store.list()[:1])
        store.set_current_user_record({"sub": "x"})

        store.reset()

        assert backend.get_item(CURRENT_USER_KEY) is None
        assert [t.tenant_id for t in store.list()] == SEEDED_TENANT_IDS
