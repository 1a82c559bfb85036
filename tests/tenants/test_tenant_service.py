from __future__ import annotations

import pytest

from src.contribution_tracker.contribution_tracker.core.enums import ErrorKind
from src.contribution_tracker.contribution_tracker.core.exceptions import StorageError
from src.contribution_tracker.contribution_tracker.tenants.service import TenantService


@pytest.fixture
def tenants(resolver) -> TenantService:
    return TenantService(resolver)


def test_implicit_tenant_is_discovered(tenants, store):
    store.append_entity("acme", "employees.csv", {"employee_id": "e1"})

    assert tenants.list_tenant_ids() == ["acme"]
    assert tenants.tenant_exists("acme")
    assert tenants.get_tenant("acme").name == ""


def test_provision_fills_in_metadata_and_keeps_created_at(tenants, resolver):
    resolver.provision("acme")
    created_at = tenants.get_tenant("acme").created_at

    tenant = tenants.provision_tenant("acme", name="Acme Corp", contact_email="hr@acme.test")

    assert tenant.name == "Acme Corp"
    assert tenant.contact_email == "hr@acme.test"
    assert tenant.created_at == created_at
    assert tenants.get_tenant("acme") == tenant

    again = tenants.provision_tenant("acme", description="Widgets")
    assert again.name == "Acme Corp"
    assert again.description == "Widgets"


def test_directories_without_marker_are_not_tenants(tenants, data_dir):
    (data_dir / "random").mkdir(parents=True)

    assert tenants.list_tenant_ids() == []
    assert not tenants.tenant_exists("random")


def test_list_without_data_dir(tenants):
    assert tenants.list_tenant_ids() == []
    assert tenants.list_tenants() == []


def test_unreadable_marker_still_lists_tenant(tenants, resolver, data_dir):
    resolver.provision("acme")
    (data_dir / "acme" / "tenant.json").write_text("{not json")

    assert [t.tenant_id for t in tenants.list_tenants()] == ["acme"]


def test_get_unknown_tenant_is_not_found(tenants):
    with pytest.raises(StorageError) as exc:
        tenants.get_tenant("nobody")

    assert exc.value.kind == ErrorKind.NOT_FOUND


def test_delete_removes_subtree_and_allows_reprovisioning(tenants, store, data_dir):
    store.append_entity("acme", "employees.csv", {"employee_id": "e1"})

    tenants.delete_tenant("acme")

    assert not (data_dir / "acme").exists()
    assert tenants.list_tenant_ids() == []
    assert store.read_entities("acme", "employees.csv") == []
    assert (data_dir / "acme" / "tenant.json").is_file()


def test_delete_unknown_tenant_is_not_found(tenants):
    with pytest.raises(StorageError) as exc:
        tenants.delete_tenant("nobody")

    assert exc.value.kind == ErrorKind.NOT_FOUND


def test_provision_rejects_bad_ids(tenants):
    with pytest.raises(StorageError) as exc:
        tenants.provision_tenant("../etc")

    assert exc.value.kind == ErrorKind.VALIDATION


def test_provision_rejects_non_string_fields(tenants, data_dir):
    with pytest.raises(StorageError) as exc:
        tenants.provision_tenant("acme", name=123)

    assert exc.value.kind == ErrorKind.VALIDATION
    assert exc.value.field == "name"
    assert not (data_dir / "acme").exists()
