from __future__ import annotations

import json

import pytest

from src.contribution_tracker.contribution_tracker.core.enums import EntityFile, ErrorKind
from src.contribution_tracker.contribution_tracker.core.exceptions import StorageError
from src.contribution_tracker.contribution_tracker.storage.paths import TenantPathResolver


def test_resolve_provisions_tenant_directory(resolver, data_dir):
    path = resolver.resolve("acme", "employees.csv")

    assert path == data_dir / "acme" / "employees.csv"
    for f in EntityFile:
        seeded = data_dir / "acme" / f.value
        assert seeded.is_file()
        assert seeded.read_text() == ""

    marker = json.loads((data_dir / "acme" / "tenant.json").read_text())
    assert marker["tenant_id"] == "acme"
    assert marker["created_at"]


def test_provision_twice_is_idempotent(resolver, data_dir):
    resolver.provision("acme")
    (data_dir / "acme" / "employees.csv").write_text("employee_id,name\ne1,Ann\n")

    # a fresh resolver has no cache, so this really re-runs provisioning
    TenantPathResolver(data_dir).provision("acme")

    files = sorted(p.name for p in (data_dir / "acme").iterdir())
    assert files == sorted([f.value for f in EntityFile] + ["tenant.json"])
    assert (data_dir / "acme" / "employees.csv").read_text() == "employee_id,name\ne1,Ann\n"


def test_padded_tenant_id_is_stored_trimmed(resolver, data_dir):
    path = resolver.resolve(" acme ", "employees.csv")

    assert path == data_dir / "acme" / "employees.csv"
    marker = json.loads((data_dir / "acme" / "tenant.json").read_text())
    assert marker["tenant_id"] == "acme"


@pytest.mark.parametrize("tenant_id", ["..", "../other", "a/b", "a\\b", ".hidden", "", "   ", None, "x" * 65])
def test_invalid_tenant_ids_are_rejected(resolver, data_dir, tenant_id):
    with pytest.raises(StorageError) as exc:
        resolver.resolve(tenant_id, "employees.csv")

    assert exc.value.kind == ErrorKind.VALIDATION
    assert not data_dir.exists()


@pytest.mark.parametrize("file_name", ["../employees.csv", "sub/employees.csv", "..", "tenant.json", ""])
def test_invalid_file_names_are_rejected(resolver, file_name):
    with pytest.raises(StorageError) as exc:
        resolver.resolve("acme", file_name)

    assert exc.value.kind == ErrorKind.VALIDATION


def test_tenant_dir_has_no_side_effects(resolver, data_dir):
    assert resolver.tenant_dir("acme") == data_dir / "acme"
    assert not (data_dir / "acme").exists()


def test_provision_recreates_deleted_directory(resolver, data_dir):
    resolver.provision("acme")
    for p in (data_dir / "acme").iterdir():
        p.unlink()
    (data_dir / "acme").rmdir()

    resolver.resolve("acme", "kudos.csv")

    assert (data_dir / "acme" / "kudos.csv").is_file()


def test_directory_creation_failure_surfaces_as_io_failure(tmp_path):
    blocker = tmp_path / "data"
    blocker.write_text("not a directory")

    with pytest.raises(StorageError) as exc:
        TenantPathResolver(blocker).provision("acme")

    assert exc.value.kind == ErrorKind.IO_FAILURE
