from __future__ import annotations

import pytest

from src.contribution_tracker.contribution_tracker.core.enums import EntityFile, ErrorKind
from src.contribution_tracker.contribution_tracker.core.exceptions import StorageError


def _seed(container, tenant_id):
    container.tenant_store.append_entity(tenant_id, "employees.csv", {"employee_id": "e1", "name": "Ann", "email": "a@x.com"})


def test_tenant_backup_covers_every_entity_file(container, backup_dir):
    _seed(container, "acme")

    results = container.backup_service.create_tenant_backups("acme")

    assert [r.file for r in results] == [f.value for f in EntityFile]
    assert all(r.success for r in results)
    assert {p.parent for p in backup_dir.rglob("*.backup-*")} == {backup_dir / "acme"}


def test_missing_entity_file_fails_alone(container, data_dir):
    _seed(container, "acme")
    (data_dir / "acme" / "kudos.csv").unlink()

    results = {r.file: r for r in container.backup_service.create_tenant_backups("acme")}

    assert results["kudos.csv"].success is False
    assert "does not exist" in results["kudos.csv"].error
    assert all(r.success for name, r in results.items() if name != "kudos.csv")


def test_unknown_tenant_backup_is_not_found(container, backup_dir):
    with pytest.raises(StorageError) as exc:
        container.backup_service.create_tenant_backups("ghost")

    assert exc.value.kind == ErrorKind.NOT_FOUND
    assert not (backup_dir / "ghost").exists()


def test_sweep_only_covers_tenants_with_metadata(container, data_dir):
    _seed(container, "acme")
    _seed(container, "globex")
    (data_dir / "not-a-tenant").mkdir()
    (data_dir / "stray.txt").write_text("x")

    sweep = container.backup_service.create_all_backups()

    assert [t.tenant_id for t in sweep] == ["acme", "globex"]
    assert all(t.error is None and t.failed == 0 for t in sweep)
    assert all(t.successful == len(EntityFile) for t in sweep)


def test_sweep_continues_after_tenant_failure(container, monkeypatch):
    _seed(container, "acme")
    _seed(container, "globex")
    service = container.backup_service
    real = service.create_tenant_backups

    def failing(tenant_id):
        if tenant_id == "acme":
            raise RuntimeError("boom")
        return real(tenant_id)

    monkeypatch.setattr(service, "create_tenant_backups", failing)

    sweep = {t.tenant_id: t for t in service.create_all_backups()}

    assert sweep["acme"].error == "boom"
    assert sweep["acme"].to_dict() == {"error": "boom"}
    assert sweep["globex"].error is None
    assert sweep["globex"].successful == len(EntityFile)


def test_restore_round_trip(container):
    _seed(container, "acme")
    results = container.backup_service.create_tenant_backups("acme")
    backup = next(r.backup for r in results if r.file == "employees.csv")

    container.tenant_store.append_entity("acme", "employees.csv", {"employee_id": "e2", "name": "Bob"})
    container.backup_service.restore_backup("acme", backup.file_name, "employees.csv")

    assert [r["employee_id"] for r in container.tenant_store.read_entities("acme", "employees.csv")] == ["e1"]


def test_restore_is_tenant_scoped(container):
    _seed(container, "acme")
    _seed(container, "globex")
    acme_backup = next(
        r.backup for r in container.backup_service.create_tenant_backups("acme") if r.file == "employees.csv"
    )

    with pytest.raises(StorageError) as exc:
        container.backup_service.restore_backup("globex", acme_backup.file_name, "employees.csv")

    assert exc.value.kind == ErrorKind.NOT_FOUND


def test_restore_validates_before_touching_disk(container, data_dir):
    with pytest.raises(StorageError) as exc:
        container.backup_service.restore_backup("fresh", "", "employees.csv")
    assert exc.value.kind == ErrorKind.VALIDATION

    with pytest.raises(StorageError) as exc:
        container.backup_service.restore_backup("fresh", "employees.csv.backup-x", None)
    assert exc.value.kind == ErrorKind.VALIDATION

    assert not (data_dir / "fresh").exists()


def test_list_and_verify(container):
    _seed(container, "acme")
    results = container.backup_service.create_tenant_backups("acme")

    listed = container.backup_service.list_backups("acme")
    assert sorted(b.file_name for b in listed) == sorted(r.backup.file_name for r in results)
    assert container.backup_service.list_backups("globex") == []

    backup = results[0].backup
    assert container.backup_service.verify_backup("acme", backup.file_name, backup.checksum) is True
    assert container.backup_service.verify_backup("acme", backup.file_name, "0" * 32) is False
