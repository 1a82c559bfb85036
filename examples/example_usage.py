"""Example: use the storage layer directly (no Flask).

Appends two employees for tenant 'acme', reads them back, then backs the
tenant up and verifies the employees snapshot.
"""

import importlib

from config import get_settings_module

from src.contribution_tracker.contribution_tracker.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(storage_config=settings.STORAGE_CONFIG)
    store = container.tenant_store

    store.append_entity("acme", "employees.csv", {"employee_id": "e1", "name": "Ann", "email": "a@x.com"})
    store.append_entity("acme", "employees.csv", {"employee_id": "e2", "name": "Bob", "email": "b@x.com"})
    print(store.read_entities("acme", "employees.csv"))

    results = container.backup_service.create_tenant_backups("acme")
    employees = next(r for r in results if r.file == "employees.csv")
    print(employees.backup.to_dict())
    print(container.backup_service.verify_backup("acme", employees.backup.file_name, employees.backup.checksum))


if __name__ == "__main__":
    main()
