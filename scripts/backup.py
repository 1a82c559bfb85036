"""Back up tenant CSV files once, without starting the web app.

Usage:
    python scripts/backup.py              # every tenant under DATA_DIR
    python scripts/backup.py acme globex  # only the given tenants
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.contribution_tracker.contribution_tracker.container import build_container
from src.contribution_tracker.contribution_tracker.core.exceptions import StorageError


def main(argv: list[str]) -> int:
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(logging, str(getattr(settings, "LOG_LEVEL", "INFO")).upper(), logging.INFO))
    container = build_container(storage_config=settings.STORAGE_CONFIG)
    service = container.backup_service

    if argv:
        failed = 0
        for tenant_id in argv:
            try:
                results = service.create_tenant_backups(tenant_id)
            except StorageError as e:
                print(f"FAILED: [{tenant_id}] {e}")
                failed += 1
                continue
            for r in results:
                status = "OK" if r.success else "FAILED"
                detail = r.backup.file_name if r.backup else r.error
                print(f"{status}: [{tenant_id}] {r.file}: {detail}")
            failed += sum(1 for r in results if not r.success)
        return 1 if failed else 0

    sweep = service.create_all_backups()
    for tenant in sweep:
        if tenant.error:
            print(f"FAILED: [{tenant.tenant_id}] {tenant.error}")
        else:
            print(f"OK: [{tenant.tenant_id}] {tenant.successful} backed up, {tenant.failed} failed")
    return 1 if any(t.error or t.failed for t in sweep) else 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
