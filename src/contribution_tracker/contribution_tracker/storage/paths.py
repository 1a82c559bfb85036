from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Callable, Iterable, List, Set, Tuple

from ..common.datetime_utils import to_iso, utc_now
from ..common.validators import require_plain_name, require_tenant_id
from ..core.constants import TENANT_METADATA_FILE
from ..core.enums import EntityFile
from ..core.exceptions import io_failure, validation_failure

logger = logging.getLogger(__name__)


class TenantPathResolver:
    """Maps (tenant, logical file name) to a file inside ``data_dir/<tenant>/``.

    The first resolution for a tenant provisions its directory: the directory
    is created, every known entity file is seeded empty and the ``tenant.json``
    marker is written. Provisioning is idempotent and never truncates
    existing files.
    """

    def __init__(
        self,
        data_dir: Path,
        *,
        entity_files: Iterable[str] = tuple(f.value for f in EntityFile),
        clock: Callable = utc_now,
    ):
        self._root = Path(data_dir)
        self._entity_files = tuple(entity_files)
        self._clock = clock
        self._provisioned: Set[str] = set()
        self._lock = threading.Lock()

    @property
    def data_dir(self) -> Path:
        return self._root

    @property
    def entity_files(self) -> Tuple[str, ...]:
        return self._entity_files

    def tenant_dir(self, tenant_id: str) -> Path:
        tenant_id = require_tenant_id(tenant_id)
        path = self._root / tenant_id
        root = self._root.resolve()
        if path.resolve().parent != root:
            raise validation_failure(f"Tenant {tenant_id!r} escapes the data directory", field="tenant_id")
        return path

    def metadata_path(self, tenant_id: str) -> Path:
        return self.tenant_dir(tenant_id) / TENANT_METADATA_FILE

    def resolve(self, tenant_id: str, file_name: str) -> Path:
        file_name = require_plain_name(file_name, "file_name")
        if file_name == TENANT_METADATA_FILE:
            raise validation_failure(f"{file_name} is reserved", field="file_name")
        return self.provision(tenant_id) / file_name

    def entity_paths(self, tenant_id: str) -> List[Tuple[str, Path]]:
        base = self.tenant_dir(tenant_id)
        return [(name, base / name) for name in self._entity_files]

    def provision(self, tenant_id: str) -> Path:
        tenant_id = require_tenant_id(tenant_id)
        base = self.tenant_dir(tenant_id)
        with self._lock:
            if tenant_id in self._provisioned and base.is_dir():
                return base

            created = not base.is_dir()
            try:
                base.mkdir(parents=True, exist_ok=True)
                for name in self._entity_files:
                    (base / name).touch(exist_ok=True)
                self._write_marker(base / TENANT_METADATA_FILE, tenant_id)
            except OSError as e:
                logger.error("Tenant provisioning failed for %s: %s", tenant_id, e)
                raise io_failure(f"Failed to provision tenant {tenant_id}: {e}", path=str(base)) from e

            self._provisioned.add(tenant_id)

        if created:
            logger.info("Created data directory for new tenant %s at %s", tenant_id, base)
        return base

    def forget(self, tenant_id: str) -> None:
        """Drop the provisioning cache entry (used after a tenant is deleted)."""
        tenant_id = require_tenant_id(tenant_id)
        with self._lock:
            self._provisioned.discard(tenant_id)

    def _write_marker(self, path: Path, tenant_id: str) -> None:
        if path.exists():
            return
        payload = {
            "tenant_id": tenant_id,
            "name": "",
            "description": "",
            "contact_email": "",
            "created_at": to_iso(self._clock()),
        }
        try:
            with path.open("x", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
        except FileExistsError:
            pass
