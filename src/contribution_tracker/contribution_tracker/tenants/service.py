from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional

from ..common.validators import optional_text, require_tenant_id
from ..core.constants import TENANT_METADATA_FILE
from ..core.exceptions import io_failure, not_found
from ..storage.paths import TenantPathResolver
from .model import Tenant

logger = logging.getLogger(__name__)


class TenantService:
    """Directory-scan tenant registry.

    A tenant is a subdirectory of the data directory that carries a
    ``tenant.json`` marker. The resolver writes a bare marker on first use;
    ``provision_tenant`` fills in the descriptive fields.
    """

    def __init__(self, resolver: TenantPathResolver):
        self._resolver = resolver

    def provision_tenant(
        self,
        tenant_id: str,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        contact_email: Optional[str] = None,
    ) -> Tenant:
        tenant_id = require_tenant_id(tenant_id)
        name = optional_text(name, "name")
        description = optional_text(description, "description")
        contact_email = optional_text(contact_email, "contact_email")

        logger.info("Provisioning tenant %s", tenant_id)
        self._resolver.provision(tenant_id)

        current = self.get_tenant(tenant_id)
        tenant = Tenant(
            tenant_id=tenant_id,
            name=current.name if name is None else name,
            description=current.description if description is None else description,
            contact_email=current.contact_email if contact_email is None else contact_email,
            created_at=current.created_at,
        )
        self._write_metadata(tenant)
        logger.info("Tenant provisioned: %s", tenant_id)
        return tenant

    def tenant_exists(self, tenant_id: str) -> bool:
        return self._resolver.metadata_path(tenant_id).is_file()

    def get_tenant(self, tenant_id: str) -> Tenant:
        tenant_id = require_tenant_id(tenant_id)
        path = self._resolver.metadata_path(tenant_id)
        if not path.is_file():
            raise not_found(f"Tenant {tenant_id} does not exist", path=str(path.parent))
        return self._load(tenant_id, path)

    def list_tenant_ids(self) -> List[str]:
        root = self._resolver.data_dir
        try:
            entries = sorted(os.scandir(root), key=lambda e: e.name)
        except FileNotFoundError:
            return []
        except OSError as e:
            raise io_failure(f"Failed to scan data directory {root}: {e}", path=str(root)) from e

        return [
            entry.name
            for entry in entries
            if entry.is_dir() and (Path(entry.path) / TENANT_METADATA_FILE).is_file()
        ]

    def list_tenants(self) -> List[Tenant]:
        tenants = [self._load(tid, self._resolver.metadata_path(tid)) for tid in self.list_tenant_ids()]
        logger.info("Tenants retrieved: %d", len(tenants))
        return tenants

    def delete_tenant(self, tenant_id: str) -> None:
        """Remove the tenant's whole data directory. Its backups are kept."""
        base = self._resolver.tenant_dir(tenant_id)
        if not base.is_dir():
            raise not_found(f"Tenant {tenant_id} does not exist", path=str(base))

        logger.warning("Deleting tenant %s (%s)", tenant_id, base)
        try:
            shutil.rmtree(base)
        except OSError as e:
            raise io_failure(f"Failed to delete tenant {tenant_id}: {e}", path=str(base)) from e
        finally:
            self._resolver.forget(tenant_id)
        logger.info("Tenant deleted: %s", tenant_id)

    def _load(self, tenant_id: str, path: Path) -> Tenant:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Unreadable tenant metadata %s: %s", path, e)
            data = {}
        if not isinstance(data, dict):
            data = {}
        return Tenant.from_dict(tenant_id, data)

    def _write_metadata(self, tenant: Tenant) -> None:
        path = self._resolver.metadata_path(tenant.tenant_id)
        payload = {
            "tenant_id": tenant.tenant_id,
            "name": tenant.name,
            "description": tenant.description,
            "contact_email": tenant.contact_email,
            "created_at": tenant.created_at,
        }
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=".tenant.", suffix=".json", dir=str(path.parent))
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise io_failure(f"Failed to write tenant metadata {path}: {e}", path=str(path)) from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
