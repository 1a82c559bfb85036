from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Tenant:
    """Tenant metadata as stored in ``<data_dir>/<tenant_id>/tenant.json``."""

    tenant_id: str
    name: str = ""
    description: str = ""
    contact_email: str = ""
    created_at: str = ""

    @classmethod
    def from_dict(cls, tenant_id: str, data: dict) -> "Tenant":
        return cls(
            tenant_id=tenant_id,
            name=str(data.get("name") or ""),
            description=str(data.get("description") or ""),
            contact_email=str(data.get("contact_email") or ""),
            created_at=str(data.get("created_at") or ""),
        )

    def to_dict(self) -> dict:
        return {
            "tenantId": self.tenant_id,
            "name": self.name,
            "description": self.description,
            "contact_email": self.contact_email,
            "createdAt": self.created_at,
        }
