from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response, json_body
from ..container import Container
from ..core.exceptions import StorageError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/tenants", methods=["POST"], endpoint="tenants_create")
    def tenants_create():
        body = json_body()
        try:
            tenant = container.tenant_service.provision_tenant(
                body.get("tenantId"),
                name=body.get("name"),
                description=body.get("description"),
                contact_email=body.get("contact_email"),
            )
        except StorageError as e:
            return error_response("Failed to provision tenant", e)
        return jsonify({"message": "Tenant provisioned successfully", "tenant": tenant.to_dict()}), 201

    @app.route("/api/tenants", methods=["GET"], endpoint="tenants_list")
    def tenants_list():
        try:
            tenants = container.tenant_service.list_tenants()
        except StorageError as e:
            return error_response("Failed to list tenants", e)
        return jsonify({"count": len(tenants), "tenants": [t.to_dict() for t in tenants]})

    @app.route("/api/tenants/<tenant_id>", methods=["GET"], endpoint="tenants_get")
    def tenants_get(tenant_id: str):
        try:
            tenant = container.tenant_service.get_tenant(tenant_id)
        except StorageError as e:
            return error_response("Failed to get tenant", e)
        return jsonify(tenant.to_dict())

    @app.route("/api/tenants/<tenant_id>", methods=["DELETE"], endpoint="tenants_delete")
    def tenants_delete(tenant_id: str):
        try:
            container.tenant_service.delete_tenant(tenant_id)
        except StorageError as e:
            return error_response("Failed to delete tenant", e)
        return jsonify({"message": "Tenant deleted successfully", "tenantId": tenant_id})
