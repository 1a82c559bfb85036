from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.http import current_tenant_id, error_response, json_body
from ..container import Container
from ..core.exceptions import StorageError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/backups/create", methods=["POST"], endpoint="backups_create")
    def backups_create():
        tenant_id = current_tenant_id()
        logger.info("Manual backup requested for tenant %s", tenant_id)
        try:
            results = container.backup_service.create_tenant_backups(tenant_id)
        except StorageError as e:
            return error_response("Backup process failed", e)

        return jsonify(
            {
                "message": "Backup process completed",
                "tenantId": tenant_id,
                "successful": sum(1 for r in results if r.success),
                "failed": sum(1 for r in results if not r.success),
                "details": [r.to_dict() for r in results],
            }
        )

    @app.route("/api/backups/create-all", methods=["POST"], endpoint="backups_create_all")
    def backups_create_all():
        logger.info("Manual backup requested for all tenants")
        try:
            sweep = container.backup_service.create_all_backups()
        except StorageError as e:
            return error_response("Backup process failed", e)

        return jsonify(
            {
                "message": "Backup process completed for all tenants",
                "details": {r.tenant_id: r.to_dict() for r in sweep},
            }
        )

    @app.route("/api/backups/list", methods=["GET"], endpoint="backups_list")
    def backups_list():
        try:
            backups = container.backup_service.list_backups(current_tenant_id())
        except StorageError as e:
            return error_response("Failed to list backup files", e)

        return jsonify(
            {
                "message": "Backup files retrieved successfully",
                "count": len(backups),
                "backups": [b.to_dict() for b in backups],
            }
        )

    @app.route("/api/backups/restore", methods=["POST"], endpoint="backups_restore")
    def backups_restore():
        tenant_id = current_tenant_id()
        body = json_body()
        backup_file_name = body.get("backupFileName")
        target_file_name = body.get("targetFileName")
        try:
            container.backup_service.restore_backup(tenant_id, backup_file_name, target_file_name)
        except StorageError as e:
            return error_response("Backup restoration failed", e)

        return jsonify(
            {
                "message": "Backup restored successfully",
                "tenantId": tenant_id,
                "backupFileName": backup_file_name,
                "targetFileName": target_file_name,
            }
        )

    @app.route("/api/backups/verify", methods=["POST"], endpoint="backups_verify")
    def backups_verify():
        body = json_body()
        backup_file_name = body.get("backupFileName")
        try:
            is_valid = container.backup_service.verify_backup(
                current_tenant_id(),
                backup_file_name,
                body.get("expectedChecksum"),
            )
        except StorageError as e:
            return error_response("Backup integrity verification failed", e)

        return jsonify(
            {
                "message": "Backup integrity verification completed",
                "backupFileName": backup_file_name,
                "isValid": is_valid,
            }
        )

    @app.route("/api/backups/status", methods=["GET"], endpoint="backups_status")
    def backups_status():
        return jsonify(
            {
                "message": "Backup schedule status retrieved",
                "status": container.backup_scheduler.status(),
            }
        )
