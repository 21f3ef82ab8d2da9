from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..core.exceptions import ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/settings/attendance", methods=["GET"], endpoint="attendance_settings")
    def attendance_settings():
        try:
            settings = container.settings_service.current()
            return jsonify({"success": True, "data": settings.to_dict()}), 200
        except Exception:
            logger.exception("reading attendance settings failed")
            return jsonify({"success": False, "message": "Internal error while reading settings"}), 500

    @app.route("/api/settings/attendance/grace", methods=["PUT"], endpoint="update_grace_period")
    def update_grace_period():
        try:
            data = request.get_json(silent=True) or {}
            if "minutes" not in data:
                raise ValidationError("minutes is required")
            settings = container.settings_service.update_grace_minutes(data["minutes"])
            return jsonify({"success": True, "data": settings.to_dict()}), 200
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("updating grace period failed")
            return jsonify({"success": False, "message": "Internal error while updating settings"}), 500
