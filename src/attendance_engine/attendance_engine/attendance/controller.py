from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..core.exceptions import ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/daily-status", methods=["GET"], endpoint="daily_status")
    def daily_status():
        try:
            user_id_s = (request.args.get("user_id") or "").strip()
            if not user_id_s.isdigit():
                raise ValidationError("user_id must be a positive integer")

            date_s = request.args.get("date")
            try:
                work_date = parse_iso_date(date_s) if date_s else None
            except ValueError:
                raise ValidationError("date must be YYYY-MM-DD") from None

            status = container.daily_status_service.get_daily_status(int(user_id_s), work_date)
            return jsonify({"success": True, "data": status.to_dict()}), 200
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("daily status failed")
            return jsonify({"success": False, "message": "Internal error while computing daily status"}), 500
