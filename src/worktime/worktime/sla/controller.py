from __future__ import annotations

import logging

from flask import Flask, current_app, jsonify, request

from ..common.datetime_utils import parse_instant
from ..common.http import error_response
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/sla-deadline", methods=["POST"], endpoint="calculate_sla_deadline")
    def calculate_sla_deadline():
        payload = request.get_json(silent=True) or {}
        try:
            start_raw = payload.get("start_time")
            quote = container.sla_service.deadline_for_developer(
                payload.get("developer_id"),
                start=parse_instant(start_raw) if start_raw else None,
                sla_hours=payload.get("sla_hours", current_app.config["DEFAULT_SLA_HOURS"]),
            )
        except DomainError as e:
            logger.warning("SLA calculation rejected: %s", e)
            return error_response(e)
        except Exception:
            logger.exception("SLA calculation error")
            return jsonify({"error": "SLA calculation failed. Please try again."}), 500

        return jsonify({"success": True, **quote.to_dict()})

    @app.route("/api/ack-deadline", methods=["POST"], endpoint="calculate_ack_deadline")
    def calculate_ack_deadline():
        payload = request.get_json(silent=True) or {}
        try:
            assigned_raw = payload.get("assigned_at")
            quote = container.sla_service.ack_deadline_for_developer(
                payload.get("developer_id"),
                assigned_at=parse_instant(assigned_raw) if assigned_raw else None,
            )
        except DomainError as e:
            logger.warning("Ack deadline calculation rejected: %s", e)
            return error_response(e)
        except Exception:
            logger.exception("Ack deadline calculation error")
            return jsonify({"error": "Acknowledgement deadline calculation failed."}), 500

        return jsonify({"success": True, **quote.to_dict()})
