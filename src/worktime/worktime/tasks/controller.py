from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_instant
from ..common.http import error_response
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.task_deadline_service

    @app.route("/api/tasks/<task_id>/sla-status", methods=["GET"], endpoint="task_sla_status")
    def task_sla_status(task_id: str):
        try:
            now_raw = request.args.get("now")
            now = parse_instant(now_raw) if now_raw else None
            task = service.get_task(task_id)
            status = service.sla_status(task, now=now)
            priority = service.priority(task, now=now)
        except DomainError as e:
            return error_response(e)

        return jsonify(
            {
                "task_id": task.task_id,
                "task_number": task.task_number,
                "priority": int(priority),
                "priority_name": priority.name.lower(),
                "sla": status.to_dict() if status else None,
            }
        )

    @app.route("/api/tasks/check-late-acknowledgements", methods=["POST"], endpoint="check_late_acknowledgements")
    def check_late_acknowledgements():
        payload = request.get_json(silent=True) or {}
        try:
            now_raw = payload.get("now")
            flagged = service.check_late_acknowledgements(now=parse_instant(now_raw) if now_raw else None)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error checking late acknowledgements")
            return jsonify({"error": "Operation failed"}), 500

        return jsonify(
            {
                "success": True,
                "message": f"Flagged {len(flagged)} late acknowledgements",
                "count": len(flagged),
                "task_ids": [t.task_id for t in flagged],
            }
        )
