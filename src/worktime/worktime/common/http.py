from __future__ import annotations

from flask import jsonify

from ..core.exceptions import ConfigurationError, DomainError, NotFoundError


def error_response(error: DomainError):
    if isinstance(error, NotFoundError):
        status = 404
    elif isinstance(error, ConfigurationError):
        status = 422
    else:
        status = 400
    return jsonify({"error": str(error)}), status
