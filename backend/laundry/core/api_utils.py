"""
Common API utilities for consistent response formatting across all controllers.
"""

from typing import Any, Dict, Optional

from flask import current_app, jsonify, request

from laundry.core.exceptions import NotFilledInError


def api_response(
    success: bool, message: str, data: Optional[Any] = None, status_code: int = 200
) -> tuple:
    """
    Standardized API response format for all endpoints.

    Args:
        success: Whether the operation was successful
        message: Human-readable message about the operation
        data: Optional data payload
        status_code: HTTP status code

    Returns:
        Tuple of (json_response, status_code)
    """
    response = {"success": success, "message": message}

    if data is not None:
        response["data"] = data

    return jsonify(response), status_code


def json_body() -> Dict[str, Any]:
    """Return the JSON object sent with the request, or an empty dict."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def query_int(name: str, required: bool = False) -> Optional[int]:
    """Read an integer query parameter.

    Raises:
        NotFilledInError: required parameter missing
        ValueError: value is not an integer
    """
    raw = request.args.get(name)
    if raw is None or raw.strip() == "":
        if required:
            raise NotFilledInError(field=name)
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer")


def verify_health_token() -> bool:
    """Check the X-Health-Token header against HEALTH_CHECK_TOKEN."""
    token = request.headers.get("X-Health-Token")
    expected = current_app.config.get("HEALTH_CHECK_TOKEN")
    if not expected:
        return False
    return bool(token and token == expected)
