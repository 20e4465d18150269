from typing import Any, Dict, Optional

from flask import Response, current_app, has_app_context, jsonify


def _is_debug_or_testing() -> bool:
    if not has_app_context():
        return False
    return bool(current_app.config.get("DEBUG") or current_app.config.get("TESTING"))


def success_payload(
    message: str,
    data: Any = None,
    meta: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "success": True,
        "message": message,
        "data": data,
    }
    if meta is not None:
        payload["meta"] = meta
    return payload


def error_payload(
    message: str,
    code: str,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    # Internal error details stay server-side outside debug/testing runs.
    if code == "INTERNAL_ERROR" and not _is_debug_or_testing():
        details = {}

    return {
        "success": False,
        "message": message,
        "error": {
            "code": code,
            "details": details or {},
        },
    }


def json_response(payload: Dict[str, Any], status_code: int) -> Response:
    response = jsonify(payload)
    response.status_code = status_code
    return response
