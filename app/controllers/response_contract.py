from __future__ import annotations

from typing import Any

from flask import Response

from app.services.errors import ServiceError
from app.utils.response_builder import error_payload, json_response, success_payload


def success_response(
    *,
    message: str,
    data: Any,
    status_code: int = 200,
    meta: dict[str, Any] | None = None,
) -> Response:
    return json_response(
        success_payload(message=message, data=data, meta=meta),
        status_code=status_code,
    )


def error_response(
    *,
    message: str,
    error_code: str,
    status_code: int,
    details: dict[str, Any] | None = None,
) -> Response:
    return json_response(
        error_payload(message=message, code=error_code, details=details),
        status_code=status_code,
    )


def service_error_response(exc: ServiceError) -> Response:
    return error_response(
        message=exc.message,
        error_code=exc.code,
        status_code=exc.status_code,
        details=exc.details,
    )


def not_found_response(entity: str, entity_id: str) -> Response:
    return error_response(
        message=f"{entity} not found.",
        error_code="NOT_FOUND",
        status_code=404,
        details={"id": entity_id},
    )


__all__ = [
    "success_response",
    "error_response",
    "service_error_response",
    "not_found_response",
]
