from flask import Flask, Response
from werkzeug.exceptions import HTTPException

from app.controllers.response_contract import error_response, service_error_response
from app.services.errors import ServiceError
from app.storage import StorageConflictError, StorageError

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    415: "UNSUPPORTED_MEDIA_TYPE",
}


def _request_validation_messages(e: HTTPException) -> object | None:
    # webargs aborts with 422 and attaches the marshmallow messages.
    data = getattr(e, "data", None)
    if isinstance(data, dict):
        return data.get("messages")
    return None


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ServiceError)  # type: ignore[misc]
    def handle_service_error(e: ServiceError) -> Response:
        return service_error_response(e)

    @app.errorhandler(StorageConflictError)  # type: ignore[misc]
    def handle_storage_conflict(e: StorageConflictError) -> Response:
        app.logger.warning("storage_conflict keys=%s", ",".join(e.keys))
        return error_response(
            message="Savings data changed while saving; retry the request.",
            error_code="STORAGE_CONFLICT",
            status_code=409,
            details={"collections": e.keys},
        )

    @app.errorhandler(StorageError)  # type: ignore[misc]
    def handle_storage_error(e: StorageError) -> Response:
        app.logger.error("storage_error error=%s", e)
        return error_response(
            message="Savings data is temporarily unavailable.",
            error_code="STORAGE_ERROR",
            status_code=503,
        )

    @app.errorhandler(HTTPException)  # type: ignore[misc]
    def handle_http_exception(e: HTTPException) -> Response:
        messages = _request_validation_messages(e)
        if messages is not None:
            return error_response(
                message="Invalid request parameters.",
                error_code="VALIDATION_ERROR",
                status_code=400,
                details={"messages": messages},
            )
        status_code = e.code or 500
        return error_response(
            message=e.description or e.name,
            error_code=HTTP_ERROR_CODES.get(status_code, "HTTP_ERROR"),
            status_code=status_code,
        )

    @app.errorhandler(Exception)  # type: ignore[misc]
    def handle_generic_exception(e: Exception) -> Response:
        app.logger.exception("unhandled_exception error=%s", e)
        return error_response(
            message="An unexpected error occurred.",
            error_code="INTERNAL_ERROR",
            status_code=500,
            details={"exception": type(e).__name__},
        )
