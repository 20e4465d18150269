from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from marshmallow import ValidationError


@dataclass
class ServiceError(Exception):
    message: str
    code: str
    status_code: int
    details: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        super().__init__(self.message)


def validation_error(message: str, exc: ValidationError) -> ServiceError:
    return ServiceError(
        message=message,
        code="VALIDATION_ERROR",
        status_code=400,
        details={"messages": exc.messages},
    )


def require_mapping(payload: Any, message: str) -> Mapping[str, Any]:
    """Reject JSON bodies that are not objects before they are merged."""
    if not isinstance(payload, Mapping):
        raise ServiceError(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            details={"messages": {"_schema": ["Invalid input type."]}},
        )
    return payload
