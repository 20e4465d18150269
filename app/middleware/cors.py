from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from flask import Flask, Response, request

DEFAULT_ALLOWED_METHODS = ("GET", "POST", "PUT", "DELETE", "OPTIONS")
DEFAULT_ALLOWED_HEADERS = ("Content-Type",)
DEFAULT_MAX_AGE_SECONDS = 600


def _split_csv(raw: Any) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(item.strip() for item in str(raw).split(",") if item.strip())


def _parse_allowed_origins(raw: str | None) -> set[str]:
    return set(_split_csv(raw))


def _is_allowed_origin(origin: str, allowed_origins: set[str]) -> bool:
    return "*" in allowed_origins or origin in allowed_origins


@dataclass(frozen=True)
class CorsPolicy:
    """Browser access rules for the savings dashboard front-end."""

    allowed_origins: set[str]
    allow_methods: tuple[str, ...]
    allow_headers: tuple[str, ...]
    max_age_seconds: int
    is_production: bool

    def allows(self, origin: str | None) -> bool:
        return bool(origin) and _is_allowed_origin(str(origin), self.allowed_origins)

    def headers_for(self, origin: str) -> dict[str, str]:
        return {
            "Access-Control-Allow-Origin": origin,
            "Vary": "Origin",
            "Access-Control-Allow-Methods": ",".join(self.allow_methods),
            "Access-Control-Allow-Headers": ",".join(self.allow_headers),
            "Access-Control-Max-Age": str(self.max_age_seconds),
        }

    def validate(self) -> None:
        if self.is_production and "*" in self.allowed_origins:
            raise RuntimeError(
                "CORS misconfiguration: wildcard origin is forbidden in production."
            )


def build_cors_policy(config: Mapping[str, Any]) -> CorsPolicy:
    return CorsPolicy(
        allowed_origins=_parse_allowed_origins(config.get("CORS_ALLOWED_ORIGINS")),
        allow_methods=(
            _split_csv(config.get("CORS_ALLOWED_METHODS")) or DEFAULT_ALLOWED_METHODS
        ),
        allow_headers=(
            _split_csv(config.get("CORS_ALLOWED_HEADERS")) or DEFAULT_ALLOWED_HEADERS
        ),
        max_age_seconds=int(
            config.get("CORS_MAX_AGE_SECONDS") or DEFAULT_MAX_AGE_SECONDS
        ),
        is_production=not (config.get("DEBUG") or config.get("TESTING")),
    )


def register_cors(app: Flask) -> None:
    policy = build_cors_policy(app.config)
    policy.validate()
    app.extensions["cors_policy"] = policy

    @app.before_request
    def answer_preflight() -> Response | None:
        origin = request.headers.get("Origin")
        if request.method != "OPTIONS" or not policy.allows(origin):
            return None
        # Short-circuit so preflights never reach the resources.
        return app.make_response(("", 204))

    @app.after_request
    def add_cors_headers(response: Response) -> Response:
        origin = request.headers.get("Origin")
        if policy.allows(origin):
            response.headers.update(policy.headers_for(str(origin)))
        return response
