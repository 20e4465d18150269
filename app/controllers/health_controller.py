"""
Health endpoints.

- `GET /healthz` returns HTTP 200 with a minimal JSON body. It does not touch
  the collection store, so it stays green while a backend is degraded.
"""

from __future__ import annotations

from flask import Blueprint, Response, jsonify
from flask_apispec import doc

health_bp = Blueprint("health", __name__)


@health_bp.get("/healthz")
@doc(
    description="Liveness check for infrastructure monitoring.",
    tags=["Health"],
    responses={200: {"description": "Service healthy"}},
)
def healthz() -> Response:
    """Liveness check endpoint."""

    return jsonify({"status": "ok"})
