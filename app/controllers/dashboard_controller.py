# mypy: disable-error-code=misc

from __future__ import annotations

from typing import Any

from flask import Blueprint
from flask_apispec import doc
from flask_apispec.views import MethodResource

from app.controllers.dependencies import dashboard_service
from app.controllers.response_contract import success_response

dashboard_bp = Blueprint("dashboard", __name__)


class DashboardResource(MethodResource):
    @doc(
        description=(
            "Overall savings summary: totals, counts, monthly flows and the "
            "active goals closest to their end date."
        ),
        tags=["Dashboard"],
        responses={200: {"description": "Dashboard summary"}},
    )
    def get(self) -> Any:
        service = dashboard_service()
        summary = service.build_summary()
        return success_response(
            message="Dashboard summary built.",
            data=service.serialize(summary),
        )


dashboard_bp.add_url_rule(
    "/dashboard",
    view_func=DashboardResource.as_view("dashboard"),
    methods=["GET"],
)
