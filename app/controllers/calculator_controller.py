# mypy: disable-error-code=misc

from __future__ import annotations

from typing import Any

from flask import Blueprint, request
from flask_apispec import doc
from flask_apispec.views import MethodResource
from marshmallow import ValidationError

from app.controllers.dependencies import progress_service
from app.controllers.response_contract import service_error_response, success_response
from app.schemas.calculator_schema import RoiInputSchema
from app.services.errors import validation_error

calculator_bp = Blueprint("calculator", __name__, url_prefix="/calculator")


class RoiCalculatorResource(MethodResource):
    @doc(
        description=(
            "Project compound growth of a principal plus monthly contributions. "
            "annualInterestRate is a percentage (5 means 5%)."
        ),
        tags=["Calculator"],
        responses={
            200: {"description": "Projection with yearly growth series"},
            400: {"description": "Invalid calculator input"},
        },
    )
    def post(self) -> Any:
        payload = request.get_json(silent=True) or {}
        try:
            params = RoiInputSchema().load(payload)
        except ValidationError as exc:
            return service_error_response(
                validation_error("Invalid calculator input.", exc)
            )

        service = progress_service()
        projection = service.calculate_roi(**params)
        series = service.build_growth_series(**params)
        return success_response(
            message="Projection calculated.",
            data={
                "result": service.serialize_roi(projection),
                "growth": service.serialize_growth_series(series),
            },
        )


calculator_bp.add_url_rule(
    "/roi",
    view_func=RoiCalculatorResource.as_view("roi_calculator"),
    methods=["POST"],
)
