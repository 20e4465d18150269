from __future__ import annotations

from decimal import Decimal

from marshmallow import Schema, fields, validate

from app.schemas.validators import validate_non_negative_amount


class RoiInputSchema(Schema):
    principal = fields.Decimal(required=True, validate=validate_non_negative_amount)
    monthly_contribution = fields.Decimal(
        data_key="monthlyContribution",
        load_default=Decimal("0"),
        validate=validate_non_negative_amount,
    )
    annual_interest_rate = fields.Decimal(
        data_key="annualInterestRate",
        required=True,
        validate=validate.Range(min=0, max=1000),
    )
    years = fields.Int(required=True, validate=validate.Range(min=1, max=100))
