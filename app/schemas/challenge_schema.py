from __future__ import annotations

from typing import Any

from marshmallow import (
    Schema,
    ValidationError,
    fields,
    post_load,
    pre_load,
    validate,
    validates_schema,
)

from app.models.challenge import Challenge, ChallengeStatus
from app.schemas.common import money_field, timestamp_field
from app.schemas.sanitization import lowercase_choice_fields, sanitize_string_fields
from app.schemas.validators import validate_non_negative_amount, validate_positive_amount


class ChallengeSchema(Schema):
    id = fields.Str(load_default="")
    name = fields.Str(required=True, validate=validate.Length(min=1, max=128))
    description = fields.Str(load_default="", validate=validate.Length(max=500))
    reward = fields.Str(load_default="", validate=validate.Length(max=256))
    start_date = timestamp_field(data_key="startDate", required=True)
    end_date = timestamp_field(data_key="endDate", required=True)
    status = fields.Enum(
        ChallengeStatus, by_value=True, load_default=ChallengeStatus.ACTIVE
    )
    goal_id = fields.Str(data_key="goalId", allow_none=True, load_default=None)
    target_amount = money_field(
        data_key="targetAmount",
        allow_none=True,
        load_default=None,
        validate=validate_positive_amount,
    )
    current_amount = money_field(
        data_key="currentAmount",
        allow_none=True,
        load_default=None,
        validate=validate_non_negative_amount,
    )

    @pre_load
    def sanitize_input(self, data: object, **kwargs: object) -> object:
        sanitized = sanitize_string_fields(
            data, {"name", "description", "reward", "goalId"}
        )
        return lowercase_choice_fields(sanitized, {"status"})

    @validates_schema
    def validate_window(self, data: dict[str, Any], **kwargs: object) -> None:
        start_date = data.get("start_date")
        end_date = data.get("end_date")
        if start_date is not None and end_date is not None and end_date <= start_date:
            raise ValidationError("endDate must be after startDate.", "endDate")

    @post_load
    def make_challenge(self, data: dict[str, Any], **kwargs: object) -> Challenge:
        return Challenge(**data)
