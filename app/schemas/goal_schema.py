from __future__ import annotations

from decimal import Decimal
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

from app.models.goal import (
    GoalPriority,
    GoalStatus,
    GoalType,
    ReminderFrequency,
    SavingsGoal,
)
from app.schemas.common import money_field, timestamp_field
from app.schemas.sanitization import lowercase_choice_fields, sanitize_string_fields
from app.schemas.validators import validate_non_negative_amount, validate_positive_amount

GOAL_STATUSES = tuple(status.value for status in GoalStatus)


class GoalSchema(Schema):
    id = fields.Str(load_default="")
    name = fields.Str(required=True, validate=validate.Length(min=1, max=128))
    type = fields.Enum(GoalType, by_value=True, required=True)
    target_amount = money_field(
        data_key="targetAmount",
        required=True,
        validate=validate_positive_amount,
    )
    current_amount = money_field(
        data_key="currentAmount",
        load_default=Decimal("0"),
        validate=validate_non_negative_amount,
    )
    start_date = timestamp_field(data_key="startDate", required=True)
    end_date = timestamp_field(data_key="endDate", required=True)
    description = fields.Str(load_default="", validate=validate.Length(max=500))
    status = fields.Enum(GoalStatus, by_value=True, load_default=GoalStatus.ACTIVE)
    priority = fields.Enum(
        GoalPriority, by_value=True, load_default=GoalPriority.MEDIUM
    )
    reminder_frequency = fields.Enum(
        ReminderFrequency,
        by_value=True,
        data_key="reminderFrequency",
        allow_none=True,
        load_default=None,
    )
    last_reminder_sent = timestamp_field(
        data_key="lastReminderSent",
        allow_none=True,
        load_default=None,
    )

    @pre_load
    def sanitize_input(self, data: object, **kwargs: object) -> object:
        sanitized = sanitize_string_fields(data, {"name", "description"})
        return lowercase_choice_fields(
            sanitized, {"type", "status", "priority", "reminderFrequency"}
        )

    @validates_schema
    def validate_window(self, data: dict[str, Any], **kwargs: object) -> None:
        start_date = data.get("start_date")
        end_date = data.get("end_date")
        if start_date is not None and end_date is not None and end_date <= start_date:
            raise ValidationError("endDate must be after startDate.", "endDate")

    @post_load
    def make_goal(self, data: dict[str, Any], **kwargs: object) -> SavingsGoal:
        return SavingsGoal(**data)
