from __future__ import annotations

from typing import Any

from marshmallow import Schema, fields, post_load, validate

from app.models.reminder import Reminder
from app.schemas.common import timestamp_field


class ReminderSchema(Schema):
    id = fields.Str(load_default="")
    goal_id = fields.Str(data_key="goalId", required=True)
    message = fields.Str(required=True, validate=validate.Length(min=1, max=256))
    date = timestamp_field(required=True)
    acknowledged = fields.Bool(load_default=False)

    @post_load
    def make_reminder(self, data: dict[str, Any], **kwargs: object) -> Reminder:
        return Reminder(**data)
