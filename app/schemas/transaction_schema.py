from __future__ import annotations

from typing import Any

from marshmallow import Schema, fields, post_load, pre_load, validate

from app.models.transaction import Transaction, TransactionType
from app.schemas.common import money_field, timestamp_field
from app.schemas.sanitization import lowercase_choice_fields, sanitize_string_fields
from app.schemas.validators import validate_positive_amount, validate_tx_hash


class TransactionSchema(Schema):
    id = fields.Str(load_default="")
    goal_id = fields.Str(
        data_key="goalId",
        required=True,
        validate=validate.Length(min=1),
    )
    amount = money_field(required=True, validate=validate_positive_amount)
    date = timestamp_field(required=True)
    type = fields.Enum(TransactionType, by_value=True, required=True)
    description = fields.Str(load_default="", validate=validate.Length(max=300))
    tx_hash = fields.Str(
        data_key="txHash",
        allow_none=True,
        load_default=None,
        validate=validate_tx_hash,
    )

    @pre_load
    def sanitize_input(self, data: object, **kwargs: object) -> object:
        sanitized = sanitize_string_fields(data, {"goalId", "description", "txHash"})
        return lowercase_choice_fields(sanitized, {"type"})

    @post_load
    def make_transaction(self, data: dict[str, Any], **kwargs: object) -> Transaction:
        return Transaction(**data)
