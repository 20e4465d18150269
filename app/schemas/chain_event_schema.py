from __future__ import annotations

from typing import Any

from marshmallow import Schema, fields, pre_load, validate

from app.schemas.common import money_field, timestamp_field
from app.schemas.validators import (
    validate_address,
    validate_positive_amount,
    validate_tx_hash,
)
from app.utils.datetime_utils import from_epoch_seconds

CHAIN_EVENT_TYPES = ("Deposited", "Withdrawn")


class ChainEventSchema(Schema):
    """A Deposited/Withdrawn event as reported by the savings contract feed."""

    type = fields.Str(required=True, validate=validate.OneOf(CHAIN_EVENT_TYPES))
    user = fields.Str(required=True, validate=validate_address)
    amount = money_field(required=True, validate=validate_positive_amount)
    timestamp = timestamp_field(required=True)
    transaction_hash = fields.Str(
        data_key="transactionHash",
        required=True,
        validate=validate_tx_hash,
    )

    @pre_load
    def normalize_timestamp(self, data: Any, **kwargs: object) -> Any:
        if not isinstance(data, dict):
            return data
        raw = data.get("timestamp")
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return {**data, "timestamp": from_epoch_seconds(raw).isoformat()}
        return data


class ChainEventBatchSchema(Schema):
    events = fields.List(
        fields.Nested(ChainEventSchema),
        required=True,
        validate=validate.Length(min=1, max=500),
    )
