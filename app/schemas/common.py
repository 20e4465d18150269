from __future__ import annotations

from datetime import UTC
from decimal import ROUND_HALF_UP
from typing import Any

from marshmallow import fields


def money_field(**kwargs: Any) -> fields.Decimal:
    """Two-place decimal, serialized as a string ("150.50")."""
    return fields.Decimal(places=2, rounding=ROUND_HALF_UP, as_string=True, **kwargs)


def timestamp_field(**kwargs: Any) -> fields.AwareDateTime:
    """ISO-8601 datetime; values without an offset are read as UTC."""
    return fields.AwareDateTime(default_timezone=UTC, **kwargs)
