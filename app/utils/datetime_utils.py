from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta

ONE_DAY = timedelta(days=1)


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_naive() -> datetime:
    return utc_now().replace(tzinfo=None)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with stored values."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def from_epoch_seconds(value: int | float) -> datetime:
    return datetime.fromtimestamp(value, tz=UTC)


def ceil_days_between(start: datetime, end: datetime) -> int:
    return math.ceil((ensure_aware(end) - ensure_aware(start)) / ONE_DAY)
