from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

MONEY_QUANTIZER = Decimal("0.01")
ZERO = Decimal("0")


def normalize_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_QUANTIZER, rounding=ROUND_HALF_UP)


def format_money(value: Decimal) -> str:
    return f"{normalize_money(value):.2f}"


def safe_decimal(value: Decimal | int | float | str | None) -> Decimal | None:
    if value is None:
        return None
    return Decimal(str(value))


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def capped_percentage(part: Decimal, whole: Decimal, *, cap: int = 100) -> int:
    if whole == 0:
        return 0
    return min(cap, round_half_up(part / whole * 100))
