from __future__ import annotations

from marshmallow import validate

ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{40}$"
TX_HASH_PATTERN = r"^0x[0-9a-fA-F]{64}$"

validate_address = validate.Regexp(ADDRESS_PATTERN, error="Invalid Ethereum address.")
validate_tx_hash = validate.Regexp(TX_HASH_PATTERN, error="Invalid transaction hash.")
validate_positive_amount = validate.Range(
    min=0,
    min_inclusive=False,
    error="Amount must be a positive number.",
)
validate_non_negative_amount = validate.Range(
    min=0,
    error="Amount must not be negative.",
)
