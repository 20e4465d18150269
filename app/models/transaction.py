from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


class TransactionType(enum.Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


@dataclass(frozen=True)
class Transaction:
    goal_id: str
    amount: Decimal
    date: datetime
    type: TransactionType
    description: str = ""
    tx_hash: str | None = None
    id: str = ""

    @property
    def signed_amount(self) -> Decimal:
        """Effect of this transaction on the owning goal's balance."""
        if self.type is TransactionType.DEPOSIT:
            return self.amount
        return -self.amount

    def __repr__(self) -> str:
        return (
            f"<Transaction id={self.id!r} goal_id={self.goal_id!r} "
            f"type={self.type.value!r} amount={self.amount}>"
        )
