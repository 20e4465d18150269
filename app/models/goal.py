from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal


class GoalType(enum.Enum):
    LAND = "land"
    BUSINESS = "business"
    SAVINGS = "savings"
    CRYPTO = "crypto"
    OTHER = "other"


class GoalStatus(enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class GoalPriority(enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReminderFrequency(enum.Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def interval(self) -> timedelta:
        return _REMINDER_INTERVALS[self]


_REMINDER_INTERVALS = {
    ReminderFrequency.DAILY: timedelta(days=1),
    ReminderFrequency.WEEKLY: timedelta(days=7),
    ReminderFrequency.MONTHLY: timedelta(days=30),
}


@dataclass(frozen=True)
class SavingsGoal:
    name: str
    type: GoalType
    target_amount: Decimal
    start_date: datetime
    end_date: datetime
    current_amount: Decimal = Decimal("0")
    description: str = ""
    status: GoalStatus = GoalStatus.ACTIVE
    priority: GoalPriority = GoalPriority.MEDIUM
    reminder_frequency: ReminderFrequency | None = None
    last_reminder_sent: datetime | None = None
    id: str = ""

    @property
    def is_funded(self) -> bool:
        return self.current_amount >= self.target_amount

    def __repr__(self) -> str:
        return (
            f"<SavingsGoal id={self.id!r} name={self.name!r} "
            f"current_amount={self.current_amount} "
            f"target_amount={self.target_amount} status={self.status.value!r}>"
        )
