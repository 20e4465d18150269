from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


class ChallengeStatus(enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class Challenge:
    name: str
    start_date: datetime
    end_date: datetime
    description: str = ""
    reward: str = ""
    status: ChallengeStatus = ChallengeStatus.ACTIVE
    goal_id: str | None = None
    target_amount: Decimal | None = None
    current_amount: Decimal | None = None
    id: str = ""

    def __repr__(self) -> str:
        return (
            f"<Challenge id={self.id!r} name={self.name!r} "
            f"status={self.status.value!r}>"
        )
