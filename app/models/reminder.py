from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Reminder:
    goal_id: str
    message: str
    date: datetime
    acknowledged: bool = False
    id: str = ""
