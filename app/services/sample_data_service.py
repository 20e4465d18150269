from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Callable

from app.models.challenge import Challenge
from app.models.goal import SavingsGoal
from app.services.challenge_service import ChallengeService
from app.services.goal_service import GoalService
from app.services.transaction_service import TransactionService
from app.storage import CollectionStore
from app.utils.datetime_utils import utc_now
from app.utils.identifiers import IdFactory
from app.utils.money import format_money

logger = logging.getLogger(__name__)

_SAMPLE_GOALS: tuple[dict[str, Any], ...] = (
    {
        "name": "Buy Land Property",
        "type": "land",
        "targetAmount": "50000.00",
        "initialDeposit": "5000.00",
        "durationDays": 365,
        "description": "Saving for a small plot of land for future development",
        "priority": "high",
        "reminderFrequency": "weekly",
    },
    {
        "name": "Start Online Business",
        "type": "business",
        "targetAmount": "15000.00",
        "initialDeposit": "3000.00",
        "durationDays": 180,
        "description": "Capital for starting an e-commerce store",
        "priority": "medium",
        "reminderFrequency": "daily",
    },
    {
        "name": "Emergency Fund",
        "type": "savings",
        "targetAmount": "10000.00",
        "initialDeposit": "1000.00",
        "durationDays": 120,
        "description": "Building an emergency fund for unexpected expenses",
        "priority": "high",
        "reminderFrequency": "weekly",
    },
)

LAND_CHALLENGE_SHARE = Decimal("0.2")


@dataclass(frozen=True)
class SampleDataResult:
    goals: tuple[SavingsGoal, ...]
    challenges: tuple[Challenge, ...]


class SampleDataService:
    def __init__(
        self,
        store: CollectionStore,
        *,
        id_factory: IdFactory | None = None,
        now_provider: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._now_provider = now_provider or utc_now
        self._goals = GoalService(store, id_factory=id_factory)
        self._transactions = TransactionService(store, id_factory=id_factory)
        self._challenges = ChallengeService(
            store, id_factory=id_factory, now_provider=self._now_provider
        )

    def seed(self) -> SampleDataResult | None:
        """Populate an empty store. Returns None when goals already exist."""
        now = self._now_provider()
        with self._store.atomic():
            if self._goals.list_goals():
                return None

            goals: list[SavingsGoal] = []
            for template in _SAMPLE_GOALS:
                goal = self._goals.create_goal(
                    {
                        "name": template["name"],
                        "type": template["type"],
                        "targetAmount": template["targetAmount"],
                        "startDate": now.isoformat(),
                        "endDate": (
                            now + timedelta(days=template["durationDays"])
                        ).isoformat(),
                        "description": template["description"],
                        "priority": template["priority"],
                        "reminderFrequency": template["reminderFrequency"],
                    }
                )
                entry = self._transactions.create_transaction(
                    {
                        "goalId": goal.id,
                        "amount": template["initialDeposit"],
                        "date": now.isoformat(),
                        "type": "deposit",
                        "description": "Initial deposit",
                    }
                )
                goals.append(entry.goal or goal)

            land_goal = goals[0]
            challenges = (
                self._challenges.create_challenge(
                    {
                        "name": "Monthly Saver",
                        "description": "Save $1000 in the next 30 days",
                        "reward": "10% bonus toward any goal",
                        "startDate": now.isoformat(),
                        "endDate": (now + timedelta(days=30)).isoformat(),
                        "targetAmount": "1000.00",
                        "currentAmount": "0.00",
                    }
                ),
                self._challenges.create_challenge(
                    {
                        "name": "Land Investment Master",
                        "description": "Reach 20% of your land investment goal",
                        "reward": "Investment strategy consultation",
                        "startDate": now.isoformat(),
                        "endDate": (now + timedelta(days=60)).isoformat(),
                        "goalId": land_goal.id,
                        "targetAmount": format_money(
                            land_goal.target_amount * LAND_CHALLENGE_SHARE
                        ),
                        "currentAmount": format_money(land_goal.current_amount),
                    }
                ),
            )
        logger.info(
            "sample_data_seeded goals=%s challenges=%s", len(goals), len(challenges)
        )
        return SampleDataResult(goals=tuple(goals), challenges=challenges)
