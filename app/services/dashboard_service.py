from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable

from app.models.challenge import ChallengeStatus
from app.models.goal import GoalStatus, SavingsGoal
from app.models.transaction import Transaction, TransactionType
from app.services.challenge_service import ChallengeService
from app.services.goal_service import GoalService
from app.services.reminder_service import ReminderService
from app.services.transaction_service import TransactionService
from app.storage import CollectionStore
from app.utils.datetime_utils import ensure_aware, utc_now
from app.utils.money import ZERO, capped_percentage, format_money

UPCOMING_GOALS_LIMIT = 3


@dataclass(frozen=True)
class MonthlyFlow:
    month: str
    label: str
    deposits: Decimal
    withdrawals: Decimal


@dataclass(frozen=True)
class DashboardSummary:
    total_saved: Decimal
    total_target: Decimal
    total_progress_percentage: int
    active_goals: int
    active_challenges: int
    pending_reminders: int
    monthly_flows: tuple[MonthlyFlow, ...]
    upcoming_goals: tuple[SavingsGoal, ...]


def build_monthly_flows(transactions: list[Transaction]) -> list[MonthlyFlow]:
    """Deposit and withdrawal totals per calendar month, oldest month first.

    Months without transactions are not emitted.
    """
    buckets: dict[tuple[int, int], dict[TransactionType, Decimal]] = {}
    labels: dict[tuple[int, int], str] = {}
    for transaction in transactions:
        moment = ensure_aware(transaction.date)
        bucket_key = (moment.year, moment.month)
        bucket = buckets.setdefault(
            bucket_key,
            {TransactionType.DEPOSIT: ZERO, TransactionType.WITHDRAWAL: ZERO},
        )
        bucket[transaction.type] += transaction.amount
        labels[bucket_key] = moment.strftime("%b %Y")

    return [
        MonthlyFlow(
            month=f"{year:04d}-{month:02d}",
            label=labels[(year, month)],
            deposits=buckets[(year, month)][TransactionType.DEPOSIT],
            withdrawals=buckets[(year, month)][TransactionType.WITHDRAWAL],
        )
        for year, month in sorted(buckets)
    ]


class DashboardService:
    def __init__(
        self,
        store: CollectionStore,
        *,
        now_provider: Callable[[], datetime] | None = None,
    ) -> None:
        self._now_provider = now_provider or utc_now
        self._goals = GoalService(store)
        self._transactions = TransactionService(store)
        self._challenges = ChallengeService(store, now_provider=self._now_provider)
        self._reminders = ReminderService(store, now_provider=self._now_provider)

    def build_summary(
        self, *, upcoming_limit: int = UPCOMING_GOALS_LIMIT
    ) -> DashboardSummary:
        goals = self._goals.list_goals()
        active_goals = [goal for goal in goals if goal.status is GoalStatus.ACTIVE]
        total_saved = sum((goal.current_amount for goal in goals), ZERO)
        total_target = sum((goal.target_amount for goal in goals), ZERO)
        active_challenges = [
            challenge
            for challenge in self._challenges.list_challenges()
            if challenge.status is ChallengeStatus.ACTIVE
        ]
        upcoming = sorted(active_goals, key=lambda goal: ensure_aware(goal.end_date))

        return DashboardSummary(
            total_saved=total_saved,
            total_target=total_target,
            total_progress_percentage=capped_percentage(total_saved, total_target),
            active_goals=len(active_goals),
            active_challenges=len(active_challenges),
            pending_reminders=len(self._reminders.list_pending()),
            monthly_flows=tuple(
                build_monthly_flows(self._transactions.list_transactions())
            ),
            upcoming_goals=tuple(upcoming[:upcoming_limit]),
        )

    def serialize(self, summary: DashboardSummary) -> dict[str, Any]:
        return {
            "totalSaved": format_money(summary.total_saved),
            "totalTarget": format_money(summary.total_target),
            "totalProgressPercentage": summary.total_progress_percentage,
            "activeGoals": summary.active_goals,
            "activeChallenges": summary.active_challenges,
            "pendingReminders": summary.pending_reminders,
            "monthlyFlows": [
                {
                    "month": flow.month,
                    "label": flow.label,
                    "deposits": format_money(flow.deposits),
                    "withdrawals": format_money(flow.withdrawals),
                }
                for flow in summary.monthly_flows
            ],
            "upcomingGoals": [
                self._goals.serialize(goal) for goal in summary.upcoming_goals
            ],
        }
