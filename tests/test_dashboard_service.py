from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from typing import Any

from app.services.challenge_service import ChallengeService
from app.services.dashboard_service import DashboardService, build_monthly_flows
from app.services.goal_service import GoalService
from app.services.reminder_service import ReminderService
from app.services.transaction_service import TransactionService


def _goal(store, name: str, target: str, end: str, **overrides: Any):
    payload: dict[str, Any] = {
        "name": name,
        "type": "savings",
        "targetAmount": target,
        "startDate": "2026-01-01T00:00:00+00:00",
        "endDate": end,
    }
    payload.update(overrides)
    return GoalService(store).create_goal(payload)


def _tx(store, goal_id: str, amount: str, date: str, tx_type: str = "deposit"):
    return TransactionService(store).create_transaction(
        {"goalId": goal_id, "amount": amount, "date": date, "type": tx_type}
    )


def test_empty_dashboard(store, now) -> None:
    summary = DashboardService(store, now_provider=lambda: now).build_summary()

    assert summary.total_saved == Decimal("0")
    assert summary.total_progress_percentage == 0
    assert summary.monthly_flows == ()
    assert summary.upcoming_goals == ()


def test_summary_aggregates_goals_challenges_and_reminders(store, now) -> None:
    first = _goal(store, "First", "1000.00", "2026-06-01T00:00:00+00:00")
    second = _goal(store, "Second", "1000.00", "2026-04-01T00:00:00+00:00")
    third = _goal(store, "Third", "500.00", "2026-05-01T00:00:00+00:00")
    _goal(store, "Fourth", "500.00", "2026-12-01T00:00:00+00:00")
    _goal(store, "Funded", "100.00", "2026-03-20T00:00:00+00:00", currentAmount="100")
    _tx(store, first.id, "300.00", "2026-01-15T00:00:00+00:00")
    _tx(store, second.id, "200.00", "2026-02-10T00:00:00+00:00")
    _tx(store, first.id, "50.00", "2026-02-20T00:00:00+00:00", "withdrawal")

    challenges = ChallengeService(store, now_provider=lambda: now)
    challenge_payload = {
        "name": "Monthly Saver",
        "startDate": "2026-03-01T00:00:00+00:00",
        "endDate": "2026-03-31T00:00:00+00:00",
    }
    challenges.create_challenge(challenge_payload)
    done = challenges.create_challenge({**challenge_payload, "name": "Done"})
    challenges.complete_challenge(done.id)
    ReminderService(store, now_provider=lambda: now).create_reminder(
        first.id, "Remember", now - timedelta(hours=1)
    )

    summary = DashboardService(store, now_provider=lambda: now).build_summary()

    assert summary.total_saved == Decimal("550.00")
    assert summary.total_target == Decimal("3100.00")
    assert summary.total_progress_percentage == 18
    assert summary.active_goals == 4
    assert summary.active_challenges == 1
    assert summary.pending_reminders == 1
    assert [goal.id for goal in summary.upcoming_goals] == [
        second.id,
        third.id,
        first.id,
    ]


def test_monthly_flows_are_chronological(store) -> None:
    goal = _goal(store, "Flows", "1000.00", "2026-12-01T00:00:00+00:00")
    _tx(store, goal.id, "10.00", "2026-03-02T00:00:00+00:00")
    _tx(store, goal.id, "20.00", "2025-12-31T23:00:00+00:00")
    _tx(store, goal.id, "5.00", "2026-03-20T00:00:00+00:00", "withdrawal")
    _tx(store, goal.id, "7.50", "2026-03-21T00:00:00+00:00")

    flows = build_monthly_flows(TransactionService(store).list_transactions())

    assert [flow.month for flow in flows] == ["2025-12", "2026-03"]
    assert flows[0].label == "Dec 2025"
    assert flows[1].deposits == Decimal("17.50")
    assert flows[1].withdrawals == Decimal("5.00")


def test_serialize_formats_money_and_goals(store, now) -> None:
    goal = _goal(store, "Only", "200.00", "2026-06-01T00:00:00+00:00")
    _tx(store, goal.id, "50.00", "2026-02-01T00:00:00+00:00")
    service = DashboardService(store, now_provider=lambda: now)

    payload = service.serialize(service.build_summary())

    assert payload["totalSaved"] == "50.00"
    assert payload["totalProgressPercentage"] == 25
    assert payload["monthlyFlows"][0]["deposits"] == "50.00"
    assert payload["upcomingGoals"][0]["name"] == "Only"
