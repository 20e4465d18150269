from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, cast

from app.models.goal import GoalStatus, SavingsGoal
from app.models.reminder import Reminder
from app.schemas.goal_schema import GoalSchema
from app.schemas.reminder_schema import ReminderSchema
from app.storage import (
    GOALS_KEY,
    REMINDERS_KEY,
    CollectionRepository,
    CollectionStore,
)
from app.utils.datetime_utils import ensure_aware, utc_now
from app.utils.identifiers import IdFactory, new_record_id

logger = logging.getLogger(__name__)

REMINDER_MESSAGE_TEMPLATE = 'Remember to add to your "{name}" goal!'


def reminder_message(goal: SavingsGoal) -> str:
    return REMINDER_MESSAGE_TEMPLATE.format(name=goal.name)


def next_reminder_due(goal: SavingsGoal, now: datetime) -> datetime | None:
    """When ``goal`` should get its next reminder, or None if not yet due.

    A goal that never had a reminder is due immediately. Otherwise the
    reminder is dated at the scheduled slot, so a goal that missed several
    intervals catches up one interval per call.
    """
    if goal.status is not GoalStatus.ACTIVE or goal.reminder_frequency is None:
        return None
    if goal.last_reminder_sent is None:
        return now
    due_at = ensure_aware(goal.last_reminder_sent) + goal.reminder_frequency.interval
    return due_at if now >= due_at else None


class ReminderService:
    def __init__(
        self,
        store: CollectionStore,
        *,
        id_factory: IdFactory | None = None,
        now_provider: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._id_factory = id_factory or new_record_id
        self._now_provider = now_provider or utc_now
        self._schema = ReminderSchema()
        self._reminders: CollectionRepository[Reminder] = CollectionRepository(
            store, REMINDERS_KEY, ReminderSchema()
        )
        self._goals: CollectionRepository[SavingsGoal] = CollectionRepository(
            store, GOALS_KEY, GoalSchema()
        )

    def list_reminders(self) -> list[Reminder]:
        return self._reminders.load_all()

    def list_pending(self) -> list[Reminder]:
        now = self._now_provider()
        pending = [
            item
            for item in self._reminders.load_all()
            if not item.acknowledged and ensure_aware(item.date) <= now
        ]
        pending.sort(key=lambda item: item.date, reverse=True)
        return pending

    def list_acknowledged(self, *, limit: int = 5) -> list[Reminder]:
        acknowledged = [item for item in self._reminders.load_all() if item.acknowledged]
        acknowledged.sort(key=lambda item: item.date, reverse=True)
        return acknowledged[:limit]

    def acknowledge(self, reminder_id: str) -> bool:
        """Mark a reminder as seen. Only an unknown id returns False."""
        with self._store.atomic():
            reminder = self._reminders.find(reminder_id)
            if reminder is None:
                return False
            if not reminder.acknowledged:
                self._reminders.replace(replace(reminder, acknowledged=True))
        return True

    def create_reminder(
        self, goal_id: str, message: str, date: datetime | None = None
    ) -> Reminder:
        reminder = Reminder(
            goal_id=goal_id,
            message=message,
            date=date or self._now_provider(),
            id=self._id_factory(),
        )
        self._reminders.append(reminder)
        return reminder

    def generate_for_goals(self) -> list[Reminder]:
        now = self._now_provider()
        created: list[Reminder] = []
        with self._store.atomic():
            goals = self._goals.load_all()
            reminders = self._reminders.load_all()
            updated_goals: list[SavingsGoal] = []
            for goal in goals:
                due_at = next_reminder_due(goal, now)
                if due_at is not None:
                    reminder = Reminder(
                        goal_id=goal.id,
                        message=reminder_message(goal),
                        date=due_at,
                        id=self._id_factory(),
                    )
                    reminders.append(reminder)
                    created.append(reminder)
                    goal = replace(goal, last_reminder_sent=due_at)
                updated_goals.append(goal)

            if created:
                self._reminders.save_all(reminders)
                self._goals.save_all(updated_goals)
        logger.info("reminders_generated count=%s", len(created))
        return created

    def serialize(self, reminder: Reminder) -> dict[str, Any]:
        return cast(dict[str, Any], self._schema.dump(reminder))
