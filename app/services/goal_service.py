from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping, cast

from marshmallow import ValidationError

from app.models.goal import GoalStatus, SavingsGoal
from app.models.transaction import Transaction
from app.schemas.goal_schema import GOAL_STATUSES, GoalSchema
from app.schemas.transaction_schema import TransactionSchema
from app.services.errors import ServiceError, require_mapping, validation_error
from app.services.results import MutationResult
from app.storage import (
    GOALS_KEY,
    TRANSACTIONS_KEY,
    CollectionRepository,
    CollectionStore,
)
from app.utils.identifiers import IdFactory, new_record_id

logger = logging.getLogger(__name__)

DERIVED_GOAL_FIELDS = frozenset({"currentAmount"})


def derive_goal_status(goal: SavingsGoal, *, allow_reopen: bool) -> GoalStatus:
    """Status implied by the goal's amounts.

    A funded goal is always completed. Only callers that remove money
    (transaction deletes, target edits) may move completed back to active.
    """
    if goal.is_funded:
        return GoalStatus.COMPLETED
    if allow_reopen and goal.status is GoalStatus.COMPLETED:
        return GoalStatus.ACTIVE
    return goal.status


class GoalService:
    def __init__(
        self,
        store: CollectionStore,
        *,
        id_factory: IdFactory | None = None,
    ) -> None:
        self._store = store
        self._id_factory = id_factory or new_record_id
        self._schema = GoalSchema()
        self._goals: CollectionRepository[SavingsGoal] = CollectionRepository(
            store, GOALS_KEY, GoalSchema()
        )
        self._transactions: CollectionRepository[Transaction] = CollectionRepository(
            store, TRANSACTIONS_KEY, TransactionSchema()
        )

    def list_goals(self, *, status: str | None = None) -> list[SavingsGoal]:
        goals = self._goals.load_all()
        if not status:
            return goals
        normalized = status.strip().lower()
        if normalized not in GOAL_STATUSES:
            raise ServiceError(
                message="Invalid goal status.",
                code="VALIDATION_ERROR",
                status_code=400,
                details={"allowed": list(GOAL_STATUSES)},
            )
        return [goal for goal in goals if goal.status.value == normalized]

    def get_goal(self, goal_id: str) -> SavingsGoal | None:
        return self._goals.find(goal_id)

    def create_goal(self, payload: Mapping[str, Any]) -> SavingsGoal:
        try:
            validated = cast(SavingsGoal, self._schema.load(payload))
        except ValidationError as exc:
            raise validation_error("Invalid savings goal data.", exc) from exc

        goal = replace(validated, id=self._id_factory())
        if goal.status is GoalStatus.ACTIVE and goal.is_funded:
            goal = replace(goal, status=GoalStatus.COMPLETED)
        self._goals.append(goal)
        logger.info("goal_created id=%s type=%s", goal.id, goal.type.value)
        return goal

    def update_goal(self, goal: SavingsGoal) -> MutationResult[SavingsGoal]:
        with self._store.atomic():
            stored = self._goals.find(goal.id)
            if stored is None:
                return MutationResult.not_found(goal)

            # A status sent by the caller must still agree with the amounts;
            # only cancelled is accepted whatever the balance.
            rederive = (
                stored.status is not goal.status
                or stored.target_amount != goal.target_amount
                or stored.current_amount != goal.current_amount
            )
            if rederive and goal.status is not GoalStatus.CANCELLED:
                goal = replace(goal, status=derive_goal_status(goal, allow_reopen=True))
            self._goals.replace(goal)
        return MutationResult.ok(goal)

    def apply_changes(
        self, goal_id: str, payload: Mapping[str, Any]
    ) -> MutationResult[SavingsGoal | None]:
        """Partial edit: merge ``payload`` over the stored goal and update it."""
        payload = require_mapping(payload, "Invalid savings goal update.")
        locked_fields = sorted(DERIVED_GOAL_FIELDS.intersection(payload))
        if locked_fields:
            raise ServiceError(
                message="currentAmount is derived from transactions.",
                code="VALIDATION_ERROR",
                status_code=400,
                details={
                    "messages": {
                        name: ["Record a transaction instead."]
                        for name in locked_fields
                    }
                },
            )

        with self._store.atomic():
            stored = self._goals.find(goal_id)
            if stored is None:
                return MutationResult.not_found(None)
            merged = {**self._schema.dump(stored), **payload, "id": stored.id}
            try:
                validated = cast(SavingsGoal, self._schema.load(merged))
            except ValidationError as exc:
                raise validation_error("Invalid savings goal update.", exc) from exc
            result = self.update_goal(validated)
        return MutationResult(status=result.status, value=result.value)

    def delete_goal(self, goal_id: str) -> bool:
        with self._store.atomic():
            removed = self._goals.remove(goal_id)
            if removed is None:
                return False
            cascaded = self._transactions.remove_where(
                lambda transaction: transaction.goal_id == goal_id
            )
        logger.info("goal_deleted id=%s transactions_removed=%s", goal_id, cascaded)
        return True

    def serialize(self, goal: SavingsGoal) -> dict[str, Any]:
        return cast(dict[str, Any], self._schema.dump(goal))
