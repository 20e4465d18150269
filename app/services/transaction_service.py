from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Mapping, cast

from marshmallow import ValidationError

from app.models.goal import SavingsGoal
from app.models.transaction import Transaction
from app.schemas.goal_schema import GoalSchema
from app.schemas.transaction_schema import TransactionSchema
from app.services.errors import require_mapping, validation_error
from app.services.goal_service import derive_goal_status
from app.services.results import MutationResult
from app.storage import (
    GOALS_KEY,
    TRANSACTIONS_KEY,
    CollectionRepository,
    CollectionStore,
)
from app.utils.identifiers import IdFactory, new_record_id
from app.utils.money import ZERO

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerEntry:
    transaction: Transaction
    # None when the owning goal no longer exists; the recompute was skipped.
    goal: SavingsGoal | None


class TransactionService:
    """Transaction log plus the goal balance it drives.

    Every write stores the transaction first and then adjusts the owning
    goal's ``current_amount`` inside the same atomic block, so the two
    collections are persisted together.
    """

    def __init__(
        self,
        store: CollectionStore,
        *,
        id_factory: IdFactory | None = None,
    ) -> None:
        self._store = store
        self._id_factory = id_factory or new_record_id
        self._schema = TransactionSchema()
        self._transactions: CollectionRepository[Transaction] = CollectionRepository(
            store, TRANSACTIONS_KEY, TransactionSchema()
        )
        self._goals: CollectionRepository[SavingsGoal] = CollectionRepository(
            store, GOALS_KEY, GoalSchema()
        )

    def list_transactions(self, *, newest_first: bool = False) -> list[Transaction]:
        transactions = self._transactions.load_all()
        if newest_first:
            transactions.sort(key=lambda item: item.date, reverse=True)
        return transactions

    def list_by_goal(
        self, goal_id: str, *, newest_first: bool = False
    ) -> list[Transaction]:
        return [
            transaction
            for transaction in self.list_transactions(newest_first=newest_first)
            if transaction.goal_id == goal_id
        ]

    def get_transaction(self, transaction_id: str) -> Transaction | None:
        return self._transactions.find(transaction_id)

    def find_by_tx_hash(self, tx_hash: str) -> Transaction | None:
        wanted = tx_hash.lower()
        for transaction in self._transactions.load_all():
            if transaction.tx_hash and transaction.tx_hash.lower() == wanted:
                return transaction
        return None

    def create_transaction(self, payload: Mapping[str, Any]) -> LedgerEntry:
        try:
            validated = cast(Transaction, self._schema.load(payload))
        except ValidationError as exc:
            raise validation_error("Invalid transaction data.", exc) from exc
        return self.record_transaction(validated)

    def record_transaction(self, transaction: Transaction) -> LedgerEntry:
        """Store an already validated transaction and apply it to its goal."""
        if not transaction.id:
            transaction = replace(transaction, id=self._id_factory())
        with self._store.atomic():
            self._transactions.append(transaction)
            goal = self._apply_to_goal(
                transaction.goal_id, transaction.signed_amount, allow_reopen=False
            )
        logger.info(
            "transaction_recorded id=%s goal_id=%s type=%s amount=%s",
            transaction.id,
            transaction.goal_id,
            transaction.type.value,
            transaction.amount,
        )
        return LedgerEntry(transaction=transaction, goal=goal)

    def update_transaction(
        self, transaction: Transaction
    ) -> MutationResult[LedgerEntry]:
        with self._store.atomic():
            previous = self._transactions.find(transaction.id)
            if previous is None:
                return MutationResult.not_found(
                    LedgerEntry(transaction=transaction, goal=None)
                )

            self._transactions.replace(transaction)
            if previous.goal_id != transaction.goal_id:
                self._apply_to_goal(
                    previous.goal_id, -previous.signed_amount, allow_reopen=True
                )
                goal = self._apply_to_goal(
                    transaction.goal_id, transaction.signed_amount, allow_reopen=False
                )
            elif (
                previous.amount == transaction.amount
                and previous.type is transaction.type
            ):
                goal = self._goals.find(transaction.goal_id)
            else:
                goal = self._apply_to_goal(
                    transaction.goal_id,
                    transaction.signed_amount - previous.signed_amount,
                    allow_reopen=False,
                )
        return MutationResult.ok(LedgerEntry(transaction=transaction, goal=goal))

    def apply_changes(
        self, transaction_id: str, payload: Mapping[str, Any]
    ) -> MutationResult[LedgerEntry | None]:
        payload = require_mapping(payload, "Invalid transaction update.")
        with self._store.atomic():
            stored = self._transactions.find(transaction_id)
            if stored is None:
                return MutationResult.not_found(None)
            merged = {**self._schema.dump(stored), **payload, "id": stored.id}
            try:
                validated = cast(Transaction, self._schema.load(merged))
            except ValidationError as exc:
                raise validation_error("Invalid transaction update.", exc) from exc
            result = self.update_transaction(validated)
        return MutationResult(status=result.status, value=result.value)

    def delete_transaction(self, transaction_id: str) -> bool:
        with self._store.atomic():
            removed = self._transactions.remove(transaction_id)
            if removed is None:
                return False
            self._apply_to_goal(
                removed.goal_id, -removed.signed_amount, allow_reopen=True
            )
        logger.info(
            "transaction_deleted id=%s goal_id=%s", transaction_id, removed.goal_id
        )
        return True

    def serialize(self, transaction: Transaction) -> dict[str, Any]:
        return cast(dict[str, Any], self._schema.dump(transaction))

    def _apply_to_goal(
        self, goal_id: str, delta: Decimal, *, allow_reopen: bool
    ) -> SavingsGoal | None:
        goal = self._goals.find(goal_id)
        if goal is None:
            logger.warning("goal_recompute_skipped goal_id=%s reason=not_found", goal_id)
            return None

        funded = replace(goal, current_amount=max(goal.current_amount + delta, ZERO))
        updated = replace(
            funded, status=derive_goal_status(funded, allow_reopen=allow_reopen)
        )
        self._goals.replace(updated)
        if updated.status is not goal.status:
            logger.info(
                "goal_status_changed id=%s from=%s to=%s",
                goal_id,
                goal.status.value,
                updated.status.value,
            )
        return updated
