from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from marshmallow import ValidationError

from app.models.transaction import Transaction, TransactionType
from app.schemas.chain_event_schema import ChainEventBatchSchema
from app.services.errors import validation_error
from app.services.goal_service import GoalService
from app.services.transaction_service import LedgerEntry, TransactionService
from app.storage import CollectionStore
from app.utils.identifiers import IdFactory

logger = logging.getLogger(__name__)

_EVENT_TRANSACTION_TYPES = {
    "Deposited": TransactionType.DEPOSIT,
    "Withdrawn": TransactionType.WITHDRAWAL,
}


@dataclass(frozen=True)
class ChainImportResult:
    created: tuple[LedgerEntry, ...]
    skipped_hashes: tuple[str, ...]


class ChainEventService:
    """Records savings contract events against a goal's ledger.

    Events already imported (matched by transaction hash, case-insensitive)
    are skipped, including duplicates inside the same batch.
    """

    def __init__(
        self,
        store: CollectionStore,
        *,
        id_factory: IdFactory | None = None,
    ) -> None:
        self._store = store
        self._goals = GoalService(store, id_factory=id_factory)
        self._transactions = TransactionService(store, id_factory=id_factory)
        self._schema = ChainEventBatchSchema()

    def import_events(
        self, goal_id: str, payload: Mapping[str, Any]
    ) -> ChainImportResult | None:
        try:
            batch = self._schema.load(payload)
        except ValidationError as exc:
            raise validation_error("Invalid chain event batch.", exc) from exc

        created: list[LedgerEntry] = []
        skipped: list[str] = []
        with self._store.atomic():
            if self._goals.get_goal(goal_id) is None:
                return None

            known_hashes = {
                transaction.tx_hash.lower()
                for transaction in self._transactions.list_transactions()
                if transaction.tx_hash
            }
            for event in sorted(batch["events"], key=lambda item: item["timestamp"]):
                tx_hash = event["transaction_hash"].lower()
                if tx_hash in known_hashes:
                    skipped.append(tx_hash)
                    logger.info(
                        "chain_event_skipped goal_id=%s tx_hash=%s reason=duplicate",
                        goal_id,
                        tx_hash,
                    )
                    continue
                known_hashes.add(tx_hash)
                created.append(
                    self._transactions.record_transaction(
                        self._to_transaction(goal_id, event, tx_hash)
                    )
                )

        logger.info(
            "chain_events_imported goal_id=%s created=%s skipped=%s",
            goal_id,
            len(created),
            len(skipped),
        )
        return ChainImportResult(created=tuple(created), skipped_hashes=tuple(skipped))

    @staticmethod
    def _to_transaction(
        goal_id: str, event: Mapping[str, Any], tx_hash: str
    ) -> Transaction:
        transaction_type = _EVENT_TRANSACTION_TYPES[event["type"]]
        verb = "deposit" if transaction_type is TransactionType.DEPOSIT else "withdrawal"
        return Transaction(
            goal_id=goal_id,
            amount=event["amount"],
            date=event["timestamp"],
            type=transaction_type,
            description=f"On-chain {verb} from {event['user']}",
            tx_hash=tx_hash,
        )
