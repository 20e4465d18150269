from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest

from app.models.transaction import TransactionType
from app.services.chain_event_service import ChainEventService
from app.services.errors import ServiceError
from app.services.goal_service import GoalService
from app.services.transaction_service import TransactionService

WALLET = "0x" + "1f" * 20


def _hash(seed: str) -> str:
    return "0x" + (seed * 64)[:64]


def _event(tx_hash: str, amount: Any = "25", event_type: str = "Deposited", **extra):
    event = {
        "type": event_type,
        "user": WALLET,
        "amount": amount,
        "timestamp": 1767225600,
        "transactionHash": tx_hash,
    }
    event.update(extra)
    return event


@pytest.fixture
def goal(store):
    return GoalService(store).create_goal(
        {
            "name": "Crypto stash",
            "type": "crypto",
            "targetAmount": "100.00",
            "startDate": "2026-01-01T00:00:00+00:00",
            "endDate": "2026-12-31T00:00:00+00:00",
        }
    )


def test_import_records_deposits_and_withdrawals(store, goal) -> None:
    service = ChainEventService(store)

    result = service.import_events(
        goal.id,
        {
            "events": [
                _event(_hash("a"), "40"),
                _event(_hash("b"), "15", "Withdrawn", timestamp=1767312000),
            ]
        },
    )

    assert len(result.created) == 2
    assert result.skipped_hashes == ()
    withdrawal = result.created[1].transaction
    assert withdrawal.type is TransactionType.WITHDRAWAL
    assert withdrawal.tx_hash == _hash("b")
    assert WALLET in withdrawal.description
    assert GoalService(store).get_goal(goal.id).current_amount == Decimal("25.00")


def test_import_skips_known_and_repeated_hashes(store, goal) -> None:
    service = ChainEventService(store)
    service.import_events(goal.id, {"events": [_event(_hash("a"))]})

    result = service.import_events(
        goal.id,
        {
            "events": [
                _event(_hash("A")),
                _event(_hash("c")),
                _event(_hash("c")),
            ]
        },
    )

    assert len(result.created) == 1
    assert result.skipped_hashes == (_hash("a"), _hash("c"))
    assert len(TransactionService(store).list_by_goal(goal.id)) == 2


def test_import_accepts_iso_timestamps(store, goal) -> None:
    result = ChainEventService(store).import_events(
        goal.id,
        {"events": [_event(_hash("d"), timestamp="2026-02-01T08:30:00Z")]},
    )

    assert result.created[0].transaction.date.isoformat() == "2026-02-01T08:30:00+00:00"


@pytest.mark.parametrize(
    "override",
    [
        {"user": "0x1234"},
        {"amount": "0"},
        {"amount": "-3"},
        {"transactionHash": "0xnothex"},
        {"type": "Transfer"},
    ],
)
def test_invalid_events_abort_the_whole_batch(store, goal, override) -> None:
    service = ChainEventService(store)
    batch = {"events": [_event(_hash("e")), {**_event(_hash("f")), **override}]}

    with pytest.raises(ServiceError) as exc_info:
        service.import_events(goal.id, batch)

    assert exc_info.value.code == "VALIDATION_ERROR"
    assert TransactionService(store).list_transactions() == []


def test_import_for_unknown_goal_returns_none(store) -> None:
    result = ChainEventService(store).import_events(
        "missing", {"events": [_event(_hash("9"))]}
    )

    assert result is None
    assert TransactionService(store).list_transactions() == []
