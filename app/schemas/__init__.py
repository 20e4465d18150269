"""
Marshmallow schemas for the savings ledger.

Each entity schema validates API input, loads it into the frozen model
dataclass and dumps models back to the camelCase JSON records that are
persisted in the collection store.
"""

from .calculator_schema import RoiInputSchema
from .chain_event_schema import ChainEventBatchSchema, ChainEventSchema
from .challenge_schema import ChallengeSchema
from .goal_schema import GOAL_STATUSES, GoalSchema
from .reminder_schema import ReminderSchema
from .transaction_schema import TransactionSchema

__all__ = [
    "GOAL_STATUSES",
    "GoalSchema",
    "TransactionSchema",
    "ChallengeSchema",
    "ReminderSchema",
    "RoiInputSchema",
    "ChainEventSchema",
    "ChainEventBatchSchema",
]
