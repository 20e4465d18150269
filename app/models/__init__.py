from .challenge import Challenge, ChallengeStatus
from .goal import (
    GoalPriority,
    GoalStatus,
    GoalType,
    ReminderFrequency,
    SavingsGoal,
)
from .reminder import Reminder
from .transaction import Transaction, TransactionType

__all__ = [
    "Challenge",
    "ChallengeStatus",
    "GoalPriority",
    "GoalStatus",
    "GoalType",
    "ReminderFrequency",
    "SavingsGoal",
    "Reminder",
    "Transaction",
    "TransactionType",
]
