from . import resources as _resources  # noqa: F401
from . import routes as _routes  # noqa: F401
from .blueprint import goal_bp
from .resources import (
    GoalChainEventsResource,
    GoalCollectionResource,
    GoalProgressResource,
    GoalResource,
    GoalTransactionsResource,
)

__all__ = [
    "goal_bp",
    "GoalCollectionResource",
    "GoalResource",
    "GoalProgressResource",
    "GoalTransactionsResource",
    "GoalChainEventsResource",
]
