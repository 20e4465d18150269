from .calculator_controller import RoiCalculatorResource, calculator_bp
from .challenge import (
    ChallengeCollectionResource,
    ChallengeCompleteResource,
    ChallengeFailResource,
    ChallengeResource,
    challenge_bp,
)
from .dashboard_controller import DashboardResource, dashboard_bp
from .goal import (
    GoalChainEventsResource,
    GoalCollectionResource,
    GoalProgressResource,
    GoalResource,
    GoalTransactionsResource,
    goal_bp,
)
from .health_controller import health_bp, healthz
from .reminder import (
    ReminderAcknowledgeResource,
    ReminderCollectionResource,
    ReminderGenerateResource,
    ReminderPendingResource,
    reminder_bp,
)
from .transaction import (
    TransactionCollectionResource,
    TransactionResource,
    transaction_bp,
)

all_blueprints = [
    health_bp,
    goal_bp,
    transaction_bp,
    challenge_bp,
    reminder_bp,
    calculator_bp,
    dashboard_bp,
]

# (resource, blueprint name, endpoint) triples documented in the OpenAPI spec.
documented_resources = [
    (healthz, "health", "healthz"),
    (GoalCollectionResource, "goal", "goal_collection"),
    (GoalResource, "goal", "goal_resource"),
    (GoalProgressResource, "goal", "goal_progress"),
    (GoalTransactionsResource, "goal", "goal_transactions"),
    (GoalChainEventsResource, "goal", "goal_chain_events"),
    (TransactionCollectionResource, "transaction", "transaction_collection"),
    (TransactionResource, "transaction", "transaction_resource"),
    (ChallengeCollectionResource, "challenge", "challenge_collection"),
    (ChallengeResource, "challenge", "challenge_resource"),
    (ChallengeCompleteResource, "challenge", "challenge_complete"),
    (ChallengeFailResource, "challenge", "challenge_fail"),
    (ReminderCollectionResource, "reminder", "reminder_collection"),
    (ReminderPendingResource, "reminder", "reminder_pending"),
    (ReminderGenerateResource, "reminder", "reminder_generate"),
    (ReminderAcknowledgeResource, "reminder", "reminder_acknowledge"),
    (RoiCalculatorResource, "calculator", "roi_calculator"),
    (DashboardResource, "dashboard", "dashboard"),
]
