from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from flask import Flask, current_app

from app.extensions.storage import get_collection_store
from app.services.chain_event_service import ChainEventService
from app.services.challenge_service import ChallengeService
from app.services.dashboard_service import DashboardService
from app.services.goal_service import GoalService
from app.services.progress_service import ProgressService
from app.services.reminder_service import ReminderService
from app.services.transaction_service import TransactionService
from app.storage import CollectionStore

SAVINGS_DEPENDENCIES_EXTENSION_KEY = "savings_dependencies"


@dataclass(frozen=True)
class SavingsDependencies:
    goal_service_factory: Callable[[CollectionStore], GoalService]
    transaction_service_factory: Callable[[CollectionStore], TransactionService]
    challenge_service_factory: Callable[[CollectionStore], ChallengeService]
    reminder_service_factory: Callable[[CollectionStore], ReminderService]
    chain_event_service_factory: Callable[[CollectionStore], ChainEventService]
    dashboard_service_factory: Callable[[CollectionStore], DashboardService]
    progress_service_factory: Callable[[], ProgressService]


def _default_dependencies() -> SavingsDependencies:
    return SavingsDependencies(
        goal_service_factory=GoalService,
        transaction_service_factory=TransactionService,
        challenge_service_factory=ChallengeService,
        reminder_service_factory=ReminderService,
        chain_event_service_factory=ChainEventService,
        dashboard_service_factory=DashboardService,
        progress_service_factory=ProgressService,
    )


def register_savings_dependencies(
    app: Flask,
    dependencies: SavingsDependencies | None = None,
) -> None:
    if dependencies is None:
        dependencies = _default_dependencies()
    app.extensions.setdefault(SAVINGS_DEPENDENCIES_EXTENSION_KEY, dependencies)


def get_savings_dependencies() -> SavingsDependencies:
    configured = current_app.extensions.get(SAVINGS_DEPENDENCIES_EXTENSION_KEY)
    if isinstance(configured, SavingsDependencies):
        return configured
    fallback = _default_dependencies()
    current_app.extensions[SAVINGS_DEPENDENCIES_EXTENSION_KEY] = fallback
    return fallback


def goal_service() -> GoalService:
    return get_savings_dependencies().goal_service_factory(get_collection_store())


def transaction_service() -> TransactionService:
    return get_savings_dependencies().transaction_service_factory(
        get_collection_store()
    )


def challenge_service() -> ChallengeService:
    return get_savings_dependencies().challenge_service_factory(get_collection_store())


def reminder_service() -> ReminderService:
    return get_savings_dependencies().reminder_service_factory(get_collection_store())


def chain_event_service() -> ChainEventService:
    return get_savings_dependencies().chain_event_service_factory(
        get_collection_store()
    )


def dashboard_service() -> DashboardService:
    return get_savings_dependencies().dashboard_service_factory(get_collection_store())


def progress_service() -> ProgressService:
    return get_savings_dependencies().progress_service_factory()
