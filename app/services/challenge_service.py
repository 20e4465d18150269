from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Mapping, cast

from marshmallow import ValidationError

from app.models.challenge import Challenge, ChallengeStatus
from app.models.goal import SavingsGoal
from app.schemas.challenge_schema import ChallengeSchema
from app.schemas.goal_schema import GoalSchema
from app.services.errors import ServiceError, require_mapping, validation_error
from app.services.results import MutationResult
from app.storage import (
    CHALLENGES_KEY,
    GOALS_KEY,
    CollectionRepository,
    CollectionStore,
)
from app.utils.datetime_utils import ensure_aware, utc_now
from app.utils.identifiers import IdFactory, new_record_id
from app.utils.money import capped_percentage

logger = logging.getLogger(__name__)

CHALLENGE_STATUSES = tuple(status.value for status in ChallengeStatus)


def challenge_progress(challenge: Challenge) -> int:
    """Whole-number percent of the challenge target reached, capped at 100."""
    if not challenge.target_amount or not challenge.current_amount:
        return 0
    return capped_percentage(challenge.current_amount, challenge.target_amount)


class ChallengeService:
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
        self._schema = ChallengeSchema()
        self._challenges: CollectionRepository[Challenge] = CollectionRepository(
            store, CHALLENGES_KEY, ChallengeSchema()
        )
        self._goals: CollectionRepository[SavingsGoal] = CollectionRepository(
            store, GOALS_KEY, GoalSchema()
        )

    def list_challenges(self, *, status: str | None = None) -> list[Challenge]:
        challenges = self._challenges.load_all()
        if not status:
            return challenges
        normalized = status.strip().lower()
        if normalized not in CHALLENGE_STATUSES:
            raise ServiceError(
                message="Invalid challenge status.",
                code="VALIDATION_ERROR",
                status_code=400,
                details={"allowed": list(CHALLENGE_STATUSES)},
            )
        return [item for item in challenges if item.status.value == normalized]

    def get_challenge(self, challenge_id: str) -> Challenge | None:
        return self._challenges.find(challenge_id)

    def create_challenge(self, payload: Mapping[str, Any]) -> Challenge:
        try:
            validated = cast(Challenge, self._schema.load(payload))
        except ValidationError as exc:
            raise validation_error("Invalid challenge data.", exc) from exc
        challenge = replace(validated, id=self._id_factory())
        self._challenges.append(challenge)
        logger.info("challenge_created id=%s", challenge.id)
        return challenge

    def update_challenge(self, challenge: Challenge) -> MutationResult[Challenge]:
        if self._challenges.replace(challenge):
            return MutationResult.ok(challenge)
        return MutationResult.not_found(challenge)

    def apply_changes(
        self, challenge_id: str, payload: Mapping[str, Any]
    ) -> MutationResult[Challenge | None]:
        payload = require_mapping(payload, "Invalid challenge update.")
        with self._store.atomic():
            stored = self._challenges.find(challenge_id)
            if stored is None:
                return MutationResult.not_found(None)
            merged = {**self._schema.dump(stored), **payload, "id": stored.id}
            try:
                validated = cast(Challenge, self._schema.load(merged))
            except ValidationError as exc:
                raise validation_error("Invalid challenge update.", exc) from exc
            result = self.update_challenge(validated)
        return MutationResult(status=result.status, value=result.value)

    def delete_challenge(self, challenge_id: str) -> bool:
        return self._challenges.remove(challenge_id) is not None

    def complete_challenge(self, challenge_id: str) -> Challenge | None:
        return self._transition(challenge_id, ChallengeStatus.COMPLETED)

    def fail_challenge(self, challenge_id: str) -> Challenge | None:
        return self._transition(challenge_id, ChallengeStatus.FAILED)

    def is_expired(self, challenge: Challenge, now: datetime | None = None) -> bool:
        reference = ensure_aware(now) if now is not None else self._now_provider()
        if challenge.status is not ChallengeStatus.ACTIVE:
            return False
        return ensure_aware(challenge.end_date) < reference

    def linked_goal(self, challenge: Challenge) -> SavingsGoal | None:
        if not challenge.goal_id:
            return None
        return self._goals.find(challenge.goal_id)

    def describe(self, challenge: Challenge) -> dict[str, Any]:
        """Stored fields plus the values the UI derives for display."""
        linked_goal = self.linked_goal(challenge)
        return {
            **cast(dict[str, Any], self._schema.dump(challenge)),
            "isExpired": self.is_expired(challenge),
            "progressPercentage": challenge_progress(challenge),
            "goalName": linked_goal.name if linked_goal else None,
        }

    def _transition(
        self, challenge_id: str, target: ChallengeStatus
    ) -> Challenge | None:
        with self._store.atomic():
            challenge = self._challenges.find(challenge_id)
            if challenge is None:
                return None
            if challenge.status is not ChallengeStatus.ACTIVE:
                raise ServiceError(
                    message=f"Challenge is already {challenge.status.value}.",
                    code="INVALID_STATUS_TRANSITION",
                    status_code=409,
                    details={
                        "current_status": challenge.status.value,
                        "requested_status": target.value,
                    },
                )
            updated = replace(challenge, status=target)
            self._challenges.replace(updated)
        logger.info(
            "challenge_status_changed id=%s to=%s", challenge_id, target.value
        )
        return updated
