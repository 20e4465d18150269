# mypy: disable-error-code=misc

from __future__ import annotations

from typing import Any, Callable

from flask import Response, request
from flask_apispec import doc, use_kwargs
from flask_apispec.views import MethodResource
from marshmallow import fields

from app.controllers.dependencies import challenge_service
from app.controllers.response_contract import (
    not_found_response,
    service_error_response,
    success_response,
)
from app.models.challenge import Challenge
from app.services.challenge_service import ChallengeService
from app.services.errors import ServiceError

CHALLENGE_ID_PARAM = {
    "challenge_id": {"in": "path", "type": "string", "required": True}
}
TRANSITION_RESPONSES = {
    200: {"description": "Challenge status changed"},
    404: {"description": "Challenge not found"},
    409: {"description": "Challenge is not active"},
}


class ChallengeCollectionResource(MethodResource):
    @doc(
        description="List savings challenges with progress and expiry flags.",
        tags=["Challenges"],
        responses={
            200: {"description": "Challenge list"},
            400: {"description": "Invalid status filter"},
        },
    )
    @use_kwargs(
        {
            "status": fields.Str(
                load_default=None,
                metadata={"description": "Only items with this status"},
            )
        },
        location="query",
    )
    def get(self, status: str | None) -> Any:
        service = challenge_service()
        try:
            challenges = service.list_challenges(status=status)
        except ServiceError as exc:
            return service_error_response(exc)
        return success_response(
            message="Challenges listed.",
            data={"items": [service.describe(item) for item in challenges]},
            meta={"total": len(challenges)},
        )

    @doc(
        description="Create a savings challenge, optionally linked to a goal.",
        tags=["Challenges"],
        responses={
            201: {"description": "Challenge created"},
            400: {"description": "Invalid challenge data"},
        },
    )
    def post(self) -> Any:
        payload = request.get_json(silent=True) or {}
        service = challenge_service()
        try:
            challenge = service.create_challenge(payload)
        except ServiceError as exc:
            return service_error_response(exc)
        return success_response(
            message="Challenge created.",
            data={"challenge": service.describe(challenge)},
            status_code=201,
        )


class ChallengeResource(MethodResource):
    @doc(
        description="Return one savings challenge.",
        tags=["Challenges"],
        params=CHALLENGE_ID_PARAM,
        responses={
            200: {"description": "Challenge found"},
            404: {"description": "Challenge not found"},
        },
    )
    def get(self, challenge_id: str) -> Any:
        service = challenge_service()
        challenge = service.get_challenge(challenge_id)
        if challenge is None:
            return not_found_response("Challenge", challenge_id)
        return success_response(
            message="Challenge returned.",
            data={"challenge": service.describe(challenge)},
        )

    @doc(
        description="Edit a savings challenge. Omitted fields keep their value.",
        tags=["Challenges"],
        params=CHALLENGE_ID_PARAM,
        responses={
            200: {"description": "Challenge updated"},
            400: {"description": "Invalid challenge data"},
            404: {"description": "Challenge not found"},
        },
    )
    def put(self, challenge_id: str) -> Any:
        payload = request.get_json(silent=True) or {}
        service = challenge_service()
        try:
            result = service.apply_changes(challenge_id, payload)
        except ServiceError as exc:
            return service_error_response(exc)
        if not result.found or result.value is None:
            return not_found_response("Challenge", challenge_id)
        return success_response(
            message="Challenge updated.",
            data={"challenge": service.describe(result.value)},
        )

    @doc(
        description="Delete a savings challenge.",
        tags=["Challenges"],
        params=CHALLENGE_ID_PARAM,
        responses={
            200: {"description": "Challenge deleted"},
            404: {"description": "Challenge not found"},
        },
    )
    def delete(self, challenge_id: str) -> Any:
        if not challenge_service().delete_challenge(challenge_id):
            return not_found_response("Challenge", challenge_id)
        return success_response(message="Challenge deleted.", data={"id": challenge_id})


def _transition_response(
    challenge_id: str,
    transition: Callable[[ChallengeService, str], Challenge | None],
    message: str,
) -> Response:
    service = challenge_service()
    try:
        challenge = transition(service, challenge_id)
    except ServiceError as exc:
        return service_error_response(exc)
    if challenge is None:
        return not_found_response("Challenge", challenge_id)
    return success_response(
        message=message,
        data={"challenge": service.describe(challenge)},
    )


class ChallengeCompleteResource(MethodResource):
    @doc(
        description="Mark an active challenge as completed.",
        tags=["Challenges"],
        params=CHALLENGE_ID_PARAM,
        responses=TRANSITION_RESPONSES,
    )
    def post(self, challenge_id: str) -> Any:
        return _transition_response(
            challenge_id, ChallengeService.complete_challenge, "Challenge completed."
        )


class ChallengeFailResource(MethodResource):
    @doc(
        description="Mark an active challenge as failed.",
        tags=["Challenges"],
        params=CHALLENGE_ID_PARAM,
        responses=TRANSITION_RESPONSES,
    )
    def post(self, challenge_id: str) -> Any:
        return _transition_response(
            challenge_id, ChallengeService.fail_challenge, "Challenge failed."
        )
