# mypy: disable-error-code=misc

from __future__ import annotations

from typing import Any

from flask import current_app, request
from flask_apispec import doc, use_kwargs
from flask_apispec.views import MethodResource
from marshmallow import fields

from app.controllers.dependencies import (
    chain_event_service,
    goal_service,
    progress_service,
    transaction_service,
)
from app.controllers.response_contract import (
    not_found_response,
    service_error_response,
    success_response,
)
from app.services.errors import ServiceError

GOAL_ID_PARAM = {"goal_id": {"in": "path", "type": "string", "required": True}}


class GoalCollectionResource(MethodResource):
    @doc(
        description="Create a savings goal. currentAmount is derived from transactions.",
        tags=["Goals"],
        responses={
            201: {"description": "Goal created"},
            400: {"description": "Invalid goal data"},
        },
    )
    def post(self) -> Any:
        payload = request.get_json(silent=True) or {}
        service = goal_service()
        try:
            goal = service.create_goal(payload)
        except ServiceError as exc:
            return service_error_response(exc)

        return success_response(
            message="Goal created.",
            data={"goal": service.serialize(goal)},
            status_code=201,
        )

    @doc(
        description="List savings goals, optionally filtered by status.",
        tags=["Goals"],
        responses={
            200: {"description": "Goal list"},
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
        service = goal_service()
        try:
            goals = service.list_goals(status=status)
        except ServiceError as exc:
            return service_error_response(exc)

        return success_response(
            message="Goals listed.",
            data={"items": [service.serialize(goal) for goal in goals]},
            meta={"total": len(goals)},
        )


class GoalResource(MethodResource):
    @doc(
        description="Return one savings goal.",
        tags=["Goals"],
        params=GOAL_ID_PARAM,
        responses={
            200: {"description": "Goal found"},
            404: {"description": "Goal not found"},
        },
    )
    def get(self, goal_id: str) -> Any:
        service = goal_service()
        goal = service.get_goal(goal_id)
        if goal is None:
            return not_found_response("Goal", goal_id)
        return success_response(
            message="Goal returned.",
            data={"goal": service.serialize(goal)},
        )

    @doc(
        description=(
            "Edit a savings goal. Omitted fields keep their stored value; "
            "currentAmount cannot be edited."
        ),
        tags=["Goals"],
        params=GOAL_ID_PARAM,
        responses={
            200: {"description": "Goal updated"},
            400: {"description": "Invalid goal data"},
            404: {"description": "Goal not found"},
        },
    )
    def put(self, goal_id: str) -> Any:
        payload = request.get_json(silent=True) or {}
        service = goal_service()
        try:
            result = service.apply_changes(goal_id, payload)
        except ServiceError as exc:
            return service_error_response(exc)

        if not result.found or result.value is None:
            return not_found_response("Goal", goal_id)
        return success_response(
            message="Goal updated.",
            data={"goal": service.serialize(result.value)},
        )

    @doc(
        description="Delete a savings goal together with its transactions.",
        tags=["Goals"],
        params=GOAL_ID_PARAM,
        responses={
            200: {"description": "Goal deleted"},
            404: {"description": "Goal not found"},
        },
    )
    def delete(self, goal_id: str) -> Any:
        if not goal_service().delete_goal(goal_id):
            return not_found_response("Goal", goal_id)
        current_app.logger.info("goal_delete_requested goal_id=%s", goal_id)
        return success_response(message="Goal deleted.", data={"id": goal_id})


class GoalProgressResource(MethodResource):
    @doc(
        description="Progress report: amount and time progress, on-track flag.",
        tags=["Goals"],
        params=GOAL_ID_PARAM,
        responses={
            200: {"description": "Progress report"},
            404: {"description": "Goal not found"},
        },
    )
    def get(self, goal_id: str) -> Any:
        goals = goal_service()
        goal = goals.get_goal(goal_id)
        if goal is None:
            return not_found_response("Goal", goal_id)

        progress = progress_service()
        report = progress.build_report(
            goal, transaction_service().list_by_goal(goal_id)
        )
        return success_response(
            message="Goal progress calculated.",
            data={
                "goal": goals.serialize(goal),
                "progress": progress.serialize_report(report),
            },
        )


class GoalTransactionsResource(MethodResource):
    @doc(
        description="List a goal's transactions, newest first.",
        tags=["Goals"],
        params=GOAL_ID_PARAM,
        responses={
            200: {"description": "Transaction list"},
            404: {"description": "Goal not found"},
        },
    )
    def get(self, goal_id: str) -> Any:
        if goal_service().get_goal(goal_id) is None:
            return not_found_response("Goal", goal_id)

        service = transaction_service()
        transactions = service.list_by_goal(goal_id, newest_first=True)
        return success_response(
            message="Goal transactions listed.",
            data={"items": [service.serialize(item) for item in transactions]},
            meta={"total": len(transactions)},
        )


class GoalChainEventsResource(MethodResource):
    @doc(
        description=(
            "Import Deposited/Withdrawn events from the savings contract. "
            "Events whose transactionHash was already imported are skipped."
        ),
        tags=["Goals"],
        params=GOAL_ID_PARAM,
        responses={
            201: {"description": "Events imported"},
            400: {"description": "Invalid event batch"},
            404: {"description": "Goal not found"},
        },
    )
    def post(self, goal_id: str) -> Any:
        payload = request.get_json(silent=True) or {}
        try:
            result = chain_event_service().import_events(goal_id, payload)
        except ServiceError as exc:
            return service_error_response(exc)

        if result is None:
            return not_found_response("Goal", goal_id)

        transactions = transaction_service()
        goals = goal_service()
        goal = goals.get_goal(goal_id)
        return success_response(
            message="Chain events imported.",
            data={
                "goal": goals.serialize(goal) if goal is not None else None,
                "created": [
                    transactions.serialize(entry.transaction)
                    for entry in result.created
                ],
                "skipped": list(result.skipped_hashes),
            },
            status_code=201,
        )
