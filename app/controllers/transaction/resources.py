# mypy: disable-error-code=no-any-return

from __future__ import annotations

from typing import Any

from flask import Response, request
from flask_apispec import doc, use_kwargs
from flask_apispec.views import MethodResource
from marshmallow import fields

from app.controllers.dependencies import goal_service, transaction_service
from app.controllers.response_contract import (
    not_found_response,
    service_error_response,
    success_response,
)
from app.services.errors import ServiceError
from app.services.transaction_service import LedgerEntry

from .openapi import (
    TRANSACTION_CREATE_DOC,
    TRANSACTION_DELETE_DOC,
    TRANSACTION_GET_DOC,
    TRANSACTION_LIST_DOC,
    TRANSACTION_UPDATE_DOC,
)


def _serialize_entry(entry: LedgerEntry) -> dict[str, Any]:
    goal = entry.goal
    return {
        "transaction": transaction_service().serialize(entry.transaction),
        "goal": goal_service().serialize(goal) if goal is not None else None,
    }


class TransactionCollectionResource(MethodResource):
    @doc(**TRANSACTION_LIST_DOC)  # type: ignore[misc]
    @use_kwargs(  # type: ignore[misc]
        {
            "goal_id": fields.Str(
                data_key="goalId",
                load_default=None,
                metadata={"description": "Only transactions of this goal"},
            )
        },
        location="query",
    )
    def get(self, goal_id: str | None) -> Response:
        service = transaction_service()
        if goal_id:
            transactions = service.list_by_goal(goal_id, newest_first=True)
        else:
            transactions = service.list_transactions(newest_first=True)
        return success_response(
            message="Transactions listed.",
            data={"items": [service.serialize(item) for item in transactions]},
            meta={"total": len(transactions)},
        )

    @doc(**TRANSACTION_CREATE_DOC)  # type: ignore[misc]
    def post(self) -> Response:
        payload = request.get_json(silent=True) or {}
        try:
            entry = transaction_service().create_transaction(payload)
        except ServiceError as exc:
            return service_error_response(exc)
        return success_response(
            message="Transaction recorded.",
            data=_serialize_entry(entry),
            status_code=201,
        )


class TransactionResource(MethodResource):
    @doc(**TRANSACTION_GET_DOC)  # type: ignore[misc]
    def get(self, transaction_id: str) -> Response:
        service = transaction_service()
        transaction = service.get_transaction(transaction_id)
        if transaction is None:
            return not_found_response("Transaction", transaction_id)
        return success_response(
            message="Transaction returned.",
            data={"transaction": service.serialize(transaction)},
        )

    @doc(**TRANSACTION_UPDATE_DOC)  # type: ignore[misc]
    def put(self, transaction_id: str) -> Response:
        payload = request.get_json(silent=True) or {}
        try:
            result = transaction_service().apply_changes(transaction_id, payload)
        except ServiceError as exc:
            return service_error_response(exc)

        if not result.found or result.value is None:
            return not_found_response("Transaction", transaction_id)
        return success_response(
            message="Transaction updated.",
            data=_serialize_entry(result.value),
        )

    @doc(**TRANSACTION_DELETE_DOC)  # type: ignore[misc]
    def delete(self, transaction_id: str) -> Response:
        if not transaction_service().delete_transaction(transaction_id):
            return not_found_response("Transaction", transaction_id)
        return success_response(
            message="Transaction deleted.",
            data={"id": transaction_id},
        )
