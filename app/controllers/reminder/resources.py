# mypy: disable-error-code=misc

from __future__ import annotations

from typing import Any

from flask import current_app
from flask_apispec import doc
from flask_apispec.views import MethodResource

from app.controllers.dependencies import reminder_service
from app.controllers.response_contract import not_found_response, success_response


class ReminderCollectionResource(MethodResource):
    @doc(
        description="List every reminder in creation order.",
        tags=["Reminders"],
        responses={200: {"description": "Reminder list"}},
    )
    def get(self) -> Any:
        service = reminder_service()
        reminders = service.list_reminders()
        return success_response(
            message="Reminders listed.",
            data={"items": [service.serialize(item) for item in reminders]},
            meta={"total": len(reminders)},
        )


class ReminderPendingResource(MethodResource):
    @doc(
        description=(
            "Unacknowledged reminders that are due, newest first, plus the "
            "most recently acknowledged ones."
        ),
        tags=["Reminders"],
        responses={200: {"description": "Pending reminders"}},
    )
    def get(self) -> Any:
        service = reminder_service()
        pending = service.list_pending()
        return success_response(
            message="Pending reminders listed.",
            data={
                "items": [service.serialize(item) for item in pending],
                "recentlyAcknowledged": [
                    service.serialize(item) for item in service.list_acknowledged()
                ],
            },
            meta={"total": len(pending)},
        )


class ReminderGenerateResource(MethodResource):
    @doc(
        description="Create the reminders that are due for active goals.",
        tags=["Reminders"],
        responses={200: {"description": "Reminders generated"}},
    )
    def post(self) -> Any:
        service = reminder_service()
        created = service.generate_for_goals()
        current_app.logger.info("reminder_generation_requested created=%s", len(created))
        return success_response(
            message="Reminders generated.",
            data={"items": [service.serialize(item) for item in created]},
            meta={"total": len(created)},
        )


class ReminderAcknowledgeResource(MethodResource):
    @doc(
        description="Mark a reminder as acknowledged. Repeating the call is harmless.",
        tags=["Reminders"],
        params={"reminder_id": {"in": "path", "type": "string", "required": True}},
        responses={
            200: {"description": "Reminder acknowledged"},
            404: {"description": "Reminder not found"},
        },
    )
    def post(self, reminder_id: str) -> Any:
        if not reminder_service().acknowledge(reminder_id):
            return not_found_response("Reminder", reminder_id)
        return success_response(
            message="Reminder acknowledged.",
            data={"id": reminder_id, "acknowledged": True},
        )
