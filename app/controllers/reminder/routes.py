from __future__ import annotations

from .blueprint import reminder_bp
from .resources import (
    ReminderAcknowledgeResource,
    ReminderCollectionResource,
    ReminderGenerateResource,
    ReminderPendingResource,
)

_ROUTES_REGISTERED = False


def register_reminder_routes() -> None:
    global _ROUTES_REGISTERED
    if _ROUTES_REGISTERED:
        return

    reminder_bp.add_url_rule(
        "",
        view_func=ReminderCollectionResource.as_view("reminder_collection"),
        methods=["GET"],
    )
    reminder_bp.add_url_rule(
        "/pending",
        view_func=ReminderPendingResource.as_view("reminder_pending"),
        methods=["GET"],
    )
    reminder_bp.add_url_rule(
        "/generate",
        view_func=ReminderGenerateResource.as_view("reminder_generate"),
        methods=["POST"],
    )
    reminder_bp.add_url_rule(
        "/<string:reminder_id>/acknowledge",
        view_func=ReminderAcknowledgeResource.as_view("reminder_acknowledge"),
        methods=["POST"],
    )

    _ROUTES_REGISTERED = True


register_reminder_routes()
