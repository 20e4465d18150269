from __future__ import annotations

from .blueprint import goal_bp
from .resources import (
    GoalChainEventsResource,
    GoalCollectionResource,
    GoalProgressResource,
    GoalResource,
    GoalTransactionsResource,
)

_ROUTES_REGISTERED = False


def register_goal_routes() -> None:
    global _ROUTES_REGISTERED
    if _ROUTES_REGISTERED:
        return

    goal_bp.add_url_rule(
        "",
        view_func=GoalCollectionResource.as_view("goal_collection"),
        methods=["GET", "POST"],
    )
    goal_bp.add_url_rule(
        "/<string:goal_id>",
        view_func=GoalResource.as_view("goal_resource"),
        methods=["GET", "PUT", "DELETE"],
    )
    goal_bp.add_url_rule(
        "/<string:goal_id>/progress",
        view_func=GoalProgressResource.as_view("goal_progress"),
        methods=["GET"],
    )
    goal_bp.add_url_rule(
        "/<string:goal_id>/transactions",
        view_func=GoalTransactionsResource.as_view("goal_transactions"),
        methods=["GET"],
    )
    goal_bp.add_url_rule(
        "/<string:goal_id>/chain-events",
        view_func=GoalChainEventsResource.as_view("goal_chain_events"),
        methods=["POST"],
    )

    _ROUTES_REGISTERED = True


register_goal_routes()
