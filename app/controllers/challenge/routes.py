from __future__ import annotations

from .blueprint import challenge_bp
from .resources import (
    ChallengeCollectionResource,
    ChallengeCompleteResource,
    ChallengeFailResource,
    ChallengeResource,
)

_ROUTES_REGISTERED = False


def register_challenge_routes() -> None:
    global _ROUTES_REGISTERED
    if _ROUTES_REGISTERED:
        return

    challenge_bp.add_url_rule(
        "",
        view_func=ChallengeCollectionResource.as_view("challenge_collection"),
        methods=["GET", "POST"],
    )
    challenge_bp.add_url_rule(
        "/<string:challenge_id>",
        view_func=ChallengeResource.as_view("challenge_resource"),
        methods=["GET", "PUT", "DELETE"],
    )
    challenge_bp.add_url_rule(
        "/<string:challenge_id>/complete",
        view_func=ChallengeCompleteResource.as_view("challenge_complete"),
        methods=["POST"],
    )
    challenge_bp.add_url_rule(
        "/<string:challenge_id>/fail",
        view_func=ChallengeFailResource.as_view("challenge_fail"),
        methods=["POST"],
    )

    _ROUTES_REGISTERED = True


register_challenge_routes()
