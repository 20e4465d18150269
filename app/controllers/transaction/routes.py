from __future__ import annotations

from .blueprint import transaction_bp
from .resources import TransactionCollectionResource, TransactionResource

_ROUTES_REGISTERED = False


def register_transaction_routes() -> None:
    """Bind transaction REST endpoints once per process."""

    global _ROUTES_REGISTERED
    if _ROUTES_REGISTERED:
        return

    transaction_bp.add_url_rule(
        "",
        view_func=TransactionCollectionResource.as_view("transaction_collection"),
        methods=["GET", "POST"],
    )
    transaction_bp.add_url_rule(
        "/<string:transaction_id>",
        view_func=TransactionResource.as_view("transaction_resource"),
        methods=["GET", "PUT", "DELETE"],
    )

    _ROUTES_REGISTERED = True


register_transaction_routes()
