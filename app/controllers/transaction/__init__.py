from . import resources as _resources  # noqa: F401
from . import routes as _routes  # noqa: F401
from .blueprint import transaction_bp
from .resources import TransactionCollectionResource, TransactionResource

__all__ = [
    "transaction_bp",
    "TransactionCollectionResource",
    "TransactionResource",
]
