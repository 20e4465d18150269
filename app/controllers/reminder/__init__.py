from . import resources as _resources  # noqa: F401
from . import routes as _routes  # noqa: F401
from .blueprint import reminder_bp
from .resources import (
    ReminderAcknowledgeResource,
    ReminderCollectionResource,
    ReminderGenerateResource,
    ReminderPendingResource,
)

__all__ = [
    "reminder_bp",
    "ReminderCollectionResource",
    "ReminderPendingResource",
    "ReminderGenerateResource",
    "ReminderAcknowledgeResource",
]
