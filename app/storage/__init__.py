from .collection_store import (
    BufferedCollectionStore,
    CollectionStore,
    InMemoryCollectionStore,
    RedisCollectionStore,
    SqlAlchemyCollectionStore,
    StorageConflictError,
    StorageError,
    build_collection_store,
)
from .keys import (
    ALL_COLLECTION_KEYS,
    CHALLENGES_KEY,
    GOALS_KEY,
    REMINDERS_KEY,
    TRANSACTIONS_KEY,
)
from .repository import CollectionRepository

__all__ = [
    "BufferedCollectionStore",
    "CollectionStore",
    "InMemoryCollectionStore",
    "RedisCollectionStore",
    "SqlAlchemyCollectionStore",
    "StorageConflictError",
    "StorageError",
    "build_collection_store",
    "ALL_COLLECTION_KEYS",
    "CHALLENGES_KEY",
    "GOALS_KEY",
    "REMINDERS_KEY",
    "TRANSACTIONS_KEY",
    "CollectionRepository",
]
