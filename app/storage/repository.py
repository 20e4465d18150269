from __future__ import annotations

from typing import Any, Callable, Generic, Iterable, TypeVar

from marshmallow import Schema, ValidationError

from app.storage.collection_store import CollectionStore, StorageError

EntityT = TypeVar("EntityT")


class CollectionRepository(Generic[EntityT]):
    """Typed view over one stored collection.

    Records are decoded through a marshmallow schema on every read, so each
    call sees the latest persisted state. Nothing is cached between calls.
    """

    def __init__(
        self,
        store: CollectionStore,
        key: str,
        schema: Schema,
        *,
        id_getter: Callable[[EntityT], str] | None = None,
    ) -> None:
        self._store = store
        self._key = key
        self._schema = schema
        self._id_getter = id_getter or _record_id

    @property
    def key(self) -> str:
        return self._key

    def load_all(self) -> list[EntityT]:
        records = self._store.read(self._key)
        try:
            return list(self._schema.load(records, many=True))
        except ValidationError as exc:
            raise StorageError(
                f"Collection '{self._key}' holds invalid records."
            ) from exc

    def save_all(self, items: Iterable[EntityT]) -> None:
        self._store.write(self._key, self._schema.dump(list(items), many=True))

    def find(self, record_id: str) -> EntityT | None:
        for item in self.load_all():
            if self._id_getter(item) == record_id:
                return item
        return None

    def append(self, item: EntityT) -> EntityT:
        items = self.load_all()
        items.append(item)
        self.save_all(items)
        return item

    def replace(self, item: EntityT) -> bool:
        items = self.load_all()
        target_id = self._id_getter(item)
        found = False
        updated: list[EntityT] = []
        for existing in items:
            if self._id_getter(existing) == target_id:
                updated.append(item)
                found = True
            else:
                updated.append(existing)
        if found:
            self.save_all(updated)
        return found

    def remove(self, record_id: str) -> EntityT | None:
        items = self.load_all()
        kept = [item for item in items if self._id_getter(item) != record_id]
        if len(kept) == len(items):
            return None
        removed = next(item for item in items if self._id_getter(item) == record_id)
        self.save_all(kept)
        return removed

    def remove_where(self, predicate: Callable[[EntityT], bool]) -> int:
        items = self.load_all()
        kept = [item for item in items if not predicate(item)]
        removed = len(items) - len(kept)
        if removed:
            self.save_all(kept)
        return removed


def _record_id(item: Any) -> str:
    return str(item.id)
