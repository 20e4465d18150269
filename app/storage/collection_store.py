from __future__ import annotations

import importlib
import json
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Mapping, Protocol

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.extensions.database import db
from app.models.stored_collection import StoredCollection
from app.storage.keys import ALL_COLLECTION_KEYS
from app.utils.datetime_utils import utc_now_naive

Records = list[dict[str, Any]]

DEFAULT_REDIS_WATCH_ATTEMPTS = 3


class StorageError(RuntimeError):
    """Raised when a collection cannot be read from or written to its backend."""


class StorageConflictError(StorageError):
    """Another writer changed a collection this atomic block had already read."""

    def __init__(self, keys: list[str]) -> None:
        super().__init__(
            "Collections changed by another writer: " + ", ".join(sorted(keys))
        )
        self.keys = sorted(keys)


class CollectionStore(Protocol):
    backend_name: str

    def read(self, key: str) -> Records:
        # Protocol contract only; returns [] for a collection never written.
        ...

    def write(self, key: str, records: Records) -> None:
        # Protocol contract only; replaces the whole collection.
        ...

    def atomic(self) -> Any:
        # Protocol contract only; context manager grouping several writes.
        ...

    def reset_for_tests(self) -> None:
        # Protocol contract only; used by tests to clear backend state.
        ...


def _encode(key: str, records: Records) -> str:
    try:
        return json.dumps(records, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise StorageError(f"Collection '{key}' is not JSON serializable.") from exc


def _decode(key: str, raw: str | None) -> Records:
    if raw is None or raw == "":
        return []
    try:
        decoded = json.loads(raw)
    except ValueError as exc:
        raise StorageError(f"Collection '{key}' holds malformed JSON.") from exc
    if not isinstance(decoded, list):
        raise StorageError(f"Collection '{key}' must hold a JSON array.")
    return decoded


def _as_text(raw: Any) -> str | None:
    if isinstance(raw, (bytes, bytearray)):
        return raw.decode("utf-8")
    return raw


class BufferedCollectionStore:
    """Shared locking and write buffering for the concrete backends.

    Every read and write takes the same re-entrant lock. Inside ``atomic()``
    the lock is held for the whole block and writes are staged, then flushed
    in one backend call when the outermost block exits cleanly. A block that
    raises discards everything it staged.

    The lock only covers this process. Other workers sharing the backend are
    handled optimistically: the raw value of every collection read inside the
    block is remembered, and the flush only succeeds if the backend still
    holds those values. Otherwise it raises :class:`StorageConflictError` and
    nothing is written.
    """

    backend_name = "abstract"

    def __init__(self, *, key_prefix: str = "") -> None:
        self._lock = threading.RLock()
        self._pending: dict[str, str] | None = None
        self._observed: dict[str, str | None] = {}
        self._key_prefix = key_prefix.strip()

    def _storage_key(self, key: str) -> str:
        if not self._key_prefix:
            return key
        return f"{self._key_prefix}:{key}"

    def _load_raw(self, storage_key: str) -> str | None:
        raise NotImplementedError

    def _flush(
        self, payloads: dict[str, str], expected: dict[str, str | None]
    ) -> None:
        """Write ``payloads`` if every key in ``expected`` still holds its value."""
        raise NotImplementedError

    def read(self, key: str) -> Records:
        storage_key = self._storage_key(key)
        with self._lock:
            if self._pending is not None and storage_key in self._pending:
                raw: str | None = self._pending[storage_key]
            else:
                raw = self._load_raw(storage_key)
                if self._pending is not None:
                    self._observed.setdefault(storage_key, raw)
        return _decode(storage_key, raw)

    def write(self, key: str, records: Records) -> None:
        storage_key = self._storage_key(key)
        encoded = _encode(storage_key, records)
        with self._lock:
            if self._pending is not None:
                self._pending[storage_key] = encoded
                return
            self._flush({storage_key: encoded}, {})

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            outermost = self._pending is None
            if outermost:
                self._pending = {}
                self._observed = {}
            try:
                yield
            except BaseException:
                if outermost:
                    self._pending = None
                    self._observed = {}
                raise
            if outermost:
                pending = self._pending or {}
                observed = self._observed
                self._pending = None
                self._observed = {}
                if pending:
                    self._flush(pending, observed)


class InMemoryCollectionStore(BufferedCollectionStore):
    backend_name = "memory"

    def __init__(self, *, key_prefix: str = "") -> None:
        super().__init__(key_prefix=key_prefix)
        self._data: dict[str, str] = {}

    def _load_raw(self, storage_key: str) -> str | None:
        return self._data.get(storage_key)

    def _flush(
        self, payloads: dict[str, str], expected: dict[str, str | None]
    ) -> None:
        stale = [key for key, raw in expected.items() if self._data.get(key) != raw]
        if stale:
            raise StorageConflictError(stale)
        self._data.update(payloads)

    def reset_for_tests(self) -> None:
        with self._lock:
            self._data.clear()
            self._pending = None
            self._observed = {}


class SqlAlchemyCollectionStore(BufferedCollectionStore):
    """Keeps each collection as one row of the ``stored_collections`` table.

    Collections read inside an atomic block are written back with a
    conditional ``UPDATE ... WHERE payload = <value read>``; a row that was
    never read is upserted as is.
    """

    backend_name = "sqlalchemy"

    def __init__(
        self,
        *,
        session_provider: Callable[[], Any] | None = None,
        key_prefix: str = "",
    ) -> None:
        super().__init__(key_prefix=key_prefix)
        self._session_provider = session_provider or _default_session

    def _load_raw(self, storage_key: str) -> str | None:
        session = self._session_provider()
        try:
            row = session.get(StoredCollection, storage_key, populate_existing=True)
        except SQLAlchemyError as exc:
            session.rollback()
            raise StorageError(f"Failed to read collection '{storage_key}'.") from exc
        return None if row is None else row.payload

    def _flush(
        self, payloads: dict[str, str], expected: dict[str, str | None]
    ) -> None:
        session = self._session_provider()
        try:
            stale = self._stale_reads(session, payloads, expected)
            for storage_key, payload in payloads.items():
                if storage_key not in expected:
                    self._upsert(session, storage_key, payload)
                    continue
                seen = expected[storage_key]
                if seen is None:
                    statement = insert(StoredCollection).values(
                        key=storage_key, payload=payload
                    )
                    session.execute(statement)
                elif not self._swap(session, storage_key, seen, payload):
                    stale.append(storage_key)
            if stale:
                session.rollback()
                raise StorageConflictError(stale)
            session.commit()
        except IntegrityError as exc:
            # Primary key clash: another writer created the row first.
            session.rollback()
            raise StorageConflictError(list(payloads)) from exc
        except SQLAlchemyError as exc:
            session.rollback()
            raise StorageError(
                "Failed to write collections: " + ", ".join(sorted(payloads))
            ) from exc

    @staticmethod
    def _stale_reads(
        session: Any, payloads: dict[str, str], expected: dict[str, str | None]
    ) -> list[str]:
        read_only = sorted(key for key in expected if key not in payloads)
        stale = []
        for storage_key in read_only:
            current = session.execute(
                select(StoredCollection.payload)
                .where(StoredCollection.key == storage_key)
                .with_for_update()
            ).scalar_one_or_none()
            if current != expected[storage_key]:
                stale.append(storage_key)
        return stale

    @staticmethod
    def _swap(session: Any, storage_key: str, seen: str, payload: str) -> bool:
        result = session.execute(
            update(StoredCollection)
            .where(StoredCollection.key == storage_key)
            .where(StoredCollection.payload == seen)
            .values(payload=payload, updated_at=utc_now_naive())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    def _upsert(session: Any, storage_key: str, payload: str) -> None:
        row = session.get(StoredCollection, storage_key)
        if row is None:
            session.add(StoredCollection(key=storage_key, payload=payload))
        else:
            row.payload = payload
        session.flush()

    def reset_for_tests(self) -> None:
        with self._lock:
            session = self._session_provider()
            session.query(StoredCollection).delete()
            session.commit()
            self._pending = None
            self._observed = {}


class RedisCollectionStore(BufferedCollectionStore):
    """One string key per collection; buffered writes go through MULTI/EXEC.

    The flush WATCHes every collection it writes or depends on, checks that
    they still hold the values read inside the block, then executes. A
    ``WatchError`` means a concurrent write landed between the check and
    EXEC, so the check is repeated a few times before giving up.
    """

    backend_name = "redis"

    def __init__(
        self,
        client: Any,
        *,
        key_prefix: str = "",
        watch_error: type[Exception] | None = None,
        max_attempts: int = DEFAULT_REDIS_WATCH_ATTEMPTS,
    ) -> None:
        super().__init__(key_prefix=key_prefix)
        self._client = client
        self._watch_error = watch_error or _redis_watch_error()
        self._max_attempts = max(1, max_attempts)

    def _load_raw(self, storage_key: str) -> str | None:
        try:
            raw = self._client.get(storage_key)
        except Exception as exc:
            raise StorageError(f"Failed to read collection '{storage_key}'.") from exc
        return _as_text(raw)

    def _flush(
        self, payloads: dict[str, str], expected: dict[str, str | None]
    ) -> None:
        watched = sorted(set(payloads) | set(expected))
        try:
            with self._client.pipeline(transaction=True) as pipeline:
                for _ in range(self._max_attempts):
                    try:
                        self._check_and_set(pipeline, watched, payloads, expected)
                        return
                    except self._watch_error:
                        continue
        except StorageError:
            raise
        except Exception as exc:
            raise StorageError(
                "Failed to write collections: " + ", ".join(sorted(payloads))
            ) from exc
        raise StorageConflictError(watched)

    @staticmethod
    def _check_and_set(
        pipeline: Any,
        watched: list[str],
        payloads: dict[str, str],
        expected: dict[str, str | None],
    ) -> None:
        pipeline.watch(*watched)
        stale = [
            key for key, raw in expected.items() if _as_text(pipeline.get(key)) != raw
        ]
        if stale:
            pipeline.unwatch()
            raise StorageConflictError(stale)
        pipeline.multi()
        for storage_key, payload in payloads.items():
            pipeline.set(storage_key, payload)
        pipeline.execute()

    def reset_for_tests(self) -> None:
        with self._lock:
            keys = [self._storage_key(key) for key in ALL_COLLECTION_KEYS]
            self._client.delete(*keys)
            self._pending = None
            self._observed = {}


def _default_session() -> Any:
    return db.session


def _import_redis() -> Any:
    try:
        return importlib.import_module("redis")
    except ImportError as exc:
        raise RuntimeError(
            "redis package unavailable; install the 'redis' extra."
        ) from exc


def _redis_watch_error() -> type[Exception]:
    return getattr(_import_redis(), "WatchError")


def build_collection_store(config: Mapping[str, Any]) -> CollectionStore:
    backend = str(config.get("STORAGE_BACKEND") or "sqlalchemy").strip().lower()
    key_prefix = str(config.get("STORAGE_KEY_PREFIX") or "")

    if backend == "memory":
        return InMemoryCollectionStore(key_prefix=key_prefix)
    if backend == "sqlalchemy":
        return SqlAlchemyCollectionStore(key_prefix=key_prefix)
    if backend != "redis":
        raise RuntimeError(f"Unsupported STORAGE_BACKEND: {backend!r}")

    redis_url = str(config.get("STORAGE_REDIS_URL") or "").strip()
    if not redis_url:
        raise RuntimeError("STORAGE_REDIS_URL must be configured for redis storage.")
    redis_module = _import_redis()

    client = getattr(redis_module, "Redis").from_url(redis_url)
    try:
        client.ping()
    except Exception as exc:
        raise RuntimeError("redis storage backend unreachable") from exc
    return RedisCollectionStore(
        client,
        key_prefix=key_prefix,
        watch_error=getattr(redis_module, "WatchError"),
        max_attempts=int(
            config.get("STORAGE_REDIS_WATCH_ATTEMPTS") or DEFAULT_REDIS_WATCH_ATTEMPTS
        ),
    )
