from __future__ import annotations

from typing import Any

import pytest

from app.storage import (
    ALL_COLLECTION_KEYS,
    GOALS_KEY,
    TRANSACTIONS_KEY,
    InMemoryCollectionStore,
    RedisCollectionStore,
    SqlAlchemyCollectionStore,
    StorageConflictError,
    StorageError,
    build_collection_store,
)


class _FakeWatchError(Exception):
    pass


class _FakePipeline:
    def __init__(self, client: "_FakeRedis") -> None:
        self._client = client
        self._watched: dict[str, int] = {}
        self._staged: list[tuple[str, str]] | None = None

    def __enter__(self) -> "_FakePipeline":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.reset()

    def reset(self) -> None:
        self._watched = {}
        self._staged = None

    def watch(self, *keys: str) -> None:
        self._watched = {key: self._client.versions.get(key, 0) for key in keys}

    def unwatch(self) -> None:
        self._watched = {}

    def get(self, key: str) -> bytes | None:
        return self._client.data.get(key)

    def multi(self) -> None:
        self._staged = []

    def set(self, key: str, value: str) -> None:
        assert self._staged is not None
        self._staged.append((key, value))

    def execute(self) -> None:
        staged = self._staged or []
        watched = self._watched
        self.reset()
        if self._client.fail_writes:
            raise ConnectionError("redis down")
        if self._client.interleaved_writes:
            key, value = self._client.interleaved_writes.pop(0)
            self._client.set(key, value)
        for key, version in watched.items():
            if self._client.versions.get(key, 0) != version:
                raise _FakeWatchError(key)
        self._client.executions += 1
        for key, value in staged:
            self._client.set(key, value)


class _FakeRedis:
    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.versions: dict[str, int] = {}
        self.executions = 0
        self.fail_writes = False
        # Writes from another client that land between WATCH and EXEC.
        self.interleaved_writes: list[tuple[str, str]] = []

    def get(self, key: str) -> bytes | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value.encode("utf-8")
        self.versions[key] = self.versions.get(key, 0) + 1

    def pipeline(self, transaction: bool = True) -> _FakePipeline:
        assert transaction is True
        return _FakePipeline(self)

    def delete(self, *keys: str) -> None:
        for key in keys:
            self.data.pop(key, None)
            self.versions[key] = self.versions.get(key, 0) + 1


def _redis_store(client: _FakeRedis, **kwargs: Any) -> RedisCollectionStore:
    return RedisCollectionStore(client, watch_error=_FakeWatchError, **kwargs)


def test_unknown_collection_reads_as_empty() -> None:
    assert InMemoryCollectionStore().read(GOALS_KEY) == []


def test_write_then_read_returns_records() -> None:
    store = InMemoryCollectionStore()
    store.write(GOALS_KEY, [{"id": "a"}])

    assert store.read(GOALS_KEY) == [{"id": "a"}]


def test_atomic_block_flushes_on_success() -> None:
    store = InMemoryCollectionStore()

    with store.atomic():
        store.write(GOALS_KEY, [{"id": "g"}])
        store.write(TRANSACTIONS_KEY, [{"id": "t"}])
        assert store.read(GOALS_KEY) == [{"id": "g"}]

    assert store.read(TRANSACTIONS_KEY) == [{"id": "t"}]


def test_atomic_block_discards_writes_on_error() -> None:
    store = InMemoryCollectionStore()
    store.write(GOALS_KEY, [{"id": "before"}])

    with pytest.raises(RuntimeError):
        with store.atomic():
            store.write(GOALS_KEY, [{"id": "after"}])
            store.write(TRANSACTIONS_KEY, [{"id": "t"}])
            raise RuntimeError("boom")

    assert store.read(GOALS_KEY) == [{"id": "before"}]
    assert store.read(TRANSACTIONS_KEY) == []


def test_nested_atomic_blocks_flush_once_at_outermost_exit() -> None:
    client = _FakeRedis()
    store = _redis_store(client)

    with store.atomic():
        store.write(GOALS_KEY, [{"id": "g"}])
        with store.atomic():
            store.write(TRANSACTIONS_KEY, [{"id": "t"}])
        assert client.executions == 0

    assert client.executions == 1
    assert store.read(TRANSACTIONS_KEY) == [{"id": "t"}]


def test_key_prefix_namespaces_collections() -> None:
    client = _FakeRedis()
    store = _redis_store(client, key_prefix="tenant-a")

    store.write(GOALS_KEY, [])

    assert list(client.data) == [f"tenant-a:{GOALS_KEY}"]


def test_redis_write_failure_raises_storage_error() -> None:
    client = _FakeRedis()
    client.fail_writes = True
    store = _redis_store(client)

    with pytest.raises(StorageError):
        store.write(GOALS_KEY, [{"id": "g"}])


def test_redis_reset_clears_every_collection() -> None:
    client = _FakeRedis()
    store = _redis_store(client)
    for key in ALL_COLLECTION_KEYS:
        store.write(key, [{"id": key}])

    store.reset_for_tests()

    assert client.data == {}


def test_redis_flush_rejects_collections_changed_since_read() -> None:
    client = _FakeRedis()
    store = _redis_store(client)
    store.write(GOALS_KEY, [{"id": "a"}])

    with pytest.raises(StorageConflictError) as exc_info:
        with store.atomic():
            goals = store.read(GOALS_KEY)
            client.set(GOALS_KEY, '[{"id":"from-other-worker"}]')
            store.write(GOALS_KEY, [*goals, {"id": "b"}])

    assert exc_info.value.keys == [GOALS_KEY]
    assert store.read(GOALS_KEY) == [{"id": "from-other-worker"}]


def test_redis_flush_checks_collections_only_read() -> None:
    client = _FakeRedis()
    store = _redis_store(client)

    with pytest.raises(StorageConflictError):
        with store.atomic():
            store.read(GOALS_KEY)
            client.set(GOALS_KEY, '[{"id":"g"}]')
            store.write(TRANSACTIONS_KEY, [{"id": "t", "goalId": "g-removed"}])

    assert store.read(TRANSACTIONS_KEY) == []


def test_redis_flush_retries_after_watch_error() -> None:
    client = _FakeRedis()
    store = _redis_store(client)
    store.write(GOALS_KEY, [])
    # Same content rewritten by another worker: WATCH fires, the value check passes.
    client.interleaved_writes.append((GOALS_KEY, "[]"))

    with store.atomic():
        store.read(GOALS_KEY)
        store.write(GOALS_KEY, [{"id": "g"}])

    assert client.executions == 2
    assert store.read(GOALS_KEY) == [{"id": "g"}]


def test_redis_flush_gives_up_after_repeated_watch_errors() -> None:
    client = _FakeRedis()
    store = _redis_store(client, max_attempts=2)
    client.interleaved_writes.extend([(GOALS_KEY, "[]"), (GOALS_KEY, "[]")])

    with pytest.raises(StorageConflictError):
        store.write(GOALS_KEY, [{"id": "g"}])

    assert client.executions == 0


def test_memory_store_blind_writes_do_not_conflict() -> None:
    store = InMemoryCollectionStore()

    with store.atomic():
        store.write(GOALS_KEY, [{"id": "g"}])
        assert store.read(GOALS_KEY) == [{"id": "g"}]
    store.write(GOALS_KEY, [])

    assert store.read(GOALS_KEY) == []


@pytest.mark.parametrize("raw", ["{not json", '{"id": "object"}'])
def test_malformed_payload_raises_storage_error(raw: str) -> None:
    client = _FakeRedis()
    client.data[GOALS_KEY] = raw.encode("utf-8")

    with pytest.raises(StorageError):
        _redis_store(client).read(GOALS_KEY)


def test_sqlalchemy_store_persists_rows(app) -> None:
    from app.extensions.database import db
    from app.models.stored_collection import StoredCollection

    with app.app_context():
        store = SqlAlchemyCollectionStore()
        with store.atomic():
            store.write(GOALS_KEY, [{"id": "g"}])
            store.write(TRANSACTIONS_KEY, [{"id": "t"}])

        assert store.read(GOALS_KEY) == [{"id": "g"}]
        assert db.session.get(StoredCollection, TRANSACTIONS_KEY) is not None

        store.write(GOALS_KEY, [])
        assert store.read(GOALS_KEY) == []

        store.reset_for_tests()
        assert store.read(TRANSACTIONS_KEY) == []


def test_sqlalchemy_store_rejects_rows_changed_since_read(app) -> None:
    with app.app_context():
        store = SqlAlchemyCollectionStore()
        other_worker = SqlAlchemyCollectionStore()
        store.write(GOALS_KEY, [{"id": "a"}])

        with pytest.raises(StorageConflictError):
            with store.atomic():
                goals = store.read(GOALS_KEY)
                other_worker.write(GOALS_KEY, [{"id": "other"}])
                store.write(GOALS_KEY, [*goals, {"id": "b"}])

        assert store.read(GOALS_KEY) == [{"id": "other"}]


def test_sqlalchemy_store_rejects_row_created_since_read(app) -> None:
    with app.app_context():
        store = SqlAlchemyCollectionStore()
        other_worker = SqlAlchemyCollectionStore()

        with pytest.raises(StorageConflictError):
            with store.atomic():
                store.read(TRANSACTIONS_KEY)
                other_worker.write(TRANSACTIONS_KEY, [{"id": "other"}])
                store.write(TRANSACTIONS_KEY, [{"id": "mine"}])

        assert store.read(TRANSACTIONS_KEY) == [{"id": "other"}]


@pytest.mark.parametrize(
    ("config", "expected"),
    [
        ({"STORAGE_BACKEND": "memory"}, InMemoryCollectionStore),
        ({"STORAGE_BACKEND": " SQLAlchemy "}, SqlAlchemyCollectionStore),
        ({}, SqlAlchemyCollectionStore),
    ],
)
def test_build_collection_store_selects_backend(
    config: dict[str, Any], expected: type
) -> None:
    assert isinstance(build_collection_store(config), expected)


def test_build_collection_store_rejects_bad_configuration() -> None:
    with pytest.raises(RuntimeError):
        build_collection_store({"STORAGE_BACKEND": "dynamo"})
    with pytest.raises(RuntimeError):
        build_collection_store({"STORAGE_BACKEND": "redis", "STORAGE_REDIS_URL": ""})
