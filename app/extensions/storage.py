from __future__ import annotations

from flask import Flask, current_app

from app.storage import CollectionStore, build_collection_store

COLLECTION_STORE_EXTENSION_KEY = "collection_store"


def register_collection_store(
    app: Flask,
    store: CollectionStore | None = None,
) -> CollectionStore:
    if store is None:
        store = build_collection_store(app.config)
    app.extensions[COLLECTION_STORE_EXTENSION_KEY] = store
    app.logger.info("collection_store_registered backend=%s", store.backend_name)
    return store


def get_collection_store() -> CollectionStore:
    configured = current_app.extensions.get(COLLECTION_STORE_EXTENSION_KEY)
    if configured is None:
        return register_collection_store(current_app)
    return configured
