import os
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Callable, Generator

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

TEST_ENV_OVERRIDES = {
    "SECRET_KEY": "test-secret",
    "FLASK_DEBUG": "false",
    "FLASK_TESTING": "true",
    "CORS_ALLOWED_ORIGINS": "https://frontend.local",
}

FIXED_NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def isolate_test_env() -> Generator[None, None, None]:
    tracked_keys = set(TEST_ENV_OVERRIDES.keys()) | {
        "DATABASE_URL",
        "STORAGE_BACKEND",
    }
    original_values = {key: os.environ.get(key) for key in tracked_keys}
    yield
    for key, value in original_values.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value


@pytest.fixture
def app(tmp_path: Path):
    test_db_path = tmp_path / "test.sqlite3"
    os.environ["DATABASE_URL"] = f"sqlite:///{test_db_path}"
    for key, value in TEST_ENV_OVERRIDES.items():
        os.environ[key] = value

    from app import create_app
    from app.extensions.database import db

    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{test_db_path}",
            "STORAGE_BACKEND": "sqlalchemy",
            "CORS_ALLOWED_ORIGINS": TEST_ENV_OVERRIDES["CORS_ALLOWED_ORIGINS"],
        }
    )

    with app.app_context():
        db.drop_all()
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()
    if test_db_path.exists():
        test_db_path.unlink()


@pytest.fixture
def client(app) -> Generator:
    yield app.test_client()


@pytest.fixture
def store():
    from app.storage import InMemoryCollectionStore

    return InMemoryCollectionStore()


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def id_factory() -> Callable[[], str]:
    counter = {"value": 0}

    def _next_id() -> str:
        counter["value"] += 1
        return f"id-{counter['value']:04d}"

    return _next_id
