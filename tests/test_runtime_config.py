from __future__ import annotations

import importlib

import pytest

import config as config_module


def _reload_config_module():
    return importlib.reload(config_module)


@pytest.fixture(autouse=True)
def restore_config_module(monkeypatch):
    yield
    monkeypatch.undo()
    _reload_config_module()


def test_config_debug_defaults_to_false_when_env_missing(monkeypatch) -> None:
    monkeypatch.delenv("FLASK_DEBUG", raising=False)
    module = _reload_config_module()
    assert module.Config.DEBUG is False


def test_storage_backend_is_read_from_env(monkeypatch) -> None:
    monkeypatch.setenv("STORAGE_BACKEND", " Redis ")
    monkeypatch.setenv("STORAGE_REDIS_URL", "redis://cache:6379/1")
    module = _reload_config_module()

    assert module.Config.STORAGE_BACKEND == "redis"
    assert module.Config.STORAGE_REDIS_URL == "redis://cache:6379/1"


def test_validate_security_configuration_rejects_debug_in_production(
    monkeypatch,
) -> None:
    monkeypatch.setenv("SAVINGS_ENV", "production")
    monkeypatch.setenv("FLASK_DEBUG", "true")
    monkeypatch.setenv("FLASK_TESTING", "false")
    module = _reload_config_module()

    with pytest.raises(RuntimeError, match="FLASK_DEBUG must be false in production"):
        module.validate_security_configuration()


def test_validate_security_configuration_allows_debug_outside_production(
    monkeypatch,
) -> None:
    monkeypatch.setenv("SAVINGS_ENV", "dev")
    monkeypatch.setenv("FLASK_DEBUG", "true")
    monkeypatch.setenv("FLASK_TESTING", "false")
    monkeypatch.setenv("SECRET_KEY", "dev")
    module = _reload_config_module()

    module.validate_security_configuration()


def test_validate_security_configuration_rejects_weak_secret(monkeypatch) -> None:
    monkeypatch.delenv("SAVINGS_ENV", raising=False)
    monkeypatch.delenv("APP_ENV", raising=False)
    monkeypatch.delenv("FLASK_ENV", raising=False)
    monkeypatch.setenv("FLASK_DEBUG", "false")
    monkeypatch.setenv("FLASK_TESTING", "false")
    monkeypatch.setenv("SECRET_KEY", "changeme")
    module = _reload_config_module()

    with pytest.raises(RuntimeError, match="SECRET_KEY"):
        module.validate_security_configuration()


def test_validate_security_configuration_accepts_strong_secret(monkeypatch) -> None:
    monkeypatch.setenv("FLASK_DEBUG", "false")
    monkeypatch.setenv("FLASK_TESTING", "false")
    monkeypatch.setenv("SECRET_KEY", "s" * 48)
    module = _reload_config_module()

    module.validate_security_configuration()
