import os


def _read_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _is_secret_weak(secret: str) -> bool:
    normalized = secret.strip().lower()
    return normalized in {"", "dev", "changeme"} or len(secret) < 32


def _runtime_environment_name() -> str:
    for env_name in ("SAVINGS_ENV", "APP_ENV", "FLASK_ENV"):
        raw = os.getenv(env_name)
        if raw is not None and raw.strip():
            return raw.strip().lower()
    return ""


def validate_security_configuration() -> None:
    is_debug = _read_bool_env("FLASK_DEBUG", False)
    is_testing = _read_bool_env("FLASK_TESTING", False)
    runtime_environment = _runtime_environment_name()

    if runtime_environment in {"prod", "production"} and is_debug:
        raise RuntimeError(
            "Invalid runtime configuration: FLASK_DEBUG must be false in production."
        )

    if is_testing or is_debug:
        return

    if _is_secret_weak(os.getenv("SECRET_KEY", "dev")):
        raise RuntimeError(
            "Weak/invalid SECRET_KEY for production runtime. "
            "Configure a strong value in environment variables."
        )


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev")

    DEBUG = _read_bool_env("FLASK_DEBUG", False)
    TESTING = _read_bool_env("FLASK_TESTING", False)

    # Database config
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///savings.sqlite3")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Collection storage: sqlalchemy | memory | redis
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "sqlalchemy").strip().lower()
    STORAGE_REDIS_URL = os.getenv("STORAGE_REDIS_URL", os.getenv("REDIS_URL", ""))
    STORAGE_KEY_PREFIX = os.getenv("STORAGE_KEY_PREFIX", "").strip()
    STORAGE_REDIS_WATCH_ATTEMPTS = int(os.getenv("STORAGE_REDIS_WATCH_ATTEMPTS", "3"))

    CORS_ALLOWED_ORIGINS = os.getenv("CORS_ALLOWED_ORIGINS", "")


class DevelopmentConfig(Config):
    DEBUG = True
