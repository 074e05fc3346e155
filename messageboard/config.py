import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from dotenv import dotenv_values

class BaseConfig:
    # Secrets (env in prod; dev/test may use defaults)
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-not-secure")
    WTF_CSRF_SECRET_KEY = SECRET_KEY
    WTF_CSRF_TIME_LIMIT = None  # one token for the whole session

    # Database (env in prod; dev falls back to a local SQLite file)
    _ENV_FALLBACK = dotenv_values(".env")
    SQLALCHEMY_DATABASE_URI = (
        os.environ.get("DATABASE_URL")
        or _ENV_FALLBACK.get("DATABASE_URL")
        or "sqlite:///messageboard.db"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # Logging / misc
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Cookies: secure-by-default
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"

    # Behind a reverse proxy the visitor address arrives in X-Forwarded-For
    TRUST_PROXY = (os.getenv("TRUST_PROXY", "false").lower() == "true")

    # --- Board ---
    BOARD_PAGE_SIZE = os.getenv("BOARD_PAGE_SIZE", "10")  # converted in BoardSettings
    BOARD_TIMEZONE = os.getenv("BOARD_TIMEZONE", "Europe/Berlin")
    BOARD_TITLE = os.getenv("BOARD_TITLE", "Messageboard")
    BOARD_SUBTITLE = os.getenv(
        "BOARD_SUBTITLE", "A modern, emoji-friendly guestbook / discussion wall."
    )
    BOARD_FOOTER = os.getenv("BOARD_FOOTER", "")

class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")
    SESSION_COOKIE_SECURE = False

class ProductionConfig(BaseConfig):
    DEBUG = False
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "WARNING")
    # Required vars are enforced in create_app(), not at import time
    SECRET_KEY = os.environ.get("SECRET_KEY")
    WTF_CSRF_SECRET_KEY = SECRET_KEY
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL")
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_SAMESITE = os.environ.get("SESSION_COOKIE_SAMESITE", "Lax")

class TestingConfig(BaseConfig):
    TESTING = True
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ENGINE_OPTIONS = {}
    SESSION_COOKIE_SECURE = False

_ENV_MAP = {
    "development": DevelopmentConfig,
    "staging": ProductionConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}

def get_config():
    env = os.environ.get("APP_ENV", "development").lower()
    return _ENV_MAP.get(env, DevelopmentConfig)


@dataclass(frozen=True)
class BoardSettings:
    """Board options resolved once at startup and handed to the pipelines."""

    page_size: int
    timezone: ZoneInfo
    title: str
    subtitle: str
    footer: str

    @classmethod
    def from_config(cls, config) -> "BoardSettings":
        raw_size = config.get("BOARD_PAGE_SIZE", 10)
        try:
            page_size = int(raw_size)
        except (TypeError, ValueError) as exc:
            raise RuntimeError(f"BOARD_PAGE_SIZE must be an integer, got {raw_size!r}") from exc
        if page_size < 1:
            raise RuntimeError(f"BOARD_PAGE_SIZE must be positive, got {page_size}")
        tz_name = config.get("BOARD_TIMEZONE") or "UTC"
        try:
            tz = ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise RuntimeError(f"Unknown BOARD_TIMEZONE: {tz_name}") from exc
        return cls(
            page_size=page_size,
            timezone=tz,
            title=config.get("BOARD_TITLE", "Messageboard"),
            subtitle=config.get("BOARD_SUBTITLE", ""),
            footer=config.get("BOARD_FOOTER", ""),
        )
