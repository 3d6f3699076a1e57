from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Literal

from dotenv import find_dotenv, load_dotenv

_DEV_SESSION_SECRET = "dev-session-secret"
_SAME_SITE_VALUES = ("lax", "strict", "none")


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    database_url: str
    session_secret: str
    port: int = 3000
    environment: str = "development"
    cors_origins: tuple[str, ...] = field(default_factory=lambda: ("http://localhost:3000",))
    session_cookie_name: str = "sid"
    session_same_site: Literal["lax", "strict", "none"] = "none"
    session_max_age: int = 86400
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment in ("prod", "production")

    @property
    def sqlalchemy_database_uri(self) -> str:
        """Normalize DATABASE_URL to a SQLAlchemy URL.

        Plain PostgreSQL DSNs ("postgres://..." or "postgresql://...") are
        rewritten to SQLAlchemy's psycopg3 dialect: "postgresql+psycopg://...".
        Any other URL (e.g. sqlite) is returned unchanged.
        """
        raw = self.database_url.strip()
        for prefix in ("postgres://", "postgresql://"):
            if raw.startswith(prefix):
                return "postgresql+psycopg://" + raw[len(prefix):]
        return raw


def _require_env(name: str) -> str:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        raise RuntimeError(
            f"Missing required environment variable '{name}'. "
            "This backend expects its database and session settings to be configured."
        )
    return value.strip()


def _getenv(name: str, default: str) -> str:
    return (os.getenv(name) or default).strip()


def _parse_origins(raw: str) -> tuple[str, ...]:
    return tuple(o.strip().rstrip("/") for o in raw.split(",") if o.strip())


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """This is a public function.

    Loads and validates settings from environment variables (a local `.env`
    file is honoured).

    Expected env vars:
    - DATABASE_URL (required)
    - SESSION_SECRET (required when APP_ENV is production)
    - PORT, APP_ENV, CORS_ORIGINS, SESSION_COOKIE_NAME, SESSION_SAME_SITE,
      SESSION_MAX_AGE, LOG_LEVEL (optional)
    """
    load_dotenv(find_dotenv(usecwd=True))

    environment = _getenv("APP_ENV", "development").lower()
    database_url = _require_env("DATABASE_URL")

    if environment in ("prod", "production"):
        session_secret = _require_env("SESSION_SECRET")
    else:
        session_secret = _getenv("SESSION_SECRET", _DEV_SESSION_SECRET)

    same_site = _getenv("SESSION_SAME_SITE", "none").lower()
    if same_site not in _SAME_SITE_VALUES:
        raise RuntimeError(
            f"SESSION_SAME_SITE must be one of {', '.join(_SAME_SITE_VALUES)}; got '{same_site}'."
        )

    try:
        port = int(_getenv("PORT", "3000"))
        session_max_age = int(_getenv("SESSION_MAX_AGE", "86400"))
    except ValueError as exc:
        raise RuntimeError(f"PORT and SESSION_MAX_AGE must be integers: {exc}") from exc

    return Settings(
        database_url=database_url,
        session_secret=session_secret,
        port=port,
        environment=environment,
        cors_origins=_parse_origins(_getenv("CORS_ORIGINS", "http://localhost:3000")),
        session_cookie_name=_getenv("SESSION_COOKIE_NAME", "sid"),
        session_same_site=same_site,  # type: ignore[arg-type]
        session_max_age=session_max_age,
        log_level=_getenv("LOG_LEVEL", "INFO").upper(),
    )
