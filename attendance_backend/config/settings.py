"""
attendance_backend/config/settings.py
Application settings loaded from environment variables.

All tunables live here. Modules never read os.environ directly; they receive
a Settings instance from create_app() (or load_settings() for the CLI).
"""
import os
import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv


def get_bool_env(key: str, default: bool = False) -> bool:
    """Get a boolean value from environment variable."""
    value = os.getenv(key, str(default)).lower()
    return value in ('true', '1', 'yes', 'on', 'enabled')


def get_int_env(key: str, default: int) -> int:
    """Get an integer value from environment variable, falling back on garbage."""
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration(value: str) -> timedelta:
    """
    Parse a token lifetime such as "7d", "12h", "30m", "45s" or "3600".

    Raises ValueError for anything else.
    """
    match = _DURATION_RE.match(value or "")
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(seconds=int(amount) * _DURATION_UNITS[unit])


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite+aiosqlite:///./attendance.db"
    jwt_secret: str = "dev-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expires_in: str = "7d"
    frontend_url: str = "http://localhost:3000"
    rate_limit_window_ms: int = 900000
    rate_limit_max_requests: int = 100
    rate_limit_enabled: bool = True
    bcrypt_rounds: int = 12
    port: int = 5000
    environment: str = "development"
    log_level: str = "INFO"
    sql_echo: bool = False

    @property
    def token_lifetime(self) -> timedelta:
        return parse_duration(self.jwt_expires_in)

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def rate_limit(self) -> str:
        """Limit string understood by slowapi, e.g. "100 per 900 seconds"."""
        window_seconds = max(1, self.rate_limit_window_ms // 1000)
        return f"{self.rate_limit_max_requests} per {window_seconds} seconds"


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Build Settings from the process environment (after loading .env)."""
    load_dotenv(dotenv_path=env_file, override=False)

    settings = Settings(
        database_url=os.getenv("DATABASE_URL", Settings.database_url),
        jwt_secret=os.getenv("JWT_SECRET", Settings.jwt_secret),
        jwt_expires_in=os.getenv("JWT_EXPIRES_IN", Settings.jwt_expires_in),
        frontend_url=os.getenv("FRONTEND_URL", Settings.frontend_url),
        rate_limit_window_ms=get_int_env("RATE_LIMIT_WINDOW_MS", Settings.rate_limit_window_ms),
        rate_limit_max_requests=get_int_env("RATE_LIMIT_MAX_REQUESTS", Settings.rate_limit_max_requests),
        rate_limit_enabled=get_bool_env("RATE_LIMIT_ENABLED", True),
        bcrypt_rounds=get_int_env("BCRYPT_ROUNDS", Settings.bcrypt_rounds),
        port=get_int_env("PORT", Settings.port),
        environment=os.getenv("ENVIRONMENT", Settings.environment),
        log_level=os.getenv("LOG_LEVEL", Settings.log_level),
        sql_echo=get_bool_env("SQL_ECHO", False),
    )
    # Fail at startup, not on the first login.
    parse_duration(settings.jwt_expires_in)
    return settings
