from __future__ import annotations

import os
from functools import lru_cache
from dotenv import load_dotenv, find_dotenv

_env_path = find_dotenv(".env") or ".env"
load_dotenv(_env_path, override=False)

DEFAULT_EXECUTE_URL = "https://api.jdoodle.com/v1/execute"
DEFAULT_CREDIT_URL = "https://api.jdoodle.com/v1/credit-spent"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


class Settings:
    """Central configuration (env driven)."""

    def __init__(self) -> None:
        # Remote execution service
        self.jdoodle_client_id: str = os.getenv("JDOODLE_CLIENT_ID", "").strip()
        self.jdoodle_client_secret: str = os.getenv("JDOODLE_CLIENT_SECRET", "").strip()
        self.jdoodle_execute_url: str = os.getenv("JDOODLE_EXECUTE_URL", DEFAULT_EXECUTE_URL).rstrip("/")
        self.jdoodle_credit_url: str = os.getenv("JDOODLE_CREDIT_URL", DEFAULT_CREDIT_URL).rstrip("/")
        self.execute_timeout_s: float = _env_float("EXECUTE_TIMEOUT_S", 30.0)
        self.quota_timeout_s: float = _env_float("QUOTA_TIMEOUT_S", 10.0)
        self.batch_delay_s: float = _env_float("BATCH_DELAY_MS", 500.0) / 1000.0
        # Database (project bookkeeping only)
        self.database_url: str = os.getenv("DATABASE_URL", "")
        # Bearer tokens issued by the surrounding application
        self.jwt_secret: str = os.getenv("JWT_SECRET", "")
        # App meta
        self.app_name: str = "Code Runner Backend"
        self.debug: bool = os.getenv("DEBUG", "False").lower() == "true"
        self.log_level: str = os.getenv("LOG_LEVEL", "DEBUG" if self.debug else "INFO").upper()

    @property
    def execution_configured(self) -> bool:
        return bool(self.jdoodle_client_id and self.jdoodle_client_secret)

    def get_database_url(self) -> str:
        return self.database_url


@lru_cache()
def get_settings() -> Settings:
    return Settings()
