"""
Application Configuration.

Settings for the portal client, read from the environment and an
optional ``.env`` file in the working directory.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class AppConfig(BaseSettings):
    """Central configuration loaded from environment variables and defaults."""

    # --- REST backend ---
    API_BASE_URL: str = "http://localhost:4000"
    REQUEST_TIMEOUT_S: float = Field(default=30.0, gt=0)

    # --- Local persistence (localStorage equivalent) ---
    TOKEN_STORE_PATH: Path = Path.home() / ".dost_portal" / "session.json"
    DOWNLOAD_DIR: Optional[Path] = None

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "portal.log"
    LOG_MAX_BYTES: int = 5_242_880  # 5 MB
    LOG_BACKUP_COUNT: int = 3

    # --- Notifications ---
    NOTIFICATION_POLL_INTERVAL_S: int = Field(default=60, ge=5)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @field_validator("API_BASE_URL")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        """Endpoint paths always start with ``/``; avoid ``//api``."""
        return value.rstrip("/")

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level '{value}'")
        return level

    @model_validator(mode="after")
    def _warn_missing_env(self) -> "AppConfig":
        """Say which backend a client without ``.env`` is talking to."""
        if not Path(".env").exists():
            logging.getLogger("portal.config").warning(
                "No .env file found; using API_BASE_URL=%s.",
                self.API_BASE_URL,
            )

        return self

    @property
    def api_root(self) -> str:
        """Base URL of the ``/api`` namespace."""
        return f"{self.API_BASE_URL}/api"


# ---------------------------------------------------------------------------
# Module-level singleton factory
# ---------------------------------------------------------------------------

_config_instance: Optional[AppConfig] = None
_config_lock: threading.Lock = threading.Lock()


def get_config() -> AppConfig:
    """Process-wide ``AppConfig``, built on first use.

    Tests construct ``AppConfig`` directly instead.
    """
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = AppConfig()
    return _config_instance
