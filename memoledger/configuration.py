"""Mini README: Centralised configuration models and helpers for the Memo Ledger.

Structure:
    * LedgerSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to read environment variables (prefixed with
    ``MEMOLEDGER_``), choose where the SQLite database lives, and specify
    service ports. The configuration is cached so validation runs once per
    process; tests construct ``LedgerSettings`` directly instead.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Runtime configuration for the Memo Ledger service."""

    model_config = SettingsConfigDict(
        env_prefix="MEMOLEDGER_",
        env_file=".env",
        case_sensitive=False,
    )

    environment: str = Field(
        "development",
        description="Environment label controlling auto-reload and logging levels.",
    )
    data_directory: Path = Field(
        Path("data"),
        description="Directory holding the ledger database and preference file.",
    )
    database_filename: str = Field(
        "ledger.sqlite3",
        description="SQLite file name created inside the data directory.",
    )
    preferences_filename: str = Field(
        "preferences.json",
        description="JSON file storing presentation preferences.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the HTTP service to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Default port the HTTP service exposes.",
        ge=1,
        le=65535,
    )
    default_page_size: int = Field(
        50,
        description="Number of memos returned when a listing omits ``limit``.",
        ge=1,
    )
    log_level: str = Field(
        "INFO",
        description="Root logging level applied by the command line launcher.",
    )

    @field_validator("data_directory", mode="before")
    @classmethod
    def _expand_path(cls, value: Optional[str | Path]) -> Path:
        """Ensure configured paths expand user directories and exist."""

        path = Path(value or "data").expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def database_path(self) -> Path:
        """Absolute location of the SQLite ledger file."""

        return self.data_directory / self.database_filename

    @property
    def preferences_path(self) -> Path:
        """Absolute location of the presentation preference file."""

        return self.data_directory / self.preferences_filename


@lru_cache()
def get_settings() -> LedgerSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return LedgerSettings()
