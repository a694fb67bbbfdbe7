# apidescriber/config.py
"""
apidescriber configuration: single source of truth via Pydantic Settings.

Resolution order: explicit arguments > env vars (APIDESCRIBER_*) > .env file > defaults.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiDescriberConfig(BaseSettings):
    """Central configuration for document generation."""

    model_config = SettingsConfigDict(
        env_prefix="APIDESCRIBER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Document ---
    openapi_version: str = "3.0.0"
    info_title: str = ""
    info_version: str = "0.0.0"

    # --- Models ---
    ref_prefix: str = "#/components/schemas/"

    # --- Merge ---
    # "error" raises SchemaMergeError on keys the target node kind does not declare,
    # "warn" logs them and drops the key.
    unknown_field_policy: Literal["error", "warn"] = "error"

    # --- Logging ---
    log_level: str = "INFO"
    home_dir: Path = Field(default_factory=lambda: Path.home() / ".apidescriber")

    @property
    def log_dir(self) -> Path:
        return self.home_dir / "logs"


@lru_cache(maxsize=1)
def get_config() -> ApiDescriberConfig:
    """Return the global config singleton."""
    return ApiDescriberConfig()
