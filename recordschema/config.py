# recordschema/config.py
"""
recordschema configuration via Pydantic Settings.

Resolution order: explicit arguments > env vars (RECORDSCHEMA_*) > .env file > defaults.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RecordSchemaConfig(BaseSettings):
    """Central configuration for recordschema."""

    model_config = SettingsConfigDict(
        env_prefix="RECORDSCHEMA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- References ---
    name_prefix: str = "#/$defs/"

    # --- Tag keys read from field metadata ---
    json_tag: str = "json"
    schema_tag: str = "jsonschema"
    description_tag: str = "jsonschema_description"
    # Unknown jsonschema directives are skipped unless set to "reject".
    unknown_directives: Literal["ignore", "reject"] = "ignore"

    # --- Logging ---
    log_level: str = "WARNING"
    home_dir: Path = Field(default_factory=lambda: Path.home() / ".recordschema")

    @property
    def log_dir(self) -> Path:
        return self.home_dir / "logs"


@lru_cache(maxsize=1)
def get_config() -> RecordSchemaConfig:
    """Return the global config singleton."""
    return RecordSchemaConfig()
