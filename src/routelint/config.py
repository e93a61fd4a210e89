"""
Settings for ``routelint``.

Read from ``ROUTELINT_*`` environment variables and an optional ``.env`` file;
command-line flags win over both.

    ROUTELINT_EXCLUDE='["migrations", "scripts"]'
    ROUTELINT_FAIL_ON_WARNING=true
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ROUTELINT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    exclude: list[str] = Field(default_factory=list)  # extra directory names to skip
    max_files: Optional[int] = None
    fail_on_warning: bool = False
    log_level: str = "WARNING"
