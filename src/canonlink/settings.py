#!filepath: src/canonlink/settings.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CanonlinkSettings(BaseSettings):
    """Runtime settings for the canonicalization engine.

    Attributes:
        rules_path: Optional rule file replacing the packaged one.
        max_embedded_depth: How many wrapped URLs are unwrapped at most.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        env_prefix="CANONLINK_",
    )

    rules_path: Optional[Path] = Field(default=None, validation_alias="CANONLINK_RULES_PATH")
    max_embedded_depth: int = Field(
        default=5, ge=1, validation_alias="CANONLINK_MAX_EMBEDDED_DEPTH"
    )

    def resolved_rules_path(self) -> Optional[Path]:
        """Return the override rule path as an absolute path, if any."""
        if self.rules_path is None:
            return None
        p = self.rules_path.expanduser()
        return p if p.is_absolute() else (Path.cwd() / p).resolve()


@lru_cache(maxsize=1)
def get_settings() -> CanonlinkSettings:
    """Return the process-wide settings."""
    return CanonlinkSettings()
