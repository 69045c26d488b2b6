#!filepath: src/canonlink/utils/logger.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.console import Console
from rich.logging import RichHandler


class LoggingSettings(BaseSettings):
    """Logging configuration, isolated from the rest of the environment.

    Reads `.env` and the process environment but ignores keys unrelated to
    logging.

    Attributes:
        log_dir: Directory for the rotating log file. No file handler when unset.
        console_level: Level of the console handler.
        file_level: Level of the file handler.
        file_name: Log file name.
        max_bytes: Size at which the log file rotates.
        backup_count: Number of rotated files to keep.
        rich_tracebacks: Whether the console renders rich tracebacks.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        env_prefix="CANONLINK_",
    )

    log_dir: Optional[Path] = Field(default=None, validation_alias="CANONLINK_LOG_DIR")
    console_level: str = Field(default="WARNING", validation_alias="CANONLINK_CONSOLE_LEVEL")
    file_level: str = Field(default="DEBUG", validation_alias="CANONLINK_FILE_LEVEL")
    file_name: str = Field(default="canonlink.log", validation_alias="CANONLINK_LOG_FILE")
    max_bytes: int = Field(default=5_000_000, validation_alias="CANONLINK_LOG_MAX_BYTES")
    backup_count: int = Field(default=5, validation_alias="CANONLINK_LOG_BACKUP_COUNT")
    rich_tracebacks: bool = Field(
        default=True, validation_alias="CANONLINK_RICH_TRACEBACKS"
    )


@dataclass(slots=True)
class _Runtime:
    configured: bool = False


_runtime: _Runtime = _Runtime()


def configure_logging(*, settings: Optional[LoggingSettings] = None) -> None:
    """Configure the package logger once, with a Rich console and optional file.

    Handlers are attached to the ``canonlink`` logger rather than the root
    logger, which does not propagate, so records are never printed twice by an
    application that configures the root logger.

    Args:
        settings: Optional override, mainly for tests.
    """
    if _runtime.configured:
        return

    s = settings or LoggingSettings()

    base = logging.getLogger("canonlink")
    base.setLevel(logging.DEBUG)
    base.handlers.clear()
    base.propagate = False

    console_level = getattr(logging, s.console_level.upper(), logging.WARNING)
    file_level = getattr(logging, s.file_level.upper(), logging.DEBUG)

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=bool(s.rich_tracebacks),
        markup=False,
        show_path=False,
        show_level=True,
        log_time_format="[%X]",
    )
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    base.addHandler(console_handler)

    if s.log_dir is not None:
        s.log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=str(s.log_dir / s.file_name),
            maxBytes=int(s.max_bytes),
            backupCount=int(s.backup_count),
            encoding="utf_8",
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        base.addHandler(file_handler)

    for noisy in ("filelock", "bs4"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    _runtime.configured = True


def get_logger(name: str = "canonlink", level: str | None = None) -> logging.Logger:
    """Return a logger after making sure package logging is configured.

    Args:
        name: Logger name.
        level: Optional level override.

    Returns:
        Configured logger.
    """
    configure_logging()
    logger = logging.getLogger(name)
    if level:
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger
