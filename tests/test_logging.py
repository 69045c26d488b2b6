#!filepath: tests/test_logging.py
from __future__ import annotations

import logging

from canonlink.utils.logger import get_logger


class _Collect(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


def test_package_logger_does_not_reach_root() -> None:
    """Records stay on the package handlers when the app configures root."""
    logger = get_logger("canonlink.tests")
    assert logging.getLogger("canonlink").propagate is False

    root = logging.getLogger()
    seen = _Collect()
    root.addHandler(seen)
    try:
        logger.error("only once")
    finally:
        root.removeHandler(seen)
    assert seen.records == []
