"""Tests for savreader.logging."""

from __future__ import annotations

import logging
from pathlib import Path

from savreader.logging import configure_logging, get_logger


def test_get_logger_uses_package_hierarchy() -> None:
    assert get_logger().name == "savreader"
    assert get_logger("parser").name == "savreader.parser"


def test_configure_logging_levels() -> None:
    logger = configure_logging(verbose=True)
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1

    logger = configure_logging(verbose=False)
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1


def test_configure_logging_file_sink(tmp_path: Path) -> None:
    log_file = tmp_path / "savreader.log"
    logger = configure_logging(verbose=True, log_file=log_file)
    get_logger("parser").debug("Header: layout %d", 2)
    for handler in logger.handlers:
        handler.flush()
    assert "Header: layout 2" in log_file.read_text(encoding="utf-8")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
