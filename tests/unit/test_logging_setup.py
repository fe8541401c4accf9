"""Tests for loguru setup."""

import sys

from loguru import logger

from app.config.logging import setup_logging


def test_setup_logging_writes_file_sink(tmp_path) -> None:
    """Messages at or above the level reach the file sink."""
    log_file = tmp_path / "network.log"

    setup_logging(log_file=str(log_file), level="warning")
    try:
        logger.info("below threshold")
        logger.warning("BV sweep skipped entry 12")
    finally:
        logger.remove()
        logger.add(sys.stderr)

    content = log_file.read_text(encoding="utf-8")
    assert "BV sweep skipped entry 12" in content
    assert "below threshold" not in content
