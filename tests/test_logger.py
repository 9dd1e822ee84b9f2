from __future__ import annotations

from logging.handlers import RotatingFileHandler
from pathlib import Path

from sheetflow.core.logger import get_logger, reset_logger


def test_get_logger_writes_rotating_file(tmp_path: Path) -> None:
    reset_logger()
    try:
        logger = get_logger(tmp_path)
        assert get_logger() is logger

        logger.info("hello")
        file_handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
        assert len(file_handlers) == 1
        file_handlers[0].flush()
        assert "hello" in (tmp_path / "app.log").read_text(encoding="utf-8")
    finally:
        reset_logger()
