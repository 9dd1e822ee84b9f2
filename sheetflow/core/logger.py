from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys


_LOGGER: logging.Logger | None = None
DEFAULT_LOG_DIR = Path.home() / "SheetFlow" / "logs"


def _log_dir(log_dir: Path | None) -> Path:
    if log_dir is not None:
        return Path(log_dir)
    env_dir = os.getenv("SHEETFLOW_LOG_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    return DEFAULT_LOG_DIR


def get_logger(log_dir: Path | None = None) -> logging.Logger:
    """Return the configured application logger writing to ``<log_dir>/app.log``.

    Creates the directory if needed. Uses rotating file handler.
    """
    global _LOGGER
    if _LOGGER is not None:
        return _LOGGER

    base = _log_dir(log_dir)
    base.mkdir(parents=True, exist_ok=True)
    log_path = base / "app.log"

    logger = logging.getLogger("sheetflow")
    logger.setLevel(logging.INFO)
    logger.propagate = False

    fmt = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = RotatingFileHandler(log_path, maxBytes=2 * 1024 * 1024, backupCount=3, encoding="utf-8")
    file_handler.setFormatter(fmt)
    logger.addHandler(file_handler)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(fmt)
    logger.addHandler(console)

    _LOGGER = logger
    return logger


def reset_logger() -> None:
    """Detach handlers so the next ``get_logger`` call reconfigures logging."""
    global _LOGGER
    if _LOGGER is None:
        return
    for handler in list(_LOGGER.handlers):
        _LOGGER.removeHandler(handler)
        handler.close()
    _LOGGER = None
