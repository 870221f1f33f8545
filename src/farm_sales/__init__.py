import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


PROJECT_ROOT = Path(__file__).resolve().parents[2]
LOG_DIR = Path(os.environ.get("FARM_SALES_LOG_DIR", PROJECT_ROOT / ".logs"))
LOG_FILE_NAME = "farm_sales.log"
LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(raw: Optional[str]) -> int:
    """Map a level name such as ``"debug"`` to its ``logging`` constant.

    Unknown or missing names fall back to ``INFO``.
    """

    if not raw:
        return logging.INFO
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _build_file_handler(log_file: Path, formatter: logging.Formatter, level: int) -> Optional[RotatingFileHandler]:
    """Create the rotating sales log, or ``None`` when the directory is unusable."""

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_file,
            maxBytes=1_000_000,
            backupCount=5,
            encoding="utf-8",
        )
    except OSError as exc:
        print(
            f"Warning: unable to initialize log file at '{log_file}': {exc}",
            file=sys.stderr,
        )
        return None
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _configure_logging() -> logging.Logger:
    """Attach the sales log file and a stderr console to the package logger.

    ``FARM_SALES_LOG_DIR`` relocates the log file and ``FARM_SALES_LOG_LEVEL``
    lowers or raises the threshold (``INFO`` by default).
    """

    logger = logging.getLogger(__name__)
    if logger.handlers:
        return logger

    level = _resolve_level(os.environ.get("FARM_SALES_LOG_LEVEL"))
    logger.setLevel(level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    file_handler = _build_file_handler(LOG_DIR / LOG_FILE_NAME, formatter, level)
    if file_handler is not None:
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


log = _configure_logging()
log.debug("Sales log writing to '%s'", LOG_DIR / LOG_FILE_NAME)
