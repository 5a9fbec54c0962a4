"""Centralized Logging Configuration

All pipeline components log under the ``aria_kb`` namespace. The CLI calls
``setup_logging`` once per run; library use without it falls back to
whatever the host application configured.
"""

import logging
import logging.config
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

ROOT_LOGGER = "aria_kb"
LOG_LEVEL_ENV = "ARIA_KB_LOG_LEVEL"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

FORMATTERS: Dict[str, Dict[str, str]] = {
    # Console: one line per progress step
    "standard": {
        "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        "datefmt": _DATE_FORMAT,
    },
    # Log file: with source location
    "detailed": {
        "format": "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d %(funcName)s() - %(message)s",
        "datefmt": _DATE_FORMAT,
    },
}


def _console_handler(level: str) -> Dict[str, Any]:
    return {
        "class": "logging.StreamHandler",
        "level": level,
        "formatter": "standard",
        "stream": "ext://sys.stderr",
    }


def _file_handler(level: str, log_file: Path) -> Dict[str, Any]:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    return {
        "class": "logging.FileHandler",
        "level": level,
        "formatter": "detailed",
        "filename": str(log_file),
        "mode": "a",
        "encoding": "utf-8",
    }


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    console_output: bool = True
) -> None:
    """Setup logging for a pipeline run

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL);
            the ARIA_KB_LOG_LEVEL environment variable takes precedence
        log_file: Optional log file path; no file handler when omitted
        console_output: Whether to log to stderr
    """
    level = os.getenv(LOG_LEVEL_ENV, log_level).upper()

    handlers: Dict[str, Dict[str, Any]] = {}
    if console_output:
        handlers["console"] = _console_handler(level)
    if log_file:
        handlers["file"] = _file_handler(level, Path(log_file))

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": FORMATTERS,
        "handlers": handlers,
        "loggers": {
            ROOT_LOGGER: {"level": level, "handlers": list(handlers), "propagate": False},
        },
    })

    get_logger("core.logging").debug(
        "Logging initialized - Level: %s, Console: %s, File: %s",
        level, console_output, log_file or "None",
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger inside the aria_kb namespace

    Module names that already start with ``aria_kb.`` are used as-is, so
    ``get_logger(__name__)`` and ``get_logger("services.merger")`` both land
    under the same root logger.
    """
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def log_stage_count(logger: logging.Logger, label: str, count: int) -> None:
    """Log a per-section count line of the progress trace"""
    logger.info("  Found %d %s", count, label)
