"""Loguru logger configuration for cloudsaver."""

import sys
from pathlib import Path

from loguru import logger

# Extra severities on top of loguru's defaults
# (TRACE 5, DEBUG 10, INFO 20, SUCCESS 25, WARNING 30, ERROR 40, CRITICAL 50).
_EXTRA_LEVELS = {
    "VERBOSE": (15, "<blue>"),
    "FATAL": (60, "<red><bold>"),
}

LEVEL_NAMES = {
    "debug": "DEBUG",
    "verbose": "VERBOSE",
    "info": "INFO",
    "warn": "WARNING",
    "warning": "WARNING",
    "error": "ERROR",
    "fatal": "FATAL",
}

_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{module}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {module}:{function}:{line} | {message}"

_log_dir: Path | None = None


def register_levels() -> None:
    """Add the VERBOSE and FATAL levels if loguru does not know them yet."""
    for name, (no, color) in _EXTRA_LEVELS.items():
        try:
            logger.level(name)
        except ValueError:
            logger.level(name, no=no, color=color)


def level_name(level: str) -> str:
    """Map a config-style level (``warn``, ``verbose`` …) to a loguru level name."""
    return LEVEL_NAMES.get(level.lower(), level.upper())


def setup_logger(log_dir: Path | None = None, level: str = "info") -> Path:
    """Configure loguru with a console sink and two rotating file sinks.

    Parameters
    ----------
    log_dir : Path, optional
        Directory for log files.  Defaults to ``<config dir>/logs``.
    level : str
        Console level; the ``cloudsaver.log`` file always records DEBUG.

    Returns the directory the log files are written to.
    """
    global _log_dir

    register_levels()
    logger.remove()

    logger.add(
        sys.stderr,
        level=level_name(level),
        format=_CONSOLE_FORMAT,
        colorize=True,
    )

    if log_dir is None:
        from cloudsaver.config import default_data_dir
        log_dir = default_data_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    _log_dir = log_dir

    logger.add(
        str(log_dir / "cloudsaver.log"),
        level="DEBUG",
        format=_FILE_FORMAT,
        rotation="10 MB",
        retention=5,
        encoding="utf-8",
    )
    logger.add(
        str(log_dir / "error.log"),
        level="ERROR",
        format=_FILE_FORMAT,
        rotation="10 MB",
        retention=5,
        encoding="utf-8",
    )

    logger.debug("Logger initialized: file output: {}", log_dir)
    return log_dir


def set_level(level: str) -> None:
    """Re-install the sinks with a new console level (``--verbose`` / ``--debug``)."""
    setup_logger(_log_dir, level)

