"""Logging initialization utilities using loguru."""

from __future__ import annotations

from pathlib import Path
import sys

from loguru import logger

LOG_PATTERN = "trailcam_*.log"


def get_log_directory() -> Path:
    """Default log directory when settings do not name one."""
    return Path.home() / ".trailcam_journal" / "logs"


def init_logging(log_dir: str | Path | None = None, level: str = "INFO", console: bool = False) -> Path:
    """Initialize rotating file logging under the given directory.

    Returns:
        The directory log files are written to.
    """
    log_path = Path(log_dir) if log_dir is not None else get_log_directory()
    log_path.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(
        str(log_path / "trailcam_{time:YYYYMMDD}.log"),
        rotation="10 MB",
        retention="10 days",
        compression="zip",
        enqueue=True,
        backtrace=False,
        diagnose=False,
        level=level,
    )
    if console:
        logger.add(sys.stderr, level="WARNING", format="{level}: {message}")
    return log_path


def find_latest_log_file(log_dir: str | Path | None = None) -> Path | None:
    """Find the latest log file in the specified directory."""
    log_path = Path(log_dir) if log_dir is not None else get_log_directory()
    try:
        if not log_path.exists():
            return None
        log_files = list(log_path.glob(LOG_PATTERN))
        if not log_files:
            return None
        return max(log_files, key=lambda p: p.stat().st_mtime)
    except (OSError, ValueError):
        return None
