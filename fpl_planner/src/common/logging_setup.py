"""
Logging setup for FPL Planner.

Console output goes to stderr so CLI JSON on stdout stays clean; a rotating
file in ``logs_dir`` keeps the full history. Levels come from the
``logging:`` block of settings.yaml, overridable with FPL_PLANNER_LOG_LEVEL.
"""

import logging
import logging.handlers
import sys
import time
from pathlib import Path
from typing import Iterable, Optional
from .config import get_config

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_QUIET_LOGGERS = ("urllib3", "requests", "asyncio")


def _resolve_level(level: str) -> int:
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def _quiet(names: Iterable[str]):
    for name in names:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    force: bool = False
) -> None:
    """
    Configure the root logger.

    Args:
        level: Log level name; falls back to FPL_PLANNER_LOG_LEVEL, then settings
        log_file: Log file path (``logs_dir/fpl_planner.log`` if None)
        force: Replace handlers installed by an earlier call
    """
    root_logger = logging.getLogger()
    if root_logger.handlers and not force:
        if level:
            root_logger.setLevel(_resolve_level(level))
        return

    config = get_config()
    log_level = _resolve_level(
        level or config.get_env("FPL_PLANNER_LOG_LEVEL") or config.get("logging.level", "INFO")
    )
    formatter = logging.Formatter(config.get("logging.format", DEFAULT_FORMAT))

    if force:
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()

    handlers = []
    if config.get("logging.console_enabled", True):
        handlers.append(logging.StreamHandler(sys.stderr))

    if config.get("logging.file_enabled", True):
        path = Path(log_file) if log_file else config.logs_dir / "fpl_planner.log"
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            path,
            maxBytes=config.get("logging.max_bytes", 10 * 1024 * 1024),
            backupCount=config.get("logging.backup_count", 5),
        ))

    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    _quiet(config.get("logging.quiet_loggers", DEFAULT_QUIET_LOGGERS))

    logging.getLogger(__name__).debug(f"Logging initialized at {logging.getLevelName(log_level)}")


class TimedLogger:
    """Context manager that logs how long a block took."""

    def __init__(self, logger: logging.Logger, message: str, level: int = logging.INFO):
        self.logger = logger
        self.message = message
        self.level = level
        self.elapsed: Optional[float] = None
        self._start = 0.0

    def __enter__(self):
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = time.perf_counter() - self._start
        if exc_type is None:
            self.logger.log(self.level, f"{self.message} took {self.elapsed:.2f}s")
        else:
            self.logger.warning(f"{self.message} failed after {self.elapsed:.2f}s: {exc_val}")
        return False
