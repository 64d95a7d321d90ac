"""
Logging Management Module.

The package logs through one named logger (``LOGGER_NAME``). It starts
console-only at import time; once the RootOrchestrator has provisioned the
run tree, ``Logger.setup`` reattaches it with a rotating file inside the
run's ``logs/`` directory so every trial, fold and epoch message of a
search lands next to the artifacts it produced.

Environment Variables:
    GLIACNN_DEBUG: "1" forces DEBUG level (per-batch losses included).
"""

# Standard Imports
import logging
import os
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Optional, Set

# Internal Imports
from ..paths import LOGGER_NAME

LOG_FORMAT: Final[str] = "%(asctime)s - %(levelname)s - %(message)s"
DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Libraries whose INFO chatter would drown the per-trial messages
NOISY_LIBRARIES: Final[tuple] = ("optuna", "matplotlib", "PIL")


class Logger:
    """
    Owns the handlers of the package logger.

    Lifecycle:
        1. Import: console handler only
        2. RootOrchestrator: ``setup(log_dir=paths.logs)`` adds the run file
        3. RootOrchestrator.cleanup: handlers are flushed and closed

    Example:
        >>> run_logger = Logger.setup(name=LOGGER_NAME, log_dir=paths.logs, level="DEBUG")
        >>> Logger.get_log_file().parent == paths.logs
        True
    """

    _configured: Set[str] = set()
    _active_log_file: Optional[Path] = None

    def __init__(
        self,
        name: str = LOGGER_NAME,
        log_dir: Optional[Path] = None,
        level: int = logging.INFO,
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 3,
    ):
        self.name = name
        self.log_dir = Path(log_dir) if log_dir is not None else None
        self.level = level
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.logger = logging.getLogger(name)

        # reconfigure on first use, or whenever a run directory is handed over
        if name not in Logger._configured or self.log_dir is not None:
            self._attach_handlers()
            Logger._configured.add(name)

    def _attach_handlers(self) -> None:
        formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

        self.logger.setLevel(self.level)
        self.logger.propagate = False
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)

        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatter)
        self.logger.addHandler(console)

        if self.log_dir is None:
            return

        self.log_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        log_file = self.log_dir / f"search_{stamp}.log"
        file_handler = RotatingFileHandler(
            log_file, maxBytes=self.max_bytes, backupCount=self.backup_count, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        self.logger.addHandler(file_handler)
        Logger._active_log_file = log_file

    @classmethod
    def get_log_file(cls) -> Optional[Path]:
        return cls._active_log_file

    @staticmethod
    def quiet_libraries(level: int = logging.WARNING) -> None:
        """Raises the threshold of third-party loggers."""
        for name in NOISY_LIBRARIES:
            logging.getLogger(name).setLevel(level)

    @classmethod
    def setup(
        cls, name: str, log_dir: Optional[Path] = None, level: str = "INFO", **kwargs
    ) -> logging.Logger:
        """
        Configures the package logger and returns it.

        Args:
            name: Logger identifier (normally LOGGER_NAME).
            log_dir: Run ``logs/`` directory (None = console only).
            level: Level name from ``telemetry.log_level``.

        Raises:
            ValueError: If ``level`` is not a logging level name.
        """
        if os.getenv("GLIACNN_DEBUG") == "1":
            numeric_level = logging.DEBUG
        else:
            numeric_level = logging.getLevelName(level.upper())
            if not isinstance(numeric_level, int):
                raise ValueError(f"Unknown log level: {level}")

        cls.quiet_libraries()
        return cls(name=name, log_dir=log_dir, level=numeric_level, **kwargs).logger


# Bootstrap (console-only) logger, reconfigured by Logger.setup during orchestration
logger: Final[logging.Logger] = Logger().logger
