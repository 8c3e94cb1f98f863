"""
System Reporter - Centralized logging for CineShare services.

Wraps the standard library logger with verbosity filtering and a
consistent "[context] message" layout. Logs to stdout by default and
optionally mirrors everything to a file for local development.
"""

import logging
import os
import sys
from typing import Callable, Optional

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


class SystemReporter:
    """
    Logger with verbose filtering and an optional event sink.

    Verbose Levels:
        0 = Critical only (always visible)
        1 = Important messages (default)
        2 = Detailed information
        3 = Debug/verbose

    The sink, when given, receives (level, message, context) for every
    record at info level and above. It is used to surface server logs on
    an admin channel and must never raise.
    """

    def __init__(
        self,
        name: str = "cineshare",
        log_file: Optional[str] = None,
        level: int = logging.INFO,
        verbose: int = 1,
        sink: Optional[Callable[[str, str, str], None]] = None,
    ) -> None:
        """
        Initialize SystemReporter.

        Args:
            name: Logger name
            log_file: Optional file path. If None, logs to stdout only.
            level: Python logging level
            verbose: Verbosity filter (0-3)
            sink: Optional callable receiving (level, message, context)
        """
        self.name = name
        self.verbose = max(0, min(3, verbose))
        self.sink = sink

        self._init_logger(name, log_file, level)

    @classmethod
    def from_level_name(
        cls,
        name: str,
        level_name: str,
        log_file: Optional[str] = None,
    ) -> "SystemReporter":
        """Build a reporter from a textual log level ("info", "debug", ...)."""
        level = LEVELS.get(level_name.lower(), logging.INFO)
        verbose = 3 if level == logging.DEBUG else 1
        return cls(name=name, log_file=log_file, level=level, verbose=verbose)

    def _init_logger(
        self, name: str, log_file: Optional[str], level: int
    ) -> None:
        """
        Initialize logger with console and optional file handlers.

        Args:
            name: Logger name
            log_file: Log file path (None = stdout only)
            level: Python logging level
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.logger.handlers.clear()

        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if log_file:
            log_dir = os.path.dirname(os.path.abspath(log_file))
            os.makedirs(log_dir, exist_ok=True)

            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def _emit(self, level: str, message: str, context: str) -> None:
        """Forward a record to the sink (fire-and-forget)."""
        if not self.sink:
            return

        try:
            self.sink(level, message, context)
        except Exception as e:
            print(f"⚠ Reporter sink failed: {e}", file=sys.stderr)

    def set_verbose(self, level: int) -> None:
        """Update verbosity level."""
        self.verbose = max(0, min(3, level))
        self.info(
            f"Verbosity set to {self.verbose}",
            context="SystemReporter",
            verbose_level=0,
        )

    def _should_log(self, verbose_level: int) -> bool:
        return self.verbose >= verbose_level

    # Core logging methods
    def debug(
        self, msg: str, context: str = "system", verbose_level: int = 3
    ) -> None:
        """Log debug message (never forwarded to the sink)."""
        if self._should_log(verbose_level):
            self.logger.debug(f"[{context}] {msg}")

    def info(
        self, msg: str, context: str = "system", verbose_level: int = 1
    ) -> None:
        """Log info message."""
        if self._should_log(verbose_level):
            self.logger.info(f"[{context}] {msg}")
            self._emit("info", msg, context)

    def warning(
        self, msg: str, context: str = "system", verbose_level: int = 1
    ) -> None:
        """Log warning message."""
        if self._should_log(verbose_level):
            self.logger.warning(f"[{context}] {msg}")
            self._emit("warning", msg, context)

    def error(
        self, msg: str, context: str = "system", verbose_level: int = 0
    ) -> None:
        """Log error message."""
        if self._should_log(verbose_level):
            self.logger.error(f"[{context}] {msg}")
            self._emit("error", msg, context)

    def critical(
        self, msg: str, context: str = "system", verbose_level: int = 0
    ) -> None:
        """Log critical message."""
        if self._should_log(verbose_level):
            self.logger.critical(f"[{context}] {msg}")
            self._emit("critical", msg, context)
