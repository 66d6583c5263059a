"""
Logging utilities for E-FECOS.

Console output is intentionally compact: a colour per level, a symbol per kind of
message and four verbosity levels that the CLI maps onto its flags.  Library code
only ever asks for a logger through ``EfecosLogger.get_logger(__name__)``.
"""

import logging
import os
import sys
from enum import Enum

from tqdm import tqdm


class LogLevel(Enum):
    """Verbosity levels understood by the CLI."""

    QUIET = 0
    NORMAL = 1
    VERBOSE = 2
    DEBUG = 3


class Colors:
    """ANSI colour codes."""

    GRAY = "\033[90m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


class Symbols:
    """Unicode symbols prefixed to log messages."""

    CHECK = "✓"
    CROSS = "✗"
    ROCKET = "🚀"
    GEAR = "⚙"
    FUEL = "⛽"
    CHART = "📊"
    WARNING = "⚠"
    INFO = "ℹ"


_LEVEL_COLORS = {
    "DEBUG": Colors.GRAY,
    "INFO": Colors.CYAN,
    "WARNING": Colors.YELLOW,
    "ERROR": Colors.RED,
    "CRITICAL": Colors.RED + Colors.BOLD,
}

_PYTHON_LEVELS = {
    LogLevel.QUIET: logging.ERROR,
    LogLevel.NORMAL: logging.INFO,
    LogLevel.VERBOSE: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}


class SimpleFormatter(logging.Formatter):
    """Colour the whole message according to its level."""

    def format(self, record: logging.LogRecord) -> str:
        color = _LEVEL_COLORS.get(record.levelname, "")
        return f"{color}{record.getMessage()}{Colors.RESET}"


class EfecosLogger:
    """Class-level facade over :mod:`logging` that tracks the CLI verbosity."""

    _current_level: LogLevel = LogLevel.NORMAL
    _loggers: dict[str, logging.Logger] = {}

    @classmethod
    def set_level(cls, level: LogLevel) -> None:
        cls._current_level = level
        for logger in cls._loggers.values():
            cls._configure_logger_level(logger, level)

    @classmethod
    def get_level(cls) -> LogLevel:
        return cls._current_level

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Return (and cache) the logger called ``name``."""
        if name not in cls._loggers:
            cls._loggers[name] = logging.getLogger(name)
        logger = cls._loggers[name]
        cls._configure_logger_level(logger, cls._current_level)
        return logger

    @classmethod
    def _configure_logger_level(cls, logger, level: LogLevel) -> None:
        # An explicit effective level exported by setup_logging wins, so that
        # loggers created in worker code agree with the CLI flags.
        env_level = os.environ.get("EFECOS_EFFECTIVE_LOG_LEVEL")
        if env_level:
            try:
                level = LogLevel[env_level.upper()]
            except KeyError:
                pass
        logger.setLevel(_PYTHON_LEVELS.get(level, logging.INFO))

    @classmethod
    def progress(cls, message: str, symbol: str = Symbols.GEAR) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls.get_logger("efecos.progress").info(
                f"{Colors.BLUE}{symbol} {message}{Colors.RESET}"
            )

    @classmethod
    def success(cls, message: str, symbol: str = Symbols.CHECK) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls.get_logger("efecos.success").info(
                f"{Colors.GREEN}{symbol} {message}{Colors.RESET}"
            )

    @classmethod
    def info(cls, message: str, symbol: str = Symbols.INFO) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls.get_logger("efecos.info").info(f"{symbol} {message}")

    @classmethod
    def detail(cls, message: str, prefix: str = "  ") -> None:
        if cls._current_level.value >= LogLevel.VERBOSE.value:
            cls.get_logger("efecos.detail").info(f"{prefix} {message}")

    @classmethod
    def debug(cls, message: str, logger_name: str = "efecos.debug") -> None:
        if cls._current_level.value >= LogLevel.DEBUG.value:
            cls.get_logger(logger_name).debug(message)

    @classmethod
    def warning(cls, message: str, symbol: str = Symbols.WARNING) -> None:
        cls.get_logger("efecos.warning").warning(
            f"{Colors.YELLOW}{symbol} {message}{Colors.RESET}"
        )

    @classmethod
    def error(cls, message: str, symbol: str = Symbols.CROSS) -> None:
        cls.get_logger("efecos.error").error(
            f"{Colors.RED}{symbol} {message}{Colors.RESET}"
        )


def suppress_third_party_logs() -> None:
    """Keep chatty dependencies out of the console."""
    for name in ("matplotlib", "urllib3", "openpyxl", "numexpr", "PIL"):
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging(level: LogLevel | None = None) -> None:
    """Configure the root logger.

    Without an explicit level the ``EFECOS_LOG_LEVEL`` environment variable is
    consulted (quiet, normal, verbose, debug), falling back to NORMAL.
    """
    if level is None:
        env_level = os.environ.get("EFECOS_LOG_LEVEL", "normal").upper()
        level = LogLevel.__members__.get(env_level, LogLevel.NORMAL)

    os.environ["EFECOS_EFFECTIVE_LOG_LEVEL"] = getattr(level, "name", "NORMAL")
    EfecosLogger.set_level(level)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(SimpleFormatter())

    if level == LogLevel.QUIET:
        handler.setLevel(logging.ERROR)
        root_logger.setLevel(logging.ERROR)
    elif level == LogLevel.DEBUG:
        handler.setLevel(logging.DEBUG)
        root_logger.setLevel(logging.DEBUG)
    else:
        handler.setLevel(logging.INFO)
        root_logger.setLevel(logging.INFO)

    root_logger.addHandler(handler)
    suppress_third_party_logs()


class ProgressTracker:
    """Step-wise progress bar for multi-stage commands."""

    def __init__(self, steps: list[str]):
        self.steps = steps
        self.current = 0
        self.show_progress = EfecosLogger.get_level() != LogLevel.QUIET
        self.pbar = None
        if self.show_progress:
            self.pbar = tqdm(
                total=len(steps),
                desc=f"{Colors.BLUE}{Symbols.FUEL} Analytics{Colors.RESET}",
                bar_format="{desc}: {percentage:3.0f}%|{bar:30}| {n_fmt}/{total_fmt}",
            )

    def advance(self, message: str | None = None, status: str = "success") -> None:
        if self.pbar is not None:
            if message:
                color = Colors.GREEN if status == "success" else Colors.YELLOW
                symbol = Symbols.CHECK if status == "success" else Symbols.WARNING
                self.pbar.write(f"{color}{symbol} {message}{Colors.RESET}")
            self.pbar.update(1)
        self.current += 1

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.write(
                f"{Colors.GREEN}{Symbols.CHECK} Analytics completed{Colors.RESET}"
            )
            self.pbar.close()


def log_progress(message: str) -> None:
    EfecosLogger.progress(message, Symbols.GEAR)


def log_success(message: str) -> None:
    EfecosLogger.success(message, Symbols.CHECK)


def log_info(message: str) -> None:
    EfecosLogger.info(message, Symbols.INFO)


def log_detail(message: str, prefix: str = "  ") -> None:
    EfecosLogger.detail(message, prefix)


def log_debug(message: str, logger_name: str = "efecos.debug") -> None:
    EfecosLogger.debug(message, logger_name)


def log_warning(message: str) -> None:
    EfecosLogger.warning(message, Symbols.WARNING)


def log_error(message: str) -> None:
    EfecosLogger.error(message, Symbols.CROSS)
