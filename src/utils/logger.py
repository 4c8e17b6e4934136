"""
Structured console logger

One process-wide Logger; modules bind it to a category at import time:

    log = get_logger().for_category(LogCategory.SESSION)
    log.info("Logged in", token_bytes=32)

    [14:23:45] SESSION   ✓ Logged in
               └─ token_bytes: 32

configure_logger() changes level and colors in place, so loggers bound
before configuration pick up the new settings.
"""

import os
import sys
import traceback
from datetime import datetime
from typing import Any, List, Optional, TextIO, Union

from models.enums import LogLevel, LogCategory


# === ANSI COLORS ===
class Colors:
    RESET = '\033[0m'
    DIM = '\033[2m'

    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'
    MAGENTA = '\033[35m'
    CYAN = '\033[36m'
    WHITE = '\033[37m'

    BRIGHT_GREEN = '\033[92m'
    BRIGHT_YELLOW = '\033[93m'
    BRIGHT_BLUE = '\033[94m'
    BRIGHT_MAGENTA = '\033[95m'
    BRIGHT_CYAN = '\033[96m'
    BRIGHT_WHITE = '\033[97m'


CATEGORY_COLORS = {
    LogCategory.CONFIG: Colors.CYAN,
    LogCategory.SESSION: Colors.BRIGHT_BLUE,
    LogCategory.REALTIME: Colors.BRIGHT_CYAN,
    LogCategory.DEVICE: Colors.BRIGHT_MAGENTA,
    LogCategory.TWEEN: Colors.BRIGHT_YELLOW,
    LogCategory.RENDER: Colors.MAGENTA,
    LogCategory.API: Colors.BRIGHT_GREEN,
    LogCategory.SYSTEM: Colors.BRIGHT_WHITE,
    LogCategory.SHUTDOWN: Colors.YELLOW,
    LogCategory.TASK: Colors.BLUE,
}

LEVEL_SYMBOLS = {
    LogLevel.DEBUG: '·',
    LogLevel.INFO: '✓',
    LogLevel.WARN: '⚠',
    LogLevel.ERROR: '✗',
}

LEVEL_COLORS = {
    LogLevel.DEBUG: Colors.DIM,
    LogLevel.INFO: Colors.GREEN,
    LogLevel.WARN: Colors.YELLOW,
    LogLevel.ERROR: Colors.RED,
}

LEVEL_PRIORITY = {
    LogLevel.DEBUG: 0,
    LogLevel.INFO: 1,
    LogLevel.WARN: 2,
    LogLevel.ERROR: 3,
}

CATEGORY_WIDTH = 9
DETAIL_INDENT = " " * 11

ExcInfo = Union[bool, BaseException]


def _colors_supported(stream: TextIO) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def format_value(value: Any) -> str:
    """Render a detail value: floats rounded, bytes summarized."""
    if isinstance(value, float):
        return f"{value:.3f}".rstrip("0").rstrip(".")
    if isinstance(value, (bytes, bytearray)):
        return f"<{len(value)} bytes>"
    return str(value)


# === CORE LOGGER ===
class Logger:
    """
    Structured logger with compact output format

    Format:
    [HH:MM:SS] CATEGORY  ✓ Message
               ├─ key: value
               └─ key: value

    DEBUG/INFO lines go to stdout, WARN/ERROR to stderr.
    """

    def __init__(
        self,
        min_level: LogLevel = LogLevel.INFO,
        use_colors: Optional[bool] = None,
        stream: Optional[TextIO] = None,
        error_stream: Optional[TextIO] = None,
    ):
        """
        Args:
            min_level: Minimum log level to display
            use_colors: ANSI colors on/off; None = only when stdout is a terminal
            stream: Output for DEBUG/INFO (sys.stdout at write time by default)
            error_stream: Output for WARN/ERROR (sys.stderr at write time by default)
        """
        self.min_level = min_level
        self.use_colors = use_colors
        self.stream = stream
        self.error_stream = error_stream

    def is_enabled(self, level: LogLevel) -> bool:
        return LEVEL_PRIORITY[level] >= LEVEL_PRIORITY[self.min_level]

    def _target(self, level: LogLevel) -> TextIO:
        if LEVEL_PRIORITY[level] >= LEVEL_PRIORITY[LogLevel.WARN]:
            return self.error_stream or sys.stderr
        return self.stream or sys.stdout

    def _paint(self, text: str, color: str, colored: bool) -> str:
        return f"{color}{text}{Colors.RESET}" if colored else text

    def format_record(
        self,
        category: LogCategory,
        message: str,
        level: LogLevel,
        details: List[str],
        colored: bool = False,
    ) -> List[str]:
        """Build the output lines for one record (main line + detail tree)."""
        stamp = datetime.now().strftime('[%H:%M:%S]')
        cat = self._paint(category.name.ljust(CATEGORY_WIDTH), CATEGORY_COLORS.get(category, Colors.WHITE), colored)
        sym = self._paint(LEVEL_SYMBOLS[level], LEVEL_COLORS[level], colored)
        msg = self._paint(message, LEVEL_COLORS[level], colored)

        lines = [f"{stamp} {cat} {sym} {msg}"]
        for i, detail in enumerate(details):
            branch = "└─" if i == len(details) - 1 else "├─"
            lines.append(f"{DETAIL_INDENT}{self._paint(branch, Colors.DIM, colored)} {detail}")
        return lines

    def log(
        self,
        category: LogCategory,
        message: str,
        level: LogLevel = LogLevel.INFO,
        details: Optional[list] = None,
        exc_info: ExcInfo = False,
        **kwargs
    ):
        """
        Log a structured message

        Args:
            category: Log category (SESSION, REALTIME, etc.)
            message: Main message text
            level: Log level (DEBUG, INFO, WARN, ERROR)
            details: Extra detail strings shown below the message
            exc_info: True for the exception being handled, or an exception
                instance; its traceback is appended to the details
            **kwargs: Key-value pairs shown as details

        Example:
            logger.log(LogCategory.SESSION, "Failed 401: /xled/v1/led/mode", LogLevel.ERROR, attempt=1)

            [14:23:45] SESSION   ✗ Failed 401: /xled/v1/led/mode
                       └─ attempt: 1
        """
        if not self.is_enabled(level):
            return

        lines = list(details or [])
        lines.extend(f"{k}: {format_value(v)}" for k, v in kwargs.items())
        lines.extend(_traceback_lines(exc_info))

        target = self._target(level)
        colored = self.use_colors if self.use_colors is not None else _colors_supported(target)
        target.write("\n".join(self.format_record(category, message, level, lines, colored)) + "\n")

    # === Level helpers ===
    def debug(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.DEBUG, **kw)
    def info(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.INFO, **kw)
    def warn(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.WARN, **kw)
    def error(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.ERROR, **kw)

    def for_category(self, category: LogCategory) -> 'BoundLogger':
        return BoundLogger(self, category)


def _traceback_lines(exc_info: ExcInfo) -> List[str]:
    if isinstance(exc_info, BaseException):
        text = "".join(traceback.format_exception(type(exc_info), exc_info, exc_info.__traceback__))
    elif exc_info and sys.exc_info()[0] is not None:
        text = traceback.format_exc()
    else:
        return []
    return text.rstrip().splitlines()


class BoundLogger:
    """Logger bound to a default category"""

    def __init__(self, base: Logger, category: LogCategory):
        self._base = base
        self._category = category

    @property
    def category(self) -> LogCategory:
        return self._category

    def log(self, message: str, level: LogLevel = LogLevel.INFO, category: Optional[LogCategory] = None, **kw):
        self._base.log(category or self._category, message, level, **kw)

    def debug(self, message: str, **kw): self.log(message, LogLevel.DEBUG, **kw)
    def info(self, message: str, **kw): self.log(message, LogLevel.INFO, **kw)
    def warn(self, message: str, **kw): self.log(message, LogLevel.WARN, **kw)
    def error(self, message: str, **kw): self.log(message, LogLevel.ERROR, **kw)

    def with_category(self, category: LogCategory) -> 'BoundLogger':
        return BoundLogger(self._base, category)


# === Global instance ===
_logger = Logger()


def get_logger() -> Logger:
    return _logger


def configure_logger(min_level: LogLevel = LogLevel.INFO, use_colors: Optional[bool] = None):
    """Update the shared logger in place."""
    _logger.min_level = min_level
    _logger.use_colors = use_colors
