from __future__ import annotations
import logging
import os

# Simple ANSI color codes; NO_COLOR always wins
COLORS = {
    "RESET": "\033[0m",
    "GRAY": "\033[90m",
    "RED": "\033[91m",
    "YELLOW": "\033[93m",
    "MAGENTA": "\033[95m",
    "CYAN": "\033[96m",
}

LEVEL_COLOR = {
    logging.DEBUG: "GRAY",
    logging.INFO: "CYAN",
    logging.WARNING: "YELLOW",
    logging.ERROR: "RED",
    logging.CRITICAL: "MAGENTA",
}

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
PACKAGE_LOGGER = "gee_connect"


def color_enabled(requested: bool = True) -> bool:
    return requested and os.getenv("NO_COLOR") is None


class ColorFormatter(logging.Formatter):
    def __init__(self, fmt: str = LOG_FORMAT, use_color: bool = True) -> None:
        super().__init__(fmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        msg = super().format(record)
        if not self.use_color:
            return msg
        color = COLORS.get(LEVEL_COLOR.get(record.levelno, "RESET"), "")
        reset = COLORS["RESET"]
        return f"{color}{msg}{reset}"


def setup_logging(level: str | int = logging.INFO, color: bool = True) -> logging.Logger:
    """Attach a single colored stream handler to the package logger."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)
    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and isinstance(
            handler.formatter, ColorFormatter
        ):
            handler.setLevel(level)
            return logger
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(ColorFormatter(use_color=color_enabled(color)))
    logger.addHandler(handler)
    return logger
