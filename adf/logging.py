"""
Logging for Account Data Forms.

Everything logs under the ``adf`` namespace. Console output goes to stderr
so JSON, XDR and URIs printed on stdout stay pipeable; account addresses
are abbreviated there and kept whole in the log file.
"""

import logging
import os
import re
import sys
from typing import Optional, TextIO

RESET = "\033[0m"

LEVEL_COLORS = {
    logging.DEBUG: "\033[2m\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1m\033[41m\033[37m",
}

ACCOUNT_ADDRESS = re.compile(r"\b(G[A-Z2-7]{3})[A-Z2-7]{48}([A-Z2-7]{4})\b")


def shorten_addresses(text: str) -> str:
    """Abbreviate Stellar account addresses to ``GABC...WXYZ``."""
    return ACCOUNT_ADDRESS.sub(r"\1...\2", text)


def use_colors_for(stream: TextIO) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class ConsoleFormatter(logging.Formatter):
    """Formatter for terminal output: colored level names, short addresses."""

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        use_colors: bool = True,
        shorten_accounts: bool = True,
    ):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors
        self.shorten_accounts = shorten_accounts

    def formatMessage(self, record: logging.LogRecord) -> str:
        # The record is shared with the file handler; restore the level name.
        if self.use_colors and record.levelno in LEVEL_COLORS:
            original = record.levelname
            record.levelname = f"{LEVEL_COLORS[record.levelno]}{original}{RESET}"
            try:
                text = super().formatMessage(record)
            finally:
                record.levelname = original
        else:
            text = super().formatMessage(record)

        if self.shorten_accounts:
            text = shorten_addresses(text)
        return text


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure logging for the ``adf`` namespace.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for log output

    Example:
        >>> setup_logging(level="DEBUG")
        >>> logger = get_logger(__name__)
        >>> logger.info("Loading account data")
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger("adf")
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    colors = use_colors_for(sys.stderr)

    # Timestamps only at DEBUG
    if numeric_level <= logging.DEBUG:
        console_formatter = ConsoleFormatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt="%H:%M:%S", use_colors=colors
        )
    else:
        console_formatter = ConsoleFormatter("[%(levelname)s] %(message)s", use_colors=colors)

    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s"
        ))
        root_logger.addHandler(file_handler)

    # Suppress noisy third-party loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("stellar_sdk").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger under the ``adf`` namespace
    """
    if not name.startswith("adf"):
        name = f"adf.{name}"

    return logging.getLogger(name)


def format_exception_summary(
    error: BaseException,
    *,
    max_length: int = 180,
) -> str:
    """
    Build a concise one-line exception summary for user-facing error messages.

    Args:
        error: Exception instance.
        max_length: Maximum output length.

    Returns:
        Single-line summary (trimmed when needed).
    """
    exception_name = error.__class__.__name__
    detail = " ".join(str(error or "").split())
    summary = exception_name if not detail else f"{exception_name}: {detail}"
    if max_length > 3 and len(summary) > max_length:
        return summary[: max_length - 3].rstrip() + "..."
    return summary


def configure_logging_from_args(verbose: bool = False, log_level: Optional[str] = None,
                                log_file: Optional[str] = None) -> None:
    """
    Configure logging based on CLI arguments.

    ``--log-level`` wins over ``--verbose``, which wins over ``ADF_LOG_LEVEL``.
    Without any of them only warnings and errors are shown.
    """
    if log_level:
        level = log_level.upper()
    elif verbose:
        level = "DEBUG"
    else:
        level = (os.environ.get("ADF_LOG_LEVEL") or "WARNING").upper()

    setup_logging(level=level, log_file=log_file)
