"""Logging configuration with secret redaction.

Two outputs are configured: the root logger for diagnostics, and the listener
logger that source requests write exclusion lines to. Listener lines are
printed bare so they read like discovery output rather than log records.
"""

import logging
import re
from typing import ClassVar, TextIO

from pr_filter.request import LISTENER_LOGGER

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
JSON_FORMAT = (
    '{"time": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "message": "%(message)s"}'
)
LISTENER_FORMAT = "%(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Library loggers that are too chatty at INFO
QUIET_LOGGERS = ("httpx", "httpcore")


class SecretRedactingFilter(logging.Filter):
    """Filter that redacts GitHub credentials from log messages."""

    SECRET_PATTERNS: ClassVar[list[tuple[re.Pattern[str], str]]] = [
        (re.compile(r"gh[pousr]_[a-zA-Z0-9]{20,}"), "[REDACTED_GH_TOKEN]"),
        (re.compile(r"github_pat_[a-zA-Z0-9_]+"), "[REDACTED_GH_PAT]"),
        (re.compile(r"(Authorization:\s*)[^\s,\]]+(\s+[^\s,\]]+)?", re.IGNORECASE), r"\1[REDACTED]"),
        (re.compile(r"(token[=:]\s*)[^\s,\]]+", re.IGNORECASE), r"\1[REDACTED]"),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = self._redact(str(record.msg))
        if record.args:
            record.args = tuple(
                self._redact(arg) if isinstance(arg, str) else arg for arg in record.args
            )
        return True

    def _redact(self, text: str) -> str:
        for pattern, replacement in self.SECRET_PATTERNS:
            text = pattern.sub(replacement, text)
        return text


class ListenerHandler(logging.StreamHandler):
    """Stream handler printing listener lines without a prefix."""

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__(stream)
        self.setFormatter(logging.Formatter(LISTENER_FORMAT))
        self.addFilter(SecretRedactingFilter())


def add_redaction(handler: logging.Handler) -> None:
    """Attach a redaction filter unless the handler already has one."""
    if not any(isinstance(f, SecretRedactingFilter) for f in handler.filters):
        handler.addFilter(SecretRedactingFilter())


def configure_listener() -> logging.Logger:
    """Set up the listener logger and return it.

    Handlers installed by others (test harnesses, embedding applications) are
    left alone. Exactly one ListenerHandler is kept.
    """
    listener = logging.getLogger(LISTENER_LOGGER)
    if not any(isinstance(h, ListenerHandler) for h in listener.handlers):
        listener.addHandler(ListenerHandler())
    listener.setLevel(logging.INFO)
    listener.propagate = False
    return listener


def setup_logging(
    verbose: bool = False,
    json_format: bool = False,
) -> None:
    """Configure logging for the application.

    Safe to call more than once.

    Args:
        verbose: Enable debug level logging.
        json_format: Use JSON format for logs.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=JSON_FORMAT if json_format else TEXT_FORMAT,
        datefmt=DATE_FORMAT,
    )
    for handler in logging.getLogger().handlers:
        add_redaction(handler)

    configure_listener()

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
