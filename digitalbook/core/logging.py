"""
Structured logging configuration for the digital book.

Supports both human-readable (development) and JSON (staging/production) formats.
Book context passed through ``extra=`` (``building_id``, ``book_id``,
``section_type``) is kept together so every line about one book can be
filtered on the same keys.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Tuple

BOOK_CONTEXT_FIELDS = ("building_id", "book_id", "section_type")

# Attributes of a bare LogRecord plus the ones Formatter.format adds
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}


def split_extra(record: logging.LogRecord) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Return (book context, other extra fields) attached to ``record``."""
    book: Dict[str, Any] = {}
    other: Dict[str, Any] = {}
    for key, value in vars(record).items():
        if key in _RECORD_ATTRS or key.startswith("_"):
            continue
        if key in BOOK_CONTEXT_FIELDS:
            if value is not None:
                book[key] = value
        else:
            other[key] = value
    return book, other


class JSONFormatter(logging.Formatter):
    """
    One JSON object per line.

    Book context goes under ``"book"``; any other extra field (for example
    the client's ``duration_ms``) is a top-level key.
    """

    def format(self, record: logging.LogRecord) -> str:
        book, other = split_extra(record)
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if book:
            log_data["book"] = book
        log_data.update(other)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter for development; book context is appended in brackets."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        book, _ = split_extra(record)
        if not book:
            return line
        context = " ".join(f"{key}={book[key]}" for key in BOOK_CONTEXT_FIELDS if key in book)
        head, sep, tail = line.partition("\n")
        return f"{head} [{context}]{sep}{tail}"


def configure_logging(level: str = "INFO", format_type: str = "json") -> None:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: "json" for structured, "text" for human-readable
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if format_type.lower() == "json" else TextFormatter())
    root_logger.addHandler(handler)

    # The client logs its own request lines with book context
    for noisy in ("uvicorn.access", "httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
