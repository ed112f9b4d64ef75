"""Core infrastructure: logging setup shared across modules."""

from digitalbook.core.logging import JSONFormatter, TextFormatter, configure_logging

__all__ = [
    "JSONFormatter",
    "TextFormatter",
    "configure_logging",
]
