"""Persistence module for digital books."""

from digitalbook.persistence.models import (
    Book,
    BookSection,
    BookSource,
    BookStatus,
)
from digitalbook.persistence.repositories import (
    BookRepository,
    InMemoryBookRepository,
    BookRepositoryError,
    BookNotFoundError,
    BookAlreadyExistsError,
    BookFetchError,
    BookSaveError,
)

__all__ = [
    # Models
    "Book",
    "BookSection",
    "BookSource",
    "BookStatus",
    # Protocols
    "BookRepository",
    # In-memory implementations
    "InMemoryBookRepository",
    # Exceptions
    "BookRepositoryError",
    "BookNotFoundError",
    "BookAlreadyExistsError",
    "BookFetchError",
    "BookSaveError",
]
