"""
Error responses of the development backend.

Every failure is answered as ``{"detail": {...}, "message": ...}`` where
``detail`` names the error code and the book context (building, book,
section type) the request was about. ``message`` is the string the
HTTP client reads back.
"""

from typing import Any, Dict, List, Optional

from digitalbook.persistence.repositories import (
    BookAlreadyExistsError,
    BookNotFoundError,
    BookRepositoryError,
    BookSaveError,
)

# Wording the production backend uses for a duplicate create
ALREADY_HAS_BOOK_MESSAGE = "El edificio ya tiene un libro digital"


class BookAPIError(Exception):
    """A book request that cannot be served."""

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        building_id: Optional[str] = None,
        book_id: Optional[str] = None,
        section_type: Optional[str] = None,
        valid_types: Optional[List[str]] = None,
    ):
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.building_id = building_id
        self.book_id = book_id
        self.section_type = section_type
        self.valid_types = valid_types
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        detail: Dict[str, Any] = {"error_code": self.error_code, "message": self.message}
        for key in ("building_id", "book_id", "section_type", "valid_types"):
            value = getattr(self, key)
            if value is not None:
                detail[key] = value
        return detail


def unknown_section_type(section_type: str, book_id: str, valid_types: List[str]) -> BookAPIError:
    return BookAPIError(
        400,
        "UNKNOWN_SECTION_TYPE",
        f"Unknown section type '{section_type}'",
        book_id=book_id,
        section_type=section_type,
        valid_types=valid_types,
    )


def from_repository_error(exc: BookRepositoryError, **context: Any) -> BookAPIError:
    """
    Translate a repository failure into a response.

    The repository's own ``status_code`` is kept when it is an HTTP error
    status; failures without one (transport errors) become 502.
    """
    if isinstance(exc, BookNotFoundError):
        context.setdefault("building_id", exc.building_id)
        context.setdefault("book_id", exc.book_id)
        return BookAPIError(404, "BOOK_NOT_FOUND", exc.message, **context)
    if isinstance(exc, BookAlreadyExistsError):
        context.setdefault("building_id", exc.building_id)
        return BookAPIError(409, "BOOK_ALREADY_EXISTS", ALREADY_HAS_BOOK_MESSAGE, **context)

    status_code = exc.status_code if exc.status_code >= 400 else 502
    error_code = "BOOK_SAVE_FAILED" if isinstance(exc, BookSaveError) else "BOOK_FETCH_FAILED"
    return BookAPIError(status_code, error_code, exc.message, **context)
