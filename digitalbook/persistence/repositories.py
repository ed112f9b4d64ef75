"""Book repository protocol and in-memory implementation."""

import copy
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from digitalbook.persistence.models import (
    Book,
    BookSection,
    BookSource,
    BookStatus,
)


class BookRepositoryError(Exception):
    """Base class for failures reported by a book repository."""

    def __init__(self, message: str, status_code: int = 0):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class BookNotFoundError(BookRepositoryError):
    """No book exists yet for the building (or under the given book id)."""

    def __init__(self, building_id: Optional[str] = None, book_id: Optional[str] = None):
        self.building_id = building_id
        self.book_id = book_id
        if book_id is not None:
            message = f"Digital book '{book_id}' not found"
        else:
            message = f"Digital book for building '{building_id}' not found"
        super().__init__(message, 404)


class BookAlreadyExistsError(BookRepositoryError):
    """The building already has a book (create conflict)."""

    def __init__(self, building_id: str):
        self.building_id = building_id
        super().__init__(f"Building '{building_id}' already has a digital book", 409)


class BookFetchError(BookRepositoryError):
    """Reading a book failed for a reason other than not-found."""
    pass


class BookSaveError(BookRepositoryError):
    """Creating a book or writing a section failed."""
    pass


@runtime_checkable
class BookRepository(Protocol):
    """Protocol for digital book storage."""

    async def get_by_building(self, building_id: str) -> Book:
        """Get the book of a building. Raises BookNotFoundError if absent."""
        ...

    async def create(self, building_id: str, source: str = BookSource.MANUAL.value) -> Book:
        """Create an empty book. Raises BookAlreadyExistsError on conflict."""
        ...

    async def upsert_section(
        self,
        book: Book,
        section_type: str,
        content: Dict[str, Any],
        complete: bool,
    ) -> Book:
        """Create or update the section of ``section_type``; return the full book."""
        ...


class InMemoryBookRepository:
    """In-memory book repository for testing and the development backend."""

    def __init__(self, expected_sections: int = 8):
        self._books: Dict[str, Book] = {}
        self._by_building: Dict[str, str] = {}  # building_id -> book_id
        self._expected_sections = expected_sections

    async def get_by_building(self, building_id: str) -> Book:
        """Get the book of a building."""
        book_id = self._by_building.get(building_id)
        if book_id is None:
            raise BookNotFoundError(building_id)
        return copy.deepcopy(self._books[book_id])

    async def get(self, book_id: str) -> Book:
        """Get a book by its ID."""
        book = self._books.get(book_id)
        if book is None:
            raise BookNotFoundError(book_id=book_id)
        return copy.deepcopy(book)

    async def create(self, building_id: str, source: str = BookSource.MANUAL.value) -> Book:
        """Create an empty book for a building."""
        if building_id in self._by_building:
            raise BookAlreadyExistsError(building_id)

        book = Book.create(building_id=building_id, source=source)
        self._books[book.book_id] = book
        self._by_building[building_id] = book.book_id
        return copy.deepcopy(book)

    async def upsert_section(
        self,
        book: Book,
        section_type: str,
        content: Dict[str, Any],
        complete: bool,
    ) -> Book:
        """Create or update a section by canonical type."""
        stored = self._books.get(book.book_id)
        if stored is None:
            raise BookSaveError(f"Digital book '{book.book_id}' not found", 404)

        section = stored.find_section(section_type)
        if section is None:
            stored.sections.append(
                BookSection.create(section_type, copy.deepcopy(content), complete)
            )
        else:
            section.content = copy.deepcopy(content)
            section.complete = complete

        self._refresh_status(stored)
        return copy.deepcopy(stored)

    async def replace(self, book: Book) -> Book:
        """Store a whole book as given (used by imports and fixtures)."""
        self._books[book.book_id] = copy.deepcopy(book)
        self._by_building[book.building_id] = book.book_id
        return copy.deepcopy(book)

    def _refresh_status(self, book: Book) -> None:
        book.progress = sum(1 for s in book.sections if s.complete)
        if book.progress == 0:
            book.status = BookStatus.DRAFT.value
        elif book.progress >= self._expected_sections:
            book.status = BookStatus.COMPLETE.value
        else:
            book.status = BookStatus.IN_PROGRESS.value
        book.updated_at = datetime.now(timezone.utc)

    def count(self) -> int:
        """Number of stored books."""
        return len(self._books)

    def clear(self) -> None:
        """Clear all books (for testing)."""
        self._books.clear()
        self._by_building.clear()
