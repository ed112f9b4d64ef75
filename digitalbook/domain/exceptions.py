"""Domain exceptions for the digital book core."""

from typing import List, Optional


class DigitalBookError(Exception):
    """Base class for digital book domain errors."""
    pass


class UnknownSectionError(DigitalBookError):
    """A section key matched neither the catalog nor the book (catalog defect)."""

    def __init__(self, key: str, known: Optional[List[str]] = None):
        self.key = key
        self.known = known or []
        message = f"Unknown digital book section '{key}'"
        if self.known:
            message += f". Known sections: {', '.join(self.known)}"
        super().__init__(message)


class BookIntegrityError(DigitalBookError):
    """The backend returned a book that breaks the one-section-per-type rule."""

    def __init__(self, book_id: str, duplicate_types: List[str]):
        self.book_id = book_id
        self.duplicate_types = duplicate_types
        super().__init__(
            f"Digital book '{book_id}' has duplicate sections for: "
            f"{', '.join(duplicate_types)}"
        )


class SectionSaveError(DigitalBookError):
    """Persisting a section failed; the caller may retry."""

    def __init__(self, section_id: str, message: str, complete: bool = False):
        self.section_id = section_id
        self.message = message
        self.complete = complete
        super().__init__(f"Could not save section '{section_id}': {message}")


class InvalidImportError(DigitalBookError):
    """An uploaded file is not acceptable for PDF import."""
    pass
