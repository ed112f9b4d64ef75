"""Persistence domain models for digital books."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4


class BookSource(str, Enum):
    """Origin of a digital book's content."""
    MANUAL = "manual"
    PDF = "pdf"


class BookStatus(str, Enum):
    """Book status values as reported by the backend."""
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


@dataclass
class BookSection:
    """
    One persisted section of a digital book.

    ``section_type`` is the canonical backend type; ``content`` is an opaque
    field-name -> value mapping owned by the backend.
    """
    section_id: str
    section_type: str
    content: Dict[str, Any] = field(default_factory=dict)
    complete: bool = False

    @classmethod
    def create(
        cls,
        section_type: str,
        content: Dict[str, Any],
        complete: bool = False,
    ) -> "BookSection":
        """Create a new section with generated ID."""
        return cls(
            section_id=str(uuid4()),
            section_type=section_type,
            content=content,
            complete=complete,
        )


@dataclass
class Book:
    """
    Domain model for a building's digital book ("Libro del Edificio").

    A book holds at most one section per canonical type. Sections are stored
    in backend order, which carries no meaning.
    """
    book_id: str
    building_id: str
    source: str = BookSource.MANUAL.value
    status: str = BookStatus.DRAFT.value
    progress: int = 0  # complete sections as counted by the backend
    sections: List[BookSection] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(
        cls,
        building_id: str,
        source: str = BookSource.MANUAL.value,
    ) -> "Book":
        """Create a new empty book with generated ID."""
        return cls(
            book_id=str(uuid4()),
            building_id=building_id,
            source=source,
        )

    def find_section(self, section_type: str) -> Optional[BookSection]:
        """Return the section of the given canonical type, if present."""
        for section in self.sections:
            if section.section_type == section_type:
                return section
        return None

    def find_section_by_id(self, section_id: str) -> Optional[BookSection]:
        """Return the section with the given backend record id, if present."""
        for section in self.sections:
            if section.section_id == section_id:
                return section
        return None

    def duplicate_section_types(self) -> List[str]:
        """Canonical types that appear more than once (should always be empty)."""
        seen = set()
        duplicates = []
        for section in self.sections:
            if section.section_type in seen and section.section_type not in duplicates:
                duplicates.append(section.section_type)
            seen.add(section.section_type)
        return duplicates
