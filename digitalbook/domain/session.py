"""
Book session state.

Holds the in-memory snapshot the wizard edits: the book as last returned by
the backend, per-section form content, the completed-section projection and
the files attached for display. One session edits one building's book.
"""

import copy
import logging
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from digitalbook.domain.attachments import AttachedFile
from digitalbook.domain.catalog import TOTAL_SECTIONS
from digitalbook.domain.exceptions import BookIntegrityError, SectionSaveError
from digitalbook.domain.progress import completed_section_ids
from digitalbook.domain.resolver import SectionIdentityResolver, default_resolver
from digitalbook.persistence.models import Book, BookSource
from digitalbook.persistence.repositories import (
    BookAlreadyExistsError,
    BookNotFoundError,
    BookRepository,
    BookRepositoryError,
)

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    """Lifecycle of a book session."""
    LOADING = "loading"
    READY = "ready"
    UNAVAILABLE = "unavailable"


class BookSession:
    """In-memory state of one building's digital book."""

    def __init__(
        self,
        repository: BookRepository,
        resolver: SectionIdentityResolver = default_resolver,
    ):
        self._repository = repository
        self._resolver = resolver
        self._reset()

    def _reset(self) -> None:
        self.building_id: Optional[str] = None
        self.book: Optional[Book] = None
        self.status = SessionStatus.LOADING
        self.unavailable_reason: Optional[str] = None
        self.section_form_data: Dict[str, Dict[str, Any]] = {}
        self.attached_documents: Dict[str, List[AttachedFile]] = {}
        self._completed: FrozenSet[str] = frozenset()
        self._step_index = 0

    # =========================================================================
    # STATE ACCESS
    # =========================================================================

    @property
    def completed_section_ids(self) -> FrozenSet[str]:
        """UI ids of the sections the current book marks complete."""
        return self._completed

    @property
    def current_step_index(self) -> int:
        return self._step_index

    @current_step_index.setter
    def current_step_index(self, index: int) -> None:
        if not 0 <= index < TOTAL_SECTIONS:
            raise IndexError(f"Step index {index} outside 0..{TOTAL_SECTIONS - 1}")
        self._step_index = index

    @property
    def is_ready(self) -> bool:
        return self.status == SessionStatus.READY

    def content_for(self, ui_id: str) -> Dict[str, Any]:
        """
        Form content of a section, created empty on first access.

        The same mapping is stored under the UI id and the canonical type so
        lookups by either key see the same edits.
        """
        content = self.section_form_data.get(ui_id)
        if content is None:
            section_type = self._resolver.to_canonical_type(ui_id)
            content = self.section_form_data.get(section_type)
            if content is None:
                content = {}
            self.section_form_data[ui_id] = content
            self.section_form_data[section_type] = content
        return content

    def set_field(self, ui_id: str, field_name: str, value: Any) -> None:
        self.content_for(ui_id)[field_name] = value

    def set_documents(self, ui_id: str, files: List[AttachedFile]) -> None:
        self._resolver.to_canonical_type(ui_id)
        self.attached_documents[ui_id] = list(files)

    # =========================================================================
    # INITIALIZATION
    # =========================================================================

    async def initialize(
        self,
        building_id: str,
        source: str = BookSource.MANUAL.value,
    ) -> SessionStatus:
        """
        Load the building's book, creating it if it does not exist yet.

        Any failure other than not-found leaves the session UNAVAILABLE; no
        placeholder book is created because saves would have no target.
        """
        self._reset()
        self.building_id = building_id
        log_extra = {"building_id": building_id}

        try:
            book = await self._get_or_create(building_id, source)
            self._apply_book(book)
        except (BookRepositoryError, BookIntegrityError) as e:
            self.status = SessionStatus.UNAVAILABLE
            self.unavailable_reason = str(e)
            logger.error("Digital book unavailable: %s", e, extra=log_extra)
            return self.status

        self.status = SessionStatus.READY
        logger.info(
            "Digital book %s loaded (%d sections, %d complete)",
            book.book_id, len(book.sections), len(self._completed),
            extra=log_extra,
        )
        return self.status

    async def _get_or_create(self, building_id: str, source: str) -> Book:
        try:
            return await self._repository.get_by_building(building_id)
        except BookNotFoundError:
            logger.info("No digital book for building %s, creating one", building_id)

        try:
            return await self._repository.create(building_id, source)
        except BookAlreadyExistsError:
            # Another session created it between our fetch and create
            logger.info("Digital book for building %s already exists, fetching it", building_id)
            return await self._repository.get_by_building(building_id)

    # =========================================================================
    # PROJECTION
    # =========================================================================

    def _apply_book(self, book: Book, reseed: Optional[Iterable[str]] = None) -> None:
        """
        Adopt ``book`` as the authoritative snapshot.

        With ``reseed`` None every section's form content is seeded from the
        book; otherwise only the listed canonical types are refreshed and
        other in-progress edits are kept.

        Raises:
            BookIntegrityError: If the book holds two sections of one type
        """
        duplicates = book.duplicate_section_types()
        if duplicates:
            raise BookIntegrityError(book.book_id, duplicates)

        if reseed is None:
            self.section_form_data = {}
            types = None
        else:
            types = set(reseed)

        for section in book.sections:
            if types is not None and section.section_type not in types:
                continue
            content = copy.deepcopy(section.content or {})
            self.section_form_data[section.section_type] = content
            self.section_form_data[section.section_id] = content
            ui_id = self._resolver.to_ui_id(section.section_type)
            if ui_id is not None:
                self.section_form_data[ui_id] = content

        self.book = book
        self._completed = completed_section_ids(book, self._resolver)

    # =========================================================================
    # SAVING
    # =========================================================================

    async def save_section(self, ui_id: str, complete: bool) -> Book:
        """
        Upsert one section with its current form content.

        On success the returned book replaces the in-memory one. On failure
        form content is left untouched so the user can retry.

        Raises:
            UnknownSectionError: If ``ui_id`` is not in the catalog
            SectionSaveError: If there is no book or the backend rejects the write
        """
        section_type = self._resolver.to_canonical_type(ui_id)
        if self.book is None or self.status != SessionStatus.READY:
            raise SectionSaveError(ui_id, "digital book is not loaded", complete)

        content = copy.deepcopy(self.content_for(ui_id))
        log_extra = {
            "building_id": self.building_id,
            "book_id": self.book.book_id,
            "section_type": section_type,
        }

        try:
            updated = await self._repository.upsert_section(
                self.book, section_type, content, complete
            )
        except BookRepositoryError as e:
            logger.warning("Saving section %s failed: %s", ui_id, e, extra=log_extra)
            raise SectionSaveError(ui_id, e.message, complete) from e

        self._apply_book(updated, reseed=[section_type])
        logger.info(
            "Saved section %s (complete=%s)", ui_id, complete, extra=log_extra,
        )
        return updated
