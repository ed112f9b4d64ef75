"""
Section identity resolution.

A section is addressed three ways: the UI catalog id used by the wizard, the
canonical type the backend stores, and the record id the backend assigns.
The resolver is a bidirectional table built once from the closed catalog.
"""

from typing import Dict, Iterable, Optional

from digitalbook.domain.catalog import SECTION_CATALOG, SectionDefinition
from digitalbook.domain.exceptions import UnknownSectionError
from digitalbook.persistence.models import Book


class SectionIdentityResolver:
    """Maps UI catalog ids to canonical types and back."""

    def __init__(self, catalog: Iterable[SectionDefinition] = SECTION_CATALOG):
        self._to_type: Dict[str, str] = {}
        self._to_ui: Dict[str, str] = {}
        for section in catalog:
            if section.id in self._to_type:
                raise ValueError(f"Duplicate section id in catalog: {section.id}")
            if section.canonical_type in self._to_ui:
                raise ValueError(
                    f"Canonical type mapped twice in catalog: {section.canonical_type}"
                )
            self._to_type[section.id] = section.canonical_type
            self._to_ui[section.canonical_type] = section.id

    @property
    def ui_ids(self):
        return list(self._to_type)

    @property
    def canonical_types(self):
        return list(self._to_ui)

    def to_canonical_type(self, ui_id: str) -> str:
        """
        Translate a UI catalog id into the backend's canonical type.

        Raises:
            UnknownSectionError: If ``ui_id`` is not in the catalog
        """
        section_type = self._to_type.get(ui_id)
        if section_type is None:
            raise UnknownSectionError(ui_id, self.ui_ids)
        return section_type

    def to_ui_id(self, section_type: str) -> Optional[str]:
        """Translate a canonical type into a UI id; None for unrecognized types."""
        return self._to_ui.get(section_type)

    def resolve_type(self, key: str, book: Optional[Book] = None) -> str:
        """
        Resolve any section key to a canonical type.

        Accepts, in order: a UI catalog id, a canonical type, or a backend
        section record id (only when ``book`` is given).

        Raises:
            UnknownSectionError: If the key matches none of the above
        """
        if key in self._to_type:
            return self._to_type[key]
        if key in self._to_ui:
            return key
        if book is not None:
            section = book.find_section_by_id(key)
            if section is not None and section.section_type in self._to_ui:
                return section.section_type
        raise UnknownSectionError(key, self.ui_ids)


# Shared instance for the built-in catalog
default_resolver = SectionIdentityResolver()
