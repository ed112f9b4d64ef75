"""
Digital book progress projection.

Every view that shows book progress (overview badge, audit panel, hub)
derives it from the book snapshot it holds by calling ``project_progress``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional

from digitalbook.domain.catalog import TOTAL_SECTIONS
from digitalbook.domain.resolver import SectionIdentityResolver, default_resolver
from digitalbook.persistence.models import Book


class ProgressStatus(str, Enum):
    """Book-level progress label shown by the hub."""
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


@dataclass(frozen=True)
class BookProgress:
    """Completion metrics of a digital book."""
    completed_count: int
    total: int
    percentage: int
    status: ProgressStatus
    completed_section_ids: FrozenSet[str] = field(default_factory=frozenset)

    def to_dict(self) -> dict:
        return {
            "completed_count": self.completed_count,
            "total": self.total,
            "percentage": self.percentage,
            "status": self.status.value,
            "completed_section_ids": sorted(self.completed_section_ids),
        }


def completed_section_ids(
    book: Optional[Book],
    resolver: SectionIdentityResolver = default_resolver,
) -> FrozenSet[str]:
    """UI ids of the sections the book marks complete; unknown types are ignored."""
    if book is None:
        return frozenset()
    completed = set()
    for section in book.sections:
        if not section.complete:
            continue
        ui_id = resolver.to_ui_id(section.section_type)
        if ui_id is not None:
            completed.add(ui_id)
    return frozenset(completed)


def percentage_of(completed: int, total: int = TOTAL_SECTIONS) -> int:
    """Round-half-up percentage, clamped to [0, 100]."""
    if total <= 0:
        return 0
    completed = max(0, min(completed, total))
    return (completed * 200 + total) // (2 * total)


def project_progress(
    book: Optional[Book],
    resolver: SectionIdentityResolver = default_resolver,
) -> BookProgress:
    """
    Compute progress metrics from a book.

    A missing section record counts as not complete. ``book=None`` (no book
    yet) yields zero progress.
    """
    completed = completed_section_ids(book, resolver)
    count = len(completed)
    if count == 0:
        status = ProgressStatus.NOT_STARTED
    elif count >= TOTAL_SECTIONS:
        status = ProgressStatus.COMPLETE
    else:
        status = ProgressStatus.IN_PROGRESS
    return BookProgress(
        completed_count=count,
        total=TOTAL_SECTIONS,
        percentage=percentage_of(count),
        status=status,
        completed_section_ids=completed,
    )
