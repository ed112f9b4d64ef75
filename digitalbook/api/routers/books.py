"""
Digital book endpoints of the development backend.

Repository failures are not caught here: ``repository_error_handler`` turns
them into responses carrying the route's building/book/section context.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, status

from digitalbook.api.exceptions import unknown_section_type
from digitalbook.api.schemas import BookPayload, CreateBookRequest, UpdateSectionRequest
from digitalbook.domain.progress import project_progress
from digitalbook.domain.resolver import default_resolver
from digitalbook.persistence import Book, BookNotFoundError, InMemoryBookRepository


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/libros-digitales", tags=["digital-books"])


# Module-level repository for dependency injection
_book_repo: Optional[InMemoryBookRepository] = None


def get_book_repository() -> InMemoryBookRepository:
    """Get book repository instance."""
    global _book_repo
    if _book_repo is None:
        _book_repo = InMemoryBookRepository()
    return _book_repo


def set_book_repository(repo: InMemoryBookRepository) -> None:
    """Set book repository (for testing/configuration)."""
    global _book_repo
    _book_repo = repo


def reset_book_repository() -> None:
    """Reset to default repository (for testing)."""
    global _book_repo
    _book_repo = None


def _envelope(book: Book) -> Dict[str, Any]:
    return {"data": BookPayload.from_domain(book).model_dump(by_alias=True, mode="json")}


@router.get("/building/{building_id}")
async def get_book_by_building(
    building_id: str,
    repo: InMemoryBookRepository = Depends(get_book_repository),
) -> Dict[str, Any]:
    """Get the digital book of a building (404 until one is created)."""
    return _envelope(await repo.get_by_building(building_id))


@router.get("/building/{building_id}/progress")
async def get_book_progress(
    building_id: str,
    repo: InMemoryBookRepository = Depends(get_book_repository),
) -> Dict[str, Any]:
    """Completion metrics of a building's book (zero when it has none yet)."""
    try:
        book = await repo.get_by_building(building_id)
    except BookNotFoundError:
        book = None
    return {"data": project_progress(book).to_dict()}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_book(
    request: CreateBookRequest,
    repo: InMemoryBookRepository = Depends(get_book_repository),
) -> Dict[str, Any]:
    """Create an empty digital book for a building (409 if it has one)."""
    book = await repo.create(request.building_id, request.source)
    logger.info("Created digital book %s for building %s", book.book_id, book.building_id)
    return _envelope(book)


@router.put("/{book_id}/sections/{section_type}")
async def update_section(
    book_id: str,
    section_type: str,
    request: UpdateSectionRequest,
    repo: InMemoryBookRepository = Depends(get_book_repository),
) -> Dict[str, Any]:
    """Create or update one section of a book by canonical type."""
    if section_type not in default_resolver.canonical_types:
        raise unknown_section_type(section_type, book_id, default_resolver.canonical_types)

    book = await repo.get(book_id)
    updated = await repo.upsert_section(book, section_type, request.content, request.complete)
    return _envelope(updated)
