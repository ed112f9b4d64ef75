"""Health check endpoint for the development backend."""

from fastapi import APIRouter, Depends, status

from digitalbook.api.routers.books import get_book_repository
from digitalbook.persistence import InMemoryBookRepository

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def liveness_check(repo: InMemoryBookRepository = Depends(get_book_repository)):
    """Confirms the app is running and reports how many books it holds."""
    return {"status": "healthy", "books": repo.count()}
