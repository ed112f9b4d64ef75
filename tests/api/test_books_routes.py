"""Tests for the development backend's /libros-digitales routes."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from digitalbook.api.routers.books import reset_book_repository, set_book_repository
from digitalbook.main import create_app
from digitalbook.persistence import Book, BookSaveError, BookSection, InMemoryBookRepository


@pytest.fixture
def backend_repo():
    repo = InMemoryBookRepository()
    set_book_repository(repo)
    yield repo
    reset_book_repository()


@pytest.fixture
def app(backend_repo):
    return create_app()


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as c:
        yield c


class TestGetBook:
    """GET /libros-digitales/building/{buildingId}."""

    @pytest.mark.asyncio
    async def test_missing_book_is_404(self, client):
        response = await client.get("/libros-digitales/building/B1")

        assert response.status_code == 404
        body = response.json()
        assert body["detail"]["error_code"] == "BOOK_NOT_FOUND"
        assert body["detail"]["building_id"] == "B1"
        assert body["message"] == "Digital book for building 'B1' not found"

    @pytest.mark.asyncio
    async def test_returns_camel_case_envelope(self, client, backend_repo):
        book = Book.create("B1")
        book.sections.append(BookSection.create("general_data", {"ownership": "Privada"}, True))
        await backend_repo.replace(book)

        response = await client.get("/libros-digitales/building/B1", params={"t": "1"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == book.book_id
        assert data["buildingId"] == "B1"
        assert "createdAt" in data
        assert data["sections"][0]["type"] == "general_data"
        assert data["sections"][0]["content"] == {"ownership": "Privada"}


class TestCreateBook:
    """POST /libros-digitales."""

    @pytest.mark.asyncio
    async def test_create(self, client, backend_repo):
        response = await client.post(
            "/libros-digitales", json={"buildingId": "B1", "source": "manual"},
        )

        assert response.status_code == 201
        assert response.json()["data"]["buildingId"] == "B1"
        assert backend_repo.count() == 1

    @pytest.mark.asyncio
    async def test_duplicate_is_conflict(self, client):
        await client.post("/libros-digitales", json={"buildingId": "B1"})
        response = await client.post("/libros-digitales", json={"buildingId": "B1"})

        assert response.status_code == 409
        assert response.json()["message"] == "El edificio ya tiene un libro digital"
        assert response.json()["detail"] == {
            "error_code": "BOOK_ALREADY_EXISTS",
            "message": "El edificio ya tiene un libro digital",
            "building_id": "B1",
        }

    @pytest.mark.asyncio
    async def test_missing_building_id_is_422(self, client):
        response = await client.post("/libros-digitales", json={})

        assert response.status_code == 422
        body = response.json()
        assert body["detail"]["error_code"] == "INVALID_BOOK_REQUEST"
        assert body["detail"]["fields"][0]["field"] == "buildingId"


class TestUpdateSection:
    """PUT /libros-digitales/{bookId}/sections/{sectionType}."""

    @pytest.mark.asyncio
    async def test_upsert_section(self, client):
        created = await client.post("/libros-digitales", json={"buildingId": "B1"})
        book_id = created.json()["data"]["id"]

        response = await client.put(
            f"/libros-digitales/{book_id}/sections/certificates_and_licenses",
            json={"content": {"energy_certificate": "CEE A"}, "complete": True},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["progress"] == 1
        assert data["status"] == "in_progress"
        assert data["sections"][0]["complete"] is True

    @pytest.mark.asyncio
    async def test_unknown_type_is_400(self, client):
        created = await client.post("/libros-digitales", json={"buildingId": "B1"})
        book_id = created.json()["data"]["id"]

        response = await client.put(
            f"/libros-digitales/{book_id}/sections/certificates",
            json={"content": {}, "complete": False},
        )

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error_code"] == "UNKNOWN_SECTION_TYPE"
        assert detail["book_id"] == book_id
        assert detail["section_type"] == "certificates"
        assert "annex_documents" in detail["valid_types"]

    @pytest.mark.asyncio
    async def test_unknown_book_is_404(self, client):
        response = await client.put(
            "/libros-digitales/nope/sections/general_data",
            json={"content": {}, "complete": False},
        )
        assert response.status_code == 404
        detail = response.json()["detail"]
        assert detail["error_code"] == "BOOK_NOT_FOUND"
        assert detail["book_id"] == "nope"
        assert detail["section_type"] == "general_data"


class TestProgressAndHealth:

    @pytest.mark.asyncio
    async def test_progress_without_book(self, client):
        response = await client.get("/libros-digitales/building/B1/progress")

        assert response.status_code == 200
        assert response.json()["data"]["percentage"] == 0
        assert response.json()["data"]["status"] == "not_started"

    @pytest.mark.asyncio
    async def test_progress_with_complete_section(self, client):
        created = await client.post("/libros-digitales", json={"buildingId": "B1"})
        book_id = created.json()["data"]["id"]
        await client.put(
            f"/libros-digitales/{book_id}/sections/general_data",
            json={"content": {}, "complete": True},
        )

        response = await client.get("/libros-digitales/building/B1/progress")

        assert response.json()["data"]["percentage"] == 13
        assert response.json()["data"]["completed_section_ids"] == ["general_data"]

    @pytest.mark.asyncio
    async def test_health(self, client):
        await client.post("/libros-digitales", json={"buildingId": "B1"})
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "books": 1}


class FailingBookRepository(InMemoryBookRepository):
    """Repository whose section writes fail the way a storage outage would."""

    async def upsert_section(self, book, section_type, content, complete):
        raise BookSaveError("storage offline")


class TestRepositoryFailures:
    """Repository errors raised inside a route keep the request's book context."""

    @pytest.mark.asyncio
    async def test_save_failure_without_status_is_502(self):
        repo = FailingBookRepository()
        book = await repo.create("B1")
        set_book_repository(repo)
        try:
            app = create_app()
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as c:
                response = await c.put(
                    f"/libros-digitales/{book.book_id}/sections/general_data",
                    json={"content": {"ownership": "X"}, "complete": True},
                )
        finally:
            reset_book_repository()

        assert response.status_code == 502
        assert response.json() == {
            "detail": {
                "error_code": "BOOK_SAVE_FAILED",
                "message": "storage offline",
                "book_id": book.book_id,
                "section_type": "general_data",
            },
            "message": "storage offline",
        }
