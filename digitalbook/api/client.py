"""HTTP implementation of the book repository over the backend REST API."""

import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

import httpx
from pydantic import ValidationError as PydanticValidationError

from digitalbook.api.schemas import (
    BookEnvelope,
    CreateBookRequest,
    PdfImportMetadata,
    PdfImportResponse,
    UpdateSectionRequest,
)
from digitalbook.domain.exceptions import InvalidImportError
from digitalbook.persistence.models import Book, BookSource
from digitalbook.persistence.repositories import (
    BookAlreadyExistsError,
    BookFetchError,
    BookNotFoundError,
    BookRepositoryError,
    BookSaveError,
)
from digitalbook.settings import Settings

logger = logging.getLogger(__name__)

# The backend answers a duplicate create with 409 or, on older deployments,
# with a 400 whose message says the building already has a book.
_ALREADY_EXISTS = re.compile(r"ya tiene un libro digital|ya existe|already exists", re.IGNORECASE)
_NOT_FOUND = re.compile(r"no encontrado|not found", re.IGNORECASE)

PDF_MIME_TYPE = "application/pdf"


@dataclass
class PdfImportResult:
    """Book produced by a PDF import plus upload metadata."""
    book: Book
    message: str
    metadata: Optional[PdfImportMetadata] = None


class HttpBookRepository:
    """Digital book API client."""

    BASE_PATH = "/libros-digitales"

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 25.0,
        pdf_max_size_mb: int = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Backend root URL (without the /libros-digitales path)
            token: Optional bearer token
            timeout: Request timeout in seconds
            pdf_max_size_mb: Largest PDF accepted by import_pdf
            transport: Optional httpx transport (tests, ASGI apps)
        """
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._pdf_max_size_mb = pdf_max_size_mb
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "HttpBookRepository":
        return cls(
            base_url=settings.api_base_url,
            token=settings.api_token or None,
            timeout=settings.request_timeout_seconds,
            pdf_max_size_mb=settings.pdf_max_size_mb,
            transport=transport,
        )

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    def _headers(self, json_body: bool = True) -> Dict[str, str]:
        headers = {"Cache-Control": "no-store", "Accept": "application/json"}
        if json_body:
            headers["Content-Type"] = "application/json"
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        error_cls: Type[BookRepositoryError],
        **kwargs,
    ) -> httpx.Response:
        json_body = "files" not in kwargs
        start_time = time.perf_counter()
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method, path, headers=self._headers(json_body), **kwargs
                )
        except httpx.TimeoutException as e:
            raise error_cls(f"Request timed out: {e}") from e
        except httpx.RequestError as e:
            raise error_cls(f"Could not reach the digital book service: {e}") from e

        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            "%s %s -> %d", method, path, response.status_code,
            extra={"duration_ms": round(latency_ms, 1)},
        )
        return response

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json() if response.content else {}
        except ValueError:
            body = {}
        if isinstance(body, dict):
            message = body.get("message") or body.get("error") or body.get("detail")
            if isinstance(message, dict):
                message = message.get("message")
            if message:
                return str(message)
        return response.text or response.reason_phrase or "Request failed"

    @staticmethod
    def _parse_book(response: httpx.Response, error_cls: Type[BookRepositoryError]) -> Optional[Book]:
        try:
            envelope = BookEnvelope.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            raise error_cls(f"Malformed digital book response: {e}", response.status_code) from e
        if envelope.data is None:
            return None
        return envelope.data.to_domain()

    # =========================================================================
    # REPOSITORY OPERATIONS
    # =========================================================================

    async def get_by_building(self, building_id: str) -> Book:
        """GET /libros-digitales/building/{buildingId}."""
        response = await self._request(
            "GET",
            f"{self.BASE_PATH}/building/{building_id}",
            BookFetchError,
            params={"t": str(int(time.time() * 1000))},
        )
        if response.status_code == 404:
            raise BookNotFoundError(building_id)
        if response.status_code >= 400:
            message = self._error_message(response)
            if _NOT_FOUND.search(message):
                raise BookNotFoundError(building_id)
            raise BookFetchError(message, response.status_code)

        book = self._parse_book(response, BookFetchError)
        if book is None:
            raise BookNotFoundError(building_id)
        return book

    async def create(self, building_id: str, source: str = BookSource.MANUAL.value) -> Book:
        """POST /libros-digitales."""
        body = CreateBookRequest(building_id=building_id, source=source)
        response = await self._request(
            "POST",
            self.BASE_PATH,
            BookSaveError,
            json=body.model_dump(by_alias=True, mode="json"),
        )
        if response.status_code >= 400:
            message = self._error_message(response)
            if response.status_code == 409 or _ALREADY_EXISTS.search(message):
                raise BookAlreadyExistsError(building_id)
            raise BookSaveError(message, response.status_code)

        book = self._parse_book(response, BookSaveError)
        if book is None:
            raise BookSaveError("Backend returned no book after create", response.status_code)
        logger.info("Created digital book %s for building %s", book.book_id, building_id)
        return book

    async def upsert_section(
        self,
        book: Book,
        section_type: str,
        content: Dict[str, Any],
        complete: bool,
    ) -> Book:
        """PUT /libros-digitales/{bookId}/sections/{sectionType}."""
        body = UpdateSectionRequest(content=content, complete=complete)
        response = await self._request(
            "PUT",
            f"{self.BASE_PATH}/{book.book_id}/sections/{section_type}",
            BookSaveError,
            json=body.model_dump(mode="json"),
        )
        if response.status_code >= 400:
            raise BookSaveError(self._error_message(response), response.status_code)

        updated = self._parse_book(response, BookSaveError)
        if updated is None:
            raise BookSaveError("Backend returned no book after section update", response.status_code)
        return updated

    async def import_pdf(
        self,
        building_id: str,
        file_name: str,
        data: bytes,
        mime_type: str = PDF_MIME_TYPE,
    ) -> PdfImportResult:
        """
        POST /libros-digitales/upload-ai.

        Uploads a PDF so the backend extracts the book sections from it.

        Raises:
            InvalidImportError: If the file is not a PDF or is too large
            BookSaveError: If the backend rejects or fails the import
        """
        if mime_type != PDF_MIME_TYPE:
            raise InvalidImportError(f"Only PDF files can be imported, got {mime_type}")
        if len(data) > self._pdf_max_size_mb * 1024 * 1024:
            raise InvalidImportError(
                f"PDF exceeds the {self._pdf_max_size_mb}MB import limit"
            )

        response = await self._request(
            "POST",
            f"{self.BASE_PATH}/upload-ai",
            BookSaveError,
            files={"document": (file_name, data, mime_type)},
            data={"buildingId": building_id},
        )
        if response.status_code >= 400:
            raise BookSaveError(self._error_message(response), response.status_code)

        try:
            parsed = PdfImportResponse.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            raise BookSaveError(f"Malformed import response: {e}", response.status_code) from e

        logger.info(
            "Imported PDF %s for building %s", file_name, building_id,
            extra={"building_id": building_id},
        )
        return PdfImportResult(
            book=parsed.data.to_domain(),
            message=parsed.message,
            metadata=parsed.metadata,
        )
