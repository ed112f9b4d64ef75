"""Wire schemas of the digital book REST contract (camelCase JSON)."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from digitalbook.persistence.models import Book, BookSection, BookSource, BookStatus


class SectionPayload(BaseModel):
    """A section as the backend sends it."""

    id: str = Field(..., description="Backend-assigned section id")
    type: str = Field(..., description="Canonical section type")
    complete: bool = False
    content: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"populate_by_name": True}


class BookPayload(BaseModel):
    """A digital book as the backend sends it."""

    id: str
    building_id: str = Field(..., alias="buildingId")
    source: str = BookSource.MANUAL.value
    status: str = BookStatus.DRAFT.value
    progress: int = 0
    sections: List[SectionPayload] = Field(default_factory=list)
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = {"populate_by_name": True}

    def to_domain(self) -> Book:
        now = datetime.now(timezone.utc)
        return Book(
            book_id=self.id,
            building_id=self.building_id,
            source=self.source,
            status=self.status,
            progress=self.progress,
            sections=[
                BookSection(
                    section_id=s.id,
                    section_type=s.type,
                    content=dict(s.content),
                    complete=s.complete,
                )
                for s in self.sections
            ],
            created_at=self.created_at or now,
            updated_at=self.updated_at or now,
        )

    @classmethod
    def from_domain(cls, book: Book) -> "BookPayload":
        return cls(
            id=book.book_id,
            building_id=book.building_id,
            source=book.source,
            status=book.status,
            progress=book.progress,
            sections=[
                SectionPayload(
                    id=s.section_id,
                    type=s.section_type,
                    complete=s.complete,
                    content=s.content,
                )
                for s in book.sections
            ],
            created_at=book.created_at,
            updated_at=book.updated_at,
        )


class BookEnvelope(BaseModel):
    """Response envelope: ``{"data": <book or null>}``."""

    data: Optional[BookPayload] = None


class CreateBookRequest(BaseModel):
    """Body of POST /libros-digitales."""

    building_id: str = Field(..., alias="buildingId", min_length=1)
    source: str = BookSource.MANUAL.value

    model_config = {"populate_by_name": True}


class UpdateSectionRequest(BaseModel):
    """Body of PUT /libros-digitales/{bookId}/sections/{sectionType}."""

    content: Dict[str, Any] = Field(default_factory=dict)
    complete: bool = False


class PdfImportMetadata(BaseModel):
    """Metadata returned by the PDF import endpoint."""

    file_name: str = Field(..., alias="fileName")
    file_size: int = Field(..., alias="fileSize")
    mime_type: str = Field(..., alias="mimeType")
    extracted_text_length: int = Field(0, alias="extractedTextLength")
    sections_generated: int = Field(0, alias="sectionsGenerated")

    model_config = {"populate_by_name": True}


class PdfImportResponse(BaseModel):
    """Response of POST /libros-digitales/upload-ai."""

    data: BookPayload
    message: str = ""
    metadata: Optional[PdfImportMetadata] = None
