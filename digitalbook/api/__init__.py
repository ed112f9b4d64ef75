"""HTTP boundary: REST client for the book backend and the development API."""

from digitalbook.api.client import HttpBookRepository, PdfImportResult

__all__ = ["HttpBookRepository", "PdfImportResult"]
