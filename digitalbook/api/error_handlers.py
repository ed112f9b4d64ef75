"""Exception handlers that turn book failures into JSON responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from digitalbook.api.exceptions import BookAPIError, from_repository_error
from digitalbook.persistence.repositories import BookRepositoryError


logger = logging.getLogger(__name__)

# Path parameters of the book routes that identify what a request was about
_CONTEXT_PARAMS = ("building_id", "book_id", "section_type")


def _error_response(error: BookAPIError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content={"detail": error.to_dict(), "message": error.message},
    )


async def book_api_error_handler(request: Request, exc: BookAPIError) -> JSONResponse:
    return _error_response(exc)


async def repository_error_handler(request: Request, exc: BookRepositoryError) -> JSONResponse:
    """Repository failures that escaped a route, answered with the request's book context."""
    context = {
        name: request.path_params[name]
        for name in _CONTEXT_PARAMS
        if name in request.path_params
    }
    error = from_repository_error(exc, **context)
    if error.status_code >= 500:
        logger.error(
            "%s %s failed: %s", request.method, request.url.path, exc.message,
            extra=context,
        )
    return _error_response(error)


async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Malformed request bodies (missing buildingId, non-boolean complete, ...)."""
    fields = [
        {
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": {"error_code": "INVALID_BOOK_REQUEST", "fields": fields},
            "message": "Invalid digital book request",
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BookAPIError, book_api_error_handler)
    app.add_exception_handler(BookRepositoryError, repository_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
