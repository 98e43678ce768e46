"""Global exception handlers — translate domain errors to HTTP responses.

Each domain exception maps to a specific HTTP status code and the
standard ``{"status": "error", "message": "..."}`` envelope.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from repo_ingest.domain.exceptions import (
    ConfigurationError,
    DecodeError,
    GitHubRateLimitError,
    IngestionStageError,
    InvalidRepositoryError,
    LocalFolderNotFoundError,
    LocalPathNotAllowedError,
    RepoIngestError,
    RepositoryAccessDeniedError,
    ResourceNotFoundError,
    TransportError,
    UpstreamStatusError,
)

logger = logging.getLogger(__name__)

# First match wins, so subclasses precede their bases.
_EXCEPTION_STATUS: list[tuple[type[BaseException], int]] = [
    (InvalidRepositoryError, 422),
    (LocalFolderNotFoundError, 422),
    (LocalPathNotAllowedError, 403),
    (ConfigurationError, 401),
    (ResourceNotFoundError, 404),
    (RepositoryAccessDeniedError, 403),
    (GitHubRateLimitError, 429),
    (UpstreamStatusError, 502),
    (TransportError, 502),
    (DecodeError, 502),
]


def status_for(exc: BaseException) -> int:
    """Return the HTTP status for *exc*; stage errors use their cause."""
    if isinstance(exc, IngestionStageError):
        exc = exc.cause
    for exc_type, code in _EXCEPTION_STATUS:
        if isinstance(exc, exc_type):
            return code
    return 500


def _error_json(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "message": message},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application."""

    # ── Domain exceptions ───────────────────────────────────────────────

    @app.exception_handler(RepoIngestError)
    async def domain_handler(request: Request, exc: RepoIngestError) -> JSONResponse:
        logger.warning("%s: %s", type(exc).__name__, exc)
        return _error_json(status_for(exc), str(exc))

    # ── Pydantic / FastAPI validation errors ────────────────────────────

    @app.exception_handler(RequestValidationError)
    async def validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        messages = []
        for err in exc.errors():
            loc = " → ".join(str(p) for p in err.get("loc", []))
            messages.append(f"{loc}: {err.get('msg', 'validation error')}")
        return _error_json(422, "; ".join(messages))

    # ── Catch-all for unexpected errors ─────────────────────────────────

    @app.exception_handler(Exception)
    async def generic_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception")
        return _error_json(500, "An unexpected error occurred. Please try again later.")
