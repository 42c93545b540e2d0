"""Error Handlers — translate raised exceptions into the JSON error envelope.

Invariants:
    - NoteChainError subclasses answer with their own http_status and to_response() body
    - 4xx domain errors log at WARNING, 5xx at ERROR, tagged with error_code and path
    - Body validation failures answer 400 VALIDATION_ERROR with one entry per field
    - Anything else answers 500 INTERNAL_ERROR; the exception text stays in the log
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from notechain.core.errors import NoteChainError, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Install the domain, validation and fallback handlers on app."""
    _register_notechain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_notechain_error_handler(app: FastAPI) -> None:
    @app.exception_handler(NoteChainError)
    async def notechain_error_handler(request: Request, exc: NoteChainError):
        log = logger.warning if exc.http_status < 500 else logger.error
        log(
            f"NoteChainError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
