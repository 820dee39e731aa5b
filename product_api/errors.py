"""
Error taxonomy raised by the product service and the handlers that render
every failure as a JSON:API error document.
"""

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import Counter
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

FAILURES = Counter("http_request_failures_total", "Failed HTTP requests", ["service", "status"])


class ServiceError(Exception):
    """Base for failures the service classifies itself."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(ServiceError):
    """Client supplied missing or invalid data."""

    status_code = HTTPStatus.BAD_REQUEST


class NotFoundError(ServiceError):
    """Referenced id or page does not exist."""

    status_code = HTTPStatus.NOT_FOUND


class InternalError(ServiceError):
    """Unexpected storage failure. Carries a generic message only."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR


def _pointer(request: Request) -> str:
    pointer = request.url.path
    if request.url.query:
        pointer = f"{pointer}?{request.url.query}"
    return pointer


def error_document(request: Request, status_code: int, detail: str) -> dict:
    try:
        title = HTTPStatus(status_code).phrase
    except ValueError:
        title = "Error"
    return {
        "errors": [
            {
                "status": str(status_code),
                "title": title,
                "detail": detail,
                "source": {"pointer": _pointer(request)},
            }
        ]
    }


def register_error_handlers(app: FastAPI, service_name: str) -> None:
    """Register global exception handlers."""

    def respond(request: Request, status_code: int, detail: str) -> JSONResponse:
        status_code = int(status_code)
        FAILURES.labels(service_name, str(status_code)).inc()
        return JSONResponse(
            status_code=status_code,
            content=error_document(request, status_code, detail),
        )

    # Already logged by the service where it was classified
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        return respond(request, exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        )
        logger.warning("%s %s rejected: %s", request.method, _pointer(request), problems)
        return respond(request, HTTPStatus.BAD_REQUEST, problems or "Invalid request.")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        logger.warning("%s %s -> %s %s", request.method, _pointer(request), exc.status_code, exc.detail)
        return respond(request, exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("%s %s failed", request.method, _pointer(request), exc_info=exc)
        return respond(request, HTTPStatus.INTERNAL_SERVER_ERROR, "The server encountered an unexpected error.")
