"""RFC 7807 Problem Details error handling.

Provides centralized exception handling and custom exception classes.
All errors return a consistent JSON format:

    {
        "type": "about:blank",
        "title": "Not Found",
        "status": 404,
        "detail": "Transaction xyz not found",
        "instance": "/api/v1/transactions/xyz"
    }
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger()


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str, status_code: int = 500, error_type: str = "about:blank"):
        self.detail = detail
        self.status_code = status_code
        self.error_type = error_type
        super().__init__(detail)


class BadRequestError(AppError):
    """Request is well-formed JSON but cannot be processed."""

    def __init__(self, detail: str = "Bad request"):
        super().__init__(detail=detail, status_code=400)


class AuthenticationError(AppError):
    """Authentication failed."""

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(detail=detail, status_code=401)


class ForbiddenError(AppError):
    """Caller is authenticated but does not own the resource."""

    def __init__(self, detail: str = "Forbidden"):
        super().__init__(detail=detail, status_code=403)


class NotFoundError(AppError):
    """Resource not found."""

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(detail=detail, status_code=404)


class PayloadTooLargeError(AppError):
    """Request body exceeds the configured limit."""

    def __init__(self, detail: str = "Payload too large"):
        super().__init__(detail=detail, status_code=413)


class ValidationError(AppError):
    """Request validation failed."""

    def __init__(self, detail: str = "Validation failed"):
        super().__init__(detail=detail, status_code=422)


def _build_problem_detail(
    status: int,
    title: str,
    detail: str,
    error_type: str = "about:blank",
    instance: str = "",
    request_id: str = "",
) -> dict:
    """Build RFC 7807 Problem Details response body."""
    body = {
        "type": error_type,
        "title": title,
        "status": status,
        "detail": detail,
    }
    if instance:
        body["instance"] = instance
    if request_id:
        body["request_id"] = request_id
    return body


_STATUS_TITLES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    413: "Payload Too Large",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
}


def _problem_response(
    request: Request, status: int, detail: str, error_type: str = "about:blank"
) -> JSONResponse:
    body = _build_problem_detail(
        status=status,
        title=_STATUS_TITLES.get(status, "Error"),
        detail=detail,
        error_type=error_type,
        instance=str(request.url.path),
        request_id=getattr(request.state, "request_id", ""),
    )
    return JSONResponse(status_code=status, content=body, media_type="application/problem+json")


def _validation_detail(exc: RequestValidationError) -> str:
    """Summarize the first validation error as ``loc: msg``."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return _problem_response(request, exc.status_code, exc.detail, exc.error_type)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        return _problem_response(request, exc.status_code, detail)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _problem_response(request, 422, _validation_detail(exc))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_error", path=str(request.url.path))
        return _problem_response(request, 500, "An unexpected error occurred")
