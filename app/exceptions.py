"""
Application exceptions and the FastAPI handlers that turn them into JSON.
"""

import structlog
from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)


class BaseAppException(Exception):
    """Base class for all app-specific exceptions."""
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST, details: str = None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class InvalidAdRequestException(BaseAppException):
    """Image/text pairs rejected before any ad is rendered."""
    def __init__(self, message: str):
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class AdGenerationException(BaseAppException):
    """Failure outside a single ad job; fails the whole request."""
    def __init__(self, details: str):
        super().__init__("Failed to generate ad", status.HTTP_500_INTERNAL_SERVER_ERROR, details)


def error_response(message: str, status_code: int, details: str = None) -> JSONResponse:
    content = {"error": message}
    if details is not None:
        content["details"] = details
    return JSONResponse(content=content, status_code=status_code)


def setup_exception_handlers(app):

    @app.exception_handler(BaseAppException)
    async def app_exception_handler(request: Request, exc: BaseAppException):
        logger.warning("request_failed", path=request.url.path, error=exc.message, details=exc.details)
        return error_response(exc.message, exc.status_code, exc.details)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger.warning("http_exception", path=request.url.path, detail=exc.detail)
        return error_response(exc.detail, exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning("validation_error", path=request.url.path, errors=exc.errors())
        return JSONResponse(
            content={
                "error": "Invalid or missing request fields",
                "details": jsonable_errors(exc),
            },
            status_code=422,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error("unhandled_exception", path=request.url.path, error=str(exc), exc_info=exc)
        return error_response("Failed to generate ad", 500, str(exc))


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
