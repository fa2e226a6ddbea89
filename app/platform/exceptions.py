from typing import Awaitable, Callable

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from app.platform.logger import get_logger
from app.platform.response import api_response

logger = get_logger("exceptions")


class SeoAnalysisError(Exception):
    """Base class for errors that are reported back to the caller verbatim."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidInputError(SeoAnalysisError):
    """Missing or unusable request input. No I/O is attempted."""


class InvalidUrlError(InvalidInputError):
    """The URL could not be normalized."""


class FetchFailureError(SeoAnalysisError):
    """The page fetch timed out, failed on the network or returned a non-2xx status."""

    def __init__(self, message: str, status_code: int = None, upstream_status: int = None):
        super().__init__(message, status_code)
        self.upstream_status = upstream_status


async def run_with_error_handling(
    operation: Callable[[], Awaitable[Response]],
    error_message: str = "Server error",
) -> Response:
    """
    Await a route operation and turn failures into envelope responses.

    SeoAnalysisError subclasses keep their message and status code; anything
    else is logged with its traceback and reported as a generic 500.
    """
    try:
        return await operation()
    except SeoAnalysisError as e:
        logger.warning(f"{error_message}: {e.message}")
        return api_response(message=e.message, status_code=e.status_code)
    except Exception as e:
        logger.exception(f"{error_message}: {e}")
        return api_response(
            message=error_message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


def add_exception_handlers(app):
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return api_response(message=str(exc.detail) or "Error", status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return api_response(
            message="Validation failed",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            data={"errors": exc.errors()},
        )

    @app.exception_handler(SeoAnalysisError)
    async def seo_exception_handler(request: Request, exc: SeoAnalysisError):
        return api_response(message=exc.message, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return api_response(
            message="Internal server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
