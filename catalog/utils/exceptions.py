"""Error taxonomy of the catalog service and its FastAPI exception handlers.

Services raise these exceptions; the handlers registered by
``register_exception_handlers`` turn them into a single JSON response with
the ``{"success": false, "errors": ...}`` envelope used across the API.
"""

from typing import Any, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from catalog.utils.logging import get_logger

logger = get_logger(__name__)

INTERNAL_SERVER_ERROR = "Internal Server Error"


def field_errors(errors) -> List[dict]:
    return [
        {"field": ".".join(str(part) for part in error["loc"]), "msg": error["msg"]}
        for error in errors
    ]


class CatalogError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = INTERNAL_SERVER_ERROR):
        super().__init__(message)
        self.message = message

    @property
    def errors(self) -> Any:
        return self.message


class ValidationError(CatalogError):
    """A required field is missing or a value is out of its declared range."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Validation failed", details: Optional[List[dict]] = None):
        super().__init__(message)
        self.details = details or [{"msg": message}]

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        return cls("Validation failed", field_errors(exc.errors()))

    @property
    def errors(self) -> Any:
        return self.details


class NotFound(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND


class MalformedIdentity(NotFound):
    """An id that is not a valid ObjectId; reported exactly like an absent one."""


class InternalFault(CatalogError):
    """Unexpected store or transport fault. The message never reaches the client."""

    @property
    def errors(self) -> Any:
        return INTERNAL_SERVER_ERROR


class MediaUploadError(InternalFault):
    status_code = status.HTTP_502_BAD_GATEWAY


def error_response(status_code: int, errors: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "errors": errors})


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    if isinstance(exc, InternalFault):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return error_response(exc.status_code, exc.errors)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = field_errors(exc.errors())
    logger.info(f"{request.method} {request.url.path} -> 422: {details}")
    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, details)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
