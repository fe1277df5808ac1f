"""
Error taxonomy shared by every route, and the FastAPI handlers that render it.

Every error body is a JSON object carrying either a ``msg`` string or an
``errors`` list of ``{"msg": ...}`` objects.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from clinic_api.core.validation import format_validation_errors

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    as_errors = False

    def __init__(self, *messages: str, as_errors: Optional[bool] = None):
        self.messages = list(messages) or ["Server Error"]
        if as_errors is not None:
            self.as_errors = as_errors
        super().__init__("; ".join(self.messages))

    def to_body(self) -> Dict[str, Any]:
        if self.as_errors:
            return {"errors": [{"msg": m} for m in self.messages]}
        return {"msg": self.messages[0]}


class ValidationFailed(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    as_errors = True


class BadRequest(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    as_errors = True


class Conflict(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    as_errors = True


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED


class InvalidCredentials(Unauthorized):
    as_errors = True


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND


class InternalError(ApiError):
    pass


def error_response(status_code: int, body: Dict[str, Any]) -> JSONResponse:
    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=status_code, content=body, headers=headers)


async def api_error_handler(request: Request, exc: ApiError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return error_response(exc.status_code, exc.to_body())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages: List[str] = format_validation_errors(exc.errors())
    logger.info(f"{request.method} {request.url.path} rejected: {messages}")
    return error_response(
        status.HTTP_400_BAD_REQUEST, {"errors": [{"msg": m} for m in messages]}
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"msg": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, {"msg": "Server Error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
