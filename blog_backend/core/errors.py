"""Error kinds raised by the API and the handlers that render them.

Every failure response has the shape ``{"success": false, "message", "statusCode"}``.
"""
import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(HTTPException):
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    message_default = "Internal Server Error"

    def __init__(self, message: str | None = None):
        super().__init__(status_code=self.status_code_default, detail=message or self.message_default)

    @property
    def message(self) -> str:
        return self.detail


class ValidationError(ApiError):
    status_code_default = status.HTTP_400_BAD_REQUEST
    message_default = "All fields are required"


class DuplicateError(ApiError):
    status_code_default = status.HTTP_400_BAD_REQUEST
    message_default = "Username or email already exists"


class NotFoundError(ApiError):
    status_code_default = status.HTTP_404_NOT_FOUND
    message_default = "User not found"


class InvalidCredentialsError(ApiError):
    status_code_default = status.HTTP_400_BAD_REQUEST
    message_default = "Invalid password"


class ProviderPasswordChangeError(ApiError):
    status_code_default = status.HTTP_400_BAD_REQUEST
    message_default = "Cannot update password for Google accounts"


class ForbiddenError(ApiError):
    status_code_default = status.HTTP_403_FORBIDDEN
    message_default = "You are not allowed to perform this action"


class UnauthenticatedError(ApiError):
    status_code_default = status.HTTP_401_UNAUTHORIZED
    message_default = "Unauthorized"


class InternalError(ApiError):
    pass


def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "statusCode": status_code},
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        cause = exc.__cause__ or exc
        logger.error("%s %s failed: %s", request.method, request.url.path, cause, exc_info=cause)
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = errors[0].get("msg", ValidationError.message_default) if errors else ValidationError.message_default
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError.message_default)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
