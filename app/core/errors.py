from typing import Any, Dict

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.logger import logger


class RelayError(Exception):
    """Terminal error for the current request, rendered as `{success, error, code}`."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, *, code: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code

    def to_body(self) -> Dict[str, Any]:
        return {"success": False, "error": self.message, "code": self.code}


class InvalidInputError(RelayError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_REQUEST"


class FileTooLargeError(RelayError):
    status_code = 413
    code = "FILE_TOO_LARGE"


class CaptchaError(RelayError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "CAPTCHA_FAILED"


class RateLimitedError(RelayError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = "RATE_LIMITED"


class ObjectNotFoundError(RelayError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "FILE_NOT_FOUND"


class StoreUnavailableError(RelayError):
    status_code = status.HTTP_502_BAD_GATEWAY
    code = "STORE_UNAVAILABLE"


class UploadFailedError(RelayError):
    code = "UPLOAD_FAILED"


class DeleteFailedError(RelayError):
    code = "DELETE_FAILED"


class InternalError(RelayError):
    code = "INTERNAL_ERROR"


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("[Errors] invalid request %s %s: %s", request.method, request.url.path, exc.errors())
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
    message = first.get("msg", "invalid request")
    err = InvalidInputError(f"{field}: {message}" if field else message)
    return JSONResponse(status_code=err.status_code, content=err.to_body())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("[Errors] unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return JSONResponse(status_code=500, content=InternalError("Internal Server Error").to_body())
