import re
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from dependency_injector.wiring import inject, Provide

from app.app_containers import ApplicationContainer
from app.core.errors import InternalError, InvalidInputError, RelayError
from app.core.logger import logger
from app.core.security.captcha import TurnstileVerifier
from app.core.security.rate_limit import RateLimiter
from app.v1_0.entities import UploadRequest
from app.v1_0.helper import normalize_content_type
from app.v1_0.schemas import (
    CUSTOM_ID_PATTERN,
    BatchUploadResponse,
    ErrorResponse,
    UploadResponse,
)
from app.v1_0.services import UploadService

router = APIRouter(prefix="/upload", tags=["Upload"])

_CUSTOM_ID = re.compile(CUSTOM_ID_PATTERN)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    413: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


def client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def _read_upload(f: UploadFile) -> UploadRequest:
    data = await f.read()
    return UploadRequest(
        content=data,
        content_type=normalize_content_type(f.content_type),
        filename=f.filename or "file",
    )


@router.post(
    "",
    response_model=UploadResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
    summary="Upload one file and return its CDN URL",
)
@inject
async def upload_file(
    request: Request,
    file: Optional[UploadFile] = File(None),
    custom_id: Optional[str] = Form(None, alias="customId"),
    turnstile_response: Optional[str] = Form(None, alias="turnstileResponse"),
    limiter: RateLimiter = Depends(Provide[ApplicationContainer.api_container.rate_limiter]),
    captcha: TurnstileVerifier = Depends(Provide[ApplicationContainer.api_container.captcha_verifier]),
    service: UploadService = Depends(Provide[ApplicationContainer.api_container.upload_service]),
) -> UploadResponse:
    ip = client_address(request)
    limiter.hit(ip)
    await captcha.verify(turnstile_response, ip)

    if file is None:
        raise InvalidInputError("No file uploaded", code="NO_FILE")
    custom_id = (custom_id or "").strip() or None
    if custom_id is not None and not _CUSTOM_ID.match(custom_id):
        raise InvalidInputError(
            "customId may only contain letters, digits and '-' (max 64)",
            code="INVALID_CUSTOM_ID",
        )

    logger.info("[UploadRouter] upload name=%s ct=%s ip=%s", file.filename, file.content_type, ip)
    try:
        payload = await _read_upload(file)
        payload.custom_id = custom_id
        result = await service.upload(payload)
    except RelayError as e:
        logger.warning("[UploadRouter] upload rejected code=%s: %s", e.code, e.message)
        raise
    except Exception as e:
        logger.error("[UploadRouter] upload error: %s", e, exc_info=True)
        raise InternalError("Internal Server Error") from e

    return UploadResponse.from_result(result)


@router.post(
    "/batch",
    response_model=BatchUploadResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
    summary="Upload several files; failures are reported per file",
)
@inject
async def upload_batch(
    request: Request,
    files: Optional[List[UploadFile]] = File(None),
    turnstile_response: Optional[str] = Form(None, alias="turnstileResponse"),
    limiter: RateLimiter = Depends(Provide[ApplicationContainer.api_container.rate_limiter]),
    captcha: TurnstileVerifier = Depends(Provide[ApplicationContainer.api_container.captcha_verifier]),
    service: UploadService = Depends(Provide[ApplicationContainer.api_container.upload_service]),
) -> BatchUploadResponse:
    ip = client_address(request)
    limiter.hit(ip)
    await captcha.verify(turnstile_response, ip)

    logger.info("[UploadRouter] batch count=%s ip=%s", len(files or []), ip)
    try:
        payloads = [await _read_upload(f) for f in files or []]
        result = await service.batch_upload(payloads)
    except RelayError:
        raise
    except Exception as e:
        logger.error("[UploadRouter] batch error: %s", e, exc_info=True)
        raise InternalError("Internal Server Error") from e

    return BatchUploadResponse.from_result(result)
