from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request
from dependency_injector.wiring import inject, Provide

from app.app_containers import ApplicationContainer
from app.core.errors import InternalError, RelayError
from app.core.logger import logger
from app.core.security.captcha import TurnstileVerifier
from app.v1_0.schemas import (
    DeleteRequest,
    DeleteResponse,
    ErrorResponse,
    FileInfo,
    FileListResponse,
    FileLookupResponse,
    LegacyDeleteRequest,
)
from app.v1_0.services import FileService
from .upload_router import client_address

router = APIRouter(prefix="/files", tags=["Files"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


@router.get(
    "",
    response_model=FileListResponse,
    responses=ERROR_RESPONSES,
    summary="List stored files, optionally for one category",
)
@inject
async def list_files(
    category: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    service: FileService = Depends(Provide[ApplicationContainer.api_container.file_service]),
) -> FileListResponse:
    logger.debug("[FileRouter] list category=%s page=%s limit=%s", category, page, limit)
    try:
        return FileListResponse.from_page(await service.list_files(category, page, limit))
    except RelayError:
        raise
    except Exception as e:
        logger.error("[FileRouter] list error: %s", e, exc_info=True)
        raise InternalError("Failed to list files") from e


@router.get(
    "/{file_id}",
    response_model=FileLookupResponse,
    responses=ERROR_RESPONSES,
    summary="Find a stored file by its id",
)
@inject
async def get_file(
    file_id: str = Path(..., min_length=1, max_length=64),
    service: FileService = Depends(Provide[ApplicationContainer.api_container.file_service]),
) -> FileLookupResponse:
    logger.debug("[FileRouter] lookup id=%s", file_id)
    try:
        return FileLookupResponse(file=FileInfo.from_dto(await service.find_by_id(file_id)))
    except RelayError:
        raise
    except Exception as e:
        logger.error("[FileRouter] lookup error: %s", e, exc_info=True)
        raise InternalError("Failed to look up file") from e


async def _delete(
    request: Request,
    path: Optional[str],
    file_id: Optional[str],
    token: Optional[str],
    captcha: TurnstileVerifier,
    service: FileService,
) -> DeleteResponse:
    await captcha.verify(token, client_address(request))
    logger.info("[FileRouter] delete path=%s id=%s", path, file_id)
    try:
        deleted = await service.delete(path=path, file_id=file_id)
    except RelayError:
        raise
    except Exception as e:
        logger.error("[FileRouter] delete error: %s", e, exc_info=True)
        raise InternalError("Failed to delete file") from e
    return DeleteResponse(message=f"File {deleted} deleted successfully")


@router.delete(
    "",
    response_model=DeleteResponse,
    responses=ERROR_RESPONSES,
    summary="Delete a stored file by path or id",
)
@inject
async def delete_file(
    request: Request,
    body: DeleteRequest,
    captcha: TurnstileVerifier = Depends(Provide[ApplicationContainer.api_container.captcha_verifier]),
    service: FileService = Depends(Provide[ApplicationContainer.api_container.file_service]),
) -> DeleteResponse:
    return await _delete(request, body.path, body.file_id, body.turnstile_response, captcha, service)


@inject
async def legacy_delete_file(
    request: Request,
    body: LegacyDeleteRequest,
    captcha: TurnstileVerifier = Depends(Provide[ApplicationContainer.api_container.captcha_verifier]),
    service: FileService = Depends(Provide[ApplicationContainer.api_container.file_service]),
) -> DeleteResponse:
    return await _delete(request, body.filename, None, body.turnstile_response, captcha, service)
