from math import ceil
from typing import List, Optional

from app.core.errors import (
    DeleteFailedError,
    InvalidInputError,
    ObjectNotFoundError,
    StoreUnavailableError,
)
from app.core.logger import logger
from app.core.settings import Settings
from app.storage.content_store import (
    ContentStoreClient,
    ContentStoreError,
    Found,
    NotFound,
    RemoteObjectRecord,
    StoreObjectNotFound,
)
from app.v1_0.entities import FileInfoDTO, FilePageDTO
from app.v1_0.helper import identifier_of


class FileService:
    """Lookup, listing and deletion by scanning the store's category folders."""

    def __init__(self, settings: Settings, store: ContentStoreClient) -> None:
        self.settings = settings
        self.store = store

    def _to_dto(self, record: RemoteObjectRecord) -> FileInfoDTO:
        return FileInfoDTO(
            file_id=identifier_of(record.name),
            file_name=record.name,
            folder=record.folder,
            path=record.path,
            size=record.size,
            download_url=record.download_url,
            raw_url=self.store.public_url(record.path),
        )

    def _matches(self, name: str, file_id: str) -> bool:
        if self.settings.LOOKUP_MATCH == "exact":
            return name.startswith(f"{file_id}_")
        return name.startswith(file_id)

    async def _scan(self, folder: str) -> List[RemoteObjectRecord]:
        try:
            return await self.store.list_directory(folder)
        except ContentStoreError as e:
            logger.error("[FileService] listing %s failed: %s", folder, e.message)
            raise StoreUnavailableError(e.message) from e

    async def find_by_id(self, file_id: str) -> FileInfoDTO:
        """
        First stored file whose name starts with `file_id`, scanning folders in order.

        With LOOKUP_MATCH=prefix a short id can match a longer one (`ab` hits
        `abc_x.png`); `exact` only matches `<id>_...`.

        Raises:
            ObjectNotFoundError: nothing matches.
            StoreUnavailableError: a folder listing failed.
        """
        for folder in self.settings.folders:
            for record in await self._scan(folder):
                if self._matches(record.name, file_id):
                    return self._to_dto(record)
        raise ObjectNotFoundError("File not found")

    async def list_files(self, category: Optional[str], page: int, limit: Optional[int] = None) -> FilePageDTO:
        if category is not None and category not in self.settings.folders:
            raise InvalidInputError(
                f"Unknown category '{category}'. Valid: {', '.join(self.settings.folders)}",
                code="INVALID_CATEGORY",
            )
        limit = min(limit or self.settings.DEFAULT_PAGE_SIZE, self.settings.MAX_PAGE_SIZE)
        folders = [category] if category else self.settings.folders

        records: List[RemoteObjectRecord] = []
        for folder in folders:
            records.extend(await self._scan(folder))

        total = len(records)
        offset = max(page - 1, 0) * limit
        total_pages = max(1, ceil(total / limit)) if total else 1

        return FilePageDTO(
            items=[self._to_dto(r) for r in records[offset:offset + limit]],
            page=page,
            page_size=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )

    async def resolve_path(self, path: Optional[str], file_id: Optional[str]) -> str:
        if path:
            clean = path.strip().strip("/")
            if not clean or ".." in clean.split("/"):
                raise InvalidInputError(f"Invalid path '{path}'")
            return clean
        if file_id:
            return (await self.find_by_id(file_id)).path
        raise InvalidInputError("Filename or fileId is required")

    async def delete(self, path: Optional[str] = None, file_id: Optional[str] = None) -> str:
        """
        Delete one stored object, looking up its current version token first.

        Returns:
            The deleted path.

        Raises:
            ObjectNotFoundError: the object is missing or changed under us.
            StoreUnavailableError: the version lookup failed.
            DeleteFailedError: the store rejected the delete.
        """
        target = await self.resolve_path(path, file_id)

        current = await self.store.get(target)
        if isinstance(current, NotFound):
            raise ObjectNotFoundError("File not found")
        if not isinstance(current, Found):
            raise StoreUnavailableError(current.message)

        message = self.settings.DELETE_MESSAGE_TEMPLATE.format(path=target)
        try:
            await self.store.delete(target, current.record.sha, message)
        except StoreObjectNotFound as e:
            raise ObjectNotFoundError("File not found") from e
        except ContentStoreError as e:
            logger.error("[FileService] delete %s failed: %s", target, e.message)
            raise DeleteFailedError(e.message) from e

        logger.info("[FileService] deleted %s", target)
        return target
