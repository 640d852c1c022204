from datetime import datetime, timezone
from typing import Sequence

from app.core.errors import (
    FileTooLargeError,
    InternalError,
    InvalidInputError,
    RelayError,
    StoreUnavailableError,
    UploadFailedError,
)
from app.core.logger import logger
from app.core.settings import Settings
from app.storage.content_store import (
    ContentStoreClient,
    ContentStoreError,
    Found,
    NotFound,
    RemoteObjectRecord,
)
from app.v1_0.entities import BatchItemError, BatchResult, UploadRequest, UploadResult
from app.v1_0.helper import IdentifierGenerator, MimeClassifier, build_path

# the store answers these when the path was created between our check and our write
_CREATE_CONFLICT_STATUSES = (409, 422)


class UploadService:
    """Admission, naming and create-or-return writes against the content store."""

    def __init__(
        self,
        settings: Settings,
        store: ContentStoreClient,
        classifier: MimeClassifier,
        id_generator: IdentifierGenerator,
    ) -> None:
        self.settings = settings
        self.store = store
        self.classifier = classifier
        self.id_generator = id_generator

    def _admit(self, request: UploadRequest) -> None:
        if not request.content:
            raise InvalidInputError("No file uploaded", code="NO_FILE")
        if request.content_type not in self.settings.allowed_types:
            raise InvalidInputError(
                f"File type {request.content_type or 'unknown'} is not allowed",
                code="INVALID_FILE_TYPE",
            )
        if request.size > self.settings.max_file_bytes:
            raise FileTooLargeError(f"File exceeds {self.settings.MAX_FILE_MB}MB")

    def _result(self, request: UploadRequest, path: str, file_id: str, size: int, *, existed: bool) -> UploadResult:
        folder, file_name = path.split("/", 1)
        return UploadResult(
            raw_url=self.store.public_url(path),
            file_id=file_id,
            file_name=file_name,
            folder=folder,
            file_size=size,
            mime_type=request.content_type,
            timestamp=datetime.now(timezone.utc),
            already_exists=existed,
        )

    async def upload(self, request: UploadRequest) -> UploadResult:
        """
        Store one file, or return the existing object when its path is taken.

        Retrying the same (custom id, filename) pair lands on the same path, so the
        second call finds the object and performs no write.

        Args:
            request: The file as received at the boundary, content type normalised.

        Returns:
            UploadResult with the public CDN URL.

        Raises:
            InvalidInputError: empty payload or disallowed content type.
            FileTooLargeError: payload over the configured size.
            StoreUnavailableError: the existence check failed for a reason other than 404.
            UploadFailedError: the write was rejected.
        """
        self._admit(request)
        category = self.classifier.classify(request.content_type)
        file_id = request.custom_id or self.id_generator.generate()
        path = build_path(category, file_id, request.filename)

        existing = await self.store.get(path)
        if isinstance(existing, Found):
            logger.info("[UploadService] %s already exists, returning existing URL", path)
            return self._result(request, path, file_id, existing.record.size, existed=True)
        if not isinstance(existing, NotFound):
            logger.error("[UploadService] existence check failed for %s: %s", path, existing.message)
            raise StoreUnavailableError(existing.message)

        try:
            record = await self.store.put(path, request.content, self.settings.COMMIT_MESSAGE)
        except ContentStoreError as e:
            if e.status_code in _CREATE_CONFLICT_STATUSES:
                raced = await self.store.get(path)
                if isinstance(raced, Found):
                    logger.info("[UploadService] %s created concurrently, returning existing URL", path)
                    return self._result(request, path, file_id, raced.record.size, existed=True)
            logger.error("[UploadService] write failed for %s: %s", path, e.message)
            raise UploadFailedError(e.message) from e

        logger.info("[UploadService] stored %s (%s bytes)", path, request.size)
        return self._result(request, path, file_id, record.size or request.size, existed=False)

    async def _write_new(self, request: UploadRequest) -> UploadResult:
        self._admit(request)
        category = self.classifier.classify(request.content_type)
        file_id = self.id_generator.generate()
        path = build_path(category, file_id, request.filename)
        try:
            record: RemoteObjectRecord = await self.store.put(path, request.content, self.settings.COMMIT_MESSAGE)
        except ContentStoreError as e:
            raise UploadFailedError(e.message) from e
        return self._result(request, path, file_id, record.size or request.size, existed=False)

    async def batch_upload(self, requests: Sequence[UploadRequest]) -> BatchResult:
        """
        Write each file independently; one failure never aborts the rest.

        No existence check here, every item gets a fresh id and is written.
        Successful writes are kept even when later items fail.
        """
        if not requests:
            raise InvalidInputError("No files uploaded", code="NO_FILE")
        if len(requests) > self.settings.MAX_BATCH_FILES:
            raise InvalidInputError(
                f"Maximum {self.settings.MAX_BATCH_FILES} files per batch",
                code="TOO_MANY_FILES",
            )

        out = BatchResult()
        for req in requests:
            try:
                out.results.append(await self._write_new(req))
            except RelayError as e:
                logger.warning("[UploadService] batch item %s failed: %s", req.filename, e.message)
                out.errors.append(BatchItemError(file_name=req.filename, error=e.message, code=e.code))
            except Exception as e:
                logger.error("[UploadService] batch item %s error: %s", req.filename, e, exc_info=True)
                err = InternalError("Internal Server Error")
                out.errors.append(BatchItemError(file_name=req.filename, error=err.message, code=err.code))

        logger.info(
            "[UploadService] batch done total=%s ok=%s failed=%s",
            out.total_files, out.successful_uploads, out.failed_uploads,
        )
        return out
