from datetime import datetime
from typing import List, Literal, Optional

from app.v1_0.entities import BatchResult, UploadResult
from .base import CamelModel

# "_" separates the id from the file name in stored paths
CUSTOM_ID_PATTERN = r"^[A-Za-z0-9-]{1,64}$"


class UploadResponse(CamelModel):
    success: Literal[True] = True
    raw_url: str
    file_id: str
    file_name: str
    folder: str
    file_size: int
    mime_type: str
    timestamp: datetime
    message: Optional[str] = None

    @classmethod
    def from_result(cls, r: UploadResult) -> "UploadResponse":
        return cls(
            raw_url=r.raw_url,
            file_id=r.file_id,
            file_name=r.file_name,
            folder=r.folder,
            file_size=r.file_size,
            mime_type=r.mime_type,
            timestamp=r.timestamp,
            message="File already exists, returning existing URL" if r.already_exists else None,
        )


class BatchItemErrorOut(CamelModel):
    file_name: str
    error: str
    code: str


class BatchUploadResponse(CamelModel):
    success: bool
    total_files: int
    successful_uploads: int
    failed_uploads: int
    results: List[UploadResponse]
    errors: List[BatchItemErrorOut]

    @classmethod
    def from_result(cls, b: BatchResult) -> "BatchUploadResponse":
        return cls(
            success=b.successful_uploads > 0,
            total_files=b.total_files,
            successful_uploads=b.successful_uploads,
            failed_uploads=b.failed_uploads,
            results=[UploadResponse.from_result(r) for r in b.results],
            errors=[BatchItemErrorOut(file_name=e.file_name, error=e.error, code=e.code) for e in b.errors],
        )
