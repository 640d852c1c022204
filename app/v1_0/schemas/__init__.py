from .base import CamelModel, ErrorResponse
from .upload_schema import (
    CUSTOM_ID_PATTERN,
    UploadResponse,
    BatchItemErrorOut,
    BatchUploadResponse,
)
from .file_schema import (
    FileInfo,
    FileLookupResponse,
    FileListResponse,
    DeleteRequest,
    LegacyDeleteRequest,
    DeleteResponse,
)

__all__ = [
    "CamelModel", "ErrorResponse",
    "CUSTOM_ID_PATTERN", "UploadResponse", "BatchItemErrorOut", "BatchUploadResponse",
    "FileInfo", "FileLookupResponse", "FileListResponse",
    "DeleteRequest", "LegacyDeleteRequest", "DeleteResponse",
]
