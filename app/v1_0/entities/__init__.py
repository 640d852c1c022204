from .upload_DTO import UploadRequest, UploadResult, BatchItemError, BatchResult
from .file_DTO import FileInfoDTO, FilePageDTO

__all__ = [
    "UploadRequest", "UploadResult", "BatchItemError", "BatchResult",
    "FileInfoDTO", "FilePageDTO",
]
