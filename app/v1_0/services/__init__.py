from .upload_service import UploadService
from .file_service import FileService

__all__ = [
    "UploadService",
    "FileService",
]
