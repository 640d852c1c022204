from typing import List, Literal, Optional

from pydantic import Field, model_validator

from app.v1_0.entities import FileInfoDTO, FilePageDTO
from .base import CamelModel


class FileInfo(CamelModel):
    file_id: str
    file_name: str
    folder: str
    size: int
    download_url: Optional[str] = None
    raw_url: str

    @classmethod
    def from_dto(cls, f: FileInfoDTO) -> "FileInfo":
        return cls(
            file_id=f.file_id,
            file_name=f.file_name,
            folder=f.folder,
            size=f.size,
            download_url=f.download_url,
            raw_url=f.raw_url,
        )


class FileLookupResponse(CamelModel):
    success: Literal[True] = True
    file: FileInfo


class FileListResponse(CamelModel):
    success: Literal[True] = True
    total_files: int
    current_page: int
    total_pages: int
    files: List[FileInfo]

    @classmethod
    def from_page(cls, p: FilePageDTO) -> "FileListResponse":
        return cls(
            total_files=p.total,
            current_page=p.page,
            total_pages=p.total_pages,
            files=[FileInfo.from_dto(f) for f in p.items],
        )


class DeleteRequest(CamelModel):
    path: Optional[str] = Field(default=None, max_length=512)
    file_id: Optional[str] = Field(default=None, max_length=64)
    turnstile_response: Optional[str] = None

    @model_validator(mode="after")
    def _one_target(self):
        if not self.path and not self.file_id:
            raise ValueError("path or fileId is required")
        return self


class LegacyDeleteRequest(CamelModel):
    filename: str = Field(min_length=1, max_length=512)
    turnstile_response: Optional[str] = None


class DeleteResponse(CamelModel):
    success: Literal[True] = True
    message: str
