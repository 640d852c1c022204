from dataclasses import dataclass
from typing import List, Optional


@dataclass(slots=True)
class FileInfoDTO:
    file_id: str
    file_name: str
    folder: str
    path: str
    size: int
    download_url: Optional[str]
    raw_url: str


@dataclass(slots=True)
class FilePageDTO:
    items: List[FileInfoDTO]
    page: int
    page_size: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool
