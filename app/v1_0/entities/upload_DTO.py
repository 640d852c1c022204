from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(slots=True)
class UploadRequest:
    """One uploaded file as received at the HTTP boundary."""
    content: bytes
    content_type: str
    filename: str
    custom_id: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(slots=True)
class UploadResult:
    raw_url: str
    file_id: str
    file_name: str
    folder: str
    file_size: int
    mime_type: str
    timestamp: datetime
    already_exists: bool = False


@dataclass(slots=True)
class BatchItemError:
    file_name: str
    error: str
    code: str


@dataclass(slots=True)
class BatchResult:
    results: List[UploadResult] = field(default_factory=list)
    errors: List[BatchItemError] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return len(self.results) + len(self.errors)

    @property
    def successful_uploads(self) -> int:
        return len(self.results)

    @property
    def failed_uploads(self) -> int:
        return len(self.errors)
