from dataclasses import dataclass
from typing import Any, Dict, Union


@dataclass(frozen=True, slots=True)
class RemoteObjectRecord:
    """A file as the content store reports it; never cached past one request."""
    path: str
    name: str
    size: int
    sha: str
    download_url: str | None = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RemoteObjectRecord":
        return cls(
            path=data["path"],
            name=data.get("name") or data["path"].rsplit("/", 1)[-1],
            size=int(data.get("size") or 0),
            sha=data["sha"],
            download_url=data.get("download_url"),
        )

    @property
    def folder(self) -> str:
        return self.path.rsplit("/", 1)[0] if "/" in self.path else ""


@dataclass(frozen=True, slots=True)
class Found:
    record: RemoteObjectRecord


@dataclass(frozen=True, slots=True)
class NotFound:
    path: str


@dataclass(frozen=True, slots=True)
class TransportError:
    status_code: int | None
    message: str


LookupResult = Union[Found, NotFound, TransportError]


class ContentStoreError(Exception):
    """Transport or HTTP failure talking to the content store."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class StoreObjectNotFound(ContentStoreError):
    """Object missing, or the version token is stale."""
