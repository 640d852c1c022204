"""Shared fixtures: settings, an in-memory content store and an app wired to it."""

from typing import Dict, List

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from app.core.settings import Settings
from app.main import create_app
from app.storage.content_store import (
    ContentStoreError,
    Found,
    LookupResult,
    NotFound,
    RemoteObjectRecord,
    StoreObjectNotFound,
    TransportError,
)


def make_settings(**overrides) -> Settings:
    values = {
        "GITHUB_USERNAME": "owner",
        "GITHUB_REPO": "repo",
        "REPO_BRANCH": "main",
        "GITHUB_TOKEN": "test-token",
        "GITHUB_API_URL": "https://api.github.com",
        "CDN_API_URL": "https://cdn.jsdelivr.net/gh",
        "CF_TURNSTILE_SECRET_KEY": "",
        "RATE_LIMIT_MAX": 1000,
        "COMMIT_MESSAGE": "test upload",
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeStore:
    """In-memory stand-in for ContentStoreClient that counts calls."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.objects: Dict[str, bytes] = {}
        self.get_calls = 0
        self.put_calls = 0
        self.delete_calls = 0
        self.fail_get: TransportError | None = None
        self.fail_put: ContentStoreError | None = None
        self.fail_list: ContentStoreError | None = None
        self.fail_delete: ContentStoreError | None = None

    def _record(self, path: str) -> RemoteObjectRecord:
        data = self.objects[path]
        return RemoteObjectRecord(
            path=path,
            name=path.rsplit("/", 1)[-1],
            size=len(data),
            sha=f"sha-{abs(hash(data))}",
            download_url=f"https://raw.example/{path}",
        )

    def public_url(self, path: str) -> str:
        s = self.settings
        return f"{s.CDN_API_URL}/{s.GITHUB_USERNAME}/{s.GITHUB_REPO}@{s.REPO_BRANCH}/{path}"

    async def get(self, path: str) -> LookupResult:
        self.get_calls += 1
        if self.fail_get is not None:
            return self.fail_get
        if path in self.objects:
            return Found(record=self._record(path))
        return NotFound(path=path)

    async def put(self, path: str, content: bytes, message: str) -> RemoteObjectRecord:
        self.put_calls += 1
        if self.fail_put is not None:
            raise self.fail_put
        self.objects[path] = content
        return self._record(path)

    async def delete(self, path: str, sha: str, message: str) -> None:
        self.delete_calls += 1
        if self.fail_delete is not None:
            raise self.fail_delete
        if path not in self.objects or self._record(path).sha != sha:
            raise StoreObjectNotFound("Not Found", status_code=404)
        del self.objects[path]

    async def list_directory(self, folder: str) -> List[RemoteObjectRecord]:
        if self.fail_list is not None:
            raise self.fail_list
        prefix = f"{folder}/"
        return [
            self._record(p) for p in sorted(self.objects)
            if p.startswith(prefix) and "/" not in p[len(prefix):]
        ]

    async def aclose(self) -> None:
        return None


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def fake_store(settings: Settings) -> FakeStore:
    return FakeStore(settings)


@pytest.fixture
def app(settings: Settings, fake_store: FakeStore):
    application = create_app(settings)
    application.state.container.api_container.content_store.override(providers.Object(fake_store))
    yield application
    application.state.container.api_container.content_store.reset_override()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
