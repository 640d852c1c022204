"""Tests for the GitHub contents API client."""

import base64
import json

import httpx
import pytest
from pytest_httpx import HTTPXMock

from app.storage.content_store import (
    ContentStoreClient,
    ContentStoreError,
    Found,
    NotFound,
    StoreObjectNotFound,
    TransportError,
)

from tests.conftest import make_settings

CONTENTS = "https://api.github.com/repos/owner/repo/contents"


def _file_json(path: str, sha: str = "abc123", size: int = 4) -> dict:
    return {
        "type": "file",
        "name": path.rsplit("/", 1)[-1],
        "path": path,
        "sha": sha,
        "size": size,
        "download_url": f"https://raw.githubusercontent.com/owner/repo/main/{path}",
    }


@pytest.fixture
def store() -> ContentStoreClient:
    return ContentStoreClient(make_settings())


class TestPublicUrl:
    def test_format(self, store):
        assert (
            store.public_url("images/Ab3_photo.png")
            == "https://cdn.jsdelivr.net/gh/owner/repo@main/images/Ab3_photo.png"
        )

    def test_custom_cdn_and_branch(self):
        s = ContentStoreClient(make_settings(CDN_API_URL="https://cdn.example/gh/", REPO_BRANCH="dev"))
        assert s.public_url("/code/x_a.js") == "https://cdn.example/gh/owner/repo@dev/code/x_a.js"


class TestGet:
    @pytest.mark.asyncio
    async def test_found(self, store, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            method="GET",
            url=f"{CONTENTS}/images/Ab3_photo.png?ref=main",
            json=_file_json("images/Ab3_photo.png"),
        )
        result = await store.get("images/Ab3_photo.png")
        assert isinstance(result, Found)
        assert result.record.sha == "abc123"
        assert result.record.name == "Ab3_photo.png"
        assert result.record.folder == "images"

        request = httpx_mock.get_request()
        assert request.headers["Authorization"] == "token test-token"
        await store.aclose()

    @pytest.mark.asyncio
    async def test_404_is_not_found(self, store, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            method="GET",
            url=f"{CONTENTS}/images/missing.png?ref=main",
            status_code=404,
            json={"message": "Not Found"},
        )
        result = await store.get("images/missing.png")
        assert result == NotFound(path="images/missing.png")

    @pytest.mark.asyncio
    async def test_other_status_is_transport_error(self, store, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            method="GET",
            url=f"{CONTENTS}/images/x.png?ref=main",
            status_code=403,
            json={"message": "API rate limit exceeded"},
        )
        result = await store.get("images/x.png")
        assert isinstance(result, TransportError)
        assert result.status_code == 403
        assert result.message == "API rate limit exceeded"

    @pytest.mark.asyncio
    async def test_network_error_is_transport_error(self, store, httpx_mock: HTTPXMock):
        httpx_mock.add_exception(
            httpx.ConnectError("Connection refused"),
            url=f"{CONTENTS}/images/x.png?ref=main",
        )
        result = await store.get("images/x.png")
        assert isinstance(result, TransportError)
        assert result.status_code is None
        assert "Connection refused" in result.message


class TestPut:
    @pytest.mark.asyncio
    async def test_sends_base64_content_and_branch(self, store, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            method="PUT",
            url=f"{CONTENTS}/images/Ab3_photo.png",
            status_code=201,
            json={"content": _file_json("images/Ab3_photo.png", sha="new", size=5), "commit": {"sha": "c1"}},
        )
        record = await store.put("images/Ab3_photo.png", b"hello", "test upload")
        assert record.sha == "new"
        assert record.size == 5

        body = json.loads(httpx_mock.get_request().content)
        assert body == {
            "message": "test upload",
            "content": base64.b64encode(b"hello").decode(),
            "branch": "main",
        }

    @pytest.mark.asyncio
    async def test_failure_passes_message_through(self, store, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            method="PUT",
            url=f"{CONTENTS}/images/Ab3_photo.png",
            status_code=422,
            json={"message": "Invalid request.\n\n\"sha\" wasn't supplied."},
        )
        with pytest.raises(ContentStoreError) as exc:
            await store.put("images/Ab3_photo.png", b"hello", "msg")
        assert exc.value.status_code == 422
        assert "sha" in exc.value.message

    @pytest.mark.asyncio
    async def test_network_error(self, store, httpx_mock: HTTPXMock):
        httpx_mock.add_exception(httpx.ReadTimeout("timed out"), url=f"{CONTENTS}/images/a_b.png")
        with pytest.raises(ContentStoreError, match="Request failed"):
            await store.put("images/a_b.png", b"x", "msg")


class TestDelete:
    @pytest.mark.asyncio
    async def test_sends_sha(self, store, httpx_mock: HTTPXMock):
        httpx_mock.add_response(method="DELETE", url=f"{CONTENTS}/images/a_b.png", json={"commit": {}})
        await store.delete("images/a_b.png", "abc123", "Deleted: images/a_b.png")
        body = json.loads(httpx_mock.get_request().content)
        assert body == {"message": "Deleted: images/a_b.png", "sha": "abc123", "branch": "main"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [404, 409])
    async def test_missing_or_stale_is_not_found(self, store, httpx_mock: HTTPXMock, status_code):
        httpx_mock.add_response(
            method="DELETE",
            url=f"{CONTENTS}/images/a_b.png",
            status_code=status_code,
            json={"message": "does not match"},
        )
        with pytest.raises(StoreObjectNotFound):
            await store.delete("images/a_b.png", "stale", "msg")

    @pytest.mark.asyncio
    async def test_server_error_propagates(self, store, httpx_mock: HTTPXMock):
        httpx_mock.add_response(method="DELETE", url=f"{CONTENTS}/images/a_b.png", status_code=500, text="boom")
        with pytest.raises(ContentStoreError) as exc:
            await store.delete("images/a_b.png", "abc", "msg")
        assert not isinstance(exc.value, StoreObjectNotFound)
        assert exc.value.status_code == 500


class TestListDirectory:
    @pytest.mark.asyncio
    async def test_returns_files_only(self, store, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            method="GET",
            url=f"{CONTENTS}/images?ref=main",
            json=[
                _file_json("images/a_1.png"),
                {"type": "dir", "name": "nested", "path": "images/nested", "sha": "d", "size": 0},
                _file_json("images/b_2.png"),
            ],
        )
        records = await store.list_directory("images")
        assert [r.name for r in records] == ["a_1.png", "b_2.png"]

    @pytest.mark.asyncio
    async def test_missing_folder_is_empty(self, store, httpx_mock: HTTPXMock):
        httpx_mock.add_response(method="GET", url=f"{CONTENTS}/videos?ref=main", status_code=404)
        assert await store.list_directory("videos") == []

    @pytest.mark.asyncio
    async def test_error_raises(self, store, httpx_mock: HTTPXMock):
        httpx_mock.add_response(method="GET", url=f"{CONTENTS}/videos?ref=main", status_code=500, text="boom")
        with pytest.raises(ContentStoreError):
            await store.list_directory("videos")
