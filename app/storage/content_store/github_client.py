import base64
from typing import Any, Dict, List
from urllib.parse import quote

import httpx

from app.core.logger import logger
from app.core.settings import Settings
from .types import (
    ContentStoreError,
    Found,
    LookupResult,
    NotFound,
    RemoteObjectRecord,
    StoreObjectNotFound,
    TransportError,
)


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return resp.text[:500] or resp.reason_phrase


class ContentStoreClient:
    """Thin client over the GitHub contents API for one owner/repo/branch.

    Every path is relative to the repository root. The namespace is fixed by
    settings and is never a call parameter.
    """

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None) -> None:
        self._owner = settings.GITHUB_USERNAME
        self._repo = settings.GITHUB_REPO
        self._branch = settings.REPO_BRANCH
        self._cdn_base = settings.CDN_API_URL
        self._contents_url = f"{settings.GITHUB_API_URL}/repos/{self._owner}/{self._repo}/contents"
        token = settings.GITHUB_TOKEN.get_secret_value()
        headers = {"Accept": "application/vnd.github+json"}
        if token:
            headers["Authorization"] = f"token {token}"
        self._client = http_client or httpx.AsyncClient(headers=headers, timeout=settings.STORE_TIMEOUT_SEC)

    def _url(self, path: str) -> str:
        return f"{self._contents_url}/{quote(path.strip('/'), safe='/')}"

    def public_url(self, path: str) -> str:
        return f"{self._cdn_base}/{self._owner}/{self._repo}@{self._branch}/{path.lstrip('/')}"

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, path: str) -> LookupResult:
        """Fetch the record at `path`; 404 comes back as `NotFound`, never raised."""
        try:
            resp = await self._client.get(self._url(path), params={"ref": self._branch})
        except httpx.RequestError as e:
            logger.error("[ContentStore] get %s request failed: %s", path, e)
            return TransportError(status_code=None, message=f"Request failed: {e}")

        if resp.status_code == 404:
            return NotFound(path=path)
        if resp.is_error:
            msg = _error_message(resp)
            logger.error("[ContentStore] get %s -> %s %s", path, resp.status_code, msg)
            return TransportError(status_code=resp.status_code, message=msg)

        data = resp.json()
        if not isinstance(data, dict):
            # a directory listing lives at this path, not a file
            return NotFound(path=path)
        return Found(record=RemoteObjectRecord.from_api(data))

    async def put(self, path: str, content: bytes, message: str) -> RemoteObjectRecord:
        """Create the object at `path` with `content` base64-encoded on the wire."""
        body = {
            "message": message,
            "content": base64.b64encode(content).decode("ascii"),
            "branch": self._branch,
        }
        resp = await self._send("PUT", path, body)
        return RemoteObjectRecord.from_api(resp.json()["content"])

    async def delete(self, path: str, sha: str, message: str) -> None:
        body = {"message": message, "sha": sha, "branch": self._branch}
        try:
            await self._send("DELETE", path, body)
        except ContentStoreError as e:
            if e.status_code in (404, 409):
                raise StoreObjectNotFound(e.message, status_code=e.status_code) from e
            raise

    async def list_directory(self, folder: str) -> List[RemoteObjectRecord]:
        """File entries directly under `folder`; a missing folder is empty."""
        try:
            resp = await self._client.get(self._url(folder), params={"ref": self._branch})
        except httpx.RequestError as e:
            raise ContentStoreError(f"Request failed: {e}") from e
        if resp.status_code == 404:
            return []
        if resp.is_error:
            raise ContentStoreError(_error_message(resp), status_code=resp.status_code)

        data = resp.json()
        if not isinstance(data, list):
            return []
        return [RemoteObjectRecord.from_api(item) for item in data if item.get("type", "file") == "file"]

    async def _send(self, method: str, path: str, body: Dict[str, Any]) -> httpx.Response:
        try:
            resp = await self._client.request(method, self._url(path), json=body)
        except httpx.RequestError as e:
            logger.error("[ContentStore] %s %s request failed: %s", method, path, e)
            raise ContentStoreError(f"Request failed: {e}") from e
        if resp.is_error:
            msg = _error_message(resp)
            logger.error("[ContentStore] %s %s -> %s %s", method, path, resp.status_code, msg)
            raise ContentStoreError(msg, status_code=resp.status_code)
        return resp
