"""Object storage for uploaded images: Supabase-compatible REST storage, or inline data URLs."""

from __future__ import annotations

import base64
import json
import re
from abc import ABC, abstractmethod
from urllib.parse import quote, unquote

import httpx


class StorageError(Exception):
    """Raised when the storage provider rejects a request or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ObjectStorage(ABC):
    """Blob store returning publicly dereferenceable URLs."""

    @abstractmethod
    async def put(self, path: str, data: bytes, content_type: str) -> str:
        """Store data under path; return its public URL."""

    @abstractmethod
    async def remove(self, path: str) -> None:
        pass

    @abstractmethod
    def path_from_url(self, url: str) -> str | None:
        """Storage path for a URL this store produced, or None if it cannot be parsed."""


def _error_detail(resp: httpx.Response) -> str:
    try:
        body = resp.json()
        detail = body.get("message") or body.get("error") or json.dumps(body)[:500]
    except Exception:
        detail = resp.text[:500] if resp.text else "Unknown error"
    return f"Storage returned {resp.status_code}: {detail}"


class SupabaseStorage(ObjectStorage):
    """Storage REST API: POST /storage/v1/object/{bucket}/{path}, public URLs under /object/public."""

    def __init__(
        self,
        base_url: str,
        service_key: str,
        bucket: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.bucket = bucket
        self.timeout = timeout
        self._service_key = service_key
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        headers = {
            "Authorization": f"Bearer {self._service_key}",
            "apikey": self._service_key,
        }
        return httpx.AsyncClient(headers=headers, transport=self._transport)

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{quote(path)}"

    async def put(self, path: str, data: bytes, content_type: str) -> str:
        url = f"{self.base_url}/storage/v1/object/{self.bucket}/{quote(path)}"
        try:
            async with self._client() as client:
                resp = await client.post(
                    url,
                    content=data,
                    headers={"Content-Type": content_type, "x-upsert": "false"},
                    timeout=self.timeout,
                )
        except httpx.TimeoutException as e:
            raise StorageError("Storage request timed out.") from e
        except httpx.HTTPError as e:
            raise StorageError(f"Storage unreachable: {e!s}") from e
        if resp.status_code >= 400:
            raise StorageError(_error_detail(resp), resp.status_code)
        return self.public_url(path)

    async def remove(self, path: str) -> None:
        url = f"{self.base_url}/storage/v1/object/{self.bucket}"
        try:
            async with self._client() as client:
                resp = await client.request(
                    "DELETE", url, json={"prefixes": [path]}, timeout=self.timeout
                )
        except httpx.HTTPError as e:
            raise StorageError(f"Storage unreachable: {e!s}") from e
        if resp.status_code >= 400:
            raise StorageError(_error_detail(resp), resp.status_code)

    def path_from_url(self, url: str) -> str | None:
        match = re.search(rf"/{re.escape(self.bucket)}/(.+)$", url or "")
        return unquote(match.group(1)) if match else None


class InlineStorage(ObjectStorage):
    """No external store configured: the image itself becomes a base64 data URL."""

    async def put(self, path: str, data: bytes, content_type: str) -> str:
        encoded = base64.b64encode(data).decode("ascii")
        return f"data:{content_type};base64,{encoded}"

    async def remove(self, path: str) -> None:
        return None

    def path_from_url(self, url: str) -> str | None:
        return None
