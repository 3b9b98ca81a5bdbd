"""Unit tests for app.services.upload and the object storage backends."""

import asyncio
import base64
import json
import unittest
from unittest.mock import AsyncMock, MagicMock

import httpx

from app.core.errors import UploadFailed, ValidationError
from app.repositories.objects import InlineStorage, StorageError, SupabaseStorage
from app.services.upload import UploadService

MB = 1024 * 1024
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _mock_storage() -> MagicMock:
    storage = MagicMock()
    storage.put = AsyncMock(return_value="https://cdn.example/uploads/images/x.png")
    storage.remove = AsyncMock(return_value=None)
    storage.path_from_url = MagicMock(return_value="images/x.png")
    return storage


class TestStoreValidation(unittest.TestCase):
    def test_oversized_file_rejected_before_storage(self) -> None:
        storage = _mock_storage()
        service = UploadService(storage, max_bytes=5 * MB)
        with self.assertRaises(ValidationError):
            asyncio.run(service.store(b"\x00" * (10 * MB), "big.png", "image/png"))
        storage.put.assert_not_called()

    def test_non_image_rejected_before_storage(self) -> None:
        storage = _mock_storage()
        service = UploadService(storage, max_bytes=5 * MB)
        for mime in ("application/pdf", "image/svg+xml", "text/plain", None):
            with self.assertRaises(ValidationError):
                asyncio.run(service.store(b"data", "file.bin", mime))
        storage.put.assert_not_called()

    def test_empty_file_rejected(self) -> None:
        service = UploadService(_mock_storage(), max_bytes=5 * MB)
        with self.assertRaises(ValidationError):
            asyncio.run(service.store(b"", "empty.png", "image/png"))


class TestStore(unittest.TestCase):
    def test_returns_storage_url_and_uses_images_folder(self) -> None:
        storage = _mock_storage()
        service = UploadService(storage, max_bytes=5 * MB)
        url = asyncio.run(service.store(PNG_BYTES, "../../chart 1.png", "image/png"))
        self.assertEqual(url, "https://cdn.example/uploads/images/x.png")
        path, data, content_type = storage.put.call_args.args
        self.assertTrue(path.startswith("images/"))
        self.assertTrue(path.endswith("-chart_1.png"))
        self.assertNotIn("..", path)
        self.assertEqual(data, PNG_BYTES)
        self.assertEqual(content_type, "image/png")

    def test_storage_error_wrapped(self) -> None:
        storage = _mock_storage()
        storage.put.side_effect = StorageError("Storage returned 409: Duplicate", 409)
        service = UploadService(storage, max_bytes=5 * MB)
        with self.assertRaises(UploadFailed) as ctx:
            asyncio.run(service.store(PNG_BYTES, "a.png", "image/png"))
        self.assertEqual(ctx.exception.message, "Upload failed: Storage returned 409: Duplicate")

    def test_inline_storage_makes_data_url(self) -> None:
        service = UploadService(InlineStorage(), max_bytes=5 * MB)
        url = asyncio.run(service.store(PNG_BYTES, "a.png", "image/png"))
        self.assertEqual(url, "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode())


class TestDelete(unittest.TestCase):
    def test_unparseable_url_is_noop(self) -> None:
        storage = _mock_storage()
        storage.path_from_url.return_value = None
        asyncio.run(UploadService(storage, max_bytes=MB).delete("https://elsewhere.example/a.png"))
        storage.remove.assert_not_called()

    def test_removes_parsed_path(self) -> None:
        storage = _mock_storage()
        asyncio.run(UploadService(storage, max_bytes=MB).delete("https://cdn.example/uploads/images/x.png"))
        storage.remove.assert_awaited_once_with("images/x.png")

    def test_storage_failure_is_not_raised(self) -> None:
        storage = _mock_storage()
        storage.remove.side_effect = StorageError("Storage unreachable: boom")
        asyncio.run(UploadService(storage, max_bytes=MB).delete("https://cdn.example/uploads/images/x.png"))
        storage.remove.assert_awaited_once()


class TestSupabaseStorage(unittest.TestCase):
    """SupabaseStorage against httpx.MockTransport."""

    def _storage(self, handler) -> SupabaseStorage:
        return SupabaseStorage(
            base_url="https://proj.supabase.co/",
            service_key="service-key",
            bucket="uploads",
            transport=httpx.MockTransport(handler),
        )

    def test_put_posts_object_and_returns_public_url(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"Key": "uploads/images/1-a.png"})

        url = asyncio.run(self._storage(handler).put("images/1-a.png", PNG_BYTES, "image/png"))
        self.assertEqual(
            url, "https://proj.supabase.co/storage/v1/object/public/uploads/images/1-a.png"
        )
        request = seen[0]
        self.assertEqual(request.method, "POST")
        self.assertEqual(request.url.path, "/storage/v1/object/uploads/images/1-a.png")
        self.assertEqual(request.headers["Authorization"], "Bearer service-key")
        self.assertEqual(request.headers["Content-Type"], "image/png")
        self.assertEqual(request.content, PNG_BYTES)

    def test_put_error_carries_provider_message(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"message": "Bucket not found"})

        with self.assertRaises(StorageError) as ctx:
            asyncio.run(self._storage(handler).put("images/a.png", PNG_BYTES, "image/png"))
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertIn("Bucket not found", ctx.exception.message)

    def test_put_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with self.assertRaises(StorageError) as ctx:
            asyncio.run(self._storage(handler).put("images/a.png", PNG_BYTES, "image/png"))
        self.assertIn("unreachable", ctx.exception.message)

    def test_remove_sends_prefixes(self) -> None:
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json=[])

        asyncio.run(self._storage(handler).remove("images/a.png"))
        self.assertEqual(bodies, [{"prefixes": ["images/a.png"]}])

    def test_path_from_url(self) -> None:
        storage = self._storage(lambda r: httpx.Response(200))
        self.assertEqual(
            storage.path_from_url(storage.public_url("images/1-my chart.png")),
            "images/1-my chart.png",
        )
        self.assertIsNone(storage.path_from_url("https://elsewhere.example/a.png"))


if __name__ == "__main__":
    unittest.main()
