"""HTTP-level tests against the app built with in-memory repositories."""

import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.errors import UpstreamStoreError
from app.main import create_app
from app.repositories import build_repositories
from app.services.mock_exams import MockExamService

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        settings = Settings(
            DATABASE_URL=None,
            STORAGE_URL=None,
            SEED_DEFAULT_CONTENT=False,
            BCRYPT_ROUNDS=4,
            UPLOAD_MAX_BYTES=1024,
        )
        self.repos = build_repositories(settings)
        self.client = TestClient(create_app(settings, self.repos))
        self.admin = self._register("admin", "Admin")
        self.alice = self._register("alice", "Alice")

    def _register(self, username: str, name: str) -> dict:
        resp = self.client.post(
            "/api/v1/auth/register",
            json={"username": username, "password": "password123", "name": name},
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()

    @staticmethod
    def _auth(session: dict) -> dict[str, str]:
        return {"Authorization": f"Bearer {session['access_token']}"}


class TestAuthRoutes(ApiTestCase):
    def test_register_returns_token_and_view(self) -> None:
        self.assertEqual(self.admin["token_type"], "bearer")
        self.assertEqual(self.admin["user"]["role"], "admin")
        self.assertEqual(self.admin["user"]["tier"], "premium")
        self.assertEqual(self.alice["user"]["role"], "user")
        self.assertNotIn("password_hash", self.alice["user"])

    def test_duplicate_username(self) -> None:
        resp = self.client.post(
            "/api/v1/auth/register",
            json={"username": "alice", "password": "password123", "name": "Other"},
        )
        self.assertEqual(resp.status_code, 400)

    def test_short_password_rejected(self) -> None:
        resp = self.client.post(
            "/api/v1/auth/register",
            json={"username": "bob", "password": "short", "name": "Bob"},
        )
        self.assertEqual(resp.status_code, 422)

    def test_login_and_profile(self) -> None:
        resp = self.client.post(
            "/api/v1/auth/login", json={"username": "alice", "password": "password123"}
        )
        self.assertEqual(resp.status_code, 200)
        profile = self.client.get("/api/v1/auth/profile", headers=self._auth(resp.json()))
        self.assertEqual(profile.status_code, 200)
        self.assertEqual(profile.json()["username"], "alice")
        self.assertEqual(profile.json()["visit_count"], 2)

    def test_login_failures_look_the_same(self) -> None:
        wrong = self.client.post(
            "/api/v1/auth/login", json={"username": "alice", "password": "nope-nope"}
        )
        unknown = self.client.post(
            "/api/v1/auth/login", json={"username": "ghost", "password": "nope-nope"}
        )
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.json(), unknown.json())

    def test_profile_requires_valid_token(self) -> None:
        self.assertEqual(self.client.get("/api/v1/auth/profile").status_code, 401)
        resp = self.client.get(
            "/api/v1/auth/profile", headers={"Authorization": "Bearer not-a-jwt"}
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.headers.get("WWW-Authenticate"), "Bearer")


class TestProblemRoutes(ApiTestCase):
    def _create(self, **fields) -> dict:
        resp = self.client.post("/api/v1/problems", json=fields, headers=self._auth(self.admin))
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()

    def test_create_defaults_and_list(self) -> None:
        created = self._create()
        self.assertEqual(created["title"], "New trading method")
        self.assertEqual(created["difficulty"], "normal")
        listing = self.client.get("/api/v1/problems")
        self.assertEqual(listing.status_code, 200)
        self.assertEqual([p["id"] for p in listing.json()], [created["id"]])

    def test_user_cannot_create(self) -> None:
        resp = self.client.post(
            "/api/v1/problems", json={"title": "x"}, headers=self._auth(self.alice)
        )
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(self.client.get("/api/v1/problems").json(), [])

    def test_anonymous_cannot_create(self) -> None:
        self.assertEqual(self.client.post("/api/v1/problems", json={}).status_code, 401)

    def test_locked_flag_follows_tier(self) -> None:
        gated = self._create(title="Gated", difficulty="advanced")
        url = f"/api/v1/problems/{gated['id']}"
        self.assertTrue(self.client.get(url).json()["locked"])
        self.assertTrue(self.client.get(url, headers=self._auth(self.alice)).json()["locked"])
        resp = self.client.patch(
            f"/api/v1/admin/users/{self.alice['user']['id']}/tier",
            json={"tier": "premium"},
            headers=self._auth(self.admin),
        )
        self.assertEqual(resp.status_code, 200)
        # Same token: tier is read from the live account.
        self.assertFalse(self.client.get(url, headers=self._auth(self.alice)).json()["locked"])

    def test_update_and_delete(self) -> None:
        created = self._create(title="Old", category="Trend")
        url = f"/api/v1/problems/{created['id']}"
        resp = self.client.patch(url, json={"title": "New"}, headers=self._auth(self.admin))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["title"], "New")
        self.assertEqual(resp.json()["category"], "Trend")
        first = self.client.delete(url, headers=self._auth(self.admin))
        second = self.client.delete(url, headers=self._auth(self.admin))
        self.assertEqual(first.json(), {"success": True})
        self.assertEqual(second.json(), {"success": False})
        self.assertEqual(self.client.get(url).status_code, 404)

    def test_null_title_rejected(self) -> None:
        created = self._create(title="Keep")
        resp = self.client.patch(
            f"/api/v1/problems/{created['id']}",
            json={"title": None},
            headers=self._auth(self.admin),
        )
        self.assertEqual(resp.status_code, 400)


class TestAdminRoutes(ApiTestCase):
    def test_user_forbidden(self) -> None:
        resp = self.client.get("/api/v1/admin/users", headers=self._auth(self.alice))
        self.assertEqual(resp.status_code, 403)

    def test_list_users_hides_password(self) -> None:
        resp = self.client.get("/api/v1/admin/users", headers=self._auth(self.admin))
        self.assertEqual(resp.status_code, 200)
        users = resp.json()
        self.assertEqual([u["username"] for u in users], ["alice", "admin"])
        self.assertTrue(all("password_hash" not in u for u in users))

    def test_stats_camel_case(self) -> None:
        resp = self.client.get("/api/v1/admin/stats", headers=self._auth(self.admin))
        self.assertEqual(
            resp.json(),
            {"totalUsers": 2, "adminCount": 1, "masterCount": 0, "userCount": 1, "todayVisits": 2},
        )

    def test_role_change_and_self_denial(self) -> None:
        alice_id = self.alice["user"]["id"]
        resp = self.client.patch(
            f"/api/v1/admin/users/{alice_id}/role",
            json={"role": "master"},
            headers=self._auth(self.admin),
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["role"], "master")
        resp = self.client.patch(
            f"/api/v1/admin/users/{self.admin['user']['id']}/role",
            json={"role": "user"},
            headers=self._auth(self.admin),
        )
        self.assertEqual(resp.status_code, 403)

    def test_unknown_role_rejected(self) -> None:
        resp = self.client.patch(
            f"/api/v1/admin/users/{self.alice['user']['id']}/role",
            json={"role": "superuser"},
            headers=self._auth(self.admin),
        )
        self.assertEqual(resp.status_code, 422)

    def test_delete_user(self) -> None:
        url = f"/api/v1/admin/users/{self.alice['user']['id']}"
        self.assertEqual(self.client.delete(url, headers=self._auth(self.admin)).json(), {"success": True})
        self.assertEqual(self.client.delete(url, headers=self._auth(self.admin)).status_code, 404)

    def test_deleted_user_token_rejected(self) -> None:
        self.client.delete(
            f"/api/v1/admin/users/{self.alice['user']['id']}", headers=self._auth(self.admin)
        )
        resp = self.client.get("/api/v1/auth/profile", headers=self._auth(self.alice))
        self.assertEqual(resp.status_code, 401)


class TestUploadRoute(ApiTestCase):
    def test_inline_data_url(self) -> None:
        resp = self.client.post(
            "/api/v1/upload/image",
            files={"file": ("chart.png", PNG_BYTES, "image/png")},
            headers=self._auth(self.admin),
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        self.assertTrue(resp.json()["url"].startswith("data:image/png;base64,"))

    def test_non_image_rejected(self) -> None:
        resp = self.client.post(
            "/api/v1/upload/image",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=self._auth(self.admin),
        )
        self.assertEqual(resp.status_code, 400)

    def test_oversized_rejected(self) -> None:
        resp = self.client.post(
            "/api/v1/upload/image",
            files={"file": ("big.png", b"\x00" * 4096, "image/png")},
            headers=self._auth(self.admin),
        )
        self.assertEqual(resp.status_code, 400)

    def test_missing_file(self) -> None:
        resp = self.client.post("/api/v1/upload/image", headers=self._auth(self.admin))
        self.assertEqual(resp.status_code, 400)

    def test_requires_auth(self) -> None:
        resp = self.client.post(
            "/api/v1/upload/image", files={"file": ("chart.png", PNG_BYTES, "image/png")}
        )
        self.assertEqual(resp.status_code, 401)


class TestStoreFailure(ApiTestCase):
    def test_store_error_is_opaque_500(self) -> None:
        failure = UpstreamStoreError("connection to db.internal:5432 refused")
        with patch.object(self.repos.problems, "list", side_effect=failure):
            with self.assertLogs("app.api.deps", level="ERROR") as logs:
                resp = self.client.get("/api/v1/problems")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"detail": "Storage backend error"})
        self.assertIn("db.internal:5432", logs.output[0])


class TestProblemImageCleanup(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        storage = MagicMock()
        storage.put = AsyncMock(return_value="https://cdn.example/uploads/images/new.png")
        storage.remove = AsyncMock(return_value=None)
        storage.path_from_url = MagicMock(side_effect=lambda url: url.split("/uploads/", 1)[1])
        self.repos.storage = storage
        resp = self.client.post(
            "/api/v1/problems",
            json={
                "title": "Charted",
                "thumbnail_url": "https://cdn.example/uploads/images/t.png",
                "content_image_url": "https://cdn.example/uploads/images/c.png",
            },
            headers=self._auth(self.admin),
        )
        self.url = f"/api/v1/problems/{resp.json()['id']}"

    def test_replaced_thumbnail_removed(self) -> None:
        resp = self.client.patch(
            self.url,
            json={"thumbnail_url": "https://cdn.example/uploads/images/new.png"},
            headers=self._auth(self.admin),
        )
        self.assertEqual(resp.status_code, 200)
        self.repos.storage.remove.assert_awaited_once_with("images/t.png")

    def test_cleared_image_removed(self) -> None:
        resp = self.client.patch(
            self.url, json={"content_image_url": None}, headers=self._auth(self.admin)
        )
        self.assertIsNone(resp.json()["content_image_url"])
        self.repos.storage.remove.assert_awaited_once_with("images/c.png")

    def test_title_only_update_keeps_images(self) -> None:
        self.client.patch(self.url, json={"title": "Renamed"}, headers=self._auth(self.admin))
        self.repos.storage.remove.assert_not_awaited()

    def test_delete_removes_images(self) -> None:
        resp = self.client.delete(self.url, headers=self._auth(self.admin))
        self.assertEqual(resp.json(), {"success": True})
        removed = sorted(c.args[0] for c in self.repos.storage.remove.await_args_list)
        self.assertEqual(removed, ["images/c.png", "images/t.png"])

    def test_forbidden_delete_removes_nothing(self) -> None:
        resp = self.client.delete(self.url, headers=self._auth(self.alice))
        self.assertEqual(resp.status_code, 403)
        self.repos.storage.remove.assert_not_awaited()


class TestMockExamRoutes(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        MockExamService(self.repos.mock_exams).seed_defaults()

    def test_requires_token(self) -> None:
        self.assertEqual(self.client.get("/api/v1/mock-exams").status_code, 401)

    def test_basic_user_forbidden(self) -> None:
        resp = self.client.get("/api/v1/mock-exams", headers=self._auth(self.alice))
        self.assertEqual(resp.status_code, 403)

    def test_admin_gets_sections_in_default_order(self) -> None:
        resp = self.client.get("/api/v1/mock-exams", headers=self._auth(self.admin))
        self.assertEqual(resp.status_code, 200)
        sections = resp.json()
        self.assertEqual(len(sections), 12)
        self.assertEqual([s["position"] for s in sections], list(range(1, 13)))

    def test_sort_by_name_and_frequency(self) -> None:
        by_name = self.client.get(
            "/api/v1/mock-exams", params={"sort": "name"}, headers=self._auth(self.admin)
        ).json()
        titles = [s["title"] for s in by_name]
        self.assertEqual(titles, sorted(titles, key=str.casefold))
        by_freq = self.client.get(
            "/api/v1/mock-exams", params={"sort": "frequency"}, headers=self._auth(self.admin)
        ).json()
        rank = {"high": 0, "medium": 1, "low": 2}
        ranks = [rank[s["frequency"]] for s in by_freq]
        self.assertEqual(ranks, sorted(ranks))

    def test_unknown_sort_rejected(self) -> None:
        resp = self.client.get(
            "/api/v1/mock-exams", params={"sort": "random"}, headers=self._auth(self.admin)
        )
        self.assertEqual(resp.status_code, 422)

    def test_premium_user_allowed_with_same_token(self) -> None:
        self.client.patch(
            f"/api/v1/admin/users/{self.alice['user']['id']}/tier",
            json={"tier": "premium"},
            headers=self._auth(self.admin),
        )
        resp = self.client.get("/api/v1/mock-exams", headers=self._auth(self.alice))
        self.assertEqual(resp.status_code, 200)


class TestStartupSeeding(unittest.TestCase):
    def test_lifespan_seeds_catalog_and_sections(self) -> None:
        settings = Settings(DATABASE_URL=None, STORAGE_URL=None, SEED_DEFAULT_CONTENT=True)
        repos = build_repositories(settings)
        with TestClient(create_app(settings, repos)):
            pass
        self.assertEqual(repos.problems.count(), 3)
        self.assertEqual(repos.mock_exams.count(), 12)


class TestHealth(ApiTestCase):
    def test_memory_backend(self) -> None:
        resp = self.client.get("/api/v1/health/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["backend"], "memory")
        self.assertEqual(resp.json()["database"], "connected")

    def test_root(self) -> None:
        self.assertEqual(self.client.get("/").json(), {"message": "MethodHub API"})


if __name__ == "__main__":
    unittest.main()
