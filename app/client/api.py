"""HTTP client for the MethodHub API. Keeps its SessionContext in sync with login/logout."""

from __future__ import annotations

from typing import Any

import httpx

from app.client.session import SessionContext
from app.core.enums import Difficulty, SectionSort
from app.schemas.account import AccountStats, AccountSummary, Profile
from app.schemas.auth import TokenResponse
from app.schemas.mock_exam import MockExamSection
from app.schemas.problem import Problem, ProblemDetail
from app.services.mock_exams import default_sections, sort_sections
from app.services.policy import can_view_content

DEFAULT_TIMEOUT_SEC = 30.0


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _error_message(resp: httpx.Response) -> str:
    try:
        detail = resp.json().get("detail")
    except Exception:
        detail = None
    if isinstance(detail, str) and detail:
        return detail
    if detail:
        return str(detail)[:500]
    return resp.text[:500] if resp.text else f"HTTP {resp.status_code}"


class MethodHubClient:
    def __init__(
        self,
        base_url: str,
        session: SessionContext,
        api_prefix: str = "/api/v1",
        timeout: float = DEFAULT_TIMEOUT_SEC,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.session = session
        self._http = httpx.Client(
            base_url=base_url.rstrip("/") + api_prefix,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> MethodHubClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _request(self, method: str, path: str, auth: bool = True, **kwargs: Any) -> Any:
        headers = kwargs.pop("headers", {})
        if auth and self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        resp = self._http.request(method, path, headers=headers, **kwargs)
        if resp.status_code >= 400:
            raise ApiError(_error_message(resp), resp.status_code)
        return resp.json() if resp.content else None

    # Auth

    def _start_session(self, data: dict[str, Any]) -> None:
        token = TokenResponse.model_validate(data)
        self.session.set(token.access_token, token.user)
        self.session.save()

    def login(self, username: str, password: str) -> None:
        data = self._request(
            "POST", "/auth/login", auth=False, json={"username": username, "password": password}
        )
        self._start_session(data)

    def register(self, username: str, password: str, name: str) -> None:
        data = self._request(
            "POST",
            "/auth/register",
            auth=False,
            json={"username": username, "password": password, "name": name},
        )
        self._start_session(data)

    def logout(self) -> None:
        self.session.clear()

    def profile(self) -> Profile:
        return Profile.model_validate(self._request("GET", "/auth/profile"))

    # Catalog

    def list_problems(self, difficulty: Difficulty | str | None = None) -> list[Problem]:
        """Catalog entries, newest first; with difficulty, only entries carrying that tag."""
        data = self._request("GET", "/problems", auth=False)
        problems = [Problem.model_validate(p) for p in data]
        if difficulty is None:
            return problems
        wanted = Difficulty(difficulty)
        return [p for p in problems if p.difficulty is wanted]

    def get_problem(self, problem_id: str) -> ProblemDetail:
        return ProblemDetail.model_validate(self._request("GET", f"/problems/{problem_id}"))

    def is_locked(self, problem: Problem) -> bool:
        """Whether the detail view should show the locked affordance instead of the body."""
        return not can_view_content(self.session.actor, Difficulty(problem.difficulty)).allowed

    def create_problem(self, **fields: Any) -> Problem:
        return Problem.model_validate(self._request("POST", "/problems", json=fields))

    def update_problem(self, problem_id: str, **fields: Any) -> Problem:
        return Problem.model_validate(
            self._request("PATCH", f"/problems/{problem_id}", json=fields)
        )

    def delete_problem(self, problem_id: str) -> bool:
        return bool(self._request("DELETE", f"/problems/{problem_id}")["success"])

    # Mock exams

    def list_mock_exams(
        self, sort: SectionSort | str = SectionSort.DEFAULT
    ) -> list[MockExamSection]:
        """
        Mock-exam sections in the requested order. Raises ApiError (401/403) when the
        session may not see them; falls back to the built-in sections when none are stored.
        """
        order = SectionSort(sort)
        data = self._request("GET", "/mock-exams", params={"sort": order.value})
        if not data:
            return sort_sections(default_sections(), order)
        return [MockExamSection.model_validate(s) for s in data]

    # Admin

    def list_users(self) -> list[AccountSummary]:
        return [AccountSummary.model_validate(u) for u in self._request("GET", "/admin/users")]

    def stats(self) -> AccountStats:
        return AccountStats.model_validate(self._request("GET", "/admin/stats"))

    def update_role(self, user_id: str, role: str) -> AccountSummary:
        return AccountSummary.model_validate(
            self._request("PATCH", f"/admin/users/{user_id}/role", json={"role": role})
        )

    def update_tier(self, user_id: str, tier: str) -> AccountSummary:
        return AccountSummary.model_validate(
            self._request("PATCH", f"/admin/users/{user_id}/tier", json={"tier": tier})
        )

    def delete_user(self, user_id: str) -> bool:
        return bool(self._request("DELETE", f"/admin/users/{user_id}")["success"])

    # Uploads

    def upload_image(self, filename: str, data: bytes, content_type: str) -> str:
        data = self._request(
            "POST", "/upload/image", files={"file": (filename, data, content_type)}
        )
        return data["url"]
