"""
client/api_client.py -- requests-based client for the Taskboard REST API.

The session lives in the "jwt" httpOnly cookie, so the client keeps one
requests.Session for its lifetime and lets its cookie jar carry the token.
Callers never see or handle the token.

Unauthorized handling: whoever owns the session state passes an
on_unauthorized callback at construction. Every 401 response invokes it
before the ApiError is raised, so the owner can drop its cached user. There
is no global event bus.

Usage:
    client = TaskApiClient("http://localhost:8000/api", on_unauthorized=state.clear)
    client.login("ada@x.com", "secret1")
    page = client.list_tasks(status="todo", page=2)
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import requests

logger = logging.getLogger("taskboard.client")


class ApiError(Exception):
    """A non-2xx response from the API, carrying its message and field errors."""

    def __init__(self, status_code: int, message: str, field_errors: Optional[dict[str, str]] = None) -> None:
        self.status_code = status_code
        self.message = message
        self.field_errors = field_errors or {}
        super().__init__(f"{status_code}: {message}")

    @classmethod
    def from_response(cls, resp: requests.Response) -> "ApiError":
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        return cls(
            resp.status_code,
            body.get("message") or resp.reason or "Request failed",
            body.get("fieldErrors"),
        )


class TaskApiClient:
    def __init__(
        self,
        base_url: str,
        on_unauthorized: Optional[Callable[[], None]] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 10,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._on_unauthorized = on_unauthorized
        self._session = session or requests.Session()
        self._session.headers.setdefault("Content-Type", "application/json")
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        resp = self._session.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        if resp.status_code == 401 and self._on_unauthorized is not None:
            self._on_unauthorized()
        if not resp.ok:
            raise ApiError.from_response(resp)
        return resp.json() if resp.content else None

    # ------------------------------------------------------------------
    # Auth and profile
    # ------------------------------------------------------------------

    def register(self, name: str, email: str, password: str) -> dict:
        return self._request("POST", "/auth/register", json={"name": name, "email": email, "password": password})

    def login(self, email: str, password: str) -> dict:
        return self._request("POST", "/auth/login", json={"email": email, "password": password})

    def logout(self) -> None:
        self._request("POST", "/auth/logout")

    def get_profile(self) -> dict:
        return self._request("GET", "/users/me")

    def update_profile(
        self,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> dict:
        body = {k: v for k, v in {"name": name, "email": email, "password": password}.items() if v}
        return self._request("PUT", "/users/me", json=body)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def list_tasks(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        sort: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> dict:
        """Fetch one page of tasks.

        Mirrors the server's precedence: a search term makes sort irrelevant,
        so sort is not sent alongside one.
        """
        params: dict[str, Any] = {"page": page, "limit": limit}
        if status:
            params["status"] = status
        if search:
            params["search"] = search
        elif sort:
            params["sort"] = sort
        return self._request("GET", "/tasks", params=params)

    def create_task(self, title: str, **fields: Any) -> dict:
        return self._request("POST", "/tasks", json={"title": title, **fields})

    def get_task(self, task_id: int) -> dict:
        return self._request("GET", f"/tasks/{task_id}")

    def update_task(self, task_id: int, **fields: Any) -> dict:
        return self._request("PUT", f"/tasks/{task_id}", json=fields)

    def delete_task(self, task_id: int) -> dict:
        return self._request("DELETE", f"/tasks/{task_id}")

    def close(self) -> None:
        self._session.close()
