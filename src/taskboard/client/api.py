"""Async HTTP client for the taskboard API."""

import logging
from typing import Any

import httpx

from taskboard.client.models import Session, Task

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, status_code: int, detail: Any) -> None:
        super().__init__(f"API request failed ({status_code}): {detail}")
        self.status_code = status_code
        self.detail = detail

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        try:
            detail = response.json().get("detail", response.text)
        except ValueError:
            detail = response.text
        return cls(response.status_code, detail)


class TasksApiClient:
    """
    Thin wrapper over the task and session endpoints.

    The access token comes from the OAuth redirect and is sent as a bearer
    token on every call. No retries: a failed call raises immediately.

    Example:
        >>> api = TasksApiClient("http://localhost:8000", access_token=token)
        >>> tasks = await api.fetch_tasks()
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        access_token: str | None = None,
        api_prefix: str = "/api",
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.access_token = access_token
        self.api_prefix = api_prefix
        self._http_client = http_client or httpx.AsyncClient(
            base_url=base_url, timeout=httpx.Timeout(10.0)
        )

    def _headers(self) -> dict[str, str]:
        if not self.access_token:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        response = await self._http_client.request(
            method, f"{self.api_prefix}{path}", headers=self._headers(), **kwargs
        )
        if response.is_error:
            raise ApiError.from_response(response)
        return response

    async def get_session(self) -> Session | None:
        """Current session, or None when there is no valid token."""
        if not self.access_token:
            return None
        try:
            response = await self._request("GET", "/auth/session")
        except ApiError as e:
            if e.status_code == 401:
                return None
            raise
        return Session.model_validate(response.json())

    async def sign_in(self) -> Session:
        """Report a completed OAuth sign-in so the server provisions the local user."""
        response = await self._request("POST", "/auth/signin")
        return Session.model_validate(response.json())

    async def sign_out(self) -> None:
        """Revoke the session server-side and forget the token."""
        try:
            await self._request("POST", "/auth/signout")
        finally:
            self.access_token = None

    async def fetch_tasks(self) -> list[Task]:
        response = await self._request("GET", "/tasks")
        return [Task.model_validate(item) for item in response.json()]

    async def create_task(self, title: str, description: str, completed: bool = False) -> Task:
        response = await self._request(
            "POST",
            "/tasks",
            json={"title": title, "description": description, "completed": completed},
        )
        return Task.model_validate(response.json())

    async def update_task(self, task_id: str, **changes: Any) -> Task:
        """Send only the given fields; the server leaves the others untouched."""
        response = await self._request("PATCH", f"/tasks/{task_id}", json=changes)
        return Task.model_validate(response.json())

    async def toggle_task_completion(self, task_id: str, completed: bool) -> Task:
        return await self.update_task(task_id, completed=completed)

    async def delete_task(self, task_id: str) -> None:
        await self._request("DELETE", f"/tasks/{task_id}")

    async def close(self) -> None:
        await self._http_client.aclose()
