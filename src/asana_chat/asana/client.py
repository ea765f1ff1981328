"""HTTP client for the Asana REST API."""

import logging
from collections.abc import Callable
from types import TracebackType
from typing import Any, Protocol

import httpx

from asana_chat.api.models import Project, Task, Workspace
from asana_chat.config import Config

logger = logging.getLogger(__name__)

TASK_OPT_FIELDS = (
    "name,completed,completed_at,due_on,notes,assignee.name,created_at,modified_at,tags.name"
)


class AsanaAPIError(Exception):
    """Asana answered with a non-success status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Asana API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class ProjectServiceClient(Protocol):
    """Protocol for the remote project-management service."""

    async def list_workspaces(self) -> list[Workspace]:
        """List workspaces visible to the token."""
        ...

    async def list_projects(self, workspace_id: str) -> list[Project]:
        """List projects in a workspace."""
        ...

    async def list_project_tasks(self, project_id: str) -> list[Task]:
        """List all tasks of a project."""
        ...

    async def create_task(self, payload: dict[str, Any]) -> Task:
        """Create a task."""
        ...

    async def update_task(self, task_id: str, fields: dict[str, Any]) -> Task:
        """Update fields of a task."""
        ...

    async def delete_task(self, task_id: str) -> None:
        """Delete a task."""
        ...


class AsanaClient:
    """Asana client bound to a single access token.

    A fresh client is built for every request so one user's token can never
    be used for another user's call.
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = "https://app.asana.com/api/1.0",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize with the caller's access token."""
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "AsanaClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    async def list_workspaces(self) -> list[Workspace]:
        data = await self._request("GET", "/workspaces")
        return [Workspace.from_api(item) for item in data]

    async def list_projects(self, workspace_id: str) -> list[Project]:
        data = await self._request("GET", "/projects", params={"workspace": workspace_id})
        return [Project.from_api(item) for item in data]

    async def list_project_tasks(self, project_id: str) -> list[Task]:
        data = await self._request(
            "GET", f"/projects/{project_id}/tasks", params={"opt_fields": TASK_OPT_FIELDS}
        )
        return [Task.from_api(item) for item in data]

    async def create_task(self, payload: dict[str, Any]) -> Task:
        data = await self._request("POST", "/tasks", json={"data": payload})
        return Task.from_api(data)

    async def update_task(self, task_id: str, fields: dict[str, Any]) -> Task:
        data = await self._request("PUT", f"/tasks/{task_id}", json={"data": fields})
        return Task.from_api(data)

    async def delete_task(self, task_id: str) -> None:
        await self._request("DELETE", f"/tasks/{task_id}")

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and unwrap the {"data": ...} envelope.

        Raises:
            AsanaAPIError: If Asana returns a non-success status
            httpx.HTTPError: If the request could not be sent
        """
        response = await self._client.request(method, path, params=params, json=json)
        if not response.is_success:
            raise AsanaAPIError(response.status_code, _error_message(response))
        if not response.content:
            return None
        return response.json().get("data")


def _error_message(response: httpx.Response) -> str:
    """Extract the first message from Asana's {"errors": [...]} envelope."""
    try:
        errors = response.json().get("errors") or []
    except ValueError:
        return response.text or response.reason_phrase
    if errors and isinstance(errors[0], dict):
        return str(errors[0].get("message", response.reason_phrase))
    return response.reason_phrase


def create_asana_client_factory(config: Config) -> Callable[[str], AsanaClient]:
    """Create a factory function for Asana clients.

    Returns a callable that builds a new AsanaClient for a given access token.
    Each call returns a fresh client for use in an async context manager.
    """

    def factory(access_token: str) -> AsanaClient:
        return AsanaClient(
            access_token,
            base_url=config.api_base_url,
            timeout=config.http_timeout,
        )

    return factory
