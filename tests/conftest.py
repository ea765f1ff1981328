"""Test fixtures for AsanaChat."""

from collections.abc import Callable
from datetime import UTC, date, datetime
from types import TracebackType
from typing import Any

import pytest

from asana_chat.api.models import Assignee, Project, Task, Workspace
from asana_chat.config import Config
from asana_chat.oauth.manager import OAuthTokenManager
from asana_chat.oauth.token_store import InMemoryTokenStore

NOW = datetime(2024, 6, 10, 12, 0, tzinfo=UTC)


class FakeAsanaClient:
    """In-memory stand-in for AsanaClient."""

    def __init__(
        self,
        workspaces: list[Workspace] | None = None,
        projects: list[Project] | None = None,
        tasks: dict[str, list[Task]] | None = None,
    ) -> None:
        self.workspaces = workspaces if workspaces is not None else [Workspace(id="ws1")]
        self.projects = projects or []
        self.tasks = tasks or {}
        self.failing: set[str] = set()
        self.calls: list[tuple[str, Any]] = []
        self.closed = False

    async def __aenter__(self) -> "FakeAsanaClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.closed = True

    def _record(self, method: str, args: Any) -> None:
        self.calls.append((method, args))
        if method in self.failing:
            raise RuntimeError(f"{method} failed")

    async def list_workspaces(self) -> list[Workspace]:
        self._record("list_workspaces", None)
        return self.workspaces

    async def list_projects(self, workspace_id: str) -> list[Project]:
        self._record("list_projects", workspace_id)
        return self.projects

    async def list_project_tasks(self, project_id: str) -> list[Task]:
        self._record("list_project_tasks", project_id)
        return self.tasks.get(project_id, [])

    async def create_task(self, payload: dict[str, Any]) -> Task:
        self._record("create_task", payload)
        return Task(id="new-task", name=payload["name"])

    async def update_task(self, task_id: str, fields: dict[str, Any]) -> Task:
        self._record("update_task", (task_id, fields))
        return Task(id=task_id, name="updated")

    async def delete_task(self, task_id: str) -> None:
        self._record("delete_task", task_id)


@pytest.fixture
def config() -> Config:
    """Create test config."""
    return Config(
        asana_client_id="client-123",
        asana_client_secret="secret-456",
        base_url="https://chat.example.com",
        redis_url=None,
    )


@pytest.fixture
def token_store() -> InMemoryTokenStore:
    """Token store with one connected user (u1)."""
    return InMemoryTokenStore({"u1": "token-u1"})


@pytest.fixture
def oauth_manager(config: Config, token_store: InMemoryTokenStore) -> OAuthTokenManager:
    return OAuthTokenManager(config, token_store)


@pytest.fixture
def launch_project() -> Project:
    return Project(id="p1", name="Launch")


@pytest.fixture
def fake_client(launch_project: Project) -> FakeAsanaClient:
    """Asana client with a Launch project holding mixed tasks."""
    tasks = [
        Task(id="t1", name="A"),
        Task(
            id="t2",
            name="Write announcement",
            due_on=date(2024, 6, 8),
            assignee=Assignee(id="u9", name="Alice"),
        ),
        Task(
            id="t3",
            name="Ship build",
            completed=True,
            completed_at=datetime(2024, 6, 9, 8, 0, tzinfo=UTC),
        ),
    ]
    return FakeAsanaClient(
        projects=[Project(id="p0", name="Marketing"), launch_project],
        tasks={launch_project.id: tasks},
    )


@pytest.fixture
def client_factory(fake_client: FakeAsanaClient) -> Callable[[str], FakeAsanaClient]:
    """Factory handing out the fake client and recording the tokens it was given."""
    tokens: list[str] = []

    def factory(access_token: str) -> FakeAsanaClient:
        tokens.append(access_token)
        return fake_client

    factory.tokens = tokens  # type: ignore[attr-defined]
    return factory
