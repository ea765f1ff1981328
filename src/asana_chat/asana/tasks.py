"""Task and project accessors that turn remote failures into null results."""

import logging
from datetime import datetime
from typing import Any

from asana_chat.api.models import Project, Task
from asana_chat.asana.client import ProjectServiceClient
from asana_chat.chat.status import StatusFilter, matches

logger = logging.getLogger(__name__)


async def get_user_workspace(client: ProjectServiceClient) -> str | None:
    """Return the id of the first workspace visible to the client's token.

    Only one workspace per user is supported.
    """
    try:
        workspaces = await client.list_workspaces()
    except Exception as e:
        logger.error(f"[Asana] Error fetching user workspace: {e}")
        return None
    return workspaces[0].id if workspaces else None


async def get_projects(client: ProjectServiceClient, workspace_id: str) -> list[Project]:
    """List projects in the workspace, empty on failure."""
    try:
        return await client.list_projects(workspace_id)
    except Exception as e:
        logger.error(f"[Asana] Error fetching projects for workspace {workspace_id}: {e}")
        return []


async def get_project_by_name(
    client: ProjectServiceClient, workspace_id: str, project_name: str
) -> Project | None:
    """Find a project by case-insensitive exact name.

    With duplicate names the first project in Asana's listing order wins.
    """
    wanted = project_name.lower()
    for project in await get_projects(client, workspace_id):
        if project.name.lower() == wanted:
            return project
    return None


async def create_task(
    client: ProjectServiceClient,
    workspace_id: str,
    project_id: str,
    name: str,
    notes: str | None = None,
    due_on: str | None = None,
    assignee: str | None = None,
) -> Task | None:
    """Create a task in the project; None on failure."""
    payload: dict[str, Any] = {
        "name": name,
        "projects": [project_id],
        "workspace": workspace_id,
    }
    optional = {"notes": notes, "due_on": due_on, "assignee": assignee}
    payload.update({key: value for key, value in optional.items() if value is not None})

    try:
        task = await client.create_task(payload)
    except Exception as e:
        logger.error(f"[Asana] Error creating task '{name}' in project {project_id}: {e}")
        return None
    logger.info(f"[Asana] Created task {task.id} in project {project_id}")
    return task


async def update_task(
    client: ProjectServiceClient, task_id: str, fields: dict[str, str]
) -> Task | None:
    """Apply the fields verbatim as the update payload; None on failure."""
    try:
        return await client.update_task(task_id, dict(fields))
    except Exception as e:
        logger.error(f"[Asana] Error updating task {task_id}: {e}")
        return None


async def delete_task(client: ProjectServiceClient, task_id: str) -> bool:
    """Delete a task; False on failure."""
    try:
        await client.delete_task(task_id)
    except Exception as e:
        logger.error(f"[Asana] Error deleting task {task_id}: {e}")
        return False
    return True


async def get_tasks_by_project_and_status(
    client: ProjectServiceClient,
    project_id: str,
    status: StatusFilter | None,
    now: datetime,
) -> list[Task] | None:
    """Fetch all tasks of the project and keep those matching the status.

    Returns:
        Matching tasks, or None if the fetch failed
    """
    try:
        tasks = await client.list_project_tasks(project_id)
    except Exception as e:
        logger.error(f"[Asana] Error fetching tasks for project {project_id}: {e}")
        return None

    if status is None:
        return tasks
    return [task for task in tasks if matches(task, status, now)]
