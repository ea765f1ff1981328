"""Routes parsed chat commands to Asana and renders plain-text replies."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from asana_chat.api.models import Task
from asana_chat.asana import tasks as asana_tasks
from asana_chat.asana.client import AsanaClient, ProjectServiceClient
from asana_chat.chat.parser import (
    ConnectRequest,
    CreateTask,
    DeleteTask,
    ListTasks,
    ParsedCommand,
    Unrecognized,
    UpdateTask,
    parse,
)
from asana_chat.chat.status import StatusFilter
from asana_chat.oauth.manager import OAuthTokenManager

logger = logging.getLogger(__name__)

CONNECT_INSTRUCTION = 'Please connect your Asana account by typing "connect Asana".'
WORKSPACE_UNRESOLVED = (
    "Unable to determine your Asana workspace. Please check your account settings."
)
NOT_UNDERSTOOD = "I'm sorry, I didn't understand that command. Please try again."
UNEXPECTED_ERROR = "Something went wrong while talking to Asana. Please try again."


def utc_now() -> datetime:
    return datetime.now(UTC)


class Dispatcher:
    """Handles one chat message per call; holds no per-user state."""

    def __init__(
        self,
        oauth: OAuthTokenManager,
        client_factory: Callable[[str], AsanaClient],
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize dispatcher.

        Args:
            oauth: Token manager used for token lookup and authorization URLs
            client_factory: Builds an Asana client for an access token
            clock: Returns the current time for status filtering
        """
        self._oauth = oauth
        self._client_factory = client_factory
        self._clock = clock

    async def handle_message(self, message: str, user_id: str) -> str:
        """Handle a raw chat message and return the reply text. Never raises."""
        try:
            return await self._handle(message, user_id)
        except Exception as e:
            logger.exception(f"[Dispatcher] Unexpected error for user {user_id}: {e}")
            return UNEXPECTED_ERROR

    async def _handle(self, message: str, user_id: str) -> str:
        access_token = await self._oauth.get_token(user_id)
        if not access_token:
            logger.info(f"[Dispatcher] No Asana token for user {user_id}")
            return CONNECT_INSTRUCTION

        async with self._client_factory(access_token) as client:
            workspace_id = await asana_tasks.get_user_workspace(client)
            if not workspace_id:
                return WORKSPACE_UNRESOLVED

            command = parse(message)
            logger.info(f"[Dispatcher] User {user_id}: {type(command).__name__}")
            return await self._dispatch(command, client, workspace_id, user_id)

    async def _dispatch(
        self,
        command: ParsedCommand,
        client: ProjectServiceClient,
        workspace_id: str,
        user_id: str,
    ) -> str:
        match command:
            case ConnectRequest():
                auth_url = self._oauth.build_authorization_url(user_id)
                return f"Please click this link to connect your Asana account: {auth_url}"

            case CreateTask():
                project = await asana_tasks.get_project_by_name(
                    client, workspace_id, command.project_name
                )
                if not project:
                    return f'Project "{command.project_name}" not found.'
                task = await asana_tasks.create_task(
                    client,
                    workspace_id,
                    project.id,
                    command.name,
                    notes=command.notes,
                    due_on=command.due_on,
                    assignee=command.assignee,
                )
                if not task:
                    return f'Failed to create task "{command.name}".'
                return (
                    f'Task "{command.name}" created successfully in project '
                    f'"{command.project_name}".'
                )

            case UpdateTask():
                updated = await asana_tasks.update_task(client, command.task_id, command.fields)
                if not updated:
                    return f"Failed to update task {command.task_id}."
                return f"Task {command.task_id} updated successfully."

            case DeleteTask():
                if not await asana_tasks.delete_task(client, command.task_id):
                    return f"Failed to delete task {command.task_id}."
                return f"Task {command.task_id} deleted successfully."

            case ListTasks():
                project = await asana_tasks.get_project_by_name(
                    client, workspace_id, command.project_name
                )
                if not project:
                    return f'Project "{command.project_name}" not found.'
                tasks = await asana_tasks.get_tasks_by_project_and_status(
                    client, project.id, command.status_filter, self._clock()
                )
                if tasks is None:
                    return f'Failed to fetch tasks for project "{command.project_name}".'
                return render_task_list(tasks, command.project_name, command.status_filter)

            case Unrecognized():
                return NOT_UNDERSTOOD


def render_task_list(tasks: list[Task], project_name: str, status: StatusFilter | None) -> str:
    """Render a count header followed by one line per task."""
    label = f"{status.value} " if status and status is not StatusFilter.ANY else ""
    lines = [f'Found {len(tasks)} {label}tasks in project "{project_name}":']
    lines.extend(format_task_line(task) for task in tasks)
    return "\n".join(lines)


def format_task_line(task: Task) -> str:
    line = f"- {task.name} ({'Completed' if task.completed else 'Pending'})"
    if task.due_on:
        line += f" Due: {task.due_on.isoformat()}"
    if task.assignee:
        line += f" Assignee: {task.assignee.name}"
    return line
