"""Parser for free-text chat commands.

Grammar (keywords are case-sensitive unless noted):

    connect asana                                   (case-insensitive, exact)
    create task in <project> in <name> | <notes> | <due_on> | <assignee>
    create task in <word> <name> | <notes> | <due_on> | <assignee>
    update task <task_id> <key>=<value> ...
    delete task <task_id>
    get project tasks in <project> [in <status>]

Splitting is deliberately literal: ``" in "`` and ``" | "`` are matched
verbatim and whitespace is significant.
"""

from dataclasses import dataclass, field

from asana_chat.chat.status import StatusFilter

IN_DELIMITER = " in "
FIELD_DELIMITER = " | "


@dataclass(frozen=True)
class ConnectRequest:
    pass


@dataclass(frozen=True)
class CreateTask:
    project_name: str
    name: str
    notes: str | None = None
    due_on: str | None = None  # YYYY-MM-DD, passed through to Asana
    assignee: str | None = None  # Asana user gid, email or "me"


@dataclass(frozen=True)
class UpdateTask:
    task_id: str
    fields: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DeleteTask:
    task_id: str


@dataclass(frozen=True)
class ListTasks:
    project_name: str
    status_filter: StatusFilter | None = None


@dataclass(frozen=True)
class Unrecognized:
    message: str


ParsedCommand = ConnectRequest | CreateTask | UpdateTask | DeleteTask | ListTasks | Unrecognized


def parse(message: str) -> ParsedCommand:
    """Parse a raw chat line into a command.

    Malformed variants of known commands (missing task id, missing project)
    are returned as Unrecognized.
    """
    if message.lower() == "connect asana":
        return ConnectRequest()
    if message.startswith("create task"):
        return _parse_create(message)
    if message.startswith("update task"):
        return _parse_update(message)
    if message.startswith("delete task"):
        return _parse_delete(message)
    if message.startswith("get project tasks"):
        return _parse_list(message)
    return Unrecognized(message)


def _parse_create(message: str) -> ParsedCommand:
    segments = message.split(IN_DELIMITER)
    if len(segments) < 2:
        return Unrecognized(message)

    if len(segments) > 2:
        # create task in <project> in <fields>; later segments are joined with a space
        project_name = segments[1]
        details = " ".join(segments[2:])
    else:
        # create task in <project> <fields>; the project is the first word
        project_name, _, details = segments[1].partition(" ")
    values = [value or None for value in details.split(FIELD_DELIMITER)[:4]]
    values += [None] * (4 - len(values))
    name, notes, due_on, assignee = values

    if not project_name or not name:
        return Unrecognized(message)
    return CreateTask(
        project_name=project_name, name=name, notes=notes, due_on=due_on, assignee=assignee
    )


def _parse_update(message: str) -> ParsedCommand:
    tokens = message.split(" ")
    if len(tokens) < 3 or not tokens[2]:
        return Unrecognized(message)

    fields: dict[str, str] = {}
    for token in tokens[3:]:
        key, found, value = token.partition("=")
        if found and key:
            fields[key] = value  # Last occurrence wins
    return UpdateTask(task_id=tokens[2], fields=fields)


def _parse_delete(message: str) -> ParsedCommand:
    tokens = message.split(" ")
    if len(tokens) < 3 or not tokens[2]:
        return Unrecognized(message)
    return DeleteTask(task_id=tokens[2])


def _parse_list(message: str) -> ParsedCommand:
    segments = message.split(IN_DELIMITER)
    if len(segments) < 2 or not segments[1]:
        return Unrecognized(message)

    status_filter = StatusFilter.from_text(segments[2]) if len(segments) > 2 else None
    return ListTasks(project_name=segments[1], status_filter=status_filter)
