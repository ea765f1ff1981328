"""Task status filters used to narrow project task listings."""

from datetime import datetime, timedelta
from enum import Enum

from asana_chat.api.models import Task

DUE_SOON_WINDOW = timedelta(days=3)
RECENTLY_COMPLETED_WINDOW = timedelta(days=7)


class StatusFilter(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    DUE_SOON = "due_soon"
    OVERDUE = "overdue"
    NO_DUE_DATE = "no_due_date"
    RECENTLY_COMPLETED = "recently_completed"
    ANY = "any"

    @classmethod
    def from_text(cls, text: str) -> "StatusFilter":
        """Map free text to a filter case-insensitively; unknown text means ANY."""
        try:
            return cls(text.strip().lower())
        except ValueError:
            return cls.ANY


def matches(task: Task, status: StatusFilter, now: datetime) -> bool:
    """Return True if the task satisfies the status filter at the given time.

    Each filter is an independent predicate, so a task can match several.
    Due dates are compared against ``now`` truncated to its calendar date;
    completion timestamps are compared against ``now`` itself.

    Args:
        task: Task to check
        status: Filter to evaluate
        now: Current time (timezone-aware when tasks carry aware timestamps)

    Returns:
        True if the task matches
    """
    today = now.date()

    if status is StatusFilter.PENDING:
        return not task.completed
    if status is StatusFilter.COMPLETED:
        return task.completed
    if status is StatusFilter.DUE_SOON:
        return (
            task.due_on is not None
            and not task.completed
            and today <= task.due_on <= today + DUE_SOON_WINDOW
        )
    if status is StatusFilter.OVERDUE:
        return task.due_on is not None and task.due_on < today and not task.completed
    if status is StatusFilter.NO_DUE_DATE:
        return task.due_on is None and not task.completed
    if status is StatusFilter.RECENTLY_COMPLETED:
        return (
            task.completed_at is not None
            and task.completed_at > now - RECENTLY_COMPLETED_WINDOW
        )
    return True
