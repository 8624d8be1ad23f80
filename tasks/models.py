"""
tasks/models.py -- Domain dataclasses for tasks and task listings.

These are pure data containers with zero logic. Query composition lives in
tasks/query.py, persistence in tasks/store.py.
"""

from dataclasses import dataclass, field
from typing import Optional

TASK_STATUSES = ("todo", "in-progress", "done")
DEFAULT_STATUS = "todo"


@dataclass
class Task:
    """A unit of work owned by exactly one user.

    owner_id is set at creation and never reassigned; TaskStore.update_task
    refuses to write it. due_date is an ISO 8601 UTC string or None.

    id is None before the record is written to the database.
    """

    owner_id: int
    title: str
    description: Optional[str] = None
    status: str = DEFAULT_STATUS
    due_date: Optional[str] = None
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""


@dataclass
class TaskPage:
    """One page of a task listing plus the totals needed to paginate."""

    items: list[Task] = field(default_factory=list)
    page: int = 1
    total_pages: int = 0
    total: int = 0
