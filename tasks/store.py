"""
tasks/store.py -- SQLAlchemy-backed persistence layer for tasks.

Uses SQLAlchemy Core (not ORM) so the dataclasses in tasks/models.py remain
the authoritative domain representation. Swapping SQLite for PostgreSQL is a
connection string change, not a rewrite.

Pattern: Repository + Data Mapper. TaskStore is the repository; _row_to_task
is the mapper. Listing SQL is composed by tasks/query.py; this module only
executes it.

Security: all queries use bound parameters. No f-strings in SQL.

Ownership is not checked here. Single-task routes run auth/ownership.py
against the fetched task before calling update_task()/delete_task(), and
list_tasks() is always scoped to TaskQuery.owner_id.

Usage:
    store = TaskStore("sqlite:///taskboard.db")
    task_id = store.create_task(Task(owner_id=1, title="Write report"))
    page = store.list_tasks(TaskQuery.from_params(1, sort="oldest"))
    store.close()
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Index, Integer, MetaData, String, Table, Text
from sqlalchemy.engine import Engine

from core.database import make_engine
from tasks.models import DEFAULT_STATUS, Task, TaskPage
from tasks.query import TaskQuery, build_task_statements

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

tasks_table = Table(
    "tasks",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("owner_id", Integer, nullable=False),
    Column("title", String(100), nullable=False),
    Column("description", Text),
    Column("status", String(20), nullable=False, server_default=DEFAULT_STATUS),
    Column("due_date", String(32)),  # ISO 8601 UTC, NULL when unset
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
    Index("ix_tasks_owner_status", "owner_id", "status"),
)

_MUTABLE_FIELDS = {"title", "description", "status", "due_date"}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class TaskStore:
    def __init__(self, db_url: str, pool_size: int = 10) -> None:
        self.engine: Engine = make_engine(db_url, pool_size)
        metadata.create_all(self.engine)

    def create_task(self, task: Task) -> int:
        """Insert a new task and return its assigned database ID."""
        now = _now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(
                tasks_table.insert().values(
                    owner_id=task.owner_id,
                    title=task.title,
                    description=task.description,
                    status=task.status,
                    due_date=task.due_date,
                    created_at=now,
                    updated_at=now,
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def get_task(self, task_id: int) -> Optional[Task]:
        """Fetch a single task by ID regardless of owner. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(tasks_table.select().where(tasks_table.c.id == task_id)).fetchone()
        return _row_to_task(row) if row is not None else None

    def update_task(self, task_id: int, **fields) -> bool:
        """Update mutable fields on an existing task and stamp updated_at.

        Accepts any subset of: title, description, status, due_date.
        Raises ValueError for anything else (owner_id in particular).

        Returns True if a row was updated, False if task_id was not found.
        """
        unknown = set(fields) - _MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Task fields are not writable: {sorted(unknown)!r}")
        fields["updated_at"] = _now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(tasks_table.update().where(tasks_table.c.id == task_id).values(**fields))
            conn.commit()
        return result.rowcount > 0

    def delete_task(self, task_id: int) -> bool:
        """Permanently delete a task. Returns True if deleted, False if not found."""
        with self.engine.connect() as conn:
            result = conn.execute(tasks_table.delete().where(tasks_table.c.id == task_id))
            conn.commit()
        return result.rowcount > 0

    def list_tasks(self, query: TaskQuery) -> TaskPage:
        """Return one page of the caller's tasks plus match totals."""
        page_stmt, count_stmt = build_task_statements(query, tasks_table)
        with self.engine.connect() as conn:
            rows = conn.execute(page_stmt).fetchall()
            total = conn.execute(count_stmt).scalar() or 0
        return TaskPage(
            items=[_row_to_task(r) for r in rows],
            page=query.page,
            total_pages=query.total_pages(total),
            total=total,
        )

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern -- DB row -> domain dataclass)
# ---------------------------------------------------------------------------


def _row_to_task(row) -> Task:
    return Task(
        id=row.id,
        owner_id=row.owner_id,
        title=row.title,
        description=row.description,
        status=row.status,
        due_date=row.due_date,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
