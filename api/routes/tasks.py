"""
api/routes/tasks.py -- Task CRUD and listing for the signed-in user.

Routes:
  POST   /api/tasks           -- create a task owned by the caller
  GET    /api/tasks           -- list the caller's tasks (filter/search/sort/page)
  GET    /api/tasks/{task_id} -- read one task
  PUT    /api/tasks/{task_id} -- partial update
  DELETE /api/tasks/{task_id} -- delete

Authorization:
  Single-task routes fetch the task by id (any owner) and run assert_owner()
  before doing anything else: 404 when it does not exist, 403 when it belongs
  to someone else. The listing never uses the guard -- the query itself is
  scoped to the caller, so other users' rows are never loaded.

  Between the ownership check and the write the task can vanish (the owner
  deleting it from another tab). The write then reports 404.

Listing parameters arrive as plain strings and are parsed permissively by
TaskQuery.from_params(); a bad page or limit never produces an error.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request

from api.models import MessageResponse, TaskCreate, TaskListResponse, TaskResponse, TaskUpdate
from auth.dependencies import get_current_user
from auth.models import User
from auth.ownership import assert_owner
from core.errors import NotFound
from tasks.models import Task
from tasks.query import TaskQuery
from tasks.store import TaskStore
from tasks.validation import clean_task_fields

logger = logging.getLogger("taskboard.tasks")

# All task routes require authentication.
router = APIRouter(dependencies=[Depends(get_current_user)])


def _owned_task(request: Request, task_id: int, action: str) -> Task:
    task_store: TaskStore = request.app.state.task_store
    current: User = request.state.user
    return assert_owner(task_store.get_task(task_id), current, action=action)


@router.post("/tasks", response_model=TaskResponse, status_code=201)
def create_task(request: Request, body: TaskCreate) -> TaskResponse:
    task_store: TaskStore = request.app.state.task_store
    current: User = request.state.user
    fields = clean_task_fields(body.model_dump(), creating=True)
    task_id = task_store.create_task(Task(owner_id=current.id, **fields))
    logger.info("Created task id=%s for user id=%s", task_id, current.id)
    created = task_store.get_task(task_id)
    if created is None:
        raise NotFound("Task not found")
    return TaskResponse.from_task(created)


@router.get("/tasks", response_model=TaskListResponse)
def list_tasks(
    request: Request,
    status: Optional[str] = None,
    search: Optional[str] = None,
    sort: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
) -> TaskListResponse:
    task_store: TaskStore = request.app.state.task_store
    current: User = request.state.user
    query = TaskQuery.from_params(current.id, status=status, search=search, sort=sort, page=page, limit=limit)
    return TaskListResponse.from_page(task_store.list_tasks(query))


@router.get("/tasks/{task_id}", response_model=TaskResponse)
def read_task(request: Request, task_id: int) -> TaskResponse:
    return TaskResponse.from_task(_owned_task(request, task_id, "access"))


@router.put("/tasks/{task_id}", response_model=TaskResponse)
def update_task(request: Request, task_id: int, body: TaskUpdate) -> TaskResponse:
    task_store: TaskStore = request.app.state.task_store
    _owned_task(request, task_id, "update")

    provided = {name: getattr(body, name) for name in body.model_fields_set}
    fields = clean_task_fields(provided, creating=False)
    if fields and not task_store.update_task(task_id, **fields):
        raise NotFound("Task not found")

    updated = task_store.get_task(task_id)
    if updated is None:
        raise NotFound("Task not found")
    return TaskResponse.from_task(updated)


@router.delete("/tasks/{task_id}", response_model=MessageResponse)
def delete_task(request: Request, task_id: int) -> MessageResponse:
    task_store: TaskStore = request.app.state.task_store
    _owned_task(request, task_id, "delete")
    if not task_store.delete_task(task_id):
        raise NotFound("Task not found")
    logger.info("Deleted task id=%s", task_id)
    return MessageResponse(message="Task removed")
