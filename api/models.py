"""
API request and response models for the Taskboard REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
tasks/models.py, which own the internal domain representation. Route handlers
map between the two.

Wire format is camelCase (dueDate, createdAt, totalPages, fieldErrors);
Python attributes stay snake_case via the alias generator. Request models
accept either spelling.

Request bodies are deliberately loose (every field Optional[str]). Field
rules live in auth/validation.py and tasks/validation.py and run as an
explicit step in the service layer, so a bad value comes back as a
fieldErrors entry with the domain's own message.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from auth.models import User
from tasks.models import Task, TaskPage


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RegisterRequest(_WireModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(_WireModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ProfileUpdate(_WireModel):
    """Body for PUT /users/me. Empty or missing values keep the stored ones."""

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class TaskCreate(_WireModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    due_date: Optional[str] = None


class TaskUpdate(_WireModel):
    """Body for PUT /tasks/{id}: a partial update.

    Only fields present in the JSON are applied (see model_fields_set).
    There is no owner field -- ownership never changes.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    due_date: Optional[str] = None


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class PublicUser(_WireModel):
    """The only user shape that leaves the API. No password hash, ever."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: int
    name: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> "PublicUser":
        return cls(id=user.id, name=user.name, email=user.email)


class TaskResponse(_WireModel):
    id: int
    owner_id: int
    title: str
    description: Optional[str] = None
    status: str
    due_date: Optional[str] = None
    created_at: str
    updated_at: str

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            owner_id=task.owner_id,
            title=task.title,
            description=task.description,
            status=task.status,
            due_date=task.due_date,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class TaskListResponse(_WireModel):
    items: list[TaskResponse]
    page: int
    total_pages: int
    total: int

    @classmethod
    def from_page(cls, page: TaskPage) -> "TaskListResponse":
        return cls(
            items=[TaskResponse.from_task(t) for t in page.items],
            page=page.page,
            total_pages=page.total_pages,
            total=page.total,
        )


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(_WireModel):
    """Error envelope for every 4xx/5xx response.

    field_errors is only present for validation-class errors; it is dropped
    from the JSON entirely otherwise (model_dump(exclude_none=True)).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    message: str
    field_errors: Optional[dict[str, str]] = None

    def to_content(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class HealthResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str = "ok"
