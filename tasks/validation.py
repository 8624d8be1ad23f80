"""
tasks/validation.py -- Pure validation and normalization of task fields.

clean_task_fields() runs before every task write. It returns the values the
store should persist (trimmed strings, UTC due date) or raises InvalidInput
with one message per offending field, keyed by the wire (camelCase) field
name. It never reads or writes the store.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from core.errors import InvalidInput
from tasks.models import DEFAULT_STATUS, TASK_STATUSES

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


def normalize_due_date(raw: str) -> str:
    """Parse an ISO 8601 date or datetime and return it as a UTC ISO string.

    Naive values are taken as UTC. A bare date becomes midnight UTC. Raises
    ValueError for anything unparseable.
    """
    text = raw.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).isoformat()


def _check_title(value: Any, errors: dict[str, str]) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        errors["title"] = "Please add a title"
        return None
    title = value.strip()
    if len(title) > TITLE_MAX_LENGTH:
        errors["title"] = f"Title can not be more than {TITLE_MAX_LENGTH} characters"
        return None
    return title


def _check_description(value: Any, errors: dict[str, str]) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        errors["description"] = "Description must be text"
        return None
    description = value.strip()
    if len(description) > DESCRIPTION_MAX_LENGTH:
        errors["description"] = f"Description can not be more than {DESCRIPTION_MAX_LENGTH} characters"
        return None
    return description


def _check_status(value: Any, errors: dict[str, str]) -> Optional[str]:
    if value not in TASK_STATUSES:
        errors["status"] = f"Status must be one of: {', '.join(TASK_STATUSES)}"
        return None
    return value


def _check_due_date(value: Any, errors: dict[str, str]) -> Optional[str]:
    if value is None or value == "":
        return None
    try:
        return normalize_due_date(value)
    except (TypeError, ValueError, AttributeError):
        errors["dueDate"] = "Due date must be an ISO 8601 date"
        return None


def clean_task_fields(fields: dict[str, Any], *, creating: bool) -> dict[str, Any]:
    """Validate and normalize the writable task fields present in fields.

    creating=True: title is required and a missing/empty status becomes
        "todo"; every writable field appears in the result.
    creating=False (partial update): only keys present in fields are checked
        and returned. A None title or status means "leave unchanged"; a None
        description or due date clears it.
    """
    errors: dict[str, str] = {}
    cleaned: dict[str, Any] = {}

    if creating or fields.get("title") is not None:
        cleaned["title"] = _check_title(fields.get("title"), errors)

    if creating or "description" in fields:
        cleaned["description"] = _check_description(fields.get("description"), errors)

    if creating:
        cleaned["status"] = _check_status(fields.get("status") or DEFAULT_STATUS, errors)
    elif fields.get("status") is not None:
        cleaned["status"] = _check_status(fields["status"], errors)

    if creating or "due_date" in fields:
        cleaned["due_date"] = _check_due_date(fields.get("due_date"), errors)

    if errors:
        raise InvalidInput(field_errors=errors)
    return cleaned
