"""
auth/ownership.py -- Single-owner authorization for fetched resources.

Existence is checked before ownership, so a missing resource is 404 and a
resource belonging to someone else is 403. Listing endpoints do not use this
guard: they scope the query to the caller instead of filtering afterwards.

Layer rule: no imports from api/, tasks/, or client/. Any object with an
owner_id attribute can be guarded.
"""

from __future__ import annotations

from typing import Optional, Protocol, TypeVar

from auth.models import User
from core.errors import Forbidden, NotFound


class Owned(Protocol):
    owner_id: int


R = TypeVar("R", bound=Owned)


def assert_owner(resource: Optional[R], identity: User, action: str = "access", noun: str = "task") -> R:
    """Return resource if identity owns it.

    Raises NotFound when resource is None and Forbidden when its owner_id
    differs from identity.id.
    """
    if resource is None:
        raise NotFound(f"{noun.capitalize()} not found")
    if resource.owner_id != identity.id:
        raise Forbidden(f"Not authorized to {action} this {noun}")
    return resource
