"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in tasks/models.py -- dataclasses own domain shape; stores and routes do the
work.

Layer rule: no imports from api/, tasks/, or client/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """An account that owns tasks.

    email is unique and compared exactly as stored (case-sensitive).
    hashed_password is the bcrypt hash; the plaintext is never kept and the
    hash is never serialized outward -- api/models.PublicUser is the only
    shape that leaves the process.

    id is None before the record is written to the database.
    """

    name: str
    email: str
    hashed_password: str
    id: int | None = None
    created_at: str | None = None
    updated_at: str | None = None
