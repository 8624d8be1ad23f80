"""
auth/validation.py -- Pure field validators for account writes.

Every function takes raw request values and returns a field -> message dict
(empty when valid). Nothing here touches the store or raises; the service
layer decides what to do with the result. Only the first problem per field is
reported.
"""

from __future__ import annotations

import re
from typing import Optional

NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6
# bcrypt only looks at the first 72 bytes and recent releases reject longer input.
PASSWORD_MAX_BYTES = 72

# Basic shape check only: local part, @, dotted domain with an alphabetic TLD.
# Written without nested quantifiers so hostile input cannot trigger
# catastrophic backtracking.
EMAIL_PATTERN = re.compile(r"^[\w.+-]+@[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)*\.[A-Za-z]{2,}$")


def is_email(value: Optional[str]) -> bool:
    return bool(value) and len(value) <= 255 and EMAIL_PATTERN.match(value) is not None


def _name_error(name: Optional[str]) -> Optional[str]:
    if name is None or not name.strip():
        return "Name is required"
    if len(name.strip()) > NAME_MAX_LENGTH:
        return f"Name can not be more than {NAME_MAX_LENGTH} characters"
    return None


def _password_error(password: Optional[str]) -> Optional[str]:
    if password is None or len(password) < PASSWORD_MIN_LENGTH:
        return f"Please enter a password with {PASSWORD_MIN_LENGTH} or more characters"
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        return f"Password can not be more than {PASSWORD_MAX_BYTES} bytes"
    return None


def validate_registration(name: Optional[str], email: Optional[str], password: Optional[str]) -> dict[str, str]:
    errors: dict[str, str] = {}
    name_error = _name_error(name)
    if name_error:
        errors["name"] = name_error
    if not is_email(email):
        errors["email"] = "Please include a valid email"
    password_error = _password_error(password)
    if password_error:
        errors["password"] = password_error
    return errors


def validate_login(email: Optional[str], password: Optional[str]) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not is_email(email):
        errors["email"] = "Please include a valid email"
    if password is None:
        errors["password"] = "Password is required"
    return errors


def validate_profile_update(
    name: Optional[str],
    email: Optional[str],
    password: Optional[str],
) -> dict[str, str]:
    """Validate a profile update where empty values mean "keep the current one".

    Only values the caller actually supplied are checked.
    """
    errors: dict[str, str] = {}
    if name and name.strip():
        name_error = _name_error(name)
        if name_error:
            errors["name"] = name_error
    if email and not is_email(email):
        errors["email"] = "Please include a valid email"
    if password:
        password_error = _password_error(password)
        if password_error:
            errors["password"] = password_error
    return errors
