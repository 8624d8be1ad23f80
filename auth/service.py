"""
auth/service.py -- Account operations: register, login, profile read/update.

These functions hold the authentication rules; routes in api/routes/ only
translate HTTP to calls here and set or clear the session cookie.

Validation runs as an explicit step before every write (auth/validation.py).
Password changes are driven by what the caller passed, not by comparing old
and new values: a password is hashed and written only when one is supplied.

Security:
  login_user() always runs bcrypt, against _DUMMY_HASH when the email is not
  registered, and raises the same InvalidCredentials in both failure cases.
  Do NOT inline get_by_email() + verify_password() elsewhere -- that
  re-introduces the enumeration timing leak.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

from auth.models import User
from auth.store import UserStore
from auth.tokens import _DUMMY_HASH, hash_password, verify_password
from auth.validation import validate_login, validate_profile_update, validate_registration
from core.errors import DuplicateEmail, InvalidCredentials, InvalidInput, NotFound

logger = logging.getLogger("taskboard.auth")


def register_user(store: UserStore, name: Optional[str], email: Optional[str], password: Optional[str]) -> User:
    """Create an account and return the stored User.

    Raises InvalidInput on field errors and DuplicateEmail when the email is
    taken -- including when a concurrent registration wins the race and the
    UNIQUE constraint fires.
    """
    errors = validate_registration(name, email, password)
    if errors:
        raise InvalidInput(field_errors=errors)

    if store.get_by_email(email) is not None:
        raise DuplicateEmail()

    user = User(name=name.strip(), email=email, hashed_password=hash_password(password))
    try:
        user_id = store.create_user(user)
    except IntegrityError as exc:
        raise DuplicateEmail() from exc

    logger.info("Registered user id=%s", user_id)
    created = store.get_by_id(user_id)
    if created is None:
        raise NotFound("User not found")
    return created


def login_user(store: UserStore, email: Optional[str], password: Optional[str]) -> User:
    """Verify credentials and return the matching User.

    Raises InvalidInput for a malformed request and InvalidCredentials for an
    unknown email or a wrong password (same message, same bcrypt cost).
    """
    errors = validate_login(email, password)
    if errors:
        raise InvalidInput(field_errors=errors)

    user = store.get_by_email(email)
    if user is None:
        # Equalize timing -- do NOT return early before running bcrypt.
        verify_password(password, _DUMMY_HASH)
        logger.info("Login failed: unknown account")
        raise InvalidCredentials()
    if not verify_password(password, user.hashed_password):
        logger.info("Login failed: bad password for user id=%s", user.id)
        raise InvalidCredentials()
    return user


def get_profile(store: UserStore, user_id: int) -> User:
    user = store.get_by_id(user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def update_profile(
    store: UserStore,
    user_id: int,
    name: Optional[str] = None,
    email: Optional[str] = None,
    password: Optional[str] = None,
) -> User:
    """Apply a profile update and return the refreshed User.

    Empty or missing name/email keep their stored values. A non-empty
    password is re-hashed and replaces the old hash; otherwise the stored
    hash is left untouched.
    """
    user = get_profile(store, user_id)

    errors = validate_profile_update(name, email, password)
    if errors:
        raise InvalidInput(field_errors=errors)

    changes: dict = {
        "name": name.strip() if name and name.strip() else user.name,
        "email": email or user.email,
    }
    password_changed = bool(password)
    if password_changed:
        changes["hashed_password"] = hash_password(password)

    if changes["email"] != user.email:
        other = store.get_by_email(changes["email"])
        if other is not None and other.id != user.id:
            raise DuplicateEmail("Email already in use", "Email already in use")

    try:
        updated = store.update_user(user_id, **changes)
    except IntegrityError as exc:
        raise DuplicateEmail("Email already in use", "Email already in use") from exc
    if not updated:
        raise NotFound("User not found")

    logger.info("Updated profile for user id=%s (password_changed=%s)", user_id, password_changed)
    return get_profile(store, user_id)
