"""
auth/dependencies.py -- FastAPI Depends() helpers for session validation.

The session check is three ordered stages. Each stage either returns the
input for the next one or raises Unauthenticated, which short-circuits the
rest:

  1. read_session_token()   -- the "jwt" cookie must be present.
  2. verify_session_token() -- signature and expiry must check out.
  3. resolve_identity()     -- the token subject must still be a user.

get_current_user() runs them in that order and attaches the resolved User to
request.state.user for downstream handlers. The gate only reads; it never
writes to the store.

The session token is accepted from the cookie only. There is no header
fallback, so scripts must hold the cookie the same way a browser does.

Layer rule: no imports from api/, tasks/, or client/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

import logging

from fastapi import Request

from auth.models import User
from auth.store import UserStore
from auth.tokens import TokenError, decode_token
from core.config import get_settings
from core.errors import Unauthenticated

logger = logging.getLogger("taskboard.auth")


def read_session_token(request: Request) -> str:
    token = request.cookies.get(get_settings().cookie_name)
    if not token:
        raise Unauthenticated("Not authorized, no token")
    return token


def verify_session_token(token: str) -> int:
    try:
        return decode_token(token)
    except TokenError as exc:
        logger.info("Rejected session token: %s: %s", type(exc).__name__, exc)
        raise Unauthenticated("Not authorized, token failed") from exc


def resolve_identity(store: UserStore, user_id: int) -> User:
    user = store.get_by_id(user_id)
    if user is None:
        raise Unauthenticated("User not found")
    return user


def get_current_user(request: Request) -> User:
    """Require a valid session. Raises Unauthenticated (401) otherwise.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user: User = Depends(get_current_user)): ...
    """
    token = read_session_token(request)
    user_id = verify_session_token(token)
    user = resolve_identity(request.app.state.user_store, user_id)
    request.state.user = user
    return user
