"""Unit tests for auth/dependencies.py -- the three-stage session check.

Each stage is exercised on its own with a minimal request stand-in, then the
composed get_current_user() is checked for short-circuiting: a failure in an
early stage must never reach the store.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from auth.dependencies import get_current_user, read_session_token, resolve_identity, verify_session_token
from auth.models import User
from auth.tokens import encode_token
from core.errors import Unauthenticated


def _request(cookies: dict, store=None) -> SimpleNamespace:
    return SimpleNamespace(
        cookies=cookies,
        app=SimpleNamespace(state=SimpleNamespace(user_store=store)),
        state=SimpleNamespace(),
    )


def _user(user_id: int = 1) -> User:
    return User(id=user_id, name="Ada", email="ada@x.com", hashed_password="x")


class TestStages:
    def test_missing_cookie(self) -> None:
        with pytest.raises(Unauthenticated) as exc_info:
            read_session_token(_request({}))
        assert exc_info.value.message == "Not authorized, no token"

    def test_empty_cookie_counts_as_missing(self) -> None:
        with pytest.raises(Unauthenticated) as exc_info:
            read_session_token(_request({"jwt": ""}))
        assert exc_info.value.message == "Not authorized, no token"

    def test_cookie_is_read(self) -> None:
        assert read_session_token(_request({"jwt": "abc"})) == "abc"

    def test_bad_token_fails(self) -> None:
        with pytest.raises(Unauthenticated) as exc_info:
            verify_session_token("garbage")
        assert exc_info.value.message == "Not authorized, token failed"

    def test_expired_token_fails_with_same_message(self) -> None:
        token = encode_token(1, issued_at=datetime.now(timezone.utc) - timedelta(hours=2))
        with pytest.raises(Unauthenticated) as exc_info:
            verify_session_token(token)
        assert exc_info.value.message == "Not authorized, token failed"

    def test_valid_token_yields_user_id(self) -> None:
        assert verify_session_token(encode_token(5)) == 5

    def test_deleted_user(self) -> None:
        store = MagicMock()
        store.get_by_id.return_value = None
        with pytest.raises(Unauthenticated) as exc_info:
            resolve_identity(store, 5)
        assert exc_info.value.message == "User not found"


class TestGetCurrentUser:
    def test_attaches_identity(self) -> None:
        store = MagicMock()
        store.get_by_id.return_value = _user(3)
        request = _request({"jwt": encode_token(3)}, store)
        user = get_current_user(request)
        assert user.id == 3
        assert request.state.user is user
        store.get_by_id.assert_called_once_with(3)

    def test_no_token_never_touches_store(self) -> None:
        store = MagicMock()
        with pytest.raises(Unauthenticated):
            get_current_user(_request({}, store))
        store.get_by_id.assert_not_called()

    def test_bad_token_never_touches_store(self) -> None:
        store = MagicMock()
        with pytest.raises(Unauthenticated):
            get_current_user(_request({"jwt": "garbage"}, store))
        store.get_by_id.assert_not_called()

    def test_gate_only_reads(self) -> None:
        store = MagicMock()
        store.get_by_id.return_value = _user(3)
        get_current_user(_request({"jwt": encode_token(3)}, store))
        assert [c[0] for c in store.method_calls] == ["get_by_id"]
