"""Unit tests for auth/tokens.py -- token codec, password hashing, cookie policy.

Covers:
- encode/decode round trip returns the user id
- expiry boundary: valid just before issue+3600s, TokenExpired just after
- wrong secret, garbage input and non-numeric subjects raise TokenInvalid
- an empty secret refuses to sign and rejects every token
- bcrypt hash/verify, including over-long input
- cookie attributes per environment
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from auth.tokens import (
    TokenConfigError,
    TokenExpired,
    TokenInvalid,
    clear_auth_cookie,
    cookie_policy,
    decode_token,
    encode_token,
    hash_password,
    set_auth_cookie,
    verify_password,
)
from core.config import Settings

_SECRET = "s" * 40


class TestTokenCodec:
    def test_round_trip_returns_subject(self) -> None:
        token = encode_token(42, secret_key=_SECRET)
        assert decode_token(token, secret_key=_SECRET) == 42

    def test_payload_carries_sub_iat_exp(self) -> None:
        issued = datetime(2026, 1, 1, tzinfo=timezone.utc)
        token = encode_token(7, issued_at=issued, secret_key=_SECRET)
        claims = jwt.get_unverified_claims(token)
        assert claims["sub"] == "7"
        assert claims["exp"] - claims["iat"] == 3600

    def test_valid_just_before_expiry(self) -> None:
        issued = datetime.now(timezone.utc) - timedelta(seconds=3600 - 5)
        token = encode_token(1, issued_at=issued, secret_key=_SECRET)
        assert decode_token(token, secret_key=_SECRET) == 1

    def test_expired_just_after_expiry(self) -> None:
        issued = datetime.now(timezone.utc) - timedelta(seconds=3600 + 5)
        token = encode_token(1, issued_at=issued, secret_key=_SECRET)
        with pytest.raises(TokenExpired):
            decode_token(token, secret_key=_SECRET)

    def test_wrong_secret_is_invalid(self) -> None:
        token = encode_token(1, secret_key=_SECRET)
        with pytest.raises(TokenInvalid):
            decode_token(token, secret_key="x" * 40)

    def test_garbage_is_invalid(self) -> None:
        with pytest.raises(TokenInvalid):
            decode_token("not-a-token", secret_key=_SECRET)

    def test_non_numeric_subject_is_invalid(self) -> None:
        exp = datetime.now(timezone.utc) + timedelta(hours=1)
        token = jwt.encode({"sub": "alice", "exp": exp}, _SECRET, algorithm="HS256")
        with pytest.raises(TokenInvalid):
            decode_token(token, secret_key=_SECRET)

    def test_missing_subject_is_invalid(self) -> None:
        exp = datetime.now(timezone.utc) + timedelta(hours=1)
        token = jwt.encode({"exp": exp}, _SECRET, algorithm="HS256")
        with pytest.raises(TokenInvalid):
            decode_token(token, secret_key=_SECRET)

    def test_empty_secret_refuses_to_sign(self) -> None:
        with pytest.raises(TokenConfigError):
            encode_token(1, secret_key="")

    def test_empty_secret_rejects_everything(self) -> None:
        token = encode_token(1, secret_key=_SECRET)
        with pytest.raises(TokenInvalid):
            decode_token(token, secret_key="")


class TestPasswordHashing:
    def test_hash_verifies(self) -> None:
        hashed = hash_password("secret1", rounds=4)
        assert hashed != "secret1"
        assert verify_password("secret1", hashed)
        assert not verify_password("secret2", hashed)

    def test_hashes_are_salted(self) -> None:
        assert hash_password("secret1", rounds=4) != hash_password("secret1", rounds=4)

    def test_corrupt_hash_never_matches(self) -> None:
        assert verify_password("secret1", "not-a-bcrypt-hash") is False


class _RecordingResponse:
    def __init__(self) -> None:
        self.cookies: list[tuple[str, dict]] = []

    def set_cookie(self, key: str, **kwargs) -> None:
        self.cookies.append((key, kwargs))


class TestCookiePolicy:
    def test_local_environment_is_strict_and_not_secure(self) -> None:
        policy = cookie_policy(Settings(environment="development", secret_key=_SECRET))
        assert policy == {"httponly": True, "secure": False, "samesite": "strict", "max_age": 3600, "path": "/"}

    def test_deployed_environment_is_cross_site_and_secure(self) -> None:
        policy = cookie_policy(Settings(environment="production", secret_key=_SECRET))
        assert policy["secure"] is True
        assert policy["samesite"] == "none"
        assert policy["httponly"] is True

    def test_set_auth_cookie_uses_jwt_name(self) -> None:
        resp = _RecordingResponse()
        set_auth_cookie(resp, "tok", Settings(environment="test", secret_key=_SECRET))
        name, attrs = resp.cookies[0]
        assert name == "jwt"
        assert attrs["value"] == "tok"
        assert attrs["max_age"] == 3600

    def test_clear_auth_cookie_expires_immediately(self) -> None:
        resp = _RecordingResponse()
        clear_auth_cookie(resp, Settings(environment="test", secret_key=_SECRET))
        name, attrs = resp.cookies[0]
        assert name == "jwt"
        assert attrs["value"] == ""
        assert attrs["max_age"] == 0
        assert attrs["expires"].year == 1970
