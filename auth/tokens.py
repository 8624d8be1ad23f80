"""
auth/tokens.py -- Session token codec, password hashing, and cookie helpers.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with SECRET_KEY and carry
       exactly one subject (the user id), the issue time and an absolute
       expiry TOKEN_EXPIRE_SECONDS (1 hour) after issue. Nothing is stored
       server-side; logout only overwrites the cookie.

  Decoding raises TokenInvalid or TokenExpired rather than returning None so
       tests and logs can tell the two apart. auth/dependencies.py collapses
       both into a single 401.

  Fail closed: encode_token() refuses to sign with an empty secret, and
       decode_token() rejects everything when the secret is empty.

  Passwords: bcrypt directly (no passlib wrapper), cost factor from
       BCRYPT_ROUNDS (default 10). _DUMMY_HASH enables timing equalization in
       auth/service.login_user() so response time does not reveal whether an
       email is registered.

Layer rule: no imports from api/, tasks/, or client/. Import from core/ is
allowed -- core/ is the kernel and has no reverse dependencies.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from core.config import Settings, get_settings

logger = logging.getLogger("taskboard.auth")

_ALGORITHM = "HS256"


class TokenError(Exception):
    """Base class for session token failures."""


class TokenInvalid(TokenError):
    """Signature mismatch, malformed token, or missing/garbled subject."""


class TokenExpired(TokenError):
    """Well-formed and correctly signed, but past its expiry."""


class TokenConfigError(RuntimeError):
    """No signing secret is configured -- no token can be issued."""


# ---------------------------------------------------------------------------
# Password hashing (bcrypt)
# ---------------------------------------------------------------------------


def hash_password(plain: str, rounds: int | None = None) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    bcrypt rejects inputs over 72 bytes; auth/validation.py caps passwords
    at that length before they get here.
    """
    cost = rounds if rounds is not None else get_settings().bcrypt_rounds
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=cost)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Over-long input or a corrupt stored hash -- never a match.
        return False


# Timing equalization dummy hash. Computed once at module load so the first
# login attempt is not measurably slower than subsequent ones.
_DUMMY_HASH: str = hash_password("taskboard_timing_dummy")


# ---------------------------------------------------------------------------
# Token codec
# ---------------------------------------------------------------------------


def encode_token(
    user_id: int,
    *,
    issued_at: datetime | None = None,
    expire_seconds: int | None = None,
    secret_key: str | None = None,
) -> str:
    """Sign a token binding user_id, expiring expire_seconds after issued_at.

    issued_at defaults to now. It exists so tests can mint tokens that sit on
    either side of the expiry boundary without patching the clock.
    """
    settings = get_settings()
    secret = secret_key if secret_key is not None else settings.secret_key
    if not secret:
        raise TokenConfigError("Cannot issue session tokens: SECRET_KEY is not configured.")
    duration = expire_seconds if expire_seconds is not None else settings.token_expire_seconds
    issued = issued_at or datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": issued,
        "exp": issued + timedelta(seconds=duration),
    }
    return jwt.encode(payload, secret, algorithm=_ALGORITHM)


def decode_token(token: str, *, secret_key: str | None = None) -> int:
    """Verify a token and return its subject user id.

    Raises TokenExpired when the token is past its exp claim (a token is still
    valid during its exp second) and TokenInvalid for everything else.
    """
    secret = secret_key if secret_key is not None else get_settings().secret_key
    if not secret:
        raise TokenInvalid("no signing secret configured")
    try:
        payload = jwt.decode(token, secret, algorithms=[_ALGORITHM])
    except ExpiredSignatureError as exc:
        raise TokenExpired(str(exc)) from exc
    except JWTError as exc:
        raise TokenInvalid(str(exc)) from exc
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject.isdigit():
        raise TokenInvalid("token subject is missing or not a user id")
    return int(subject)


# ---------------------------------------------------------------------------
# Cookie helpers
# ---------------------------------------------------------------------------


def cookie_policy(settings: Settings | None = None) -> dict:
    """Return the Set-Cookie attributes for the session cookie.

    httponly: scripts cannot read the token (XSS mitigation).
    Local environments: SameSite=strict, not Secure (same origin, plain HTTP).
    Deployed environments: SameSite=none + Secure, because the front end is
        served from a different site than the API and still needs the cookie.
    max_age matches the token expiry so both lapse together.
    """
    settings = settings or get_settings()
    return {
        "httponly": True,
        "secure": not settings.is_local,
        "samesite": "strict" if settings.is_local else "none",
        "max_age": settings.token_expire_seconds,
        "path": "/",
    }


def set_auth_cookie(response, token: str, settings: Settings | None = None) -> None:
    """Write the session token as an httpOnly cookie on the response."""
    settings = settings or get_settings()
    response.set_cookie(settings.cookie_name, value=token, **cookie_policy(settings))


def clear_auth_cookie(response, settings: Settings | None = None) -> None:
    """Overwrite the session cookie with an empty, already-expired value."""
    settings = settings or get_settings()
    policy = cookie_policy(settings)
    policy["max_age"] = 0
    response.set_cookie(
        settings.cookie_name,
        value="",
        expires=datetime(1970, 1, 1, tzinfo=timezone.utc),
        **policy,
    )
