"""
api/routes/auth.py -- Registration, login and logout endpoints.

Routes:
  POST /api/auth/register  -- create account; sets session cookie; 201
  POST /api/auth/login     -- password login; sets session cookie; 200
  POST /api/auth/logout    -- overwrite session cookie with an expired one; 200

Security:
  register and login are rate-limited per IP (AUTH_RATE_LIMIT) on top of the
  application-wide limit.
  login_user() provides timing equalization -- use it, never inline.
  Cache-Control: no-store on register and login responses.
  The token travels in the httpOnly cookie only; the body carries the public
  user fields and nothing else.
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.limiter import limiter
from api.models import LoginRequest, MessageResponse, PublicUser, RegisterRequest
from auth.service import login_user, register_user
from auth.store import UserStore
from auth.tokens import clear_auth_cookie, encode_token, set_auth_cookie
from core.config import get_settings

# Auth policy: every route here is public -- they are how a session starts
# and ends.
router = APIRouter()

_AUTH_LIMIT = get_settings().auth_rate_limit


def _session_response(status_code: int, user) -> JSONResponse:
    resp = JSONResponse(
        status_code=status_code,
        content=PublicUser.from_user(user).model_dump(by_alias=True),
    )
    set_auth_cookie(resp, encode_token(user.id))
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/auth/register", response_model=PublicUser, status_code=201)
@limiter.limit(_AUTH_LIMIT)
def register(request: Request, body: RegisterRequest) -> JSONResponse:
    """Create an account and start a session for it."""
    user_store: UserStore = request.app.state.user_store
    user = register_user(user_store, body.name, body.email, body.password)
    return _session_response(201, user)


@router.post("/auth/login", response_model=PublicUser)
@limiter.limit(_AUTH_LIMIT)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with email and password; set the session cookie.

    Unknown email and wrong password produce the same 401 body.
    """
    user_store: UserStore = request.app.state.user_store
    user = login_user(user_store, body.email, body.password)
    return _session_response(200, user)


@router.post("/auth/logout", response_model=MessageResponse)
def logout() -> JSONResponse:
    """Clear the session cookie. Always succeeds, with or without a session."""
    resp = JSONResponse(content={"message": "Logged out successfully"})
    clear_auth_cookie(resp)
    return resp
