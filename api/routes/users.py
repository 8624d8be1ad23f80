"""
api/routes/users.py -- The signed-in user's own profile.

Routes:
  GET /api/users/me  -- public fields of the current user
  PUT /api/users/me  -- update name / email / password

Both require a session (router-level dependency).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from api.models import ProfileUpdate, PublicUser
from auth.dependencies import get_current_user
from auth.models import User
from auth.service import get_profile, update_profile
from auth.store import UserStore

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/users/me", response_model=PublicUser)
def read_profile(request: Request) -> PublicUser:
    user_store: UserStore = request.app.state.user_store
    current: User = request.state.user
    return PublicUser.from_user(get_profile(user_store, current.id))


@router.put("/users/me", response_model=PublicUser)
def write_profile(request: Request, body: ProfileUpdate) -> PublicUser:
    """Update the current user's profile.

    A password is re-hashed only when one is supplied. Taking an email that
    belongs to another account is a 400 with a field error on email.
    """
    user_store: UserStore = request.app.state.user_store
    current: User = request.state.user
    updated = update_profile(user_store, current.id, name=body.name, email=body.email, password=body.password)
    return PublicUser.from_user(updated)
