"""
client/session.py -- Client-side session state for a Taskboard front end.

AuthSession holds the signed-in user (or None) and owns the TaskApiClient it
talks through. The client is built with on_unauthorized=self.clear, so any
401 -- an expired cookie, a deleted account -- drops the cached user
immediately.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from client.api_client import ApiError, TaskApiClient

logger = logging.getLogger("taskboard.client")


class AuthSession:
    def __init__(self, base_url: str, session: Optional[requests.Session] = None) -> None:
        self.user: Optional[dict] = None
        self.client = TaskApiClient(base_url, on_unauthorized=self.clear, session=session)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def clear(self) -> None:
        self.user = None

    def restore(self) -> Optional[dict]:
        """Ask the server who the cookie belongs to, e.g. on application start.

        Any failure (no cookie, expired, server down) leaves the session
        signed out rather than raising.
        """
        try:
            self.user = self.client.get_profile()
        except (ApiError, requests.RequestException) as exc:
            logger.debug("No session to restore: %s", exc)
            self.user = None
        return self.user

    def register(self, name: str, email: str, password: str) -> dict:
        self.user = self.client.register(name, email, password)
        return self.user

    def login(self, email: str, password: str) -> dict:
        self.user = self.client.login(email, password)
        return self.user

    def logout(self) -> None:
        """Sign out locally, telling the server first on a best-effort basis.

        The server call only expires the cookie. If it fails the local state
        is cleared anyway: a broken network must never keep a user signed in
        on this side.
        """
        try:
            self.client.logout()
        except (ApiError, requests.RequestException) as exc:
            logger.warning("Logout request failed; clearing local session anyway: %s", exc)
        finally:
            self.clear()
