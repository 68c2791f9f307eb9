"""Signed cookie sessions holding the logged-in user."""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import time
from typing import Any, Callable, Mapping

from aiohttp import web

SESSION_MAX_AGE = 60 * 10


class NoSessionError(Exception):
    """Raised when a request carries no logged-in user."""


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _b64decode(text: str) -> bytes:
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


class SessionStore:
    """Keeps session values in an HMAC-signed cookie."""

    def __init__(
        self,
        secret: bytes | str,
        cookie_name: str = "session",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._key = secret.encode() if isinstance(secret, str) else bytes(secret)
        self.cookie_name = cookie_name
        self._clock = clock

    def _sign(self, payload: str) -> str:
        digest = hmac.new(self._key, payload.encode("ascii"), hashlib.sha256).digest()
        return _b64encode(digest)

    def load(self, request: Any) -> dict[str, Any]:
        """Return the session values of ``request``; empty when absent or invalid."""
        token = request.cookies.get(self.cookie_name)
        if not token or "." not in token:
            return {}
        payload, signature = token.rsplit(".", 1)
        if not hmac.compare_digest(signature, self._sign(payload)):
            return {}
        try:
            document = json.loads(_b64decode(payload))
        except (ValueError, binascii.Error):
            return {}
        if not isinstance(document, dict) or self._clock() >= document.get("expires", 0):
            return {}
        values = document.get("values")
        return dict(values) if isinstance(values, dict) else {}

    def save(self, response: web.StreamResponse, values: Mapping[str, Any], max_age: int) -> None:
        """Write ``values`` into the session cookie of ``response``."""
        document = {"values": dict(values), "expires": self._clock() + max_age}
        payload = _b64encode(json.dumps(document).encode("utf-8"))
        response.set_cookie(
            self.cookie_name,
            f"{payload}.{self._sign(payload)}",
            path="/",
            max_age=max_age,
            httponly=True,
        )


SESSION_STORE = web.AppKey("session_store", SessionStore)


def get_session(request: Any) -> tuple[str, int]:
    """Return ``(username, userid)`` of the session user, or raise NoSessionError."""
    values = request.app[SESSION_STORE].load(request)
    if values.get("userid") is None:
        raise NoSessionError("no session")
    return values.get("username", ""), values["userid"]


def new_session(request: Any, response: web.StreamResponse, username: str, userid: int) -> None:
    """Start a ten-minute session for the given user."""
    store = request.app[SESSION_STORE]
    values = store.load(request)
    values["username"] = username
    values["userid"] = userid
    store.save(response, values, SESSION_MAX_AGE)