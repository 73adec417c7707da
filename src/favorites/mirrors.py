"""Persistent mirrors for the favorites set.

Two mirrors are kept: a durable copy that survives a client restart and a
``favorites`` cookie that travels with requests so the server can see the
shortlist. Both hold the full set as a JSON array.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from fastapi import Response
from requests.cookies import RequestsCookieJar

from src.errors import MirrorWriteFailed

logger = logging.getLogger(__name__)

FAVORITES_KEY = "favorites"
FAVORITES_MAX_AGE = 60 * 60 * 24 * 30
MAX_COOKIE_BYTES = 4096


class DurableMirror(Protocol):
    """Client-side copy of the favorites that outlives the process."""

    def read(self) -> list[str]: ...

    def write(self, ids: Iterable[str]) -> None: ...

    def clear(self) -> None: ...


class ServerVisibleMirror(Protocol):
    """Copy of the favorites the server receives with each request."""

    def read(self) -> list[str]: ...

    def write(self, ids: Iterable[str]) -> None: ...

    def clear(self) -> None: ...


def serialize_favorites(ids: Iterable[str]) -> str:
    """Encode favorite ids as a compact JSON array."""
    return json.dumps(list(ids), separators=(",", ":"))


def check_cookie_size(value: str) -> None:
    """Raise MirrorWriteFailed if ``favorites=<value>`` exceeds the cookie limit."""
    size = len(f"{FAVORITES_KEY}={value}".encode())
    if size > MAX_COOKIE_BYTES:
        raise MirrorWriteFailed(
            f"Favorites cookie would be {size} bytes (limit {MAX_COOKIE_BYTES})"
        )


def parse_favorites_cookie(value: str | None) -> list[str]:
    """Decode a ``favorites`` cookie value.

    Missing or malformed values decode to an empty list.
    """
    if not value:
        return []
    try:
        data = json.loads(value)
    except ValueError:
        logger.warning("Ignoring malformed favorites cookie")
        return []
    if not isinstance(data, list):
        return []
    return [str(item) for item in data]


class JsonFileMirror:
    """Durable mirror stored as a JSON array in a local file.

    Args:
        path: File holding the serialized favorites.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def read(self) -> list[str]:
        if not self.path.exists():
            return []
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as err:
            logger.warning("Ignoring unreadable favorites file %s: %s", self.path, err)
            return []
        return parse_favorites_cookie(text)

    def write(self, ids: Iterable[str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(serialize_favorites(ids), encoding="utf-8")
        except OSError as err:
            raise MirrorWriteFailed(f"Cannot write {self.path}: {err}") from err

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as err:
            raise MirrorWriteFailed(f"Cannot remove {self.path}: {err}") from err


class CookieJarMirror:
    """Server-visible mirror kept as a ``favorites`` cookie.

    The cookie lives in a requests cookie jar, typically the one attached
    to the session that talks to the presentation API, so every request
    carries the current shortlist.

    Args:
        jar: Cookie jar to write into.
        domain: Cookie domain; empty for host-only cookies.
        max_age: Cookie lifetime in seconds.
    """

    def __init__(
        self,
        jar: RequestsCookieJar,
        domain: str = "",
        max_age: int = FAVORITES_MAX_AGE,
    ) -> None:
        self.jar = jar
        self.domain = domain
        self.max_age = max_age

    def read(self) -> list[str]:
        return parse_favorites_cookie(
            self.jar.get(FAVORITES_KEY, domain=self.domain, path="/")
        )

    def write(self, ids: Iterable[str]) -> None:
        value = serialize_favorites(ids)
        try:
            check_cookie_size(value)
        except MirrorWriteFailed:
            # Never leave an older set behind.
            self.clear()
            raise
        self.jar.set(
            FAVORITES_KEY,
            value,
            domain=self.domain,
            path="/",
            expires=int(time.time()) + self.max_age,
        )

    def clear(self) -> None:
        try:
            self.jar.clear(self.domain, "/", FAVORITES_KEY)
        except KeyError:
            pass


class ResponseCookieMirror:
    """Server-visible mirror written as ``Set-Cookie`` headers on a response.

    Used by the API when the caller replaces its favorites: the incoming
    cookie is the current value and the outgoing response carries the new
    one, or its deletion.

    Args:
        response: Outgoing response that will carry the cookie.
        current: ``favorites`` cookie value the request arrived with.
        max_age: Cookie lifetime in seconds.
    """

    def __init__(
        self,
        response: Response,
        current: str | None = None,
        max_age: int = FAVORITES_MAX_AGE,
    ) -> None:
        self.response = response
        self.value = current
        self.max_age = max_age

    def read(self) -> list[str]:
        return parse_favorites_cookie(self.value)

    def write(self, ids: Iterable[str]) -> None:
        value = serialize_favorites(ids)
        try:
            check_cookie_size(value)
        except MirrorWriteFailed:
            self.clear()
            raise
        self.response.set_cookie(FAVORITES_KEY, value, max_age=self.max_age, path="/")
        self.value = value

    def clear(self) -> None:
        self.response.delete_cookie(FAVORITES_KEY, path="/")
        self.value = None
