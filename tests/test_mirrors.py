"""Tests for src/favorites/mirrors.py."""

from __future__ import annotations

import time
from pathlib import Path

import pytest
from fastapi import Response
from requests.cookies import RequestsCookieJar

from src.errors import MirrorWriteFailed
from src.favorites.mirrors import (
    CookieJarMirror,
    JsonFileMirror,
    ResponseCookieMirror,
    parse_favorites_cookie,
    serialize_favorites,
)


class TestSerialization:
    """Tests for the JSON array encoding."""

    def test_serialize_compact(self) -> None:
        """Should produce a compact JSON array."""
        assert serialize_favorites(["a", "b"]) == '["a","b"]'

    def test_parse_valid(self) -> None:
        """Should decode a JSON array of ids."""
        assert parse_favorites_cookie('["a","b"]') == ["a", "b"]

    @pytest.mark.parametrize("value", [None, "", "not json", '{"a": 1}'])
    def test_parse_invalid_is_empty(self, value: str | None) -> None:
        """Missing or malformed values should decode to nothing."""
        assert parse_favorites_cookie(value) == []


class TestJsonFileMirror:
    """Tests for the durable file mirror."""

    def test_read_missing_file(self, durable_mirror: JsonFileMirror) -> None:
        """A missing file should read as empty."""
        assert durable_mirror.read() == []

    def test_write_creates_parent(self, durable_mirror: JsonFileMirror) -> None:
        """Writing should create the parent directory."""
        durable_mirror.write(["a", "b"])
        assert durable_mirror.path.exists()
        assert durable_mirror.read() == ["a", "b"]

    def test_clear_removes_file(self, durable_mirror: JsonFileMirror) -> None:
        """Clearing should delete the file."""
        durable_mirror.write(["a"])
        durable_mirror.clear()
        assert not durable_mirror.path.exists()

    def test_clear_missing_file(self, durable_mirror: JsonFileMirror) -> None:
        """Clearing an absent file should not fail."""
        durable_mirror.clear()

    def test_write_failure_raises(self, tmp_path: Path) -> None:
        """An unwritable path should raise MirrorWriteFailed."""
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory")
        mirror = JsonFileMirror(blocker / "favorites.json")
        with pytest.raises(MirrorWriteFailed):
            mirror.write(["a"])


class TestCookieJarMirror:
    """Tests for the cookie mirror."""

    def test_write_sets_cookie(
        self, cookie_mirror: CookieJarMirror, cookie_jar: RequestsCookieJar
    ) -> None:
        """Writing should store a favorites cookie at path /."""
        cookie_mirror.write(["a", "b"])
        assert cookie_jar.get("favorites", path="/") == '["a","b"]'
        assert cookie_mirror.read() == ["a", "b"]

    def test_cookie_expiry_is_thirty_days(
        self, cookie_mirror: CookieJarMirror, cookie_jar: RequestsCookieJar
    ) -> None:
        """The cookie should expire about 30 days from now."""
        cookie_mirror.write(["a"])
        (cookie,) = list(cookie_jar)
        assert cookie.path == "/"
        remaining = cookie.expires - time.time()
        assert 60 * 60 * 24 * 29 < remaining <= 60 * 60 * 24 * 30

    def test_overwrite_keeps_one_cookie(
        self, cookie_mirror: CookieJarMirror, cookie_jar: RequestsCookieJar
    ) -> None:
        """Each write should replace the previous value."""
        cookie_mirror.write(["a"])
        cookie_mirror.write(["b"])
        assert len(cookie_jar) == 1
        assert cookie_mirror.read() == ["b"]

    def test_clear_removes_cookie(
        self, cookie_mirror: CookieJarMirror, cookie_jar: RequestsCookieJar
    ) -> None:
        """Clearing should remove the cookie entirely."""
        cookie_mirror.write(["a"])
        cookie_mirror.clear()
        assert len(cookie_jar) == 0

    def test_clear_without_cookie(self, cookie_mirror: CookieJarMirror) -> None:
        """Clearing when nothing is stored should not fail."""
        cookie_mirror.clear()
        assert cookie_mirror.read() == []

    def test_oversize_value_rejected(
        self, cookie_mirror: CookieJarMirror, cookie_jar: RequestsCookieJar
    ) -> None:
        """Values beyond the cookie size limit should raise."""
        ids = [f"{i:020d}" for i in range(300)]
        with pytest.raises(MirrorWriteFailed):
            cookie_mirror.write(ids)
        assert len(cookie_jar) == 0

    def test_oversize_value_drops_previous_cookie(
        self, cookie_mirror: CookieJarMirror, cookie_jar: RequestsCookieJar
    ) -> None:
        """An oversize write should not leave the older value behind."""
        cookie_mirror.write(["old"])
        with pytest.raises(MirrorWriteFailed):
            cookie_mirror.write([f"{i:040d}" for i in range(120)])
        assert len(cookie_jar) == 0
        assert cookie_mirror.read() == []


class TestUnreadableDurableFile:
    """Tests for durable files that cannot be decoded."""

    def test_invalid_utf8_reads_empty(
        self, durable_mirror: JsonFileMirror, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Bytes that are not UTF-8 should read as empty, like bad JSON."""
        durable_mirror.path.parent.mkdir(parents=True, exist_ok=True)
        durable_mirror.path.write_bytes(b'\xff\xfe["a"]')
        assert durable_mirror.read() == []
        assert "unreadable favorites file" in caplog.text

    def test_directory_in_place_of_file(self, tmp_path: Path) -> None:
        """A path that cannot be read as a file should read as empty."""
        mirror = JsonFileMirror(tmp_path)
        assert mirror.read() == []


class TestResponseCookieMirror:
    """Tests for the Set-Cookie mirror used by the API."""

    def test_write_sets_header(self) -> None:
        """Writing should emit a favorites cookie with the lifetime and path."""
        response = Response()
        mirror = ResponseCookieMirror(response, max_age=60)
        mirror.write(["a", "b"])
        (header,) = response.headers.getlist("set-cookie")
        header = header.lower()
        assert header.startswith("favorites=")
        assert "max-age=60" in header
        assert "path=/" in header
        assert mirror.read() == ["a", "b"]

    def test_reads_incoming_value(self) -> None:
        """The incoming cookie should be the current value."""
        mirror = ResponseCookieMirror(Response(), current='["x"]')
        assert mirror.read() == ["x"]

    def test_clear_deletes_cookie(self) -> None:
        """Clearing should expire the cookie."""
        response = Response()
        mirror = ResponseCookieMirror(response, current='["x"]')
        mirror.clear()
        (header,) = response.headers.getlist("set-cookie")
        assert "max-age=0" in header.lower()
        assert mirror.read() == []

    def test_oversize_value_deletes_cookie(self) -> None:
        """An oversize write should raise and expire the current cookie."""
        response = Response()
        mirror = ResponseCookieMirror(response, current='["old"]')
        with pytest.raises(MirrorWriteFailed):
            mirror.write([f"{i:040d}" for i in range(120)])
        (header,) = response.headers.getlist("set-cookie")
        assert "max-age=0" in header.lower()
        assert mirror.read() == []
