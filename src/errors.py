"""Error types raised by the search and favorites layers."""

from __future__ import annotations


class UpstreamRequestFailed(RuntimeError):
    """An upstream API call failed at the transport or HTTP level.

    Args:
        message: Human-readable failure description.
        status_code: HTTP status of the failed response, if one arrived.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class LocationSearchFailed(UpstreamRequestFailed):
    """The first location lookup request failed."""


class MirrorWriteFailed(RuntimeError):
    """A favorites mirror could not be written or cleared."""
