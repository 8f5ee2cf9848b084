"""Exception types raised by the catalog client.

Every failure surfaces to the caller as a ``CatalogError`` subclass:

- ``TransportError``: the request could not be sent, or the server
  answered with a non-success status.
- ``DecodeError``: the response body did not have the expected shape.
"""

from __future__ import annotations

BODY_SNIPPET_LIMIT = 200


def _snippet(body: bytes | str | None) -> str | None:
    if body is None:
        return None
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if len(body) > BODY_SNIPPET_LIMIT:
        return body[:BODY_SNIPPET_LIMIT] + "..."
    return body


class CatalogError(Exception):
    """Base class for all catalog client errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class TransportError(CatalogError):
    """Raised when a request fails or returns a non-2xx status."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status: int | None = None,
        body: bytes | str | None = None,
    ):
        self.url = url
        self.status = status
        self.body = _snippet(body)
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.url:
            parts.append(f"url={self.url}")
        if self.status is not None:
            parts.append(f"status={self.status}")
        if self.body:
            parts.append(f"body={self.body!r}")
        return " ".join(parts)


class DecodeError(CatalogError):
    """Raised when a response body cannot be decoded into records."""

    def __init__(
        self,
        message: str,
        body: bytes | str | None = None,
        expected: str | None = None,
    ):
        self.body = _snippet(body)
        self.expected = expected
        super().__init__(message)

    def with_body(self, body: bytes | str) -> DecodeError:
        """Attach the offending response body unless one is already set."""
        if self.body is None:
            self.body = _snippet(body)
        return self

    def __str__(self) -> str:
        parts = [self.message]
        if self.expected:
            parts.append(f"expected={self.expected}")
        if self.body:
            parts.append(f"body={self.body!r}")
        return " ".join(parts)
