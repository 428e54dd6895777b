"""Canned responses returned by the mock transport."""

import json
from typing import Any, Self

from reqshape.http import HeaderMap
from reqshape.request import JSON_CONTENT_TYPE, TEXT_CONTENT_TYPE


class Response:
    """Response produced by a mock rule."""

    __slots__ = ("_content", "_headers", "_status")

    def __init__(self, status: int, headers: HeaderMap, content: bytes) -> None:
        """Do not use directly. Instead, use ResponseBuilder."""
        self._status = status
        self._headers = headers
        self._content = content

    @property
    def status(self) -> int:
        """Response status code."""
        return self._status

    @property
    def headers(self) -> HeaderMap:
        """Response headers."""
        return self._headers

    def bytes(self) -> bytes:
        """Response body as bytes."""
        return self._content

    def text(self) -> str:
        """Response body decoded as UTF-8."""
        return self._content.decode()

    def json(self) -> Any:
        """Response body parsed as JSON."""
        return json.loads(self._content)

    def __repr__(self) -> str:
        return f"Response(status={self._status})"


class ResponseBuilder:
    """Builder for canned responses."""

    def __init__(self) -> None:
        self._status = 200
        self._headers: list[tuple[str, str]] = []
        self._content = b""

    def status(self, status: int) -> Self:
        """Set the status code."""
        if not 100 <= status <= 599:
            raise ValueError(f"Invalid status code: {status}")
        self._status = status
        return self

    def header(self, name: str, value: str) -> Self:
        """Add a header."""
        self._headers.append((name, value))
        return self

    def body_bytes(self, body: bytes | bytearray | memoryview) -> Self:
        """Set the body to the given bytes."""
        self._content = bytes(body)
        return self

    def body_text(self, body: str) -> Self:
        """Set the body to the given text."""
        self._content = body.encode()
        self._default_content_type(TEXT_CONTENT_TYPE)
        return self

    def body_json(self, body: Any) -> Self:
        """Set the body to the given JSON-serializable object."""
        self._content = json.dumps(body).encode()
        self._default_content_type(JSON_CONTENT_TYPE)
        return self

    def build(self) -> Response:
        """Build the response."""
        return Response(self._status, HeaderMap(self._headers), self._content)

    def _default_content_type(self, content_type: str) -> None:
        if not any(name.lower() == "content-type" for name, _ in self._headers):
            self._headers.append(("Content-Type", content_type))


__all__ = [
    "Response",
    "ResponseBuilder",
]
