"""Captured request snapshot, request bodies and multipart parts."""

import json
import re
import secrets
from collections.abc import Sequence
from enum import Enum
from typing import IO, Any, Self
from urllib.parse import urlsplit

from reqshape.http import AuthenticationHeader, HeaderMap
from reqshape.types import HeadersType

_TOKEN_RE = re.compile(r"[!#$%&'*+.^_`|~0-9A-Za-z-]+")

TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"
BINARY_CONTENT_TYPE = "application/octet-stream"
JSON_CONTENT_TYPE = "application/json"


class PayloadKind(Enum):
    """Kind of data carried by a multipart part."""

    TEXT = "text"
    BYTES = "bytes"
    STREAM = "stream"


class PartPayload:
    """Payload of a multipart part: inline text, inline bytes, or a readable byte stream.

    Streams are held by reference and never read here, so the very instance given at construction is returned by
    `get_stream`.
    """

    __slots__ = ("_kind", "_value")

    def __init__(self, kind: PayloadKind, value: str | bytes | IO[bytes]) -> None:
        """Do not use directly. Instead, use from_text(), from_bytes() or from_stream()."""
        self._kind = kind
        self._value = value

    @classmethod
    def from_text(cls, text: str) -> Self:
        """Inline text payload."""
        return cls(PayloadKind.TEXT, text)

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> Self:
        """Inline bytes payload."""
        return cls(PayloadKind.BYTES, bytes(data))

    @classmethod
    def from_stream(cls, stream: IO[bytes]) -> Self:
        """Stream-backed payload. The stream is not read or copied."""
        return cls(PayloadKind.STREAM, stream)

    @property
    def kind(self) -> PayloadKind:
        """Kind of the payload."""
        return self._kind

    def get_text(self) -> str | None:
        """Get the text of a text payload, None for other kinds."""
        return self._value if self._kind is PayloadKind.TEXT else None  # type: ignore[return-value]

    def get_bytes(self) -> bytes | None:
        """Get inline data as bytes (text is UTF-8 encoded), None for stream payloads."""
        if self._kind is PayloadKind.TEXT:
            return self._value.encode()  # type: ignore[union-attr]
        if self._kind is PayloadKind.BYTES:
            return self._value  # type: ignore[return-value]
        return None

    def get_stream(self) -> IO[bytes] | None:
        """Get the underlying readable resource of a stream payload, None for inline kinds."""
        return self._value if self._kind is PayloadKind.STREAM else None  # type: ignore[return-value]

    def __repr__(self) -> str:
        if self._kind is PayloadKind.STREAM:
            return f"PartPayload.from_stream({self._value!r})"
        return f"PartPayload.from_{self._kind.value}({self._value!r})"


def _quote_param(value: str) -> str:
    if _TOKEN_RE.fullmatch(value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class Part:
    """One named section of a multipart body."""

    __slots__ = ("_content_type", "_filename", "_headers", "_name", "_payload")

    def __init__(
        self,
        name: str,
        payload: PartPayload,
        *,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> None:
        """Create a part. Content-Disposition and Content-Type headers are derived from the arguments."""
        if content_type is None:
            content_type = TEXT_CONTENT_TYPE if payload.kind is PayloadKind.TEXT else BINARY_CONTENT_TYPE

        disposition = f"form-data; name={_quote_param(name)}"
        if filename is not None:
            disposition += f"; filename={_quote_param(filename)}"

        self._name = name
        self._filename = filename
        self._content_type = content_type
        self._payload = payload
        self._headers = HeaderMap([("Content-Disposition", disposition), ("Content-Type", content_type)])

    @property
    def name(self) -> str:
        """Form field name."""
        return self._name

    @property
    def filename(self) -> str | None:
        """Filename, if the part is a file field."""
        return self._filename

    @property
    def content_type(self) -> str:
        """Declared content type of the part."""
        return self._content_type

    @property
    def headers(self) -> HeaderMap:
        """Part headers, including the raw disposition text."""
        return self._headers

    @property
    def payload(self) -> PartPayload:
        """Part payload."""
        return self._payload

    def header_contains(self, fragment: str) -> bool:
        """Whether any raw header value of this part contains the given text."""
        return any(fragment in value for _, value in self._headers.multi_items())

    def __repr__(self) -> str:
        return f"Part(name={self._name!r}, filename={self._filename!r}, payload={self._payload!r})"


class MultipartForm:
    """Builder for multipart/form-data bodies."""

    def __init__(self) -> None:
        """Create an empty form."""
        self._parts: list[Part] = []

    def text(self, name: str, value: str, *, content_type: str | None = None) -> Self:
        """Add a text field."""
        return self.part(Part(name, PartPayload.from_text(value), content_type=content_type))

    def binary(self, name: str, data: bytes, *, filename: str | None = None, content_type: str | None = None) -> Self:
        """Add an inline binary field."""
        return self.part(Part(name, PartPayload.from_bytes(data), filename=filename, content_type=content_type))

    def file(self, name: str, filename: str, stream: IO[bytes], *, content_type: str | None = None) -> Self:
        """Add a stream-backed file field. The stream is sent by reference."""
        return self.part(Part(name, PartPayload.from_stream(stream), filename=filename, content_type=content_type))

    def json(self, name: str, value: Any) -> Self:
        """Add a JSON-encoded text field."""
        return self.text(name, json.dumps(value), content_type=JSON_CONTENT_TYPE)

    def part(self, part: Part) -> Self:
        """Add a prebuilt part."""
        self._parts.append(part)
        return self

    @property
    def parts(self) -> tuple[Part, ...]:
        """Parts added so far."""
        return tuple(self._parts)


class RequestBody:
    """Request body: opaque bytes with a content type, or an ordered sequence of multipart parts."""

    __slots__ = ("_content", "_content_type", "_parts")

    def __init__(self, content_type: str, content: bytes | None, parts: tuple[Part, ...] | None) -> None:
        """Do not use directly. Instead, use from_bytes(), from_text(), from_json() or from_multipart()."""
        self._content_type = content_type
        self._content = content
        self._parts = parts

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview, content_type: str = BINARY_CONTENT_TYPE) -> Self:
        """Opaque body from bytes."""
        return cls(content_type, bytes(data), None)

    @classmethod
    def from_text(cls, text: str, content_type: str = TEXT_CONTENT_TYPE) -> Self:
        """Opaque body from UTF-8 encoded text."""
        return cls(content_type, text.encode(), None)

    @classmethod
    def from_json(cls, value: Any) -> Self:
        """Opaque JSON body."""
        return cls(JSON_CONTENT_TYPE, json.dumps(value).encode(), None)

    @classmethod
    def from_multipart(cls, form: MultipartForm | Sequence[Part]) -> Self:
        """Multipart body. The parts are snapshotted; later changes to the form are not seen."""
        parts = form.parts if isinstance(form, MultipartForm) else tuple(form)
        return cls(f"multipart/form-data; boundary={secrets.token_hex(16)}", None, parts)

    @property
    def content_type(self) -> str:
        """Declared content type."""
        return self._content_type

    @property
    def is_multipart(self) -> bool:
        """Whether this is a multipart body."""
        return self._parts is not None

    def copy_bytes(self) -> bytes | None:
        """Get the bytes of an opaque body, None for multipart bodies."""
        return self._content

    def get_parts(self) -> tuple[Part, ...] | None:
        """Get the parts of a multipart body, None for opaque bodies."""
        return self._parts

    def __repr__(self) -> str:
        if self._parts is not None:
            return f"RequestBody(multipart, parts={list(self._parts)!r})"
        return f"RequestBody({self._content_type!r}, {self._content!r})"


class Request:
    """Immutable snapshot of an outgoing request, as seen by matchers."""

    __slots__ = ("_body", "_headers", "_method", "_url")

    def __init__(
        self,
        method: str,
        url: str,
        *,
        headers: HeaderMap | HeadersType | None = None,
        body: RequestBody | None = None,
    ) -> None:
        """Create a request snapshot. A None body means the request has no content."""
        self._method = method.upper()
        self._url = url
        self._headers = headers if isinstance(headers, HeaderMap) else HeaderMap(headers)
        self._body = body

    @property
    def method(self) -> str:
        """Request method, upper-cased."""
        return self._method

    @property
    def url(self) -> str:
        """Request URL."""
        return self._url

    @property
    def path(self) -> str:
        """Path component of the URL."""
        return urlsplit(self._url).path or "/"

    @property
    def headers(self) -> HeaderMap:
        """Request headers."""
        return self._headers

    @property
    def body(self) -> RequestBody | None:
        """Request body, None when the request has no content."""
        return self._body

    @property
    def authorization(self) -> AuthenticationHeader | None:
        """Parsed Authorization header, if present."""
        value = self._headers.get("Authorization")
        return AuthenticationHeader.parse(value) if value is not None else None

    def __repr__(self) -> str:
        return f"Request({self._method} {self._url})"


__all__ = [
    "BINARY_CONTENT_TYPE",
    "JSON_CONTENT_TYPE",
    "TEXT_CONTENT_TYPE",
    "MultipartForm",
    "Part",
    "PartPayload",
    "PayloadKind",
    "Request",
    "RequestBody",
]
