"""Client handles sending requests through a mock transport."""

import base64
from typing import Any, Generic, Protocol, Self, TypeVar

from reqshape.http import HeaderMap
from reqshape.request import MultipartForm, Request, RequestBody
from reqshape.response import Response
from reqshape.types import HeadersType


class Transport(Protocol):
    """Anything that answers a captured request with a response."""

    def dispatch(self, request: Request) -> Response:
        """Answer the request, or raise if it cannot be answered."""
        ...


class BaseRequestBuilder:
    """Shared request building for async and blocking clients."""

    def __init__(self, transport: Transport, method: str, url: str, default_headers: HeaderMap) -> None:
        """Do not use directly. Instead, use Client or BlockingClient."""
        self._transport = transport
        self._method = method
        self._url = url
        self._headers = default_headers.multi_items()
        self._body: RequestBody | None = None

    def header(self, name: str, value: str) -> Self:
        """Add a request header."""
        self._headers.append((name, value))
        return self

    def headers(self, headers: HeadersType) -> Self:
        """Add multiple request headers."""
        self._headers.extend(HeaderMap(headers).multi_items())
        return self

    def bearer_auth(self, token: str) -> Self:
        """Set a bearer token Authorization header."""
        return self._set_authorization(f"Bearer {token}")

    def basic_auth(self, username: str, password: str | None = None) -> Self:
        """Set a basic Authorization header."""
        credentials = base64.b64encode(f"{username}:{password or ''}".encode()).decode()
        return self._set_authorization(f"Basic {credentials}")

    def body(self, body: RequestBody | None) -> Self:
        """Set the request body. None removes it."""
        self._body = body
        return self

    def body_bytes(self, body: bytes | bytearray | memoryview) -> Self:
        """Set the request body to the given bytes."""
        return self.body(RequestBody.from_bytes(body))

    def body_text(self, body: str) -> Self:
        """Set the request body to the given text."""
        return self.body(RequestBody.from_text(body))

    def body_json(self, body: Any) -> Self:
        """Set the request body to the given JSON-serializable object."""
        return self.body(RequestBody.from_json(body))

    def multipart(self, form: MultipartForm) -> Self:
        """Set a multipart/form-data body."""
        return self.body(RequestBody.from_multipart(form))

    def build(self) -> Request:
        """Build the immutable request snapshot."""
        return Request(self._method, self._url, headers=HeaderMap(self._headers), body=self._body)

    def _set_authorization(self, value: str) -> Self:
        self._headers = [(name, v) for name, v in self._headers if name.lower() != "authorization"]
        self._headers.append(("Authorization", value))
        return self


_B = TypeVar("_B", bound="BaseRequestBuilder")


class RequestBuilder(BaseRequestBuilder):
    """Request builder for the async client."""

    async def send(self) -> Response:
        """Build and send the request."""
        return self._transport.dispatch(self.build())


class BlockingRequestBuilder(BaseRequestBuilder):
    """Request builder for the blocking client."""

    def send(self) -> Response:
        """Build and send the request."""
        return self._transport.dispatch(self.build())


class _BaseClient(Generic[_B]):
    _builder_type: type[_B]

    def __init__(self, transport: Transport, *, default_headers: HeadersType | None = None) -> None:
        """Do not use directly. Instead, use ClientMocker.client() or ClientMocker.blocking_client()."""
        self._transport = transport
        self._default_headers = HeaderMap(default_headers)

    def request(self, method: str, url: str) -> _B:
        """Start building a request with the given method."""
        return self._builder_type(self._transport, method.upper(), url, self._default_headers)

    def get(self, url: str) -> _B:
        """Start building a GET request."""
        return self.request("GET", url)

    def post(self, url: str) -> _B:
        """Start building a POST request."""
        return self.request("POST", url)

    def put(self, url: str) -> _B:
        """Start building a PUT request."""
        return self.request("PUT", url)

    def patch(self, url: str) -> _B:
        """Start building a PATCH request."""
        return self.request("PATCH", url)

    def delete(self, url: str) -> _B:
        """Start building a DELETE request."""
        return self.request("DELETE", url)

    def head(self, url: str) -> _B:
        """Start building a HEAD request."""
        return self.request("HEAD", url)

    def options(self, url: str) -> _B:
        """Start building an OPTIONS request."""
        return self.request("OPTIONS", url)


class Client(_BaseClient[RequestBuilder]):
    """Async client handle. `send()` is awaited; matching completes before the response is returned."""

    _builder_type = RequestBuilder

    async def send(self, request: Request) -> Response:
        """Send a prebuilt request."""
        return self._transport.dispatch(request)


class BlockingClient(_BaseClient[BlockingRequestBuilder]):
    """Blocking client handle."""

    _builder_type = BlockingRequestBuilder

    def send(self, request: Request) -> Response:
        """Send a prebuilt request."""
        return self._transport.dispatch(request)


__all__ = [
    "BaseRequestBuilder",
    "BlockingClient",
    "BlockingRequestBuilder",
    "Client",
    "RequestBuilder",
    "Transport",
]
