"""Module providing request-shape assertions on top of an in-process mock transport."""

import logging
from re import Pattern
from typing import IO, Any, Self

import pytest

from reqshape.client import BlockingClient, Client
from reqshape.exceptions import FailureKind, MatchFailure, RequestMismatchError
from reqshape.json_matcher.builder import ElementBuild, build_element_matcher
from reqshape.matchers import (
    AuthenticationMatcher,
    AuthenticationPredicate,
    FormFieldMatcher,
    FormFileMatcher,
    JsonBodyMatcher,
    MultipartJsonPayloadMatcher,
    NoContentMatcher,
    Predicate,
    check_all,
)
from reqshape.pytest_plugin.types import Matcher, MethodMatcher, UrlMatcher
from reqshape.request import Request
from reqshape.response import Response, ResponseBuilder
from reqshape.types import HeadersType

logger = logging.getLogger(__name__)


class Mock:
    """Class representing a single mock rule (an expectation)."""

    def __init__(self, method: MethodMatcher | None = None, path: UrlMatcher | None = None) -> None:
        """Do not use directly. Instead, use ClientMocker.mock()."""
        self._method_matcher = method
        self._path_matcher = path
        self._predicates: list[Predicate] = []

        self._matched_requests: list[Request] = []
        self._unmatched_requests: list[tuple[Request, MatchFailure]] = []

        self._response_builder = ResponseBuilder()
        self._built_response: Response | None = None

    def assert_called(
        self,
        *,
        count: int | None = None,
        min_count: int | None = None,
        max_count: int | None = None,
    ) -> None:
        """Assert that this mock was called the expected number of times. By default, exactly once."""
        if count is None and min_count is None and max_count is None:
            count = 1

        if self._assertion_passes(count, min_count, max_count):
            return

        from reqshape.pytest_plugin.internal.assert_message import format_assert_called_error

        raise AssertionError(format_assert_called_error(self, count=count, min_count=min_count, max_count=max_count))

    def _assertion_passes(
        self,
        count: int | None,
        min_count: int | None,
        max_count: int | None,
    ) -> bool:
        actual_count = len(self._matched_requests)
        if count is not None:
            return actual_count == count

        min_satisfied = min_count is None or actual_count >= min_count
        max_satisfied = max_count is None or actual_count <= max_count

        return min_satisfied and max_satisfied

    def get_requests(self) -> list[Request]:
        """Get all captured requests by this mock."""
        return [*self._matched_requests]

    def get_call_count(self) -> int:
        """Get the total number of calls to this mock."""
        return len(self._matched_requests)

    def get_failures(self) -> list[MatchFailure]:
        """Get the failures of requests this mock rejected, oldest first."""
        return [failure for _, failure in self._unmatched_requests]

    def reset_requests(self) -> None:
        """Reset all captured requests for this mock."""
        self._matched_requests.clear()
        self._unmatched_requests.clear()

    def with_predicate(self, predicate: Predicate) -> Self:
        """Attach a predicate. Predicates are evaluated in attachment order and the first failure stops the chain."""
        self._predicates.append(predicate)
        return self

    def with_no_content(self) -> Self:
        """Require that the request has no content."""
        return self.with_predicate(NoContentMatcher())

    def with_authentication(self, predicate: AuthenticationPredicate | None = None) -> Self:
        """Require an Authorization header, optionally matching the predicate."""
        return self.with_predicate(AuthenticationMatcher(predicate))

    def with_json(self, build: ElementBuild | None = None) -> Self:
        """Require a JSON body, optionally matching the structural matcher configured by `build`."""
        return self.with_predicate(JsonBodyMatcher(build_element_matcher(build)))

    def with_multipart_json_payload(
        self,
        build: ElementBuild | None = None,
        *,
        part_name: str = "payload_json",
    ) -> Self:
        """Require a multipart body with a JSON payload part, optionally matching the structural matcher."""
        return self.with_predicate(MultipartJsonPayloadMatcher(build_element_matcher(build), part_name))

    def with_multipart_form_data(self, name: str, value: str) -> Self:
        """Require a multipart text field with the given name and value."""
        return self.with_predicate(FormFieldMatcher(name, value))

    def with_multipart_form_file(self, name: str, filename: str, stream: IO[bytes]) -> Self:
        """Require a multipart file field with the given name, filename and the very same stream instance."""
        return self.with_predicate(FormFileMatcher(name, filename, stream))

    def with_status(self, status: int) -> Self:
        """Set the mocked response status code."""
        self._response_builder.status(status)
        return self

    def with_header(self, name: str, value: str) -> Self:
        """Add a header to the mocked response."""
        self._response_builder.header(name, value)
        return self

    def with_body_bytes(self, body: bytes | bytearray | memoryview) -> Self:
        """Set the mocked response body to the given bytes."""
        self._response_builder.body_bytes(body)
        return self

    def with_body_text(self, body: str) -> Self:
        """Set the mocked response body to the given text."""
        self._response_builder.body_text(body)
        return self

    def with_body_json(self, json_body: Any) -> Self:
        """Set the mocked response body to the given JSON-serializable object."""
        self._response_builder.body_json(json_body)
        return self

    def _routes(self, request: Request) -> bool:
        return self._matches_method(request) and self._matches_path(request)

    def _matches_method(self, request: Request) -> bool:
        if self._method_matcher is None:
            return True
        if isinstance(self._method_matcher, set):
            return request.method in {m.upper() for m in self._method_matcher}
        return _matches(self._method_matcher, request.method)

    def _matches_path(self, request: Request) -> bool:
        if self._path_matcher is None:
            return True
        url_without_query = request.url.split("?", 1)[0]
        return any(_matches(self._path_matcher, candidate) for candidate in (request.path, url_without_query))

    def _handle(self, request: Request) -> Response | MatchFailure:
        if (failure := check_all(self._predicates, request)) is not None:
            self._unmatched_requests.append((request, failure))
            return failure

        self._matched_requests.append(request)
        return self._response()

    def _response(self) -> Response:
        if self._built_response is None:
            self._built_response = self._response_builder.build()
        return self._built_response


def _matches(matcher: Matcher, value: str) -> bool:
    if isinstance(matcher, Pattern):
        return matcher.search(value) is not None
    return bool(matcher == value)


class ClientMocker:
    """Main class for mocking HTTP requests. Also the transport behind the clients it creates."""

    def __init__(self, *, strict: bool = False, raise_on_mismatch: bool = True) -> None:
        """Initialize the ClientMocker."""
        self._mocks: list[Mock] = []
        self._strict = strict
        self._raise_on_mismatch = raise_on_mismatch

    def mock(self, method: MethodMatcher | None = None, path: UrlMatcher | None = None) -> Mock:
        """Add a mock rule for requests matching the given criteria."""
        mock = Mock(method, path)
        self._mocks.append(mock)
        return mock

    def get(self, path: UrlMatcher | None = None) -> Mock:
        """Mock GET requests to the given URL."""
        return self.mock("GET", path)

    def post(self, path: UrlMatcher | None = None) -> Mock:
        """Mock POST requests to the given URL."""
        return self.mock("POST", path)

    def put(self, path: UrlMatcher | None = None) -> Mock:
        """Mock PUT requests to the given URL."""
        return self.mock("PUT", path)

    def patch(self, path: UrlMatcher | None = None) -> Mock:
        """Mock PATCH requests to the given URL."""
        return self.mock("PATCH", path)

    def delete(self, path: UrlMatcher | None = None) -> Mock:
        """Mock DELETE requests to the given URL."""
        return self.mock("DELETE", path)

    def head(self, path: UrlMatcher | None = None) -> Mock:
        """Mock HEAD requests to the given URL."""
        return self.mock("HEAD", path)

    def options(self, path: UrlMatcher | None = None) -> Mock:
        """Mock OPTIONS requests to the given URL."""
        return self.mock("OPTIONS", path)

    def strict(self, enabled: bool = True) -> Self:
        """Enable strict mode - unmatched requests will raise an error."""
        self._strict = enabled
        return self

    def raise_on_mismatch(self, enabled: bool = True) -> Self:
        """Raise the first predicate failure from send(). When disabled, the next mock rule is tried instead."""
        self._raise_on_mismatch = enabled
        return self

    def client(self, *, default_headers: HeadersType | None = None) -> Client:
        """Create an async client whose requests are answered by this mocker."""
        return Client(self, default_headers=default_headers)

    def blocking_client(self, *, default_headers: HeadersType | None = None) -> BlockingClient:
        """Create a blocking client whose requests are answered by this mocker."""
        return BlockingClient(self, default_headers=default_headers)

    def get_requests(self) -> list[Request]:
        """Get all captured requests in all mocks."""
        return [request for mock in self._mocks for request in mock.get_requests()]

    def get_call_count(self) -> int:
        """Get the total number of calls in all mocks."""
        return sum(mock.get_call_count() for mock in self._mocks)

    def clear(self) -> None:
        """Remove all mocks."""
        self._mocks.clear()

    def reset_requests(self) -> None:
        """Reset all captured requests in all mocks."""
        for mock in self._mocks:
            mock.reset_requests()

    def dispatch(self, request: Request) -> Response:
        """Answer a request with the first mock rule whose route and predicates match."""
        for mock in self._mocks:
            if not mock._routes(request):
                continue

            result = mock._handle(request)
            if isinstance(result, Response):
                logger.debug("Mock rule matched request: %s %s", request.method, request.url)
                return result

            logger.debug("Mock rule rejected request %s %s: %s", request.method, request.url, result.describe())
            if self._raise_on_mismatch:
                raise RequestMismatchError(result)

        # No rule matched
        if self._strict:
            raise RequestMismatchError(
                MatchFailure(
                    FailureKind.EXPECTED_PRESENCE,
                    "No mock rule matched request",
                    actual=f"{request.method} {request.url}",
                ),
            )
        return ResponseBuilder().status(404).build()


@pytest.fixture
def client_mocker(request: pytest.FixtureRequest) -> ClientMocker:
    """Fixture that provides a ClientMocker for mocking HTTP requests in tests.

    Defaults come from the `reqshape_strict` and `reqshape_raise_on_mismatch` ini options, and can be overridden per
    test with `@pytest.mark.reqshape(strict=..., raise_on_mismatch=...)`.
    """
    strict = bool(request.config.getini("reqshape_strict"))
    raise_on_mismatch = bool(request.config.getini("reqshape_raise_on_mismatch"))

    if (marker := request.node.get_closest_marker("reqshape")) is not None:
        strict = marker.kwargs.get("strict", strict)
        raise_on_mismatch = marker.kwargs.get("raise_on_mismatch", raise_on_mismatch)

    return ClientMocker(strict=strict, raise_on_mismatch=raise_on_mismatch)
