"""Failure messages for Mock.assert_called."""

from re import Pattern
from typing import TYPE_CHECKING

from reqshape.matchers import describe_predicate

if TYPE_CHECKING:
    from reqshape.pytest_plugin.mock import Mock
    from reqshape.pytest_plugin.types import MethodMatcher


def format_assert_called_error(
    mock: "Mock",
    *,
    count: int | None = None,
    min_count: int | None = None,
    max_count: int | None = None,
) -> str:
    actual_count = len(mock._matched_requests)
    error_parts = ["Mock was not called as expected."]

    if count is not None:
        error_parts.append(f"Expected exactly {count} request(s) but received {actual_count}.")
    else:
        expectations = []
        if min_count is not None:
            expectations.append(f"at least {min_count}")
        if max_count is not None:
            expectations.append(f"at most {max_count}")
        expected_desc = " and ".join(expectations)
        error_parts.append(f"Expected {expected_desc} request(s) but received {actual_count}.")

    error_parts.append("\nMock configuration:")
    error_parts.append(format_mock_matchers(mock))

    if mock._unmatched_requests:
        error_parts.append(f"\nRejected requests ({len(mock._unmatched_requests)}):")
        for i, (request, failure) in enumerate(mock._unmatched_requests[-5:], 1):
            error_parts.append(f"  {i}. {request.method} {request.url}")
            error_parts.extend(f"     {line}" for line in failure.describe().splitlines())
        if len(mock._unmatched_requests) > 5:
            error_parts.append(f"  ... and {len(mock._unmatched_requests) - 5} more")

    if mock._matched_requests:
        error_parts.append(f"\nMatched requests ({len(mock._matched_requests)}):")
        for i, request in enumerate(mock._matched_requests[-3:], 1):
            error_parts.append(f"  {i}. {request.method} {request.url}")
        if len(mock._matched_requests) > 3:
            error_parts.append(f"  ... and {len(mock._matched_requests) - 3} more")

    return "\n".join(error_parts)


def format_mock_matchers(mock: "Mock") -> str:
    parts = [
        f"  Method: {_format_matcher(mock._method_matcher)}",
        f"  Path: {_format_matcher(mock._path_matcher)}",
    ]
    parts.extend(f"  {describe_predicate(predicate)}" for predicate in mock._predicates)
    return "\n".join(parts)


def _format_matcher(matcher: "MethodMatcher | None") -> str:
    if matcher is None:
        return "Any"
    elif isinstance(matcher, set):
        return " or ".join(sorted(matcher))
    elif isinstance(matcher, Pattern):
        return f"{matcher.pattern} (regex)"
    else:
        return str(matcher)
