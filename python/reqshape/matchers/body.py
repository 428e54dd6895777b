"""Matchers classifying and validating the request body."""

import json
from dataclasses import dataclass, field
from typing import Any

from reqshape.exceptions import FailureKind, MatchFailure
from reqshape.json_matcher import AnyNode, JsonNode, describe, evaluate
from reqshape.matchers.multipart import find_part, require_multipart
from reqshape.request import PayloadKind, Request


@dataclass(frozen=True, slots=True)
class NoContentMatcher:
    """Requires the request to have no body."""

    def __call__(self, request: Request) -> MatchFailure | None:
        if request.body is not None:
            return MatchFailure(FailureKind.EXPECTED_ABSENCE, "Expected no request content", actual=request.body)
        return None

    def __str__(self) -> str:
        return "Body: none"


@dataclass(frozen=True, slots=True)
class JsonBodyMatcher:
    """Requires an opaque body that parses as JSON and satisfies the structural matcher."""

    matcher: JsonNode = field(default_factory=AnyNode)

    def __call__(self, request: Request) -> MatchFailure | None:
        body = request.body
        if body is None:
            return MatchFailure(FailureKind.EXPECTED_PRESENCE, "Expected JSON request content")

        content = body.copy_bytes()
        if content is None:
            return MatchFailure(
                FailureKind.TYPE_MISMATCH, "Expected JSON request content", expected="json", actual=body.content_type
            )

        parsed, failure = _parse_json(content)
        if failure is not None:
            return failure
        return evaluate(self.matcher, parsed)

    def __str__(self) -> str:
        return f"Body (JSON): {describe(self.matcher)}"


@dataclass(frozen=True, slots=True)
class MultipartJsonPayloadMatcher:
    """Requires a multipart body with a JSON part satisfying the structural matcher."""

    matcher: JsonNode = field(default_factory=AnyNode)
    part_name: str = "payload_json"

    def __call__(self, request: Request) -> MatchFailure | None:
        parts, failure = require_multipart(request)
        if failure is not None:
            return failure

        part = find_part(parts, f"name={self.part_name}")
        if part is None:
            return MatchFailure(
                FailureKind.EXPECTED_PRESENCE, "Expected a multipart JSON payload part", expected=self.part_name
            )

        content = part.payload.get_bytes()
        if content is None:
            return MatchFailure(
                FailureKind.TYPE_MISMATCH,
                "Expected an inline multipart JSON payload",
                expected=PayloadKind.TEXT.value,
                actual=part.payload.kind.value,
            )

        parsed, failure = _parse_json(content)
        if failure is not None:
            return failure
        return evaluate(self.matcher, parsed)

    def __str__(self) -> str:
        return f"Multipart JSON payload ({self.part_name}): {describe(self.matcher)}"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a valid JSON value")


def _parse_json(content: bytes) -> tuple[Any, MatchFailure | None]:
    try:
        return json.loads(content, parse_constant=_reject_constant), None
    except ValueError as e:
        return None, MatchFailure(
            FailureKind.TYPE_MISMATCH, f"Content is not valid JSON: {e}", expected="json", actual=content
        )
