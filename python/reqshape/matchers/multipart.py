"""Matchers over multipart/form-data fields.

Parts are located by substring search over their raw header values (`name=<name>`, `filename=<filename>`), not by
comparing parsed disposition parameters. A name that is a substring of another field's name can therefore match the
other field, and `name=x` also matches inside `filename=x`.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import IO

from reqshape.exceptions import FailureKind, MatchFailure
from reqshape.request import Part, PayloadKind, Request


def require_multipart(request: Request) -> tuple[tuple[Part, ...], MatchFailure | None]:
    """Get the parts of a multipart body, or the failure explaining why there are none."""
    if request.body is None:
        return (), MatchFailure(FailureKind.EXPECTED_PRESENCE, "Expected multipart request content")

    parts = request.body.get_parts()
    if parts is None:
        return (), MatchFailure(
            FailureKind.TYPE_MISMATCH,
            "Expected multipart request content",
            expected="multipart/form-data",
            actual=request.body.content_type,
        )
    return parts, None


def find_part(parts: Sequence[Part], *fragments: str) -> Part | None:
    """First part whose raw headers contain every fragment."""
    return next((part for part in parts if all(part.header_contains(f) for f in fragments)), None)


@dataclass(frozen=True, slots=True)
class FormFieldMatcher:
    """Requires a text field with the given name and exact value."""

    name: str
    value: str

    def __call__(self, request: Request) -> MatchFailure | None:
        parts, failure = require_multipart(request)
        if failure is not None:
            return failure

        part = find_part(parts, f"name={self.name}")
        if part is None:
            return MatchFailure(FailureKind.EXPECTED_PRESENCE, "Expected a multipart field", expected=self.name)

        actual = part.payload.get_text()
        if actual is None:
            return MatchFailure(
                FailureKind.TYPE_MISMATCH,
                f"Expected multipart field {self.name!r} to be text",
                expected=PayloadKind.TEXT.value,
                actual=part.payload.kind.value,
            )

        if actual != self.value:
            return MatchFailure(
                FailureKind.VALUE_MISMATCH,
                f"Multipart field {self.name!r} differs",
                expected=self.value,
                actual=actual,
            )
        return None

    def __str__(self) -> str:
        return f"Multipart field: {self.name}={self.value!r}"


@dataclass(frozen=True, slots=True)
class FormFileMatcher:
    """Requires a stream-backed file field with the given name, filename and stream instance.

    Streams are compared by identity: only the exact instance given here matches, even if another stream holds the
    same bytes.
    """

    name: str
    filename: str
    stream: IO[bytes]

    def __call__(self, request: Request) -> MatchFailure | None:
        parts, failure = require_multipart(request)
        if failure is not None:
            return failure

        part = find_part(parts, f"name={self.name}", f"filename={self.filename}")
        if part is None:
            return MatchFailure(
                FailureKind.EXPECTED_PRESENCE,
                "Expected a multipart file field",
                expected=f"{self.name} ({self.filename})",
            )

        actual = part.payload.get_stream()
        if actual is None:
            return MatchFailure(
                FailureKind.TYPE_MISMATCH,
                f"Expected multipart field {self.name!r} to be a stream",
                expected=PayloadKind.STREAM.value,
                actual=part.payload.kind.value,
            )

        if actual is not self.stream:
            return MatchFailure(
                FailureKind.VALUE_MISMATCH,
                f"Multipart file field {self.name!r} carries a different stream",
                expected=self.stream,
                actual=actual,
            )
        return None

    def __str__(self) -> str:
        return f"Multipart file: {self.name} ({self.filename})"
