"""Failure kinds and the error raised when a mocked request does not have the expected shape."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class FailureKind(Enum):
    """Classification of a request-shape mismatch."""

    EXPECTED_ABSENCE = "expected absence"
    """Something required to be missing was present."""

    EXPECTED_PRESENCE = "expected presence"
    """Something required was missing (header, body, named part)."""

    TYPE_MISMATCH = "type mismatch"
    """Present but of the wrong kind (not JSON, not multipart, wrong part payload)."""

    VALUE_MISMATCH = "value mismatch"
    """Present and correctly typed, but the value differs."""

    PREDICATE_MISMATCH = "predicate mismatch"
    """A caller-supplied refinement predicate returned False."""


_MISSING: Any = object()


@dataclass(frozen=True, slots=True)
class MatchFailure:
    """Outcome of a failed matcher. A passing matcher returns None instead."""

    kind: FailureKind
    message: str
    expected: Any = _MISSING
    actual: Any = _MISSING
    path: str | None = None

    def describe(self) -> str:
        """Human-readable description with expected and actual values when known."""
        lines = [f"{self.message} at {self.path}" if self.path else self.message]
        if self.expected is not _MISSING:
            lines.append(f"  Expected: {self.expected!r}")
        if self.actual is not _MISSING:
            lines.append(f"  Actual: {self.actual!r}")
        return "\n".join(lines)


class RequestMismatchError(AssertionError):
    """Raised from the dispatch path when a mocked request does not have the expected shape."""

    def __init__(self, failure: MatchFailure) -> None:
        """Wrap the first failure of a predicate chain."""
        super().__init__(f"[{failure.kind.value}] {failure.describe()}")
        self.failure = failure

    @property
    def kind(self) -> FailureKind:
        """Kind of the underlying failure."""
        return self.failure.kind
