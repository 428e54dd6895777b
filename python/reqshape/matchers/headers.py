"""Matchers over request headers."""

from collections.abc import Callable
from dataclasses import dataclass

from reqshape.exceptions import FailureKind, MatchFailure
from reqshape.http import AuthenticationHeader
from reqshape.request import Request

AuthenticationPredicate = Callable[[AuthenticationHeader], bool]


@dataclass(frozen=True, slots=True)
class AuthenticationMatcher:
    """Requires an Authorization header, optionally refined by a predicate over scheme and parameter."""

    predicate: AuthenticationPredicate | None = None

    def __call__(self, request: Request) -> MatchFailure | None:
        authorization = request.authorization
        if authorization is None:
            return MatchFailure(FailureKind.EXPECTED_PRESENCE, "Expected an Authorization header")

        if self.predicate is not None and not self.predicate(authorization):
            return MatchFailure(
                FailureKind.PREDICATE_MISMATCH,
                "The authentication predicate did not match",
                actual=str(authorization),
            )
        return None

    def __str__(self) -> str:
        if self.predicate is None:
            return "Authentication: present"
        return f"Authentication: {getattr(self.predicate, '__name__', repr(self.predicate))}"
