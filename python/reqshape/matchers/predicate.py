"""Predicate protocol and the fail-fast chain that evaluates predicates in attachment order."""

from collections.abc import Callable, Sequence

from reqshape.exceptions import FailureKind, MatchFailure
from reqshape.request import Request

Predicate = Callable[[Request], MatchFailure | bool | None]
"""A pure read of a captured request. Returns None or True to pass, False or a MatchFailure to fail."""


def check(predicate: Predicate, request: Request) -> MatchFailure | None:
    """Evaluate a single predicate, normalizing its outcome."""
    outcome = predicate(request)
    if outcome is None or outcome is True:
        return None
    if outcome is False:
        return MatchFailure(
            FailureKind.PREDICATE_MISMATCH, f"Predicate {describe_predicate(predicate)} did not match"
        )
    if isinstance(outcome, MatchFailure):
        return outcome
    raise TypeError(f"Predicate must return None, a bool or a MatchFailure, got {type(outcome).__name__}")


def check_all(predicates: Sequence[Predicate], request: Request) -> MatchFailure | None:
    """Evaluate predicates in order, stopping at the first failure."""
    for predicate in predicates:
        if (failure := check(predicate, request)) is not None:
            return failure
    return None


def describe_predicate(predicate: Predicate) -> str:
    """Readable name of a predicate for failure messages."""
    if type(predicate).__str__ is not object.__str__:
        return str(predicate)
    return getattr(predicate, "__name__", repr(predicate))
