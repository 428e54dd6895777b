"""Request-shape matchers. Each matcher is a predicate returning None on success or a MatchFailure."""

from reqshape.exceptions import FailureKind, MatchFailure

from .body import JsonBodyMatcher, MultipartJsonPayloadMatcher, NoContentMatcher
from .headers import AuthenticationMatcher, AuthenticationPredicate
from .multipart import FormFieldMatcher, FormFileMatcher, find_part, require_multipart
from .predicate import Predicate, check, check_all, describe_predicate

__all__ = [
    "AuthenticationMatcher",
    "AuthenticationPredicate",
    "FailureKind",
    "FormFieldMatcher",
    "FormFileMatcher",
    "JsonBodyMatcher",
    "MatchFailure",
    "MultipartJsonPayloadMatcher",
    "NoContentMatcher",
    "Predicate",
    "check",
    "check_all",
    "describe_predicate",
    "find_part",
    "require_multipart",
]
