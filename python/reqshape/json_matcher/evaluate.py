"""Evaluation of structural matcher trees against parsed JSON values."""

import re
from typing import Any, assert_never

from reqshape.exceptions import FailureKind, MatchFailure
from reqshape.json_matcher.nodes import (
    AnyNode,
    ArrayNode,
    HasAnyElement,
    HasCount,
    HasElement,
    HasProperty,
    JsonNode,
    LacksProperty,
    NullNode,
    ObjectNode,
    ValueNode,
)

_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def evaluate(node: JsonNode, value: Any, path: str = "$") -> MatchFailure | None:
    """Match a parsed JSON value against a matcher tree. Returns the first unmet constraint, or None."""
    if isinstance(node, AnyNode):
        return None
    elif isinstance(node, NullNode):
        if value is None:
            return None
        return MatchFailure(FailureKind.VALUE_MISMATCH, "JSON value differs", expected=None, actual=value, path=path)
    elif isinstance(node, ValueNode):
        if json_equal(node.expected, value):
            return None
        return MatchFailure(
            FailureKind.VALUE_MISMATCH, "JSON value differs", expected=node.expected, actual=value, path=path
        )
    elif isinstance(node, ObjectNode):
        return _evaluate_object(node, value, path)
    elif isinstance(node, ArrayNode):
        return _evaluate_array(node, value, path)
    else:
        assert_never(node)


def _evaluate_object(node: ObjectNode, value: Any, path: str) -> MatchFailure | None:
    if not isinstance(value, dict):
        return _kind_failure("object", value, path)

    for constraint in node.constraints:
        prop_path = _property_path(path, constraint.name)
        if isinstance(constraint, HasProperty):
            if constraint.name not in value:
                return MatchFailure(FailureKind.EXPECTED_PRESENCE, "JSON property is missing", path=prop_path)
            if (failure := evaluate(constraint.matcher, value[constraint.name], prop_path)) is not None:
                return failure
        elif isinstance(constraint, LacksProperty):
            if constraint.name in value:
                return MatchFailure(
                    FailureKind.EXPECTED_ABSENCE,
                    "JSON property should not be present",
                    actual=value[constraint.name],
                    path=prop_path,
                )
        else:
            assert_never(constraint)
    return None


def _evaluate_array(node: ArrayNode, value: Any, path: str) -> MatchFailure | None:
    if not isinstance(value, list):
        return _kind_failure("array", value, path)

    for constraint in node.constraints:
        if isinstance(constraint, HasCount):
            if len(value) != constraint.count:
                return MatchFailure(
                    FailureKind.VALUE_MISMATCH,
                    "JSON array length differs",
                    expected=constraint.count,
                    actual=len(value),
                    path=path,
                )
        elif isinstance(constraint, HasElement):
            element_path = f"{path}[{constraint.index}]"
            if constraint.index >= len(value):
                return MatchFailure(FailureKind.EXPECTED_PRESENCE, "JSON array element is missing", path=element_path)
            if (failure := evaluate(constraint.matcher, value[constraint.index], element_path)) is not None:
                return failure
        elif isinstance(constraint, HasAnyElement):
            if not any(evaluate(constraint.matcher, element, path) is None for element in value):
                return MatchFailure(
                    FailureKind.VALUE_MISMATCH, "No JSON array element matched", actual=value, path=path
                )
        else:
            assert_never(constraint)
    return None


def _kind_failure(expected_kind: str, value: Any, path: str) -> MatchFailure:
    return MatchFailure(
        FailureKind.TYPE_MISMATCH,
        f"Expected a JSON {expected_kind}",
        expected=expected_kind,
        actual=json_kind(value),
        path=path,
    )


def _property_path(path: str, name: str) -> str:
    if _IDENTIFIER_RE.fullmatch(name):
        return f"{path}.{name}"
    return f"{path}[{name!r}]"


def json_kind(value: Any) -> str | None:
    """JSON kind of a Python value produced by a JSON parser, None for anything else."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int | float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list | tuple):
        return "array"
    if isinstance(value, dict):
        return "object"
    return None


def json_equal(expected: Any, actual: Any) -> bool:
    """Equality that respects JSON kinds, so True != 1 and 0 != False. Non-JSON expectations use their own ==."""
    expected_kind = json_kind(expected)
    if expected_kind is None:
        return bool(expected == actual)
    if expected_kind != json_kind(actual):
        return False
    if expected_kind == "array":
        return len(expected) == len(actual) and all(json_equal(e, a) for e, a in zip(expected, actual, strict=True))
    if expected_kind == "object":
        return expected.keys() == actual.keys() and all(json_equal(expected[k], actual[k]) for k in expected)
    return bool(expected == actual)
