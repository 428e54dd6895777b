"""Immutable structural matcher tree over JSON values."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class AnyNode:
    """Matches any JSON value."""


@dataclass(frozen=True, slots=True)
class NullNode:
    """Matches JSON null."""


@dataclass(frozen=True, slots=True)
class ValueNode:
    """Matches a value equal to the literal. Dirty-equals objects compare with their own semantics."""

    expected: Any


@dataclass(frozen=True, slots=True)
class HasProperty:
    """Object constraint: the property exists and its value satisfies the matcher."""

    name: str
    matcher: "JsonNode"


@dataclass(frozen=True, slots=True)
class LacksProperty:
    """Object constraint: the property does not exist."""

    name: str


@dataclass(frozen=True, slots=True)
class ObjectNode:
    """Matches a JSON object satisfying every constraint. Unlisted properties are ignored."""

    constraints: tuple[HasProperty | LacksProperty, ...] = ()


@dataclass(frozen=True, slots=True)
class HasCount:
    """Array constraint: exact number of elements."""

    count: int


@dataclass(frozen=True, slots=True)
class HasElement:
    """Array constraint: the element at index exists and satisfies the matcher."""

    index: int
    matcher: "JsonNode"


@dataclass(frozen=True, slots=True)
class HasAnyElement:
    """Array constraint: at least one element satisfies the matcher."""

    matcher: "JsonNode"


@dataclass(frozen=True, slots=True)
class ArrayNode:
    """Matches a JSON array satisfying every constraint."""

    constraints: tuple[HasCount | HasElement | HasAnyElement, ...] = ()


JsonNode = AnyNode | NullNode | ValueNode | ObjectNode | ArrayNode


def describe(node: JsonNode) -> str:
    """Compact rendering of a matcher tree, e.g. `{value: 0, !secret}`."""
    if isinstance(node, AnyNode):
        return "any"
    if isinstance(node, NullNode):
        return "null"
    if isinstance(node, ValueNode):
        return repr(node.expected)
    if isinstance(node, ObjectNode):
        props = [
            f"{c.name}: {describe(c.matcher)}" if isinstance(c, HasProperty) else f"!{c.name}" for c in node.constraints
        ]
        return "{" + ", ".join(props) + "}"
    items = []
    for c in node.constraints:
        if isinstance(c, HasCount):
            items.append(f"count={c.count}")
        elif isinstance(c, HasElement):
            items.append(f"{c.index}: {describe(c.matcher)}")
        else:
            items.append(f"any: {describe(c.matcher)}")
    return "[" + ", ".join(items) + "]"
