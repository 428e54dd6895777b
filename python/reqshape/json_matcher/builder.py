"""Fluent builders producing structural matcher trees.

Builders only record constraints. `build()` freezes them into an immutable `JsonNode` tree, which can then be
evaluated any number of times, from any thread.

Example:
    JsonElementMatcherBuilder().is_object(
        lambda o: o.with_property("id", lambda p: p.is_value(1)).without_property("secret")
    ).build()
"""

from collections.abc import Callable
from typing import Any, Self

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

ElementBuild = Callable[["JsonElementMatcherBuilder"], Any]
ObjectBuild = Callable[["JsonObjectMatcherBuilder"], Any]
ArrayBuild = Callable[["JsonArrayMatcherBuilder"], Any]


class JsonObjectMatcherBuilder:
    """Records constraints on a JSON object."""

    def __init__(self) -> None:
        self._constraints: list[HasProperty | LacksProperty] = []

    def with_property(self, name: str, build: ElementBuild | None = None) -> Self:
        """Require the property to exist, and optionally its value to match."""
        self._constraints.append(HasProperty(name, build_element_matcher(build)))
        return self

    def without_property(self, name: str) -> Self:
        """Require the property to be missing."""
        self._constraints.append(LacksProperty(name))
        return self

    def build(self) -> ObjectNode:
        """Freeze the recorded constraints."""
        return ObjectNode(tuple(self._constraints))


class JsonArrayMatcherBuilder:
    """Records constraints on a JSON array."""

    def __init__(self) -> None:
        self._constraints: list[HasCount | HasElement | HasAnyElement] = []

    def with_count(self, count: int) -> Self:
        """Require an exact number of elements."""
        if count < 0:
            raise ValueError(f"Array count must be non-negative, got {count}")
        self._constraints.append(HasCount(count))
        return self

    def with_element(self, index: int, build: ElementBuild | None = None) -> Self:
        """Require the element at index to exist, and optionally to match."""
        if index < 0:
            raise ValueError(f"Array index must be non-negative, got {index}")
        self._constraints.append(HasElement(index, build_element_matcher(build)))
        return self

    def with_any_element(self, build: ElementBuild | None = None) -> Self:
        """Require at least one element to match."""
        self._constraints.append(HasAnyElement(build_element_matcher(build)))
        return self

    def build(self) -> ArrayNode:
        """Freeze the recorded constraints."""
        return ArrayNode(tuple(self._constraints))


class JsonElementMatcherBuilder:
    """Chooses what kind of JSON value an element must be. Matches anything unless told otherwise."""

    def __init__(self) -> None:
        self._matcher: JsonNode | JsonObjectMatcherBuilder | JsonArrayMatcherBuilder | None = None

    def is_any(self) -> Self:
        """Accept any value."""
        return self._set(AnyNode())

    def is_null(self) -> Self:
        """Require JSON null."""
        return self._set(NullNode())

    def is_value(self, value: Any) -> Self:
        """Require a value equal to the literal."""
        if value is None:
            return self._set(NullNode())
        return self._set(ValueNode(value))

    def is_object(self, build: ObjectBuild | None = None) -> Self:
        """Require an object, optionally with property constraints."""
        builder = JsonObjectMatcherBuilder()
        if build is not None:
            build(builder)
        return self._set(builder)

    def is_array(self, build: ArrayBuild | None = None) -> Self:
        """Require an array, optionally with element constraints."""
        builder = JsonArrayMatcherBuilder()
        if build is not None:
            build(builder)
        return self._set(builder)

    def build(self) -> JsonNode:
        """Freeze into an immutable matcher tree."""
        if self._matcher is None:
            return AnyNode()
        if isinstance(self._matcher, JsonObjectMatcherBuilder | JsonArrayMatcherBuilder):
            return self._matcher.build()
        return self._matcher

    def _set(self, matcher: JsonNode | JsonObjectMatcherBuilder | JsonArrayMatcherBuilder) -> Self:
        if self._matcher is not None:
            raise ValueError("An element matcher can only be configured once")
        self._matcher = matcher
        return self


def build_element_matcher(build: ElementBuild | None = None) -> JsonNode:
    """Run a builder callback on a fresh element builder and freeze the result."""
    builder = JsonElementMatcherBuilder()
    if build is not None:
        build(builder)
    return builder.build()
