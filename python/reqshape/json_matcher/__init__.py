"""Structural (subset) matching of JSON documents."""

from .builder import (
    JsonArrayMatcherBuilder,
    JsonElementMatcherBuilder,
    JsonObjectMatcherBuilder,
    build_element_matcher,
)
from .evaluate import evaluate, json_equal, json_kind
from .nodes import AnyNode, ArrayNode, JsonNode, NullNode, ObjectNode, ValueNode, describe

__all__ = [
    "AnyNode",
    "ArrayNode",
    "JsonArrayMatcherBuilder",
    "JsonElementMatcherBuilder",
    "JsonNode",
    "JsonObjectMatcherBuilder",
    "NullNode",
    "ObjectNode",
    "ValueNode",
    "build_element_matcher",
    "describe",
    "evaluate",
    "json_equal",
    "json_kind",
]
