"""Types used in the pytest plugin."""

from re import Pattern
from typing import Any

from dirty_equals import DirtyEquals

from reqshape.matchers import Predicate

Matcher = DirtyEquals[Any] | str | Pattern[str]
MethodMatcher = Matcher | set[str]
UrlMatcher = Matcher

__all__ = [
    "Matcher",
    "MethodMatcher",
    "Predicate",
    "UrlMatcher",
]
