"""HTTP primitives shared by captured requests and mocked responses."""

from collections.abc import Iterator, Mapping
from typing import NamedTuple, Self

from reqshape.types import HeadersType


class HeaderMap(Mapping[str, str]):
    """Immutable, case-insensitive, ordered multimap of HTTP headers.

    Mapping access returns the first value of a header. Use `get_all` for repeated headers.
    """

    __slots__ = ("_items",)

    def __init__(self, headers: HeadersType | None = None) -> None:
        """Create a header map from a mapping or a sequence of (name, value) pairs."""
        if isinstance(headers, HeaderMap):
            pairs = headers.multi_items()
        elif isinstance(headers, Mapping):
            pairs = headers.items()
        else:
            pairs = headers or ()
        self._items: tuple[tuple[str, str], ...] = tuple((str(name), str(value)) for name, value in pairs)

    def __getitem__(self, name: str) -> str:
        key = name.lower()
        for item_name, value in self._items:
            if item_name.lower() == key:
                return value
        raise KeyError(name)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._items:
            if name.lower() not in seen:
                seen.add(name.lower())
                yield name

    def __len__(self) -> int:
        return len({name.lower() for name, _ in self._items})

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and any(item_name.lower() == name.lower() for item_name, _ in self._items)

    def get_all(self, name: str) -> list[str]:
        """Get all values of a header in insertion order."""
        key = name.lower()
        return [value for item_name, value in self._items if item_name.lower() == key]

    def multi_items(self) -> list[tuple[str, str]]:
        """Get all (name, value) pairs including repeated headers."""
        return list(self._items)

    def with_header(self, name: str, value: str) -> Self:
        """Return a copy with the header appended."""
        return type(self)([*self._items, (name, value)])

    def __repr__(self) -> str:
        return f"HeaderMap({list(self._items)!r})"


class AuthenticationHeader(NamedTuple):
    """Parsed `Authorization` header value, e.g. `Bearer abc` -> scheme="Bearer", parameter="abc"."""

    scheme: str
    parameter: str | None

    @classmethod
    def parse(cls, value: str) -> Self:
        """Split a raw header value into scheme and parameter."""
        parts = value.strip().split(maxsplit=1)
        if not parts:
            return cls("", None)
        return cls(parts[0], parts[1] if len(parts) > 1 else None)

    def __str__(self) -> str:
        return self.scheme if self.parameter is None else f"{self.scheme} {self.parameter}"


__all__ = [
    "AuthenticationHeader",
    "HeaderMap",
]
