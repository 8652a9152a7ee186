"""Immutable string parameters shared by context properties and search.

Implements ``Mapping[str, str]``. Repeated keys are accumulated: their
values are joined with a single space, in encounter order.
"""

from collections.abc import Iterable, Iterator, Mapping


class Params(Mapping[str, str]):
    """Immutable, hashable, insertion-ordered string mapping.

    Attributes:
        _data: Key -> accumulated value.

    ``__getitem__`` returns the accumulated (space-joined) value.
    ``get_list`` splits it back into the individual values.
    """

    _data: dict[str, str]

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, str] | None = None) -> None:
        object.__setattr__(self, "_data", dict(data or {}))

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> "Params":
        """Build from ``(key, value)`` pairs, joining repeated keys with a space."""
        data: dict[str, str] = {}
        for key, value in pairs:
            if key in data:
                data[key] = f"{data[key]} {value}"
            else:
                data[key] = value
        return cls(data)

    def __setattr__(self, name: str, value: object) -> None:
        msg = "Params is immutable"
        raise AttributeError(msg)

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __hash__(self) -> int:
        return hash(frozenset(self._data.items()))

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {v!r}" for k, v in self._data.items())
        return f"Params({{{items}}})"

    def get_list(self, key: str) -> list[str]:
        """Return the individual values accumulated under *key*."""
        value = self._data.get(key)
        if value is None:
            return []
        return value.split(" ")
