"""
Read-only access to a Thing's raw data.

raw() and the bulk filter both see the loader's output through
FrozenMapping. Lists and mappings nested inside it are wrapped when they
are read, so nothing reachable from the view can be modified.
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing


class FrozenMapping(_abc.Mapping[_typing.Any, _typing.Any]):
    """Mapping view over raw data; equality and hashing come from Mapping."""

    __slots__ = ("_data",)

    def __init__(self, data: _abc.Mapping[_typing.Any, _typing.Any]) -> None:
        self._data = data

    def __getitem__(self, key: _typing.Any) -> _typing.Any:
        return freeze(self._data[key])

    def __iter__(self) -> _typing.Iterator[_typing.Any]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"FrozenMapping({self._data!r})"


class FrozenSequence(_abc.Sequence[_typing.Any]):
    """List view over raw data. Compares equal to lists and tuples with the same items."""

    __slots__ = ("_data",)

    def __init__(self, data: list[_typing.Any]) -> None:
        self._data = data

    def __getitem__(self, index: _typing.Any) -> _typing.Any:
        # A slice of the list is itself a list, so it comes back wrapped
        return freeze(self._data[index])

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"FrozenSequence({self._data!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (list, tuple, FrozenSequence)):
            return list(self) == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]


def freeze(value: _typing.Any) -> _typing.Any:
    """Wrap a dict or list from raw data in its view; return anything else unchanged."""
    if isinstance(value, (FrozenMapping, FrozenSequence)):
        return value
    if isinstance(value, _abc.Mapping):
        return FrozenMapping(value)
    if isinstance(value, list):
        return FrozenSequence(value)
    return value


def thaw(value: _typing.Any) -> _typing.Any:
    """Copy a structure that may contain views back into plain dicts and lists."""
    if isinstance(value, _abc.Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, (list, FrozenSequence)):
        return [thaw(v) for v in value]
    return value
