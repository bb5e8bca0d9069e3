"""
Whole-mapping alias operations.

Each operation takes the container's data as its first argument, followed
by whatever positional arguments the caller supplied. Only names in
ALIASES can be dispatched; anything else is a MethodNotFoundError.

Values are compared with ``==`` (``strict`` variants also compare types).
"""

from __future__ import annotations

import collections as _collections
import collections.abc as _abc
import logging as _logging
import typing as _typing

import thing.errors as errors

_logger = _logging.getLogger(__name__)

Data = _abc.Mapping[_typing.Any, _typing.Any]
KeyCompare = _typing.Callable[[_typing.Any, _typing.Any], int]

# Marks an absent argument or key, distinct from a stored None
MISSING = object()


def _values_of(other: _typing.Any) -> list[_typing.Any]:
    if isinstance(other, _abc.Mapping):
        return list(other.values())
    return list(other)


def same_value(a: _typing.Any, b: _typing.Any, strict: bool) -> bool:
    """Loose equality, or equality plus identical type when strict."""
    if strict and type(a) is not type(b):
        return False
    return bool(a == b)


def keys(data: Data, search: _typing.Any = MISSING, strict: bool = False) -> list[_typing.Any]:
    """Keys in order, optionally only those whose value equals ``search``."""
    if search is MISSING:
        return list(data)
    return [k for k, v in data.items() if same_value(v, search, strict)]


def values(data: Data) -> list[_typing.Any]:
    """Values in order."""
    return list(data.values())


def count_values(data: Data) -> dict[_typing.Any, int]:
    """
    Count occurrences of each value.

    Only str and int values can be counted; other values are skipped
    with a warning.
    """
    counter: _collections.Counter[_typing.Any] = _collections.Counter()
    for value in data.values():
        if isinstance(value, (str, int)) and not isinstance(value, bool):
            counter[value] += 1
        else:
            _logger.warning(
                "count_values can only count str and int values, skipping %s",
                type(value).__name__,
            )
    return dict(counter)


def diff(data: Data, *others: _typing.Any) -> dict[_typing.Any, _typing.Any]:
    """Entries whose value appears in none of the other collections."""
    seen = [v for other in others for v in _values_of(other)]
    return {k: v for k, v in data.items() if not any(v == s for s in seen)}


def diff_key(data: Data, *others: Data) -> dict[_typing.Any, _typing.Any]:
    """Entries whose key appears in none of the other mappings."""
    return {k: v for k, v in data.items() if not any(k in other for other in others)}


def diff_assoc(data: Data, *others: Data) -> dict[_typing.Any, _typing.Any]:
    """Entries whose key/value pair appears in none of the other mappings."""
    return {
        k: v
        for k, v in data.items()
        if not any(k in other and other[k] == v for other in others)
    }


def _split_compare(args: tuple[_typing.Any, ...], name: str) -> tuple[tuple[Data, ...], KeyCompare]:
    if not args or not callable(args[-1]):
        raise errors.InvalidArgumentError(f"{name}() requires a key comparison callable as last argument")
    return args[:-1], args[-1]


def diff_ukey(data: Data, *args: _typing.Any) -> dict[_typing.Any, _typing.Any]:
    """
    Like diff_key, comparing keys with a user callable.

    The last argument is ``key_compare(a, b)`` returning 0 when the keys
    are considered equal.
    """
    others, compare = _split_compare(args, "diff_ukey")
    return {
        k: v
        for k, v in data.items()
        if not any(compare(k, ok) == 0 for other in others for ok in other)
    }


def diff_uassoc(data: Data, *args: _typing.Any) -> dict[_typing.Any, _typing.Any]:
    """Like diff_assoc, comparing keys with a user callable (last argument)."""
    others, compare = _split_compare(args, "diff_uassoc")
    return {
        k: v
        for k, v in data.items()
        if not any(
            compare(k, ok) == 0 and ov == v
            for other in others
            for ok, ov in other.items()
        )
    }


def slice(  # noqa: A001 - mirrors the alias name
    data: Data,
    offset: int,
    length: int | None = None,
    preserve_keys: bool = False,
) -> dict[_typing.Any, _typing.Any]:
    """
    A positional window of the mapping.

    Negative ``offset`` counts from the end; a negative ``length`` stops
    that many entries before the end. String keys are always kept; int
    keys are renumbered from 0 unless ``preserve_keys`` is set.
    """
    items = list(data.items())
    size = len(items)
    start = max(size + offset, 0) if offset < 0 else min(offset, size)
    if length is None:
        stop = size
    elif length < 0:
        stop = max(size + length, start)
    else:
        stop = min(start + length, size)

    result: dict[_typing.Any, _typing.Any] = {}
    next_index = 0
    for key, value in items[start:stop]:
        if isinstance(key, int) and not isinstance(key, bool) and not preserve_keys:
            result[next_index] = value
            next_index += 1
        else:
            result[key] = value
    return result


ALIASES: dict[str, _typing.Callable[..., _typing.Any]] = {
    "keys": keys,
    "values": values,
    "count_values": count_values,
    "diff": diff,
    "diff_key": diff_key,
    "diff_assoc": diff_assoc,
    "diff_ukey": diff_ukey,
    "diff_uassoc": diff_uassoc,
    "slice": slice,
}


def dispatch(name: str, data: Data, *args: _typing.Any) -> _typing.Any:
    """
    Run the alias ``name`` over ``data``.

    Names are matched case-insensitively.

    Raises:
        MethodNotFoundError: If ``name`` is not in ALIASES.
    """
    operation = ALIASES.get(name.lower()) if isinstance(name, str) else None
    if operation is None:
        raise errors.MethodNotFoundError(str(name))
    return operation(data, *args)
