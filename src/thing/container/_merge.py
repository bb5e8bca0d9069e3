"""
Recursive merge of mappings.

Used by the lazy initializer to overlay a bulk filter's result on top of
the raw loaded data.
"""

from __future__ import annotations

import collections.abc as _abc
import copy as _copy
import typing as _typing


def is_mapping(value: _typing.Any) -> bool:
    """Check if a value should be merged recursively."""
    return isinstance(value, _abc.Mapping)


def deep_merge(
    base: _abc.Mapping[_typing.Any, _typing.Any],
    override: _abc.Mapping[_typing.Any, _typing.Any],
) -> dict[_typing.Any, _typing.Any]:
    """
    Deep merge two mappings, with override taking priority.

    Keys present in both where both values are mappings are merged
    recursively. Any other override value replaces the base value
    (lists are not concatenated). Neither argument is modified; values
    taken from override are deep copied.

    Args:
        base: The base mapping.
        override: The mapping to merge in (takes priority).

    Returns:
        New merged dict, preserving base key order with new keys appended.

    Example:
        >>> deep_merge({"a": 1, "b": {"x": 1}}, {"b": {"y": 2}, "c": 3})
        {'a': 1, 'b': {'x': 1, 'y': 2}, 'c': 3}
    """
    result = dict(base)
    for key, value in override.items():
        if key in result and is_mapping(result[key]) and is_mapping(value):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = _copy.deepcopy(value)
    return result
