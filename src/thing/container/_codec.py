"""
Serialization plumbing for Thing data.

JSON and YAML produce text for external consumers; pickle produces the
opaque byte string used by Thing.serialize()/unserialize().
"""

from __future__ import annotations

import collections.abc as _abc
import json as _json
import pickle as _pickle
import typing as _typing

import yaml as _yaml

import thing.errors as errors

Data = _abc.Mapping[_typing.Any, _typing.Any]


def nesting_depth(value: _typing.Any, limit: int | None = None) -> int:
    """
    Count container nesting levels.

    Scalars are depth 0; a mapping or list is one more than its deepest
    child. With ``limit`` set, raises as soon as the limit is passed so
    very deep structures are not walked in full.

    Raises:
        DepthExceededError: If ``limit`` is given and exceeded.
    """
    return _depth(value, 0, limit)


def _depth(value: _typing.Any, level: int, limit: int | None) -> int:
    if isinstance(value, _abc.Mapping):
        children: _typing.Iterable[_typing.Any] = value.values()
    elif isinstance(value, (list, tuple)):
        children = value
    else:
        return level

    level += 1
    if limit is not None and level > limit:
        raise errors.DepthExceededError(level, limit)
    return max((_depth(child, level, limit) for child in children), default=level)


def to_json(
    data: Data,
    *,
    depth: int,
    indent: int | None = None,
    sort_keys: bool = False,
    ensure_ascii: bool = True,
) -> str:
    """
    Encode data as JSON text.

    Raises:
        DepthExceededError: If data nests deeper than ``depth``.
        TypeError: If a value is not JSON serializable.
    """
    nesting_depth(data, depth)
    return _json.dumps(
        dict(data),
        indent=indent,
        sort_keys=sort_keys,
        ensure_ascii=ensure_ascii,
    )


def to_yaml(data: Data) -> str:
    """Encode data as block-style YAML, keeping key order."""
    return _yaml.safe_dump(
        dict(data),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )


def serialize(data: Data) -> bytes:
    """Encode data as an opaque byte string."""
    return _pickle.dumps(dict(data), protocol=_pickle.HIGHEST_PROTOCOL)


def unserialize(blob: bytes) -> dict[_typing.Any, _typing.Any]:
    """
    Decode a byte string produced by serialize().

    Only decode blobs from trusted sources: the format is pickle.

    Raises:
        InvalidInputError: If the blob does not decode to a mapping.
    """
    if not isinstance(blob, (bytes, bytearray, memoryview)):
        raise errors.InvalidInputError(
            f"Invalid type. Expected bytes, got {type(blob).__name__}"
        )
    try:
        decoded = _pickle.loads(blob)
    except (_pickle.UnpicklingError, EOFError, ValueError) as e:
        raise errors.InvalidInputError(f"Cannot decode serialized data: {e}") from e
    if not isinstance(decoded, _abc.Mapping):
        raise errors.InvalidInputError(
            f"Serialized data must decode to a mapping, got {type(decoded).__name__}"
        )
    return dict(decoded)
