"""
Thing container - an ordered mapping with lazy, pluggable initialization.

Example:
    >>> from thing.container import Thing
    >>> thing = Thing(loader=lambda: {"a": "aa", "c": True},
    ...               filter=lambda raw: {"c": False})
    >>> thing["c"]
    False
    >>> thing.raw()["c"]
    True
"""

from thing.container._core import Thing
from thing.container._frozen import FrozenMapping, FrozenSequence, freeze
from thing.container._merge import deep_merge
from thing.container._sources import Source, make_source

__all__ = [
    "FrozenMapping",
    "FrozenSequence",
    "Source",
    "Thing",
    "deep_merge",
    "freeze",
    "make_source",
]
