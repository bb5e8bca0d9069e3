"""
Thing - lazy, hookable key/value container

An ordered mapping that populates itself from a loader on first access,
overlays a bulk filter, and resolves per-key hooks on first read.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("thing")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "Thing Contributors"

from thing.config import Settings  # noqa: E402
from thing.container import FrozenMapping, Thing  # noqa: E402
from thing.errors import (  # noqa: E402
    DepthExceededError,
    InitializationError,
    InvalidArgumentError,
    InvalidInputError,
    MethodNotFoundError,
    ThingError,
)

__all__ = [
    "__version__",
    "__version_info__",
    "DepthExceededError",
    "FrozenMapping",
    "InitializationError",
    "InvalidArgumentError",
    "InvalidInputError",
    "MethodNotFoundError",
    "Settings",
    "Thing",
    "ThingError",
]
