"""
Loader and filter sources.

A loader or bulk filter can be configured in several shapes: a plain
callable, an object exposing a ``loader``/``filter`` method, a class, or
a dotted class path string. Each shape is a Source variant with a single
``resolve()`` capability, and resolution happens once, when the source is
configured. An unresolvable source leaves the slot empty; it is logged,
never raised, because absence is only meaningful once initialization runs.

Example:
    >>> source = make_source("myapp.models:UserModel", "loader")
    >>> fn = source.resolve()  # bound UserModel().loader, or None
"""

from __future__ import annotations

import abc as _abc
import dataclasses as _dataclasses
import importlib as _importlib
import logging as _logging
import typing as _typing

_logger = _logging.getLogger(__name__)

Resolved = _typing.Callable[..., _typing.Any]


class Source(_abc.ABC):
    """A configured loader or filter, not yet turned into a callable."""

    @_abc.abstractmethod
    def resolve(self) -> Resolved | None:
        """Return the callable this source stands for, or None."""
        ...


@_dataclasses.dataclass(frozen=True)
class EmptySource(Source):
    """No loader/filter configured, or the value could not be interpreted."""

    def resolve(self) -> Resolved | None:
        return None


@_dataclasses.dataclass(frozen=True)
class CallableSource(Source):
    """A plain function or other callable, used directly."""

    func: Resolved

    def resolve(self) -> Resolved | None:
        return self.func


@_dataclasses.dataclass(frozen=True)
class InstanceSource(Source):
    """An object whose named method does the work."""

    instance: _typing.Any
    method: str

    def resolve(self) -> Resolved | None:
        func = getattr(self.instance, self.method, None)
        if callable(func):
            return func  # type: ignore[no-any-return]
        return None


@_dataclasses.dataclass(frozen=True)
class ClassSource(Source):
    """
    A class instantiated without arguments, then used as an InstanceSource.

    A constructor that raises leaves the source unresolved.
    """

    cls: type
    method: str

    def resolve(self) -> Resolved | None:
        if not callable(getattr(self.cls, self.method, None)):
            _logger.warning(
                "%s has no callable %r method", self.cls.__qualname__, self.method
            )
            return None
        try:
            instance = self.cls()
        except Exception as e:
            _logger.warning("Cannot instantiate %s: %s", self.cls.__qualname__, e)
            return None
        return InstanceSource(instance, self.method).resolve()


@_dataclasses.dataclass(frozen=True)
class ClassPathSource(Source):
    """
    A class named by import path.

    Accepts ``package.module:ClassName`` or ``package.module.ClassName``.
    """

    path: str
    method: str

    def resolve(self) -> Resolved | None:
        cls = import_class(self.path)
        if cls is None:
            return None
        return ClassSource(cls, self.method).resolve()


def import_class(path: str) -> type | None:
    """
    Import a class from a dotted path.

    Args:
        path: ``module:Class`` or ``module.Class``.

    Returns:
        The class, or None if the module or attribute is missing or the
        attribute is not a class.
    """
    if ":" in path:
        module_path, _, attr = path.partition(":")
    else:
        module_path, _, attr = path.rpartition(".")
    if not module_path or not attr:
        _logger.warning("Invalid class path: %r", path)
        return None

    try:
        module = _importlib.import_module(module_path)
    except Exception as e:
        _logger.warning("Cannot import %s for %r: %s", module_path, path, e)
        return None

    cls = module
    for part in attr.split("."):
        cls = getattr(cls, part, None)
        if cls is None:
            _logger.warning("Module %s has no attribute %r", module_path, attr)
            return None

    if not isinstance(cls, type):
        _logger.warning("%r does not name a class", path)
        return None
    return cls


def make_source(value: _typing.Any, method: str) -> Source:
    """
    Classify a configured loader/filter value.

    First match wins:
    1. None -> EmptySource
    2. Source -> itself
    3. str -> ClassPathSource
    4. class -> ClassSource
    5. any other callable -> CallableSource
    6. object with a callable ``method`` attribute -> InstanceSource
    7. anything else -> EmptySource (logged)

    Args:
        value: The configured value.
        method: Method name to look up on objects and classes.
    """
    if value is None:
        return EmptySource()
    if isinstance(value, Source):
        return value
    if isinstance(value, str):
        return ClassPathSource(value, method)
    if isinstance(value, type):
        return ClassSource(value, method)
    if callable(value):
        return CallableSource(value)
    if callable(getattr(value, method, None)):
        return InstanceSource(value, method)

    _logger.warning(
        "Ignoring %s: not callable and has no %r method", type(value).__name__, method
    )
    return EmptySource()


def resolve(value: _typing.Any, method: str) -> Resolved | None:
    """Classify and resolve in one step."""
    return make_source(value, method).resolve()
