"""
Thing: an ordered mapping with lazy, pluggable initialization.

Three behaviors sit on top of plain dict storage:

- Loader: a zero-argument callable producing the raw data, run on first
  access instead of at construction.
- Filters: a bulk filter whose result is deep-merged over the raw data,
  then per-key filters that transform individual loaded values.
- Hooks: per-key callables evaluated on first read of their key; the
  result replaces the placeholder and the hook is dropped.

Initialization pipeline (runs once, on the first data access):
1. raw = loader() if it returns a mapping, else {}
2. data = deep copy of raw
3. data = deep_merge(data, bulk_filter(raw)) if that returns a mapping
4. data[key] = filter(data[key], key) for each per-key filter whose key exists
5. writes queued before initialization (constructor hooks, constructor
   data, then hooks registered with hook()) are replayed in order

Results are committed only when every step succeeds. If a callable
raises, the exception propagates and the container stays uninitialized,
so the next access runs the pipeline again.

Thread safety: NOT thread-safe. With ``thread_safe=True`` only the
initialization transition is guarded, so the loader runs once under
concurrent first access; later reads and writes are unguarded.
"""

from __future__ import annotations

import collections.abc as _abc
import contextlib as _contextlib
import copy as _copy
import functools as _functools
import logging as _logging
import threading as _threading
import typing as _typing

import thing.config as config
import thing.constants as constants
import thing.container._aliases as _aliases
import thing.container._codec as _codec
import thing.container._frozen as _frozen
import thing.container._merge as _merge
import thing.container._sources as _sources
import thing.errors as errors

_logger = _logging.getLogger(__name__)

Hook = _typing.Callable[[], _typing.Any]
KeyFilter = _typing.Callable[[_typing.Any, _typing.Any], _typing.Any]


def _is_scalar(value: _typing.Any) -> bool:
    """Check if a value can be used as a plain key."""
    return isinstance(value, (str, bytes, int, float))


def _input_pairs(key: _typing.Any, value: _typing.Any) -> list[tuple[_typing.Any, _typing.Any]]:
    """
    Normalize the arguments of set() into (key, value) pairs.

    Raises:
        InvalidInputError: If ``key`` is not a scalar, a mapping, an
            empty value, or an iterable of pairs.
    """
    if _is_scalar(key):
        return [(key, value)]
    if isinstance(key, _abc.Mapping):
        return list(key.items())
    if not key:
        return []
    if isinstance(key, _abc.Iterable):
        pairs = []
        for item in key:
            try:
                k, v = item
            except (TypeError, ValueError):
                raise errors.InvalidInputError(
                    f"Invalid item. Expected (key, value) pair, got {item!r}"
                ) from None
            pairs.append((k, v))
        return pairs
    raise errors.InvalidInputError(f"Invalid type. Input was {type(key).__name__}")


def _check_callable(name: _typing.Any, fn: _typing.Any, what: str) -> None:
    if not callable(fn):
        raise errors.InvalidArgumentError(f"{what} for {name!r} must be callable.")
    if not _is_scalar(name):
        raise errors.InvalidArgumentError(
            f"{what} name must be a scalar, got {type(name).__name__}"
        )


class Thing(_abc.MutableMapping[_typing.Any, _typing.Any]):
    """
    An ordered key/value container with lazy initialization and hooks.

    Example:
        >>> thing = Thing(loader=lambda: {"a": 1, "b": 2},
        ...               filter=lambda raw: {"b": 20, "c": 3})
        >>> thing.is_initialized
        False
        >>> thing.all()
        {'a': 1, 'b': 20, 'c': 3}
        >>> dict(thing.raw())
        {'a': 1, 'b': 2}

    Hooks:
        >>> thing = Thing({"a": "aa"})
        >>> thing.hook("c", lambda: "computed")
        >>> thing["c"]
        'computed'

    Args:
        data: Initial values, written after the loader pipeline.
        hooks: Mapping of key -> hook, registered before ``data`` so a
            hook wins over a same-named initial value.
        loader: Callable, object with a ``loader`` method, class, or class
            path string.
        filter: Callable, object with a ``filter`` method, class, or class
            path string. Receives a read-only view of the raw data.
        filters: Mapping of key -> per-key filter ``(value, key) -> value``.
        bind_hooks: Pass the container as first argument to ``hooks``.
        thread_safe: Guard initialization with a lock. Defaults to
            ``Settings.thread_safe``.
        settings: Settings to use instead of the process-wide ones.

    Raises:
        InvalidInputError: If ``data`` cannot be read as key/value pairs.
        InvalidArgumentError: If a hook or per-key filter is not callable.
    """

    def __init__(
        self,
        data: _typing.Any = None,
        hooks: _abc.Mapping[_typing.Any, Hook] | None = None,
        *,
        loader: _typing.Any = None,
        filter: _typing.Any = None,  # noqa: A002 - public name of the bulk filter
        filters: _abc.Mapping[_typing.Any, KeyFilter] | None = None,
        bind_hooks: bool = False,
        thread_safe: bool | None = None,
        settings: config.Settings | None = None,
    ) -> None:
        self._settings = settings if settings is not None else config.get_settings()
        self._data: dict[_typing.Any, _typing.Any] = {}
        self._raw: dict[_typing.Any, _typing.Any] | None = None
        self._hooks: dict[_typing.Any, Hook] = {}
        self._key_filters: dict[_typing.Any, KeyFilter] = {}
        self._initialized = False
        self._initializing = False

        if thread_safe is None:
            thread_safe = self._settings.thread_safe
        self._lock = _threading.RLock() if thread_safe else None

        self._loader = _sources.resolve(loader, constants.LOADER_METHOD)
        self._filter = _sources.resolve(filter, constants.FILTER_METHOD)

        for key, fn in (filters or {}).items():
            self.add_filter(key, fn)

        # Writes made before initialization, replayed in order after the pipeline
        self._seed: list[tuple[bool, _typing.Any, _typing.Any]] = []
        for name, fn in (hooks or {}).items():
            _check_callable(name, fn, "Hook")
            self._seed.append((True, name, _functools.partial(fn, self) if bind_hooks else fn))
        self._seed.extend((False, key, value) for key, value in _input_pairs(data, None))

    # =========================================================================
    # Configuration
    # =========================================================================

    def set_loader(self, loader: _typing.Any) -> Thing:
        """
        Replace the loader.

        Has no effect on data already loaded: raw stays frozen once
        initialization has run.
        """
        self._loader = _sources.resolve(loader, constants.LOADER_METHOD)
        if self._initialized:
            _logger.debug("Loader replaced after initialization; raw data unchanged")
        return self

    def set_filter(self, filter: _typing.Any) -> Thing:  # noqa: A002
        """Replace the bulk filter. Same caveat as set_loader()."""
        self._filter = _sources.resolve(filter, constants.FILTER_METHOD)
        if self._initialized:
            _logger.debug("Bulk filter replaced after initialization; data unchanged")
        return self

    def add_filter(self, key: _typing.Any, fn: KeyFilter) -> Thing:
        """
        Register a per-key filter ``fn(value, key) -> value``.

        Applied once during initialization, and only if ``key`` exists in
        the loaded data by then.

        Raises:
            InvalidArgumentError: If ``fn`` is not callable or ``key`` is
                not a scalar.
        """
        _check_callable(key, fn, "Filter")
        self._key_filters[key] = fn
        if self._initialized:
            _logger.debug("Filter for %r registered after initialization has no effect", key)
        return self

    def hook(self, name: _typing.Any, fn: _typing.Callable[..., _typing.Any], *, bind: bool = False) -> None:
        """
        Bind ``name`` to a hook evaluated on its first read.

        Any current value of ``name`` is dropped and replaced by a None
        placeholder. The hook is called with no arguments, or with this
        container when ``bind`` is set. Registering does not initialize:
        before the first data access the hook is queued and applied once
        the loader pipeline has run.

        Raises:
            InvalidArgumentError: If ``fn`` is not callable or ``name`` is
                not a scalar.
        """
        _check_callable(name, fn, "Hook")
        hook = _functools.partial(fn, self) if bind else fn
        with self._lock or _contextlib.nullcontext():
            if self._initialized:
                self._install_hook(self._data, name, hook)
            else:
                self._seed.append((True, name, hook))

    def _install_hook(self, data: dict[_typing.Any, _typing.Any], name: _typing.Any, hook: Hook) -> None:
        data.pop(name, None)
        data[name] = None
        self._hooks[name] = hook

    # =========================================================================
    # Lazy initialization
    # =========================================================================

    @property
    def is_initialized(self) -> bool:
        """Whether the loader pipeline has run."""
        return self._initialized

    def initialize(self) -> Thing:
        """
        Run the loader pipeline if it has not run yet.

        Every data accessor calls this first; calling it directly forces
        loading up front.

        Raises:
            InitializationError: If called again from inside the pipeline,
                e.g. by a loader reading its own container.
        """
        if self._initialized:
            return self
        if self._lock is None:
            self._initialize()
        else:
            with self._lock:
                if not self._initialized:
                    self._initialize()
        return self

    def _initialize(self) -> None:
        if self._initializing:
            raise errors.InitializationError(
                "Container accessed while its loader or filters are running"
            )

        _logger.debug("Initializing %s", type(self).__name__)
        self._initializing = True
        try:
            raw, data = self._run_pipeline()
        finally:
            self._initializing = False

        # Constructor hooks come first, so they win over same-named initial data
        for is_hook, key, value in self._seed:
            if is_hook:
                self._install_hook(data, key, value)
            else:
                data[key] = value
        self._seed = []

        self._raw = raw
        self._data = data
        self._initialized = True
        _logger.debug("Initialized with %d keys", len(data))

    def _run_pipeline(self) -> tuple[dict[_typing.Any, _typing.Any], dict[_typing.Any, _typing.Any]]:
        raw: dict[_typing.Any, _typing.Any] = {}
        if self._loader is not None:
            loaded = self._loader()
            if _merge.is_mapping(loaded):
                raw = _copy.deepcopy(_frozen.thaw(loaded))
            else:
                _logger.debug("Loader returned %s, ignoring", type(loaded).__name__)

        data = _copy.deepcopy(raw)

        if self._filter is not None:
            overlay = self._filter(_frozen.FrozenMapping(raw))
            if _merge.is_mapping(overlay):
                data = _merge.deep_merge(data, _frozen.thaw(overlay))
            else:
                _logger.debug("Bulk filter returned %s, ignoring", type(overlay).__name__)

        for key, fn in self._key_filters.items():
            if key in data:
                data[key] = fn(data[key], key)

        return raw, data

    def raw(self) -> _frozen.FrozenMapping:
        """Read-only view of the data exactly as the loader produced it."""
        self.initialize()
        assert self._raw is not None
        return _frozen.FrozenMapping(self._raw)

    # =========================================================================
    # Hooks
    # =========================================================================

    def _fire_hook(self, key: _typing.Any) -> None:
        hook = self._hooks.pop(key, None)
        if hook is None:
            return
        _logger.debug("Evaluating hook for %r", key)
        try:
            value = hook()
        except Exception:
            self._hooks[key] = hook
            raise
        self._data[key] = value

    def _resolve_hooks(self) -> dict[_typing.Any, _typing.Any]:
        """Fire every pending hook and return the live data."""
        self.initialize()
        for key in list(self._hooks):
            self._fire_hook(key)
        return self._data

    # =========================================================================
    # Accessors
    # =========================================================================

    def get(self, key: _typing.Any, default: _typing.Any = None) -> _typing.Any:
        """Return the value for ``key``, or ``default`` if absent."""
        self.initialize()
        self._fire_hook(key)
        return self._data.get(key, default)

    def set(self, key: _typing.Any, value: _typing.Any = None) -> Thing:
        """
        Store one value, or many.

        ``set(key, value)`` stores a single entry. ``set(mapping)`` or
        ``set(pairs)`` stores each entry in order. An empty non-scalar
        argument (None, [], {}) does nothing. Setting a hooked key keeps
        the hook pending.

        Raises:
            InvalidInputError: If ``key`` is neither a scalar, a mapping,
                nor an iterable of pairs.
        """
        pairs = _input_pairs(key, value)
        self.initialize()
        for k, v in pairs:
            self._data[k] = v
        return self

    def has(self, key: _typing.Any) -> bool:
        """Check if ``key`` is present. Does not evaluate hooks."""
        self.initialize()
        return key in self._data

    def remove(self, key: _typing.Any) -> None:
        """Remove ``key`` and any pending hook for it. Absent keys are ignored."""
        self.initialize()
        self._data.pop(key, None)
        self._hooks.pop(key, None)

    def keys(  # type: ignore[override]
        self,
        search: _typing.Any = _aliases.MISSING,
        strict: bool = False,
    ) -> list[_typing.Any]:
        """Keys in insertion order, optionally only those holding ``search``."""
        if search is _aliases.MISSING:
            self.initialize()
            return _aliases.keys(self._data)
        return _aliases.keys(self._resolve_hooks(), search, strict)

    def values(self) -> list[_typing.Any]:  # type: ignore[override]
        """Values in insertion order."""
        return _aliases.values(self._resolve_hooks())

    def items(self) -> list[tuple[_typing.Any, _typing.Any]]:  # type: ignore[override]
        """Snapshot of ``(key, value)`` pairs, safe to iterate repeatedly."""
        return list(self._resolve_hooks().items())

    def all(self) -> dict[_typing.Any, _typing.Any]:
        """Deep copy of the data."""
        return _copy.deepcopy(self._resolve_hooks())

    to_array = all

    def clear(self) -> None:
        """Discard all data and pending hooks. Raw data is kept."""
        self.initialize()
        self._data.clear()
        self._hooks.clear()

    def exchange(self, data: _typing.Any) -> dict[_typing.Any, _typing.Any]:
        """
        Replace the whole data, returning a copy of the old data.

        Pending hooks are discarded with the old data.
        """
        pairs = _input_pairs(data, None)
        old = self.all()
        self._data = {}
        self._hooks.clear()
        for k, v in pairs:
            self._data[k] = v
        return old

    def contains(self, value: _typing.Any, strict: bool | None = None) -> bool:
        """
        Check if any entry holds ``value``.

        With ``strict`` the type must match as well, so ``1`` does not
        match ``True`` or ``1.0``. Defaults to ``Settings.strict_contains``.
        """
        if strict is None:
            strict = self._settings.strict_contains
        return any(
            _aliases.same_value(v, value, strict) for v in self._resolve_hooks().values()
        )

    def is_empty(self, key: _typing.Any) -> bool:
        """True if ``key`` is absent or holds "", None or False."""
        value = self.get(key, _aliases.MISSING)
        if value is _aliases.MISSING or value is None or value is False:
            return True
        return isinstance(value, str) and value == ""

    def has_child(self, key: _typing.Any) -> bool:
        """True if ``key`` holds a mapping or a non-string iterable. Does not evaluate hooks."""
        self.initialize()
        value = self._data.get(key)
        if isinstance(value, (str, bytes)):
            return False
        return isinstance(value, (_abc.Mapping, _abc.Iterable))

    # =========================================================================
    # Aliases
    # =========================================================================

    def call(self, name: str, *args: _typing.Any) -> _typing.Any:
        """
        Run a whole-mapping alias operation by name.

        Raises:
            MethodNotFoundError: If ``name`` is not a known alias.
        """
        return _aliases.dispatch(name, self._resolve_hooks(), *args)

    def count_values(self) -> dict[_typing.Any, int]:
        return self.call("count_values")

    def diff(self, *others: _typing.Any) -> dict[_typing.Any, _typing.Any]:
        return self.call("diff", *others)

    def diff_key(self, *others: _abc.Mapping[_typing.Any, _typing.Any]) -> dict[_typing.Any, _typing.Any]:
        return self.call("diff_key", *others)

    def diff_assoc(self, *others: _abc.Mapping[_typing.Any, _typing.Any]) -> dict[_typing.Any, _typing.Any]:
        return self.call("diff_assoc", *others)

    def diff_ukey(self, *args: _typing.Any) -> dict[_typing.Any, _typing.Any]:
        return self.call("diff_ukey", *args)

    def diff_uassoc(self, *args: _typing.Any) -> dict[_typing.Any, _typing.Any]:
        return self.call("diff_uassoc", *args)

    def slice(
        self,
        offset: int,
        length: int | None = None,
        preserve_keys: bool = False,
    ) -> dict[_typing.Any, _typing.Any]:
        return self.call("slice", offset, length, preserve_keys)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_json(
        self,
        *,
        indent: int | None = None,
        sort_keys: bool = False,
        ensure_ascii: bool = True,
        depth: int | None = None,
    ) -> str:
        """
        Encode the data as JSON text.

        Raises:
            DepthExceededError: If the data nests deeper than ``depth``
                (default ``Settings.json_depth``).
        """
        return _codec.to_json(
            self._resolve_hooks(),
            depth=depth if depth is not None else self._settings.json_depth,
            indent=indent,
            sort_keys=sort_keys,
            ensure_ascii=ensure_ascii,
        )

    def to_yaml(self) -> str:
        """Encode the data as YAML text."""
        return _codec.to_yaml(self._resolve_hooks())

    def serialize(self) -> bytes:
        """Encode the data as an opaque byte string."""
        return _codec.serialize(self._resolve_hooks())

    def unserialize(self, blob: bytes) -> Thing:
        """
        Merge data decoded from serialize() output into this container.

        Raises:
            InvalidInputError: If ``blob`` does not decode to a mapping.
        """
        decoded = _codec.unserialize(blob)
        self.initialize()
        return self.set(decoded)

    def __reduce__(self) -> tuple[type, tuple[dict[_typing.Any, _typing.Any]]]:
        # Callables are not carried over; the copy holds plain data.
        return (type(self), (self.all(),))

    # =========================================================================
    # Container protocol
    # =========================================================================

    def __getitem__(self, key: _typing.Any) -> _typing.Any:
        self.initialize()
        self._fire_hook(key)
        if key not in self._data:
            raise KeyError(key)
        return self._data[key]

    def __setitem__(self, key: _typing.Any, value: _typing.Any) -> None:
        self.initialize()
        self._data[key] = value

    def __delitem__(self, key: _typing.Any) -> None:
        if not self.has(key):
            raise KeyError(key)
        self.remove(key)

    def __contains__(self, key: object) -> bool:
        return self.has(key)

    def __iter__(self) -> _typing.Iterator[_typing.Any]:
        """Iterate over a snapshot of the keys taken now."""
        self.initialize()
        return iter(list(self._data))

    def __len__(self) -> int:
        self.initialize()
        return len(self._data)

    def __repr__(self) -> str:
        if not self._initialized:
            return f"{type(self).__name__}(<uninitialized>)"
        if self._hooks:
            return f"{type(self).__name__}({self._data!r}, hooks={list(self._hooks)!r})"
        return f"{type(self).__name__}({self._data!r})"
