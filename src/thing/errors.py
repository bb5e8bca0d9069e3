"""
Exception hierarchy for Thing.

Every error raised by the container derives from ThingError and from the
builtin exception a caller would naturally catch for the same mistake, so
``except TypeError`` keeps working for bad arguments.
"""


class ThingError(Exception):
    """Base class for all Thing errors."""

    pass


class InvalidInputError(ThingError, TypeError):
    """Raised when bulk input is neither a key, a mapping, nor an iterable of pairs."""

    pass


class InvalidArgumentError(ThingError, TypeError):
    """Raised when a hook or per-key filter is not callable or its key is not a scalar."""

    pass


class MethodNotFoundError(ThingError, AttributeError):
    """Raised when an alias call names an operation outside the dispatch table."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'Method "{name}" is not defined')


class DepthExceededError(ThingError, ValueError):
    """Raised when JSON output would nest deeper than the configured limit."""

    def __init__(self, depth: int, limit: int) -> None:
        self.depth = depth
        self.limit = limit
        super().__init__(f"Maximum nesting depth {limit} exceeded (data is {depth} levels deep)")


class InitializationError(ThingError, RuntimeError):
    """Raised when a loader or filter reads its own container while it initializes."""

    pass
