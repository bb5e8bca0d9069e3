"""
Shared pytest fixtures for Thing tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import typing as _typing
import unittest.mock as _mock

import pytest as _pytest

import thing.config as config

# =============================================================================
# Environment isolation
# =============================================================================


def _clean_env() -> dict[str, str]:
    """Return environment dict with THING_* keys removed."""
    return {k: v for k, v in _os.environ.items() if not k.startswith("THING_")}


@_pytest.fixture(autouse=True)
def isolated_env() -> _typing.Iterator[None]:
    """
    Isolate every test from THING_* environment variables.

    The process-wide settings cache is dropped before and after the test
    so containers built without explicit settings see defaults.
    """
    with _mock.patch.dict(_os.environ, _clean_env(), clear=True):
        config.reset_settings()
        yield
    config.reset_settings()


@_pytest.fixture
def clean_settings() -> config.Settings:
    """Settings instance isolated from environment and .env file."""
    return config.Settings.construct_without_dotenv()


# =============================================================================
# Sample data
# =============================================================================


@_pytest.fixture
def sample() -> dict[str, _typing.Any]:
    """Small mapping with a scalar, a nested mapping and a boolean."""
    return {
        "a": "aa",
        "b": {
            "bb": "bbb",
        },
        "c": True,
    }


class CallCounter:
    """Callable stub that records how often it was invoked."""

    def __init__(self, result: _typing.Any = None) -> None:
        self.result = result
        self.calls: list[tuple[_typing.Any, ...]] = []

    def __call__(self, *args: _typing.Any) -> _typing.Any:
        self.calls.append(args)
        return self.result

    @property
    def count(self) -> int:
        return len(self.calls)


@_pytest.fixture
def counter() -> type[CallCounter]:
    """The CallCounter class, for building call-counting loaders and hooks."""
    return CallCounter
