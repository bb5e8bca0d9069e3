"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with THING_ prefix
3. .env file named by THING_ENV_FILE (if present)
4. Field defaults

Example:
  THING_JSON_DEPTH=64
  THING_THREAD_SAFE=true
"""

import functools as _functools
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import thing.constants as constants


def _get_env_file() -> str | None:
    """Determine which .env file to load.

    Only an explicit THING_ENV_FILE is honoured. If it is set but the file
    does not exist, no .env is loaded rather than falling back silently.
    """
    if env_file := _os.environ.get("THING_ENV_FILE"):
        if _pathlib.Path(env_file).exists():
            return env_file
    return None


class Settings(_pydantic_settings.BaseSettings):
    """
    Thing configuration settings.

    Every field can be overridden via an environment variable with the
    THING_ prefix, e.g. THING_STRICT_CONTAINS=1.
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix=constants.ENV_PREFIX,
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    json_depth: int = _pydantic.Field(
        default=constants.DEFAULT_JSON_DEPTH,
        ge=1,
        description="Default maximum nesting depth for to_json()",
    )

    thread_safe: bool = _pydantic.Field(
        default=False,
        description="Guard first-access initialization with a lock",
    )

    strict_contains: bool = _pydantic.Field(
        default=False,
        description="Default for contains(): compare type as well as value",
    )

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings from environment variables only, without loading .env file.

        Useful for test isolation and for reproducing issues without
        .env interference.
        """
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]


@_functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide Settings, built on first use."""
    return Settings()


def reset_settings() -> None:
    """Drop the cached Settings so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
