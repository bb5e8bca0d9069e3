"""
Shared constants for Thing.

This module provides a single source of truth for default values
that are used across multiple modules.
"""

DEFAULT_JSON_DEPTH = 512
"""Default maximum nesting depth accepted by Thing.to_json()."""

LOADER_METHOD = "loader"
"""Method name looked up on objects and classes configured as a loader."""

FILTER_METHOD = "filter"
"""Method name looked up on objects and classes configured as a bulk filter."""

ENV_PREFIX = "THING_"
"""Prefix for environment variables read by Settings."""
