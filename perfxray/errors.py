"""Exception types raised by perf-xray."""

from __future__ import annotations


class PerfXrayError(Exception):
    """Base class for operational errors surfaced to the CLI."""


class RuleCatalogError(PerfXrayError, ValueError):
    """Raised when a rule definition is invalid."""


class ConfigError(PerfXrayError, ValueError):
    """Raised when the project configuration file is malformed."""
