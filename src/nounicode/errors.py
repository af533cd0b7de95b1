# -*- coding: ascii -*-
"""Exception types raised by nounicode."""


class NoUnicodeError(Exception):
    """Base class for all nounicode errors."""


class CorrelationError(NoUnicodeError, RuntimeError):
    """Traversal was driven without the whole-file scan seeding the pool."""


class ConfigError(NoUnicodeError, ValueError):
    """A configuration file could not be read or parsed."""
