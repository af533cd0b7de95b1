# -*- coding: ascii -*-
"""
Per-context policy for non-ASCII characters.

The policy maps each syntactic context to one of three options:

* ``always``  - non-ASCII characters are accepted silently
* ``never``   - non-ASCII characters are reported
* ``escaped`` - non-ASCII characters are reported together with an escape
  sequence and a fix that inserts it

Configuration can be passed as a (partial) mapping or loaded from YAML,
either as the four keys at top level or nested under ``no-unicode``
(optionally below ``rules``)::

    rules:
      no-unicode:
        identifier: never
        string: escaped
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .errors import ConfigError

LOG = logging.getLogger(__name__)

RULE_KEY = 'no-unicode'


class Context(Enum):
    """Syntactic context a run of characters is attributed to."""
    COMMENT = "comment"
    IDENTIFIER = "identifier"
    STRING = "string"
    TEMPLATE = "template"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        """Plural noun used in diagnostic messages."""
        return _CONTEXT_LABELS[self]


_CONTEXT_LABELS = {
    Context.COMMENT: "comments",
    Context.IDENTIFIER: "identifiers",
    Context.STRING: "string literals",
    Context.TEMPLATE: "template literals",
    Context.UNKNOWN: "unknown context",
}


class Option(Enum):
    """Configurable behaviour for one context."""
    ALWAYS = "always"
    NEVER = "never"
    ESCAPED = "escaped"


class Disposition(Enum):
    """Effective action taken for one problem."""
    SILENT = "silent"
    REJECT = "reject"
    REJECT_WITH_FIX = "reject-with-fix"


_DISPOSITIONS = {
    Option.ALWAYS: Disposition.SILENT,
    Option.NEVER: Disposition.REJECT,
    Option.ESCAPED: Disposition.REJECT_WITH_FIX,
}

# Documented per-key defaults
DEFAULT_OPTIONS = {
    Context.COMMENT: Option.ALWAYS,
    Context.IDENTIFIER: Option.NEVER,
    Context.STRING: Option.ESCAPED,
    Context.TEMPLATE: Option.ESCAPED,
}

CONFIGURABLE_KEYS = tuple(context.value for context in DEFAULT_OPTIONS)


def _coerce_option(key: str, value: Any, default: Option) -> Option:
    """Return the Option named by ``value``, or ``default`` if it is malformed."""
    if isinstance(value, Option):
        return value
    if isinstance(value, str):
        try:
            return Option(value.strip().lower())
        except ValueError:
            pass
    LOG.warning(f"Invalid value {value!r} for '{key}', "
                f"expected one of {[o.value for o in Option]}; using default '{default.value}'")
    return default


class PolicyConfig:
    """
    Resolved policy for one analysis run.

    Args:
        comment: Option for comments (default: always)
        identifier: Option for identifiers (default: never)
        string: Option for string literals (default: escaped)
        template: Option for f-strings and t-strings (default: escaped)
    """

    __slots__ = ('comment', 'identifier', 'string', 'template')

    def __init__(self, comment: Option = Option.ALWAYS, identifier: Option = Option.NEVER,
                 string: Option = Option.ESCAPED, template: Option = Option.ESCAPED):
        object.__setattr__(self, 'comment', comment)
        object.__setattr__(self, 'identifier', identifier)
        object.__setattr__(self, 'string', string)
        object.__setattr__(self, 'template', template)

    def __setattr__(self, name, value):
        raise AttributeError("PolicyConfig is immutable")

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]] = None) -> 'PolicyConfig':
        """
        Merge a partial options mapping over the per-key defaults.

        Unknown keys are ignored and malformed values fall back to the
        default for their key; neither is an error.
        """
        options = options or {}
        for key in options:
            if key not in CONFIGURABLE_KEYS:
                LOG.warning(f"Ignoring unknown option '{key}' (known: {', '.join(CONFIGURABLE_KEYS)})")

        resolved = {}
        for context, default in DEFAULT_OPTIONS.items():
            key = context.value
            if options.get(key) is None:
                resolved[key] = default
            else:
                resolved[key] = _coerce_option(key, options[key], default)
        return cls(**resolved)

    def merged(self, overrides: Optional[Mapping[str, Any]]) -> 'PolicyConfig':
        """Return a new config with ``overrides`` applied on top of this one."""
        current = self.to_dict()
        for key, value in (overrides or {}).items():
            if value is not None:
                current[key] = value
        return PolicyConfig.from_options(current)

    def option_for(self, context: Context) -> Option:
        """Return the configured Option; the unknown context is always ``never``."""
        if context is Context.UNKNOWN:
            return Option.NEVER
        return getattr(self, context.value)

    def to_dict(self) -> Dict[str, str]:
        return {key: getattr(self, key).value for key in CONFIGURABLE_KEYS}

    def __eq__(self, other):
        if not isinstance(other, PolicyConfig):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash(tuple(self.to_dict().items()))

    def __repr__(self):
        fields = ', '.join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"PolicyConfig({fields})"


def disposition_for(context: Context, config: PolicyConfig) -> Disposition:
    """Look up the disposition for ``context`` under ``config``."""
    return _DISPOSITIONS[config.option_for(context)]


def _extract_rule_options(data: Any, path: Union[str, Path]) -> Dict[str, Any]:
    """Find the rule options inside a loaded YAML document."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a mapping, got {type(data).__name__}")

    rules = data.get('rules')
    if isinstance(rules, dict) and RULE_KEY in rules:
        data = rules[RULE_KEY]
    elif RULE_KEY in data:
        data = data[RULE_KEY]

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"'{RULE_KEY}' options in {path} must be a mapping")
    return data


def load_policy_file(path: Union[str, Path]) -> PolicyConfig:
    """
    Load a PolicyConfig from a YAML file.

    Raises:
        ConfigError: if the file is missing, unreadable or not valid YAML
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config {path}: {e}") from e

    config = PolicyConfig.from_options(_extract_rule_options(data, path))
    LOG.debug(f"Loaded policy from {path}: {config.to_dict()}")
    return config
