# -*- coding: ascii -*-
"""
The ``no-unicode`` rule.

Disallows characters other than printable ASCII (U+0020 - U+007E) and
standard whitespace (CR, LF, TAB) anywhere within a source file.  What
happens to a non-ASCII character depends on the context it appears in;
see ``policy`` for the options and their defaults.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from .correlator import Correlator
from .emitter import Diagnostic, emit
from .policy import CONFIGURABLE_KEYS, DEFAULT_OPTIONS, Option, PolicyConfig
from .syntax import parse_source

LOG = logging.getLogger(__name__)

_OPTION_SCHEMA = {
    'type': 'string',
    'enum': [option.value for option in Option],
}

RULE_METADATA: Dict[str, Any] = {
    'rule_name': 'no-unicode',
    'description': 'Disallows use of non-ASCII characters.',
    'description_details': (
        'Characters other than printable ASCII (U+0020 - U+007E) and standard '
        'whitespace (CR, LF, TAB) are reported anywhere within the source file.'
    ),
    'options_description': (
        'Each context (comment, identifier, string, template) is configured '
        'independently: "always" does nothing, "never" reports, "escaped" reports '
        'with the escape sequence to use and a fix inserting it. Characters outside '
        'every known context are always reported.'
    ),
    'options': {
        'type': 'object',
        'properties': {key: dict(_OPTION_SCHEMA) for key in CONFIGURABLE_KEYS},
    },
    'defaults': {context.value: option.value for context, option in DEFAULT_OPTIONS.items()},
    'type': 'style',
    'has_fix': True,
}


class NoUnicodeRule:
    """
    Lint rule instance holding one resolved policy.

    Args:
        options: PolicyConfig, or a partial options mapping merged over the defaults
    """

    def __init__(self, options: Optional[Union[PolicyConfig, Mapping[str, Any]]] = None):
        if isinstance(options, PolicyConfig):
            self.config = options
        else:
            self.config = PolicyConfig.from_options(options)

    @property
    def name(self) -> str:
        return RULE_METADATA['rule_name']

    def apply(self, text: str) -> List[Diagnostic]:
        """Run one analysis over ``text``; state is private to this call."""
        correlator = Correlator(text)
        correlator.seed()
        classified = correlator.correlate(parse_source(text))
        return emit(classified, self.config)


def lint_source(text: str, options: Optional[Union[PolicyConfig, Mapping[str, Any]]] = None) -> List[Diagnostic]:
    """Lint ``text`` with ``options`` (defaults when omitted)."""
    return NoUnicodeRule(options).apply(text)


def apply_fixes(text: str, diagnostics: List[Diagnostic]) -> str:
    """
    Apply the replacement of every fixable diagnostic to ``text``.

    Fixes are applied from the end of the text backwards so earlier offsets
    stay valid; a fix overlapping one already applied is skipped.
    """
    fixes = sorted((d.fix for d in diagnostics if d.fix is not None),
                   key=lambda r: r.pos, reverse=True)
    limit = len(text)
    for fix in fixes:
        if fix.end > limit:
            LOG.warning(f"Skipping overlapping fix at offset {fix.pos}")
            continue
        text = fix.apply(text)
        limit = fix.pos
    return text
