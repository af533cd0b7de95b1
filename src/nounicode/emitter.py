# -*- coding: ascii -*-
"""Turn classified problems into diagnostics for the reporting sink."""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .escape import escape_unicode
from .policy import Context, Disposition, PolicyConfig, disposition_for
from .scanner import Problem

LOG = logging.getLogger(__name__)


class Replacement:
    """Replace ``text[pos:pos + len]`` with ``text``."""

    __slots__ = ('pos', 'len', 'text')

    def __init__(self, pos: int, len: int, text: str):
        self.pos = pos
        self.len = len
        self.text = text

    @property
    def end(self) -> int:
        return self.pos + self.len

    def apply(self, source: str) -> str:
        return source[:self.pos] + self.text + source[self.end:]

    def __eq__(self, other):
        if not isinstance(other, Replacement):
            return NotImplemented
        return (self.pos, self.len, self.text) == (other.pos, other.len, other.text)

    def __repr__(self):
        return f"Replacement(pos={self.pos}, len={self.len}, text={self.text!r})"


class Diagnostic:
    """One reported problem: span, message and an optional fix."""

    __slots__ = ('pos', 'len', 'message', 'context', 'fix')

    def __init__(self, pos: int, len: int, message: str, context: Context,
                 fix: Optional[Replacement] = None):
        self.pos = pos
        self.len = len
        self.message = message
        self.context = context
        self.fix = fix

    def to_dict(self) -> Dict[str, Any]:
        return {
            'pos': self.pos,
            'len': self.len,
            'context': self.context.value,
            'message': self.message,
            'fix': self.fix.text if self.fix is not None else None,
        }

    def __repr__(self):
        return (f"Diagnostic(pos={self.pos}, len={self.len}, context={self.context.value}, "
                f"message={self.message!r}, fix={self.fix!r})")


def prohibited_message(context: Context) -> str:
    return f"non-ASCII characters in {context.label} are disallowed"


def escape_required_message(context: Context, escaped: str) -> str:
    return (f"unescaped non-ASCII characters in {context.label} are disallowed, "
            f"use escape sequence \"{escaped}\"")


def make_diagnostic(problem: Problem, context: Context,
                    config: PolicyConfig) -> Optional[Diagnostic]:
    """Build the diagnostic for one problem, or None when its disposition is silent."""
    disposition = disposition_for(context, config)
    if disposition is Disposition.SILENT:
        return None
    if disposition is Disposition.REJECT:
        return Diagnostic(problem.pos, problem.len, prohibited_message(context), context)

    escaped = escape_unicode(problem.value)
    return Diagnostic(
        problem.pos,
        problem.len,
        escape_required_message(context, escaped),
        context,
        Replacement(problem.pos, problem.len, escaped),
    )


def emit(classified: Iterable[Tuple[Problem, Context]], config: PolicyConfig) -> List[Diagnostic]:
    """
    Resolve each (problem, context) pair against ``config``.

    Returns:
        Diagnostics ordered by position
    """
    diagnostics = []
    silenced = 0
    for problem, context in classified:
        diagnostic = make_diagnostic(problem, context, config)
        if diagnostic is None:
            silenced += 1
        else:
            diagnostics.append(diagnostic)
    diagnostics.sort(key=lambda d: d.pos)
    LOG.debug(f"Emitted {len(diagnostics)} diagnostic(s), {silenced} silenced by policy")
    return diagnostics
