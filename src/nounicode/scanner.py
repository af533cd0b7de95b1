# -*- coding: ascii -*-
"""
Character scanner.

Finds every maximal run of characters outside printable ASCII
(U+0020 - U+007E) and the standard whitespace CR, LF, TAB.
"""

from typing import List

ALLOWED_CONTROL = frozenset('\r\n\t')


def is_allowed(ch: str) -> bool:
    """Return True when ``ch`` may appear anywhere in a source file."""
    return 0x20 <= ord(ch) <= 0x7E or ch in ALLOWED_CONTROL


class Problem:
    """One maximal run of disallowed characters at ``pos`` in the source."""

    __slots__ = ('pos', 'len', 'value')

    def __init__(self, pos: int, len: int, value: str):
        self.pos = pos
        self.len = len
        self.value = value

    @property
    def end(self) -> int:
        return self.pos + self.len

    def rebased(self, offset: int) -> 'Problem':
        """Return a copy shifted by ``offset`` (local scan -> file offsets)."""
        return Problem(self.pos + offset, self.len, self.value)

    def __eq__(self, other):
        if not isinstance(other, Problem):
            return NotImplemented
        return (self.pos, self.len, self.value) == (other.pos, other.len, other.value)

    def __hash__(self):
        return hash((self.pos, self.len, self.value))

    def __repr__(self):
        return f"Problem(pos={self.pos}, len={self.len}, value={self.value!r})"


def find_problems(text: str) -> List[Problem]:
    """
    Scan ``text`` once, left to right.

    Returns:
        Problems ordered by ascending ``pos``; consecutive disallowed
        characters are merged into a single problem.
    """
    problems = []
    run_start = -1
    for idx, ch in enumerate(text):
        if is_allowed(ch):
            if run_start >= 0:
                problems.append(Problem(run_start, idx - run_start, text[run_start:idx]))
                run_start = -1
        elif run_start < 0:
            run_start = idx
    if run_start >= 0:
        problems.append(Problem(run_start, len(text) - run_start, text[run_start:]))
    return problems
