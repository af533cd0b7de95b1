# -*- coding: ascii -*-
"""
Context correlator.

Assigns every problem found by the whole-file scan to the first syntactic
context that claims it during a pre-order walk of the syntax tree:

1. comments attached to a node's leading trivia (visited before the node),
2. identifiers, string literals and f/t-strings without fields,
3. the literal segments of f/t-strings with fields, claimed after the
   replacement-field expressions have been walked.

A node claims every pending problem whose ``pos`` lies in its inclusive
``[start, end]`` range.  Problems nobody claims end up in the unknown context.
"""

import logging
from bisect import bisect_left, bisect_right
from typing import List, Optional, Tuple

from .errors import CorrelationError
from .policy import Context
from .scanner import Problem, find_problems
from .syntax import Node, NodeKind, leading_comment_ranges, trailing_comment_ranges

LOG = logging.getLogger(__name__)

_TOKEN_CONTEXTS = {
    NodeKind.IDENTIFIER: Context.IDENTIFIER,
    NodeKind.STRING: Context.STRING,
    NodeKind.NO_SUBSTITUTION_TEMPLATE: Context.TEMPLATE,
}


class PendingPool:
    """Problems not yet claimed, kept sorted by ``pos`` for range withdrawal."""

    def __init__(self, problems: List[Problem]):
        self._problems = list(problems)
        self._positions = [p.pos for p in self._problems]

    def withdraw(self, start: int, end: int) -> List[Problem]:
        """Remove and return every problem with ``start <= pos <= end``."""
        lo = bisect_left(self._positions, start)
        hi = bisect_right(self._positions, end)
        if lo == hi:
            return []
        taken = self._problems[lo:hi]
        del self._problems[lo:hi]
        del self._positions[lo:hi]
        return taken

    def drain(self) -> List[Problem]:
        """Remove and return everything left."""
        taken = self._problems
        self._problems = []
        self._positions = []
        return taken

    def __len__(self):
        return len(self._problems)


class Correlator:
    """
    Correlates scanner problems with syntactic contexts for one source text.

    Usage::

        correlator = Correlator(text)
        correlator.seed()
        classified = correlator.correlate(parse_source(text))
    """

    def __init__(self, text: str):
        self.text = text
        self._pool: Optional[PendingPool] = None
        self._classified: List[Tuple[Problem, Context]] = []

    @property
    def seeded(self) -> bool:
        return self._pool is not None

    def seed(self) -> int:
        """Run the whole-file scan and fill the pending pool."""
        problems = find_problems(self.text)
        self._pool = PendingPool(problems)
        LOG.debug(f"Seeded pool with {len(problems)} problem(s)")
        return len(problems)

    def _claim(self, start: int, end: int, context: Context):
        for problem in self._pool.withdraw(start, end):
            self._classified.append((problem, context))

    def _visit_comments(self, node: Node):
        ranges = (leading_comment_ranges(self.text, node.pos)
                  + trailing_comment_ranges(self.text, node.pos))
        for comment in ranges:
            local = find_problems(self.text[comment.pos:comment.end])
            if not local:
                continue
            first = local[0].rebased(comment.pos)
            self._claim(first.pos, comment.end, Context.COMMENT)

    def correlate(self, root: Node) -> List[Tuple[Problem, Context]]:
        """
        Walk ``root`` and classify every seeded problem exactly once.

        Returns:
            (problem, context) pairs; unclaimed problems come last as UNKNOWN

        Raises:
            CorrelationError: if ``seed()`` was not called first
        """
        if self._pool is None:
            raise CorrelationError("correlate() called before the whole-file scan seeded the pool")

        self._classified = []
        stack = [(root, False)]
        while stack:
            node, leaving = stack.pop()
            if leaving:
                for segment in node.segments:
                    self._claim(segment.start, segment.end, Context.TEMPLATE)
                continue

            if node is not root:
                self._visit_comments(node)

            kind = node.kind
            if kind in _TOKEN_CONTEXTS:
                self._claim(node.start, node.end, _TOKEN_CONTEXTS[kind])
            elif kind is NodeKind.TEMPLATE_EXPRESSION:
                stack.append((node, True))

            stack.extend((child, False) for child in reversed(node.children))

        leftover = self._pool.drain()
        if leftover:
            LOG.debug(f"{len(leftover)} problem(s) outside any known context")
        for problem in leftover:
            self._classified.append((problem, Context.UNKNOWN))

        self._pool = None
        return self._classified
