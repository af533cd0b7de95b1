# -*- coding: ascii -*-
"""Tests for diagnostic emission."""

import unittest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from nounicode.emitter import Replacement, emit, make_diagnostic
from nounicode.policy import Context, PolicyConfig
from nounicode.scanner import Problem


class TestMakeDiagnostic(unittest.TestCase):
    """Test per-problem diagnostic construction."""

    def setUp(self):
        self.problem = Problem(4, 2, "\u00e9\u00e8")

    def test_silent_yields_nothing(self):
        self.assertIsNone(make_diagnostic(self.problem, Context.COMMENT, PolicyConfig()))

    def test_reject_has_no_fix(self):
        diagnostic = make_diagnostic(self.problem, Context.IDENTIFIER, PolicyConfig())
        self.assertEqual(diagnostic.message, "non-ASCII characters in identifiers are disallowed")
        self.assertIsNone(diagnostic.fix)
        self.assertEqual((diagnostic.pos, diagnostic.len), (4, 2))

    def test_reject_with_fix(self):
        diagnostic = make_diagnostic(self.problem, Context.STRING, PolicyConfig())
        self.assertEqual(
            diagnostic.message,
            'unescaped non-ASCII characters in string literals are disallowed, '
            'use escape sequence "\\u{e9}\\u{e8}"',
        )
        self.assertEqual(diagnostic.fix, Replacement(4, 2, "\\u{e9}\\u{e8}"))
        self.assertEqual(diagnostic.context, Context.STRING)

    def test_unknown_context_ignores_policy(self):
        permissive = PolicyConfig.from_options({
            'comment': 'always', 'identifier': 'always', 'string': 'always', 'template': 'always',
        })
        diagnostic = make_diagnostic(self.problem, Context.UNKNOWN, permissive)
        self.assertEqual(diagnostic.message, "non-ASCII characters in unknown context are disallowed")
        self.assertIsNone(diagnostic.fix)

    def test_to_dict(self):
        record = make_diagnostic(self.problem, Context.TEMPLATE, PolicyConfig()).to_dict()
        self.assertEqual(record['context'], 'template')
        self.assertEqual(record['fix'], "\\u{e9}\\u{e8}")
        self.assertEqual((record['pos'], record['len']), (4, 2))


class TestEmit(unittest.TestCase):
    """Test emission over classified problems."""

    def test_sorted_by_position_and_silent_dropped(self):
        classified = [
            (Problem(9, 1, "\u00e9"), Context.UNKNOWN),
            (Problem(1, 1, "\u00e9"), Context.COMMENT),
            (Problem(5, 1, "\u00e9"), Context.STRING),
        ]
        diagnostics = emit(classified, PolicyConfig())
        self.assertEqual([d.pos for d in diagnostics], [5, 9])

    def test_empty(self):
        self.assertEqual(emit([], PolicyConfig()), [])


class TestReplacement(unittest.TestCase):

    def test_apply_touches_only_span(self):
        fix = Replacement(3, 1, "\\u{e9}")
        self.assertEqual(fix.apply("caf\u00e9!"), "caf\\u{e9}!")


if __name__ == '__main__':
    unittest.main()
