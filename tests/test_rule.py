# -*- coding: ascii -*-
"""
End-to-end tests for the no-unicode rule.

Covers the documented scenarios: default policy per context, the unknown
context fallback, fix idempotence and exactly-once reporting.
"""

import unittest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from nounicode.emitter import Diagnostic, Replacement
from nounicode.policy import Context, PolicyConfig
from nounicode.rule import RULE_METADATA, NoUnicodeRule, apply_fixes, lint_source
from nounicode.scanner import find_problems

ALL_ALWAYS = {'comment': 'always', 'identifier': 'always', 'string': 'always', 'template': 'always'}
ALL_NEVER = {'comment': 'never', 'identifier': 'never', 'string': 'never', 'template': 'never'}
ALL_ESCAPED = {'comment': 'escaped', 'identifier': 'escaped', 'string': 'escaped', 'template': 'escaped'}

MIXED_SOURCE = (
    "# caf\u00e9\n"
    "s = \"caf\u00e9\"  # \u00fcber\n"
    "t = f\"\u00e8{s}\u00ea\"\n"
    "u = '''\n\u4e16\u754c\n'''\n"
)


class TestDefaultPolicy(unittest.TestCase):
    """Documented default-policy scenarios."""

    def test_ascii_source_is_clean(self):
        text = "def f(x):\n    return f'{x!r}'  # fine\n"
        self.assertEqual(lint_source(text), [])
        self.assertEqual(lint_source(text, ALL_NEVER), [])

    def test_string_literal_escaped(self):
        diagnostics = lint_source('"caf\u00e9"')
        self.assertEqual(len(diagnostics), 1)
        diagnostic = diagnostics[0]
        self.assertEqual((diagnostic.pos, diagnostic.len), (4, 1))
        self.assertEqual(diagnostic.fix.text, "\\u{e9}")
        self.assertIn("string literals", diagnostic.message)
        self.assertIn('"\\u{e9}"', diagnostic.message)

    def test_identifier_rejected_without_fix(self):
        diagnostics = lint_source("caf\u00e9 = 1\n")
        self.assertEqual(len(diagnostics), 1)
        self.assertIsNone(diagnostics[0].fix)
        self.assertIn("identifiers", diagnostics[0].message)

    def test_comment_allowed(self):
        self.assertEqual(lint_source("x = 1  # caf\u00e9\n"), [])

    def test_template_escaped(self):
        diagnostics = lint_source('f"\u00e9{x}"')
        self.assertEqual(len(diagnostics), 1)
        self.assertIn("template literals", diagnostics[0].message)
        self.assertIsNotNone(diagnostics[0].fix)


class TestUnknownContext(unittest.TestCase):
    """Characters outside every context are always reported."""

    def test_whitespace_character_reported_under_any_policy(self):
        text = "x = \u00a01\n"
        for options in (None, ALL_ALWAYS, ALL_NEVER, ALL_ESCAPED):
            diagnostics = lint_source(text, options)
            self.assertEqual(len(diagnostics), 1, options)
            self.assertIn("unknown context", diagnostics[0].message)
            self.assertIsNone(diagnostics[0].fix)
            self.assertEqual(diagnostics[0].context, Context.UNKNOWN)


class TestContextPrecedence(unittest.TestCase):

    def test_comment_wins_over_quote_characters(self):
        text = "# say \"h\u00e9\" here\nx = 'ok'\n"
        self.assertEqual(lint_source(text), [])
        diagnostics = lint_source(text, {'comment': 'never'})
        self.assertEqual([d.context for d in diagnostics], [Context.COMMENT])

    def test_string_boundaries(self):
        first = lint_source("x = '\u00e9abc'")
        last = lint_source("x = 'abc\u00e9'")
        self.assertEqual([(d.pos, d.context) for d in first], [(5, Context.STRING)])
        self.assertEqual([(d.pos, d.context) for d in last], [(8, Context.STRING)])


class TestReportingProperties(unittest.TestCase):
    """Exactly-once reporting and fix idempotence."""

    def test_every_problem_reported_once(self):
        diagnostics = lint_source(MIXED_SOURCE, ALL_NEVER)
        scanned = find_problems(MIXED_SOURCE)
        self.assertEqual([(d.pos, d.len) for d in diagnostics], [(p.pos, p.len) for p in scanned])

    def test_silent_contexts_drop_only_their_problems(self):
        diagnostics = lint_source(MIXED_SOURCE)
        contexts = [d.context for d in diagnostics]
        self.assertNotIn(Context.COMMENT, contexts)
        self.assertEqual(len(diagnostics), len(find_problems(MIXED_SOURCE)) - 2)

    def test_fixes_remove_all_problems(self):
        diagnostics = lint_source(MIXED_SOURCE, ALL_ESCAPED)
        self.assertTrue(all(d.fix is not None for d in diagnostics))
        fixed = apply_fixes(MIXED_SOURCE, diagnostics)
        self.assertEqual(find_problems(fixed), [])
        self.assertEqual(lint_source(fixed, ALL_ESCAPED), [])
        self.assertIn('s = "caf\\u{e9}"', fixed)

    def test_fix_replaces_exact_span(self):
        text = "a = '\u00e9\u00e8'\nb = 1\n"
        fixed = apply_fixes(text, lint_source(text))
        self.assertEqual(fixed, "a = '\\u{e9}\\u{e8}'\nb = 1\n")


class TestRuleObject(unittest.TestCase):

    def test_accepts_config_or_mapping(self):
        config = PolicyConfig.from_options({'string': 'never'})
        self.assertIs(NoUnicodeRule(config).config, config)
        self.assertEqual(NoUnicodeRule({'string': 'never'}).config, config)
        self.assertEqual(NoUnicodeRule().config, PolicyConfig())

    def test_runs_do_not_share_state(self):
        rule = NoUnicodeRule()
        first = rule.apply('"\u00e9"')
        second = rule.apply('"\u00e9"')
        self.assertEqual([d.to_dict() for d in first], [d.to_dict() for d in second])
        self.assertEqual(rule.apply("x = 1"), [])

    def test_metadata(self):
        self.assertEqual(RULE_METADATA['rule_name'], 'no-unicode')
        self.assertTrue(RULE_METADATA['has_fix'])
        self.assertEqual(RULE_METADATA['defaults'], {
            'comment': 'always', 'identifier': 'never', 'string': 'escaped', 'template': 'escaped',
        })
        self.assertEqual(set(RULE_METADATA['options']['properties']),
                         {'comment', 'identifier', 'string', 'template'})


class TestApplyFixes(unittest.TestCase):

    def test_overlapping_fix_skipped(self):
        text = "abcdef"
        diagnostics = [
            Diagnostic(1, 3, "m", Context.STRING, Replacement(1, 3, "X")),
            Diagnostic(2, 3, "m", Context.STRING, Replacement(2, 3, "Y")),
        ]
        with self.assertLogs('nounicode.rule', level='WARNING'):
            fixed = apply_fixes(text, diagnostics)
        self.assertEqual(fixed, "abYf")

    def test_no_fixes_returns_text(self):
        self.assertEqual(apply_fixes("x", []), "x")


if __name__ == '__main__':
    unittest.main()
