# -*- coding: ascii -*-
"""Command line interface."""

import argparse
import ast
import json
import logging
import os
import sys
from pathlib import Path
from typing import Iterator, List, Optional

from .errors import ConfigError
from .policy import CONFIGURABLE_KEYS, Option, PolicyConfig, load_policy_file
from .report import format_json, format_text
from .rule import RULE_METADATA, NoUnicodeRule, apply_fixes

LOG = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_USAGE = 2

# Directories never descended into when a directory is given
EXCLUDE_DIRS = {
    ".git", ".hg", ".svn", ".venv", "venv", "env", "__pycache__", ".mypy_cache",
    ".pytest_cache", ".tox", ".nox", ".eggs", "node_modules", "dist", "build",
    "htmlcov", ".cache",
}

SOURCE_SUFFIXES = {".py", ".pyi"}


def iter_source_files(paths: List[str]) -> Iterator[Path]:
    """Yield files named directly plus Python sources found under directories."""
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            for dirpath, dirnames, filenames in os.walk(path):
                dirnames[:] = sorted(d for d in dirnames if d not in EXCLUDE_DIRS)
                for filename in sorted(filenames):
                    if os.path.splitext(filename)[1] in SOURCE_SUFFIXES:
                        yield Path(dirpath) / filename
        else:
            yield path


def resolve_config(args) -> PolicyConfig:
    """Config file (if any) overridden key by key by CLI flags."""
    config = load_policy_file(args.config) if args.config else PolicyConfig()
    overrides = {key: getattr(args, key, None) for key in CONFIGURABLE_KEYS}
    return config.merged(overrides)


def compiles(text: str, path: str) -> bool:
    """
    Whether fixed source still parses.

    Escapes are written in the \\u{hex} form, which Python string literals
    do not accept, so fixes inside strings usually make a file invalid.
    """
    try:
        ast.parse(text, filename=path)
    except (SyntaxError, ValueError) as e:
        LOG.warning(f"Not writing fixes to {path}: result does not compile ({e})")
        return False
    return True


def configure_logging(args):
    """Configure Python logging based on CLI arguments."""
    log_level = 'ERROR' if args.quiet else args.log_level
    logging.basicConfig(
        level=getattr(logging, log_level),
        format='%(levelname)s - %(name)s - %(message)s'
    )


def cmd_check(args) -> int:
    """Lint the given paths; optionally write fixes back."""
    try:
        config = resolve_config(args)
    except ConfigError as e:
        LOG.error(str(e))
        return EXIT_USAGE
    LOG.debug(f"Effective policy: {config.to_dict()}")

    rule = NoUnicodeRule(config)
    results = []
    total = 0
    unreadable = 0
    checked = 0

    for path in iter_source_files(args.paths):
        try:
            with open(path, 'r', encoding='utf-8', newline='') as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            LOG.error(f"Cannot read {path}: {e}")
            unreadable += 1
            continue
        checked += 1

        diagnostics = rule.apply(text)
        if args.fix and any(d.fix is not None for d in diagnostics):
            fixed = apply_fixes(text, diagnostics)
            if compiles(fixed, str(path)):
                with open(path, 'w', encoding='utf-8', newline='') as f:
                    f.write(fixed)
                LOG.info(f"Fixed {sum(1 for d in diagnostics if d.fix is not None)} problem(s) in {path}")
                text = fixed
                diagnostics = rule.apply(text)

        total += len(diagnostics)
        results.append((str(path), text, diagnostics))

    if args.format == 'json':
        print(format_json(results))
    else:
        for path, text, diagnostics in results:
            for line in format_text(path, text, diagnostics):
                print(line)
        LOG.info(f"Checked {checked} file(s), {total} problem(s)")

    if unreadable:
        return EXIT_USAGE
    return EXIT_VIOLATIONS if total else EXIT_OK


def cmd_rules(args) -> int:
    """Print the rule metadata."""
    print(json.dumps(RULE_METADATA, indent=2))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='nounicode',
        description='nounicode: report non-ASCII characters in Python source by context',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    # Global logging options
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], default='WARNING',
                        help='Set logging level (default: WARNING)')
    parser.add_argument('--quiet', action='store_true', help='Suppress all but error messages (equivalent to --log-level ERROR)')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    check_parser = subparsers.add_parser('check', help='Lint files or directories')
    check_parser.add_argument('paths', nargs='+', help='Files or directories to lint')
    check_parser.add_argument('-c', '--config', help='YAML configuration file')
    choices = [option.value for option in Option]
    for key in CONFIGURABLE_KEYS:
        check_parser.add_argument(f'--{key}', choices=choices, default=None,
                                  help=f'Policy for {key} context (overrides config file)')
    check_parser.add_argument('--fix', action='store_true', help='Write escape-sequence fixes back to the files')
    check_parser.add_argument('--format', choices=['text', 'json'], default='text', help='Output format (default: text)')

    subparsers.add_parser('rules', help='Show rule metadata and option defaults')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args)

    if not args.command:
        parser.print_help()
        return EXIT_USAGE

    if args.command == 'check':
        return cmd_check(args)
    elif args.command == 'rules':
        return cmd_rules(args)

    print(f"Unknown command: {args.command}")
    return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
