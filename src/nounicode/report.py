# -*- coding: ascii -*-
"""Human readable and JSON rendering of diagnostics."""

import bisect
import json
from typing import Any, Dict, List, Sequence, Tuple

from .emitter import Diagnostic


def line_starts(text: str) -> List[int]:
    """Offsets at which each line of ``text`` begins."""
    starts = [0]
    for idx, ch in enumerate(text):
        if ch == "\n" or (ch == "\r" and not text.startswith("\n", idx + 1)):
            starts.append(idx + 1)
    return starts


def to_line_col(starts: List[int], pos: int) -> Tuple[int, int]:
    """Convert an offset to a 1-based (line, column) pair."""
    line_idx = bisect.bisect_right(starts, pos) - 1
    return line_idx + 1, pos - starts[line_idx] + 1


def format_text(path: str, text: str, diagnostics: Sequence[Diagnostic]) -> List[str]:
    """One ``path:line:col: message`` line per diagnostic."""
    starts = line_starts(text)
    lines = []
    for diagnostic in diagnostics:
        line, col = to_line_col(starts, diagnostic.pos)
        suffix = " (fixable)" if diagnostic.fix is not None else ""
        lines.append(f"{path}:{line}:{col}: {diagnostic.message}{suffix}")
    return lines


def diagnostic_record(diagnostic: Diagnostic, starts: List[int]) -> Dict[str, Any]:
    record = diagnostic.to_dict()
    record['line'], record['column'] = to_line_col(starts, diagnostic.pos)
    return record


def format_json(results: Sequence[Tuple[str, str, Sequence[Diagnostic]]]) -> str:
    """
    Render ``(path, text, diagnostics)`` triples as a JSON document.

    The output is ASCII-only; offending characters appear as JSON escapes.
    """
    files = []
    total = 0
    for path, text, diagnostics in results:
        starts = line_starts(text)
        files.append({
            'path': path,
            'diagnostics': [diagnostic_record(d, starts) for d in diagnostics],
        })
        total += len(diagnostics)
    return json.dumps({'rule': 'no-unicode', 'total': total, 'files': files}, indent=2, ensure_ascii=True)
