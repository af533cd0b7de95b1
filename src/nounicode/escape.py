# -*- coding: ascii -*-
"""Escape generator for offending character runs."""


def escape_unicode(raw: str) -> str:
    """
    Convert ``raw`` to a sequence of ``\\u{<hex>}`` tokens, one per code point.

    Example: ``escape_unicode("\\u00e9")`` -> ``"\\\\u{e9}"``.
    """
    return ''.join(f"\\u{{{ord(ch):x}}}" for ch in raw)
