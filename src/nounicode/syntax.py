# -*- coding: ascii -*-
"""
Tolerant lexer producing a flat syntax tree for Python source.

The tree is a tagged variant: every ``Node`` carries a ``NodeKind`` and
plain offsets into the source text.  Only the distinctions the lint pass
needs are made (identifiers, string literals, f/t-strings with or without
replacement fields); everything else becomes NUMBER or OPERATOR tokens.

Comments, whitespace, line continuations and any character that cannot
start a token are trivia.  Trivia is not stored in the tree; it is
recovered through ``leading_comment_ranges`` / ``trailing_comment_ranges``
starting at a node's full start ``pos``.  Comment ranges never overlap
token ranges.

The lexer never raises: unterminated strings stop at the end of the line
(or of the text, for triple-quoted strings) and unknown characters are
skipped as trivia.
"""

import re
from enum import Enum
from typing import List, Optional, Tuple

QUOTES = ('"', "'")

# Lowercased; 't' prefixes are PEP 750 template strings
STRING_PREFIXES = frozenset(['r', 'u', 'b', 'br', 'rb', 'f', 'fr', 'rf', 't', 'tr', 'rt'])

_OPERATOR_CHARS = frozenset('()[]{}:;,.+-*/%|&^~<>=!@')
_OPEN_BRACKETS = frozenset('([{')
_CLOSE_BRACKETS = frozenset(')]}')

_OPERATOR = re.compile(r'\*\*=?|//=?|>>=?|<<=?|->|:=|\.\.\.|[-+*/%&|^@<>=!]=|.', re.DOTALL)
_NUMBER = re.compile(r'(?:[0-9]|\.[0-9])[0-9A-Za-z_.]*(?:(?<=[eE])[+-][0-9_]+)?')
_LINE_BREAK = re.compile(r'[\r\n]')


class NodeKind(Enum):
    MODULE = "module"
    IDENTIFIER = "identifier"
    STRING = "string"
    NO_SUBSTITUTION_TEMPLATE = "no_substitution_template"
    TEMPLATE_EXPRESSION = "template_expression"
    TEMPLATE_SEGMENT = "template_segment"
    NUMBER = "number"
    OPERATOR = "operator"
    END_OF_FILE = "end_of_file"


class Node:
    """
    One node of the syntax tree.

    Attributes:
        kind: NodeKind tag
        pos: full start, i.e. the end of the previous token (leading trivia included)
        start: first character of the token itself
        end: exclusive end offset
        children: child nodes in document order
        segments: literal spans of a TEMPLATE_EXPRESSION (head, middles, tail)
    """

    __slots__ = ('kind', 'pos', 'start', 'end', 'children', 'segments')

    def __init__(self, kind: NodeKind, pos: int, start: int, end: int,
                 children: Optional[List['Node']] = None,
                 segments: Optional[List['Node']] = None):
        self.kind = kind
        self.pos = pos
        self.start = start
        self.end = end
        self.children = children or []
        self.segments = segments or []

    def text(self, source: str) -> str:
        return source[self.start:self.end]

    def __repr__(self):
        return f"Node({self.kind.name}, pos={self.pos}, start={self.start}, end={self.end})"


class CommentRange:
    """Span ``[pos, end)`` of a single ``#`` comment."""

    __slots__ = ('pos', 'end')

    def __init__(self, pos: int, end: int):
        self.pos = pos
        self.end = end

    def __eq__(self, other):
        if not isinstance(other, CommentRange):
            return NotImplemented
        return (self.pos, self.end) == (other.pos, other.end)

    def __hash__(self):
        return hash((self.pos, self.end))

    def __repr__(self):
        return f"CommentRange({self.pos}, {self.end})"


def _starts_token(text: str, i: int) -> bool:
    ch = text[i]
    if ch in QUOTES or ch in _OPERATOR_CHARS or '0' <= ch <= '9':
        return True
    return ch.isidentifier()


def _scan_trivia(text: str, pos: int) -> Tuple[int, List[Tuple[CommentRange, bool]]]:
    """
    Skip trivia starting at ``pos``.

    Returns:
        (offset of the next token or len(text),
         [(comment, preceded_by_line_break), ...])
    """
    comments = []
    seen_line_break = False
    i = pos
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '#':
            m = _LINE_BREAK.search(text, i)
            end = m.start() if m else n
            comments.append((CommentRange(i, end), seen_line_break))
            i = end
        elif ch == '\r' or ch == '\n':
            seen_line_break = True
            i += 1
        elif ch == '\\' and text.startswith('\r\n', i + 1):
            i += 3
        elif ch == '\\' and text.startswith(('\n', '\r'), i + 1):
            i += 2
        elif _starts_token(text, i):
            break
        else:
            i += 1
    return i, comments


def leading_comment_ranges(text: str, pos: int) -> List[CommentRange]:
    """Comments in the trivia at ``pos`` that follow its first line break (all of them at 0)."""
    _, comments = _scan_trivia(text, pos)
    return [c for c, after_break in comments if after_break or pos == 0]


def trailing_comment_ranges(text: str, pos: int) -> List[CommentRange]:
    """Comments in the trivia at ``pos`` on the same line as ``pos``."""
    if pos == 0:
        return []
    _, comments = _scan_trivia(text, pos)
    return [c for c, after_break in comments if not after_break]


class _Lexer:

    def __init__(self, text: str):
        self.text = text
        self.n = len(text)
        self.i = 0

    def tokens(self, in_field: bool = False) -> Tuple[List[Node], int]:
        """
        Lex tokens from the current offset.

        At top level this runs to the end of the text.  Inside an f-string
        replacement field it stops before a ``}``, ``:`` or ``!`` at bracket
        depth zero.

        Returns:
            (nodes, full start of whatever follows the last node)
        """
        text = self.text
        nodes = []
        depth = 0
        while True:
            pos = self.i
            start, _ = _scan_trivia(text, pos)
            if start >= self.n:
                self.i = start if in_field else pos
                return nodes, pos
            ch = text[start]
            if in_field and depth == 0 and (
                    ch == '}' or ch == ':' or (ch == '!' and not text.startswith('!=', start))):
                self.i = start
                return nodes, pos

            if ch in QUOTES:
                node = self._string(pos, start, '')
            elif ch.isidentifier():
                end = self._name_end(start)
                word = text[start:end]
                if end < self.n and text[end] in QUOTES and word.lower() in STRING_PREFIXES:
                    node = self._string(pos, start, word.lower())
                else:
                    node = Node(NodeKind.IDENTIFIER, pos, start, end)
            elif '0' <= ch <= '9' or (ch == '.' and start + 1 < self.n and '0' <= text[start + 1] <= '9'):
                m = _NUMBER.match(text, start)
                node = Node(NodeKind.NUMBER, pos, start, m.end())
            else:
                m = _OPERATOR.match(text, start)
                node = Node(NodeKind.OPERATOR, pos, start, m.end())
                if ch in _OPEN_BRACKETS:
                    depth += 1
                elif ch in _CLOSE_BRACKETS:
                    depth = max(0, depth - 1)

            nodes.append(node)
            self.i = node.end

    def _name_end(self, start: int) -> int:
        i = start + 1
        while i < self.n and ('a' + self.text[i]).isidentifier():
            i += 1
        return i

    def _string(self, pos: int, start: int, prefix: str) -> Node:
        text = self.text
        quote_at = start + len(prefix)
        quote = text[quote_at]
        delim = quote * 3 if text.startswith(quote * 3, quote_at) else quote
        raw = 'r' in prefix
        if 'f' in prefix or 't' in prefix:
            return self._template(pos, start, quote_at + len(delim), delim, raw)

        triple = len(delim) == 3
        i = quote_at + len(delim)
        while i < self.n:
            c = text[i]
            if c == '\\':
                i += self._escape_width(i, quote, raw)
                continue
            if text.startswith(delim, i):
                i += len(delim)
                break
            if not triple and (c == '\r' or c == '\n'):
                break
            i += 1
        end = min(i, self.n)
        self.i = end
        return Node(NodeKind.STRING, pos, start, end)

    def _escape_width(self, i: int, quote: str, raw: bool, template: bool = False) -> int:
        """Number of characters a backslash at ``i`` consumes lexically."""
        nxt = self.text[i + 1] if i + 1 < self.n else ''
        if template and nxt in ('{', '}'):
            return 1
        if self.text.startswith('\r\n', i + 1):
            return 3
        if raw and nxt not in (quote, '\\', '\r', '\n'):
            return 1
        if not raw and template and nxt == 'N' and self.text.startswith('{', i + 2):
            close = self.text.find('}', i + 3)
            return (close + 1 - i) if close >= 0 else self.n - i
        return 2

    def _template(self, pos: int, start: int, body_start: int, delim: str, raw: bool) -> Node:
        text = self.text
        triple = len(delim) == 3
        quote = delim[0]
        children = []
        segments = []
        seg_pos = start
        seg_start = start
        depth = 0
        i = body_start
        while i < self.n:
            c = text[i]
            if c == '\\':
                i += self._escape_width(i, quote, raw, template=True)
                continue
            if text.startswith(delim, i):
                i += len(delim)
                break
            if not triple and (c == '\r' or c == '\n'):
                break
            if c == '{':
                if depth == 0 and text.startswith('{{', i):
                    i += 2
                    continue
                i += 1
                segment = Node(NodeKind.TEMPLATE_SEGMENT, seg_pos, seg_start, i)
                segments.append(segment)
                children.append(segment)
                depth += 1
                self.i = i
                field_nodes, seg_pos = self.tokens(in_field=True)
                children.extend(field_nodes)
                i = self.i
                seg_start = i
                continue
            if c == '}':
                if depth == 0:
                    i += 2 if text.startswith('}}', i) else 1
                    continue
                depth -= 1
            i += 1
        end = min(i, self.n)
        self.i = end

        if not segments:
            return Node(NodeKind.NO_SUBSTITUTION_TEMPLATE, pos, start, end)
        tail = Node(NodeKind.TEMPLATE_SEGMENT, seg_pos, seg_start, end)
        segments.append(tail)
        children.append(tail)
        return Node(NodeKind.TEMPLATE_EXPRESSION, pos, start, end, children, segments)


def parse_source(text: str) -> Node:
    """Lex ``text`` into a MODULE node whose last child is END_OF_FILE."""
    lexer = _Lexer(text)
    children, eof_pos = lexer.tokens()
    children.append(Node(NodeKind.END_OF_FILE, eof_pos, len(text), len(text)))
    return Node(NodeKind.MODULE, 0, 0, len(text), children)
