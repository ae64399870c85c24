"""Strip comments and literal text from Swift source before counting identifiers.

The steps run in a fixed order:

1. regex literals (``#/.../#``) are dropped, their bodies are pattern syntax;
2. escaped quotes and escaped backslashes are dropped so they cannot close or
   open a string literal in the next step;
3. string literals are replaced by ``""``, or by the source text of their
   interpolations (``\\(expr)``) when they contain any;
4. block comments are dropped;
5. line comments are dropped.

Step 3 is a small scanner rather than a regex, since interpolations nest
parentheses and string literals to any depth. The other steps are regex
substitutions.

Nothing here raises. Unbalanced delimiters are left in place.
"""

from __future__ import annotations

import re

REGEX_LITERAL_RE = re.compile(r"#/[\s\S]*?/#")
ESCAPE_RE = re.compile(r'\\[\\"]')
BLOCK_COMMENT_RE = re.compile(r"/\*[\s\S]*?\*/")
LINE_COMMENT_RE = re.compile(r"//[^\n]*")

QUOTE = '"'
TRIPLE_QUOTE = '"""'
EMPTY_LITERAL = '""'


def sanitize(text: str) -> str:
    text = REGEX_LITERAL_RE.sub("", text)
    text = ESCAPE_RE.sub("", text)
    text = replace_string_literals(text)
    text = BLOCK_COMMENT_RE.sub("", text)
    return LINE_COMMENT_RE.sub("", text)


def replace_string_literals(text: str) -> str:
    parts: list[str] = []
    pos = 0
    while True:
        start = text.find(QUOTE, pos)
        if start == -1:
            parts.append(text[pos:])
            break
        parts.append(text[pos:start])
        literal = _scan_literal(text, start)
        if literal is None:
            # Unterminated, keep the quote and move on.
            parts.append(QUOTE)
            pos = start + 1
            continue
        end, expressions = literal
        parts.append(_render(expressions))
        pos = end
    return "".join(parts)


def _render(expressions: list[str]) -> str:
    if not expressions:
        return EMPTY_LITERAL
    # Interpolated expressions may hold literals of their own.
    return " ".join(replace_string_literals(expr) for expr in expressions)


def _scan_literal(text: str, start: int) -> tuple[int, list[str]] | None:
    """Scan the literal opening at ``start``.

    Returns the index just past its closing quote and the source of each
    interpolation in it, or None when the literal never closes.
    """
    if text.startswith(TRIPLE_QUOTE, start):
        close = text.find(TRIPLE_QUOTE, start + 3)
        if close != -1:
            return close + 3, _interpolations(text, start + 3, close)

    expressions: list[str] = []
    index = start + 1
    while index < len(text):
        char = text[index]
        if char == "\n":
            return None
        if char == QUOTE:
            return index + 1, expressions
        if char == "\\":
            if text.startswith("(", index + 1):
                close = _matching_paren(text, index + 2)
                if close is not None:
                    expressions.append(text[index + 2 : close])
                    index = close + 1
                    continue
            index += 2
            continue
        index += 1
    return None


def _interpolations(text: str, start: int, end: int) -> list[str]:
    expressions: list[str] = []
    index = text.find("\\(", start, end)
    while index != -1:
        close = _matching_paren(text, index + 2)
        if close is None or close >= end:
            index = text.find("\\(", index + 2, end)
            continue
        expressions.append(text[index + 2 : close])
        index = text.find("\\(", close + 1, end)
    return expressions


def _matching_paren(text: str, index: int) -> int | None:
    """Index of the ``)`` closing a group whose body starts at ``index``."""
    depth = 1
    while index < len(text):
        char = text[index]
        if char == "\n":
            return None
        if char == QUOTE:
            literal = _scan_literal(text, index)
            if literal is None:
                return None
            index = literal[0]
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index
        index += 1
    return None


def strip_multiline_comments(text: str, keep_lines: bool = False) -> str:
    """Remove block comments.

    With ``keep_lines`` each comment is replaced by the newlines it spanned,
    so line numbers computed afterwards still match the original file.
    """
    if not keep_lines:
        return BLOCK_COMMENT_RE.sub("", text)
    return BLOCK_COMMENT_RE.sub(lambda m: "\n" * m.group(0).count("\n"), text)


def strip_line_comment(line: str) -> str:
    return LINE_COMMENT_RE.sub("", line)
