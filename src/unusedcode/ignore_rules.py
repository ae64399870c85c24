"""Ignore file parsing and matching.

An ignore file holds one rule per line::

    # whole-line comment
    "Sources/Generated.swift"          # ignore a file (exact text)
    .*Tests\\.swift                     # ignore files by regex
    "Sources/App.swift": "legacyHelper" # ignore one declaration
    Sources/.*: ^test                   # ignore declarations by regex

Quoted patterns match as plain text, unquoted ones as regular expressions.
Both kinds match anywhere in the subject (file path or declaration name).

Matching never mutates a rule. Callers collect the indices of rules that
matched and ask the rule set which ones never did.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Union

from unusedcode.models import Declaration

logger = logging.getLogger(__name__)

RULE_SEPARATOR = ": "
COMMENT_MARKER = "#"


class IgnoreRuleError(ValueError):
    pass


@dataclass(frozen=True)
class LiteralPattern:
    text: str

    @property
    def source(self) -> str:
        return f'"{self.text}"'

    def matches(self, subject: str) -> bool:
        return self.text in subject


@dataclass(frozen=True)
class RegexPattern:
    source: str
    compiled: re.Pattern[str]

    def matches(self, subject: str) -> bool:
        return self.compiled.search(subject) is not None


Pattern = Union[LiteralPattern, RegexPattern]


def strip_comment(line: str) -> str:
    """Cut a `#` comment that starts the line or follows whitespace, outside quotes."""
    in_quotes = False
    for index, char in enumerate(line):
        if char == '"':
            in_quotes = not in_quotes
        elif char == COMMENT_MARKER and not in_quotes and (index == 0 or line[index - 1].isspace()):
            return line[:index]
    return line


def compile_pattern(raw: str) -> Pattern:
    if len(raw) >= 2 and raw.startswith('"') and raw.endswith('"'):
        return LiteralPattern(raw[1:-1])
    try:
        return RegexPattern(raw, re.compile(raw))
    except re.error as exc:
        raise IgnoreRuleError(f"Invalid pattern {raw!r}: {exc}") from exc


@dataclass(frozen=True, eq=False)
class IgnoreRule:
    raw_line: str
    file_pattern: Pattern
    declaration_pattern: Pattern | None = None

    @classmethod
    def parse(cls, line: str) -> IgnoreRule | None:
        """Build a rule from one ignore file line, or None for blank/comment lines."""
        cleaned = strip_comment(line).strip()
        if not cleaned:
            return None
        file_part, sep, declaration_part = cleaned.partition(RULE_SEPARATOR)
        file_pattern = compile_pattern(file_part.strip())
        declaration_pattern = None
        if sep:
            declaration_pattern = compile_pattern(declaration_part.strip())
        return cls(cleaned, file_pattern, declaration_pattern)

    @property
    def filters_declarations(self) -> bool:
        return self.declaration_pattern is not None

    def matches_file(self, file_path: str) -> bool:
        return self.file_pattern.matches(file_path)

    def matches_declaration(self, declaration: Declaration) -> bool:
        if self.declaration_pattern is None:
            return False
        return self.declaration_pattern.matches(declaration.name)

    def _key(self) -> tuple[str, str | None]:
        declaration = self.declaration_pattern.source if self.declaration_pattern else None
        return (self.file_pattern.source, declaration)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IgnoreRule):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())


class IgnoreRuleSet:
    def __init__(self, rules: Iterable[IgnoreRule] = ()) -> None:
        self.rules = list(rules)

    def __iter__(self) -> Iterator[IgnoreRule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def match_file(self, file_path: str) -> int | None:
        """Index of the first file-only rule matching ``file_path``."""
        for index, rule in enumerate(self.rules):
            if not rule.filters_declarations and rule.matches_file(file_path):
                return index
        return None

    def match_declaration(self, declaration: Declaration) -> int | None:
        """Index of the first declaration rule matching ``declaration`` in its file."""
        for index, rule in enumerate(self.rules):
            if rule.matches_declaration(declaration) and rule.matches_file(declaration.file):
                return index
        return None

    def stale(self, matched: set[int]) -> list[IgnoreRule]:
        return [rule for index, rule in enumerate(self.rules) if index not in matched]


def parse_ignore_rules(text: str) -> IgnoreRuleSet:
    rules: list[IgnoreRule] = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        try:
            rule = IgnoreRule.parse(line)
        except IgnoreRuleError as exc:
            logger.warning("Skipping ignore rule on line %d (%r): %s", line_number, line, exc)
            continue
        if rule is None:
            continue
        logger.debug("Loaded ignore rule: %s", rule.raw_line)
        rules.append(rule)
    return IgnoreRuleSet(rules)
