from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from unusedcode.ignore_rules import IgnoreRuleSet
from unusedcode.models import Declaration, DeclarationKind, Modifiers, SourceFile
from unusedcode.sanitizer import strip_line_comment, strip_multiline_comments

logger = logging.getLogger(__name__)

KINDS = "|".join(kind.value for kind in DeclarationKind)
DECLARATION_RE = re.compile(
    rf"\b(?P<kind>{KINDS})\s+(?P<name>(?!(?:{KINDS})\b)\w+)"
)


@dataclass
class Extraction:
    declarations: list[Declaration] = field(default_factory=list)
    matched_rules: set[int] = field(default_factory=set)

    def merge(self, other: Extraction) -> None:
        self.declarations.extend(other.declarations)
        self.matched_rules |= other.matched_rules


def extract_declarations(
    files: Iterable[SourceFile],
    rules: IgnoreRuleSet | None = None,
) -> Extraction:
    rules = rules if rules is not None else IgnoreRuleSet()
    result = Extraction()
    for source in files:
        result.merge(extract_file(source, rules))
    return result


def extract_file(source: SourceFile, rules: IgnoreRuleSet) -> Extraction:
    result = Extraction()
    file_rule = rules.match_file(source.path)
    if file_rule is not None:
        logger.debug(
            "Skipping %s due to ignore rule: %s", source.path, rules.rules[file_rule].raw_line
        )
        result.matched_rules.add(file_rule)
        return result
    if source.content is None:
        logger.warning("No content for %s, no declarations extracted", source.path)
        return result

    content = strip_multiline_comments(source.content, keep_lines=True)
    for line_number, line in enumerate(content.split("\n"), start=1):
        declaration = parse_line(source.path, line, line_number)
        if declaration is None:
            continue
        rule_index = rules.match_declaration(declaration)
        if rule_index is not None:
            logger.debug(
                "Skipping %s %s in %s due to ignore rule: %s",
                declaration.kind.value,
                declaration.name,
                source.path,
                rules.rules[rule_index].raw_line,
            )
            result.matched_rules.add(rule_index)
            continue
        logger.debug(
            "Found %s %s at %s:%d",
            declaration.kind.value,
            declaration.name,
            source.path,
            line_number,
        )
        result.declarations.append(declaration)
    return result


def parse_line(path: str, line: str, line_number: int) -> Declaration | None:
    """Return the first declaration on ``line``, if any."""
    code = strip_line_comment(line)
    if not code.strip():
        return None
    match = DECLARATION_RE.search(code)
    if match is None:
        return None
    # Comment stripping only trims the tail, so offsets into ``code`` hold for ``line``.
    modifiers = Modifiers.from_tokens(line[: match.start()].split())
    return Declaration(
        file=path,
        raw_line=line,
        line_number=line_number,
        kind=DeclarationKind(match.group("kind")),
        name=match.group("name"),
        modifiers=modifiers,
    )
