"""Count identifier occurrences for declarations and pick out the unused ones.

A declaration's own line is part of the scanned text, so every declaration
starts with one occurrence. Unused means one occurrence or fewer.
"""

from __future__ import annotations

import logging
import re
from collections import Counter, defaultdict
from collections.abc import Iterable

from unusedcode.models import Declaration, SourceFile
from unusedcode.sanitizer import sanitize

logger = logging.getLogger(__name__)

TOKEN_SPLIT_RE = re.compile(r"\W+")
XIB_CLASS_RE = re.compile(r"\b(?:customClass|class)=\"(\w+)\"")
XIB_SELECTOR_RE = re.compile(r"\bselector=\"(\w+):?\"")
XIB_PROPERTY_RE = re.compile(r"\bproperty=\"(\w+)\"")
UNUSED_THRESHOLD = 1


def tokenize(text: str) -> Counter[str]:
    return Counter(token for token in TOKEN_SPLIT_RE.split(text) if token)


def count_source_file(source: SourceFile, declarations: Iterable[Declaration]) -> Counter[Declaration]:
    counts: Counter[Declaration] = Counter()
    if source.content is None:
        logger.warning("Failed to read %s, skipping", source.path)
        return counts
    tokens = tokenize(sanitize(source.content))
    for declaration in declarations:
        if declaration.is_restricted and declaration.file != source.path:
            continue
        counts[declaration] += tokens.get(declaration.name, 0)
    return counts


def count_interface_file(source: SourceFile, declarations: Iterable[Declaration]) -> Counter[Declaration]:
    counts: Counter[Declaration] = Counter()
    if source.content is None:
        logger.warning("Failed to read %s, skipping", source.path)
        return counts
    by_name: dict[str, list[Declaration]] = defaultdict(list)
    for declaration in declarations:
        by_name[declaration.name].append(declaration)

    text = " ".join(source.content.splitlines())
    for name in XIB_CLASS_RE.findall(text):
        for declaration in by_name.get(name, []):
            if not declaration.is_restricted:
                counts[declaration] += 1
    # Outlets and actions may be private as long as they are linked to the interface.
    for pattern in (XIB_SELECTOR_RE, XIB_PROPERTY_RE):
        for name in pattern.findall(text):
            for declaration in by_name.get(name, []):
                if not declaration.is_restricted or declaration.is_interface_linked:
                    counts[declaration] += 1
    return counts


def count_occurrences(
    declarations: list[Declaration],
    source_files: Iterable[SourceFile],
    interface_files: Iterable[SourceFile] = (),
) -> Counter[Declaration]:
    totals: Counter[Declaration] = Counter({declaration: 0 for declaration in declarations})
    for source in source_files:
        totals.update(count_source_file(source, declarations))
    for source in interface_files:
        totals.update(count_interface_file(source, declarations))
    return totals


def is_unused(declaration: Declaration, count: int) -> bool:
    return count <= UNUSED_THRESHOLD and not declaration.is_override


def find_unused(
    declarations: list[Declaration],
    source_files: Iterable[SourceFile],
    interface_files: Iterable[SourceFile] = (),
) -> list[Declaration]:
    totals = count_occurrences(declarations, source_files, interface_files)
    if logger.isEnabledFor(logging.DEBUG):
        for declaration in sorted(set(declarations)):
            logger.debug(
                "%s:%d: %s %s used %d time(s)",
                declaration.file,
                declaration.line_number,
                declaration.kind.value,
                declaration.name,
                totals[declaration],
            )
    return [d for d in declarations if is_unused(d, totals[d])]
