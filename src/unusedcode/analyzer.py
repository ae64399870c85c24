from __future__ import annotations

import fnmatch
import logging
import os
from pathlib import Path
from typing import Iterable

from unusedcode.extractor import extract_declarations
from unusedcode.ignore_rules import IgnoreRuleSet, parse_ignore_rules
from unusedcode.models import Report, SourceFile
from unusedcode.usage import find_unused

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = {".swift"}
INTERFACE_EXTENSIONS = {".xib", ".nib", ".storyboard"}
DEFAULT_IGNORE_FILE = ".unusedignore"
DEFAULT_EXCLUDES = [
    ".git",
    ".build",
    ".swiftpm",
    "Pods",
    "Carthage",
    "DerivedData",
]


def analyze(root: Path, ignore_file: Path | None = None) -> Report:
    root = root.resolve()
    if ignore_file is None:
        ignore_file = root / DEFAULT_IGNORE_FILE
    rules = load_ignore_rules(ignore_file)

    source_paths = _collect_files(root, SOURCE_EXTENSIONS)
    interface_paths = _collect_files(root, INTERFACE_EXTENSIONS)
    logger.debug(
        "Found %d source and %d interface files under %s",
        len(source_paths),
        len(interface_paths),
        root,
    )
    source_files = [_read(root, path) for path in source_paths]
    interface_files = [_read(root, path) for path in interface_paths]

    extraction = extract_declarations(source_files, rules)
    unused = sorted(find_unused(extraction.declarations, source_files, interface_files))
    stale = rules.stale(extraction.matched_rules)
    for rule in stale:
        logger.debug("Ignore rule matched nothing: %s", rule.raw_line)

    summary = {
        "source_files": len(source_files),
        "interface_files": len(interface_files),
        "declarations": len(extraction.declarations),
        "unused": len(unused),
        "ignore_rules": len(rules),
        "stale_rules": len(stale),
    }
    return Report(
        root=str(root),
        declarations=sorted(extraction.declarations),
        unused=unused,
        stale_rules=[rule.raw_line for rule in stale],
        summary=summary,
    )


def load_ignore_rules(path: Path) -> IgnoreRuleSet:
    if not path.exists():
        logger.debug("No ignore file at %s", path)
        return IgnoreRuleSet()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to read ignore file %s: %s", path, exc)
        return IgnoreRuleSet()
    return parse_ignore_rules(text)


def _collect_files(root: Path, extensions: set[str]) -> list[Path]:
    results: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [name for name in dirnames if not _matches(name, DEFAULT_EXCLUDES)]
        for name in filenames:
            full_path = Path(dirpath) / name
            if full_path.suffix in extensions:
                results.append(full_path)
    results.sort(key=lambda p: p.as_posix())
    return results


def _matches(name: str, patterns: Iterable[str]) -> bool:
    return any(fnmatch.fnmatch(name, pattern) for pattern in patterns)


def _read(root: Path, path: Path) -> SourceFile:
    rel_path = path.relative_to(root).as_posix()
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to read %s: %s", rel_path, exc)
        content = None
    return SourceFile(path=rel_path, content=content)
