from __future__ import annotations

import json
from pathlib import Path

from unusedcode.models import Report


def exit_status(report: Report, strict: bool = False) -> int:
    if report.unused:
        return 1
    if strict and report.stale_rules:
        return 1
    return 0


def render_text(report: Report) -> str:
    lines: list[str] = []
    if report.unused:
        lines.append(f"Found {len(report.unused)} unused declaration(s):")
        for declaration in report.unused:
            lines.append(
                f"{declaration.file}:{declaration.line_number}: "
                f"{declaration.kind.value} {declaration.name}"
            )
        lines.append("")
        lines.append(
            "If this is a false positive, add a line like "
            '"path/to/File.swift": "name" to your ignore file.'
        )
    else:
        lines.append("No unused declarations found.")
    if report.stale_rules:
        lines.append("")
        for raw_line in report.stale_rules:
            lines.append(f"warning: ignore rule matched nothing: {raw_line}")
    lines.append("")
    return "\n".join(lines)


def render_json(report: Report) -> str:
    payload = {
        "root": report.root,
        "unused": [declaration.as_dict() for declaration in report.unused],
        "stale_rules": list(report.stale_rules),
        "summary": report.summary,
    }
    return json.dumps(payload, indent=2, sort_keys=True) + "\n"


RENDERERS = {
    "text": render_text,
    "json": render_json,
}


def write_report(report: Report, fmt: str, output: Path | None = None) -> str:
    rendered = RENDERERS[fmt](report)
    if output is not None:
        output.write_text(rendered)
    return rendered
