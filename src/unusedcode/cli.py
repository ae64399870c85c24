from __future__ import annotations

import argparse
import logging
from collections.abc import Iterable
from pathlib import Path

from unusedcode import __version__
from unusedcode.report import RENDERERS, exit_status, write_report

LOG_LEVELS = ("debug", "info", "warning", "error")


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="unusedcode",
        description=(
            "Report Swift declarations whose name appears nowhere but on their "
            "own declaration line. Exits 1 when any are found."
        ),
    )
    parser.add_argument("--path", default=".", help="Project directory to scan")
    parser.add_argument(
        "--ignore-file",
        default=None,
        help="Ignore rules file (default: <path>/.unusedignore)",
    )
    parser.add_argument(
        "--format",
        choices=sorted(RENDERERS),
        default="text",
        help="Report format",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Write the report to this file instead of stdout",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="warning",
        help="Diagnostic verbosity",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Also fail when an ignore rule matched nothing",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )
    root = Path(args.path).resolve()
    if not root.exists() or not root.is_dir():
        raise SystemExit(f"Path does not exist or is not a directory: {root}")
    ignore_file = Path(args.ignore_file) if args.ignore_file else None

    from unusedcode.analyzer import analyze

    report = analyze(root, ignore_file=ignore_file)
    output = Path(args.output) if args.output else None
    rendered = write_report(report, args.format, output)
    if output is None:
        print(rendered, end="")
    else:
        print(f"Report written to {output}")
    return exit_status(report, strict=args.strict)


if __name__ == "__main__":
    raise SystemExit(main())
