#!/usr/bin/env python3
"""Print the pattern report for one or more SPLICE files.

With ``--expect`` the rendered report is compared against a golden text
file and a unified diff is shown on mismatch.
"""

from __future__ import annotations

import argparse
import difflib
import glob
import json
from pathlib import Path
import sys
from typing import Iterable, List

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from splice.decoder import decode  # noqa: E402
from splice.errors import FormatError  # noqa: E402
from splice.logging_setup import configure_logging  # noqa: E402
from splice.render import render  # noqa: E402


def collect_paths(patterns: Iterable[str]) -> List[Path]:
    paths: List[Path] = []
    for pattern in patterns:
        matches = sorted(Path(p) for p in glob.glob(pattern, recursive=True))
        if matches:
            paths.extend(matches)
        else:
            # Literal path; missing files are reported when read.
            paths.append(Path(pattern))
    seen: set[Path] = set()
    unique_paths: List[Path] = []
    for path in paths:
        resolved = path.resolve()
        if resolved not in seen:
            seen.add(resolved)
            unique_paths.append(path)
    return unique_paths


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Decode SPLICE drum pattern files and print the text report.",
    )
    parser.add_argument(
        "paths",
        nargs="+",
        help="File paths or glob patterns (quotes recommended for wildcards).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit the decoded structure as JSON instead of the text report",
    )
    parser.add_argument(
        "--expect",
        type=Path,
        default=None,
        help="Golden report to compare against (single input only)",
    )
    return parser


def _check_expected(path: Path, report: str, expect_path: Path) -> bool:
    try:
        expected = expect_path.read_text(encoding="utf-8")
    except OSError as err:
        print(f"{expect_path}: ERR {err}", file=sys.stderr)
        return False
    if report == expected:
        print(f"expect match: yes  file={expect_path}")
        return True
    print("expect match: no")
    diff = difflib.unified_diff(
        expected.splitlines(keepends=True),
        report.splitlines(keepends=True),
        fromfile=str(expect_path),
        tofile=str(path),
    )
    sys.stdout.writelines(diff)
    return False


def main(argv: list[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    configure_logging()

    targets = collect_paths(args.paths)
    if args.expect is not None and len(targets) != 1:
        parser.error("--expect requires exactly one input file")
    if args.expect is not None and args.json:
        parser.error("--json cannot be combined with --expect")

    status = 0
    for path in targets:
        try:
            splice_file = decode(path.read_bytes())
        except (OSError, FormatError) as err:
            print(f"{path}: ERR {err}", file=sys.stderr)
            status = 1
            continue

        if args.expect is not None:
            if not _check_expected(path, render(splice_file), args.expect):
                status = 1
            continue

        if len(targets) > 1:
            print(f"File: {path}")
        if args.json:
            print(json.dumps(splice_file.to_dict(), indent=2))
        else:
            sys.stdout.write(render(splice_file))

    return status


if __name__ == "__main__":
    raise SystemExit(main())
