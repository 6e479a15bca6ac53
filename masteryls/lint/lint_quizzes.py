#!/usr/bin/env python3
"""Lint masteryls quiz blocks in markdown files and report every problem found."""
from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from ..log_utils import log
from .corpus import SCOPES, lint_corpus
from .report import format_json, format_text

EXIT_OK = 0
EXIT_PROBLEMS = 1
EXIT_USAGE = 2

def parse_args(argv: List[str]):
    p = argparse.ArgumentParser(description="Lint masteryls quiz blocks in markdown documents")
    p.add_argument("paths", nargs="+", help="Markdown files or directories to scan")
    p.add_argument("--scope", choices=list(SCOPES), default="corpus",
                   help="Where quiz ids must be unique: per file or across all inputs (default: corpus)")
    p.add_argument("--pattern", default="*.md", help="Glob used inside directories (default: *.md)")
    p.add_argument("--exclude", nargs="+", default=[], help="Glob(s) of paths to skip")
    p.add_argument("--format", dest="fmt", choices=["text", "json"], default="text")
    p.add_argument("--out", help="Write the report here instead of stdout")
    p.add_argument("--force", action="store_true", help="Overwrite --out if it exists")
    p.add_argument("--verbose", action="store_true", help="Also list valid quizzes (text format)")
    return p.parse_args(argv)

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    out_path = Path(args.out) if args.out else None
    if out_path and out_path.exists() and not args.force:
        log('warn', f"output file {out_path} exists (use --force)")
        return EXIT_USAGE
    report = lint_corpus([Path(p) for p in args.paths], id_scope=args.scope,
                         pattern=args.pattern, exclude=args.exclude)
    text = format_json(report) if args.fmt == "json" else format_text(report, verbose=args.verbose)
    if out_path:
        out_path.write_text(text + "\n", encoding="utf-8")
        log('ok', f"Wrote lint report -> {out_path}")
    else:
        print(text)
    if report.load_errors:
        return EXIT_USAGE
    return EXIT_OK if report.ok else EXIT_PROBLEMS

def run() -> None:
    try:
        raise SystemExit(main(sys.argv[1:]))
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        raise SystemExit(130)

if __name__ == "__main__":  # pragma: no cover
    run()
