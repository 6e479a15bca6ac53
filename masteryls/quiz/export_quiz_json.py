#!/usr/bin/env python3
"""Export validated masteryls quizzes to quiz.json plus a separate answer key."""
from __future__ import annotations
import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..lint.corpus import SCOPES, lint_corpus
from ..log_utils import log
from .models import QuizBlock

def parse_args(argv: List[str]):
    p = argparse.ArgumentParser(description='Export masteryls quizzes to quiz JSON and answer key JSON')
    p.add_argument('paths', nargs='+', help='Markdown files or directories to scan')
    p.add_argument('--quiz', default='quiz.json')
    p.add_argument('--answers', default='answer_key.json')
    p.add_argument('--scope', choices=list(SCOPES), default='corpus')
    p.add_argument('--pattern', default='*.md')
    p.add_argument('--exclude', nargs='+', default=[])
    p.add_argument('--strict', action='store_true', help='Refuse to export when any quiz fails validation')
    p.add_argument('--force', action='store_true')
    return p.parse_args(argv)

def build_outputs(blocks: List[QuizBlock]) -> tuple[List[Dict[str, Any]], Dict[str, Dict[str, Any]]]:
    quiz = [b.public_dict() for b in blocks]
    key: Dict[str, Dict[str, Any]] = {}
    for b in blocks:
        if b.id in key:
            raise RuntimeError(f"id '{b.id}' appears in more than one document; export with --scope corpus to catch it")
        key[b.id] = b.answer_dict()
    return quiz, key

def write_outputs(blocks: List[QuizBlock], quiz_path: Path, answers_path: Path) -> None:
    quiz, key = build_outputs(blocks)
    quiz_path.write_text(json.dumps(quiz, indent=2, ensure_ascii=False) + '\n', encoding='utf-8')
    answers_path.write_text(json.dumps(key, indent=2, ensure_ascii=False) + '\n', encoding='utf-8')

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    quiz_path = Path(args.quiz); answers_path = Path(args.answers)
    for out in (quiz_path, answers_path):
        if out.exists() and not args.force:
            log('warn', f'{out} already exists (use --force)')
            return 1
    report = lint_corpus([Path(p) for p in args.paths], id_scope=args.scope,
                         pattern=args.pattern, exclude=args.exclude)
    if report.load_errors:
        log('error', f'{len(report.load_errors)} documents could not be read')
        return 2
    if report.errors:
        log('warn', f'{len(report.errors)} quiz blocks failed validation and are left out')
        if args.strict:
            log('error', 'Export aborted (--strict); run the linter for details')
            return 1
    try:
        write_outputs(report.blocks, quiz_path, answers_path)
    except RuntimeError as e:
        log('error', f'Export failed: {e}')
        return 1
    log('ok', f'Wrote {len(report.blocks)} quizzes -> {quiz_path} and answer key -> {answers_path}')
    return 0

def run() -> None:
    try:
        raise SystemExit(main(sys.argv[1:]))
    except KeyboardInterrupt:
        print('\nInterrupted.', file=sys.stderr)
        raise SystemExit(130)

if __name__ == '__main__':  # pragma: no cover
    run()
