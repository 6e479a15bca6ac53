from __future__ import annotations
import json
from typing import Any, Dict, List

from .corpus import CorpusReport


def format_text(report: CorpusReport, *, verbose: bool = False) -> str:
    """One line per problem (path:line: [Kind] message), then a summary line."""
    lines: List[str] = []
    for e in report.load_errors:
        lines.append(f"{e.path}: [LoadError] {e.reason}")
    for doc in report.documents:
        for err in doc.errors:
            lines.append(f"{err.location()}: [{err.kind.value}] {err.message}")
        if verbose:
            for b in doc.blocks:
                lines.append(f"{b.source or '<text>'}:{b.line}: ok {b.id} ({b.type_name}, {len(b.options)} options)")
    n_blocks = len(report.blocks)
    n_errors = len(report.errors)
    n_docs = len(report.documents)
    if report.ok:
        lines.append(f"✅ {n_blocks} quizzes in {n_docs} documents, no problems")
    else:
        counts = ', '.join(f"{k}={v}" for k, v in report.summary().items())
        tail = f" ({counts})" if counts else ''
        load = f", {len(report.load_errors)} unreadable" if report.load_errors else ''
        lines.append(f"❌ {n_errors} problems in {n_docs} documents{load}{tail}; {n_blocks} quizzes valid")
    return '\n'.join(lines)


def report_dict(report: CorpusReport) -> Dict[str, Any]:
    return {
        "scope": report.scope,
        "ok": report.ok,
        "documents": len(report.documents),
        "blocks": [b.to_dict() for b in report.blocks],
        "errors": [e.to_dict() for e in report.errors],
        "load_errors": [{"path": str(e.path), "reason": e.reason} for e in report.load_errors],
        "summary": report.summary(),
    }


def format_json(report: CorpusReport) -> str:
    return json.dumps(report_dict(report), indent=2, ensure_ascii=False)
