from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from ..log_utils import log
from ..quiz.models import IdScope, QuizBlock, ValidationError
from ..quiz.scan import scan
from ..quiz.validate import validate
from .loader import DocumentLoadError, discover, read_document

SCOPES = ('file', 'corpus')


@dataclass
class DocumentReport:
    path: Optional[str]
    blocks: List[QuizBlock] = field(default_factory=list)
    errors: List[ValidationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class CorpusReport:
    scope: str = 'corpus'
    documents: List[DocumentReport] = field(default_factory=list)
    load_errors: List[DocumentLoadError] = field(default_factory=list)

    @property
    def blocks(self) -> List[QuizBlock]:
        return [b for d in self.documents for b in d.blocks]

    @property
    def errors(self) -> List[ValidationError]:
        return [e for d in self.documents for e in d.errors]

    @property
    def ok(self) -> bool:
        return not self.load_errors and all(d.ok for d in self.documents)

    def summary(self) -> Dict[str, int]:
        counts = Counter(e.kind.value for e in self.errors)
        return dict(sorted(counts.items()))


def lint_text(text: str, source: Optional[str] = None, seen_ids: Optional[IdScope] = None) -> DocumentReport:
    blocks, errors = validate(scan(text, source), seen_ids)
    return DocumentReport(path=source, blocks=blocks, errors=errors)


def lint_corpus(paths: Iterable[Path], id_scope: str = 'corpus', pattern: str = '*.md',
                exclude: Sequence[str] = ()) -> CorpusReport:
    """
    Lint every document under `paths`. One bad file never stops the run: load
    failures land in `load_errors`, quiz problems in each document's errors.
    """
    if id_scope not in SCOPES:
        raise ValueError(f"id scope must be one of {', '.join(SCOPES)}, got {id_scope!r}")
    report = CorpusReport(scope=id_scope)
    files: List[Path] = []
    seen_files: set[Path] = set()
    for p in paths:
        try:
            found = discover([p], pattern, exclude)
        except DocumentLoadError as e:
            log('error', str(e))
            report.load_errors.append(e)
            continue
        for f in found:
            if f.resolve() not in seen_files:
                seen_files.add(f.resolve())
                files.append(f)
    # sorted path order decides which copy of a shared id is the duplicate
    files.sort()
    log('info', f"Linting {len(files)} documents (id scope: {id_scope})")
    shared = IdScope(name='corpus')
    for path in files:
        try:
            text = read_document(path)
        except DocumentLoadError as e:
            log('error', str(e))
            report.load_errors.append(e)
            continue
        seen = shared if id_scope == 'corpus' else IdScope(name=str(path))
        doc = lint_text(text, str(path), seen)
        log('debug', f"{path}: {len(doc.blocks)} valid blocks, {len(doc.errors)} errors")
        report.documents.append(doc)
    return report
