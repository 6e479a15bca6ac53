"""Turn raw masteryls blocks into QuizBlock records and lint them."""
from __future__ import annotations
import json
import re
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .models import (
    REQUIRED_FIELDS, ErrorKind, IdScope, Option, QuizBlock, QuizBlockError,
    QuizType, RawBlock, ValidationError,
)

OPTION_RE = re.compile(r'^\s*-\s+\[(?P<mark>[xX ])\]\s+(?P<text>\S.*?)\s*$')

# =========================
# Parsing
# =========================

def _error(raw: RawBlock, kind: ErrorKind, message: str, *, line: Optional[int] = None, **kw: Any) -> QuizBlockError:
    return QuizBlockError(ValidationError(
        kind=kind,
        message=message,
        source=raw.source,
        line=raw.line if line is None else line,
        index=raw.index,
        **kw,
    ))

def parse_header(raw: RawBlock) -> Dict[str, Any]:
    try:
        data = json.loads(raw.header_text)
    except ValueError as e:
        raise _error(raw, ErrorKind.MALFORMED_HEADER, f"header is not valid JSON: {e}")
    if not isinstance(data, dict):
        raise _error(raw, ErrorKind.MALFORMED_HEADER, f"header must be a JSON object, got {type(data).__name__}")
    for key in REQUIRED_FIELDS:
        if key not in data:
            raise _error(raw, ErrorKind.MISSING_FIELD, f"missing required field '{key}'", field=key)
    for key in REQUIRED_FIELDS:
        if not isinstance(data[key], str):
            raise _error(raw, ErrorKind.MALFORMED_HEADER,
                         f"field '{key}' must be a string, got {type(data[key]).__name__}", field=key)
    return data

def parse_option(raw: RawBlock, line_no: int, text: str) -> Option:
    m = OPTION_RE.match(text)
    if not m:
        raise _error(raw, ErrorKind.MALFORMED_OPTION, f"malformed option line: {text.strip()!r}",
                     line=line_no, text=text)
    return Option(checked=m.group('mark').lower() == 'x', text=m.group('text'))

def parse_block(raw: RawBlock) -> QuizBlock:
    if raw.truncated:
        raise _error(raw, ErrorKind.TRUNCATED_BLOCK, "masteryls fence opened but never closed")
    data = parse_header(raw)
    try:
        options = tuple(parse_option(raw, line_no, text) for line_no, text in raw.option_lines)
    except QuizBlockError as e:
        # header parsed, so the id is known and still has to be claimed
        quiz_id = data['id'] if data['id'].strip() else None
        raise QuizBlockError(replace(e.error, block_id=quiz_id), block_id=quiz_id)
    extra = tuple((k, v) for k, v in data.items() if k not in REQUIRED_FIELDS)
    return QuizBlock(
        id=data['id'],
        title=data['title'],
        type=QuizType.from_tag(data['type']),
        body=data['body'],
        options=options,
        type_name=data['type'],
        source=raw.source,
        line=raw.line,
        index=raw.index,
        extra=extra,
    )

# =========================
# Checks
# =========================

def claim_id(seen_ids: IdScope, quiz_id: str, source: Optional[str], line: int, index: int) -> Optional[ValidationError]:
    """Claim quiz_id in the scope; a DuplicateId error if someone got there first."""
    prev = seen_ids.claim(quiz_id, source, line)
    if prev is None:
        return None
    prev_source, prev_line = prev
    return ValidationError(
        kind=ErrorKind.DUPLICATE_ID,
        message=f"duplicate id '{quiz_id}' (first seen at {prev_source or '<text>'}:{prev_line})",
        source=source,
        line=line,
        index=index,
        block_id=quiz_id,
    )

def check_block(block: QuizBlock, seen_ids: IdScope) -> List[ValidationError]:
    errors: List[ValidationError] = []
    has_id = bool(block.id.strip())

    def add(kind: ErrorKind, message: str, **kw: Any) -> None:
        errors.append(ValidationError(kind=kind, message=message, source=block.source,
                                      line=block.line, index=block.index,
                                      block_id=block.id if has_id else None, **kw))

    if has_id:
        dup = claim_id(seen_ids, block.id, block.source, block.line, block.index)
        if dup is not None:
            errors.append(dup)
    else:
        add(ErrorKind.EMPTY_FIELD, "field 'id' is blank", field='id')
    for name in ('title', 'body'):
        if not getattr(block, name).strip():
            add(ErrorKind.EMPTY_FIELD, f"field '{name}' is blank", field=name)
    if block.type is QuizType.MULTIPLE_CHOICE and not block.correct_options:
        add(ErrorKind.NO_CORRECT_ANSWER,
            f"multiple-choice quiz '{block.id}' has no option marked [x] ({len(block.options)} options)")
    return errors

def validate(raw_blocks: Iterable[RawBlock], seen_ids: Optional[IdScope] = None) -> Tuple[List[QuizBlock], List[ValidationError]]:
    """
    Parse and check every raw block, collecting problems instead of stopping.
    seen_ids is shared by reference so several documents can use one scope.
    """
    if seen_ids is None:
        seen_ids = IdScope()
    blocks: List[QuizBlock] = []
    errors: List[ValidationError] = []
    for raw in raw_blocks:
        try:
            block = parse_block(raw)
        except QuizBlockError as e:
            errors.append(e.error)
            if e.block_id is not None:
                dup = claim_id(seen_ids, e.block_id, raw.source, raw.line, raw.index)
                if dup is not None:
                    errors.append(dup)
            continue
        problems = check_block(block, seen_ids)
        if problems:
            errors.extend(problems)
        else:
            blocks.append(block)
    return blocks, errors
