from __future__ import annotations
from .models import ErrorKind, IdScope, Option, QuizBlock, QuizBlockError, QuizType, RawBlock, ValidationError
from .scan import DocumentScan, scan
from .validate import check_block, parse_block, validate

__all__ = [
    'DocumentScan', 'ErrorKind', 'IdScope', 'Option', 'QuizBlock', 'QuizBlockError',
    'QuizType', 'RawBlock', 'ValidationError', 'check_block', 'parse_block', 'scan', 'validate',
]
