from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

# (line number, raw line text)
OptionLine = Tuple[int, str]

REQUIRED_FIELDS = ('id', 'title', 'type', 'body')

# =========================
# Quiz records
# =========================

class QuizType(str, Enum):
    MULTIPLE_CHOICE = 'multiple-choice'
    ESSAY = 'essay'
    OTHER = 'other'

    @classmethod
    def from_tag(cls, tag: str) -> 'QuizType':
        # exact match only: "Multiple-Choice" is some other type
        try:
            return cls(tag)
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class Option:
    checked: bool
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"checked": self.checked, "text": self.text}


@dataclass(frozen=True)
class QuizBlock:
    id: str
    title: str
    type: QuizType
    body: str
    options: Tuple[Option, ...] = ()
    type_name: str = ''
    source: Optional[str] = None
    line: int = 0
    index: int = 0
    extra: Tuple[Tuple[str, Any], ...] = ()

    @property
    def correct_options(self) -> List[Option]:
        return [o for o in self.options if o.checked]

    def public_dict(self) -> Dict[str, Any]:
        """Question as shown to a learner: no answer marks."""
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type_name or self.type.value,
            "body": self.body,
            "options": [o.text for o in self.options],
            "source": self.source,
            "line": self.line,
        }

    def answer_dict(self) -> Dict[str, Any]:
        return {
            "correct": [i for i, o in enumerate(self.options) if o.checked],
            "answers": [o.text for o in self.options if o.checked],
        }

    def to_dict(self) -> Dict[str, Any]:
        d = self.public_dict()
        d["options"] = [o.to_dict() for o in self.options]
        d["index"] = self.index
        if self.extra:
            d["extra"] = dict(self.extra)
        return d


@dataclass(frozen=True)
class RawBlock:
    """One masteryls fence as found by the scanner, before any parsing."""
    index: int
    line: int
    end_line: int
    header_text: str
    option_lines: Tuple[OptionLine, ...] = ()
    truncated: bool = False
    source: Optional[str] = None

# =========================
# Errors
# =========================

class ErrorKind(str, Enum):
    TRUNCATED_BLOCK = 'TruncatedBlock'
    MALFORMED_HEADER = 'MalformedHeader'
    MISSING_FIELD = 'MissingField'
    MALFORMED_OPTION = 'MalformedOption'
    DUPLICATE_ID = 'DuplicateId'
    NO_CORRECT_ANSWER = 'NoCorrectAnswer'
    EMPTY_FIELD = 'EmptyField'


@dataclass(frozen=True)
class ValidationError:
    kind: ErrorKind
    message: str
    source: Optional[str] = None
    line: int = 0
    index: int = 0
    block_id: Optional[str] = None
    field: Optional[str] = None
    text: Optional[str] = None

    def location(self) -> str:
        where = self.source or '<text>'
        return f"{where}:{self.line}" if self.line else where

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "kind": self.kind.value,
            "message": self.message,
            "source": self.source,
            "line": self.line,
            "index": self.index,
        }
        for k in ('block_id', 'field', 'text'):
            v = getattr(self, k)
            if v is not None:
                d[k] = v
        return d


class QuizBlockError(Exception):
    """Raised while parsing one raw block; carries the error record."""

    def __init__(self, error: ValidationError, block_id: Optional[str] = None):
        super().__init__(error.message)
        self.error = error
        # set once the header parsed, even though the block as a whole failed
        self.block_id = block_id

# =========================
# Id scope
# =========================

@dataclass
class IdScope:
    """Ids claimed so far, with where each was first seen."""
    name: str = 'corpus'
    _first_seen: Dict[str, Tuple[Optional[str], int]] = field(default_factory=dict)

    def __contains__(self, quiz_id: object) -> bool:
        return quiz_id in self._first_seen

    def __len__(self) -> int:
        return len(self._first_seen)

    def claim(self, quiz_id: str, source: Optional[str], line: int) -> Optional[Tuple[Optional[str], int]]:
        """Record quiz_id; return the earlier (source, line) if it was already taken."""
        prev = self._first_seen.get(quiz_id)
        if prev is None:
            self._first_seen[quiz_id] = (source, line)
        return prev
