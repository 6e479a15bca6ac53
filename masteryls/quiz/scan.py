"""
Locate masteryls quiz blocks inside a markdown document.

A quiz block is a fenced code region whose info string is exactly
``masteryls``.  The fence holds one JSON object (the header) and may go on
with checkbox option lines; option lines that directly follow the closing
fence belong to the block too:

    ```masteryls
    {"id":"Q1","title":"T","type":"multiple-choice","body":"B"}
    - [ ] A
    - [x] B
    ```

Every other fenced region is skipped whole, so quiz-looking text inside a
``javascript`` or ``mermaid`` fence is never picked up.  Fence rules follow
CommonMark: up to three spaces of indentation, three or more backticks or
tildes, closed by a bare fence of the same character that is at least as
long as the opener.
"""

from __future__ import annotations
import re
from typing import Iterator, List, Optional, Sequence, Tuple

from .models import OptionLine, RawBlock

QUIZ_INFO = 'masteryls'

FENCE_OPEN_RE = re.compile(r'^(?P<indent> {0,3})(?P<fence>`{3,}|~{3,})(?P<info>.*)$')
FENCE_CLOSE_RE = re.compile(r'^ {0,3}(?P<fence>`{3,}|~{3,})\s*$')
# Loose on purpose: "- [y] foo" is still an attempted option and gets reported
OPTION_LIKE_RE = re.compile(r'^\s*[-*+]\s+\[[^\]]?\]')
# Real line endings only: str.splitlines also breaks on U+2028 and others,
# which JSON allows unescaped inside strings
LINE_END_RE = re.compile(r'\r\n|\r|\n')


def is_option_like(line: str) -> bool:
    return OPTION_LIKE_RE.match(line) is not None


def _open_fence(line: str) -> Optional[Tuple[str, str]]:
    m = FENCE_OPEN_RE.match(line)
    if not m:
        return None
    fence, info = m.group('fence'), m.group('info').strip()
    # ```foo``` on one line is inline code, not a fence
    if fence[0] == '`' and '`' in info:
        return None
    return fence, info


def _find_close(lines: Sequence[str], start: int, fence: str) -> Optional[int]:
    for j in range(start, len(lines)):
        m = FENCE_CLOSE_RE.match(lines[j])
        if m:
            closing = m.group('fence')
            if closing[0] == fence[0] and len(closing) >= len(fence):
                return j
    return None


def _split_inner(inner: Sequence[str], first_line_no: int) -> Tuple[str, List[OptionLine]]:
    """Split fence content into header text and option lines."""
    header: List[str] = []
    options: List[OptionLine] = []
    for offset, text in enumerate(inner):
        if options or is_option_like(text):
            if text.strip():
                options.append((first_line_no + offset, text))
        else:
            header.append(text)
    return '\n'.join(header).strip(), options


def split_lines(text: str) -> List[str]:
    lines = LINE_END_RE.split(text)
    if lines and lines[-1] == '':
        lines.pop()
    return lines


def iter_blocks(text: str, source: Optional[str] = None) -> Iterator[RawBlock]:
    lines = split_lines(text)
    n = len(lines)
    i = 0
    index = 0
    while i < n:
        opened = _open_fence(lines[i])
        if opened is None:
            i += 1
            continue
        fence, info = opened
        close = _find_close(lines, i + 1, fence)
        if info != QUIZ_INFO:
            # An unclosed foreign fence runs to the end of the document
            i = close + 1 if close is not None else n
            continue
        if close is None:
            yield RawBlock(
                index=index,
                line=i + 1,
                end_line=n,
                header_text='\n'.join(lines[i + 1:]).strip(),
                truncated=True,
                source=source,
            )
            index += 1
            i += 1
            continue
        header, options = _split_inner(lines[i + 1:close], i + 2)
        j = close + 1
        while j < n and is_option_like(lines[j]):
            options.append((j + 1, lines[j]))
            j += 1
        yield RawBlock(
            index=index,
            line=i + 1,
            end_line=close + 1,
            header_text=header,
            option_lines=tuple(options),
            source=source,
        )
        index += 1
        i = j


class DocumentScan:
    """Restartable view over the quiz blocks of one document."""

    def __init__(self, text: str, source: Optional[str] = None):
        self.text = text
        self.source = source

    def __iter__(self) -> Iterator[RawBlock]:
        return iter_blocks(self.text, self.source)

    def blocks(self) -> List[RawBlock]:
        return list(self)


def scan(text: str, source: Optional[str] = None) -> DocumentScan:
    return DocumentScan(text, source)
