from __future__ import annotations
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable, List, Sequence


class DocumentLoadError(RuntimeError):
    def __init__(self, path: Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


def _excluded(path: Path, exclude: Sequence[str]) -> bool:
    s = path.as_posix()
    return any(fnmatch(s, pat) or fnmatch(path.name, pat) for pat in exclude)


def discover(paths: Iterable[Path], pattern: str = '*.md', exclude: Sequence[str] = ()) -> List[Path]:
    """
    Expand files and directories into a sorted, de-duplicated list of documents.
    Directories are searched recursively for `pattern`; files are taken as given.
    A path that does not exist raises DocumentLoadError.
    """
    found: List[Path] = []
    seen: set[Path] = set()
    for p in paths:
        p = Path(p)
        if p.is_dir():
            candidates = sorted(c for c in p.rglob(pattern) if c.is_file())
        elif p.is_file():
            candidates = [p]
        else:
            raise DocumentLoadError(p, 'no such file or directory')
        for c in candidates:
            key = c.resolve()
            if key in seen or _excluded(c, exclude):
                continue
            seen.add(key)
            found.append(c)
    return found


def read_document(path: Path) -> str:
    try:
        return Path(path).read_text(encoding='utf-8-sig')
    except UnicodeDecodeError as e:
        raise DocumentLoadError(Path(path), f'not valid UTF-8 ({e.reason} at byte {e.start})')
    except OSError as e:
        raise DocumentLoadError(Path(path), e.strerror or str(e))
