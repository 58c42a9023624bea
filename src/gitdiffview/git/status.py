"""Short-format status parser — classifies files with unstaged changes.

Each line is ``XY <path>`` where X is the index column and Y the worktree
column. Only entries with a worktree change, or untracked entries, are kept.
Rename/copy notation ``old -> new`` collapses to the new path.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from gitdiffview.git.models import ChangeEntry, ChangeKind, StatusCode, StatusLine

_RENAME_SEP = " -> "
_OCTAL_RE = re.compile(r"\\([0-7]{3})")
_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    '"': '"',
    "\\": "\\",
}


def unquote_path(path: str) -> str:
    """Undo git's C-style quoting of unusual file names.

    ``"caf\\303\\251.txt"`` → ``café.txt``. Unquoted paths pass through.
    """
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path
    body = path[1:-1]
    out = bytearray()
    idx = 0
    while idx < len(body):
        ch = body[idx]
        if ch != "\\" or idx + 1 >= len(body):
            out.extend(ch.encode("utf-8"))
            idx += 1
            continue
        m = _OCTAL_RE.match(body, idx)
        if m:
            out.append(int(m.group(1), 8) & 0xFF)
            idx = m.end()
            continue
        nxt = body[idx + 1]
        out.extend(_ESCAPES.get(nxt, "\\" + nxt).encode("utf-8"))
        idx += 2
    return out.decode("utf-8", errors="replace")


def parse_status_line(line: str) -> Optional[StatusLine]:
    """Parse one status line. Returns None for blank or malformed lines."""
    if not line.strip() or len(line) < 4:
        return None
    try:
        staged = StatusCode.parse(line[0])
        worktree = StatusCode.parse(line[1])
    except ValueError:
        return None

    path = line[3:].strip()
    original: Optional[str] = None
    if _RENAME_SEP in path:
        old, _, new = path.rpartition(_RENAME_SEP)
        if new.strip():
            original, path = unquote_path(old.strip()), new.strip()
    return StatusLine(staged=staged, worktree=worktree, path=unquote_path(path), original_path=original)


def _kind_of(status: StatusLine) -> ChangeKind:
    if status.staged == StatusCode.UNTRACKED and status.worktree == StatusCode.UNTRACKED:
        return ChangeKind.NEW
    if status.worktree == StatusCode.DELETED:
        return ChangeKind.DELETED
    return ChangeKind.MODIFIED


def is_unstaged(status: StatusLine) -> bool:
    return status.worktree != StatusCode.UNMODIFIED or status.staged == StatusCode.UNTRACKED


def classify(status_lines: Iterable[str]) -> List[ChangeEntry]:
    """Return one ChangeEntry per path with unstaged changes, in status order."""
    entries: List[ChangeEntry] = []
    seen: set[str] = set()
    for line in status_lines:
        status = parse_status_line(line)
        if status is None or not is_unstaged(status):
            continue
        if status.path in seen:
            continue
        seen.add(status.path)
        entries.append(
            ChangeEntry(path=status.path, kind=_kind_of(status), original_path=status.original_path)
        )
    return entries
