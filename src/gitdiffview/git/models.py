"""Data models for repository status classification."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class StatusCode(str, Enum):
    """One column of a short-format status code."""

    UNMODIFIED = " "
    MODIFIED = "M"
    TYPE_CHANGED = "T"
    ADDED = "A"
    DELETED = "D"
    RENAMED = "R"
    COPIED = "C"
    UNMERGED = "U"
    UNTRACKED = "?"
    IGNORED = "!"

    @classmethod
    def parse(cls, char: str) -> "StatusCode":
        try:
            return cls(char)
        except ValueError:
            raise ValueError(f"unknown status code: {char!r}") from None


class ChangeKind(str, Enum):
    MODIFIED = "modified"
    NEW = "new"
    DELETED = "deleted"


@dataclass(frozen=True)
class StatusLine:
    """A parsed short-format status line."""

    staged: StatusCode
    worktree: StatusCode
    path: str
    original_path: Optional[str] = None  # set on rename/copy notation


@dataclass(frozen=True)
class ChangeEntry:
    """A file with outstanding unstaged changes."""

    path: str
    kind: ChangeKind
    original_path: Optional[str] = None  # renames collapse to *path*; kept for display
