"""Unified-diff metadata lines and the policy for stripping them.

Matching is by line prefix only. A body line that happens to start with one
of these prefixes is stripped too: a removed line ``-- note`` renders as
``--- note`` and is dropped in full mode.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterable, List, Optional, Pattern, Tuple


class HeaderKind(str, Enum):
    DIFF_GIT_HEADER = "diff_git_header"
    INDEX_LINE = "index_line"
    FILE_MARKER = "file_marker"
    MODE_LINE = "mode_line"
    HUNK_HEADER = "hunk_header"


# Checked in order; first match wins.
HEADER_PREFIXES: Tuple[Tuple[HeaderKind, Pattern[str]], ...] = (
    (HeaderKind.DIFF_GIT_HEADER, re.compile(r"^diff --git\s")),
    (HeaderKind.INDEX_LINE, re.compile(r"^index\s")),
    (HeaderKind.FILE_MARKER, re.compile(r"^(?:---|\+\+\+)")),
    (HeaderKind.MODE_LINE, re.compile(r"^(?:new|deleted) file mode")),
    (HeaderKind.HUNK_HEADER, re.compile(r"^@@")),
)


def header_kind(line: str) -> Optional[HeaderKind]:
    """Return which metadata prefix *line* starts with, or None for body lines."""
    for kind, pattern in HEADER_PREFIXES:
        if pattern.match(line):
            return kind
    return None


def strip_diff_headers(lines: Iterable[str]) -> List[str]:
    return [line for line in lines if header_kind(line) is None]
