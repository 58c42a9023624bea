"""Git interface layer — probe, status classification, models."""

from gitdiffview.git.adapter import RepositoryProbe, git_lock_exists, head_path, resolve_root
from gitdiffview.git.models import ChangeEntry, ChangeKind, StatusCode, StatusLine
from gitdiffview.git.status import classify, parse_status_line

__all__ = [
    "ChangeEntry",
    "ChangeKind",
    "RepositoryProbe",
    "StatusCode",
    "StatusLine",
    "classify",
    "git_lock_exists",
    "head_path",
    "parse_status_line",
    "resolve_root",
]
