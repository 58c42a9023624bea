"""Git subprocess wrapper — root resolution, queries, staging, blob reads."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from gitdiffview.notify import Level, Notifier

GIT_DIR = ".git"
LOCK_MARKERS = ("index.lock", "HEAD.lock")

EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124


def split_lines(text: str) -> List[str]:
    """Split command output or file content into lines, one per element.

    A single trailing newline terminates the last line rather than adding an
    empty one. Carriage returns are kept.
    """
    if not text:
        return []
    if text.endswith("\n"):
        text = text[:-1]
    return text.split("\n")


def resolve_root(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Walk upward from *start_dir* to the first directory holding ``.git``.

    Returns that directory, or None when the filesystem root is reached.
    """
    current = Path(start_dir or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / GIT_DIR).is_dir():
            return candidate
    return None


def head_path(root: Path) -> Path:
    return root / GIT_DIR / "HEAD"


def git_lock_exists(root: Optional[Path]) -> bool:
    """Return True while git holds one of its lock markers under ``.git``."""
    if root is None:
        return False
    git_dir = root / GIT_DIR
    if not git_dir.is_dir():
        return False
    return any((git_dir / marker).exists() for marker in LOCK_MARKERS)


def with_git_cwd(argv: Sequence[str], root: Path) -> List[str]:
    """Insert ``-C <root>`` after the executable when the command is git."""
    cmd = list(argv)
    if cmd and cmd[0] == "git":
        cmd[1:1] = ["-C", str(root)]
    return cmd


class RepositoryProbe:
    """Run repository queries scoped to a root.

    No method raises: failures come back as ``None`` / ``False`` or a
    non-zero exit code, with a diagnostic sent to the notifier.
    """

    def __init__(self, notifier: Optional[Notifier] = None, timeout: int = 30) -> None:
        self.notifier = notifier or Notifier()
        self.timeout = timeout

    def resolve_root(self, start_dir: Optional[Path] = None) -> Optional[Path]:
        return resolve_root(start_dir)

    def lock_exists(self, root: Optional[Path]) -> bool:
        return git_lock_exists(root)

    def run_query(self, argv: Sequence[str], root: Path) -> Tuple[List[str], int]:
        """Run *argv* in *root*; return ``(lines, exit_code)``.

        On success the lines are stdout. On failure they are stdout followed
        by stderr, for diagnostics.
        """
        cmd = with_git_cwd(argv, root)
        try:
            result = subprocess.run(
                cmd,
                cwd=root,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError:
            self.notifier.error(f"{cmd[0]} is not installed or not on PATH")
            return [], EXIT_NOT_FOUND
        except subprocess.TimeoutExpired:
            self.notifier.error(f"command timed out after {self.timeout}s: {' '.join(cmd)}")
            return [], EXIT_TIMEOUT

        if result.returncode != 0:
            return split_lines(result.stdout) + split_lines(result.stderr), result.returncode
        return split_lines(result.stdout), 0

    def stage(self, root: Optional[Path], path: str) -> bool:
        """Add exactly one path to the index. Returns whether it succeeded."""
        if root is None:
            self.notifier.warn("not inside a git repository")
            return False
        output, code = self.run_query(["git", "add", "--", path], root)
        if code != 0:
            msg = f"failed to stage {path}"
            if output:
                msg += ": " + "\n".join(output)
            self.notifier.error(msg)
            return False
        self.notifier.info(f"staged {path}")
        return True

    def read_worktree_file(self, root: Path, path: str) -> Optional[List[str]]:
        if not path:
            return None
        absolute = root / path
        if not absolute.is_file():
            return None
        try:
            return split_lines(absolute.read_text(encoding="utf-8", errors="replace"))
        except OSError as exc:
            self.notifier.warn(f"unable to read {path}: {exc}")
            return None

    def read_committed_blob(self, root: Path, path: str, ref: str = "HEAD") -> Optional[List[str]]:
        """Return the lines of *path* as recorded at *ref*, or None."""
        if not path:
            return None
        output, code = self.run_query(["git", "show", f"{ref}:{path}"], root)
        if code != 0:
            self.notifier.notify(f"unable to read {ref}:{path} ({code})", Level.DEBUG)
            return None
        return output
