"""Build the diff text shown for one classified file.

Modified files are delegated to ``git diff``. New and deleted files are
synthesised here, since the view wants the whole file as a single hunk
against ``/dev/null`` regardless of whether git tracks it.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from gitdiffview.config.schema import ViewerConfig
from gitdiffview.diff.headers import strip_diff_headers
from gitdiffview.git.adapter import RepositoryProbe
from gitdiffview.git.models import ChangeEntry, ChangeKind

EMPTY_HUNK = "@@ -0,0 +0,0 @@"
DEFAULT_FILE_MODE = "100644"


def _diff_git_line(path: str) -> str:
    return f"diff --git a/{path} b/{path}"


def new_file_hunk_header(count: int) -> str:
    return f"@@ -0,0 +1,{count} @@" if count > 0 else EMPTY_HUNK


def deleted_file_hunk_header(count: int) -> str:
    return f"@@ -1,{count} +0,0 @@" if count > 0 else EMPTY_HUNK


def no_diff_placeholder(path: str) -> List[str]:
    return [f"No diff for {path}"]


def build_new_file_diff(
    probe: RepositoryProbe, root: Path, path: str, *, full: bool = False
) -> List[str]:
    """Render an untracked file as an all-added diff."""
    lines = probe.read_worktree_file(root, path)
    if lines is None:
        return [
            _diff_git_line(path),
            f"new file {path} missing from working tree",
        ]

    diff_lines = [
        _diff_git_line(path),
        f"new file mode {DEFAULT_FILE_MODE}",
        "--- /dev/null",
        f"+++ b/{path}",
        new_file_hunk_header(len(lines)),
    ]
    diff_lines.extend("+" + line for line in lines)
    return strip_diff_headers(diff_lines) if full else diff_lines


def build_deleted_file_diff(
    probe: RepositoryProbe, root: Path, path: str, *, full: bool = False
) -> List[str]:
    """Render a file removed from the worktree as an all-removed diff of its HEAD blob."""
    lines = probe.read_committed_blob(root, path)
    if lines is None:
        return [
            _diff_git_line(path),
            f"--- a/{path}",
            "+++ /dev/null",
            EMPTY_HUNK,
            f"-unable to read deleted file {path}",
        ]

    diff_lines = [
        _diff_git_line(path),
        f"deleted file mode {DEFAULT_FILE_MODE}",
        f"--- a/{path}",
        "+++ /dev/null",
        deleted_file_hunk_header(len(lines)),
    ]
    diff_lines.extend("-" + line for line in lines)
    return strip_diff_headers(diff_lines) if full else diff_lines


def build_modified_diff(
    probe: RepositoryProbe,
    root: Path,
    path: str,
    config: ViewerConfig,
    *,
    full: bool = False,
) -> Optional[List[str]]:
    """Run the configured diff command for *path*.

    Returns None when the query fails; the caller decides what to show.
    """
    cmd = list(config.diff.diff_cmd)
    if full:
        cmd.append(f"--unified={config.diff.full_file_context}")
    cmd.extend(["--", path])

    output, code = probe.run_query(cmd, root)
    if code != 0:
        probe.notifier.warn(f"failed to diff {path} ({code})")
        if output:
            probe.notifier.debug("\n".join(output))
        return None

    if not output:
        # e.g. a mode-only change
        return no_diff_placeholder(path)
    return strip_diff_headers(output) if full else output


def synthesize(
    probe: RepositoryProbe,
    root: Path,
    entry: ChangeEntry,
    config: ViewerConfig,
    *,
    full: bool = False,
) -> Optional[List[str]]:
    """Return the diff lines for *entry*, or None if they could not be produced."""
    if entry.kind == ChangeKind.NEW:
        return build_new_file_diff(probe, root, entry.path, full=full)
    if entry.kind == ChangeKind.DELETED:
        return build_deleted_file_diff(probe, root, entry.path, full=full)
    return build_modified_diff(probe, root, entry.path, config, full=full)
