"""Tests for diff synthesis — new, deleted, and modified files."""

from pathlib import Path

from conftest import git

from gitdiffview.config.schema import ViewerConfig
from gitdiffview.diff.headers import header_kind
from gitdiffview.diff.synthesizer import (
    build_deleted_file_diff,
    build_modified_diff,
    build_new_file_diff,
    synthesize,
)
from gitdiffview.git.models import ChangeEntry, ChangeKind
from gitdiffview.notify import Level


class TestNewFile:
    def test_headered(self, tmp_git_repo: Path, probe):
        (tmp_git_repo / "new.txt").write_text("alpha\nbeta\n")
        assert build_new_file_diff(probe, tmp_git_repo, "new.txt") == [
            "diff --git a/new.txt b/new.txt",
            "new file mode 100644",
            "--- /dev/null",
            "+++ b/new.txt",
            "@@ -0,0 +1,2 @@",
            "+alpha",
            "+beta",
        ]

    def test_empty_file_uses_zero_hunk(self, tmp_git_repo: Path, probe):
        (tmp_git_repo / "empty.txt").write_text("")
        lines = build_new_file_diff(probe, tmp_git_repo, "empty.txt")
        assert lines[4] == "@@ -0,0 +0,0 @@"
        assert [line for line in lines[5:] if line.startswith("+")] == []
        assert len(lines) == 5

    def test_full_mode_keeps_only_body(self, tmp_git_repo: Path, probe):
        content = ["one", "", "--- looks like a marker", "three"]
        (tmp_git_repo / "body.txt").write_text("\n".join(content) + "\n")
        lines = build_new_file_diff(probe, tmp_git_repo, "body.txt", full=True)
        assert len(lines) == len(content)
        assert all(line.startswith("+") for line in lines)
        assert lines == ["+" + c for c in content]

    def test_missing_file_diagnostic(self, tmp_git_repo: Path, probe):
        assert build_new_file_diff(probe, tmp_git_repo, "ghost.txt") == [
            "diff --git a/ghost.txt b/ghost.txt",
            "new file ghost.txt missing from working tree",
        ]

    def test_missing_file_diagnostic_not_stripped(self, tmp_git_repo: Path, probe):
        lines = build_new_file_diff(probe, tmp_git_repo, "ghost.txt", full=True)
        assert len(lines) == 2


class TestDeletedFile:
    def test_headered(self, tmp_git_repo: Path, probe):
        (tmp_git_repo / "old.txt").write_text("first\nsecond\n")
        git(tmp_git_repo, "add", "old.txt")
        git(tmp_git_repo, "commit", "-m", "add old")
        (tmp_git_repo / "old.txt").unlink()

        assert build_deleted_file_diff(probe, tmp_git_repo, "old.txt") == [
            "diff --git a/old.txt b/old.txt",
            "deleted file mode 100644",
            "--- a/old.txt",
            "+++ /dev/null",
            "@@ -1,2 +0,0 @@",
            "-first",
            "-second",
        ]

    def test_full_mode(self, tmp_git_repo: Path, probe):
        (tmp_git_repo / "README.md").unlink()
        assert build_deleted_file_diff(probe, tmp_git_repo, "README.md", full=True) == ["-# Test"]

    def test_empty_committed_file(self, tmp_git_repo: Path, probe):
        (tmp_git_repo / "blank.txt").write_text("")
        git(tmp_git_repo, "add", "blank.txt")
        git(tmp_git_repo, "commit", "-m", "blank")
        (tmp_git_repo / "blank.txt").unlink()
        lines = build_deleted_file_diff(probe, tmp_git_repo, "blank.txt")
        assert lines[-1] == "@@ -0,0 +0,0 @@"

    def test_unreadable_blob_diagnostic(self, tmp_git_repo: Path, probe):
        assert build_deleted_file_diff(probe, tmp_git_repo, "never.txt") == [
            "diff --git a/never.txt b/never.txt",
            "--- a/never.txt",
            "+++ /dev/null",
            "@@ -0,0 +0,0 @@",
            "-unable to read deleted file never.txt",
        ]


class TestModifiedFile:
    def test_delegates_to_git_diff(self, tmp_git_repo: Path, probe):
        (tmp_git_repo / "README.md").write_text("# Changed\n")
        lines = build_modified_diff(probe, tmp_git_repo, "README.md", ViewerConfig())
        assert lines is not None
        assert lines[0] == "diff --git a/README.md b/README.md"
        assert "-# Test" in lines
        assert "+# Changed" in lines

    def test_full_mode_strips_metadata(self, tmp_git_repo: Path, probe):
        body = [f"line {i}" for i in range(20)]
        (tmp_git_repo / "long.txt").write_text("\n".join(body) + "\n")
        git(tmp_git_repo, "add", "long.txt")
        git(tmp_git_repo, "commit", "-m", "long")
        body[10] = "changed"
        (tmp_git_repo / "long.txt").write_text("\n".join(body) + "\n")

        lines = build_modified_diff(probe, tmp_git_repo, "long.txt", ViewerConfig(), full=True)
        assert lines is not None
        assert all(header_kind(line) is None for line in lines)
        # whole file in a single hunk: 19 context + 1 removed + 1 added
        assert len(lines) == 21
        assert " line 0" in lines and " line 19" in lines

    def test_no_textual_delta_placeholder(self, tmp_git_repo: Path, probe):
        assert build_modified_diff(probe, tmp_git_repo, "README.md", ViewerConfig()) == [
            "No diff for README.md"
        ]

    def test_query_failure_returns_none(self, tmp_git_repo: Path, probe, notifier):
        cfg = ViewerConfig()
        cfg.diff.diff_cmd = ["git", "diff", "--no-such-option"]
        assert build_modified_diff(probe, tmp_git_repo, "README.md", cfg) is None
        assert any("failed to diff README.md" in t for t in notifier.texts(Level.WARN))


class TestDispatch:
    def test_dispatch_by_kind(self, tmp_git_repo: Path, probe):
        (tmp_git_repo / "new.txt").write_text("x\n")
        cfg = ViewerConfig()
        new = synthesize(probe, tmp_git_repo, ChangeEntry("new.txt", ChangeKind.NEW), cfg)
        assert new is not None and new[1] == "new file mode 100644"

        (tmp_git_repo / "README.md").unlink()
        deleted = synthesize(probe, tmp_git_repo, ChangeEntry("README.md", ChangeKind.DELETED), cfg)
        assert deleted is not None and deleted[1] == "deleted file mode 100644"
