"""Tests for header classification and stripping."""

from gitdiffview.diff.headers import HeaderKind, header_kind, strip_diff_headers


class TestHeaderKind:
    def test_each_kind(self):
        assert header_kind("diff --git a/f b/f") == HeaderKind.DIFF_GIT_HEADER
        assert header_kind("index abc123..def456 100644") == HeaderKind.INDEX_LINE
        assert header_kind("--- a/f") == HeaderKind.FILE_MARKER
        assert header_kind("+++ b/f") == HeaderKind.FILE_MARKER
        assert header_kind("new file mode 100644") == HeaderKind.MODE_LINE
        assert header_kind("deleted file mode 100644") == HeaderKind.MODE_LINE
        assert header_kind("@@ -1,2 +1,3 @@ def f():") == HeaderKind.HUNK_HEADER

    def test_body_lines(self):
        for line in ("+added", "-removed", " context", "", "indexed", "diff --gitx"):
            assert header_kind(line) is None


class TestStrip:
    def test_keeps_body_prefixes(self):
        lines = [
            "diff --git a/f b/f",
            "index 1..2 100644",
            "--- a/f",
            "+++ b/f",
            "@@ -1 +1 @@",
            "-old",
            "+new",
            " same",
        ]
        assert strip_diff_headers(lines) == ["-old", "+new", " same"]

    def test_body_lines_matching_a_prefix_are_stripped(self):
        # A removed "-- note" line reads "--- note"; an added "++ x" reads "+++ x".
        lines = ["--- note", "+++ x", "+kept", "-- not a marker"]
        assert strip_diff_headers(lines) == ["+kept", "-- not a marker"]

    def test_old_new_mode_lines_kept(self):
        assert strip_diff_headers(["old mode 100644", "new mode 100755"]) == [
            "old mode 100644",
            "new mode 100755",
        ]
