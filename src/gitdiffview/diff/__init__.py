"""Diff text synthesis and header stripping."""

from gitdiffview.diff.headers import HeaderKind, header_kind, strip_diff_headers
from gitdiffview.diff.synthesizer import synthesize

__all__ = ["HeaderKind", "header_kind", "strip_diff_headers", "synthesize"]
