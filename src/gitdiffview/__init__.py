"""gitdiffview — keep a diff view in sync with a repository's unstaged changes."""

__version__ = "0.1.0"
