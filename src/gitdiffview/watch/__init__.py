"""HEAD watching and lock-retry state."""

from gitdiffview.watch.head import HeadWatcher, read_head
from gitdiffview.watch.retry import RetryState

__all__ = ["HeadWatcher", "RetryState", "read_head"]
