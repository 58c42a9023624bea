"""Watch a repository's HEAD marker and signal when its content changes."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable, Optional

from watchfiles import Change, awatch

from gitdiffview.git.adapter import GIT_DIR, head_path


def read_head(root: Path) -> Optional[str]:
    """Return HEAD's content without its trailing newline, or None if unreadable."""
    try:
        data = head_path(root).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None
    return data[:-1] if data.endswith("\n") else data


class HeadWatcher:
    """Fire ``on_change(root)`` whenever HEAD's content differs from the last read.

    The content at construction time is the baseline, so starting a watcher
    never fires by itself. If the watch task dies, ``on_error(root, exc)`` is
    called and the watcher can be started again.
    """

    def __init__(
        self,
        root: Path,
        on_change: Callable[[Path], None],
        *,
        interval_ms: int = 750,
        force_polling: bool = False,
        on_error: Optional[Callable[[Path, BaseException], None]] = None,
    ) -> None:
        self.root = root
        self.on_change = on_change
        self.on_error = on_error
        self.interval_ms = interval_ms
        self.force_polling = force_polling
        self.last: Optional[str] = read_head(root)
        self._stop_event: Optional[asyncio.Event] = None
        self._task: Optional[asyncio.Task] = None

    def check(self) -> bool:
        current = read_head(self.root)
        if current and current != self.last:
            self.last = current
            self.on_change(self.root)
            return True
        return False

    def _is_head(self, _change: Change, path: str) -> bool:
        return Path(path).name == "HEAD" and Path(path).parent.name == GIT_DIR

    async def run(self) -> None:
        """Check HEAD on every batch of filesystem events until stopped."""
        async for _changes in awatch(
            self.root / GIT_DIR,
            watch_filter=self._is_head,
            stop_event=self._stop_event,
            recursive=False,
            force_polling=self.force_polling,
            poll_delay_ms=self.interval_ms,
        ):
            self.check()

    def start(self) -> None:
        """Schedule :meth:`run` on the running event loop."""
        if self._task is not None:
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.get_running_loop().create_task(self.run())
        self._task.add_done_callback(self._task_done)

    def stop(self) -> None:
        if self._stop_event is not None:
            self._stop_event.set()
        if self._task is not None:
            self._task.cancel()
        self._task = None
        self._stop_event = None

    def _task_done(self, task: asyncio.Task) -> None:
        if task is not self._task:
            return
        self._task = None
        self._stop_event = None
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None and self.on_error is not None:
            self.on_error(self.root, exc)
