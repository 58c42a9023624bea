"""View controller — keeps the diff view and the repository consistent.

Owns the single view session and the HEAD watchers. Every reconciliation
(status → classify → synthesize → repopulate) runs to completion on the
event loop thread; at most one is in flight per root. A HEAD change signal
that arrives while git still holds a lock is retried on a timer, a bounded
number of times.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Hashable, List, Optional, Protocol

from gitdiffview.config.schema import ViewerConfig
from gitdiffview.diff.synthesizer import synthesize
from gitdiffview.git.adapter import RepositoryProbe, head_path
from gitdiffview.git.models import ChangeEntry
from gitdiffview.git.status import classify
from gitdiffview.notify import Notifier
from gitdiffview.view.renderer import Renderer
from gitdiffview.view.session import FileSurface, ViewSession
from gitdiffview.watch.head import HeadWatcher
from gitdiffview.watch.retry import RetryState

NO_CHANGES_NAME = "[gitdiffview]"
NO_CHANGES_LINES = ["No unstaged changes."]


class ReconcileOutcome(str, Enum):
    SHOWN = "shown"
    NOT_A_REPOSITORY = "not_a_repository"
    STATUS_FAILED = "status_failed"
    BUSY = "busy"
    CANCELLED = "cancelled"
    DEFERRED = "deferred"  # merged into the reconciliation already in flight
    SKIPPED = "skipped"  # view hidden and auto-open disabled


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Any:
        ...


class Watcher(Protocol):
    def start(self) -> None:
        ...

    def stop(self) -> None:
        ...


WatcherFactory = Callable[[Path, Callable[[Path], None]], Watcher]


def diff_unavailable_lines(path: str) -> List[str]:
    return [f"diff unavailable for {path}"]


class ViewController:
    def __init__(
        self,
        config: ViewerConfig,
        renderer: Renderer,
        *,
        probe: Optional[RepositoryProbe] = None,
        notifier: Optional[Notifier] = None,
        scheduler: Optional[Scheduler] = None,
        watcher_factory: Optional[WatcherFactory] = None,
        cwd: Optional[Path] = None,
    ) -> None:
        self.config = config
        self.renderer = renderer
        self.notifier = notifier or (probe.notifier if probe else Notifier())
        self.probe = probe or RepositoryProbe(self.notifier)
        self.cwd = cwd
        self._scheduler = scheduler
        self._watcher_factory = watcher_factory or self._default_watcher

        self.enabled = False
        self.session = ViewSession()
        self.watchers: Dict[Path, Watcher] = {}
        self.pending: Dict[Path, RetryState] = {}
        self.last_outcome: Optional[ReconcileOutcome] = None
        self._in_flight: set[Path] = set()
        self._rerun: set[Path] = set()
        self._stashed_files: List[str] = []

    # ── lifecycle ─────────────────────────────────────────────────────────

    def setup(self) -> None:
        """Enable right away when configured to."""
        if self.config.watch.enable_on_start:
            self.enable()

    def enable(self) -> None:
        if self.enabled:
            return
        self.enabled = True
        self.ensure_watch()
        self.notifier.info("enabled")

    def disable(self) -> None:
        if not self.enabled:
            return
        self.enabled = False
        self.stop_watches()
        self.hide()
        self.notifier.info("disabled")

    def change_directory(self, path: Path) -> None:
        self.cwd = path
        if self.enabled:
            self.ensure_watch()

    # ── user actions ──────────────────────────────────────────────────────

    def toggle(self) -> Optional[ReconcileOutcome]:
        if self.session.visible:
            self.hide()
            return None
        return self.show()

    def show(self) -> ReconcileOutcome:
        return self._reconcile(self._resolve_root())

    def refresh(self) -> ReconcileOutcome:
        return self._reconcile(self._resolve_root())

    def hide(self) -> None:
        if not self.session.visible:
            return
        destroy = self.config.view.close_mode == "destroy"
        for surface in self.session.surfaces:
            self.renderer.release(surface.handle, destroy=destroy)
        self.renderer.close_view()
        self.session.clear()
        self._restore_files()

    def stage(self, handle: Hashable) -> bool:
        """Stage the file behind *handle*, then refresh. The view is untouched on failure."""
        surface = self.session.find(handle)
        if surface is None or surface.entry is None:
            self.notifier.warn("nothing to stage here")
            return False
        if not self.probe.stage(self.session.root, surface.entry.path):
            return False
        self._reconcile(self.session.root)
        return True

    def toggle_full(self, handle: Hashable) -> bool:
        """Switch one surface between headered and full-context text."""
        surface = self.session.find(handle)
        if surface is None or surface.entry is None or self.session.root is None:
            return False
        full = not surface.full_mode
        lines = synthesize(self.probe, self.session.root, surface.entry, self.config, full=full)
        if lines is None:
            return False
        surface.full_mode = full
        surface.lines = lines
        self.renderer.set_lines(surface.handle, lines)
        return True

    # ── watching ──────────────────────────────────────────────────────────

    def ensure_watch(self) -> None:
        root = self.probe.resolve_root(self.cwd)
        if root is None or root in self.watchers:
            return
        if not head_path(root).is_file():
            return
        watcher = self._watcher_factory(root, self.on_head_change)
        watcher.start()
        self.watchers[root] = watcher

    def stop_watches(self) -> None:
        for watcher in self.watchers.values():
            watcher.stop()
        self.watchers.clear()
        self.pending.clear()
        self._rerun.clear()

    def on_watch_failed(self, root: Path, exc: BaseException) -> None:
        """Forget the dead watcher for *root* so ensure_watch can replace it."""
        self.notifier.error(f"stopped watching {root}: {exc}")
        self.watchers.pop(root, None)

    def on_head_change(self, root: Path) -> None:
        """Handle a HEAD change signal for *root*; coalesces with a pending one."""
        if not self.enabled or root in self.pending:
            return
        if root in self._in_flight:
            self._rerun.add(root)
            self.last_outcome = ReconcileOutcome.DEFERRED
            return
        state = RetryState(
            root=root,
            max_attempts=self.config.watch.lock_max_attempts,
            delay=self.config.lock_retry_delay,
        )
        self.pending[root] = state
        self._wait_for_idle(state)

    def _wait_for_idle(self, state: RetryState) -> Optional[ReconcileOutcome]:
        root = state.root
        if not self.enabled or self.pending.get(root) is not state:
            if self.pending.get(root) is state:
                del self.pending[root]
            self.last_outcome = ReconcileOutcome.CANCELLED
            return self.last_outcome

        if self.probe.lock_exists(root):
            if state.exhausted:
                self.notifier.warn(
                    f"git repository busy (lock present after {state.attempt} checks); skipping refresh"
                )
                del self.pending[root]
                self.last_outcome = ReconcileOutcome.BUSY
                return self.last_outcome
            nxt = state.next()
            self.pending[root] = nxt
            self._get_scheduler().call_later(nxt.delay, self._wait_for_idle, nxt)
            return None

        del self.pending[root]
        if not self.session.visible and not self.config.watch.auto_open:
            self.last_outcome = ReconcileOutcome.SKIPPED
            return self.last_outcome
        return self._reconcile(root)

    # ── reconciliation ────────────────────────────────────────────────────

    def _resolve_root(self) -> Optional[Path]:
        return self.probe.resolve_root(self.cwd)

    def _reconcile(self, root: Optional[Path]) -> ReconcileOutcome:
        if root is None:
            self.notifier.warn("not inside a git repository")
            self.last_outcome = ReconcileOutcome.NOT_A_REPOSITORY
            return self.last_outcome
        if root in self._in_flight:
            self._rerun.add(root)
            self.last_outcome = ReconcileOutcome.DEFERRED
            return self.last_outcome

        self._in_flight.add(root)
        try:
            status, code = self.probe.run_query(self.config.diff.status_cmd, root)
            if code != 0:
                msg = f"unable to read git status ({code})"
                if status:
                    msg += ": " + "\n".join(status)
                self.notifier.error(msg)
                outcome = ReconcileOutcome.STATUS_FAILED
            else:
                self._populate(root, classify(status))
                outcome = ReconcileOutcome.SHOWN
        finally:
            self._in_flight.discard(root)

        self.last_outcome = outcome
        if root in self._rerun:
            self._rerun.discard(root)
            self.on_head_change(root)
        return outcome

    def _build_surface(self, root: Path, entry: ChangeEntry) -> FileSurface:
        lines = synthesize(self.probe, root, entry, self.config)
        if lines is None:
            lines = diff_unavailable_lines(entry.path)
        handle = self.renderer.create_surface(entry.path, lines)
        return FileSurface(handle=handle, entry=entry, lines=lines)

    def _populate(self, root: Path, entries: List[ChangeEntry]) -> None:
        """Swap the session's surfaces for freshly built ones.

        New surfaces are presented before the old ones are released.
        """
        if not self.session.visible and self.config.view.restore_files:
            self._stashed_files.extend(self.renderer.close_open_files())

        if entries:
            surfaces = [self._build_surface(root, entry) for entry in entries]
        else:
            handle = self.renderer.create_surface(NO_CHANGES_NAME, NO_CHANGES_LINES)
            surfaces = [FileSurface(handle=handle, entry=None, lines=list(NO_CHANGES_LINES))]

        if not self.session.visible:
            self.renderer.open_view(in_tab=self.config.view.open_in_tab)
        self.renderer.present([s.handle for s in surfaces])

        destroy = self.config.view.close_mode == "destroy"
        for old in self.session.surfaces:
            self.renderer.release(old.handle, destroy=destroy)

        self.session.surfaces = surfaces
        self.session.root = root
        self.session.visible = True

    def _restore_files(self) -> None:
        if not self._stashed_files:
            return
        existing = [p for p in self._stashed_files if Path(p).exists()]
        self._stashed_files = []
        if existing:
            self.renderer.restore_files(existing)

    # ── defaults ──────────────────────────────────────────────────────────

    def _get_scheduler(self) -> Scheduler:
        return self._scheduler or asyncio.get_running_loop()

    def _default_watcher(self, root: Path, on_change: Callable[[Path], None]) -> Watcher:
        return HeadWatcher(
            root,
            on_change,
            interval_ms=self.config.watch.interval_ms,
            force_polling=self.config.watch.force_polling,
            on_error=self.on_watch_failed,
        )
