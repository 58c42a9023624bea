"""Shared test fixtures — temp git repos, fake renderer, manual scheduler."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any, Callable, List, Tuple

import pytest

from gitdiffview.config.schema import ViewerConfig
from gitdiffview.git.adapter import RepositoryProbe
from gitdiffview.notify import Level, Notifier
from gitdiffview.view.controller import ViewController


def git(repo: Path, *args: str) -> subprocess.CompletedProcess:
    return subprocess.run(["git", *args], cwd=repo, capture_output=True, text=True, check=True)


class RecordingNotifier(Notifier):
    def __init__(self) -> None:
        super().__init__(Level.DEBUG)
        self.messages: List[Tuple[Level, str]] = []

    def emit(self, text: str, level: Level) -> None:
        self.messages.append((level, text))

    def texts(self, level: Level) -> List[str]:
        return [text for lvl, text in self.messages if lvl == level]


class FakeRenderer:
    """In-memory rendering collaborator that logs every call in order."""

    def __init__(self) -> None:
        self.surfaces: dict = {}
        self.presented: list = []
        self.released: List[Tuple[int, bool]] = []
        self.events: List[Tuple[str, Any]] = []
        self.open_files: List[str] = []
        self.restored: List[List[str]] = []
        self.view_open = False
        self.in_tab = None
        self.on_present: Callable[[], None] | None = None
        self._next = 1

    def create_surface(self, name, lines):
        handle = self._next
        self._next += 1
        self.surfaces[handle] = (name, list(lines))
        self.events.append(("create", handle))
        return handle

    def set_lines(self, handle, lines):
        name, _ = self.surfaces[handle]
        self.surfaces[handle] = (name, list(lines))
        self.events.append(("set_lines", handle))

    def open_view(self, *, in_tab):
        self.view_open = True
        self.in_tab = in_tab
        self.events.append(("open_view", in_tab))

    def present(self, handles):
        self.presented = list(handles)
        self.events.append(("present", tuple(handles)))
        if self.on_present is not None:
            hook, self.on_present = self.on_present, None
            hook()

    def release(self, handle, *, destroy):
        self.released.append((handle, destroy))
        if destroy:
            self.surfaces.pop(handle, None)
        self.events.append(("release", handle))

    def close_view(self):
        self.view_open = False
        self.presented = []
        self.events.append(("close_view", None))

    def close_open_files(self):
        files, self.open_files = self.open_files, []
        self.events.append(("close_open_files", tuple(files)))
        return files

    def restore_files(self, paths):
        self.restored.append(list(paths))
        self.events.append(("restore_files", tuple(paths)))


class ManualScheduler:
    """call_later that only runs when the test says so."""

    def __init__(self) -> None:
        self.queue: List[Tuple[float, Callable, tuple]] = []
        self.ran = 0

    def call_later(self, delay, callback, *args):
        self.queue.append((delay, callback, args))
        return len(self.queue)

    def run_next(self) -> bool:
        if not self.queue:
            return False
        _delay, callback, args = self.queue.pop(0)
        self.ran += 1
        callback(*args)
        return True

    def run_all(self, limit: int = 1000) -> None:
        while limit and self.run_next():
            limit -= 1


class ManualWatcher:
    def __init__(self, root: Path, on_change: Callable[[Path], None]) -> None:
        self.root = root
        self.on_change = on_change
        self.started = False
        self.stopped = False

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def fire(self) -> None:
        self.on_change(self.root)


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository for integration tests."""
    repo = tmp_path / "repo"
    repo.mkdir()
    subprocess.run(["git", "init", str(repo)], capture_output=True, check=True)
    git(repo, "config", "user.email", "test@test.com")
    git(repo, "config", "user.name", "Test")
    # Initial commit
    (repo / "README.md").write_text("# Test\n")
    git(repo, "add", ".")
    git(repo, "commit", "-m", "init")
    return repo.resolve()


@pytest.fixture
def plain_dir(tmp_path: Path) -> Path:
    """A directory outside any repository."""
    d = tmp_path / "plain"
    d.mkdir()
    return d


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def probe(notifier: RecordingNotifier) -> RepositoryProbe:
    return RepositoryProbe(notifier)


@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def watchers() -> List[ManualWatcher]:
    return []


@pytest.fixture
def make_controller(probe, notifier, renderer, scheduler, watchers):
    def factory(cwd: Path, config: ViewerConfig | None = None) -> ViewController:
        def watcher_factory(root, on_change):
            w = ManualWatcher(root, on_change)
            watchers.append(w)
            return w

        return ViewController(
            config or ViewerConfig(),
            renderer,
            probe=probe,
            notifier=notifier,
            scheduler=scheduler,
            watcher_factory=watcher_factory,
            cwd=cwd,
        )

    return factory
