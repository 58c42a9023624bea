"""Rich terminal renderer — one syntax-highlighted panel per diff surface."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Hashable, List, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.syntax import Syntax


@dataclass
class _Surface:
    name: str
    lines: List[str]


class TerminalRenderer:
    """Render the diff view to a terminal.

    With ``auto_draw`` the view is redrawn whenever it changes (watch mode);
    otherwise nothing is printed until :meth:`draw` is called. Detached
    surfaces are kept only until the next :meth:`present`.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        *,
        theme: str = "ansi_dark",
        auto_draw: bool = False,
    ) -> None:
        self.console = console or Console()
        self.theme = theme
        self.auto_draw = auto_draw
        self.surfaces: Dict[int, _Surface] = {}
        self.detached: Dict[int, _Surface] = {}
        self.presented: List[int] = []
        self.in_tab = False
        self._next_handle = 1

    def create_surface(self, name: str, lines: Sequence[str]) -> Hashable:
        handle = self._next_handle
        self._next_handle += 1
        self.surfaces[handle] = _Surface(name=name, lines=list(lines))
        return handle

    def set_lines(self, handle: Hashable, lines: Sequence[str]) -> None:
        self.surfaces[handle].lines = list(lines)
        if self.auto_draw:
            self.draw()

    def open_view(self, *, in_tab: bool) -> None:
        self.in_tab = in_tab

    def present(self, handles: Sequence[Hashable]) -> None:
        # Only the generation released after this call stays detached.
        self.detached.clear()
        self.presented = list(handles)
        if self.auto_draw:
            self.draw()

    def release(self, handle: Hashable, *, destroy: bool) -> None:
        surface = self.surfaces.pop(handle, None)
        if surface is not None and not destroy:
            self.detached[handle] = surface
        if handle in self.presented:
            self.presented.remove(handle)

    def close_view(self) -> None:
        self.presented = []
        self.in_tab = False

    def close_open_files(self) -> List[str]:
        # A terminal holds no open files.
        return []

    def restore_files(self, paths: Sequence[str]) -> None:
        for path in paths:
            self.console.print(f"[dim]reopen {escape(path)}[/dim]")

    def draw(self) -> None:
        if not self.presented:
            return
        if self.in_tab:
            self.console.print(Rule(f"[bold]gitdiffview[/bold]: {len(self.presented)} file(s)"))
        for handle in self.presented:
            surface = self.surfaces[handle]
            body = Syntax("\n".join(surface.lines), "diff", theme=self.theme, word_wrap=True)
            self.console.print(Panel(body, title=escape(surface.name), title_align="left", border_style="dim"))
