"""View session state — the visible flag, the root it was opened for, its surfaces."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Hashable, List, Optional

from gitdiffview.git.models import ChangeEntry


@dataclass(eq=False)
class FileSurface:
    """One rendered diff bound to one ChangeEntry.

    ``entry`` is None for the informational surface shown when there is
    nothing to diff. The binding never changes; only ``lines`` and
    ``full_mode`` are replaced when full-context mode is toggled.
    """

    handle: Hashable
    entry: Optional[ChangeEntry]
    lines: List[str]
    full_mode: bool = False

    @property
    def path(self) -> Optional[str]:
        return self.entry.path if self.entry else None

    @property
    def informational(self) -> bool:
        return self.entry is None


@dataclass
class ViewSession:
    visible: bool = False
    root: Optional[Path] = None
    surfaces: List[FileSurface] = field(default_factory=list)

    def find(self, handle: Hashable) -> Optional[FileSurface]:
        for surface in self.surfaces:
            if surface.handle == handle:
                return surface
        return None

    def find_path(self, path: str) -> Optional[FileSurface]:
        for surface in self.surfaces:
            if surface.path == path:
                return surface
        return None

    def paths(self) -> List[str]:
        return [s.path for s in self.surfaces if s.path is not None]

    def clear(self) -> None:
        self.visible = False
        self.root = None
        self.surfaces = []
