"""The rendering collaborator the view controller drives.

A host (editor, terminal) implements this to turn surfaces into something
visible. The controller treats handles as opaque.
"""

from __future__ import annotations

from typing import Hashable, List, Protocol, Sequence


class Renderer(Protocol):
    def create_surface(self, name: str, lines: Sequence[str]) -> Hashable:
        """Create a read-only scratch surface named *name* holding *lines*."""
        ...

    def set_lines(self, handle: Hashable, lines: Sequence[str]) -> None:
        """Replace the whole content of an existing surface."""
        ...

    def open_view(self, *, in_tab: bool) -> None:
        """Open the dedicated view (a tab when *in_tab*) the surfaces go into."""
        ...

    def present(self, handles: Sequence[Hashable]) -> None:
        """Arrange *handles* in the view, in order, replacing what it shows."""
        ...

    def release(self, handle: Hashable, *, destroy: bool) -> None:
        """Remove a surface from the view; destroy its resource or just detach it."""
        ...

    def close_view(self) -> None:
        ...

    def close_open_files(self) -> List[str]:
        """Close the user's open files and return their paths."""
        ...

    def restore_files(self, paths: Sequence[str]) -> None:
        """Reopen *paths* after the view closes."""
        ...
