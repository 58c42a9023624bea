"""User-visible diagnostics — levelled, prefixed messages on stderr via Rich."""

from __future__ import annotations

from enum import IntEnum
from typing import Optional

from rich.console import Console
from rich.markup import escape


class Level(IntEnum):
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40

    @classmethod
    def parse(cls, name: str) -> "Level":
        """Return the level for *name* (``debug`` | ``info`` | ``warn`` | ``error``)."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"unknown log level: {name!r}") from None


_LEVEL_STYLE = {
    Level.DEBUG: "dim",
    Level.INFO: "green",
    Level.WARN: "bold yellow",
    Level.ERROR: "bold red",
}


class Notifier:
    """Report diagnostics to the user.

    Every message is prefixed with ``gitdiffview:`` and dropped when below
    *min_level*.
    """

    prefix = "gitdiffview"

    def __init__(self, min_level: Level = Level.INFO, console: Optional[Console] = None) -> None:
        self.min_level = min_level
        self._console = console or Console(stderr=True)

    def notify(self, message: str, level: Level = Level.INFO) -> None:
        if level < self.min_level:
            return
        self.emit(f"{self.prefix}: {message}", level)

    def emit(self, text: str, level: Level) -> None:
        style = _LEVEL_STYLE.get(level, "")
        self._console.print(f"[{style}]{escape(text)}[/{style}]")

    def debug(self, message: str) -> None:
        self.notify(message, Level.DEBUG)

    def info(self, message: str) -> None:
        self.notify(message, Level.INFO)

    def warn(self, message: str) -> None:
        self.notify(message, Level.WARN)

    def error(self, message: str) -> None:
        self.notify(message, Level.ERROR)
