"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal

CloseMode = Literal["destroy", "detach"]
LogLevel = Literal["debug", "info", "warn", "error"]

CLOSE_MODES = ("destroy", "detach")
LOG_LEVELS = ("debug", "info", "warn", "error")


@dataclass
class WatchConfig:
    enable_on_start: bool = True
    interval_ms: int = 750
    lock_retry_delay_ms: int = 100
    lock_max_attempts: int = 50
    auto_open: bool = True  # a HEAD change opens the view when hidden
    force_polling: bool = False


@dataclass
class ViewConfig:
    open_in_tab: bool = True
    close_mode: CloseMode = "destroy"
    restore_files: bool = True  # reopen files that were closed while the view was shown


@dataclass
class DiffConfig:
    diff_cmd: List[str] = field(default_factory=lambda: ["git", "diff", "--no-color"])
    status_cmd: List[str] = field(
        default_factory=lambda: ["git", "status", "--porcelain", "--untracked-files=all"]
    )
    full_file_context: int = 100000


@dataclass
class OutputConfig:
    log_level: LogLevel = "info"
    theme: str = "ansi_dark"


@dataclass
class ViewerConfig:
    version: str = "1.0"
    watch: WatchConfig = field(default_factory=WatchConfig)
    view: ViewConfig = field(default_factory=ViewConfig)
    diff: DiffConfig = field(default_factory=DiffConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @property
    def lock_retry_delay(self) -> float:
        """Retry delay in seconds."""
        return self.watch.lock_retry_delay_ms / 1000.0
