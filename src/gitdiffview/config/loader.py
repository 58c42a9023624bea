"""Load and merge configuration from .gitdiffview.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from gitdiffview.config.schema import (
    CLOSE_MODES,
    LOG_LEVELS,
    DiffConfig,
    OutputConfig,
    ViewConfig,
    ViewerConfig,
    WatchConfig,
)

CONFIG_FILENAME = ".gitdiffview.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(repo_root: Optional[Path], override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    if repo_root is None:
        return None
    candidate = repo_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _env_int(name: str) -> Optional[int]:
    val = os.environ.get(name)
    if not val:
        return None
    try:
        parsed = int(val)
    except ValueError:
        return None
    return parsed if parsed > 0 else None


def _merge_env_overrides(cfg: ViewerConfig) -> None:
    """Apply GITDIFFVIEW_* environment variable overrides."""
    if val := os.environ.get("GITDIFFVIEW_LOG_LEVEL"):
        if val.lower() in LOG_LEVELS:
            cfg.output.log_level = val.lower()  # type: ignore[assignment]
    if (n := _env_int("GITDIFFVIEW_FULL_FILE_CONTEXT")) is not None:
        cfg.diff.full_file_context = n
    if (n := _env_int("GITDIFFVIEW_LOCK_MAX_ATTEMPTS")) is not None:
        cfg.watch.lock_max_attempts = n
    if (n := _env_int("GITDIFFVIEW_WATCH_INTERVAL_MS")) is not None:
        cfg.watch.interval_ms = n


def validate(cfg: ViewerConfig) -> None:
    """Raise ConfigError on values the viewer cannot run with."""
    positive = {
        "watch.interval_ms": cfg.watch.interval_ms,
        "watch.lock_retry_delay_ms": cfg.watch.lock_retry_delay_ms,
        "watch.lock_max_attempts": cfg.watch.lock_max_attempts,
        "diff.full_file_context": cfg.diff.full_file_context,
    }
    for name, value in positive.items():
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            raise ConfigError(f"{name} must be a positive integer, got {value!r}")
    if cfg.view.close_mode not in CLOSE_MODES:
        raise ConfigError(f"view.close_mode must be one of {', '.join(CLOSE_MODES)}")
    if cfg.output.log_level not in LOG_LEVELS:
        raise ConfigError(f"output.log_level must be one of {', '.join(LOG_LEVELS)}")
    for name, cmd in (("diff.diff_cmd", cfg.diff.diff_cmd), ("diff.status_cmd", cfg.diff.status_cmd)):
        if not isinstance(cmd, list) or not cmd or not all(isinstance(a, str) for a in cmd):
            raise ConfigError(f"{name} must be a non-empty list of strings")


def load_config(
    repo_root: Optional[Path],
    config_override: Optional[str] = None,
) -> ViewerConfig:
    """Load, validate, and return a ViewerConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = ViewerConfig()
    else:
        raw = _parse_toml(config_path)
        try:
            cfg = ViewerConfig(
                version=raw.get("version", "1.0"),
                watch=_build_section(raw, WatchConfig, "watch"),
                view=_build_section(raw, ViewConfig, "view"),
                diff=_build_section(raw, DiffConfig, "diff"),
                output=_build_section(raw, OutputConfig, "output"),
            )
        except TypeError as exc:
            raise ConfigError(f"Invalid config in {config_path}: {exc}") from exc

    _merge_env_overrides(cfg)
    validate(cfg)
    return cfg
