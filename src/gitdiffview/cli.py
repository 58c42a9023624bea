"""gitdiffview CLI — Typer application with show, stage, watch, and init commands."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from gitdiffview import __version__

app = typer.Typer(
    name="gitdiffview",
    help="Show and stage a repository's unstaged changes, one diff per file.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _resolve_repo_root() -> Path:
    """Find the git repo root, exit 2 on failure."""
    from gitdiffview.git.adapter import resolve_root

    root = resolve_root()
    if root is None:
        console.print("[bold red]Error:[/bold red] not inside a git repository")
        raise typer.Exit(code=2)
    return root


def _load(repo_root: Path, config: Optional[str]):
    from gitdiffview.config.loader import ConfigError, load_config

    try:
        return load_config(repo_root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _build_controller(cfg, *, auto_draw: bool = False, scheduler=None):
    from gitdiffview.git.adapter import RepositoryProbe
    from gitdiffview.notify import Level, Notifier
    from gitdiffview.output.terminal import TerminalRenderer
    from gitdiffview.view.controller import ViewController

    notifier = Notifier(Level.parse(cfg.output.log_level))
    renderer = TerminalRenderer(theme=cfg.output.theme, auto_draw=auto_draw)
    controller = ViewController(
        cfg,
        renderer,
        probe=RepositoryProbe(notifier),
        notifier=notifier,
        scheduler=scheduler,
    )
    return controller, renderer


def _show_or_exit(controller) -> None:
    from gitdiffview.view.controller import ReconcileOutcome

    outcome = controller.show()
    if outcome == ReconcileOutcome.NOT_A_REPOSITORY:
        raise typer.Exit(code=2)
    if outcome != ReconcileOutcome.SHOWN:
        raise typer.Exit(code=1)


# ── show ──────────────────────────────────────────────────────────────────────


@app.command()
def show(
    full: Optional[List[str]] = typer.Option(None, "--full", "-F", help="Show this file with full context (repeatable)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .gitdiffview.toml"),
) -> None:
    """Show one diff per file with unstaged changes."""
    repo_root = _resolve_repo_root()
    cfg = _load(repo_root, config)
    controller, renderer = _build_controller(cfg)

    _show_or_exit(controller)

    for path in full or []:
        surface = controller.session.find_path(path)
        if surface is None:
            console.print(f"[yellow]⚠[/yellow]  {path} has no unstaged changes")
            continue
        controller.toggle_full(surface.handle)

    renderer.draw()


# ── stage ─────────────────────────────────────────────────────────────────────


@app.command()
def stage(
    path: str = typer.Argument(..., help="Repository-relative path to stage"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .gitdiffview.toml"),
) -> None:
    """Stage one file and show the refreshed view."""
    repo_root = _resolve_repo_root()
    cfg = _load(repo_root, config)
    controller, renderer = _build_controller(cfg)

    _show_or_exit(controller)

    surface = controller.session.find_path(path)
    if surface is None:
        console.print(f"[red]✗[/red] {path} has no unstaged changes")
        raise typer.Exit(code=1)
    if not controller.stage(surface.handle):
        raise typer.Exit(code=1)

    console.print(f"[green]✓[/green] Staged {path}")
    renderer.draw()


# ── watch ─────────────────────────────────────────────────────────────────────


async def _watch(cfg, show_now: bool) -> None:
    loop = asyncio.get_running_loop()
    controller, _renderer = _build_controller(cfg, auto_draw=True, scheduler=loop)
    controller.enable()
    if show_now:
        controller.show()
    try:
        await asyncio.Event().wait()
    finally:
        controller.disable()


@app.command()
def watch(
    show_now: bool = typer.Option(True, "--show/--no-show", help="Show the view before the first HEAD change"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .gitdiffview.toml"),
) -> None:
    """Redraw the view whenever HEAD changes (branch switch, commit, reset)."""
    repo_root = _resolve_repo_root()
    cfg = _load(repo_root, config)
    try:
        asyncio.run(_watch(cfg, show_now))
    except KeyboardInterrupt:
        raise typer.Exit(code=0)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .gitdiffview.toml in the repo root."""
    from gitdiffview.config.defaults import DEFAULT_TOML
    from gitdiffview.config.loader import CONFIG_FILENAME

    repo_root = _resolve_repo_root()
    config_path = repo_root / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"gitdiffview {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """gitdiffview — keep a diff view in sync with your unstaged changes."""
