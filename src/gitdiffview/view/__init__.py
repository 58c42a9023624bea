"""Diff view session, rendering protocol, and controller."""

from gitdiffview.view.controller import ReconcileOutcome, ViewController
from gitdiffview.view.renderer import Renderer
from gitdiffview.view.session import FileSurface, ViewSession

__all__ = ["FileSurface", "ReconcileOutcome", "Renderer", "ViewController", "ViewSession"]
