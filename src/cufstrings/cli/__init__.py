"""Public CLI exports for cufstrings."""

from __future__ import annotations

from .app import app, main
from .diagnostics import CliEmitter
from .state import emit_error, emit_warning, get_cli_state


__all__ = [
    "CliEmitter",
    "app",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "main",
]
