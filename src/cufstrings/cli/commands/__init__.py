"""CLI command implementations."""

from .compile import compile_command
from .macros import macros_command


__all__ = ["compile_command", "macros_command"]
