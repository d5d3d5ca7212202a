"""List the macros of a macro-definition file."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from cufstrings.core.exceptions import MacroDefinitionError
from cufstrings.mapping.control import ControlCharacter
from cufstrings.mapping.macros import Macro, MacroFile

from ..state import emit_error, get_cli_state


SAMPLE_SIZE = 6


def macro_sample(macro: Macro, size: int = SAMPLE_SIZE) -> str:
    """Return a short ``a→b`` preview of the entries of ``macro``."""
    reserved = ControlCharacter.charset()
    pairs = [f"{source}→{mapped}" for source, mapped in macro if source not in reserved]
    if len(pairs) > size:
        pairs = [*pairs[:size], "…"]
    return " ".join(pairs)


def macros_command(
    path: Annotated[
        Path,
        typer.Argument(
            metavar="MACROS",
            help="Macro-definition file (YAML).",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ],
) -> None:
    """Show the macros defined in a macro-definition file."""
    state = get_cli_state()
    try:
        macros = MacroFile(path).macros
    except MacroDefinitionError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    from rich import box
    from rich.table import Table

    table = Table(title=str(path), box=box.SIMPLE, show_lines=False)
    table.add_column("Macro", style="bold")
    table.add_column("Entries", justify="right")
    table.add_column("Sample")
    for macro in macros:
        table.add_row(macro.name, str(len(macro)), macro_sample(macro))
    state.console.print(table)


__all__ = ["macro_sample", "macros_command"]
