"""Typer application wiring for the cufstrings CLI."""

from __future__ import annotations

from typing import Annotated

import typer

from cufstrings.cli.commands import compile_command, macros_command

from .state import emit_error, get_cli_state, set_cli_state


app = typer.Typer(
    help="Compile key/value text sources into Strings records.",
    context_settings={"help_option_names": ["--help", "-h"]},
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase diagnostic verbosity (repeatable).",
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Show full tracebacks on unexpected errors."),
    ] = False,
) -> None:
    set_cli_state(ctx=ctx, verbosity=verbose, debug=debug)


app.command("compile")(compile_command)
app.command("macros")(macros_command)


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except typer.Exit:
        raise
    except KeyboardInterrupt as exc:
        emit_error("Operation cancelled by user.", exception=exc)
        raise typer.Exit(code=1) from exc
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - last resort reporting
        state = get_cli_state()
        if state.show_tracebacks:
            from rich.traceback import Traceback

            tb = Traceback.from_exception(
                type(exc),
                exc,
                exc.__traceback__,
                show_locals=state.verbosity >= 2,
            )
            state.err_console.print(tb)
        else:
            emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
