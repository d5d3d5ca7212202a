"""Compile a record source into a JSON or YAML record dump."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
import yaml

from cufstrings.api import build_key_resolver, compile_source, default_uri_resolver
from cufstrings.core.config import CompileOptions, load_options
from cufstrings.core.exceptions import StringsCompileError
from cufstrings.sources.records import StringsCollector

from .._options import (
    BreaksOption,
    ConfigOption,
    DumpFormat,
    DumpFormatOption,
    EmptyStringPolicy,
    EncodingOption,
    FontOption,
    IgnorableWhitespacePolicy,
    InputArgument,
    LayoutFlag,
    LineBreakPolicy,
    MacroNameOption,
    MacrosOption,
    NullCharacterPolicy,
    OrderedFlag,
    OutputOption,
    RecordFormatPolicy,
    SpaceSequencePolicy,
    TabPolicy,
    TabWidthOption,
    WidthOption,
    XsltOption,
)
from ..diagnostics import CliEmitter
from ..state import emit_error, get_cli_state


def layout_attributes(
    font: Path | None,
    width: int | None,
    tab_width: int | None,
    breaks: str | None,
) -> dict[str, str]:
    """Return width mapping attributes for the values given on the command line."""
    values = {"font": font, "width": width, "tabWidth": tab_width, "breaks": breaks}
    return {name: str(value) for name, value in values.items() if value is not None}


def dump_records(collector: StringsCollector, fmt: DumpFormat) -> str:
    payload: dict[str, Any] = {
        "format": collector.format.value,
        "records": [{"key": record.key, "value": record.value} for record in collector],
    }
    if fmt is DumpFormat.YAML:
        return yaml.safe_dump(payload, allow_unicode=True, sort_keys=False)
    return json.dumps(payload, ensure_ascii=False, indent=2) + "\n"


def compile_command(
    source: InputArgument,
    config: ConfigOption = None,
    macros: MacrosOption = None,
    macro: MacroNameOption = "id",
    font: FontOption = None,
    width: WidthOption = None,
    tab_width: TabWidthOption = None,
    breaks: BreaksOption = None,
    layout: LayoutFlag = False,
    null_character: NullCharacterPolicy = None,
    line_break: LineBreakPolicy = None,
    tab: TabPolicy = None,
    space_sequence: SpaceSequencePolicy = None,
    ignorable_whitespace: IgnorableWhitespacePolicy = None,
    record_format: RecordFormatPolicy = None,
    empty_string: EmptyStringPolicy = None,
    ordered: OrderedFlag = False,
    encoding: EncodingOption = None,
    xslt: XsltOption = None,
    output: OutputOption = None,
    to: DumpFormatOption = DumpFormat.JSON,
) -> None:
    """Compile plain, XML or value-map sources into Strings records."""
    state = get_cli_state()
    emitter = CliEmitter(state)
    try:
        options = load_options(config) if config is not None else CompileOptions()
        options = options.with_overrides(
            null_character=null_character,
            line_break=line_break,
            tab=tab,
            space_sequence=space_sequence,
            ignorable_whitespace=ignorable_whitespace,
            format=record_format,
            empty_string=empty_string,
            encoding=encoding,
            xslt=xslt,
        )
        key_resolver = build_key_resolver(
            macros,
            macro,
            layout=layout_attributes(font, width, tab_width, breaks),
            emitter=emitter,
        )
        collector = compile_source(
            source,
            options,
            key_resolver=key_resolver,
            uri_resolver=default_uri_resolver(source, layout=layout),
            force_order=ordered,
            emitter=emitter,
        )
    except StringsCompileError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    compiled = state.consume_events("record_compiled")
    resolved = state.consume_events("mapping_resolved")
    if state.verbosity >= 1:
        characters = sum(event.get("length") or 0 for event in compiled)
        state.err_console.log(
            f"Compiled {len(compiled)} values ({characters} characters) through "
            f"{len(resolved)} mappings with {state.warnings} warnings"
        )

    text = dump_records(collector, to)
    if output is None:
        typer.echo(text, nl=False)
        return
    output.write_text(text, encoding="utf-8")
    if state.verbosity >= 1:
        state.err_console.log(f"Wrote {len(collector)} records to {output}")


__all__ = ["compile_command", "dump_records", "layout_attributes"]
