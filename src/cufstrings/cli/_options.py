"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from typer.models import OptionInfo


INPUTS_PANEL = "Input Handling"
MAPPING_PANEL = "Macros"
LAYOUT_PANEL = "Layout"
POLICY_PANEL = "Policies"
OUTPUT_PANEL = "Output"


class DumpFormat(str, Enum):
    JSON = "json"
    YAML = "yaml"


InputArgument = Annotated[
    Path,
    typer.Argument(
        metavar="INPUT",
        help="Record source: plain text, XML document, or YAML/JSON value map.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="YAML file holding compile options.",
        exists=True,
        dir_okay=False,
        rich_help_panel=INPUTS_PANEL,
    ),
]

EncodingOption = Annotated[
    str | None,
    typer.Option(
        "--encoding",
        help="Encoding of the source document.",
        rich_help_panel=INPUTS_PANEL,
    ),
]

XsltOption = Annotated[
    Path | None,
    typer.Option(
        "--xslt",
        help="Stylesheet applied to XML sources before compilation.",
        exists=True,
        dir_okay=False,
        rich_help_panel=INPUTS_PANEL,
    ),
]

MacrosOption = Annotated[
    Path | None,
    typer.Option(
        "--macros",
        "-m",
        help="Macro-definition file applied to plain and map sources.",
        exists=True,
        dir_okay=False,
        resolve_path=True,
        rich_help_panel=MAPPING_PANEL,
    ),
]

MacroNameOption = Annotated[
    str,
    typer.Option(
        "--macro",
        help="Name of the macro applied to every value.",
        rich_help_panel=MAPPING_PANEL,
    ),
]

FontOption = Annotated[
    Path | None,
    typer.Option(
        "--font",
        help="Glyph metrics (width table or TrueType font) enabling width-based layout.",
        exists=True,
        dir_okay=False,
        resolve_path=True,
        rich_help_panel=LAYOUT_PANEL,
    ),
]

WidthOption = Annotated[
    int | None,
    typer.Option(
        "--width",
        min=1,
        help="Line capacity in layout units.",
        rich_help_panel=LAYOUT_PANEL,
    ),
]

TabWidthOption = Annotated[
    int | None,
    typer.Option(
        "--tab-width",
        min=1,
        help="Tab-stop grid size in layout units.",
        rich_help_panel=LAYOUT_PANEL,
    ),
]

BreaksOption = Annotated[
    str | None,
    typer.Option(
        "--breaks",
        help="Characters that may end a line (escapes allowed).",
        rich_help_panel=LAYOUT_PANEL,
    ),
]

LayoutFlag = Annotated[
    bool,
    typer.Option(
        "--layout",
        help="Resolve XML namespaces to width-aware mappings.",
        rich_help_panel=LAYOUT_PANEL,
    ),
]


def _policy(flag: str, help_text: str) -> OptionInfo:
    return typer.Option(flag, help=help_text, rich_help_panel=POLICY_PANEL)


NullCharacterPolicy = Annotated[
    str | None, _policy("--null-character", "NUL policy: enable, disable or discard.")
]
LineBreakPolicy = Annotated[
    str | None,
    _policy("--line-break", "Line break policy: discard, ignore, keep, convert or normalize."),
]
TabPolicy = Annotated[str | None, _policy("--tab", "Tab policy: discard, ignore or keep.")]
SpaceSequencePolicy = Annotated[
    str | None, _policy("--space-sequence", "Space policy: coalesce or compile.")
]
IgnorableWhitespacePolicy = Annotated[
    str | None,
    _policy("--ignorable-whitespace", "Ignorable XML whitespace: ignore, warning or compile."),
]
RecordFormatPolicy = Annotated[
    str | None, _policy("--record-format", "Record stream format: keyed, plainkeys or ordered.")
]
EmptyStringPolicy = Annotated[
    str | None,
    _policy("--empty-string", "Empty strings: enable, valueonly, warning or disable."),
]

OrderedFlag = Annotated[
    bool,
    typer.Option(
        "--ordered",
        help="Force the ordered record format for value maps.",
        rich_help_panel=POLICY_PANEL,
    ),
]

OutputOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="Write the compiled records to this file instead of stdout.",
        dir_okay=False,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

DumpFormatOption = Annotated[
    DumpFormat,
    typer.Option(
        "--to",
        case_sensitive=False,
        help="Serialisation of the compiled records.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]


__all__ = [
    "BreaksOption",
    "ConfigOption",
    "DumpFormat",
    "DumpFormatOption",
    "EmptyStringPolicy",
    "EncodingOption",
    "FontOption",
    "IgnorableWhitespacePolicy",
    "InputArgument",
    "LayoutFlag",
    "LineBreakPolicy",
    "MacroNameOption",
    "MacrosOption",
    "NullCharacterPolicy",
    "OrderedFlag",
    "OutputOption",
    "RecordFormatPolicy",
    "SpaceSequencePolicy",
    "TabPolicy",
    "TabWidthOption",
    "WidthOption",
    "XsltOption",
]
