"""Macro mappings applied to record text before post-processing."""

from cufstrings.mapping.base import (
    NO_BREAK,
    BasicMapping,
    ConfigurationKey,
    ConfiguredMapping,
    EscapeMapping,
    IdentityMapping,
    LayoutMapping,
    StringMapping,
    layout_capability,
)
from cufstrings.mapping.control import ControlCharacter
from cufstrings.mapping.macros import IdentityMacro, Macro, MacroFile, SimpleMacro
from cufstrings.mapping.width import WidthMapping


__all__ = [
    "NO_BREAK",
    "BasicMapping",
    "ConfigurationKey",
    "ConfiguredMapping",
    "ControlCharacter",
    "EscapeMapping",
    "IdentityMacro",
    "IdentityMapping",
    "LayoutMapping",
    "Macro",
    "MacroFile",
    "SimpleMacro",
    "StringMapping",
    "WidthMapping",
    "layout_capability",
]
