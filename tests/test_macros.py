from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from cufstrings.core.exceptions import MacroDefinitionError, MacroError
from cufstrings.mapping.macros import IdentityMacro, MacroFile, SimpleMacro, index_macros


def test_simple_macro_maps_characters() -> None:
    macro = SimpleMacro("upper", {"a": "A", "b": "B"})
    assert macro.map("abba") == "ABBA"
    assert macro.map_char("c") is None


def test_simple_macro_passes_fixed_control_characters() -> None:
    macro = SimpleMacro("upper", {"a": "A"})
    assert macro.map("a\ta\n") == "A\tA\n"
    assert macro.map_char(" ") is None


def test_unmappable_character_reports_context() -> None:
    macro = SimpleMacro("upper", {"a": "A"})
    with pytest.raises(MacroError) as excinfo:
        macro.map("aaz")
    message = str(excinfo.value)
    assert "'z'" in message
    assert "upper" in message
    assert "index 2" in message


def test_identity_macro() -> None:
    macro = IdentityMacro()
    assert macro.name == "id"
    assert macro.map("\0any\ttext") == "\0any\ttext"
    assert list(macro) == []


def test_macro_file_reads_both_notations(write_macros: Callable[..., Path]) -> None:
    path = write_macros(
        {
            "upper": {"a": "A", "b": "B"},
            "fancy": {"keys": "ab", "values": "XY"},
        }
    )
    macros = {macro.name: macro for macro in MacroFile(path)}
    assert macros["upper"].map("ab") == "AB"
    assert macros["fancy"].map("ba") == "YX"
    assert len(MacroFile(path)) == 2


@pytest.mark.parametrize(
    "body",
    [
        {"keys": "abc", "values": "XY"},
        {"keys": "", "values": ""},
        {"a": "AB"},
        {},
    ],
)
def test_malformed_macro_is_rejected(
    write_macros: Callable[..., Path], body: dict[str, str]
) -> None:
    path = write_macros({"broken": body})
    with pytest.raises(MacroDefinitionError):
        MacroFile(path)


def test_missing_macro_file(tmp_path: Path) -> None:
    with pytest.raises(MacroDefinitionError):
        MacroFile(tmp_path / "missing.yaml")


def test_file_without_macros(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("other: 1\n", encoding="utf-8")
    with pytest.raises(MacroDefinitionError, match="No macros"):
        MacroFile(path)


def test_duplicate_macro_names_are_rejected() -> None:
    with pytest.raises(MacroDefinitionError):
        index_macros([SimpleMacro("a"), SimpleMacro("a")])
