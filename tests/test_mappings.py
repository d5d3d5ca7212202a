from __future__ import annotations

from pathlib import Path

import pytest

from cufstrings.core.exceptions import ConfigurationError, MappingError
from cufstrings.core.text import context_string, describe_character, substitute_escapes
from cufstrings.mapping.base import (
    BasicMapping,
    EscapeMapping,
    IdentityMapping,
    layout_capability,
)
from cufstrings.mapping.macros import IdentityMacro, SimpleMacro
from cufstrings.mapping.width import WidthMapping


def test_mapping_session_drains_buffer(upper_macros: Path) -> None:
    mapping = BasicMapping(upper_macros)
    mapping.select("upper", "greeting")
    mapping.append_string("abc", "greeting")
    mapping.append_string(" def", "greeting")
    assert mapping.get_mapped_string("greeting") == "ABC DEF"
    assert mapping.get_mapped_string("greeting") == ""


def test_select_unknown_macro(upper_macros: Path) -> None:
    mapping = BasicMapping(upper_macros)
    with pytest.raises(MappingError, match="no such macro 'lower'") as excinfo:
        mapping.select("lower", "title")
    assert excinfo.value.key == "title"


def test_append_requires_selection() -> None:
    mapping = BasicMapping([IdentityMacro()])
    with pytest.raises(MappingError, match="no macro selected"):
        mapping.append_string("text", "k")


def test_macro_error_carries_key(upper_macros: Path) -> None:
    mapping = BasicMapping(upper_macros)
    mapping.select("upper", "title")
    with pytest.raises(MappingError) as excinfo:
        mapping.append_string("xyz", "title")
    assert "title" in str(excinfo.value)
    assert "'x'" in str(excinfo.value)


def test_mapped_equals_scans_all_macros(upper_macros: Path) -> None:
    mapping = BasicMapping(upper_macros)
    assert mapping.mapped_equals("a", "A")
    assert mapping.mapped_equals("_", " ")
    assert not mapping.mapped_equals("a", "B")
    assert mapping.macro_names == ("upper", "spaced")


def test_escape_mapping_expands_sequences() -> None:
    mapping = EscapeMapping([IdentityMacro()])
    mapping.select("id", None)
    mapping.append_string("a\\tb\\nc\\\\d\nline", None)
    assert mapping.get_mapped_string(None) == "a\tb\nc\\dline"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("\\0", "\0"),
        ("\\r\\n", "\r\n"),
        ("\\q", "\\q"),
        ("end\\", "end\\"),
        ("lit\teral\r", "literal"),
    ],
)
def test_substitute_escapes(text: str, expected: str) -> None:
    assert substitute_escapes(text) == expected


def test_context_string_ends_at_index() -> None:
    assert context_string("abcdefghijkl", 10) == "cdefghijk"
    assert context_string("abc", 1) == "ab"
    assert describe_character("\t") == "U+0009"
    assert describe_character("x") == "'x'"


def test_identity_mapping_process_attribute() -> None:
    mapping = IdentityMapping("identity")
    (key,) = list(mapping)
    assert key.name == "process"
    assert not key.required

    key.set("false")
    mapping.select(IdentityMapping.MACRO_NAME, None)
    mapping.append_string("a\\tb", None)
    assert mapping.get_mapped_string(None) == "a\\tb"

    with pytest.raises(ConfigurationError):
        key.set("maybe")


def test_layout_capability() -> None:
    assert layout_capability(BasicMapping([SimpleMacro("m")])) is None
    width = WidthMapping([IdentityMacro()], "w")
    assert layout_capability(width) is width
