from __future__ import annotations

from collections.abc import Callable
import logging
from pathlib import Path

import pytest

from cufstrings.core.exceptions import ConfigurationError
from cufstrings.fonts.metrics import WidthTable
from cufstrings.mapping.base import NO_BREAK
from cufstrings.mapping.macros import IdentityMacro
from cufstrings.mapping.width import DEFAULT_BLOCK_SIZE, WidthMapping
from cufstrings.sources.resolvers import MapConfiguration, configure_mapping


def test_characters_fit_until_width_is_exceeded(
    width_mapping: Callable[..., WidthMapping],
) -> None:
    mapping = width_mapping(3)
    assert [mapping.layout_char(char) for char in "aaa"] == [NO_BREAK] * 3
    assert mapping.layout_char("a") == 3


def test_break_index_follows_last_break_character(
    width_mapping: Callable[..., WidthMapping],
) -> None:
    mapping = width_mapping(3)
    results = [mapping.layout_char(char) for char in "ab c"]
    assert results == [NO_BREAK, NO_BREAK, NO_BREAK, 3]


def test_custom_break_characters(width_mapping: Callable[..., WidthMapping]) -> None:
    mapping = width_mapping(3)
    mapping.breaks = ("-",)
    results = [mapping.layout_char(char) for char in "a-bc"]
    assert results == [NO_BREAK, NO_BREAK, NO_BREAK, 2]


def test_character_opening_a_line_never_breaks() -> None:
    mapping = WidthMapping([IdentityMacro()], "w")
    mapping.use_metrics(WidthTable({"W": 10}, default=1))
    mapping.width = 4
    assert mapping.layout_char("W") == NO_BREAK
    assert mapping.layout_char("a") == 1


def test_layout_resets_line_state(width_mapping: Callable[..., WidthMapping]) -> None:
    mapping = width_mapping(2)
    for char in "ab":
        mapping.layout_char(char)
    assert mapping.layout("ab") == "ab"
    assert (mapping.cursor, mapping.position) == (0, 0)


def test_advance_measures_carried_text(width_mapping: Callable[..., WidthMapping]) -> None:
    mapping = width_mapping(10)
    mapping.advance("abc")
    assert (mapping.cursor, mapping.position, mapping.break_index) == (3, 3, 3)


def test_indent_reaches_next_tab_stop(width_mapping: Callable[..., WidthMapping]) -> None:
    mapping = width_mapping(10, block_size=4)
    mapping.layout_char("a")
    assert mapping.indent() == "\t\t\t"
    assert mapping.cursor == 4
    assert mapping.indent() == "\t\t\t\t"
    assert mapping.cursor == 8
    assert mapping.indent() is None


def test_indent_honours_tab_glyph_width(caplog: pytest.LogCaptureFixture) -> None:
    mapping = WidthMapping([IdentityMacro()], "w")
    with caplog.at_level(logging.WARNING):
        mapping.use_metrics(WidthTable({"\t": 2}, default=1))
    assert any("Tab glyph" in record.message for record in caplog.records)
    mapping.width = 10
    mapping.block_size = 4
    assert mapping.indent() == "\t\t"
    mapping.layout("")
    mapping.layout_char("a")
    assert mapping.indent() is None


def test_zero_width_tab_glyph_is_rejected() -> None:
    mapping = WidthMapping([IdentityMacro()], "w")
    with pytest.raises(ConfigurationError, match="tab glyph"):
        mapping.use_metrics(WidthTable({}, default=0))


def test_unconfigured_mapping_cannot_lay_out() -> None:
    mapping = WidthMapping([IdentityMacro()], "w")
    assert mapping.block_size == DEFAULT_BLOCK_SIZE
    with pytest.raises(ConfigurationError, match="before it was configured"):
        mapping.layout_char("a")


def test_configuration_keys(unit_table: Path) -> None:
    mapping = WidthMapping([IdentityMacro()], "w", base_path=unit_table.parent)
    names = {key.name: key.required for key in mapping}
    assert names == {"font": True, "width": True, "tabWidth": True, "breaks": False}

    configuration = MapConfiguration()
    configuration.put("w", "font", unit_table.name)
    configuration.put("w", "width", "12")
    configuration.put("w", "tabWidth", "3")
    configuration.put("w", "breaks", " \\t-")
    configure_mapping(mapping, configuration)

    assert mapping.width == 12
    assert mapping.block_size == 3
    assert mapping.breaks == (" ", "\t", "-")
    assert mapping.measure("abc") == 3


@pytest.mark.parametrize(
    ("name", "value"),
    [("width", "wide"), ("width", "0"), ("tabWidth", "-2"), ("font", "missing.yaml")],
)
def test_invalid_attribute_names_attribute(name: str, value: str) -> None:
    mapping = WidthMapping([IdentityMacro()], "w")
    (key,) = [key for key in mapping if key.name == name]
    with pytest.raises(ConfigurationError) as excinfo:
        key.set(value)
    assert f"'{name}'" in str(excinfo.value)
    assert value in str(excinfo.value)
