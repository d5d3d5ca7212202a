from __future__ import annotations

import pytest

from cufstrings.core.config import CompileOptions
from cufstrings.core.exceptions import FormatError
from cufstrings.core.options import FormatOption
from cufstrings.sources.feeders import EditorSource, IteratorSource, MapSource, collect_records
from cufstrings.sources.records import StringsCollector, StringsRecord
from cufstrings.sources.resolvers import identity_key_resolver


def test_map_source_keeps_mapping_order() -> None:
    feeder = MapSource({"b": "2", "a": "1", "c": "3"}, identity_key_resolver(), force_order=True)
    collector = collect_records(feeder)
    assert [record.key for record in collector] == ["b", "a", "c"]
    assert collector.format is FormatOption.ORDERED


def test_map_source_compiles_values() -> None:
    feeder = MapSource({"k": "  a\\tb  c "}, identity_key_resolver(), CompileOptions(tab="ignore"))
    assert collect_records(feeder).as_dict() == {"k": "ab c"}


def test_force_order_after_first_key_fails() -> None:
    writer = StringsCollector()
    writer.key("a")
    writer.value("1")
    feeder = MapSource({"b": "2"}, identity_key_resolver(), force_order=True)
    with pytest.raises(FormatError):
        feeder.deliver_events(writer)


def test_iterator_source_accepts_records_and_pairs() -> None:
    items = [StringsRecord("a", "x"), ("b", "y")]
    collector = collect_records(IteratorSource(items, identity_key_resolver()))
    assert collector.as_dict() == {"a": "x", "b": "y"}


def test_editor_source_replaces_edited_values_only() -> None:
    existing = [StringsRecord("a", "kept  as is"), StringsRecord("b", "old")]
    feeder = EditorSource({"b": "new\\nvalue"}, existing, identity_key_resolver())
    assert collect_records(feeder).as_dict() == {"a": "kept  as is", "b": "new\nvalue"}
