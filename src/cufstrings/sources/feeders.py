"""Feeders delivering records to a :class:`StringsCollector`.

Every feeder compiles record values through :func:`compile_record` before
handing them to the writer. In-memory feeders pick the mapping and macro of
each record with a :class:`KeyResolver`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
import logging
from typing import Protocol, runtime_checkable

from ..compiler.raw import compile_record
from ..core.config import CompileOptions
from ..core.diagnostics import DiagnosticEmitter
from ..core.options import FormatOption
from .records import StringsCollector, StringsRecord
from .resolvers import KeyResolver


logger = logging.getLogger(__name__)


@runtime_checkable
class StringsFeeder(Protocol):
    """Source of records."""

    def deliver_events(self, writer: StringsCollector) -> None: ...

    def close(self) -> None: ...


class SimpleStringsFeeder(ABC):
    """Feeder compiling key/value pairs produced by :meth:`records`."""

    def __init__(
        self,
        resolver: KeyResolver,
        options: CompileOptions | None = None,
        *,
        force_order: bool = False,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.resolver = resolver
        self.options = options or CompileOptions()
        self.force_order = force_order
        self.emitter = emitter

    @abstractmethod
    def records(self) -> Iterable[tuple[str, str]]:
        """Return the uncompiled ``(key, value)`` pairs in delivery order."""

    def write_value(self, writer: StringsCollector, key: str, value: str) -> None:
        mapping = self.resolver.for_key(key)
        mapping.select(self.resolver.get_macro(key), key)
        mapping.append_string(value, key)
        writer.value(compile_record(self.options, mapping, key, emitter=self.emitter))

    def deliver_events(self, writer: StringsCollector) -> None:
        if self.force_order:
            writer.set_format(FormatOption.ORDERED)
        for key, value in self.records():
            writer.key(key)
            self.write_value(writer, key, value)

    def close(self) -> None:
        return


class MapSource(SimpleStringsFeeder):
    """Feeder over a mapping, in its iteration order."""

    def __init__(
        self,
        values: Mapping[str, str],
        resolver: KeyResolver,
        options: CompileOptions | None = None,
        *,
        force_order: bool = False,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        super().__init__(resolver, options, force_order=force_order, emitter=emitter)
        self.values = values

    def records(self) -> Iterator[tuple[str, str]]:
        return iter(self.values.items())


class IteratorSource(SimpleStringsFeeder):
    """Feeder over an iterable of records or ``(key, value)`` pairs."""

    def __init__(
        self,
        items: Iterable[StringsRecord | tuple[str, str]],
        resolver: KeyResolver,
        options: CompileOptions | None = None,
        *,
        force_order: bool = False,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        super().__init__(resolver, options, force_order=force_order, emitter=emitter)
        self.items = items

    def records(self) -> Iterator[tuple[str, str]]:
        for item in self.items:
            if isinstance(item, StringsRecord):
                yield item.key, item.value
            else:
                key, value = item
                yield key, value


class EditorSource(IteratorSource):
    """Feeder rewriting selected records of an existing record stream.

    Records whose key appears in ``edits`` are compiled from the edited text,
    all other values are passed through as they are.
    """

    def __init__(
        self,
        edits: Mapping[str, str],
        items: Iterable[StringsRecord | tuple[str, str]],
        resolver: KeyResolver,
        options: CompileOptions | None = None,
        *,
        force_order: bool = False,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        super().__init__(items, resolver, options, force_order=force_order, emitter=emitter)
        self.edits = edits

    def write_value(self, writer: StringsCollector, key: str, value: str) -> None:
        edit = self.edits.get(key)
        if edit is None:
            writer.value(value)
            return
        logger.debug("Replacing value of key '%s'", key)
        super().write_value(writer, key, edit)


def collect_records(
    feeder: StringsFeeder,
    options: CompileOptions | None = None,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> StringsCollector:
    """Run ``feeder`` into a new collector and close it afterwards."""
    writer = StringsCollector(options, emitter=emitter)
    try:
        feeder.deliver_events(writer)
    finally:
        feeder.close()
    return writer


__all__ = [
    "EditorSource",
    "IteratorSource",
    "MapSource",
    "SimpleStringsFeeder",
    "StringsFeeder",
    "collect_records",
]
