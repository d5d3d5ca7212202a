"""Record sink receiving compiled key/value pairs from a feeder.

Feeders call :meth:`StringsCollector.key` and :meth:`StringsCollector.value`
alternately, once per record. The record stream format may only be chosen
before the first key is written:

`keyed`
: records are addressed by key, keys must be unique.

`plainkeys`
: keys are kept alongside values but carry no lookup table.

`ordered`
: records are addressed by position, keys are informational only.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
import logging

from ..core.config import CompileOptions
from ..core.diagnostics import DiagnosticEmitter, LoggingEmitter
from ..core.exceptions import EmptyStringError, FormatError
from ..core.options import EmptyStringOption, FormatOption


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StringsRecord:
    """Compiled record."""

    key: str
    value: str


class StringsCollector:
    """Collect the records of one compilation in encounter order."""

    def __init__(
        self,
        options: CompileOptions | None = None,
        *,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        options = options or CompileOptions()
        self._format = options.format
        self.empty_string = options.empty_string
        self.emitter = emitter or LoggingEmitter(logger_obj=logger)
        self.records: list[StringsRecord] = []
        self._lookup: dict[str, int] = {}
        self._pending: str | None = None

    @property
    def format(self) -> FormatOption:
        return self._format

    def set_format(self, value: FormatOption | str) -> None:
        """Select the record stream format; only allowed before the first key."""
        fmt = value if isinstance(value, FormatOption) else FormatOption.parse(value)
        if self.records or self._pending is not None:
            raise FormatError(
                f"Cannot switch format to '{fmt.value}' after records have been written"
            )
        self._format = fmt

    def _check_empty(self, text: str, role: str, subject: str | None) -> None:
        if text:
            return
        where = f" for key '{subject}'" if subject is not None else ""
        message = f"Empty {role}{where} (record {len(self.records)})"
        match self.empty_string:
            case EmptyStringOption.ENABLE:
                return
            case EmptyStringOption.VALUE_ONLY if role == "value":
                return
            case EmptyStringOption.WARNING:
                self.emitter.warning(message)
            case _:
                raise EmptyStringError(message)

    def key(self, key: str) -> None:
        if self._pending is not None:
            raise FormatError(f"Key '{key}' written before a value for key '{self._pending}'")
        if self._format is not FormatOption.ORDERED:
            self._check_empty(key, "key", None)
        if self._format is FormatOption.KEYED and key in self._lookup:
            raise FormatError(f"Duplicate key '{key}'")
        self._pending = key

    def value(self, value: str) -> None:
        key = self._pending
        if key is None:
            raise FormatError("Value written without a key")
        self._check_empty(value, "value", key)
        if self._format is FormatOption.KEYED:
            self._lookup[key] = len(self.records)
        self.records.append(StringsRecord(key, value))
        self._pending = None

    @property
    def lookup(self) -> dict[str, int]:
        """Return the record index of each key, empty unless the format is keyed."""
        return dict(self._lookup)

    def get(self, key: str) -> str | None:
        for record in self.records:
            if record.key == key:
                return record.value
        return None

    def as_dict(self) -> dict[str, str]:
        return {record.key: record.value for record in self.records}

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[StringsRecord]:
        return iter(self.records)


__all__ = [
    "EmptyStringOption",
    "FormatOption",
    "StringsCollector",
    "StringsRecord",
]
