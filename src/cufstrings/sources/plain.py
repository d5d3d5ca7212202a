"""Plain-text record source.

Each record starts with a line of the form ``{key} text``. Following lines
continue the value of the current record and are joined with line feeds, an
empty line contributes an empty line to the value. A line starting with the
comment leader (``¬`` by default) ends the current record; lines outside any
record are ignored. A key without closing brace takes the rest of its line.

```text
¬ greeting records
{hello} Hello,
world!
{bye} Goodbye.
```
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..compiler.raw import compile_record
from ..core.config import CompileOptions
from ..core.diagnostics import DiagnosticEmitter
from ..core.exceptions import ConfigurationError
from ..mapping.base import StringMapping
from .records import StringsCollector
from .resolvers import KeyResolver


logger = logging.getLogger(__name__)

KEY_OPEN = "{"
KEY_CLOSE = "}"
LINE_SEPARATOR = "\n"


def split_key_line(line: str) -> tuple[str, str | None]:
    """Return the key and the trailing text of a ``{key} text`` line.

    The text is ``None`` when the key has no closing brace.
    """
    close = line.find(KEY_CLOSE)
    if close == -1:
        return line[1:], None
    return line[1:close], line[close + 1 :]


class PlainSource:
    """Feeder reading records from a plain-text file."""

    def __init__(
        self,
        path: Path,
        resolver: KeyResolver,
        options: CompileOptions | None = None,
        *,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.path = Path(path)
        self.resolver = resolver
        self.options = options or CompileOptions()
        self.emitter = emitter
        self.comment_leader = self.options.comment_leader
        self._key: str | None = None
        self._mapping: StringMapping | None = None
        self._lines = 0

    def _start(self, writer: StringsCollector, key: str, text: str | None) -> None:
        self._finish(writer)
        mapping = self.resolver.for_key(key)
        mapping.select(self.resolver.get_macro(key), key)
        self._key = key
        self._mapping = mapping
        self._lines = 0
        if text is not None:
            self._append(text)

    def _append(self, text: str) -> None:
        if self._mapping is None:
            return
        if self._lines:
            text = LINE_SEPARATOR + text
        self._mapping.append_string(text, self._key)
        self._lines += 1

    def _finish(self, writer: StringsCollector) -> None:
        if self._key is None or self._mapping is None:
            return
        key, mapping = self._key, self._mapping
        self._key = None
        self._mapping = None
        writer.key(key)
        writer.value(compile_record(self.options, mapping, key, emitter=self.emitter))

    def deliver_events(self, writer: StringsCollector) -> None:
        try:
            handle = self.path.open(encoding=self.options.source_encoding)
        except OSError as exc:
            raise ConfigurationError(f"Unable to read plain source '{self.path}': {exc}") from exc
        with handle:
            for raw_line in handle:
                line = raw_line.rstrip("\r\n")
                if line.startswith(KEY_OPEN):
                    self._start(writer, *split_key_line(line))
                elif line.startswith(self.comment_leader):
                    self._finish(writer)
                elif self._key is not None:
                    self._append(line)
        self._finish(writer)
        logger.debug("Read %d records from %s", len(writer), self.path)

    def close(self) -> None:
        self._key = None
        self._mapping = None


__all__ = ["PlainSource", "split_key_line"]
