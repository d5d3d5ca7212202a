"""String mappings: per-record macro application with an append buffer.

A mapping session starts with :meth:`StringMapping.select`, accumulates text
through one or more :meth:`StringMapping.append_string` calls and ends when
:meth:`StringMapping.get_mapped_string` drains the buffer::

    mapping.select("upper", "greeting")
    mapping.append_string("hello", "greeting")
    mapping.get_mapped_string("greeting")  # "HELLO"
    mapping.get_mapped_string("greeting")  # ""

Capabilities are expressed as mixins: :class:`ConfiguredMapping` exposes
attributes declared on the source document, :class:`LayoutMapping` computes
line breaks and tab alignment for the post-processor.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from ..core.exceptions import ConfigurationError, MacroError, MappingError
from ..core.text import substitute_escapes
from .macros import IdentityMacro, Macro, MacroFile, index_macros


NO_BREAK = -1


class StringMapping(ABC):
    """Callbacks used by the compiler to transform record text."""

    @abstractmethod
    def select(self, macro: str, ctx: str | None) -> None:
        """Select the macro applied by subsequent appends."""

    @abstractmethod
    def append_string(self, text: str, ctx: str | None) -> None:
        """Map ``text`` through the current macro and buffer the result."""

    @abstractmethod
    def get_mapped_string(self, ctx: str | None) -> str:
        """Return and clear the buffered mapped text."""

    @abstractmethod
    def mapped_equals(self, original: str, mapped: str) -> bool:
        """Return whether some macro maps ``original`` onto ``mapped``."""


@dataclass(frozen=True, slots=True)
class ConfigurationKey:
    """Attribute used to configure a :class:`ConfiguredMapping`."""

    name: str
    uri: str
    required: bool
    setter: Callable[[str | None], None]

    def set(self, value: str | None) -> None:
        self.setter(value)


class ConfiguredMapping(ABC):
    """Capability of mappings configured from source document attributes."""

    @abstractmethod
    def configuration_keys(self) -> Iterable[ConfigurationKey]:
        """Return the attributes this mapping understands."""

    def __iter__(self) -> Iterator[ConfigurationKey]:
        return iter(tuple(self.configuration_keys()))


class LayoutMapping(ABC):
    """Capability of mappings that lay out text for the post-processor."""

    NO_BREAK = NO_BREAK

    @abstractmethod
    def layout_char(self, char: str) -> int:
        """Account for ``char`` on the current line.

        Returns the index within the current line where it should be broken,
        or :data:`NO_BREAK` when the character fits.
        """

    @abstractmethod
    def layout(self, line: str) -> str:
        """Return the finished line, resetting line state."""

    @abstractmethod
    def indent(self) -> str | None:
        """Return the text aligning the cursor to the next tab stop, or ``None``."""

    @abstractmethod
    def advance(self, precomputed: str) -> None:
        """Resynchronise line state with text already placed on a fresh line."""

    @abstractmethod
    def pass_through(self) -> None:
        """Account for a character copied to the current line without a layout event."""


def layout_capability(mapping: StringMapping) -> LayoutMapping | None:
    """Return ``mapping`` when it can lay out text, otherwise ``None``."""
    return mapping if isinstance(mapping, LayoutMapping) else None


MacroSource = Path | str | MacroFile | Iterable[Macro]


def _load_macros(source: MacroSource) -> dict[str, Macro]:
    if isinstance(source, (str, Path)):
        source = MacroFile(Path(source))
    return index_macros(source)


class BasicMapping(StringMapping):
    """Mapping applying macros read from a macro-definition resource."""

    def __init__(self, macros: MacroSource) -> None:
        self._macros = _load_macros(macros)
        self._current: Macro | None = None
        self._buffer: list[str] = []
        self._equivalents: dict[tuple[str, str], bool] = {}

    @property
    def macro_names(self) -> tuple[str, ...]:
        return tuple(self._macros)

    @property
    def current(self) -> Macro | None:
        return self._current

    def select(self, macro: str, ctx: str | None) -> None:
        candidate = self._macros.get(macro)
        if candidate is None:
            raise MappingError(ctx, f"no such macro '{macro}'")
        self._current = candidate

    def append_string(self, text: str, ctx: str | None) -> None:
        if self._current is None:
            raise MappingError(ctx, "no macro selected")
        try:
            self._buffer.append(self._current.map(self.process(text)))
        except MacroError as exc:
            raise MappingError(ctx, str(exc)) from exc

    def process(self, text: str) -> str:
        """Hook applied to input text before it is mapped."""
        return text

    def get_mapped_string(self, ctx: str | None) -> str:
        text = "".join(self._buffer)
        self._buffer = []
        return text

    def mapped_equals(self, original: str, mapped: str) -> bool:
        cache_key = (original, mapped)
        cached = self._equivalents.get(cache_key)
        if cached is None:
            cached = any(macro.map_char(original) == mapped for macro in self._macros.values())
            self._equivalents[cache_key] = cached
        return cached


class EscapeMapping(BasicMapping):
    """Mapping requiring explicit escape sequences for control characters."""

    def process(self, text: str) -> str:
        return substitute_escapes(text)


_TRUE_VALUES = frozenset({"true", "yes", "on", "1"})
_FALSE_VALUES = frozenset({"false", "no", "off", "0"})


def parse_boolean(value: str) -> bool:
    text = value.strip().casefold()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"'{value}' is not a boolean")


class IdentityMapping(EscapeMapping, ConfiguredMapping):
    """Mapping that leaves text untouched apart from escape sequences.

    Escape processing can be disabled with a false ``process`` attribute.
    """

    MACRO_NAME = IdentityMacro.NAME

    def __init__(self, uri: str) -> None:
        super().__init__([IdentityMacro()])
        self.uri = uri
        self.process_escapes = True

    def process(self, text: str) -> str:
        return super().process(text) if self.process_escapes else text

    def _set_process(self, value: str | None) -> None:
        if value is None:
            return
        try:
            self.process_escapes = parse_boolean(value)
        except ValueError as exc:
            raise ConfigurationError(
                f"Invalid value '{value}' for attribute 'process' of {self.uri}: {exc}"
            ) from exc

    def configuration_keys(self) -> Iterable[ConfigurationKey]:
        yield ConfigurationKey("process", self.uri, False, self._set_process)


__all__ = [
    "NO_BREAK",
    "BasicMapping",
    "ConfigurationKey",
    "ConfiguredMapping",
    "EscapeMapping",
    "IdentityMapping",
    "LayoutMapping",
    "StringMapping",
    "layout_capability",
    "parse_boolean",
]
