"""Width-aware layout mapping driven by glyph advance widths.

`WidthMapping` tracks the summed advance width of the characters placed on the
current line. When a character no longer fits it reports the most recent break
opportunity so that the post-processor can push the trailing word onto a new
line. Tabs are expanded into as many tab glyphs as needed to reach the next
offset which is both a multiple of the tab-stop block size and of the tab
glyph width.

Configuration attributes (declared in the namespace of the mapping):

`font` (required)
: Glyph metrics file, resolved relative to the source document.

`width` (required)
: Line capacity in layout units.

`tabWidth` (required)
: Tab-stop grid size in layout units.

`breaks` (optional)
: Characters that may end a line, escape sequences allowed. Defaults to the
  non-breaking space.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
import logging
from pathlib import Path

from ..core.exceptions import ConfigurationError, StringsCompileError
from ..core.text import substitute_escapes
from ..fonts.metrics import GlyphMetrics, load_metrics
from .base import (
    NO_BREAK,
    ConfigurationKey,
    ConfiguredMapping,
    EscapeMapping,
    LayoutMapping,
    MacroSource,
)
from .control import ControlCharacter


logger = logging.getLogger(__name__)

DEFAULT_BLOCK_SIZE = 19


def _positive_integer(value: str) -> int:
    number = int(value.strip())
    if number < 1:
        raise ValueError(f"{number} is not a positive integer")
    return number


class WidthMapping(EscapeMapping, ConfiguredMapping, LayoutMapping):
    """Escape mapping which lays out text against a fixed line width."""

    def __init__(
        self,
        macros: MacroSource,
        uri: str,
        *,
        base_path: Path | None = None,
    ) -> None:
        super().__init__(macros)
        self.uri = uri
        self.base_path = base_path
        self.metrics: GlyphMetrics | None = None
        self.width: int | None = None
        self.block_size = DEFAULT_BLOCK_SIZE
        self.breaks: tuple[str, ...] = (ControlCharacter.NON_BREAKING_SPACE.char,)
        self.tab_glyph_width = 0
        # line state
        self.cursor = 0
        self.position = 0
        self.break_index = 0
        self.nobreaks = True

    # -- configuration -----------------------------------------------------

    def use_metrics(self, metrics: GlyphMetrics) -> None:
        """Install the glyph metrics used to measure text."""
        tab_width = metrics.glyph_width(ControlCharacter.TAB.char)
        if tab_width < 1:
            raise ConfigurationError(
                f"The tab glyph must have a positive width for text layout (found {tab_width})"
            )
        if tab_width > 1:
            logger.warning(
                "Tab glyph is %d units wide; tab stops are limited to multiples of it.",
                tab_width,
            )
        self.metrics = metrics
        self.tab_glyph_width = tab_width

    def _resolve_font(self, value: str) -> Path:
        candidate = Path(value).expanduser()
        if not candidate.is_absolute() and self.base_path is not None:
            relative = self.base_path / candidate
            if relative.exists():
                return relative
        return candidate

    def _set_font(self, value: str) -> None:
        self.use_metrics(load_metrics(self._resolve_font(value)))

    def _set_width(self, value: str) -> None:
        self.width = _positive_integer(value)

    def _set_block_size(self, value: str) -> None:
        self.block_size = _positive_integer(value)

    def _set_breaks(self, value: str) -> None:
        characters = tuple(dict.fromkeys(substitute_escapes(value)))
        if not characters:
            raise ValueError("no break characters given")
        self.breaks = characters

    def _attribute(
        self, name: str, required: bool, setter: Callable[[str], None]
    ) -> ConfigurationKey:
        def apply(value: str | None) -> None:
            if value is None:
                return
            try:
                setter(value)
            except (StringsCompileError, ValueError) as exc:
                raise ConfigurationError(
                    f"Invalid value '{value}' for attribute '{name}' of {self.uri}: {exc}"
                ) from exc

        return ConfigurationKey(name, self.uri, required, apply)

    def configuration_keys(self) -> Iterable[ConfigurationKey]:
        yield self._attribute("font", True, self._set_font)
        yield self._attribute("width", True, self._set_width)
        yield self._attribute("tabWidth", True, self._set_block_size)
        yield self._attribute("breaks", False, self._set_breaks)

    def _require_metrics(self) -> GlyphMetrics:
        if self.metrics is None or self.width is None:
            raise ConfigurationError(f"Width mapping {self.uri} is used before it was configured")
        return self.metrics

    # -- layout ------------------------------------------------------------

    def measure(self, text: str) -> int:
        """Return the summed advance width of ``text``."""
        metrics = self._require_metrics()
        return sum(metrics.glyph_width(char) for char in text)

    def is_break(self, char: str) -> bool:
        return any(self.mapped_equals(candidate, char) for candidate in self.breaks)

    def layout_char(self, char: str) -> int:
        metrics = self._require_metrics()
        self.cursor += metrics.glyph_width(char)
        # A character opening an empty line is always placed, however wide.
        if self.position == 0 or self.cursor <= self.width:
            result = NO_BREAK
        else:
            result = self.break_index
        self.position += 1
        if self.is_break(char):
            self.break_index = self.position
            self.nobreaks = False
        if self.nobreaks:
            self.break_index = self.position
        return result

    def tab_count(self) -> int | None:
        """Return the number of tab glyphs reaching the next tab stop, if any fits."""
        self._require_metrics()
        start = self.block_size - (self.cursor % self.block_size)
        capacity = self.width - self.cursor
        for offset in range(start, capacity, self.block_size):
            if offset % self.tab_glyph_width == 0:
                return offset // self.tab_glyph_width
        return None

    def indent(self) -> str | None:
        count = self.tab_count()
        if count is None:
            return None
        self.cursor += count * self.tab_glyph_width
        # Text before the tab must not be pushed to the next line.
        self.position += count
        self.break_index = self.position
        self.nobreaks = True
        return ControlCharacter.TAB.char * count

    def advance(self, precomputed: str) -> None:
        self.cursor = self.measure(precomputed)
        self.position = len(precomputed)
        self.break_index = self.position
        self.nobreaks = True

    def pass_through(self) -> None:
        # occupies an output position but no width
        self.position += 1
        if self.nobreaks:
            self.break_index = self.position

    def layout(self, line: str) -> str:
        self.cursor = 0
        self.position = 0
        self.break_index = 0
        self.nobreaks = True
        return line


__all__ = ["DEFAULT_BLOCK_SIZE", "WidthMapping"]
