"""Glyph metrics providers used by width-aware layout.

`WidthTable`
: Advance widths read from a YAML or JSON table. Keys are single characters
  or ``U+XXXX`` code points; characters missing from the table use
  ``default`` (``0`` when omitted).

`TrueTypeMetrics`
: Advance widths read from the ``hmtx`` table of a TrueType/OpenType font via
  fontTools, optionally divided by ``scale`` so that font units line up with
  the layout units of the target display.
"""

from __future__ import annotations

from collections.abc import Mapping
import json
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import yaml

from ..core.exceptions import MetricsError


TABLE_SUFFIXES = frozenset({".yaml", ".yml", ".json"})
FONT_SUFFIXES = frozenset({".ttf", ".otf", ".ttc"})


@runtime_checkable
class GlyphMetrics(Protocol):
    """Lookup of per-character advance widths in layout units."""

    def glyph_width(self, char: str) -> int: ...


def _parse_character(value: Any) -> str:
    if isinstance(value, int):
        return chr(value)
    text = str(value)
    if len(text) == 1:
        return text
    if text.upper().startswith("U+"):
        return chr(int(text[2:], 16))
    raise MetricsError(f"Unsupported glyph key {value!r}; use a character or U+XXXX")


def _parse_width(char: str, value: Any) -> int:
    try:
        width = int(value)
    except (TypeError, ValueError) as exc:
        raise MetricsError(f"Invalid width {value!r} for glyph U+{ord(char):04X}") from exc
    if width < 0:
        raise MetricsError(f"Negative width {width} for glyph U+{ord(char):04X}")
    return width


class WidthTable:
    """Advance widths from an explicit character table."""

    def __init__(
        self,
        widths: Mapping[Any, Any],
        *,
        default: int = 0,
        family: str | None = None,
    ) -> None:
        self.family = family
        self.default = _parse_width("\0", default)
        self._widths = {
            char: _parse_width(char, value)
            for char, value in ((_parse_character(key), value) for key, value in widths.items())
        }

    @classmethod
    def from_file(cls, path: Path) -> WidthTable:
        try:
            text = path.read_text(encoding="utf-8")
            payload = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
        except (OSError, ValueError, yaml.YAMLError) as exc:
            raise MetricsError(f"Unable to read glyph widths from '{path}': {exc}") from exc
        if not isinstance(payload, Mapping) or not isinstance(payload.get("widths"), Mapping):
            raise MetricsError(f"Glyph width table '{path}' must declare a 'widths' mapping")
        return cls(
            payload["widths"],
            default=payload.get("default", 0),
            family=payload.get("family"),
        )

    def glyph_width(self, char: str) -> int:
        return self._widths.get(char, self.default)

    def __len__(self) -> int:
        return len(self._widths)


class TrueTypeMetrics:
    """Advance widths read from a TrueType/OpenType font with fontTools."""

    def __init__(self, path: Path, *, scale: int = 1, font_number: int = 0) -> None:
        from fontTools.ttLib import TTFont, TTLibError

        if scale < 1:
            raise MetricsError(f"Invalid glyph width scale {scale}")
        try:
            font = TTFont(path, fontNumber=font_number, lazy=True)
        except (OSError, TTLibError) as exc:
            raise MetricsError(f"Unable to open font '{path}': {exc}") from exc
        try:
            cmap = font.getBestCmap() or {}
            hmtx = font["hmtx"]
            self._widths = {
                codepoint: hmtx[glyph][0] // scale
                for codepoint, glyph in cmap.items()
                if glyph in hmtx.metrics
            }
        except KeyError as exc:
            raise MetricsError(f"Font '{path}' has no horizontal metrics") from exc
        finally:
            font.close()
        self.path = path

    def glyph_width(self, char: str) -> int:
        return self._widths.get(ord(char), 0)


def load_metrics(path: Path, *, scale: int = 1) -> GlyphMetrics:
    """Load glyph metrics, choosing the provider from the file suffix."""
    path = Path(path)
    if not path.is_file():
        raise MetricsError(f"Glyph metrics file '{path}' does not exist")
    suffix = path.suffix.lower()
    if suffix in TABLE_SUFFIXES:
        return WidthTable.from_file(path)
    if suffix in FONT_SUFFIXES:
        return TrueTypeMetrics(path, scale=scale)
    raise MetricsError(f"Unsupported glyph metrics format '{suffix}' for '{path}'")


__all__ = [
    "FONT_SUFFIXES",
    "TABLE_SUFFIXES",
    "GlyphMetrics",
    "TrueTypeMetrics",
    "WidthTable",
    "load_metrics",
]
