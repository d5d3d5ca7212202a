"""Glyph metrics consumed by width-aware layout."""

from cufstrings.fonts.metrics import GlyphMetrics, TrueTypeMetrics, WidthTable, load_metrics


__all__ = ["GlyphMetrics", "TrueTypeMetrics", "WidthTable", "load_metrics"]
