"""Post-processing of mapped record text."""

from __future__ import annotations

from cufstrings.compiler.buffer import OutputCursor
from cufstrings.compiler.raw import LINE_FEED, RawHandler, compile_record


__all__ = ["LINE_FEED", "OutputCursor", "RawHandler", "compile_record"]
