"""Post-processing of mapped record text.

A :class:`RawHandler` session consumes the mapped text of one record and
produces the value handed to the Strings writer. Every character is matched
against :class:`~cufstrings.mapping.control.ControlCharacter` (seeing through
macros that disguise reserved characters) and dispatched to a policy handler:

`NUL`
: kept, dropped with a warning, or rejected with :class:`ValidationError`.

`TAB`
: aligned to the next tab stop of the layout mapping, or dropped.

`space`
: kept as a break opportunity, or coalesced next to line edges and other
  control characters.

`CR` / `LF`
: turned into line flushes, normalised, or dropped.

Every other character is a layout event: the layout mapping (when the mapping
has that capability) decides whether it still fits on the current line. When
it does not, the output after the last break opportunity is cut, the finished
line is flushed, and the cut text starts the next line.
"""

from __future__ import annotations

import logging

from ..core.config import CompileOptions
from ..core.diagnostics import DiagnosticEmitter, LoggingEmitter
from ..core.exceptions import StringsCompileError, ValidationError
from ..core.options import LineBreakOption, NullCharacterOption, SpaceSequenceOption, TabOption
from ..core.text import context_string, describe_character
from ..mapping.base import NO_BREAK, LayoutMapping, StringMapping, layout_capability
from ..mapping.control import ControlCharacter
from .buffer import OutputCursor


logger = logging.getLogger(__name__)

LINE_FEED = ControlCharacter.LINE_FEED.char


class RawHandler:
    """Validate and lay out the mapped text of a single record."""

    def __init__(
        self,
        options: CompileOptions,
        mapping: StringMapping,
        key: str | None,
        *,
        emitter: DiagnosticEmitter | None = None,
        raw: str | None = None,
    ) -> None:
        self.options = options
        self.mapping = mapping
        self.key = key
        self.raw = mapping.get_mapped_string(key) if raw is None else raw
        self.length = len(self.raw)
        self.buffer = OutputCursor(self.raw)
        self.layout_mapping: LayoutMapping | None = layout_capability(mapping)
        self.emitter = emitter or LoggingEmitter(logger_obj=logger)
        self._result: str | None = None

    # -- diagnostics -------------------------------------------------------

    def context(self, index: int) -> str:
        return context_string(self.raw, index, self.options.context_length)

    def _warn(self, index: int, message: str) -> None:
        self.emitter.warning(
            f"{message} in value for key '{self.key}' at index {index} "
            f"(near {self.context(index)!r})"
        )

    # -- line operations ---------------------------------------------------

    def _control(self, char: str) -> ControlCharacter | None:
        return ControlCharacter.for_mapping_character(char, self.mapping)

    def trim_line(self, line: str) -> str:
        """Strip spaces from both ends of ``line`` when spaces are coalesced."""
        if self.options.space_sequence is SpaceSequenceOption.COMPILE:
            return line
        start, stop = 0, len(line)
        while start < stop and self._control(line[start]) is ControlCharacter.NON_BREAKING_SPACE:
            start += 1
        while stop > start and self._control(line[stop - 1]) is ControlCharacter.NON_BREAKING_SPACE:
            stop -= 1
        return line[start:stop]

    def _close_line(self, index: int) -> None:
        line = self.trim_line(self.buffer.line)
        if self.layout_mapping is not None:
            line = self.layout_mapping.layout(line)
        self.buffer.substitute(index, line + LINE_FEED, self.buffer.newline)
        self.buffer.start_line()

    def layout_line(self, index: int) -> None:
        """Flush the current line, replacing the raw character at ``index``."""
        self.buffer.flush(index)
        self._close_line(index)

    def layout_stop(self) -> None:
        """Flush the last line without terminating it."""
        self.layout_line(self.length)
        self.buffer.drop_last()

    def layout_event(self, index: int, char: str) -> None:
        """Place ``char``, wrapping the current line when it does not fit."""
        layout = self.layout_mapping
        if layout is None:
            self.buffer.replace(index, char)
            return
        offset = layout.layout_char(char)
        if offset == NO_BREAK:
            self.buffer.replace(index, char)
            return

        self.buffer.flush(index)
        tail = self.trim_line(self.buffer.truncate(self.buffer.newline + offset))
        self._close_line(index - 1)
        layout.advance(tail)
        self.buffer.append(tail)
        # the character now opens the new line
        self.event(index, char)

    def pass_through(self) -> None:
        if self.layout_mapping is not None:
            self.layout_mapping.pass_through()

    def layout_tab(self, index: int) -> None:
        layout = self.layout_mapping
        if layout is None:
            return
        indent = layout.indent()
        if indent is None:
            self.layout_line(index)
            return
        self.buffer.skip(index)
        self.buffer.append(indent)

    # -- policy handlers ---------------------------------------------------

    def handle_nulls(self, index: int, option: NullCharacterOption) -> None:
        match option:
            case NullCharacterOption.DISABLE:
                raise ValidationError(
                    self.key, index, self.context(index), "NUL characters are not allowed"
                )
            case NullCharacterOption.DISCARD:
                self._warn(index, "Discarded NUL character")
                self.buffer.skip(index)
            case NullCharacterOption.ENABLE:
                self.pass_through()

    def handle_line_break_cr(self, index: int, option: LineBreakOption) -> None:
        match option:
            case LineBreakOption.CONVERT:
                self._warn(index, "Converted carriage return to line feed")
                self.layout_line(index)
            case LineBreakOption.NORMALIZE:
                last = index == self.length - 1
                if last or self._control(self.raw[index + 1]) is not ControlCharacter.LINE_FEED:
                    self.layout_line(index)
                else:
                    self.buffer.skip(index)
            case LineBreakOption.DISCARD:
                self._warn(index, "Discarded carriage return")
                self.buffer.skip(index)
            case LineBreakOption.IGNORE:
                self.buffer.skip(index)
            case LineBreakOption.KEEP:
                self.pass_through()

    def handle_line_break_lf(self, index: int, option: LineBreakOption) -> None:
        match option:
            case LineBreakOption.DISCARD:
                self._warn(index, "Discarded line feed")
                self.buffer.skip(index)
            case LineBreakOption.IGNORE:
                self.buffer.skip(index)
            case LineBreakOption.CONVERT | LineBreakOption.NORMALIZE | LineBreakOption.KEEP:
                self.layout_line(index)

    def handle_tabs(self, index: int, option: TabOption) -> None:
        match option:
            case TabOption.DISCARD:
                self._warn(index, "Discarded tab character")
                self.buffer.skip(index)
            case TabOption.IGNORE:
                self.buffer.skip(index)
            case TabOption.KEEP:
                self.layout_tab(index)

    def _coalesces_with(self, char: str | None) -> bool:
        if char is None:
            return True
        control = self._control(char)
        return control is not None and control is not ControlCharacter.NULL

    def handle_nbsp(self, index: int, option: SpaceSequenceOption, char: str) -> None:
        match option:
            case SpaceSequenceOption.COMPILE:
                self.layout_event(index, char)
            case SpaceSequenceOption.COALESCE:
                self.buffer.flush(index)
                if (
                    index == self.length - 1
                    or self._coalesces_with(self.buffer.last_char)
                    or self._coalesces_with(self.raw[index + 1])
                ):
                    self.buffer.skip(index)
                else:
                    self.layout_event(index, char)

    # -- driver ------------------------------------------------------------

    def event(self, index: int, char: str) -> None:
        """Dispatch the raw character at ``index``."""
        control = self._control(char)
        try:
            match control:
                case None:
                    self.layout_event(index, char)
                case ControlCharacter.TAB:
                    self.handle_tabs(index, self.options.tab)
                case ControlCharacter.NULL:
                    self.handle_nulls(index, self.options.null_character)
                case ControlCharacter.NON_BREAKING_SPACE:
                    self.handle_nbsp(index, self.options.space_sequence, char)
                case ControlCharacter.CARRIAGE_RETURN:
                    self.handle_line_break_cr(index, self.options.line_break)
                case ControlCharacter.LINE_FEED:
                    self.handle_line_break_lf(index, self.options.line_break)
        except ValidationError:
            raise
        except StringsCompileError as exc:
            label = control.label if control is not None else describe_character(char)
            raise ValidationError(
                self.key, index, self.context(index), f"while handling {label}: {exc}"
            ) from exc

    def run(self) -> str:
        """Post-process the raw text and return the final value."""
        if self._result is None:
            for index, char in enumerate(self.raw):
                self.event(index, char)
            self.buffer.skip(self.length)
            self.layout_stop()
            self._result = self.buffer.text
            self.emitter.event("record_compiled", {"key": self.key, "length": len(self._result)})
        return self._result

    def __str__(self) -> str:
        return self.run()


def compile_record(
    options: CompileOptions,
    mapping: StringMapping,
    key: str | None,
    *,
    emitter: DiagnosticEmitter | None = None,
    raw: str | None = None,
) -> str:
    """Drain ``mapping`` and return the post-processed value for ``key``.

    ``raw`` supplies already drained text; ``mapping`` then only serves
    control character detection and layout.
    """
    return RawHandler(options, mapping, key, emitter=emitter, raw=raw).run()


__all__ = ["LINE_FEED", "RawHandler", "compile_record"]
