"""Output buffer with the splice primitives used by the post-processor."""

from __future__ import annotations


class OutputCursor:
    """Output accumulator tracking how much of the raw input has been consumed.

    ``mark`` is the index of the first raw character not yet copied to the
    output; ``newline`` is the output offset where the current line begins.
    """

    __slots__ = ("_parts", "mark", "newline", "raw")

    def __init__(self, raw: str) -> None:
        self.raw = raw
        self._parts: list[str] = []
        self.mark = 0
        self.newline = 0

    @property
    def text(self) -> str:
        if len(self._parts) > 1:
            self._parts = ["".join(self._parts)]
        return self._parts[0] if self._parts else ""

    def __len__(self) -> int:
        return len(self.text)

    @property
    def line(self) -> str:
        """Output of the current line."""
        return self.text[self.newline :]

    @property
    def last_char(self) -> str | None:
        text = self.text
        return text[-1] if text else None

    def append(self, text: str) -> None:
        if text:
            self._parts.append(text)

    def flush(self, index: int) -> None:
        """Copy pending raw text up to (excluding) ``index``."""
        if index > self.mark:
            self._parts.append(self.raw[self.mark : index])
            self.mark = index

    def skip(self, index: int) -> None:
        """Copy pending raw text and drop the character at ``index``."""
        self.flush(index)
        self.mark = index + 1

    def replace(self, index: int, char: str) -> None:
        """Copy pending raw text and emit ``char`` instead of the raw character."""
        self.skip(index)
        self.append(char)

    def substitute(self, index: int, text: str, position: int) -> None:
        """Overwrite output from ``position`` with ``text``; resume after ``index``."""
        self._parts = [self.text[:position], text]
        self.mark = index + 1

    def truncate(self, position: int) -> str:
        """Cut the output at ``position`` and return the removed tail."""
        current = self.text
        self._parts = [current[:position]]
        self.newline = min(self.newline, position)
        return current[position:]

    def start_line(self) -> None:
        """Mark the end of the output as the start of a new line."""
        self.newline = len(self)

    def drop_last(self) -> None:
        """Remove the last output character."""
        current = self.text
        if current:
            self._parts = [current[:-1]]
        self.newline = min(self.newline, len(self))


__all__ = ["OutputCursor"]
