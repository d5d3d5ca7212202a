"""Control characters reserved by the Strings compiler."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING


if TYPE_CHECKING:  # pragma: no cover - typing only
    from .base import StringMapping


class ControlCharacter(Enum):
    """Characters with special meaning to the post-processor.

    Members are declared in matching priority order: when a mapping disguises
    several reserved characters as the same output character, the first member
    wins.
    """

    NULL = ("\0", True)
    TAB = ("\t", True)
    NON_BREAKING_SPACE = (" ", False)
    CARRIAGE_RETURN = ("\r", True)
    LINE_FEED = ("\n", True)

    def __init__(self, char: str, fixed: bool) -> None:
        self.char = char
        self.fixed = fixed

    @property
    def label(self) -> str:
        """Return a human readable name for diagnostics."""
        return self.name.replace("_", " ").lower()

    def matches(self, char: str, mapping: StringMapping) -> bool:
        """Return whether ``char`` represents this control character under ``mapping``.

        A reserved character only ever stands for itself: fixed members match it
        literally and the non-breaking space still needs the mapping to produce
        it. Any other character matches a member whose character a loaded macro
        maps onto it.
        """
        if char in _RESERVED:
            if char != self.char:
                return False
            return self.fixed or mapping.mapped_equals(self.char, char)
        return mapping.mapped_equals(self.char, char)

    @classmethod
    def for_mapping_character(
        cls, char: str, mapping: StringMapping
    ) -> ControlCharacter | None:
        """Return the control character represented by ``char``, if any."""
        for control in cls:
            if control.matches(char, mapping):
                return control
        return None

    @classmethod
    def for_macro_character(cls, char: str) -> ControlCharacter | None:
        """Return the control character whose literal value is ``char``."""
        for control in cls:
            if control.char == char:
                return control
        return None

    @classmethod
    def charset(cls) -> frozenset[str]:
        """Return the set of reserved characters."""
        return frozenset(control.char for control in cls)


_RESERVED = ControlCharacter.charset()


__all__ = ["ControlCharacter"]
