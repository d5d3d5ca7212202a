"""Policy enumerations consulted while compiling Strings records.

`NullCharacterOption`
: What to do with NUL characters left in a value after macro mapping.

`LineBreakOption`
: How carriage returns and line feeds are turned into line flushes.

`TabOption`
: Whether tab characters are aligned, dropped silently or dropped with a warning.

`SpaceSequenceOption`
: Whether runs of spaces next to line edges are coalesced or compiled verbatim.

`IgnorableWhitespaceOption`
: What the XML feeder does with whitespace the parser reports as ignorable.

`FormatOption`
: Shape of the record stream handed to the Strings writer.

`EmptyStringOption`
: Whether empty keys or values are accepted by the record sink.
"""

from __future__ import annotations

from enum import Enum


class _PolicyOption(str, Enum):
    """Shared parsing helpers for policy enumerations."""

    @classmethod
    def parse(cls, value: object) -> _PolicyOption:
        """Return the member matching ``value`` by value or name, ignoring case."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().casefold()
        for member in cls:
            if text in {member.value, member.name.casefold()}:
                return member
        choices = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid {cls.__name__} value '{value}' (expected one of: {choices})")


class NullCharacterOption(_PolicyOption):
    """Handling of NUL characters in mapped output."""

    ENABLE = "enable"
    DISABLE = "disable"
    DISCARD = "discard"


class LineBreakOption(_PolicyOption):
    """Handling of carriage return and line feed characters."""

    DISCARD = "discard"
    IGNORE = "ignore"
    KEEP = "keep"
    CONVERT = "convert"
    NORMALIZE = "normalize"


class TabOption(_PolicyOption):
    """Handling of tab characters."""

    DISCARD = "discard"
    IGNORE = "ignore"
    KEEP = "keep"


class SpaceSequenceOption(_PolicyOption):
    """Handling of space sequences bordering control characters or line edges."""

    COALESCE = "coalesce"
    COMPILE = "compile"


class IgnorableWhitespaceOption(_PolicyOption):
    """Handling of ignorable whitespace reported by the XML parser."""

    IGNORE = "ignore"
    WARNING = "warning"
    COMPILE = "compile"


class FormatOption(_PolicyOption):
    """Layout of the record stream consumed by the Strings writer."""

    KEYED = "keyed"
    PLAIN_KEYS = "plainkeys"
    ORDERED = "ordered"


class EmptyStringOption(_PolicyOption):
    """Acceptance of empty keys and values."""

    ENABLE = "enable"
    VALUE_ONLY = "valueonly"
    WARNING = "warning"
    DISABLE = "disable"


__all__ = [
    "EmptyStringOption",
    "FormatOption",
    "IgnorableWhitespaceOption",
    "LineBreakOption",
    "NullCharacterOption",
    "SpaceSequenceOption",
    "TabOption",
]
