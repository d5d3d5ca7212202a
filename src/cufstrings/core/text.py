"""Text helpers shared by mappings and the post-processor."""

from __future__ import annotations


ESCAPE = "\\"
ESCAPE_SEQUENCES: dict[str, str] = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "0": "\0",
    ESCAPE: ESCAPE,
}
# Literal control characters are stripped before escape sequences are expanded.
STRIPPED_CHARACTERS = frozenset("\r\n\t\0")


def substitute_escapes(text: str) -> str:
    """Strip literal control characters, then expand escape sequences.

    Unknown sequences are kept verbatim and a trailing lone backslash survives.
    """
    cleaned = "".join(char for char in text if char not in STRIPPED_CHARACTERS)
    parts: list[str] = []
    index = 0
    length = len(cleaned)
    while index < length:
        char = cleaned[index]
        if char != ESCAPE:
            parts.append(char)
            index += 1
            continue
        if index + 1 >= length:
            parts.append(ESCAPE)
            break
        code = cleaned[index + 1]
        parts.append(ESCAPE_SEQUENCES.get(code, ESCAPE + code))
        index += 2
    return "".join(parts)


def context_string(text: str, index: int, length: int = 9) -> str:
    """Return up to ``length`` characters of ``text`` leading up to and including ``index``."""
    stop = index + 1
    return text[max(0, stop - length) : stop]


def describe_character(char: str) -> str:
    """Return a printable description of a single character."""
    if char.isprintable() and not char.isspace():
        return f"'{char}'"
    return f"U+{ord(char):04X}"


__all__ = [
    "ESCAPE",
    "ESCAPE_SEQUENCES",
    "context_string",
    "describe_character",
    "substitute_escapes",
]
