"""Exception hierarchy for the Strings compilation pipeline."""

from __future__ import annotations


class StringsCompileError(RuntimeError):
    """Base exception for Strings compilation failures."""


class ConfigurationError(StringsCompileError):
    """Raised when options, attributes or resolvers are misconfigured."""


class MacroError(StringsCompileError):
    """Raised when a macro cannot map a character of its input."""


class MacroDefinitionError(ConfigurationError):
    """Raised when a macro-definition resource is missing or malformed."""


class MetricsError(ConfigurationError):
    """Raised when glyph metrics cannot be loaded."""


class InvalidURIError(ConfigurationError):
    """Raised when a namespace URI cannot be resolved to a mapping."""

    def __init__(self, uri: str | None) -> None:
        super().__init__(f"Unable to resolve namespace URI '{uri}' to a string mapping")
        self.uri = uri


class FormatError(StringsCompileError):
    """Raised when the output format is invalid or changed mid-document."""


class EmptyStringError(FormatError):
    """Raised when an empty key or value is rejected by the record sink."""


class MappingError(StringsCompileError):
    """Raised when text for a record cannot be mapped."""

    def __init__(self, key: str | None, message: str) -> None:
        super().__init__(f"Unable to map text for key '{key}': {message}")
        self.key = key


class ValidationError(StringsCompileError):
    """Raised when mapped text violates a post-processing policy."""

    def __init__(
        self,
        key: str | None,
        index: int,
        context: str,
        message: str,
    ) -> None:
        super().__init__(
            f"Invalid value for key '{key}' at index {index} (near {context!r}): {message}"
        )
        self.key = key
        self.index = index
        self.context = context


class DocumentStructureError(StringsCompileError):
    """Raised when a source document does not follow the expected structure."""

    def __init__(
        self,
        message: str,
        *,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        location = f" (line {line}, column {column})" if line is not None else ""
        super().__init__(f"{message}{location}")
        self.line = line
        self.column = column


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "ConfigurationError",
    "DocumentStructureError",
    "EmptyStringError",
    "FormatError",
    "InvalidURIError",
    "MacroDefinitionError",
    "MacroError",
    "MappingError",
    "MetricsError",
    "StringsCompileError",
    "ValidationError",
    "exception_hint",
    "exception_messages",
]
