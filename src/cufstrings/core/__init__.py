"""Core building blocks shared by mappings, feeders and the post-processor."""

from .config import CompileOptions, build_options, load_options
from .diagnostics import CollectingEmitter, DiagnosticEmitter, LoggingEmitter, NullEmitter
from .exceptions import (
    ConfigurationError,
    DocumentStructureError,
    EmptyStringError,
    FormatError,
    InvalidURIError,
    MacroDefinitionError,
    MacroError,
    MappingError,
    MetricsError,
    StringsCompileError,
    ValidationError,
)
from .options import (
    EmptyStringOption,
    FormatOption,
    IgnorableWhitespaceOption,
    LineBreakOption,
    NullCharacterOption,
    SpaceSequenceOption,
    TabOption,
)


__all__ = [
    "CollectingEmitter",
    "CompileOptions",
    "ConfigurationError",
    "DiagnosticEmitter",
    "DocumentStructureError",
    "EmptyStringError",
    "EmptyStringOption",
    "FormatError",
    "FormatOption",
    "IgnorableWhitespaceOption",
    "InvalidURIError",
    "LineBreakOption",
    "LoggingEmitter",
    "MacroDefinitionError",
    "MacroError",
    "MappingError",
    "MetricsError",
    "NullCharacterOption",
    "NullEmitter",
    "SpaceSequenceOption",
    "StringsCompileError",
    "TabOption",
    "ValidationError",
    "build_options",
    "load_options",
]
