"""Primary public API for cufstrings."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _pkg_version

from cufstrings.api import (
    build_key_resolver,
    compile_mapping,
    compile_plain,
    compile_source,
    compile_xml,
)
from cufstrings.compiler import RawHandler, compile_record
from cufstrings.core.config import CompileOptions, load_options
from cufstrings.core.exceptions import StringsCompileError
from cufstrings.mapping import (
    BasicMapping,
    ControlCharacter,
    EscapeMapping,
    IdentityMapping,
    MacroFile,
    StringMapping,
    WidthMapping,
)
from cufstrings.sources import StringsCollector, StringsRecord


try:
    __version__ = _pkg_version("cufstrings")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "BasicMapping",
    "CompileOptions",
    "ControlCharacter",
    "EscapeMapping",
    "IdentityMapping",
    "MacroFile",
    "RawHandler",
    "StringMapping",
    "StringsCollector",
    "StringsCompileError",
    "StringsRecord",
    "WidthMapping",
    "__version__",
    "build_key_resolver",
    "compile_mapping",
    "compile_plain",
    "compile_record",
    "compile_source",
    "compile_xml",
    "load_options",
]
