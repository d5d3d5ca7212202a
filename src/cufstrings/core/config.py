"""Configuration models used by the Strings compiler.

CompileOptions

`null_character` (`NullCharacterOption`)
: Policy for NUL characters left after macro mapping. Defaults to `disable`,
  which rejects the record.

`line_break` (`LineBreakOption`)
: Policy for CR and LF characters. Defaults to `normalize`, collapsing CRLF
  pairs into a single line flush.

`tab` (`TabOption`)
: Policy for tab characters. Defaults to `discard` with a warning.

`space_sequence` (`SpaceSequenceOption`)
: Policy for spaces next to line edges and control characters. Defaults to
  `coalesce`.

`ignorable_whitespace` (`IgnorableWhitespaceOption`)
: What the XML feeder does with ignorable whitespace. Defaults to `warning`.

`format` (`FormatOption`)
: Record stream layout handed to the writer. Defaults to `keyed`.

`empty_string` (`EmptyStringOption`)
: Acceptance of empty keys and values. Defaults to `disable`.

`encoding` (`str | None`)
: Text encoding of plain-text and XML sources. `None` uses UTF-8.

`xslt` (`Path | None`)
: Stylesheet applied to XML sources before they are compiled.

`comment_leader` (`str`)
: Character introducing comment lines in plain-text sources.

`context_length` (`int`)
: Number of raw characters quoted in diagnostics.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)
import yaml

from .exceptions import ConfigurationError
from .options import (
    EmptyStringOption,
    FormatOption,
    IgnorableWhitespaceOption,
    LineBreakOption,
    NullCharacterOption,
    SpaceSequenceOption,
    TabOption,
)


DEFAULT_ENCODING = "utf-8"
DEFAULT_COMMENT_LEADER = "¬"


class CompileOptions(BaseModel):
    """Policies applied while compiling a Strings document."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    null_character: NullCharacterOption = NullCharacterOption.DISABLE
    line_break: LineBreakOption = LineBreakOption.NORMALIZE
    tab: TabOption = TabOption.DISCARD
    space_sequence: SpaceSequenceOption = SpaceSequenceOption.COALESCE
    ignorable_whitespace: IgnorableWhitespaceOption = IgnorableWhitespaceOption.WARNING
    format: FormatOption = FormatOption.KEYED
    empty_string: EmptyStringOption = EmptyStringOption.DISABLE
    encoding: str | None = None
    xslt: Path | None = None
    comment_leader: str = Field(default=DEFAULT_COMMENT_LEADER, min_length=1, max_length=1)
    context_length: int = Field(default=9, ge=1)

    @field_validator(
        "null_character",
        "line_break",
        "tab",
        "space_sequence",
        "ignorable_whitespace",
        "format",
        "empty_string",
        mode="before",
    )
    @classmethod
    def _parse_policy(cls, value: Any, info: ValidationInfo) -> Any:
        annotation = cls.model_fields[info.field_name].annotation
        if isinstance(value, str):
            return annotation.parse(value)
        return value

    @property
    def source_encoding(self) -> str:
        """Return the encoding used to read source documents."""
        return self.encoding or DEFAULT_ENCODING

    def with_overrides(self, **overrides: Any) -> CompileOptions:
        """Return a copy with the non-``None`` overrides applied and validated."""
        values = self.model_dump()
        values.update({key: value for key, value in overrides.items() if value is not None})
        return build_options(values)


def build_options(values: Mapping[str, Any] | None = None) -> CompileOptions:
    """Validate raw option values, raising :class:`ConfigurationError` on failure."""
    try:
        return CompileOptions.model_validate(dict(values or {}))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid compile options: {exc}") from exc


def load_options(path: Path) -> CompileOptions:
    """Load compile options from a YAML document."""
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Unable to read compile options from '{path}': {exc}") from exc
    if not isinstance(payload, Mapping):
        raise ConfigurationError(f"Compile options in '{path}' must be a mapping")
    options = payload.get("options", payload)
    if not isinstance(options, Mapping):
        raise ConfigurationError(f"Compile options in '{path}' must be a mapping")
    normalised = {str(key).replace("-", "_"): value for key, value in options.items()}
    return build_options(normalised)


__all__ = [
    "DEFAULT_COMMENT_LEADER",
    "DEFAULT_ENCODING",
    "CompileOptions",
    "build_options",
    "load_options",
]
