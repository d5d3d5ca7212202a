"""Macros: named character substitutions applied to source text.

A macro-definition resource is a YAML document listing named macros. Each
macro is either a mapping of single characters, or a pair of equal-length
``keys``/``values`` strings:

```yaml
macros:
  upper:
    a: A
    b: B
  small-caps:
    keys: "abc"
    values: "ᴀʙᴄ"
```

Every macro implicitly maps the fixed control characters onto themselves.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
import sys
from typing import Any, Protocol, runtime_checkable

import yaml

from ..core.exceptions import MacroDefinitionError, MacroError
from ..core.text import context_string, describe_character
from .control import ControlCharacter


@runtime_checkable
class Macro(Protocol):
    """Named character substitution."""

    @property
    def name(self) -> str: ...

    def map_char(self, char: str) -> str | None:
        """Return the substitute for ``char`` or ``None`` when unsupported."""
        ...

    def map(self, text: str) -> str:
        """Map every character of ``text``, raising :class:`MacroError` on failure."""
        ...

    def __len__(self) -> int: ...

    def __iter__(self) -> Iterator[tuple[str, str]]: ...


def _bad_character(macro: str, text: str, index: int) -> MacroError:
    char = text[index]
    control = ControlCharacter.for_macro_character(char)
    label = control.label if control is not None else describe_character(char)
    return MacroError(
        f"Character {label} is not supported by macro '{macro}' "
        f"(index {index}, near {context_string(text, index)!r})"
    )


class SimpleMacro:
    """Dictionary backed macro."""

    def __init__(self, name: str, mapping: Mapping[str, str] | None = None) -> None:
        self._name = name
        self._mapping: dict[str, str] = {
            control.char: control.char for control in ControlCharacter if control.fixed
        }
        if mapping:
            self._mapping.update(mapping)

    @property
    def name(self) -> str:
        return self._name

    def map_char(self, char: str) -> str | None:
        return self._mapping.get(char)

    def map(self, text: str) -> str:
        parts: list[str] = []
        for index, char in enumerate(text):
            mapped = self._mapping.get(char)
            if mapped is None:
                raise _bad_character(self._name, text, index)
            parts.append(mapped)
        return "".join(parts)

    def __len__(self) -> int:
        return len(self._mapping)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._mapping.items())

    def __repr__(self) -> str:
        return f"SimpleMacro(name={self._name!r}, size={len(self._mapping)})"


class IdentityMacro:
    """Macro mapping every character onto itself."""

    NAME = "id"

    @property
    def name(self) -> str:
        return self.NAME

    def map_char(self, char: str) -> str | None:
        return char

    def map(self, text: str) -> str:
        return text

    def __len__(self) -> int:
        return sys.maxunicode + 1

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(())


def _single_character(macro: str, role: str, value: Any) -> str:
    text = str(value) if value is not None else ""
    if len(text) != 1:
        raise MacroDefinitionError(
            f"Macro '{macro}' declares {role} {value!r}; expected a single character"
        )
    return text


def _parse_macro(name: str, body: Any) -> SimpleMacro:
    if not isinstance(body, Mapping) or not body:
        raise MacroDefinitionError(f"Macro '{name}' must declare a non-empty mapping")

    if set(body) == {"keys", "values"}:
        keys = str(body["keys"] or "")
        values = str(body["values"] or "")
        if not keys or not values:
            raise MacroDefinitionError(f"Macro '{name}' declares empty keys or values")
        if len(keys) != len(values):
            raise MacroDefinitionError(
                f"Macro '{name}' declares {len(keys)} keys but {len(values)} values"
            )
        return SimpleMacro(name, dict(zip(keys, values, strict=True)))

    mapping = {
        _single_character(name, "key", key): _single_character(name, "value", value)
        for key, value in body.items()
    }
    return SimpleMacro(name, mapping)


class MacroFile:
    """Macros loaded from a YAML macro-definition resource."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._macros = tuple(self._read())

    def _read(self) -> list[SimpleMacro]:
        try:
            payload = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            raise MacroDefinitionError(
                f"Unable to read macro definitions from '{self.path}': {exc}"
            ) from exc

        declared = payload.get("macros") if isinstance(payload, Mapping) else None
        if not isinstance(declared, Mapping) or not declared:
            raise MacroDefinitionError(f"No macros declared in '{self.path}'")
        return [_parse_macro(str(name), body) for name, body in declared.items()]

    @property
    def macros(self) -> tuple[SimpleMacro, ...]:
        return self._macros

    def __len__(self) -> int:
        return len(self._macros)

    def __iter__(self) -> Iterator[SimpleMacro]:
        return iter(self._macros)


def index_macros(macros: Iterable[Macro]) -> dict[str, Macro]:
    """Return macros keyed by name, rejecting duplicates."""
    indexed: dict[str, Macro] = {}
    for macro in macros:
        if macro.name in indexed:
            raise MacroDefinitionError(f"Macro '{macro.name}' is declared more than once")
        indexed[macro.name] = macro
    return indexed


__all__ = [
    "IdentityMacro",
    "Macro",
    "MacroFile",
    "SimpleMacro",
    "index_macros",
]
