from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
import yaml

from cufstrings.compiler import compile_record
from cufstrings.core.config import CompileOptions
from cufstrings.core.diagnostics import CollectingEmitter
from cufstrings.fonts.metrics import WidthTable
from cufstrings.mapping.base import BasicMapping, StringMapping
from cufstrings.mapping.macros import IdentityMacro
from cufstrings.mapping.width import WidthMapping


@pytest.fixture
def emitter() -> CollectingEmitter:
    return CollectingEmitter()


@pytest.fixture
def write_macros(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory writing macro-definition files into ``tmp_path``."""

    def factory(macros: dict[str, object], name: str = "macros.yaml") -> Path:
        path = tmp_path / name
        path.write_text(
            yaml.safe_dump({"macros": macros}, allow_unicode=True, sort_keys=False),
            encoding="utf-8",
        )
        return path

    return factory


@pytest.fixture
def upper_macros(write_macros: Callable[..., Path]) -> Path:
    return write_macros(
        {
            "upper": {"keys": "abcdefgh ,.", "values": "ABCDEFGH ,."},
            "spaced": {"keys": "ab_", "values": "AB "},
        }
    )


@pytest.fixture
def unit_table(tmp_path: Path) -> Path:
    path = tmp_path / "unit.yaml"
    path.write_text(
        yaml.safe_dump({"family": "Unit", "default": 1, "widths": {"U+0009": 1}}),
        encoding="utf-8",
    )
    return path


def make_width_mapping(width: int, *, block_size: int = 4) -> WidthMapping:
    mapping = WidthMapping([IdentityMacro()], "width")
    mapping.use_metrics(WidthTable({}, default=1))
    mapping.width = width
    mapping.block_size = block_size
    return mapping


@pytest.fixture
def width_mapping() -> Callable[..., WidthMapping]:
    return make_width_mapping


@pytest.fixture
def compile_text(emitter: CollectingEmitter) -> Callable[..., str]:
    """Return a helper compiling ``text`` through a single-record session."""

    def run(
        text: str,
        options: CompileOptions | None = None,
        *,
        mapping: StringMapping | None = None,
        macro: str = IdentityMacro.NAME,
        key: str = "k",
    ) -> str:
        mapping = mapping or BasicMapping([IdentityMacro()])
        mapping.select(macro, key)
        mapping.append_string(text, key)
        return compile_record(options or CompileOptions(), mapping, key, emitter=emitter)

    return run
