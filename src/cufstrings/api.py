"""Facade gathering the high-level compilation entry points.

`compile_plain`, `compile_xml` and `compile_mapping`
: run the matching feeder into a fresh :class:`StringsCollector`.

`compile_source`
: picks the feeder from the file suffix (see :func:`classify_source`).

`build_key_resolver`
: assembles the resolver chain used for plain and map sources, optionally
  with width-based layout configured from explicit values.

Usage Example
:
    >>> from cufstrings.api import compile_mapping
    >>> compile_mapping({"greeting": "Hello,  world"}).as_dict()
    {'greeting': 'Hello, world'}
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
import json
from pathlib import Path
from typing import Any

import yaml

from .core.config import CompileOptions
from .core.diagnostics import DiagnosticEmitter
from .core.exceptions import ConfigurationError
from .mapping.macros import IdentityMacro
from .sources.feeders import MapSource, collect_records
from .sources.plain import PlainSource
from .sources.records import StringsCollector
from .sources.resolvers import (
    FileURIResolver,
    IdentityURIResolver,
    KeyResolver,
    MapConfiguration,
    MixedURIResolver,
    PreConfiguredURIResolver,
    SimpleKeyResolver,
    URIResolver,
    WidthURIResolver,
    identity_key_resolver,
)
from .sources.xml_source import XMLSource


IDENTITY_URI = "identity"


class SourceKind(str, Enum):
    PLAIN = "plain"
    XML = "xml"
    MAP = "map"


_SUFFIX_KINDS = {
    ".xml": SourceKind.XML,
    ".yaml": SourceKind.MAP,
    ".yml": SourceKind.MAP,
    ".json": SourceKind.MAP,
}


def classify_source(path: Path) -> SourceKind:
    """Return the kind of record source stored at ``path``."""
    return _SUFFIX_KINDS.get(path.suffix.lower(), SourceKind.PLAIN)


def load_value_map(path: Path, *, encoding: str = "utf-8") -> dict[str, str]:
    """Read a YAML or JSON mapping of keys to uncompiled values."""
    try:
        text = path.read_text(encoding=encoding)
        payload: Any = json.loads(text) if path.suffix.lower() == ".json" else yaml.safe_load(text)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Unable to read value map '{path}': {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ConfigurationError(f"Value map '{path}' must contain a mapping")
    values: dict[str, str] = {}
    for key, value in payload.items():
        if not isinstance(value, str):
            raise ConfigurationError(f"Value for key '{key}' in '{path}' is not a string")
        values[str(key)] = value
    return values


def build_key_resolver(
    macros: Path | None = None,
    macro: str = IdentityMacro.NAME,
    *,
    layout: Mapping[str, str] | None = None,
    emitter: DiagnosticEmitter | None = None,
) -> KeyResolver:
    """Return a key resolver applying ``macro`` of the ``macros`` file to every record.

    ``layout`` holds width attributes (``font``, ``width``, ``tabWidth`` and
    optionally ``breaks``) and switches to a width-aware mapping.
    """
    if macros is None:
        if layout:
            raise ConfigurationError("Width layout requires a macro file")
        return identity_key_resolver(IDENTITY_URI)
    uri = str(macros)
    resolver: URIResolver
    if layout:
        configuration = MapConfiguration()
        for name, value in layout.items():
            configuration.put(uri, name, value)
        resolver = PreConfiguredURIResolver(WidthURIResolver(), configuration)
    else:
        resolver = FileURIResolver()
    return SimpleKeyResolver(resolver, {uri: macro}, lambda key: uri, emitter=emitter)


def default_uri_resolver(document: Path, *, layout: bool = False) -> URIResolver:
    """Return the URI resolver used for XML documents.

    The ``identity`` URI maps to an identity mapping, every other URI names a
    macro file relative to ``document``.
    """
    files = WidthURIResolver(document) if layout else FileURIResolver(document)
    return MixedURIResolver(files, {IDENTITY_URI: IdentityURIResolver(IDENTITY_URI)})


def compile_plain(
    path: Path,
    resolver: KeyResolver | None = None,
    options: CompileOptions | None = None,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> StringsCollector:
    options = options or CompileOptions()
    resolver = resolver or identity_key_resolver(IDENTITY_URI)
    feeder = PlainSource(path, resolver, options, emitter=emitter)
    return collect_records(feeder, options, emitter=emitter)


def compile_xml(
    path: Path,
    resolver: URIResolver | None = None,
    options: CompileOptions | None = None,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> StringsCollector:
    options = options or CompileOptions()
    feeder = XMLSource(path, resolver or default_uri_resolver(path), options, emitter=emitter)
    return collect_records(feeder, options, emitter=emitter)


def compile_mapping(
    values: Mapping[str, str],
    resolver: KeyResolver | None = None,
    options: CompileOptions | None = None,
    *,
    force_order: bool = False,
    emitter: DiagnosticEmitter | None = None,
) -> StringsCollector:
    options = options or CompileOptions()
    feeder = MapSource(
        values,
        resolver or identity_key_resolver(IDENTITY_URI),
        options,
        force_order=force_order,
        emitter=emitter,
    )
    return collect_records(feeder, options, emitter=emitter)


def compile_source(
    path: Path,
    options: CompileOptions | None = None,
    *,
    key_resolver: KeyResolver | None = None,
    uri_resolver: URIResolver | None = None,
    force_order: bool = False,
    emitter: DiagnosticEmitter | None = None,
) -> StringsCollector:
    """Compile the record source at ``path``, choosing the feeder from its suffix."""
    options = options or CompileOptions()
    match classify_source(path):
        case SourceKind.XML:
            return compile_xml(path, uri_resolver, options, emitter=emitter)
        case SourceKind.MAP:
            values = load_value_map(path, encoding=options.source_encoding)
            return compile_mapping(
                values, key_resolver, options, force_order=force_order, emitter=emitter
            )
        case SourceKind.PLAIN:
            return compile_plain(path, key_resolver, options, emitter=emitter)


__all__ = [
    "IDENTITY_URI",
    "SourceKind",
    "build_key_resolver",
    "classify_source",
    "compile_mapping",
    "compile_plain",
    "compile_source",
    "compile_xml",
    "default_uri_resolver",
    "load_value_map",
]
