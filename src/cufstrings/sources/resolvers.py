"""Resolution of namespace URIs and record keys to string mappings.

A :class:`URIResolver` turns the URI of a namespace (in XML documents) or of a
macro set (in plain sources) into a fresh :class:`StringMapping`. A
:class:`KeyResolver` picks the mapping and macro applied to the value of a
record from its key, caching one mapping per URI.

URIs starting with ``copy:`` alias the URI that follows, but always produce a
new mapping instance, so one document can use the same macro file twice with
distinct configurations.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
import logging
from pathlib import Path
import re
from typing import Protocol, runtime_checkable

from ..core.diagnostics import DiagnosticEmitter, NullEmitter
from ..core.exceptions import ConfigurationError, InvalidURIError, MacroDefinitionError
from ..mapping.base import BasicMapping, ConfiguredMapping, IdentityMapping, StringMapping
from ..mapping.macros import IdentityMacro
from ..mapping.width import WidthMapping


logger = logging.getLogger(__name__)

COPY_PREFIX = "copy:"


def strip_copy_prefix(uri: str) -> str:
    """Return ``uri`` without any leading ``copy:`` aliases."""
    while uri.startswith(COPY_PREFIX):
        uri = uri[len(COPY_PREFIX) :]
    return uri


@runtime_checkable
class URIResolver(Protocol):
    def resolve(self, uri: str) -> StringMapping: ...


@runtime_checkable
class ResolverConfiguration(Protocol):
    """Source of attribute values for :class:`ConfiguredMapping` instances."""

    def get(self, uri: str, name: str) -> str | None: ...


class MapConfiguration:
    """In-memory :class:`ResolverConfiguration`."""

    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(values or {})

    @staticmethod
    def key(uri: str, name: str) -> str:
        return f"<{uri}[{name}]>"

    def put(self, uri: str, name: str, value: str) -> None:
        self._values[self.key(uri, name)] = value

    def get(self, uri: str, name: str) -> str | None:
        return self._values.get(self.key(uri, name))

    def __len__(self) -> int:
        return len(self._values)


def configure_mapping(mapping: StringMapping, configuration: ResolverConfiguration) -> None:
    """Apply attribute values to ``mapping`` when it is configurable."""
    if not isinstance(mapping, ConfiguredMapping):
        return
    for entry in mapping:
        value = configuration.get(entry.uri, entry.name)
        if value is None and entry.required:
            raise ConfigurationError(
                f"Missing required attribute '{entry.name}' for namespace {entry.uri}"
            )
        entry.set(value)


class FileURIResolver:
    """Resolve URIs as macro-definition files.

    Relative paths are tried against the directory of the source document
    first, then against the working directory.
    """

    def __init__(self, document: Path | None = None) -> None:
        self.document = document
        self.base_path = document.parent if document is not None else None

    def locate(self, uri: str) -> Path:
        target = Path(strip_copy_prefix(uri)).expanduser()
        candidates = [target]
        if not target.is_absolute() and self.base_path is not None:
            candidates.insert(0, self.base_path / target)
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        raise InvalidURIError(uri)

    def create_mapping(self, path: Path, uri: str) -> StringMapping:
        return BasicMapping(path)

    def resolve(self, uri: str) -> StringMapping:
        path = self.locate(uri)
        try:
            return self.create_mapping(path, uri)
        except MacroDefinitionError as exc:
            raise InvalidURIError(uri) from exc


class WidthURIResolver(FileURIResolver):
    """File resolver producing :class:`WidthMapping` instances."""

    def create_mapping(self, path: Path, uri: str) -> StringMapping:
        return WidthMapping(path, uri, base_path=self.base_path)


class IdentityURIResolver:
    """Resolve a single URI (and its ``copy:`` aliases) to an identity mapping."""

    def __init__(self, match: str) -> None:
        self.match = match
        self._shared: IdentityMapping | None = None

    def resolve(self, uri: str) -> StringMapping:
        if strip_copy_prefix(uri) != self.match:
            raise InvalidURIError(uri)
        if uri != self.match:
            return IdentityMapping(uri)
        if self._shared is None:
            self._shared = IdentityMapping(uri)
        return self._shared


class MixedURIResolver:
    """Dispatch URIs to dedicated resolvers, falling back to a default."""

    def __init__(
        self,
        default: URIResolver | None = None,
        resolvers: Mapping[str, URIResolver] | None = None,
    ) -> None:
        self.default = default
        self.resolvers: dict[str, URIResolver] = dict(resolvers or {})

    def register(self, uri: str, resolver: URIResolver) -> None:
        self.resolvers[uri] = resolver

    def resolve(self, uri: str) -> StringMapping:
        resolver = self.resolvers.get(uri) or self.resolvers.get(strip_copy_prefix(uri))
        if resolver is None:
            resolver = self.default
        if resolver is None:
            raise InvalidURIError(uri)
        return resolver.resolve(uri)


class PreConfiguredURIResolver:
    """Resolver configuring every mapping it returns."""

    def __init__(self, impl: URIResolver, configuration: ResolverConfiguration) -> None:
        self.impl = impl
        self.configuration = configuration

    def resolve(self, uri: str) -> StringMapping:
        mapping = self.impl.resolve(uri)
        configure_mapping(mapping, self.configuration)
        return mapping


@runtime_checkable
class KeyResolver(Protocol):
    """Choose the mapping and macro applied to the value of a record."""

    def for_key(self, key: str) -> StringMapping: ...

    def get_macro(self, key: str) -> str: ...


class SingleMappingKeyResolver:
    """Apply one mapping and one macro to every record."""

    def __init__(self, mapping: StringMapping, macro: str = IdentityMacro.NAME) -> None:
        self.mapping = mapping
        self.macro = macro

    def for_key(self, key: str) -> StringMapping:
        return self.mapping

    def get_macro(self, key: str) -> str:
        return self.macro


class KeyResolverBase:
    """Key resolver caching one mapping per URI."""

    def __init__(
        self,
        resolver: URIResolver,
        *,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.resolver = resolver
        self.emitter = emitter or NullEmitter()
        self._cache: dict[str, StringMapping] = {}

    def uri_for_key(self, key: str) -> str | None:
        raise NotImplementedError

    def macro_for_uri(self, uri: str) -> str | None:
        raise NotImplementedError

    def _uri(self, key: str) -> str:
        uri = self.uri_for_key(key)
        if uri is None:
            raise ConfigurationError(f"No namespace URI configured for key '{key}'")
        return uri

    def for_key(self, key: str) -> StringMapping:
        uri = self._uri(key)
        mapping = self._cache.get(uri)
        if mapping is None:
            mapping = self.resolver.resolve(uri)
            self._cache[uri] = mapping
            logger.debug("Resolved %s for key '%s'", uri, key)
            self.emitter.event(
                "mapping_resolved", {"uri": uri, "mapping": type(mapping).__name__}
            )
        return mapping

    def get_macro(self, key: str) -> str:
        uri = self._uri(key)
        macro = self.macro_for_uri(uri)
        if macro is None:
            raise ConfigurationError(f"No macro configured for namespace {uri} (key '{key}')")
        return macro


class SimpleKeyResolver(KeyResolverBase):
    """Key resolver driven by a URI to macro table and a key to URI callable."""

    def __init__(
        self,
        resolver: URIResolver,
        macros: Mapping[str, str],
        uri_for_key: Callable[[str], str | None],
        *,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        super().__init__(resolver, emitter=emitter)
        self.macros = dict(macros)
        self._uri_for_key = uri_for_key

    def uri_for_key(self, key: str) -> str | None:
        return self._uri_for_key(key)

    def macro_for_uri(self, uri: str) -> str | None:
        return self.macros.get(uri)


class PatternKeyResolver(SimpleKeyResolver):
    """Key resolver selecting URIs with regular expressions matched on keys.

    Patterns are tried in order, the first full match wins.
    """

    def __init__(
        self,
        resolver: URIResolver,
        macros: Mapping[str, str],
        patterns: Iterable[tuple[str | re.Pattern[str], str]],
        *,
        default: str | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.patterns = [(re.compile(pattern), uri) for pattern, uri in patterns]
        self.default = default
        super().__init__(resolver, macros, self._match, emitter=emitter)

    def _match(self, key: str) -> str | None:
        for pattern, uri in self.patterns:
            if pattern.fullmatch(key):
                return uri
        return self.default


def identity_key_resolver(uri: str = "identity") -> SingleMappingKeyResolver:
    """Return a key resolver passing every value through an identity mapping."""
    return SingleMappingKeyResolver(IdentityMapping(uri))


__all__ = [
    "COPY_PREFIX",
    "FileURIResolver",
    "IdentityURIResolver",
    "KeyResolver",
    "KeyResolverBase",
    "MapConfiguration",
    "MixedURIResolver",
    "PatternKeyResolver",
    "PreConfiguredURIResolver",
    "ResolverConfiguration",
    "SimpleKeyResolver",
    "SingleMappingKeyResolver",
    "URIResolver",
    "WidthURIResolver",
    "configure_mapping",
    "identity_key_resolver",
    "strip_copy_prefix",
]
