"""Record sources, resolvers and the record sink."""

from cufstrings.sources.feeders import (
    EditorSource,
    IteratorSource,
    MapSource,
    SimpleStringsFeeder,
    StringsFeeder,
    collect_records,
)
from cufstrings.sources.plain import PlainSource
from cufstrings.sources.records import StringsCollector, StringsRecord
from cufstrings.sources.resolvers import (
    COPY_PREFIX,
    FileURIResolver,
    IdentityURIResolver,
    KeyResolver,
    KeyResolverBase,
    MapConfiguration,
    MixedURIResolver,
    PatternKeyResolver,
    PreConfiguredURIResolver,
    ResolverConfiguration,
    SimpleKeyResolver,
    SingleMappingKeyResolver,
    URIResolver,
    WidthURIResolver,
    configure_mapping,
    identity_key_resolver,
)
from cufstrings.sources.xml_source import DOCUMENT_NAMESPACE, SAXHandler, XMLSource


__all__ = [
    "COPY_PREFIX",
    "DOCUMENT_NAMESPACE",
    "EditorSource",
    "FileURIResolver",
    "IdentityURIResolver",
    "IteratorSource",
    "KeyResolver",
    "KeyResolverBase",
    "MapConfiguration",
    "MapSource",
    "MixedURIResolver",
    "PatternKeyResolver",
    "PlainSource",
    "PreConfiguredURIResolver",
    "ResolverConfiguration",
    "SAXHandler",
    "SimpleKeyResolver",
    "SimpleStringsFeeder",
    "SingleMappingKeyResolver",
    "StringsCollector",
    "StringsFeeder",
    "StringsRecord",
    "URIResolver",
    "WidthURIResolver",
    "XMLSource",
    "collect_records",
    "configure_mapping",
    "identity_key_resolver",
]
