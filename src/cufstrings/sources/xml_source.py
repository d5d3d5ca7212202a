"""XML record source.

Documents use the structural namespace :data:`DOCUMENT_NAMESPACE`. The root
``document`` element may choose the record format; each ``value`` element
holds one record whose text is wrapped in macro elements. Every other
namespace declared on the root element is resolved to a string mapping, the
local name of a macro element selects the macro of that mapping:

```xml
<document xmlns="org.europabarbarorum.cuf.strings"
          xmlns:u="upper.yaml" format="keyed">
  <value key="title"><u:upper>hello</u:upper></value>
</document>
```

Attributes of the root element in a mapping namespace configure that mapping
(see :class:`~cufstrings.mapping.base.ConfiguredMapping`). Structural errors
raise :class:`DocumentStructureError` carrying the parser location.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from xml.sax import SAXParseException, make_parser
from xml.sax.handler import ContentHandler, feature_external_ges, feature_namespaces
from xml.sax.xmlreader import AttributesNSImpl, InputSource, Locator

from lxml import etree

from ..compiler.raw import compile_record
from ..core.config import CompileOptions
from ..core.diagnostics import DiagnosticEmitter, LoggingEmitter
from ..core.exceptions import (
    ConfigurationError,
    DocumentStructureError,
    FormatError,
    StringsCompileError,
)
from ..core.options import FormatOption, IgnorableWhitespaceOption
from ..mapping.base import StringMapping
from .records import StringsCollector
from .resolvers import URIResolver, configure_mapping


logger = logging.getLogger(__name__)

DOCUMENT_NAMESPACE = "org.europabarbarorum.cuf.strings"
DOCUMENT_ELEMENT = "document"
VALUE_ELEMENT = "value"
KEY_ATTRIBUTE = "key"
FORMAT_ATTRIBUTE = "format"


class AttributesConfiguration:
    """Expose namespaced SAX attributes as a resolver configuration."""

    def __init__(self, attrs: AttributesNSImpl) -> None:
        self.attrs = attrs

    def get(self, uri: str, name: str) -> str | None:
        return self.attrs.get((uri, name))


def _document_attribute(attrs: AttributesNSImpl, name: str) -> str | None:
    value = attrs.get((DOCUMENT_NAMESPACE, name))
    return value if value is not None else attrs.get((None, name))


class SAXHandler(ContentHandler):
    """Translate SAX events of a Strings document into records."""

    def __init__(
        self,
        writer: StringsCollector,
        resolver: URIResolver,
        options: CompileOptions | None = None,
        *,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        super().__init__()
        self.writer = writer
        self.resolver = resolver
        self.options = options or CompileOptions()
        self.emitter = emitter or LoggingEmitter(logger_obj=logger)
        self.namespaces: dict[str, StringMapping] = {}
        self.locator: Locator | None = None
        self.root_seen = False
        self.key: str | None = None
        self.macros: list[tuple[str, str]] = []
        self._segments: list[str] = []
        self._mapping: StringMapping | None = None

    # -- diagnostics -------------------------------------------------------

    def setDocumentLocator(self, locator: Locator) -> None:
        self.locator = locator

    def location(self) -> tuple[int | None, int | None]:
        if self.locator is None:
            return None, None
        return self.locator.getLineNumber(), self.locator.getColumnNumber()

    def fail(self, message: str) -> DocumentStructureError:
        line, column = self.location()
        return DocumentStructureError(message, line=line, column=column)

    def _annotate(self, exc: StringsCompileError) -> None:
        line, column = self.location()
        if line is not None:
            exc.add_note(f"at line {line}, column {column}")

    # -- namespaces --------------------------------------------------------

    def startPrefixMapping(self, prefix: str | None, uri: str | None) -> None:
        if not uri or uri == DOCUMENT_NAMESPACE or uri in self.namespaces:
            return
        if self.root_seen:
            raise self.fail(f"Namespace {uri} must be declared on the root element")
        try:
            mapping = self.resolver.resolve(uri)
        except StringsCompileError as exc:
            self._annotate(exc)
            raise
        self.namespaces[uri] = mapping
        self.emitter.event("mapping_resolved", {"uri": uri, "mapping": type(mapping).__name__})

    def endPrefixMapping(self, prefix: str | None) -> None:
        return

    # -- elements ----------------------------------------------------------

    def startElementNS(
        self,
        name: tuple[str | None, str],
        qname: str | None,
        attrs: AttributesNSImpl,
    ) -> None:
        uri, local = name
        if uri is None:
            raise self.fail(f"Element '{local}' has no namespace")
        if uri == DOCUMENT_NAMESPACE:
            match local:
                case "document":
                    self.start_document_element(attrs)
                case "value":
                    self.start_value(attrs)
                case _:
                    raise self.fail(f"Unknown element '{local}'")
            return
        self.start_macro(uri, local)

    def start_document_element(self, attrs: AttributesNSImpl) -> None:
        if self.root_seen:
            raise self.fail(f"Nested '{DOCUMENT_ELEMENT}' element")
        self.root_seen = True
        fmt = _document_attribute(attrs, FORMAT_ATTRIBUTE)
        try:
            if fmt is not None:
                self.writer.set_format(FormatOption.parse(fmt))
            configuration = AttributesConfiguration(attrs)
            for mapping in self.namespaces.values():
                configure_mapping(mapping, configuration)
        except ValueError as exc:
            raise self.fail(f"Invalid format '{fmt}': {exc}") from exc
        except (ConfigurationError, FormatError) as exc:
            self._annotate(exc)
            raise

    def start_value(self, attrs: AttributesNSImpl) -> None:
        if not self.root_seen:
            raise self.fail(f"'{VALUE_ELEMENT}' element outside of '{DOCUMENT_ELEMENT}'")
        if self.key is not None:
            raise self.fail(f"Nested '{VALUE_ELEMENT}' element in value for key '{self.key}'")
        key = _document_attribute(attrs, KEY_ATTRIBUTE)
        if key is None:
            raise self.fail(f"'{VALUE_ELEMENT}' element without '{KEY_ATTRIBUTE}' attribute")
        try:
            self.writer.key(key)
        except StringsCompileError as exc:
            self._annotate(exc)
            raise
        self.key = key

    def start_macro(self, uri: str, local: str) -> None:
        if self.key is None:
            raise self.fail(f"Macro element '{local}' outside of a '{VALUE_ELEMENT}' element")
        if uri not in self.namespaces:
            raise self.fail(f"Namespace {uri} of element '{local}' is not declared on the root")
        self.macros.append((uri, local))

    def endElementNS(self, name: tuple[str | None, str], qname: str | None) -> None:
        uri, local = name
        if uri != DOCUMENT_NAMESPACE:
            self.macros.pop()
            return
        if local == VALUE_ELEMENT:
            try:
                self.end_value()
            except StringsCompileError as exc:
                self._annotate(exc)
                raise

    def end_value(self) -> None:
        key, mapping = self.key, self._mapping
        self.key = None
        self._mapping = None
        if mapping is None:
            self.writer.value("")
            return
        self._segments.append(mapping.get_mapped_string(key))
        raw = "".join(self._segments)
        self._segments = []
        self.writer.value(
            compile_record(self.options, mapping, key, emitter=self.emitter, raw=raw)
        )

    # -- text --------------------------------------------------------------

    def characters(self, content: str) -> None:
        if not self.macros:
            if content.strip():
                where = f"value for key '{self.key}'" if self.key is not None else "document"
                raise self.fail(f"Text {content.strip()!r} outside of a macro element in {where}")
            return
        uri, macro = self.macros[-1]
        mapping = self.namespaces[uri]
        try:
            if self._mapping is not None and self._mapping is not mapping:
                self._segments.append(self._mapping.get_mapped_string(self.key))
            self._mapping = mapping
            mapping.select(macro, self.key)
            mapping.append_string(content, self.key)
        except StringsCompileError as exc:
            self._annotate(exc)
            raise

    def ignorableWhitespace(self, whitespace: str) -> None:
        match self.options.ignorable_whitespace:
            case IgnorableWhitespaceOption.COMPILE:
                self.characters(whitespace)
            case IgnorableWhitespaceOption.WARNING:
                line, column = self.location()
                self.emitter.warning(
                    f"Ignored whitespace {whitespace!r} at line {line}, column {column}"
                )
            case IgnorableWhitespaceOption.IGNORE:
                pass


class XMLSource:
    """Feeder reading records from an XML document.

    When ``options.xslt`` names a stylesheet, the document is transformed with
    it before being parsed.
    """

    def __init__(
        self,
        path: Path,
        resolver: URIResolver,
        options: CompileOptions | None = None,
        *,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.path = Path(path)
        self.resolver = resolver
        self.options = options or CompileOptions()
        self.emitter = emitter

    def transform(self, stylesheet: Path) -> bytes:
        """Return the document transformed by ``stylesheet``."""
        try:
            parser = etree.XMLParser(resolve_entities=False, no_network=True)
            xslt = etree.XSLT(etree.parse(str(stylesheet), parser))
            result = xslt(etree.parse(str(self.path), parser))
        except (OSError, etree.XMLSyntaxError, etree.XSLTError) as exc:
            raise ConfigurationError(
                f"Unable to transform '{self.path}' with '{stylesheet}': {exc}"
            ) from exc
        logger.debug("Applied stylesheet %s to %s", stylesheet, self.path)
        return bytes(result)

    def input_source(self) -> InputSource:
        if self.options.xslt is not None:
            data = self.transform(self.options.xslt)
        else:
            try:
                data = self.path.read_bytes()
            except OSError as exc:
                raise ConfigurationError(f"Unable to read '{self.path}': {exc}") from exc
        source = InputSource(str(self.path))
        source.setByteStream(io.BytesIO(data))
        if self.options.encoding is not None:
            source.setEncoding(self.options.encoding)
        return source

    def deliver_events(self, writer: StringsCollector) -> None:
        handler = SAXHandler(writer, self.resolver, self.options, emitter=self.emitter)
        parser = make_parser()
        parser.setFeature(feature_namespaces, True)
        parser.setFeature(feature_external_ges, False)
        parser.setContentHandler(handler)
        try:
            parser.parse(self.input_source())
        except SAXParseException as exc:
            raise DocumentStructureError(
                f"Malformed document '{self.path}': {exc.getMessage()}",
                line=exc.getLineNumber(),
                column=exc.getColumnNumber(),
            ) from exc

    def close(self) -> None:
        return


__all__ = [
    "DOCUMENT_NAMESPACE",
    "AttributesConfiguration",
    "SAXHandler",
    "XMLSource",
]
