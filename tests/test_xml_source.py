from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from cufstrings.api import default_uri_resolver
from cufstrings.core.config import CompileOptions
from cufstrings.core.diagnostics import CollectingEmitter
from cufstrings.core.exceptions import (
    ConfigurationError,
    DocumentStructureError,
    InvalidURIError,
)
from cufstrings.core.options import FormatOption
from cufstrings.sources.feeders import collect_records
from cufstrings.sources.records import StringsCollector
from cufstrings.sources.resolvers import FileURIResolver, IdentityURIResolver
from cufstrings.sources.xml_source import DOCUMENT_NAMESPACE, SAXHandler, XMLSource


def _document(body: str, *, attributes: str = "", namespaces: str = "") -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<document xmlns="{DOCUMENT_NAMESPACE}" xmlns:u="macros.yaml" '
        f'xmlns:i="identity" {namespaces} {attributes}>\n'
        f"{body}\n"
        "</document>\n"
    )


def _write(tmp_path: Path, text: str, name: str = "strings.xml") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def _compile(
    path: Path, options: CompileOptions | None = None, **kwargs: Any
) -> StringsCollector:
    options = options or CompileOptions()
    resolver = kwargs.pop("resolver", None) or default_uri_resolver(path)
    emitter = kwargs.pop("emitter", None)
    return collect_records(XMLSource(path, resolver, options, emitter=emitter), options)


def test_values_are_mapped_by_namespace(tmp_path: Path, upper_macros: Path) -> None:
    path = _write(
        tmp_path,
        _document(
            '  <value key="title"><u:upper>bad face</u:upper></value>\n'
            '  <value key="escaped"><i:id>one\\ntwo</i:id></value>\n'
            '  <value key="mixed"><u:upper>ab</u:upper><u:spaced>a_b</u:spaced></value>'
        ),
    )
    collector = _compile(path)
    assert collector.as_dict() == {
        "title": "BAD FACE",
        "escaped": "one\ntwo",
        "mixed": "ABA B",
    }
    assert collector.format is FormatOption.KEYED


def test_value_spanning_several_namespaces(tmp_path: Path, upper_macros: Path) -> None:
    path = _write(
        tmp_path,
        _document('<value key="both"><u:upper>ab</u:upper> <i:id>cd</i:id></value>'),
    )
    assert _compile(path).as_dict() == {"both": "ABcd"}


def test_nested_macro_elements_restore_outer_macro(tmp_path: Path, upper_macros: Path) -> None:
    path = _write(
        tmp_path,
        _document('<value key="k"><u:upper>a<u:spaced>_</u:spaced>b</u:upper></value>'),
    )
    assert _compile(path).as_dict() == {"k": "A B"}


def test_format_attribute(tmp_path: Path, upper_macros: Path) -> None:
    path = _write(
        tmp_path,
        _document('<value key="a"><i:id>x</i:id></value>', attributes='format="ordered"'),
    )
    assert _compile(path).format is FormatOption.ORDERED


def test_invalid_format_attribute(tmp_path: Path, upper_macros: Path) -> None:
    path = _write(tmp_path, _document("", attributes='format="weird"'))
    with pytest.raises(DocumentStructureError, match="Invalid format"):
        _compile(path)


def test_mapping_configuration_from_root_attributes(
    tmp_path: Path, upper_macros: Path, unit_table: Path
) -> None:
    path = _write(
        tmp_path,
        _document(
            '<value key="wrapped"><w:upper>ab cd ef</w:upper></value>',
            namespaces='xmlns:w="copy:macros.yaml"',
            attributes=(
                'w:font="unit.yaml" w:width="5" w:tabWidth="4" '
                'u:font="unit.yaml" u:width="50" u:tabWidth="4"'
            ),
        ),
    )
    collector = _compile(path, resolver=default_uri_resolver(path, layout=True))
    assert collector.as_dict() == {"wrapped": "AB\nCD EF"}


def test_missing_configuration_reports_location(tmp_path: Path, upper_macros: Path) -> None:
    path = _write(tmp_path, _document(""))
    with pytest.raises(ConfigurationError, match="Missing required attribute") as excinfo:
        _compile(path, resolver=default_uri_resolver(path, layout=True))
    assert any("line" in note for note in excinfo.value.__notes__)


def test_unresolvable_namespace(tmp_path: Path) -> None:
    path = _write(tmp_path, _document(""))
    with pytest.raises(InvalidURIError):
        _compile(path, resolver=FileURIResolver(path))


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ('<value><i:id>x</i:id></value>', "without 'key' attribute"),
        ('<value key="k">loose</value>', "outside of a macro element"),
        ('<value key="k"><value key="j"/></value>', "Nested 'value'"),
        ("<other/>", "Unknown element 'other'"),
        ("<i:id>x</i:id>", "outside of a 'value' element"),
        ('<value key="k"><x:m xmlns:x="late.yaml">t</x:m></value>', "declared on the root"),
        ('<value key="k"><plain>t</plain></value>', "has no namespace"),
    ],
)
def test_structural_errors(
    tmp_path: Path, upper_macros: Path, body: str, message: str
) -> None:
    text = _document(body).replace("<plain>", '<plain xmlns="">')
    path = _write(tmp_path, text)
    with pytest.raises(DocumentStructureError, match=message) as excinfo:
        _compile(path)
    assert excinfo.value.line is not None


def test_malformed_document(tmp_path: Path) -> None:
    text = f'<document xmlns="{DOCUMENT_NAMESPACE}">\n<value key="a"></document>'
    path = _write(tmp_path, text)
    with pytest.raises(DocumentStructureError, match="Malformed") as excinfo:
        _compile(path)
    assert excinfo.value.line == 2


def test_mapping_events_are_emitted(tmp_path: Path, upper_macros: Path) -> None:
    emitter = CollectingEmitter()
    path = _write(tmp_path, _document('<value key="a"><i:id>x</i:id></value>'))
    _compile(path, emitter=emitter)
    resolved = [payload["uri"] for name, payload in emitter.events if name == "mapping_resolved"]
    assert sorted(resolved) == ["identity", "macros.yaml"]


def test_empty_value_element(tmp_path: Path, upper_macros: Path) -> None:
    path = _write(tmp_path, _document('<value key="blank"></value>'))
    options = CompileOptions(empty_string="enable")
    assert _compile(path, options).as_dict() == {"blank": ""}


def test_ignorable_whitespace_policy() -> None:
    emitter = CollectingEmitter()
    handler = SAXHandler(
        StringsCollector(),
        IdentityURIResolver("identity"),
        CompileOptions(ignorable_whitespace="warning"),
        emitter=emitter,
    )
    handler.ignorableWhitespace("  ")
    assert len(emitter.warnings) == 1

    quiet = SAXHandler(
        StringsCollector(),
        IdentityURIResolver("identity"),
        CompileOptions(ignorable_whitespace="ignore"),
        emitter=emitter,
    )
    quiet.ignorableWhitespace("  ")
    assert len(emitter.warnings) == 1


STYLESHEET = """\
<xsl:stylesheet version="1.0"
    xmlns:xsl="http://www.w3.org/1999/XSL/Transform"
    xmlns="org.europabarbarorum.cuf.strings"
    xmlns:i="identity">
  <xsl:output method="xml" encoding="UTF-8"/>
  <xsl:template match="/records">
    <document>
      <xsl:for-each select="r">
        <value key="{@k}"><i:id><xsl:value-of select="."/></i:id></value>
      </xsl:for-each>
    </document>
  </xsl:template>
</xsl:stylesheet>
"""


def test_stylesheet_is_applied_first(tmp_path: Path) -> None:
    source = _write(tmp_path, '<records><r k="a">first</r><r k="b">second</r></records>')
    stylesheet = _write(tmp_path, STYLESHEET, name="records.xsl")
    options = CompileOptions(xslt=stylesheet)
    collector = _compile(source, options)
    assert collector.as_dict() == {"a": "first", "b": "second"}


def test_broken_stylesheet(tmp_path: Path) -> None:
    source = _write(tmp_path, "<records/>")
    stylesheet = _write(tmp_path, "<not-a-stylesheet/>", name="broken.xsl")
    with pytest.raises(ConfigurationError, match="Unable to transform"):
        _compile(source, CompileOptions(xslt=stylesheet))


def test_stylesheet_input_does_not_load_external_entities(tmp_path: Path) -> None:
    (tmp_path / "secret.txt").write_text("top secret", encoding="utf-8")
    source = _write(
        tmp_path,
        '<!DOCTYPE records [<!ENTITY leak SYSTEM "secret.txt">]>\n'
        '<records><r k="a">&leak;</r></records>',
    )
    stylesheet = _write(tmp_path, STYLESHEET, name="records.xsl")
    feeder = XMLSource(source, default_uri_resolver(source), CompileOptions(xslt=stylesheet))
    assert b"top secret" not in feeder.transform(stylesheet)


def test_external_entities_are_not_expanded(tmp_path: Path, upper_macros: Path) -> None:
    (tmp_path / "secret.txt").write_text("top secret", encoding="utf-8")
    text = _document('<value key="a"><i:id>x&leak;</i:id></value>').replace(
        "<document",
        '<!DOCTYPE document [<!ENTITY leak SYSTEM "secret.txt">]>\n<document',
        1,
    )
    collector = _compile(_write(tmp_path, text))
    assert collector.as_dict() == {"a": "x"}
