from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner
import yaml

from cufstrings.cli import app


runner = CliRunner()


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def _records(output: str) -> dict[str, str]:
    payload = json.loads(output)
    return {record["key"]: record["value"] for record in payload["records"]}


def test_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "compile" in result.stdout
    assert "macros" in result.stdout


def test_compile_plain_source_to_json(tmp_path: Path) -> None:
    source = _write(tmp_path, "records.txt", "{title} Hello,  world\n{tail} bye")
    result = runner.invoke(app, ["compile", str(source)])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["format"] == "keyed"
    assert payload["records"] == [
        {"key": "title", "value": "Hello, world"},
        {"key": "tail", "value": "bye"},
    ]


def test_compile_with_macro(tmp_path: Path, upper_macros: Path) -> None:
    source = _write(tmp_path, "values.yaml", "k: bad face\n")
    result = runner.invoke(
        app, ["compile", str(source), "--macros", str(upper_macros), "--macro", "upper"]
    )
    assert result.exit_code == 0, result.output
    assert _records(result.stdout) == {"k": "BAD FACE"}


def test_compile_with_width_layout(tmp_path: Path, upper_macros: Path, unit_table: Path) -> None:
    source = _write(tmp_path, "values.yaml", "k: ab cd ef\n")
    result = runner.invoke(
        app,
        [
            "compile",
            str(source),
            "--macros",
            str(upper_macros),
            "--macro",
            "upper",
            "--font",
            str(unit_table),
            "--width",
            "5",
            "--tab-width",
            "4",
        ],
    )
    assert result.exit_code == 0, result.output
    assert _records(result.stdout) == {"k": "AB\nCD EF"}


def test_compile_ordered_map_to_yaml_file(tmp_path: Path) -> None:
    source = _write(tmp_path, "values.yaml", "b: two\na: one\n")
    target = tmp_path / "out.yaml"
    result = runner.invoke(
        app, ["compile", str(source), "--ordered", "--to", "yaml", "--output", str(target)]
    )
    assert result.exit_code == 0, result.output
    payload = yaml.safe_load(target.read_text(encoding="utf-8"))
    assert payload["format"] == "ordered"
    assert [record["value"] for record in payload["records"]] == ["two", "one"]


def test_compile_xml_source(tmp_path: Path) -> None:
    source = _write(
        tmp_path,
        "doc.xml",
        '<document xmlns="org.europabarbarorum.cuf.strings" xmlns:i="identity">\n'
        '  <value key="a"><i:id>one\\ttwo</i:id></value>\n'
        "</document>\n",
    )
    result = runner.invoke(
        app, ["compile", str(source), "--tab", "keep", "--ignorable-whitespace", "ignore"]
    )
    assert result.exit_code == 0, result.output
    assert _records(result.stdout) == {"a": "one\ttwo"}


def test_compile_uses_config_file(tmp_path: Path) -> None:
    source = _write(tmp_path, "values.yaml", "a: ''\n")
    config = _write(tmp_path, "options.yaml", "options:\n  empty-string: enable\n")
    result = runner.invoke(app, ["compile", str(source), "--config", str(config)])
    assert result.exit_code == 0, result.output
    assert _records(result.stdout) == {"a": ""}


def test_compile_reports_errors(tmp_path: Path) -> None:
    source = _write(tmp_path, "values.yaml", "a: ''\n")
    result = runner.invoke(app, ["compile", str(source)])
    assert result.exit_code == 1
    assert "Empty value" in result.output


def test_compile_rejects_unknown_policy(tmp_path: Path) -> None:
    source = _write(tmp_path, "values.yaml", "a: x\n")
    result = runner.invoke(app, ["compile", str(source), "--tab", "sideways"])
    assert result.exit_code == 1
    assert "Invalid compile options" in result.output


def test_macros_command_lists_macros(upper_macros: Path) -> None:
    result = runner.invoke(app, ["macros", str(upper_macros)])
    assert result.exit_code == 0, result.output
    assert "upper" in result.stdout
    assert "spaced" in result.stdout
    assert "a→A" in result.stdout


def test_verbose_compile_summarises_the_run(tmp_path: Path, upper_macros: Path) -> None:
    source = _write(tmp_path, "values.yaml", "k: bad face\n")
    target = tmp_path / "out.json"
    result = runner.invoke(
        app,
        [
            "-v",
            "compile",
            str(source),
            "--macros",
            str(upper_macros),
            "--macro",
            "upper",
            "--output",
            str(target),
        ],
    )
    assert result.exit_code == 0, result.output
    assert "Compiled 1 values" in result.output
    assert _records(target.read_text(encoding="utf-8")) == {"k": "BAD FACE"}
