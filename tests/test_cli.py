"""Tests for the click command line interface."""

import json

import pytest
from click.testing import CliRunner

from codeflow.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def js_file(tmp_path):
    path = tmp_path / "app.js"
    path.write_text("function add(a,b) { return a+b; }\nconsole.log(add(1, 2));\n", encoding="utf-8")
    return path


def test_analyze_json_output(runner, js_file, config_file):
    result = runner.invoke(cli, ["--config", str(config_file), "analyze", str(js_file), "--json"])
    assert result.exit_code == 0, result.output

    data = json.loads(result.stdout)
    assert data["language"] == "JavaScript"
    assert data["totalLines"] == 3
    assert [n["type"] for n in data["flowchart"]["nodes"]] == ["start", "function", "output", "end"]


def test_analyze_language_override(runner, tmp_path, config_file):
    path = tmp_path / "script.txt"
    path.write_text("x = 1\nprint(x)\n", encoding="utf-8")

    result = runner.invoke(cli, [
        "--config", str(config_file), "analyze", str(path), "-l", "py", "--json"
    ])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["language"] == "Python"


def test_analyze_unknown_extension_is_generic(runner, tmp_path, config_file):
    path = tmp_path / "main.rs"
    path.write_text("fn main() {}\n", encoding="utf-8")

    result = runner.invoke(cli, ["--config", str(config_file), "analyze", str(path), "--json"])
    assert json.loads(result.stdout)["language"] == "Generic"


def test_analyze_table_output(runner, js_file, config_file):
    result = runner.invoke(cli, ["--config", str(config_file), "analyze", str(js_file)])
    assert result.exit_code == 0, result.output
    assert "Code Flow" in result.stdout
    assert "Function: add" in result.stdout
    assert "Line 1: Function 'add'" in result.stdout


def test_save_and_history(runner, js_file, config_file, history_path):
    result = runner.invoke(cli, [
        "--config", str(config_file), "analyze", str(js_file), "--json",
        "--save", "alice", "app.js",
    ])
    assert result.exit_code == 0, result.output
    assert history_path.exists()

    result = runner.invoke(cli, ["--config", str(config_file), "history", "alice"])
    assert result.exit_code == 0, result.output
    assert "JavaScript" in result.stdout

    result = runner.invoke(cli, ["--config", str(config_file), "history", "nobody"])
    assert "No analyses found" in result.stdout


def test_history_clear(runner, js_file, config_file):
    runner.invoke(cli, [
        "--config", str(config_file), "analyze", str(js_file), "--json",
        "--save", "alice", "app.js",
    ])

    result = runner.invoke(cli, ["--config", str(config_file), "history", "alice", "--clear"])
    assert result.exit_code == 0, result.output
    assert "Removed 1 analyses" in result.stdout

    result = runner.invoke(cli, ["--config", str(config_file), "history", "alice"])
    assert "No analyses found" in result.stdout


def test_export_command(runner, js_file, tmp_path, config_file):
    output = tmp_path / "flow.json"
    result = runner.invoke(cli, [
        "--config", str(config_file), "export", str(js_file), str(output)
    ])
    assert result.exit_code == 0, result.output
    assert len(json.loads(output.read_text(encoding="utf-8"))["nodes"]) == 4
