"""Tests for language dispatch and the never-raise contract."""

import pytest

from codeflow.analyzers import (
    GenericAnalyzer,
    JavaScriptAnalyzer,
    PythonAnalyzer,
    analyze,
    select_analyzer,
    supported_languages,
)


@pytest.mark.parametrize("language, expected", [
    ("javascript", JavaScriptAnalyzer),
    ("js", JavaScriptAnalyzer),
    ("JavaScript", JavaScriptAnalyzer),
    (" JS ", JavaScriptAnalyzer),
    ("python", PythonAnalyzer),
    ("py", PythonAnalyzer),
    ("PY", PythonAnalyzer),
    ("rust", GenericAnalyzer),
    ("typescript", GenericAnalyzer),
    ("", GenericAnalyzer),
    (None, GenericAnalyzer),
])
def test_select_analyzer(language, expected):
    assert isinstance(select_analyzer(language), expected)


def test_supported_languages():
    assert supported_languages() == {
        "JavaScript": ["javascript", "js"],
        "Python": ["python", "py"],
    }


@pytest.mark.parametrize("code", ["", "fn main() {}", "def x(): pass\nx = 1\nprint(x)"])
def test_generic_fallback_is_fixed(code):
    result = analyze(code, "rust")
    data = result.to_dict()

    assert data["language"] == "Generic"
    assert [n["id"] for n in data["flowchart"]["nodes"]] == [0, 1, 2]
    assert [n["type"] for n in data["flowchart"]["nodes"]] == ["start", "process", "end"]
    assert data["flowchart"]["nodes"][1]["label"] == "Process Code"
    assert data["flowchart"]["connections"] == [{"from": 0, "to": 1}, {"from": 1, "to": 2}]
    assert data["explanation"] == [
        "Generic code analysis - specific language features not recognized"
    ]
    for key in ("functions", "variables", "classes", "imports", "exports",
                "controlFlow", "asyncOperations"):
        assert data[key] == []


def test_generic_total_lines_counts_non_blank():
    assert analyze("a\n\nb\n", "go").total_lines == 2


def test_internal_failure_becomes_syntax_error(monkeypatch):
    def explode(self, code):
        raise RuntimeError("visitor defect")

    monkeypatch.setattr(PythonAnalyzer, "analyze", explode)
    result = analyze("x = 1\n\ny = 2", "python")

    assert result.language == "Python"
    assert result.total_lines == 2
    assert result.explanation == ("Syntax Error: visitor defect",)
    assert result.node_types == ["start", "end"]


def test_internal_failure_in_javascript_path(monkeypatch):
    def explode(self, code):
        raise RecursionError()

    monkeypatch.setattr(JavaScriptAnalyzer, "parse", explode)
    result = analyze("let a = 1;\n", "js")

    assert result.explanation == ("Syntax Error: RecursionError",)
    assert result.total_lines == 2
    assert result.node_types == ["start", "end"]


def test_none_code_is_empty():
    result = analyze(None, "javascript")
    assert result.node_types == ["start", "end"]
