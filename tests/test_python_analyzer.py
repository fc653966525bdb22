"""Tests for the line-heuristic Python analyzer."""

from textwrap import dedent

import pytest

from codeflow.analyzers import PythonAnalyzer, analyze


@pytest.fixture
def analyzer():
    return PythonAnalyzer()


def test_end_to_end_scenario():
    code = "def foo():\n    x = 1\n    print(x)\n"
    result = analyze(code, "python")

    assert result.language == "Python"
    assert result.total_lines == 3
    assert result.node_types == ["start", "function", "variable", "output", "end"]
    assert result.explanation == (
        "Line 1: Function 'foo' is defined",
        "Line 2: Variable 'x' is assigned",
        "Line 3: Print statement",
    )


def test_total_lines_excludes_blank_lines(analyzer):
    result = analyzer.analyze("x = 1\n\ny = 2\n   \nprint(y)")
    assert result.total_lines == 3


def test_line_numbers_follow_source_positions(analyzer):
    result = analyzer.analyze("x = 1\n\ny = 2\n   \nprint(y)")
    assert [v.line for v in result.variables] == [1, 3]
    assert result.explanation[-1] == "Line 5: Print statement"


def test_function_record(analyzer):
    result = analyzer.analyze("def add(a, b=2, *args):\n    return a\ndef run():\n    pass")
    assert [f.to_dict() for f in result.functions] == [
        {"name": "add", "line": 1, "kind": "function", "paramCount": 3, "isAsync": False},
        {"name": "run", "line": 3, "kind": "function", "paramCount": 0, "isAsync": False},
    ]
    labels = [n.label for n in result.flowchart.nodes]
    assert labels == ["Start", "Function: add", "Function: run", "End"]


def test_conditionals_and_loops(analyzer):
    code = dedent("""
        if x == 1:
            pass
        elif y:
            pass
        else:
            pass
        for i in range(3):
            pass
        while True:
            break
    """)
    result = analyzer.analyze(code)

    assert [c.to_dict() for c in result.control_flow] == [
        {"kind": "conditional", "line": 2},
        {"kind": "conditional", "line": 4},
        {"kind": "conditional", "line": 6},
        {"kind": "loop", "line": 8, "loopKind": "for"},
        {"kind": "loop", "line": 10, "loopKind": "while"},
    ]
    assert result.node_types == [
        "start", "decision", "decision", "decision", "loop", "loop", "end"
    ]
    assert result.flowchart.nodes[1].label == "Decision"
    assert result.flowchart.nodes[4].label == "Loop"
    assert result.flowchart.nodes[4].color == "#ff0055"


def test_first_matching_rule_wins(analyzer):
    code = "value = print('x')\nresult = a if b else c\nx == y\nimport os"
    result = analyzer.analyze(code)

    # Assignment outranks output; comparisons and imports are not classified
    assert result.node_types == ["start", "variable", "variable", "end"]
    assert [v.name for v in result.variables] == ["value", "result"]
    assert len(result.explanation) == 2


def test_variable_name_is_word_before_equals(analyzer):
    result = analyzer.analyze("count: int = 0\nself.total = 0\nprint('a = b')")
    assert [v.name for v in result.variables] == ["int", "total", "a"]
    assert [n.label for n in result.flowchart.nodes][1:-1] == [
        "Variable: int", "Variable: total", "Variable: a"
    ]


def test_variable_name_falls_back_without_word(analyzer):
    result = analyzer.analyze("(1) = 2")
    assert [v.name for v in result.variables] == ["variable"]


def test_param_count_ignores_nested_commas(analyzer):
    result = analyzer.analyze("def f(a, b=(1, 2), c={'k': [3, 4]}):\n    pass")
    assert result.functions[0].param_count == 3
    assert analyzer.analyze("def g(x=(1,2)):").functions[0].param_count == 1


def test_equality_suppresses_assignment(analyzer):
    result = analyzer.analyze("flag = a == b")
    assert result.variables == ()
    assert result.node_types == ["start", "end"]


def test_empty_code(analyzer):
    result = analyzer.analyze("\n  \n")
    assert result.total_lines == 0
    assert result.node_types == ["start", "end"]
    assert result.explanation == ()
