"""Line-oriented Python analyzer.

There is no Python grammar behind this: each non-blank line is trimmed and
classified by prefix or substring, first match wins.
"""

import logging
import re

from .base_analyzer import (
    AnalysisResult,
    BaseAnalyzer,
    ControlFlowRecord,
    FlowBuilder,
    FunctionRecord,
    NodeColor,
    NodeType,
    VariableRecord,
)


logger = logging.getLogger("codeflow.analyzers.python")


class PythonAnalyzer(BaseAnalyzer):
    """Heuristic scanner for Python source."""

    language_label = "Python"

    PATTERNS = {
        "def_name": re.compile(r"^def\s+(\w+)"),
        "assign_target": re.compile(r"(\w+)\s*="),
    }

    CONDITIONAL_PREFIXES = ("if ", "elif ", "else:")
    LOOP_PREFIXES = ("for ", "while ")

    def aliases(self) -> list[str]:
        return ["python", "py"]

    def analyze(self, code: str) -> AnalysisResult:
        """Scan the code line by line."""
        builder = FlowBuilder()

        for line_num, line in enumerate(code.split("\n"), 1):
            stripped = line.strip()
            if not stripped:
                continue
            self._classify(builder, stripped, line_num)

        result = builder.build(self.language_label, self.count_lines(code))
        logger.debug(
            f"Python analysis: {len(result.flowchart.nodes)} nodes, "
            f"{len(result.explanation)} explanation entries"
        )
        return result

    def _classify(self, builder: FlowBuilder, stripped: str, line_num: int) -> None:
        """Record the construct on one trimmed line, if any."""
        if stripped.startswith("def "):
            name = self._function_name(stripped)
            builder.functions.append(FunctionRecord(
                name=name,
                line=line_num,
                param_count=self._param_count(stripped),
            ))
            builder.add_node(NodeType.FUNCTION, f"Function: {name}", NodeColor.FUNCTION)
            builder.explain(line_num, f"Function '{name}' is defined")

        elif " = " in stripped and "==" not in stripped:
            name = self._variable_name(stripped)
            builder.variables.append(VariableRecord(name=name, line=line_num))
            builder.add_node(NodeType.VARIABLE, f"Variable: {name}", NodeColor.VARIABLE)
            builder.explain(line_num, f"Variable '{name}' is assigned")

        elif stripped.startswith(self.CONDITIONAL_PREFIXES):
            builder.control_flow.append(ControlFlowRecord(kind="conditional", line=line_num))
            builder.add_node(NodeType.DECISION, "Decision", NodeColor.DECISION)
            builder.explain(line_num, "Conditional statement")

        elif stripped.startswith(self.LOOP_PREFIXES):
            loop_kind = "for" if stripped.startswith("for ") else "while"
            builder.control_flow.append(ControlFlowRecord(
                kind="loop", line=line_num, loop_kind=loop_kind
            ))
            builder.add_node(NodeType.LOOP, "Loop", NodeColor.LOOP)
            builder.explain(line_num, "Loop statement")

        elif "print(" in stripped:
            builder.add_node(NodeType.OUTPUT, "Output", NodeColor.OUTPUT)
            builder.explain(line_num, "Print statement")

    def _function_name(self, stripped: str) -> str:
        match = self.PATTERNS["def_name"].match(stripped)
        if match:
            return match.group(1)
        # "def (" or similar: fall back to whatever precedes the parenthesis
        name = stripped[4:].split("(", 1)[0].strip()
        return name or "function"

    def _param_count(self, stripped: str) -> int:
        """Count top-level comma-separated parameters of a def line."""
        start = stripped.find("(")
        if start < 0:
            return 0

        params, current, depth = [], [], 0
        for char in stripped[start + 1:]:
            if char in "([{":
                depth += 1
            elif char in ")]}":
                if depth == 0:
                    break
                depth -= 1
            elif char == "," and depth == 0:
                params.append("".join(current))
                current = []
                continue
            current.append(char)
        params.append("".join(current))

        return len([p for p in params if p.strip()])

    def _variable_name(self, stripped: str) -> str:
        """Word immediately before the first '='."""
        match = self.PATTERNS["assign_target"].search(stripped)
        return match.group(1) if match else "variable"
