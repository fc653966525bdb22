"""Base analyzer class and data models for code flow analysis."""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


# Flowchart layout: one vertical lane, fixed row height
LANE_X = 200
ROW_HEIGHT = 80


class NodeType(Enum):
    """Types of steps in the flowchart."""
    START = "start"
    FUNCTION = "function"
    VARIABLE = "variable"
    CLASS = "class"
    DECISION = "decision"
    LOOP = "loop"
    ERROR_HANDLING = "error-handling"
    OUTPUT = "output"
    PROCESS = "process"
    END = "end"


class NodeColor:
    """Display colors per construct."""
    START = "#00f2ff"
    END = "#ff4444"
    FUNCTION = "#bc13fe"
    VARIABLE = "#00ff88"
    CLASS = "#4ec9b0"
    DECISION = "#ff6b35"
    LOOP = "#ff0055"
    ERROR_HANDLING = "#ffa500"
    OUTPUT = "#ffd700"
    PROCESS = "#bc13fe"


@dataclass(frozen=True)
class FunctionRecord:
    """A function found in the source."""
    name: str
    line: int
    kind: str = "function"  # function | arrow-function
    param_count: int = 0
    is_async: bool = False

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "line": self.line,
            "kind": self.kind,
            "paramCount": self.param_count,
            "isAsync": self.is_async,
        }


@dataclass(frozen=True)
class VariableRecord:
    """A variable declaration or assignment."""
    name: str
    line: int
    kind: str = "variable"  # variable | arrow-function
    is_async: Optional[bool] = None

    def to_dict(self) -> dict:
        data = {"name": self.name, "line": self.line, "kind": self.kind}
        if self.is_async is not None:
            data["isAsync"] = self.is_async
        return data


@dataclass(frozen=True)
class ClassRecord:
    """A class declaration and its method names."""
    name: str
    line: int
    method_names: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "line": self.line,
            "methodNames": list(self.method_names),
        }


@dataclass(frozen=True)
class ImportRecord:
    """An import declaration."""
    source: str
    line: int
    specifier_names: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "line": self.line,
            "specifierNames": list(self.specifier_names),
        }


@dataclass(frozen=True)
class ExportRecord:
    """A named or default export."""
    name: str
    line: int
    kind: str = "named"  # named | default

    def to_dict(self) -> dict:
        return {"name": self.name, "line": self.line, "kind": self.kind}


@dataclass(frozen=True)
class ControlFlowRecord:
    """A conditional, loop or try/catch statement."""
    kind: str  # conditional | loop | try-catch
    line: int
    loop_kind: Optional[str] = None  # for | while

    def to_dict(self) -> dict:
        data = {"kind": self.kind, "line": self.line}
        if self.loop_kind is not None:
            data["loopKind"] = self.loop_kind
        return data


@dataclass(frozen=True)
class AsyncOpRecord:
    """An asynchronous operation (await)."""
    line: int
    kind: str = "await"

    def to_dict(self) -> dict:
        return {"kind": self.kind, "line": self.line}


@dataclass(frozen=True)
class FlowNode:
    """One step of the flowchart."""
    id: int
    type: NodeType
    label: str
    x: int
    y: int
    color: str

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "type": self.type.value,
            "label": self.label,
            "x": self.x,
            "y": self.y,
            "color": self.color,
        }


@dataclass(frozen=True)
class FlowEdge:
    """Connection between two consecutive flowchart steps."""
    source: int
    target: int

    def to_dict(self) -> dict:
        return {"from": self.source, "to": self.target}


@dataclass(frozen=True)
class Flowchart:
    """Ordered nodes and the linear chain of edges linking them."""
    nodes: tuple[FlowNode, ...] = ()
    connections: tuple[FlowEdge, ...] = ()

    def to_dict(self) -> dict:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "connections": [edge.to_dict() for edge in self.connections],
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Result of analyzing one block of source code."""
    language: str
    total_lines: int
    functions: tuple[FunctionRecord, ...] = ()
    variables: tuple[VariableRecord, ...] = ()
    classes: tuple[ClassRecord, ...] = ()
    imports: tuple[ImportRecord, ...] = ()
    exports: tuple[ExportRecord, ...] = ()
    control_flow: tuple[ControlFlowRecord, ...] = ()
    async_operations: tuple[AsyncOpRecord, ...] = ()
    flowchart: Flowchart = field(default_factory=Flowchart)
    explanation: tuple[str, ...] = ()

    @property
    def node_types(self) -> list[str]:
        """Flowchart node types in order."""
        return [node.type.value for node in self.flowchart.nodes]

    def to_dict(self) -> dict:
        """Convert to a plain, JSON-serializable dictionary."""
        return {
            "language": self.language,
            "totalLines": self.total_lines,
            "functions": [r.to_dict() for r in self.functions],
            "variables": [r.to_dict() for r in self.variables],
            "classes": [r.to_dict() for r in self.classes],
            "imports": [r.to_dict() for r in self.imports],
            "exports": [r.to_dict() for r in self.exports],
            "controlFlow": [r.to_dict() for r in self.control_flow],
            "asyncOperations": [r.to_dict() for r in self.async_operations],
            "flowchart": self.flowchart.to_dict(),
            "explanation": list(self.explanation),
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)


class FlowBuilder:
    """Per-call accumulator threaded through a traversal or scan.

    Allocates node ids from 0 and stacks nodes vertically. The start node is
    added on construction; build() appends the end node, links every node to
    the next one and freezes the collected records.
    """

    def __init__(self):
        self.functions: list[FunctionRecord] = []
        self.variables: list[VariableRecord] = []
        self.classes: list[ClassRecord] = []
        self.imports: list[ImportRecord] = []
        self.exports: list[ExportRecord] = []
        self.control_flow: list[ControlFlowRecord] = []
        self.async_operations: list[AsyncOpRecord] = []
        self.explanation: list[str] = []
        self.nodes: list[FlowNode] = []

        self._next_id = 0
        self._next_y = 0

        self.add_node(NodeType.START, "Start", NodeColor.START)

    def add_node(self, node_type: NodeType, label: str, color: str) -> FlowNode:
        """Append a node below the previous one."""
        node = FlowNode(
            id=self._next_id,
            type=node_type,
            label=label,
            x=LANE_X,
            y=self._next_y,
            color=color,
        )
        self.nodes.append(node)
        self._next_id += 1
        self._next_y += ROW_HEIGHT
        return node

    def explain(self, line: int, description: str) -> None:
        self.explanation.append(f"Line {line}: {description}")

    def build(self, language: str, total_lines: int) -> AnalysisResult:
        """Close the chart with the end node and freeze the result."""
        self.add_node(NodeType.END, "End", NodeColor.END)

        connections = tuple(
            FlowEdge(source=self.nodes[i].id, target=self.nodes[i + 1].id)
            for i in range(len(self.nodes) - 1)
        )

        return AnalysisResult(
            language=language,
            total_lines=total_lines,
            functions=tuple(self.functions),
            variables=tuple(self.variables),
            classes=tuple(self.classes),
            imports=tuple(self.imports),
            exports=tuple(self.exports),
            control_flow=tuple(self.control_flow),
            async_operations=tuple(self.async_operations),
            flowchart=Flowchart(nodes=tuple(self.nodes), connections=connections),
            explanation=tuple(self.explanation),
        )


def count_code_lines(code: str) -> int:
    """Number of lines that are not blank after trimming."""
    return sum(1 for line in code.split("\n") if line.strip())


class BaseAnalyzer(ABC):
    """Base class for all language-specific analyzers."""

    language_label: str = "Generic"

    @abstractmethod
    def analyze(self, code: str) -> AnalysisResult:
        """Analyze source text and return its flow analysis."""
        pass

    @abstractmethod
    def aliases(self) -> list[str]:
        """Return the language tags this analyzer handles."""
        pass

    def can_analyze(self, language: str) -> bool:
        """Check if this analyzer handles the given language tag."""
        return language.strip().lower() in self.aliases()

    def count_lines(self, code: str) -> int:
        """Line count reported as totalLines."""
        return count_code_lines(code)

    def failure_result(self, code: str, message: str) -> AnalysisResult:
        """Minimal start/end result carrying a syntax-error explanation."""
        builder = FlowBuilder()
        builder.explanation.append(f"Syntax Error: {message}")
        return builder.build(self.language_label, self.count_lines(code))
