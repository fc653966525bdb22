"""Language analyzers for code flow analysis."""

from .base_analyzer import (
    AnalysisResult,
    AsyncOpRecord,
    BaseAnalyzer,
    ClassRecord,
    ControlFlowRecord,
    ExportRecord,
    FlowBuilder,
    FlowEdge,
    Flowchart,
    FlowNode,
    FunctionRecord,
    ImportRecord,
    NodeType,
    VariableRecord,
)
from .dispatcher import analyze, select_analyzer, supported_languages
from .generic_analyzer import GenericAnalyzer
from .javascript_analyzer import JavaScriptAnalyzer
from .python_analyzer import PythonAnalyzer

__all__ = [
    "AnalysisResult",
    "AsyncOpRecord",
    "BaseAnalyzer",
    "ClassRecord",
    "ControlFlowRecord",
    "ExportRecord",
    "FlowBuilder",
    "FlowEdge",
    "Flowchart",
    "FlowNode",
    "FunctionRecord",
    "ImportRecord",
    "NodeType",
    "VariableRecord",
    "analyze",
    "select_analyzer",
    "supported_languages",
    "GenericAnalyzer",
    "JavaScriptAnalyzer",
    "PythonAnalyzer",
]
