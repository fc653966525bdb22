"""Fallback analyzer for languages without dedicated support."""

from .base_analyzer import (
    AnalysisResult,
    BaseAnalyzer,
    FlowBuilder,
    NodeColor,
    NodeType,
)


class GenericAnalyzer(BaseAnalyzer):
    """Produces the same start -> process -> end chart for any code."""

    language_label = "Generic"

    EXPLANATION = "Generic code analysis - specific language features not recognized"

    def aliases(self) -> list[str]:
        return []

    def can_analyze(self, language: str) -> bool:
        return True

    def analyze(self, code: str) -> AnalysisResult:
        builder = FlowBuilder()
        builder.add_node(NodeType.PROCESS, "Process Code", NodeColor.PROCESS)
        builder.explanation.append(self.EXPLANATION)
        return builder.build(self.language_label, self.count_lines(code))
