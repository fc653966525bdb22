"""Code flow analysis: construct inventory, linear flowchart and explanations."""

from .analyzers import AnalysisResult, analyze

__version__ = "0.1.0"

__all__ = ["AnalysisResult", "analyze", "__version__"]
