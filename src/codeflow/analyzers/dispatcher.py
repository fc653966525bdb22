"""Entry point of the analysis engine: picks an analyzer per language tag."""

import logging
from typing import Optional

from .base_analyzer import AnalysisResult, BaseAnalyzer
from .generic_analyzer import GenericAnalyzer
from .javascript_analyzer import JavaScriptAnalyzer
from .python_analyzer import PythonAnalyzer


logger = logging.getLogger("codeflow.analyzers.dispatcher")

# Stateless, shared by every call
_ANALYZERS: list[BaseAnalyzer] = [JavaScriptAnalyzer(), PythonAnalyzer()]
_FALLBACK = GenericAnalyzer()


def select_analyzer(language: Optional[str]) -> BaseAnalyzer:
    """Return the analyzer registered for a language tag (case-insensitive)."""
    tag = str(language or "").strip().lower()
    for analyzer in _ANALYZERS:
        if analyzer.can_analyze(tag):
            return analyzer
    return _FALLBACK


def supported_languages() -> dict[str, list[str]]:
    """Map analyzer labels to the tags that select them."""
    return {analyzer.language_label: analyzer.aliases() for analyzer in _ANALYZERS}


def analyze(code: Optional[str], language: Optional[str]) -> AnalysisResult:
    """Analyze code written in the given language.

    Never raises: any failure inside an analyzer is logged and turned into a
    start/end result whose explanation carries a "Syntax Error:" entry.

    Args:
        code: Source text, possibly empty
        language: Language tag such as "javascript", "js", "python" or "py"

    Returns:
        AnalysisResult for the code
    """
    if not isinstance(code, str):
        code = "" if code is None else str(code)
    analyzer = select_analyzer(language)

    try:
        return analyzer.analyze(code)
    except Exception as e:
        logger.error(f"{analyzer.language_label} analysis failed: {e}", exc_info=True)
        return analyzer.failure_result(code, str(e) or type(e).__name__)
