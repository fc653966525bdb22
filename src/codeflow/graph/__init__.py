"""Flowchart graph export."""

from .flowchart_graph import EXPORT_FORMATS, export_flowchart, flowchart_to_graph, is_linear_chain

__all__ = ["EXPORT_FORMATS", "export_flowchart", "flowchart_to_graph", "is_linear_chain"]
