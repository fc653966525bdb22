"""Export of analysis flowcharts as networkx graphs."""

import json
import logging
from pathlib import Path

import networkx as nx

from ..analyzers.base_analyzer import AnalysisResult, Flowchart


logger = logging.getLogger("codeflow.graph")

EXPORT_FORMATS = ("json", "graphml")


def flowchart_to_graph(flowchart: Flowchart) -> nx.DiGraph:
    """Build a directed graph with one node per flowchart step."""
    graph = nx.DiGraph()

    for node in flowchart.nodes:
        graph.add_node(
            node.id,
            type=node.type.value,
            label=node.label,
            x=node.x,
            y=node.y,
            color=node.color
        )

    for edge in flowchart.connections:
        graph.add_edge(edge.source, edge.target)

    return graph


def is_linear_chain(graph: nx.DiGraph) -> bool:
    """Check the graph is one path visiting every node in id order."""
    if graph.number_of_nodes() == 0:
        return False
    order = sorted(graph.nodes)
    if graph.number_of_edges() != len(order) - 1:
        return False
    return all(graph.has_edge(a, b) for a, b in zip(order, order[1:]))


def export_flowchart(result: AnalysisResult, output_path: Path, fmt: str = "json") -> None:
    """Write the flowchart of an analysis to disk.

    Args:
        result: Analysis whose flowchart is exported
        output_path: Destination file
        fmt: "json" for a node/edge document, "graphml" for GraphML
    """
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt}")

    graph = flowchart_to_graph(result.flowchart)
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if fmt == "graphml":
        nx.write_graphml(graph, output_path)
    else:
        data = {
            "format": "codeflow_flowchart_v1",
            "language": result.language,
            "nodes": [],
            "edges": []
        }

        for node_id, node_data in graph.nodes(data=True):
            data["nodes"].append({
                "id": node_id,
                **node_data
            })

        for source, target in graph.edges():
            data["edges"].append({
                "from": source,
                "to": target
            })

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    logger.info(f"Exported flowchart to {output_path}")
