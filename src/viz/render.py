"""Rendering of a VizGraph through Graphviz (via pydot)."""
from __future__ import annotations

import logging
import os
import webbrowser
from typing import Dict, Optional

import pydot

from common.errors import RenderError
from constants import Constants

from .graph import VizGraph

logger = logging.getLogger(__name__)


def _dot_escape(label: str) -> str:
    # Graphviz line breaks are the two-character sequence \n.
    return label.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def to_dot(graph: VizGraph, name: str = "dependencies") -> pydot.Dot:
    """Convert a VizGraph to a pydot digraph.

    Node ids are replaced by ``n0``, ``n1``... in insertion order because
    artifact identities contain characters Graphviz reads as port
    separators.
    """
    dot = pydot.Dot(name, graph_type="digraph", **graph.attributes)
    ids: Dict[str, str] = {}
    for index, (node_id, node) in enumerate(graph.nodes.items()):
        ids[node_id] = f"n{index}"
        dot.add_node(pydot.Node(ids[node_id], label=f'"{_dot_escape(node.label)}"', shape=node.shape))
    for src, dst in graph.edges:
        dot.add_edge(pydot.Edge(ids[src], ids[dst]))
    return dot


def to_dot_source(graph: VizGraph) -> str:
    """DOT source text for the graph."""
    return to_dot(graph).to_string()


def save_graph(graph: VizGraph, path: Optional[str] = None, fmt: Optional[str] = None) -> str:
    """Render the graph to ``path`` in format ``fmt``.

    Defaults come from Constants.VIZ_OUTPUT_FILE and Constants.VIZ_FORMAT.
    Format ``dot`` writes the DOT source without invoking Graphviz.

    Returns:
        The path written.

    Raises:
        RenderError: when the file cannot be written or Graphviz fails.
    """
    path = path or Constants.VIZ_OUTPUT_FILE
    fmt = (fmt or Constants.VIZ_FORMAT).lower()
    directory = os.path.dirname(path)
    try:
        if directory:
            os.makedirs(directory, exist_ok=True)
        dot = to_dot(graph)
        if fmt == "dot":
            with open(path, "w", encoding="utf-8") as fh:
                fh.write(dot.to_string())
        else:
            dot.write(path, format=fmt)
    except (OSError, AssertionError) as e:
        raise RenderError(f"Unable to render dependency graph to `{path}': {e}") from e
    logger.info("Dependency graph saved to `%s'.", path)
    return path


def open_in_viewer(path: str) -> bool:
    """Open a rendered file with the platform's default viewer."""
    url = "file://" + os.path.abspath(path)
    opened = webbrowser.open(url)
    if not opened:
        logger.warning("Unable to open `%s' in a viewer.", path)
    return opened
