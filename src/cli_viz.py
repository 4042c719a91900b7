"""CLI entry point for the dependency visualization.

Builds the graph of how the project's dependency list is assembled, renders
it with Graphviz and opens the result unless told not to.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from catalog import CatalogCache
from cli_resolve import load_project_and_catalog
from constants import Constants, ExitCodes
from viz.graph import build_graph
from viz.render import open_in_viewer, save_graph, to_dot_source

logger = logging.getLogger(__name__)


def run_viz(args: Any, cache: Optional[CatalogCache] = None) -> int:
    """Entry point for the viz command; returns an exit code.

    Raises:
        DepsetsError: on unreadable inputs or a failed rendering.
    """
    cache = cache or CatalogCache()
    project, catalog = load_project_and_catalog(args, cache)
    graph = build_graph(project, catalog, getattr(args, "PROFILES", None))

    if getattr(args, "PRINT_DOT", False):
        print(to_dot_source(graph))
        return ExitCodes.SUCCESS.value

    path = save_graph(graph, Constants.VIZ_OUTPUT_FILE, Constants.VIZ_FORMAT)
    if not getattr(args, "NO_VIEW", False):
        open_in_viewer(path)
    return ExitCodes.SUCCESS.value
