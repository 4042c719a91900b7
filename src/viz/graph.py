"""Node/edge graph showing how a project's dependencies were assembled.

The root node stands for the project. It points at each direct dependency
and at each requested dependency set; a set points at the sets it extends
and at its own dependencies. Artifacts and sets are keyed by identity, so an
artifact reached from several places is a single node with one inbound edge
per referencing node.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

from constants import Constants, NodeShapes
from resolution.merger import distinct_dependencies, select_profiles
from resolution.models import DependencySetDef, DependencySpec, ProjectDescriptor, SetId

logger = logging.getLogger(__name__)

ROOT_NODE_ID = "root"


@dataclass(frozen=True)
class VizNode:
    """A node to render."""
    label: str
    shape: str


@dataclass
class VizGraph:
    """Node table and edge list, both in insertion order."""
    nodes: Dict[str, VizNode] = field(default_factory=dict)
    edges: List[Tuple[str, str]] = field(default_factory=list)
    attributes: Dict[str, str] = field(default_factory=dict)
    _edge_set: Set[Tuple[str, str]] = field(default_factory=set, repr=False, compare=False)

    def add_node(self, node_id: str, label: str, shape: str) -> bool:
        """Add a node unless it exists; True when it was added."""
        if node_id in self.nodes:
            return False
        self.nodes[node_id] = VizNode(label=label, shape=shape)
        return True

    def add_edge(self, from_id: str, to_id: str) -> bool:
        """Add an edge unless it exists; True when it was added."""
        edge = (from_id, to_id)
        if edge in self._edge_set:
            return False
        self._edge_set.add(edge)
        self.edges.append(edge)
        return True

    def inbound(self, node_id: str) -> List[str]:
        return [src for src, dst in self.edges if dst == node_id]

    def outbound(self, node_id: str) -> List[str]:
        return [dst for src, dst in self.edges if src == node_id]


def project_label(project: ProjectDescriptor) -> str:
    return f"{project.identity}\n{project.version}"


def dependency_node_id(dep: DependencySpec) -> str:
    return f"dep-{dep.identity}"


def dependency_label(dep: DependencySpec) -> str:
    return f"{dep.artifact}\n{dep.version}"


def set_node_id(set_id: SetId) -> str:
    # repr keeps set id 1 and set id "1" apart.
    return f"set-{set_id!r}"


def _add_dependency(graph: VizGraph, from_id: str, dep: DependencySpec) -> None:
    node_id = dependency_node_id(dep)
    graph.add_node(node_id, dependency_label(dep), NodeShapes.ARTIFACT.value)
    graph.add_edge(from_id, node_id)


def _requested_sets(project: ProjectDescriptor, profiles) -> List[SetId]:
    source = project.source_view
    requested = list(source.dependency_sets)
    for prof in profiles:
        authored = source.profile(prof.name) or prof
        requested.extend(authored.dependency_sets)
    return list(dict.fromkeys(requested))


def build_graph(
    project: ProjectDescriptor,
    catalog: Optional[Mapping[SetId, DependencySetDef]],
    active_profiles: Optional[Sequence[str]] = None,
) -> VizGraph:
    """Build the visualization graph for an authored project.

    Args:
        project: Project descriptor; its authored view is used when merged.
        catalog: Catalog of dependency sets; None behaves as empty.
        active_profiles: Profile names to include; None for all.
    """
    catalog = catalog or {}
    source = project.source_view
    profiles = select_profiles(source, active_profiles)

    graph = VizGraph(attributes={"color": Constants.VIZ_GRAPH_COLOR})
    graph.add_node(ROOT_NODE_ID, project_label(source), NodeShapes.ROOT.value)

    direct = distinct_dependencies(
        list(source.dependencies) + [d for prof in profiles for d in prof.dependencies]
    )
    for dep in direct:
        _add_dependency(graph, ROOT_NODE_ID, dep)

    visited: Set[SetId] = set()
    queue = deque((ROOT_NODE_ID, set_id) for set_id in _requested_sets(source, profiles))
    while queue:
        from_id, set_id = queue.popleft()
        definition = catalog.get(set_id)
        if definition is None:
            logger.debug("Dependency set %s is not in the catalog; omitted from graph.", set_id)
            continue
        node_id = set_node_id(set_id)
        graph.add_node(node_id, str(set_id), NodeShapes.DEPENDENCY_SET.value)
        graph.add_edge(from_id, node_id)
        if set_id in visited:
            continue
        visited.add(set_id)
        for extended in definition.extends:
            queue.append((node_id, extended))
        for dep in definition.dependencies:
            _add_dependency(graph, node_id, dep)

    logger.debug(
        "Built dependency graph for %s: %d nodes, %d edges.",
        source.identity,
        len(graph.nodes),
        len(graph.edges),
    )
    return graph
