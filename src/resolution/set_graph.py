"""Ordering of dependency sets by their `extends` relationships.

Each set may extend other sets; an extended set's dependencies are applied
before the extending set's own. Sets are discovered breadth-first from the
requested ids, then linearized with Kahn's algorithm so that every set
follows all the sets it extends. Sets that are ready at the same time are
emitted in discovery order, which keeps the output stable for a given
catalog and request order.
"""

from __future__ import annotations

import heapq
import logging
from collections import deque
from typing import Dict, Iterable, List, Mapping, Set

from common.errors import CyclicExtendsError
from common.logging_utils import extra_context, is_debug_enabled

from .models import DependencySetDef, SetId, SetResolution

logger = logging.getLogger(__name__)


class SetGraph:
    """Adjacency structure of discovered sets and their predecessors.

    A set's predecessors are the sets it extends. Only sets present in the
    catalog become nodes; references to unknown sets are left out.
    """

    def __init__(self) -> None:
        self._order: Dict[SetId, int] = {}
        self._predecessors: Dict[SetId, List[SetId]] = {}

    def __contains__(self, set_id: SetId) -> bool:
        return set_id in self._order

    def __len__(self) -> int:
        return len(self._order)

    @property
    def nodes(self) -> List[SetId]:
        """Nodes in discovery order."""
        return list(self._order)

    def add_node(self, set_id: SetId) -> None:
        if set_id not in self._order:
            self._order[set_id] = len(self._order)
            self._predecessors[set_id] = []

    def add_dependency(self, set_id: SetId, extended: SetId) -> None:
        """Record that ``set_id`` must be ordered after ``extended``."""
        self.add_node(set_id)
        if extended not in self._predecessors[set_id]:
            self._predecessors[set_id].append(extended)

    def predecessors(self, set_id: SetId) -> List[SetId]:
        return list(self._predecessors.get(set_id, []))

    def topological_sort(self) -> List[SetId]:
        """Return nodes with every set after the sets it extends.

        Raises:
            CyclicExtendsError: if the extends relation contains a cycle.
        """
        in_degree: Dict[SetId, int] = {}
        dependents: Dict[SetId, List[SetId]] = {node: [] for node in self._order}
        for node, preds in self._predecessors.items():
            known = [p for p in preds if p in self._order]
            in_degree[node] = len(known)
            for pred in known:
                dependents[pred].append(node)

        ready = [(self._order[node], node) for node, degree in in_degree.items() if degree == 0]
        heapq.heapify(ready)
        result: List[SetId] = []
        while ready:
            _, node = heapq.heappop(ready)
            result.append(node)
            for dependent in dependents[node]:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    heapq.heappush(ready, (self._order[dependent], dependent))

        if len(result) < len(self._order):
            placed = set(result)
            raise CyclicExtendsError(self._find_cycle([n for n in self._order if n not in placed]))
        return result

    def _find_cycle(self, unplaced: List[SetId]) -> List[SetId]:
        """Walk predecessor links from the first unplaced node until one repeats.

        Every unplaced node has at least one unplaced predecessor, so the
        walk always closes a loop.
        """
        remaining = set(unplaced)
        path: List[SetId] = []
        position: Dict[SetId, int] = {}
        node = unplaced[0]
        while node not in position:
            position[node] = len(path)
            path.append(node)
            node = next(p for p in self._predecessors[node] if p in remaining)
        # Reported in extends direction: each set extends the next one.
        return path[position[node]:] + [node]


def discover_sets(catalog: Mapping[SetId, DependencySetDef], requested: Iterable[SetId]):
    """Breadth-first discovery of requested sets and everything they extend.

    Returns:
        Tuple of (SetGraph, list of unknown ids in discovery order).
    """
    graph = SetGraph()
    unknown: List[SetId] = []
    visited: Set[SetId] = set()
    queue = deque(requested)

    while queue:
        set_id = queue.popleft()
        if set_id in visited:
            continue
        # Visited even when unknown, so each unknown id is reported once.
        visited.add(set_id)
        definition = catalog.get(set_id)
        if definition is None:
            unknown.append(set_id)
            continue
        graph.add_node(set_id)
        for extended in definition.extends:
            graph.add_dependency(set_id, extended)
            queue.append(extended)

    return graph, unknown


def resolve_sets(catalog: Mapping[SetId, DependencySetDef], requested: Iterable[SetId]) -> SetResolution:
    """Compute the order in which dependency sets are applied.

    Args:
        catalog: Mapping of set id to definition.
        requested: Requested set ids; duplicates are allowed.

    Returns:
        SetResolution with the ordered known ids and the unknown ids.

    Raises:
        CyclicExtendsError: if the requested sets extend each other in a cycle.
    """
    requested = list(requested)
    graph, unknown = discover_sets(catalog, requested)
    ordered = graph.topological_sort()

    if is_debug_enabled(logger):
        logger.debug(
            "Ordered dependency sets",
            extra=extra_context(
                event="function_exit",
                component="set_graph",
                action="resolve_sets",
                requested=[str(s) for s in requested],
                ordered=[str(s) for s in ordered],
                unknown=[str(s) for s in unknown] or None,
            ),
        )
    return SetResolution(ordered=tuple(ordered), unknown=tuple(unknown))
