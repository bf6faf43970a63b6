"""Shared graph algorithms for content graphs.

Pure functions that read a ContentGraph without modifying it. Every
ordering is deterministic for a fixed build: ties are broken by node
insertion order, never by hashing.
"""

from __future__ import annotations

import heapq
from typing import TYPE_CHECKING, Any

from levelforge.graph.errors import CycleError
from levelforge.observability.logging import get_logger

if TYPE_CHECKING:
    from levelforge.graph.graph import ContentGraph

log = get_logger(__name__)


def roots(graph: ContentGraph[Any]) -> list[str]:
    """Nodes with no incoming edge, in insertion order."""
    targets = {e.target for e in graph.edges if e.source in graph}
    return [nid for nid in graph.node_ids() if nid not in targets]


def ancestors(graph: ContentGraph[Any], node_id: str) -> set[str]:
    """All nodes with a path to *node_id* (excluding *node_id* itself).

    Edges whose source is not a node of the graph are ignored.
    """
    parents: dict[str, list[str]] = {}
    for edge in graph.edges:
        if edge.source in graph:
            parents.setdefault(edge.target, []).append(edge.source)

    found: set[str] = set()
    queue = list(parents.get(node_id, []))
    while queue:
        current = queue.pop()
        if current in found or current == node_id:
            continue
        found.add(current)
        queue.extend(parents.get(current, []))
    return found


def _kahn(graph: ContentGraph[Any]) -> tuple[list[str], list[str]]:
    """Kahn's algorithm with insertion-order tie-breaking.

    Returns:
        ``(ordered, leftover)``; *leftover* is non-empty iff there is a cycle.
    """
    position = {nid: i for i, nid in enumerate(graph.node_ids())}
    in_degree: dict[str, int] = dict.fromkeys(position, 0)
    successors: dict[str, list[str]] = {nid: [] for nid in position}
    for edge in graph.edges:
        if edge.source in position and edge.target in position:
            successors[edge.source].append(edge.target)
            in_degree[edge.target] += 1

    queue = [position[nid] for nid, deg in in_degree.items() if deg == 0]
    heapq.heapify(queue)
    ids = graph.node_ids()
    ordered: list[str] = []

    while queue:
        node = ids[heapq.heappop(queue)]
        ordered.append(node)
        for succ in successors[node]:
            in_degree[succ] -= 1
            if in_degree[succ] == 0:
                heapq.heappush(queue, position[succ])

    leftover = [nid for nid in ids if in_degree[nid] > 0]
    return ordered, leftover


def topological_order(graph: ContentGraph[Any]) -> list[str]:
    """Topologically sort all nodes.

    Among nodes whose prerequisites are satisfied, the one inserted first
    comes first.

    Raises:
        CycleError: If the graph has a cycle.
    """
    ordered, leftover = _kahn(graph)
    if leftover:
        log.warning("cycle_detected", nodes=leftover)
        raise CycleError(leftover)
    return ordered


def find_cycle(graph: ContentGraph[Any]) -> list[str]:
    """Return the nodes that cannot be ordered (empty when acyclic)."""
    _, leftover = _kahn(graph)
    return leftover
