"""Graph package - directed content graphs and their algorithms.

A Game stores its worlds as a ContentGraph: a keyed node map plus an
ordered, deduplicated edge sequence. Algorithms and authoring-boundary
validation operate on that shape without modifying it.
"""

from levelforge.graph.algorithms import (
    ancestors,
    find_cycle,
    roots,
    topological_order,
)
from levelforge.graph.errors import (
    CycleError,
    EdgeEndpointError,
    GraphIntegrityError,
    NodeNotFoundError,
)
from levelforge.graph.graph import ContentGraph, Edge

__all__ = [
    "ContentGraph",
    "CycleError",
    "Edge",
    "EdgeEndpointError",
    "GraphIntegrityError",
    "NodeNotFoundError",
    "ancestors",
    "find_cycle",
    "roots",
    "topological_order",
]
