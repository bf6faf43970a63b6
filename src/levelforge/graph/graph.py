"""Generic directed content graph.

The graph stores named nodes in a keyed map and unlock-order edges in an
ordered sequence. It is the shape every Game uses for its worlds:

- Node insertion replaces by identifier (last write wins)
- Edges are deduplicated on insertion but keep insertion order, so
  traversal and UI ordering are deterministic
- No cycle check is enforced here; acyclicity is validated at the
  authoring boundary (see ``levelforge.graph.validation``)
- ``merge`` is pure and returns a new graph
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel
from pydantic_core import core_schema

from levelforge.graph.errors import EdgeEndpointError, NodeNotFoundError

if TYPE_CHECKING:
    from pydantic import GetCoreSchemaHandler

NodeT = TypeVar("NodeT")


@dataclass(frozen=True)
class Edge:
    """Directed edge: *target* is unlocked after *source*."""

    source: str
    target: str


class ContentGraph(Generic[NodeT]):
    """Directed graph of named nodes with an ordered edge sequence.

    Attributes:
        _nodes: Node map keyed by identifier, in insertion order.
        _edges: Edge sequence, deduplicated, in insertion order.
    """

    def __init__(
        self,
        nodes: Mapping[str, NodeT] | None = None,
        edges: Iterable[Edge | tuple[str, str]] | None = None,
    ) -> None:
        self._nodes: dict[str, NodeT] = dict(nodes or {})
        self._edges: list[Edge] = []
        for edge in edges or ():
            if not isinstance(edge, Edge):
                edge = Edge(*edge)
            if edge not in self._edges:
                self._edges.append(edge)

    @classmethod
    def empty(cls) -> ContentGraph[NodeT]:
        """Create an empty graph."""
        return cls()

    # -------------------------------------------------------------------------
    # Node Operations
    # -------------------------------------------------------------------------

    def insert_node(self, node_id: str, node: NodeT) -> None:
        """Insert a node, replacing any node already stored under *node_id*.

        Replacement keeps the node's original position in iteration order.
        """
        self._nodes[node_id] = node

    def find_node(self, node_id: str) -> NodeT | None:
        """Get a node by ID, or None if not found."""
        return self._nodes.get(node_id)

    def get_node(self, node_id: str, *, context: str = "") -> NodeT:
        """Get a node by ID.

        Raises:
            NodeNotFoundError: If the node doesn't exist. The error lists the
                available IDs so close matches can be suggested.
        """
        node = self._nodes.get(node_id)
        if node is None:
            raise NodeNotFoundError(node_id, available=self.node_ids(), context=context)
        return node

    def has_node(self, node_id: str) -> bool:
        """Check if a node exists."""
        return node_id in self._nodes

    def node_ids(self) -> list[str]:
        """Return all node IDs in insertion order."""
        return list(self._nodes)

    def nodes(self) -> list[tuple[str, NodeT]]:
        """Return ``(node_id, node)`` pairs in insertion order."""
        return list(self._nodes.items())

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._nodes))

    def __len__(self) -> int:
        return len(self._nodes)

    # -------------------------------------------------------------------------
    # Edge Operations
    # -------------------------------------------------------------------------

    def add_edge(self, source: str, target: str, *, validate: bool = False) -> bool:
        """Append the edge ``source -> target`` unless already present.

        Args:
            source: Node that must be completed first.
            target: Node unlocked by *source*.
            validate: If True, both endpoints must already exist.

        Returns:
            True if the edge was appended, False if it was already present.

        Raises:
            EdgeEndpointError: If validate=True and an endpoint doesn't exist.
        """
        if validate:
            source_exists = source in self._nodes
            target_exists = target in self._nodes
            if not source_exists or not target_exists:
                if not source_exists and not target_exists:
                    missing = "both"
                elif not source_exists:
                    missing = "source"
                else:
                    missing = "target"
                raise EdgeEndpointError(
                    source=source,
                    target=target,
                    missing=missing,
                    available=self.node_ids(),
                )

        edge = Edge(source, target)
        if edge in self._edges:
            return False
        self._edges.append(edge)
        return True

    @property
    def edges(self) -> list[Edge]:
        """Edges in insertion order (a copy)."""
        return list(self._edges)

    def successors(self, node_id: str) -> list[str]:
        """Nodes directly unlocked by *node_id*, in edge order."""
        return [e.target for e in self._edges if e.source == node_id]

    def predecessors(self, node_id: str) -> list[str]:
        """Nodes that directly unlock *node_id*, in edge order."""
        return [e.source for e in self._edges if e.target == node_id]

    # -------------------------------------------------------------------------
    # Merge
    # -------------------------------------------------------------------------

    def merge(
        self,
        incoming: ContentGraph[NodeT],
        merge_node: Callable[[NodeT, NodeT], NodeT] | None = None,
    ) -> ContentGraph[NodeT]:
        """Merge *incoming* into a copy of this graph.

        Nodes merge by key: colliding keys are combined with
        ``merge_node(existing, incoming)`` (incoming replaces existing when
        no merge function is given). Existing edges keep their order; edges
        only present in *incoming* are appended in incoming order.

        Args:
            incoming: Graph built by another unit.
            merge_node: Combines two nodes stored under the same key.

        Returns:
            New merged graph. Neither input is modified, and the merged
            nodes are copies, so later writes to the result stay local.
        """
        nodes = dict(self._nodes)
        for node_id, node in incoming._nodes.items():
            existing = nodes.get(node_id)
            if existing is not None and merge_node is not None:
                nodes[node_id] = merge_node(existing, node)
            else:
                nodes[node_id] = node

        edges = list(self._edges)
        edges.extend(e for e in incoming._edges if e not in self._edges)
        return ContentGraph(copy.deepcopy(nodes), edges)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate_invariants(self) -> list[str]:
        """Check that every edge endpoint exists.

        Returns:
            List of violation messages (empty if valid).
        """
        violations: list[str] = []
        for i, edge in enumerate(self._edges):
            if edge.source not in self._nodes:
                violations.append(f"Edge {i}: source '{edge.source}' does not exist")
            if edge.target not in self._nodes:
                violations.append(f"Edge {i}: target '{edge.target}' does not exist")
        return violations

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def copy(self, *, deep: bool = True) -> ContentGraph[NodeT]:
        """Copy of the graph.

        A shallow copy has its own node map and edge list but shares the
        node objects with this graph.
        """
        if deep:
            return copy.deepcopy(self)
        clone: ContentGraph[NodeT] = ContentGraph(self._nodes)
        clone._edges = list(self._edges)
        return clone

    def to_dict(self) -> dict[str, Any]:
        """Convert graph to a plain dict (nodes dumped when they are models)."""
        return {
            "nodes": {
                node_id: node.model_dump(mode="json") if isinstance(node, BaseModel) else node
                for node_id, node in self._nodes.items()
            },
            "edges": [{"from": e.source, "to": e.target} for e in self._edges],
        }

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Let pydantic models hold a graph as an opaque, instance-checked field."""
        return core_schema.is_instance_schema(
            cls,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda graph: graph.to_dict()
            ),
        )

    # -------------------------------------------------------------------------
    # Utility
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContentGraph):
            return NotImplemented
        return self._nodes == other._nodes and self._edges == other._edges

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        """Return string representation of graph."""
        return f"ContentGraph(nodes={len(self._nodes)}, edges={len(self._edges)})"
