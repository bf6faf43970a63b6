"""Graph integrity errors with actionable diagnostics.

Raised when a world-graph operation references a world that does not exist
or when the world graph is not the DAG the authoring boundary promises.
Each error keeps the offending identifiers as attributes and can render
itself as markdown feedback for the content author (``to_feedback``).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from difflib import get_close_matches


def _bullets(items: Sequence[str], limit: int) -> list[str]:
    """Markdown bullet lines for *items*, truncated after *limit*."""
    lines = [f"  - `{item}`" for item in items[:limit]]
    if len(items) > limit:
        lines.append(f"  - ... and {len(items) - limit} more")
    return lines


class GraphIntegrityError(Exception):
    """Base class for world-graph integrity violations."""

    def to_feedback(self) -> str:
        """Markdown describing the problem and how the author can fix it."""
        raise NotImplementedError


@dataclass
class NodeNotFoundError(GraphIntegrityError, LookupError):
    """A referenced node is not in the graph.

    Attributes:
        node_id: The identifier that was looked up.
        available: Identifiers the graph does hold, for suggestions.
        context: Where the lookup happened (e.g. "current world").
    """

    node_id: str
    available: list[str] = field(default_factory=list)
    context: str = ""

    def __post_init__(self) -> None:
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        where = f" ({self.context})" if self.context else ""
        return f"Node '{self.node_id}' not found{where}"

    def suggestions(self) -> list[str]:
        """Close matches among the available IDs (likely typos)."""
        return get_close_matches(self.node_id, self.available, n=3, cutoff=0.6)

    def to_feedback(self) -> str:
        lines = ["## Reference Error: Node Not Found", "", f"**Referenced**: `{self.node_id}`"]
        if self.context:
            lines.append(f"**Context**: {self.context}")

        suggestions = self.suggestions()
        if suggestions:
            lines.extend(["", "**Did you mean one of these?**", *_bullets(suggestions, 3)])
        if self.available:
            lines.extend(["", "**Valid IDs**:", *_bullets(sorted(self.available), 20)])
        return "\n".join(lines)


@dataclass
class EdgeEndpointError(GraphIntegrityError):
    """An edge was validated against the graph and an endpoint is missing.

    Attributes:
        missing: "source", "target" or "both".
    """

    source: str
    target: str
    missing: str
    available: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        match self.missing:
            case "both":
                msg = f"Edge endpoints not found: '{self.source}' and '{self.target}'"
            case "source":
                msg = f"Edge source not found: '{self.source}'"
            case _:
                msg = f"Edge target not found: '{self.target}'"
        super().__init__(msg)

    def to_feedback(self) -> str:
        lines = [
            "## Error: Edge Endpoint Not Found",
            "",
            f"**Edge**: `{self.source}` -> `{self.target}`",
        ]
        if self.missing in ("source", "both"):
            lines.append(f"**Problem**: Source node `{self.source}` does not exist.")
        if self.missing in ("target", "both"):
            lines.append(f"**Problem**: Target node `{self.target}` does not exist.")
        if self.available:
            lines.extend(["", "**Valid IDs**:", *_bullets(sorted(self.available), 10)])
        lines.extend(["", "**Solution**: Add both worlds before connecting them."])
        return "\n".join(lines)


@dataclass
class CycleError(GraphIntegrityError):
    """The world graph is not a DAG.

    Attributes:
        nodes: Nodes that could not be ordered: members of a cycle and
            everything only reachable through one.
    """

    nodes: list[str]

    def __post_init__(self) -> None:
        shown = ", ".join(self.nodes[:5]) + (", ..." if len(self.nodes) > 5 else "")
        super().__init__(f"Cycle detected involving {len(self.nodes)} node(s): {shown}")

    def to_feedback(self) -> str:
        lines = [
            "## Error: World Graph Contains a Cycle",
            "",
            "**Problem**: World unlock order must be acyclic. These worlds could not be ordered:",
            *_bullets(self.nodes, 10),
            "",
            "**Solution**: Remove one of the dependencies closing the loop.",
        ]
        return "\n".join(lines)
