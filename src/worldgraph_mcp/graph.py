"""
Graph model builder: turns raw elements and relationships into the
engine's node/edge representation.

Nodes and edges are derived, disposable values: a fresh set is built on
every layout pass and never outlives the snapshot that holds it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from .models import Element, ElementType, Relationship


@dataclass(frozen=True)
class NetworkNode:
    """One element placed on the canvas."""
    element: Element
    x: float
    y: float
    connections: int = 0
    selected: bool = False

    @property
    def id(self) -> str:
        return self.element.id

    def to_dict(self) -> dict:
        return {
            "id": self.element.id,
            "type": self.element.type.value,
            "title": self.element.get_label(),
            "x": self.x,
            "y": self.y,
            "connections": self.connections,
            "selected": self.selected,
        }


@dataclass(frozen=True)
class NetworkEdge:
    """One relationship whose endpoints both resolved to placed nodes."""
    relationship: Relationship
    start_node: NetworkNode
    end_node: NetworkNode
    strength: float = field(init=False)

    def __post_init__(self):
        # Normalize the 1-10 scale to 0-1
        object.__setattr__(self, "strength", self.relationship.strength / 10)

    def to_dict(self) -> dict:
        return {
            "id": self.relationship.id,
            "type": self.relationship.type,
            "source": self.start_node.id,
            "target": self.end_node.id,
            "strength": self.strength,
            "bidirectional": self.relationship.bidirectional,
        }


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def build_connection_counts(
    elements: Iterable[Element],
    relationships: Iterable[Relationship],
) -> dict[str, int]:
    """Count relationship endpoints per element id.

    Every relationship adds one to its source and one to its target, whether
    or not it is bidirectional.  Ids with no matching element are counted
    too; placement simply never looks them up.
    """
    counts: dict[str, int] = {}
    for relationship in relationships:
        counts[relationship.source_id] = counts.get(relationship.source_id, 0) + 1
        counts[relationship.target_id] = counts.get(relationship.target_id, 0) + 1
    return counts


def filter_by_type(
    elements: Iterable[Element],
    relationships: Iterable[Relationship],
    element_type: Optional[ElementType],
) -> tuple[list[Element], list[Relationship]]:
    """Restrict a graph to one element type.

    Relationships survive only when both endpoints are in the filtered
    element set.  ``None`` returns the inputs unchanged (as lists).
    """
    elements = list(elements)
    relationships = list(relationships)
    if element_type is None:
        return elements, relationships

    kept = [e for e in elements if e.type == element_type]
    kept_ids = {e.id for e in kept}
    kept_relationships = [
        r for r in relationships
        if r.source_id in kept_ids and r.target_id in kept_ids
    ]
    return kept, kept_relationships


def build_edges(
    relationships: Iterable[Relationship],
    nodes: Iterable[NetworkNode],
) -> list[NetworkEdge]:
    """Pair placed nodes by relationship.

    Relationships with a missing endpoint are dropped silently.
    """
    node_map: dict[str, NetworkNode] = {node.id: node for node in nodes}

    edges: list[NetworkEdge] = []
    for relationship in relationships:
        start = node_map.get(relationship.source_id)
        end = node_map.get(relationship.target_id)
        if start is None or end is None:
            continue
        edges.append(NetworkEdge(relationship=relationship, start_node=start, end_node=end))
    return edges
