"""
Layout orchestrator: the single entry point from world data to a
renderable network.

Pipeline::

    elements, relationships
        → type filter (optional)
        → connection counts
        → placement strategy (one of LayoutAlgorithm)
        → edge projection
        → (nodes, edges)

``recompute`` always runs the whole pipeline from the input it is given;
there is no incremental path.  ``select_node`` is a pure projection over an
existing node list and never triggers a relayout.

``LayoutSnapshot`` bundles one pipeline result with the parameters that
produced it.  Snapshots are immutable; state changes produce new ones.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from .graph import NetworkEdge, NetworkNode, build_connection_counts, build_edges, filter_by_type
from .layouts import (
    LayoutAlgorithm,
    LayoutOptions,
    circular_layout,
    force_directed_layout,
    hierarchical_layout,
)
from .models import Element, ElementType, Relationship

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutSnapshot:
    """The published layout state."""
    algorithm: LayoutAlgorithm = LayoutAlgorithm.FORCE_DIRECTED
    type_filter: Optional[ElementType] = None
    show_labels: bool = True
    selected_id: Optional[str] = None
    nodes: tuple[NetworkNode, ...] = ()
    edges: tuple[NetworkEdge, ...] = ()
    sequence: int = 0

    def get_node(self, node_id: str) -> Optional[NetworkNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def to_dict(self) -> dict:
        return {
            "algorithm": self.algorithm.value,
            "type_filter": self.type_filter.value if self.type_filter else None,
            "show_labels": self.show_labels,
            "selected_id": self.selected_id,
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }


def _place(
    algorithm: LayoutAlgorithm,
    elements: list[Element],
    relationships: list[Relationship],
    counts: dict[str, int],
    options: LayoutOptions,
    seed: Optional[int],
) -> list[NetworkNode]:
    if algorithm is LayoutAlgorithm.CIRCULAR:
        return circular_layout(elements, counts, options)
    elif algorithm is LayoutAlgorithm.FORCE_DIRECTED:
        return force_directed_layout(elements, relationships, counts, options, seed=seed)
    elif algorithm is LayoutAlgorithm.HIERARCHICAL:
        return hierarchical_layout(elements, counts, options)
    raise TypeError(f"Not a LayoutAlgorithm: {algorithm!r}")


def recompute(
    elements: Sequence[Element],
    relationships: Sequence[Relationship],
    algorithm: LayoutAlgorithm,
    type_filter: Optional[ElementType] = None,
    *,
    options: Optional[LayoutOptions] = None,
    seed: Optional[int] = None,
) -> tuple[tuple[NetworkNode, ...], tuple[NetworkEdge, ...]]:
    """Run the full layout pipeline.

    The type filter is applied first, so connection counts and placement
    only ever see the filtered graph.  Relationships whose endpoints do not
    resolve to a placed node are left out of the edges.
    """
    opts = options or LayoutOptions()
    kept_elements, kept_relationships = filter_by_type(elements, relationships, type_filter)

    counts = build_connection_counts(kept_elements, kept_relationships)
    nodes = _place(algorithm, kept_elements, kept_relationships, counts, opts, seed)
    edges = build_edges(kept_relationships, nodes)

    dropped = len(kept_relationships) - len(edges)
    if dropped:
        logger.debug("Dropped %d relationship(s) with unresolved endpoints", dropped)
    logger.debug(
        "Computed %s layout: %d nodes, %d edges (filter=%s)",
        algorithm.value, len(nodes), len(edges),
        type_filter.value if type_filter else None,
    )
    return tuple(nodes), tuple(edges)


def select_node(
    nodes: Sequence[NetworkNode],
    node_id: Optional[str],
) -> tuple[NetworkNode, ...]:
    """Recompute every node's ``selected`` flag.

    Exactly the node whose id equals ``node_id`` is selected; ``None``
    clears the selection.  Nodes are copied, never mutated.
    """
    return tuple(replace(node, selected=node.id == node_id) for node in nodes)


def reselect(snapshot: LayoutSnapshot, node_id: Optional[str]) -> LayoutSnapshot:
    """Return a copy of ``snapshot`` with a new selection applied.

    Edges are rebuilt against the reselected nodes so their endpoint
    references stay consistent with the node list.
    """
    nodes = select_node(snapshot.nodes, node_id)
    edges = build_edges((edge.relationship for edge in snapshot.edges), nodes)
    return replace(snapshot, selected_id=node_id, nodes=nodes, edges=tuple(edges))
