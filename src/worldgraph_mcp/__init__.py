"""worldgraph-mcp — relationship network layouts for fictional worlds."""

from .coordinator import LayoutCoordinator
from .graph import NetworkEdge, NetworkNode, build_connection_counts, build_edges
from .layouts import LayoutAlgorithm, LayoutOptions
from .models import Element, ElementType, Relationship, WorldGraph
from .network import LayoutSnapshot, recompute, select_node

__all__ = [
    "Element",
    "ElementType",
    "LayoutAlgorithm",
    "LayoutCoordinator",
    "LayoutOptions",
    "LayoutSnapshot",
    "NetworkEdge",
    "NetworkNode",
    "Relationship",
    "WorldGraph",
    "build_connection_counts",
    "build_edges",
    "recompute",
    "select_node",
]
