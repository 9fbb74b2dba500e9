"""
Placement strategies for worldgraph-mcp.

Three independent algorithms map a world's elements to canvas positions:

  1. Circular       — evenly spaced on a fixed circle (deterministic, O(n))
  2. Force-directed — a spring-embedder simulation (O(n²) per iteration)
  3. Hierarchical   — one row band per element type, a square-ish grid of
                      elements inside each band, best-connected first

Every strategy shares one contract::

    (elements, relationships, connection_counts) -> list[NetworkNode]

with exactly one node per input element.  Circular and force-directed keep
the input order; hierarchical emits nodes band by band.

The force-directed simulation is the only non-trivial piece.  Each of its
fixed number of iterations:

  - resets every node's force accumulator
  - pushes every ordered pair of distinct nodes apart (K_rep / d²)
  - pulls the two endpoints of every relationship together
    (d · K_att · strength), equal and opposite
  - moves each node by force · damping and clamps it inside the canvas
    margin

Distances are floored at 1.0 so coincident nodes never divide by zero.
Initial positions are random; pass ``seed`` for a reproducible run.  The
pairwise repulsion is the scaling ceiling: fine for tens to low hundreds of
elements per world.

Defaults:
  - Circular: radius 300 around (500, 500)
  - Force-directed: 1000x1000 canvas, 50 iterations, K_rep 10000,
    K_att 0.01, damping 0.1, margin 50
  - Hierarchical: 1000x800 canvas, bands from y=100, 80px grid rows
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from .graph import NetworkNode
from .models import Element, ElementType, Relationship


class LayoutAlgorithm(str, Enum):
    """The closed set of placement strategies."""
    CIRCULAR = "circular"
    FORCE_DIRECTED = "force_directed"
    HIERARCHICAL = "hierarchical"


# --- Circular constants ---

CIRCLE_CENTER_X = 500.0
CIRCLE_CENTER_Y = 500.0
CIRCLE_RADIUS = 300.0

# --- Force-directed constants ---

FORCE_CANVAS_WIDTH = 1000.0
FORCE_CANVAS_HEIGHT = 1000.0
FORCE_ITERATIONS = 50
REPULSION_CONSTANT = 10000.0
ATTRACTION_CONSTANT = 0.01
DAMPING = 0.1
CANVAS_MARGIN = 50.0
MIN_DISTANCE = 1.0

# --- Hierarchical constants ---

HIERARCHY_CANVAS_WIDTH = 1000.0
HIERARCHY_CANVAS_HEIGHT = 800.0
HIERARCHY_TOP = 100.0
HIERARCHY_ROW_HEIGHT = 80.0


@dataclass
class LayoutOptions:
    """Tunable constants for all three strategies."""
    center_x: float = CIRCLE_CENTER_X
    center_y: float = CIRCLE_CENTER_Y
    radius: float = CIRCLE_RADIUS

    width: float = FORCE_CANVAS_WIDTH
    height: float = FORCE_CANVAS_HEIGHT
    iterations: int = FORCE_ITERATIONS
    repulsion: float = REPULSION_CONSTANT
    attraction: float = ATTRACTION_CONSTANT
    damping: float = DAMPING
    margin: float = CANVAS_MARGIN

    hierarchy_width: float = HIERARCHY_CANVAS_WIDTH
    hierarchy_height: float = HIERARCHY_CANVAS_HEIGHT
    hierarchy_top: float = HIERARCHY_TOP
    row_height: float = HIERARCHY_ROW_HEIGHT


# ---------------------------------------------------------------------------
# Circular
# ---------------------------------------------------------------------------

def circular_layout(
    elements: Sequence[Element],
    connection_counts: dict[str, int],
    options: Optional[LayoutOptions] = None,
) -> list[NetworkNode]:
    """Place elements evenly around a circle.

    Element ``i`` of ``n`` sits at angle 2πi/n.  A single element lands at
    angle 0, i.e. ``(center_x + radius, center_y)``; it is not centered.
    """
    opts = options or LayoutOptions()
    count = len(elements)

    nodes = []
    for index, element in enumerate(elements):
        angle = 2 * math.pi * index / count
        nodes.append(NetworkNode(
            element=element,
            x=opts.center_x + opts.radius * math.cos(angle),
            y=opts.center_y + opts.radius * math.sin(angle),
            connections=connection_counts.get(element.id, 0),
        ))
    return nodes


# ---------------------------------------------------------------------------
# Force-directed
# ---------------------------------------------------------------------------

def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _apply_repulsion(
    ids: list[str],
    positions: dict[str, list[float]],
    forces: dict[str, list[float]],
    repulsion: float,
) -> None:
    """Push every ordered pair of distinct nodes apart.

    Only the first node of each ordered pair receives the force; the
    reverse pair is visited separately and pushes the other one.
    """
    for a in ids:
        ax, ay = positions[a]
        force = forces[a]
        for b in ids:
            if a == b:
                continue
            bx, by = positions[b]
            dx = ax - bx
            dy = ay - by
            distance = max(math.sqrt(dx * dx + dy * dy), MIN_DISTANCE)

            magnitude = repulsion / (distance * distance)
            force[0] += (dx / distance) * magnitude
            force[1] += (dy / distance) * magnitude


def _apply_attraction(
    relationships: Sequence[Relationship],
    positions: dict[str, list[float]],
    forces: dict[str, list[float]],
    attraction: float,
) -> None:
    """Pull the endpoints of every resolvable relationship together."""
    for relationship in relationships:
        source = positions.get(relationship.source_id)
        target = positions.get(relationship.target_id)
        if source is None or target is None:
            continue

        dx = target[0] - source[0]
        dy = target[1] - source[1]
        distance = max(math.sqrt(dx * dx + dy * dy), MIN_DISTANCE)

        magnitude = distance * attraction * relationship.strength
        fx = (dx / distance) * magnitude
        fy = (dy / distance) * magnitude

        source_force = forces[relationship.source_id]
        target_force = forces[relationship.target_id]
        source_force[0] += fx
        source_force[1] += fy
        target_force[0] -= fx
        target_force[1] -= fy


def force_directed_layout(
    elements: Sequence[Element],
    relationships: Sequence[Relationship],
    connection_counts: dict[str, int],
    options: Optional[LayoutOptions] = None,
    seed: Optional[int] = None,
) -> list[NetworkNode]:
    """
    Spring-embedder layout.

    Steps:
    1. Scatter nodes uniformly over the canvas
    2. For a fixed number of iterations: repulsion, attraction, integration
    3. Clamp every node inside ``[margin, dimension - margin]``

    ``seed`` pins the initial scatter; ``None`` draws from system entropy,
    so repeated calls give different (equally valid) arrangements.
    """
    if not elements:
        return []

    opts = options or LayoutOptions()
    rng = random.Random(seed)

    # --- Step 1: Random initial positions ---
    ids: list[str] = []
    positions: dict[str, list[float]] = {}
    for element in elements:
        if element.id not in positions:
            ids.append(element.id)
        positions[element.id] = [rng.random() * opts.width, rng.random() * opts.height]

    max_x = opts.width - opts.margin
    max_y = opts.height - opts.margin

    # --- Step 2: Simulate ---
    for _ in range(opts.iterations):
        forces: dict[str, list[float]] = {node_id: [0.0, 0.0] for node_id in ids}

        _apply_repulsion(ids, positions, forces, opts.repulsion)
        _apply_attraction(relationships, positions, forces, opts.attraction)

        # --- Step 3: Integrate with damping, keep on canvas ---
        for node_id in ids:
            fx, fy = forces[node_id]
            x, y = positions[node_id]
            positions[node_id] = [
                _clamp(x + fx * opts.damping, opts.margin, max_x),
                _clamp(y + fy * opts.damping, opts.margin, max_y),
            ]

    return [
        NetworkNode(
            element=element,
            x=positions[element.id][0],
            y=positions[element.id][1],
            connections=connection_counts.get(element.id, 0),
        )
        for element in elements
    ]


# ---------------------------------------------------------------------------
# Hierarchical
# ---------------------------------------------------------------------------

def group_by_type(elements: Sequence[Element]) -> dict[ElementType, list[Element]]:
    """Group elements by type, in order of each type's first appearance."""
    grouped: dict[ElementType, list[Element]] = {}
    for element in elements:
        if element.type not in grouped:
            grouped[element.type] = []
        grouped[element.type].append(element)
    return grouped


def hierarchical_layout(
    elements: Sequence[Element],
    connection_counts: dict[str, int],
    options: Optional[LayoutOptions] = None,
) -> list[NetworkNode]:
    """Lay element types out as horizontal bands, top to bottom.

    Each band gets ``hierarchy_height / number_of_types`` of vertical space.
    Inside a band, elements are stably sorted by descending connection
    count and wrapped into ``ceil(sqrt(size))`` columns; grid rows step down
    by ``row_height``.  Each node is centered in its column's share of the
    width, so a short last row spreads across the full width too.
    """
    if not elements:
        return []

    opts = options or LayoutOptions()
    grouped = group_by_type(elements)
    band_height = opts.hierarchy_height / len(grouped)

    nodes: list[NetworkNode] = []
    current_y = opts.hierarchy_top

    for group in grouped.values():
        # sorted() is stable: equal counts keep their input order
        ordered = sorted(group, key=lambda e: connection_counts.get(e.id, 0), reverse=True)
        columns = max(1, math.ceil(math.sqrt(len(ordered))))

        for index, element in enumerate(ordered):
            row = index // columns
            col = index % columns
            row_columns = min(columns, len(ordered) - row * columns)

            nodes.append(NetworkNode(
                element=element,
                x=opts.hierarchy_width * (col + 0.5) / row_columns,
                y=current_y + row * opts.row_height,
                connections=connection_counts.get(element.id, 0),
            ))

        current_y += band_height

    return nodes
