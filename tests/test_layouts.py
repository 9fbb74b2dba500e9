import math

import pytest

from conftest import make_element, make_relationship
from worldgraph_mcp.graph import build_connection_counts
from worldgraph_mcp.layouts import (
    LayoutOptions,
    circular_layout,
    force_directed_layout,
    group_by_type,
    hierarchical_layout,
)
from worldgraph_mcp.models import ElementType


# ---------------------------------------------------------------------------
# Circular
# ---------------------------------------------------------------------------

def test_circular_all_nodes_on_circle():
    elements = [make_element(f"e{i}") for i in range(7)]
    nodes = circular_layout(elements, {})

    assert [n.id for n in nodes] == [e.id for e in elements]
    for node in nodes:
        assert math.hypot(node.x - 500, node.y - 500) == pytest.approx(300)


def test_circular_empty():
    assert circular_layout([], {}) == []


def test_circular_single_element_at_angle_zero():
    (node,) = circular_layout([make_element("solo")], {})
    assert node.x == pytest.approx(800)
    assert node.y == pytest.approx(500)


def test_circular_scenario_positions_and_counts(abc_world):
    elements, relationships = abc_world
    counts = build_connection_counts(elements, relationships)

    nodes = circular_layout(elements, counts)

    assert (nodes[0].x, nodes[0].y) == (pytest.approx(800), pytest.approx(500))
    assert [n.connections for n in nodes] == [1, 2, 1]


def test_circular_respects_options():
    options = LayoutOptions(center_x=0, center_y=0, radius=10)
    nodes = circular_layout([make_element("a"), make_element("b")], {}, options)
    assert (nodes[1].x, nodes[1].y) == (pytest.approx(-10), pytest.approx(0, abs=1e-9))


# ---------------------------------------------------------------------------
# Force-directed
# ---------------------------------------------------------------------------

def _star_world(size: int = 12):
    elements = [make_element(f"n{i}") for i in range(size)]
    relationships = [make_relationship("n0", f"n{i}", strength=i % 10 + 1) for i in range(1, size)]
    return elements, relationships


def test_force_directed_empty():
    assert force_directed_layout([], [], {}) == []


def test_force_directed_containment():
    elements, relationships = _star_world()
    counts = build_connection_counts(elements, relationships)

    nodes = force_directed_layout(elements, relationships, counts, seed=7)

    assert len(nodes) == len(elements)
    for node in nodes:
        assert 50 <= node.x <= 950
        assert 50 <= node.y <= 950


def test_force_directed_containment_unseeded():
    elements, relationships = _star_world(5)
    for node in force_directed_layout(elements, relationships, {}):
        assert 50 <= node.x <= 950
        assert 50 <= node.y <= 950


def test_force_directed_seed_is_reproducible():
    elements, relationships = _star_world()
    first = force_directed_layout(elements, relationships, {}, seed=42)
    second = force_directed_layout(elements, relationships, {}, seed=42)
    assert [(n.x, n.y) for n in first] == [(n.x, n.y) for n in second]


def test_force_directed_preserves_order_and_counts():
    elements, relationships = _star_world(4)
    counts = build_connection_counts(elements, relationships)

    nodes = force_directed_layout(elements, relationships, counts, seed=1)

    assert [n.id for n in nodes] == ["n0", "n1", "n2", "n3"]
    assert [n.connections for n in nodes] == [3, 1, 1, 1]


def test_force_directed_skips_dangling_relationships():
    elements, relationships = _star_world(6)
    dangling = relationships + [make_relationship("n1", "ghost", strength=10)]

    with_ghost = force_directed_layout(elements, dangling, {}, seed=3)
    without_ghost = force_directed_layout(elements, relationships, {}, seed=3)

    assert [(n.x, n.y) for n in with_ghost] == [(n.x, n.y) for n in without_ghost]


def test_force_directed_coincident_nodes_stay_finite():
    elements = [make_element("a"), make_element("b"), make_element("c")]
    relationships = [make_relationship("a", "b", strength=10)]
    # A zero-sized canvas puts every node on the same point
    options = LayoutOptions(width=0, height=0, margin=0)

    nodes = force_directed_layout(elements, relationships, {}, options, seed=5)

    assert [(n.x, n.y) for n in nodes] == [(0.0, 0.0)] * 3


def test_force_directed_connected_pair_ends_closer_than_unconnected():
    elements = [make_element(i) for i in ("a", "b", "c", "d")]
    relationships = [make_relationship("a", "b", strength=10)]

    options = LayoutOptions(iterations=500)

    nodes = {n.id: n for n in force_directed_layout(elements, relationships, {}, options, seed=11)}
    connected = math.hypot(nodes["a"].x - nodes["b"].x, nodes["a"].y - nodes["b"].y)
    unconnected = math.hypot(nodes["c"].x - nodes["d"].x, nodes["c"].y - nodes["d"].y)

    assert connected < unconnected


# ---------------------------------------------------------------------------
# Hierarchical
# ---------------------------------------------------------------------------

def test_group_by_type_first_appearance_order(abc_world):
    elements, _ = abc_world
    grouped = group_by_type(elements)
    assert list(grouped) == [ElementType.CHARACTER, ElementType.LOCATION]
    assert [e.id for e in grouped[ElementType.CHARACTER]] == ["a", "c"]


def test_hierarchical_scenario_two_bands(abc_world):
    elements, relationships = abc_world
    counts = build_connection_counts(elements, relationships)

    nodes = hierarchical_layout(elements, counts)

    assert [n.id for n in nodes] == ["a", "c", "b"]
    # Two characters share a 2-column row, the single location sits alone
    assert [(n.x, n.y) for n in nodes] == [(250.0, 100.0), (750.0, 100.0), (500.0, 500.0)]


def test_hierarchical_empty():
    assert hierarchical_layout([], {}) == []


def test_hierarchical_sorts_by_connections_stably():
    elements = [make_element(i) for i in ("a", "b", "c", "d", "e")]
    counts = {"b": 3, "d": 3, "e": 1}

    nodes = hierarchical_layout(elements, counts)

    assert [n.id for n in nodes] == ["b", "d", "e", "a", "c"]
    assert [n.connections for n in nodes] == [3, 3, 1, 0, 0]


def test_hierarchical_grid_columns_and_rows():
    elements = [make_element(f"e{i}") for i in range(5)]

    nodes = hierarchical_layout(elements, {})

    # ceil(sqrt(5)) = 3 columns: a full row of 3 then a centered row of 2
    assert [n.y for n in nodes] == [100.0, 100.0, 100.0, 180.0, 180.0]
    assert [n.x for n in nodes[:3]] == pytest.approx([1000 / 6, 500.0, 5000 / 6])
    assert [n.x for n in nodes[3:]] == pytest.approx([250.0, 750.0])


def test_hierarchical_bands_are_monotonic():
    types = [ElementType.CHARACTER, ElementType.LOCATION, ElementType.EVENT, ElementType.ITEM]
    elements = [
        make_element(f"{t.value}-{i}", t)
        for i in range(3)
        for t in types
    ]

    nodes = hierarchical_layout(elements, {})

    bands = {}
    for node in nodes:
        bands.setdefault(node.element.type, []).append(node.y)
    ranges = [(min(ys), max(ys)) for ys in bands.values()]
    assert list(bands) == types
    for (_, upper), (lower, _) in zip(ranges, ranges[1:]):
        assert upper <= lower
    assert [low for low, _ in ranges] == [100.0, 300.0, 500.0, 700.0]
