import pytest

from worldgraph_mcp.models import Element, ElementType, Relationship


def make_element(element_id: str, element_type: ElementType = ElementType.CHARACTER) -> Element:
    return Element(id=element_id, type=element_type, title=element_id.upper())


def make_relationship(
    source: str,
    target: str,
    strength: int = 5,
    bidirectional: bool = False,
    rel_id: str | None = None,
) -> Relationship:
    return Relationship(
        id=rel_id or f"{source}->{target}",
        source_id=source,
        target_id=target,
        type="knows",
        strength=strength,
        bidirectional=bidirectional,
    )


@pytest.fixture
def abc_world():
    """A(character), B(location), C(character); A→B strength 8, B→C strength 3."""
    elements = [
        make_element("a", ElementType.CHARACTER),
        make_element("b", ElementType.LOCATION),
        make_element("c", ElementType.CHARACTER),
    ]
    relationships = [
        make_relationship("a", "b", strength=8),
        make_relationship("b", "c", strength=3),
    ]
    return elements, relationships
