"""
Data models for worldgraph-mcp — the world ontology.

A world is a flat collection of user-authored **elements** joined by typed,
weighted **relationships**:

    WorldGraph
    ├── Element       — a character, location, event, ...
    └── Relationship  — source element → target element, strength 1-10

These models are the read-only inputs of the layout engine.  They are frozen:
layout code never mutates them, it wraps them in derived ``NetworkNode`` /
``NetworkEdge`` values (see ``graph.py``).

This module also defines the **element type system**: eleven tags that
drive the hierarchical layout's grouping:

    character    — a person or creature
    location     — a place
    event        — something that happened
    culture      — a people, custom or tradition
    language     — a spoken or written language
    timeline     — an ordered series of events
    plot         — a storyline
    organization — a guild, faction, government
    item         — an object or artifact
    concept      — an idea, magic system, law
    custom       — user-defined / unspecified
"""

from __future__ import annotations
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Element types
# ---------------------------------------------------------------------------

class ElementType(str, Enum):
    """The closed set of element type tags."""
    CHARACTER = "character"
    LOCATION = "location"
    EVENT = "event"
    CULTURE = "culture"
    LANGUAGE = "language"
    TIMELINE = "timeline"
    PLOT = "plot"
    ORGANIZATION = "organization"
    ITEM = "item"
    CONCEPT = "concept"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: str | ElementType) -> ElementType:
        """Resolve a type tag case-insensitively.

        Exports write the enum *name* (``"CHARACTER"``) while tool callers
        tend to send the value (``"character"``); both are accepted.
        """
        if isinstance(value, ElementType):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(t.value for t in cls)
            raise ValueError(f"Unknown element type '{value}'. Valid types: {valid}") from None


# ---------------------------------------------------------------------------
# Element
# ---------------------------------------------------------------------------

class Element(BaseModel):
    """A world element, the unit that becomes one node in the network view.

    Content
    -------
    ``content`` is an opaque payload (the application stores a JSON string
    with type-specific fields).  The layout engine never looks inside it.

    Tags
    ----
    ``tags`` is free text, comma-separated by convention.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    type: ElementType = ElementType.CUSTOM
    title: str = ""
    content: str = ""
    tags: str = ""
    world_id: Optional[str] = None

    def get_label(self) -> str:
        """Get the display label: the title if set, otherwise the id."""
        return self.title if self.title else self.id


# ---------------------------------------------------------------------------
# Relationship
# ---------------------------------------------------------------------------

class Relationship(BaseModel):
    """A typed, weighted connection between two elements.

    ``type`` is a free-form label ("mentor", "located_in", "enemy", ...).
    ``strength`` is validated into the 1-10 scale; it weights the spring
    force in the force-directed layout and is normalized to 0.0-1.0 on
    edges.  ``bidirectional`` is carried for rendering only; degree
    counting ignores it.

    Endpoints are expected to reference elements of the same world, but
    nothing here enforces it; the engine drops edges it cannot resolve.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    source_id: str
    target_id: str
    type: str = ""
    strength: int = Field(default=5, ge=1, le=10)
    description: str = ""
    bidirectional: bool = False
    metadata: str = "{}"


# ---------------------------------------------------------------------------
# WorldGraph (Root — the inputs for one world)
# ---------------------------------------------------------------------------

class WorldGraph(BaseModel):
    """All elements and relationships of a single world.

    This is what the export loader produces and what the layout
    coordinator consumes.
    """
    id: str = "world-1"
    title: str = "Untitled World"
    description: str = ""
    elements: list[Element] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)

    def get_element(self, element_id: str) -> Optional[Element]:
        """Look up an element by id."""
        for element in self.elements:
            if element.id == element_id:
                return element
        return None

    def element_types(self) -> list[ElementType]:
        """Return the distinct element types in first-appearance order."""
        seen: dict[ElementType, None] = {}
        for element in self.elements:
            seen.setdefault(element.type, None)
        return list(seen)
