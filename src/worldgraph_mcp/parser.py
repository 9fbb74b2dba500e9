"""World export parser for worldgraph-mcp.

Supports two export variants, in JSON or YAML:
1. Single world (``world`` + ``elements`` + ``relationships``)
2. All worlds (``worlds``: a list of single-world exports)

Keys follow the application's export format (camelCase, element types as
upper-case enum names).
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Optional

import yaml

from .models import Element, ElementType, Relationship, WorldGraph


logger = logging.getLogger(__name__)

SUPPORTED_FORMAT_VERSIONS = {"1.0"}


def parse_json(json_str: str) -> list[WorldGraph]:
    """Parse a JSON export string into one WorldGraph per world."""
    if not json_str or not json_str.strip():
        raise ValueError("Empty world export")
    return _parse_export(json.loads(json_str))


def parse_yaml(yaml_str: str) -> list[WorldGraph]:
    """Parse a YAML export string into one WorldGraph per world."""
    data = yaml.safe_load(yaml_str)
    if not data:
        raise ValueError("Empty world export")
    return _parse_export(data)


def parse_text(text: str) -> list[WorldGraph]:
    """Parse an export of either flavor; JSON is tried first."""
    stripped = text.lstrip()
    if stripped.startswith("{"):
        return parse_json(text)
    return parse_yaml(text)


def parse_file(path: str) -> list[WorldGraph]:
    """Parse an export file, choosing the parser by extension."""
    content = Path(path).read_text()
    if Path(path).suffix.lower() in (".yaml", ".yml"):
        return parse_yaml(content)
    return parse_json(content)


def select_world(worlds: list[WorldGraph], world_id: Optional[str] = None) -> WorldGraph:
    """Pick one world out of a parsed export.

    Without ``world_id`` the export must hold exactly one world.
    """
    if world_id is None:
        if len(worlds) != 1:
            raise ValueError(
                f"Export holds {len(worlds)} worlds; pass world_id to choose one"
            )
        return worlds[0]
    for world in worlds:
        if world.id == world_id:
            return world
    raise KeyError(f"World not found in export: {world_id}")


def _parse_export(data: dict) -> list[WorldGraph]:
    if not isinstance(data, dict):
        raise ValueError("World export must be a mapping")

    version = str(data.get("formatVersion", "1.0"))
    if version not in SUPPORTED_FORMAT_VERSIONS:
        raise ValueError(f"Unsupported export format version: {version}")

    # All-worlds export
    if "worlds" in data:
        return [_parse_world_export(w) for w in data["worlds"]]

    return [_parse_world_export(data)]


def _parse_world_export(data: dict) -> WorldGraph:
    """Parse a single-world export mapping."""
    world_data = data.get("world") or {}
    world_id = world_data.get("id", "world-1")

    return WorldGraph(
        id=world_id,
        title=world_data.get("title", "Untitled World"),
        description=world_data.get("description", ""),
        elements=[_parse_element(e, world_id) for e in data.get("elements", [])],
        relationships=[_parse_relationship(r) for r in data.get("relationships", [])],
    )


def _parse_element_type(value: str, element_id: str) -> ElementType:
    """Resolve an export type tag, falling back to CUSTOM for unknown ones."""
    try:
        return ElementType.parse(value)
    except ValueError:
        logger.warning("Element '%s' has unknown type '%s', using custom", element_id, value)
        return ElementType.CUSTOM


def _parse_element(data: dict, world_id: str) -> Element:
    return Element(
        id=data["id"],
        type=_parse_element_type(data.get("type", "custom"), data["id"]),
        title=data.get("title", ""),
        content=data.get("content", ""),
        tags=data.get("tags", ""),
        world_id=data.get("worldId", world_id),
    )


def _parse_relationship(data: dict) -> Relationship:
    return Relationship(
        id=data["id"],
        source_id=data["sourceElementId"],
        target_id=data["targetElementId"],
        type=data.get("type", ""),
        strength=data.get("strength", 5),
        description=data.get("description", ""),
        bidirectional=data.get("bidirectional", False),
        metadata=data.get("metadata", "{}"),
    )


def validate_world(world: WorldGraph) -> list[str]:
    """Collect consistency warnings for a parsed world.

    The layout engine tolerates every problem reported here; the list is
    informational.
    """
    warnings: list[str] = []

    element_ids: set[str] = set()
    for element in world.elements:
        if element.id in element_ids:
            warnings.append(f"Duplicate element id '{element.id}'")
        element_ids.add(element.id)

    relationship_ids: set[str] = set()
    for relationship in world.relationships:
        if relationship.id in relationship_ids:
            warnings.append(f"Duplicate relationship id '{relationship.id}'")
        relationship_ids.add(relationship.id)

        if relationship.source_id not in element_ids:
            warnings.append(
                f"Relationship '{relationship.id}' references unknown source element "
                f"'{relationship.source_id}'"
            )
        if relationship.target_id not in element_ids:
            warnings.append(
                f"Relationship '{relationship.id}' references unknown target element "
                f"'{relationship.target_id}'"
            )

    return warnings


def world_to_json(world: WorldGraph) -> str:
    """Serialize a WorldGraph back to the single-world export format."""
    data = {
        "formatVersion": "1.0",
        "world": {
            "id": world.id,
            "title": world.title,
            "description": world.description,
        },
        "elements": [
            {
                "id": e.id,
                "worldId": e.world_id or world.id,
                "type": e.type.name,
                "title": e.title,
                "content": e.content,
                "tags": e.tags,
            }
            for e in world.elements
        ],
        "relationships": [
            {
                "id": r.id,
                "sourceElementId": r.source_id,
                "targetElementId": r.target_id,
                "type": r.type,
                "strength": r.strength,
                "description": r.description,
                "bidirectional": r.bidirectional,
                "metadata": r.metadata,
            }
            for r in world.relationships
        ],
    }
    return json.dumps(data, indent=2)
