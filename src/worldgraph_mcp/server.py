"""worldgraph-mcp server — MCP tools for laying out world relationship networks."""

from __future__ import annotations

import json
import logging
import os

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from .coordinator import LayoutCoordinator
from .layouts import LayoutAlgorithm
from .models import ElementType
from .parser import parse_text, select_world, validate_world


# --- Constants ---
DEFAULT_LAYOUT = os.environ.get("WORLDGRAPH_DEFAULT_LAYOUT", LayoutAlgorithm.FORCE_DIRECTED.value)
LOG_LEVEL = os.environ.get("WORLDGRAPH_LOG_LEVEL", "INFO")

logger = logging.getLogger(__name__)

server = Server("worldgraph-mcp")


# --- Tool definitions ---

@server.list_tools()
async def list_tools() -> list[Tool]:
    return [
        Tool(
            name="compute_layout",
            description=(
                "Compute 2D positions for every element of a world so its "
                "relationship network can be drawn as a node-link diagram. "
                "Takes a world export (JSON or YAML) and returns nodes with "
                "x/y/connection counts and edges with normalized strengths."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "world_export": {
                        "type": "string",
                        "description": (
                            "World export document. Example (JSON):\n"
                            '{"formatVersion": "1.0",\n'
                            ' "world": {"id": "w1", "title": "Eldoria"},\n'
                            ' "elements": [{"id": "a", "type": "CHARACTER", "title": "Aria"},\n'
                            '              {"id": "b", "type": "LOCATION", "title": "Keep"}],\n'
                            ' "relationships": [{"id": "r1", "sourceElementId": "a",\n'
                            '                    "targetElementId": "b", "type": "lives_in",\n'
                            '                    "strength": 8}]}'
                        ),
                    },
                    "algorithm": {
                        "type": "string",
                        "enum": [a.value for a in LayoutAlgorithm],
                        "description": (
                            "Layout strategy: 'circular' (even ring), "
                            "'force_directed' (spring simulation, default) or "
                            "'hierarchical' (one row band per element type)."
                        ),
                        "default": DEFAULT_LAYOUT,
                    },
                    "type_filter": {
                        "type": "string",
                        "enum": [t.value for t in ElementType],
                        "description": "Only lay out elements of this type.",
                    },
                    "seed": {
                        "type": "integer",
                        "description": "Seed for the force-directed starting positions.",
                    },
                    "show_labels": {
                        "type": "boolean",
                        "description": "Whether node labels should be drawn.",
                        "default": True,
                    },
                    "selected_id": {
                        "type": "string",
                        "description": "Element id to mark as selected.",
                    },
                    "world_id": {
                        "type": "string",
                        "description": "Which world to lay out when the export holds several.",
                    },
                },
                "required": ["world_export"],
            },
        ),
        Tool(
            name="list_layouts",
            description="List the available layout algorithms.",
            inputSchema={
                "type": "object",
                "properties": {},
            },
        ),
        Tool(
            name="list_element_types",
            description="List element types, optionally only those present in a world export.",
            inputSchema={
                "type": "object",
                "properties": {
                    "world_export": {
                        "type": "string",
                        "description": "Optional world export (JSON or YAML).",
                    },
                    "world_id": {"type": "string"},
                },
            },
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    if name == "compute_layout":
        return await _compute_layout(arguments)
    elif name == "list_layouts":
        return await _list_layouts(arguments)
    elif name == "list_element_types":
        return await _list_element_types(arguments)
    else:
        return [TextContent(type="text", text=f"Unknown tool: {name}")]


async def _compute_layout(args: dict) -> list[TextContent]:
    """Lay out one world and return the snapshot as JSON."""
    try:
        world = select_world(parse_text(args["world_export"]), args.get("world_id"))
    except Exception as e:
        return [TextContent(type="text", text=f"Failed to parse world export: {e}")]

    try:
        algorithm = LayoutAlgorithm(args.get("algorithm", DEFAULT_LAYOUT))
        type_filter = args.get("type_filter")
        type_filter = ElementType.parse(type_filter) if type_filter else None
    except ValueError as e:
        return [TextContent(type="text", text=f"Invalid layout parameters: {e}")]

    warnings = validate_world(world)
    for warning in warnings:
        logger.warning("%s: %s", world.id, warning)

    coordinator = LayoutCoordinator(
        algorithm=algorithm,
        type_filter=type_filter,
        seed=args.get("seed"),
        show_labels=bool(args.get("show_labels", True)),
    )
    snapshot = await coordinator.load(world.elements, world.relationships)

    selected_id = args.get("selected_id")
    if selected_id:
        if world.get_element(selected_id) is None:
            warnings.append(f"Selected element not found: {selected_id}")
        snapshot = coordinator.select(selected_id)

    result = snapshot.to_dict()
    result.update({
        "status": "success",
        "world": {"id": world.id, "title": world.title},
        "warnings": warnings,
    })
    return [TextContent(type="text", text=json.dumps(result))]


async def _list_layouts(args: dict) -> list[TextContent]:
    return [TextContent(
        type="text",
        text=json.dumps({
            "layouts": [a.value for a in LayoutAlgorithm],
            "default": DEFAULT_LAYOUT,
        }),
    )]


async def _list_element_types(args: dict) -> list[TextContent]:
    """All element types, or just those used by the given world."""
    export = args.get("world_export")
    if not export:
        types = list(ElementType)
    else:
        try:
            world = select_world(parse_text(export), args.get("world_id"))
        except Exception as e:
            return [TextContent(type="text", text=f"Failed to parse world export: {e}")]
        types = world.element_types()

    return [TextContent(
        type="text",
        text=json.dumps({"element_types": [t.value for t in types]}),
    )]


def main():
    """Entry point for the MCP server."""
    import asyncio
    logging.basicConfig(
        level=LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    asyncio.run(_run())


async def _run():
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    main()
