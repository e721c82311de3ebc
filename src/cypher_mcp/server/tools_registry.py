"""
Tool Registry - MCP tool definitions and their handlers.

The registration table is built once and is the only way a tool name
reaches a handler.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import mcp.types as types

from cypher_mcp.constants import (
    READONLY_ANNOTATIONS,
    TOOL_GET_SCHEMA,
    TOOL_READ_QUERY,
    TOOL_WRITE_QUERY,
    WRITE_ANNOTATIONS,
)
from cypher_mcp.server.handlers import cypher, schema
from cypher_mcp.services.cypher_service import CypherToolService

Handler = Callable[[CypherToolService, dict[str, Any]], Awaitable[list[types.TextContent]]]


@dataclass(frozen=True)
class ToolSpec:
    """A tool definition paired with the coroutine that serves it."""

    tool: types.Tool
    handler: Handler


_QUERY_INPUT_SCHEMA = {
    "type": "object",
    "properties": {
        "query": {
            "type": "string",
            "description": "Cypher query to execute",
        },
        "params": {
            "type": "object",
            "description": "Optional query parameters, referenced as $name in the query",
            "additionalProperties": True,
        },
    },
    "required": ["query"],
    "additionalProperties": False,
}


TOOL_DEFINITIONS = [
    types.Tool(
        name=TOOL_READ_QUERY,
        description="""Execute a read Cypher query on the neo4j database.

Returns one JSON object per row, with fields in RETURN order.
Queries containing MERGE, CREATE, SET, DELETE, REMOVE or ADD as whole words
(even inside strings or comments) are rejected; use write-query for those.

Examples:
- query="MATCH (n:Person) RETURN n.name AS name LIMIT 10"
- query="MATCH (p:Person {name: $name})-[:KNOWS]->(f) RETURN f", params={"name": "Alice"}
""",
        inputSchema=_QUERY_INPUT_SCHEMA,
        annotations=types.ToolAnnotations(**READONLY_ANNOTATIONS),
    ),
    types.Tool(
        name=TOOL_WRITE_QUERY,
        description="""Execute a write Cypher query on the neo4j database.

Returns a list with exactly one object of mutation counters: nodesCreated,
nodesDeleted, relationshipsCreated, relationshipsDeleted, propertiesSet,
labelsAdded, labelsRemoved, indexesAdded, indexesRemoved, constraintsAdded,
constraintsRemoved, systemUpdates, containsUpdates, containsSystemUpdates.
Queries without write clauses are rejected; use read-query for those.

Examples:
- query="CREATE (n:Person {name: 'Alice'})"
- query="MATCH (n:Person {name: $name}) SET n.age = $age", params={"name": "Alice", "age": 30}
""",
        inputSchema=_QUERY_INPUT_SCHEMA,
        annotations=types.ToolAnnotations(**WRITE_ANNOTATIONS),
    ),
    types.Tool(
        name=TOOL_GET_SCHEMA,
        description="""List all node types, their attributes and their relationships TO other node-types in the neo4j database.

Returns one object per node label with keys label, attributes
(property -> type, annotated with "unique"/"indexed") and relationships
(relationship type -> target label). Requires the APOC plugin.
""",
        inputSchema={"type": "object", "properties": {}, "additionalProperties": False},
        annotations=types.ToolAnnotations(**READONLY_ANNOTATIONS),
    ),
]

_HANDLERS: dict[str, Handler] = {
    TOOL_READ_QUERY: cypher.handle_read,
    TOOL_WRITE_QUERY: cypher.handle_write,
    TOOL_GET_SCHEMA: schema.handle,
}


def build_tool_table() -> dict[str, ToolSpec]:
    """Pair every tool definition with its handler."""
    return {tool.name: ToolSpec(tool=tool, handler=_HANDLERS[tool.name]) for tool in TOOL_DEFINITIONS}


def get_all_tools() -> list[types.Tool]:
    """Return list of all tool definitions."""
    return TOOL_DEFINITIONS
