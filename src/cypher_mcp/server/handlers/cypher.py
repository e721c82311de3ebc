"""
Cypher query handlers for read-query and write-query.

Arguments are validated before the facade sees them; wrong-tool usage
surfaces as InvalidUsageError without a database round trip.
"""

import logging
from typing import Any

import mcp.types as types

from cypher_mcp.schemas import CypherQueryInput
from cypher_mcp.services.cypher_service import CypherToolService
from cypher_mcp.services.formatter import get_formatter

logger = logging.getLogger(__name__)


async def handle_read(
    service: CypherToolService, arguments: dict[str, Any]
) -> list[types.TextContent]:
    """Handle read-query."""
    params = CypherQueryInput(**arguments)
    records = await service.read_query(params.query, params.params)
    return _to_content(records)


async def handle_write(
    service: CypherToolService, arguments: dict[str, Any]
) -> list[types.TextContent]:
    """Handle write-query."""
    params = CypherQueryInput(**arguments)
    records = await service.write_query(params.query, params.params)
    return _to_content(records)


def _to_content(records: list[dict[str, Any]]) -> list[types.TextContent]:
    text = get_formatter().format_result_set(records)
    return [types.TextContent(type="text", text=text)]
