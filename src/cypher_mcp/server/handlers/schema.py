"""
get-schema handler.
"""

import logging
from typing import Any

import mcp.types as types

from cypher_mcp.schemas import SchemaInput
from cypher_mcp.services.cypher_service import CypherToolService
from cypher_mcp.services.formatter import get_formatter

logger = logging.getLogger(__name__)


async def handle(
    service: CypherToolService, arguments: dict[str, Any]
) -> list[types.TextContent]:
    """List node labels, their attributes and relationships."""
    SchemaInput(**arguments)
    records = await service.get_schema()
    logger.info(f"Schema lists {len(records)} node labels")
    text = get_formatter().format_result_set(records)
    return [types.TextContent(type="text", text=text)]
