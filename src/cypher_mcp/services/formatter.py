"""
Response formatting service.

Serializes result sets into the JSON text carried by MCP TextContent.
"""

import json
import logging
from typing import Any

from cypher_mcp.schemas import ResultSet

logger = logging.getLogger(__name__)


class ResponseFormatter:
    """Format result sets as JSON text for MCP responses."""

    @staticmethod
    def format_result_set(records: ResultSet, indent: int | None = 2) -> str:
        """
        Serialize a result set, keeping record and field order.

        Non-finite floats are rejected (ValueError) rather than emitted as
        the invalid JSON tokens NaN or Infinity; the normalizer renders them
        as strings before they get here.

        Args:
            records: Normalized records
            indent: JSON indentation (None for compact output)

        Returns:
            JSON array string
        """
        return json.dumps(
            records,
            indent=indent,
            ensure_ascii=False,
            allow_nan=False,
            default=ResponseFormatter._json_serializer,
        )

    @staticmethod
    def _json_serializer(obj: Any) -> Any:
        """Custom JSON serializer for values the normalizer did not flatten."""
        if hasattr(obj, "model_dump"):
            return obj.model_dump()
        elif isinstance(obj, (set, frozenset, tuple)):
            return list(obj)
        else:
            return str(obj)


# Singleton instance
_formatter: ResponseFormatter | None = None


def get_formatter() -> ResponseFormatter:
    """Get global formatter instance."""
    global _formatter
    if _formatter is None:
        _formatter = ResponseFormatter()
    return _formatter
