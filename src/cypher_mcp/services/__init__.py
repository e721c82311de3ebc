"""
Services layer: classification, execution, normalization and schema introspection.

Only leaf services are re-exported here; the executor, introspector and tool
facade are imported from their modules.
"""

from cypher_mcp.services.cache import CacheService
from cypher_mcp.services.classifier import QueryClassification, classify, is_write_query
from cypher_mcp.services.formatter import ResponseFormatter
from cypher_mcp.services.normalizer import normalize_counters, normalize_record, normalize_value

__all__ = [
    "CacheService",
    "QueryClassification",
    "classify",
    "is_write_query",
    "ResponseFormatter",
    "normalize_counters",
    "normalize_record",
    "normalize_value",
]
