"""
Read/write classification of Cypher queries.

A coarse keyword heuristic, not a parser: any whole-word occurrence of a
write keyword makes the query a write, including occurrences inside string
literals and comments (e.g. ``MATCH (n) WHERE n.note = 'set' RETURN n`` is a
write). Callers that need to run such a read must use the write tool.
"""

import re
from enum import Enum

from cypher_mcp.constants import WRITE_KEYWORDS


class QueryClassification(str, Enum):
    """Routing class of a query."""

    READ = "read"
    WRITE = "write"


WRITE_QUERY_PATTERN = re.compile(
    r"\b(" + "|".join(WRITE_KEYWORDS) + r")\b", re.IGNORECASE
)


def is_write_query(query: str) -> bool:
    """Check if a Cypher query contains common write clauses."""
    return WRITE_QUERY_PATTERN.search(query) is not None


def classify(query: str) -> QueryClassification:
    """Label a query READ or WRITE."""
    if is_write_query(query):
        return QueryClassification.WRITE
    return QueryClassification.READ
