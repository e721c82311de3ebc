"""
Constants used throughout the application.

Includes tool names, write keywords, the schema query and driver defaults.
"""

# ============================================================================
# MCP Tool Names
# ============================================================================

TOOL_READ_QUERY = "read-query"
TOOL_WRITE_QUERY = "write-query"
TOOL_GET_SCHEMA = "get-schema"

# ============================================================================
# Query Classification
# ============================================================================

# A whole-word match of any of these (case-insensitive) makes a query a write
WRITE_KEYWORDS = ("MERGE", "CREATE", "SET", "DELETE", "REMOVE", "ADD")

# ============================================================================
# Schema Introspection
# ============================================================================

SCHEMA_QUERY = """
call apoc.meta.data() yield label, property, type, other, unique, index, elementType
where elementType = 'node' and not label starts with '_'
with label,
    collect(case when type <> 'RELATIONSHIP' then [property, type + case when unique then " unique" else "" end + case when index then " indexed" else "" end] end) as attributes,
    collect(case when type = 'RELATIONSHIP' then [property, head(other)] end) as relationships
RETURN label, apoc.map.fromPairs(attributes) as attributes, apoc.map.fromPairs(relationships) as relationships
"""

SCHEMA_CACHE_KEY = "schema:"

# ============================================================================
# Driver Defaults (seconds)
# ============================================================================

DEFAULT_DATABASE = "neo4j"
DEFAULT_CONNECTION_TIMEOUT = 300
DEFAULT_MAX_CONNECTION_POOL_SIZE = 100
DEFAULT_MAX_CONNECTION_LIFETIME = 3600
DEFAULT_CONNECTION_ACQUISITION_TIMEOUT = 600
DEFAULT_MAX_TRANSACTION_RETRY_TIME = 300
DEFAULT_CONNECT_ATTEMPTS = 3
DEFAULT_SHUTDOWN_GRACE_PERIOD = 10

# Message fragment the driver uses when the pool cannot hand out a connection
POOL_ACQUISITION_FAILURE = "failed to obtain a connection from the pool"

# ============================================================================
# Standard Annotations
# ============================================================================

READONLY_ANNOTATIONS = {
    "readOnlyHint": True,
    "destructiveHint": False,
    "idempotentHint": True,
    "openWorldHint": False,
}

WRITE_ANNOTATIONS = {
    "readOnlyHint": False,
    "destructiveHint": True,
    "idempotentHint": False,
    "openWorldHint": False,
}

# ============================================================================
# Error Messages
# ============================================================================

ERROR_READ_ONLY = "Only read queries are allowed for read-query"
ERROR_WRITE_ONLY = "Only write queries are allowed for write-query"
ERROR_NOT_CONNECTED = "Neo4j client not connected. Call connect() first."
