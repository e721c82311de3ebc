"""
Pydantic schemas for tool inputs and normalized outputs.

Input schemas validate MCP tool arguments; output schemas fix the shape
of records returned to callers.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# JSON-compatible value carried in every returned record
Value = Union[None, bool, int, float, str, list["Value"], dict[str, "Value"]]

# One row of a result set, in database field order
ResultRecord = dict[str, Value]

ResultSet = list[ResultRecord]

# ============================================================================
# Tool Inputs
# ============================================================================


class BaseToolInput(BaseModel):
    """Base class for all tool input schemas."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",  # Reject unknown fields
    )


class CypherQueryInput(BaseToolInput):
    """Arguments for read-query and write-query."""

    query: str = Field(..., min_length=1, description="Cypher query to execute")
    params: dict[str, Any] | None = Field(
        default=None,
        description="Optional query parameters, referenced as $name in the query",
    )


class SchemaInput(BaseToolInput):
    """get-schema takes no arguments."""


# ============================================================================
# Outputs
# ============================================================================


class MutationCounters(BaseModel):
    """
    Fixed-shape summary of what a write query changed.

    Serialized with camelCase keys; every key is present even when zero.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    nodes_created: int = 0
    nodes_deleted: int = 0
    relationships_created: int = 0
    relationships_deleted: int = 0
    properties_set: int = 0
    labels_added: int = 0
    labels_removed: int = 0
    indexes_added: int = 0
    indexes_removed: int = 0
    constraints_added: int = 0
    constraints_removed: int = 0
    system_updates: int = 0
    contains_updates: bool = False
    contains_system_updates: bool = False

    @classmethod
    def from_summary_counters(cls, counters: Any) -> "MutationCounters":
        """Build from a neo4j ``SummaryCounters`` (or any object with the same attributes)."""
        values = {}
        for name in cls.model_fields:
            value = getattr(counters, name, None)
            if value is not None:
                values[name] = value
        return cls(**values)

    def to_record(self) -> ResultRecord:
        return self.model_dump(by_alias=True)


class SchemaRecord(BaseModel):
    """One node label with its attributes and outgoing relationships."""

    label: str
    attributes: dict[str, str] = Field(default_factory=dict)
    relationships: dict[str, Optional[str]] = Field(default_factory=dict)
