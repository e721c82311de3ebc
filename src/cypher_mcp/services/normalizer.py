"""
Normalization of driver results into plain records.

Rows follow the driver's ``Record.data()`` conventions (nodes become their
property maps, relationships ``[start, type, end]``, paths alternate nodes and
relationship types); temporal and spatial values are rendered as ISO strings
and coordinate maps so that nothing driver-specific reaches the caller.
"""

import base64
import datetime as dt
import math
from typing import Any

from neo4j import Record
from neo4j.graph import Node, Path, Relationship
from neo4j.spatial import Point
from neo4j.time import Date, DateTime, Duration, Time

from cypher_mcp.schemas import MutationCounters, ResultRecord, Value

_NEO4J_TEMPORAL = (Date, DateTime, Duration, Time)
_STDLIB_TEMPORAL = (dt.datetime, dt.date, dt.time)


def normalize_value(value: Any) -> Value:
    """Convert one driver value into a JSON-compatible value."""
    # JSON has no literal for NaN or the infinities
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return "NaN"
        return "Infinity" if value > 0 else "-Infinity"
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Node):
        return _properties(value)
    if isinstance(value, Relationship):
        return [
            _properties(value.start_node),
            value.type,
            _properties(value.end_node),
        ]
    if isinstance(value, Path):
        items: list[Value] = [_properties(value.start_node)]
        for rel, node in zip(value.relationships, value.nodes[1:]):
            items.append(rel.type)
            items.append(_properties(node))
        return items
    if isinstance(value, _NEO4J_TEMPORAL):
        return value.iso_format()
    if isinstance(value, _STDLIB_TEMPORAL):
        return value.isoformat()
    if isinstance(value, dt.timedelta):
        return str(value)
    # Point subclasses tuple, so it has to be checked before sequences
    if isinstance(value, Point):
        return _point(value)
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, dict):
        return {str(k): normalize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [normalize_value(v) for v in value]
    return str(value)


def normalize_record(record: Record) -> ResultRecord:
    """Flatten a driver record, keeping the field order of the query's RETURN."""
    return {key: normalize_value(record[key]) for key in record.keys()}


def normalize_counters(counters: Any) -> ResultRecord:
    """Flatten ``SummaryCounters`` into the fixed counter record."""
    return MutationCounters.from_summary_counters(counters).to_record()


def _properties(entity: Node | None) -> dict[str, Value]:
    if entity is None:
        return {}
    return {key: normalize_value(val) for key, val in entity.items()}


def _point(point: Point) -> dict[str, Value]:
    coords = list(point)
    result: dict[str, Value] = {"srid": point.srid, "x": coords[0], "y": coords[1]}
    if len(coords) > 2:
        result["z"] = coords[2]
    return result
