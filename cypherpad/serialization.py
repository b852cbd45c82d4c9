"""JSON rendering of query records that keeps 64-bit integers exact.

Graph integers are unbounded Python ints once they leave the driver, but the
text produced here is meant to be read by tools that parse JSON numbers as
doubles. Every integer is therefore written as a string carrying a trailing
``n`` (``9223372036854775807`` becomes ``"9223372036854775807n"``), the same
spelling JavaScript uses for BigInt literals.
"""

from __future__ import annotations

import json
import math
from typing import Any, Iterable, Mapping

from neo4j.graph import Node, Path, Relationship
from neo4j.spatial import Point
from neo4j.time import Date, DateTime, Duration, Time

INDENT = 4
BIGINT_SUFFIX = "n"

_TEMPORAL_TYPES = (Date, DateTime, Duration, Time)


def format_integer(value: int) -> str:
    return f"{value}{BIGINT_SUFFIX}"


def to_plain(value: Any) -> Any:
    """Convert a driver value into JSON-compatible builtins."""

    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, int):
        return format_integer(value)
    if isinstance(value, float):
        # JSON has no spelling for NaN or the infinities.
        return value if math.isfinite(value) else None
    if isinstance(value, Node):
        return {
            "elementId": value.element_id,
            "labels": sorted(value.labels),
            "properties": _plain_mapping(value.items()),
        }
    if isinstance(value, Relationship):
        return {
            "elementId": value.element_id,
            "startNodeElementId": value.start_node.element_id if value.start_node else None,
            "endNodeElementId": value.end_node.element_id if value.end_node else None,
            "type": value.type,
            "properties": _plain_mapping(value.items()),
        }
    if isinstance(value, Path):
        return _plain_path(value)
    if isinstance(value, Point):
        point: dict[str, Any] = {"srid": to_plain(value.srid)}
        for axis, coordinate in zip(("x", "y", "z"), value):
            point[axis] = to_plain(coordinate)
        return point
    if isinstance(value, _TEMPORAL_TYPES):
        return value.iso_format()
    if isinstance(value, (bytes, bytearray)):
        return list(value)
    if isinstance(value, Mapping):
        return _plain_mapping(value.items())
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def record_to_dict(record: Any) -> dict[str, Any]:
    """Field -> value mapping for a driver record (or any mapping)."""

    return dict(record.items())


def dumps_records(records: Iterable[Mapping[str, Any]]) -> str:
    """Serialize records to indented JSON text."""

    payload = [to_plain(record) for record in records]
    return json.dumps(payload, indent=INDENT, ensure_ascii=False)


def _plain_mapping(items: Iterable[tuple[Any, Any]]) -> dict[str, Any]:
    return {str(key): to_plain(item) for key, item in items}


def _plain_path(path: Path) -> dict[str, Any]:
    nodes = path.nodes
    segments = [
        {
            "start": to_plain(nodes[index]),
            "relationship": to_plain(relationship),
            "end": to_plain(nodes[index + 1]),
        }
        for index, relationship in enumerate(path.relationships)
    ]
    return {
        "start": to_plain(path.start_node),
        "end": to_plain(path.end_node),
        "segments": segments,
        "length": len(path),
    }


__all__ = [
    "BIGINT_SUFFIX",
    "INDENT",
    "dumps_records",
    "format_integer",
    "record_to_dict",
    "to_plain",
]
