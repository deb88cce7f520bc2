"""Transformation for tables already shaped like events."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from redshift_event_import.domain.entities import ExecutionContext, Row, TransformedEvent
from redshift_event_import.domain.errors import TransformationError
from redshift_event_import.domain.import_types import IMPORT_SOURCE_MARKER

REQUIRED_COLUMNS = ("event", "timestamp", "distinct_id", "properties")


def transform_default(row: Row, context: ExecutionContext) -> TransformedEvent:
    """Map `event`, `timestamp`, `distinct_id` and JSON `properties` columns to an event."""

    _ = context
    missing = [column for column in REQUIRED_COLUMNS if column not in row]
    if missing:
        raise TransformationError(f"Row is missing required column(s): {', '.join(missing)}.")

    if row["event"] is None:
        raise TransformationError("Column 'event' is NULL.")

    properties = _parse_properties(row["properties"])
    return TransformedEvent(
        event_name=str(row["event"]),
        properties={
            "timestamp": row["timestamp"],
            "distinct_id": row["distinct_id"],
            **properties,
            "source": IMPORT_SOURCE_MARKER,
        },
    )


def _parse_properties(raw: Any) -> Mapping[str, Any]:
    if isinstance(raw, Mapping):
        return raw
    if raw is None:
        return {}
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise TransformationError(f"Column 'properties' is not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise TransformationError("Column 'properties' must contain a JSON object.")
    return parsed


__all__ = ["REQUIRED_COLUMNS", "transform_default"]
