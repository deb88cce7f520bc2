"""Transformation driven by a column-to-field JSON mapping attachment."""

from __future__ import annotations

import json

from redshift_event_import.domain.entities import ExecutionContext, Row, TransformedEvent
from redshift_event_import.domain.errors import AttachmentError, TransformationError

ROW_TO_EVENT_MAP_ATTACHMENT = "rowToEventMap"
EVENT_FIELD = "event"


def load_row_to_event_map(context: ExecutionContext) -> dict[str, str]:
    """Parse the `rowToEventMap` attachment into a column to field mapping."""

    raw = context.attachment(ROW_TO_EVENT_MAP_ATTACHMENT)
    if raw is None:
        raise AttachmentError("Row to event mapping JSON file not provided!")
    try:
        mapping = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise AttachmentError("Row to event mapping JSON file contains invalid JSON!") from exc
    if not isinstance(mapping, dict):
        raise AttachmentError("Row to event mapping JSON file contains invalid JSON!")
    return {str(column): str(target) for column, target in mapping.items() if target}


def transform_json_map(row: Row, context: ExecutionContext) -> TransformedEvent:
    """Rename mapped columns; the column mapped to `event` names the event.

    Columns absent from the mapping are dropped.
    """

    row_to_event_map = load_row_to_event_map(context)
    event_name = ""
    properties: dict[str, object] = {}
    for column, value in row.items():
        target = row_to_event_map.get(column)
        if not target:
            continue
        if target == EVENT_FIELD:
            if value is None:
                raise TransformationError(f"Column '{column}' mapped to the event name is NULL.")
            event_name = str(value)
        else:
            properties[target] = value
    return TransformedEvent(event_name=event_name, properties=properties)


__all__ = ["ROW_TO_EVENT_MAP_ATTACHMENT", "load_row_to_event_map", "transform_json_map"]
