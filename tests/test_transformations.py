from __future__ import annotations

import json

import pytest

from redshift_event_import.domain.entities import ExecutionContext, TransformationEntry
from redshift_event_import.domain.errors import (
    AttachmentError,
    TransformationError,
    UnknownTransformationError,
)
from redshift_event_import.domain.transformation_registry import TransformationRegistry
from redshift_event_import.infrastructure.transformations import (
    build_default_registry,
    transform_default,
    transform_json_map,
)


def context(attachments: dict[str, bytes | None] | None = None) -> ExecutionContext:
    return ExecutionContext(
        table_name="events",
        order_by_column="id",
        attachments=attachments or {},
    )


def test_default_transformation_builds_event_from_row() -> None:
    row = {
        "event": "checkout",
        "timestamp": "2024-05-01T10:00:00Z",
        "distinct_id": "user-7",
        "properties": json.dumps({"total": 42, "currency": "EUR"}),
    }

    event = transform_default(row, context())

    assert event.event_name == "checkout"
    assert dict(event.properties) == {
        "timestamp": "2024-05-01T10:00:00Z",
        "distinct_id": "user-7",
        "total": 42,
        "currency": "EUR",
        "source": "redshift_import",
    }


def test_default_transformation_source_marker_wins_over_row_properties() -> None:
    row = {
        "event": "checkout",
        "timestamp": "2024-05-01T10:00:00Z",
        "distinct_id": "user-7",
        "properties": {"source": "web"},
    }

    assert transform_default(row, context()).properties["source"] == "redshift_import"


def test_default_transformation_requires_event_columns() -> None:
    with pytest.raises(TransformationError, match="distinct_id"):
        transform_default({"event": "x", "timestamp": "t", "properties": "{}"}, context())


def test_default_transformation_rejects_invalid_properties_json() -> None:
    row = {"event": "x", "timestamp": "t", "distinct_id": "d", "properties": "[1, 2"}

    with pytest.raises(TransformationError):
        transform_default(row, context())


def test_default_transformation_rejects_non_object_properties() -> None:
    row = {"event": "x", "timestamp": "t", "distinct_id": "d", "properties": "[1, 2]"}

    with pytest.raises(TransformationError, match="JSON object"):
        transform_default(row, context())


def test_default_transformation_rejects_null_event_name() -> None:
    row = {"event": None, "timestamp": "t", "distinct_id": "d", "properties": "{}"}

    with pytest.raises(TransformationError, match="'event' is NULL"):
        transform_default(row, context())


def test_json_map_renames_mapped_columns_and_drops_the_rest() -> None:
    mapping = {"event_type": "event", "uid": "distinct_id", "ts": "timestamp"}
    row = {"event_type": "login", "uid": "u-9", "ts": "2024-01-02", "internal": 1}

    event = transform_json_map(row, context({"rowToEventMap": json.dumps(mapping).encode()}))

    assert event.event_name == "login"
    assert dict(event.properties) == {"distinct_id": "u-9", "timestamp": "2024-01-02"}


def test_json_map_rejects_null_event_name() -> None:
    mapping = {"event_type": "event", "uid": "distinct_id"}
    row = {"event_type": None, "uid": "u-9"}

    with pytest.raises(TransformationError, match="event_type"):
        transform_json_map(row, context({"rowToEventMap": json.dumps(mapping).encode()}))


def test_json_map_requires_attachment() -> None:
    with pytest.raises(AttachmentError, match="Row to event mapping JSON file not provided!"):
        transform_json_map({"a": 1}, context())


def test_json_map_rejects_invalid_attachment() -> None:
    with pytest.raises(AttachmentError, match="contains invalid JSON!"):
        transform_json_map({"a": 1}, context({"rowToEventMap": b"{broken"}))


def test_default_registry_ships_both_transformations() -> None:
    registry = build_default_registry()

    assert set(registry) == {"default", "JSON Map"}
    assert registry.get_entry("default").author == "yakkomajuri"
    assert registry.get_entry("JSON Map").transform is transform_json_map
    assert registry.frozen is True


def test_registry_rejects_registration_after_freeze() -> None:
    registry = build_default_registry()

    with pytest.raises(RuntimeError):
        registry.register(
            "custom",
            TransformationEntry(author="someone", transform=transform_default),
        )


def test_registry_rejects_duplicate_names() -> None:
    registry = TransformationRegistry()
    entry = TransformationEntry(author="someone", transform=transform_default)
    registry.register("custom", entry)

    with pytest.raises(ValueError):
        registry.register(" custom ", entry)


def test_registry_lookup_of_unknown_name_lists_known_names() -> None:
    with pytest.raises(UnknownTransformationError, match="JSON Map, default"):
        build_default_registry().get_entry("nope")
