"""Shipped row-to-event transformations."""

from redshift_event_import.domain.entities import TransformationEntry
from redshift_event_import.domain.transformation_registry import TransformationRegistry
from redshift_event_import.infrastructure.transformations.default_transformation import (
    transform_default,
)
from redshift_event_import.infrastructure.transformations.json_map_transformation import (
    ROW_TO_EVENT_MAP_ATTACHMENT,
    transform_json_map,
)

DEFAULT_TRANSFORMATION = "default"
JSON_MAP_TRANSFORMATION = "JSON Map"


def build_default_registry() -> TransformationRegistry:
    """Return a frozen registry holding every shipped transformation."""

    # Contributors add entries here; author is their GitHub username.
    registry = TransformationRegistry()
    registry.register(
        DEFAULT_TRANSFORMATION,
        TransformationEntry(author="yakkomajuri", transform=transform_default),
    )
    registry.register(
        JSON_MAP_TRANSFORMATION,
        TransformationEntry(author="yakkomajuri", transform=transform_json_map),
    )
    return registry.freeze()


__all__ = [
    "DEFAULT_TRANSFORMATION",
    "JSON_MAP_TRANSFORMATION",
    "ROW_TO_EVENT_MAP_ATTACHMENT",
    "build_default_registry",
    "transform_default",
    "transform_json_map",
]
