"""Event sink implementations."""

from redshift_event_import.infrastructure.sinks.http_capture_event_sink import (
    HttpCaptureEventSink,
)
from redshift_event_import.infrastructure.sinks.in_memory_event_sink import InMemoryEventSink
from redshift_event_import.infrastructure.sinks.mqtt_event_sink import MqttEventSink

__all__ = ["HttpCaptureEventSink", "InMemoryEventSink", "MqttEventSink"]
