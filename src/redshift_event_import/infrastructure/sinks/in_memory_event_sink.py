"""Event sink that keeps every event in memory."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from redshift_event_import.domain.entities import TransformedEvent
from redshift_event_import.domain.ports import EventSink


class InMemoryEventSink(EventSink):
    """Recording sink for local runs without a capture endpoint, and for tests."""

    def __init__(self) -> None:
        self.events: list[TransformedEvent] = []

    async def ingest(self, event_name: str, properties: Mapping[str, Any]) -> None:
        self.events.append(TransformedEvent(event_name=event_name, properties=properties))


__all__ = ["InMemoryEventSink"]
