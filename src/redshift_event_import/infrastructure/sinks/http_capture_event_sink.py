"""HTTP capture endpoint event sink."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import httpx

from redshift_event_import.domain.errors import EventSinkError
from redshift_event_import.domain.ports import EventSink

logger = logging.getLogger(__name__)


class HttpCaptureEventSink(EventSink):
    """POST each event to `{endpoint}/capture/` without waiting on the outcome.

    Delivery failures are logged and dropped; they never reach the batch job.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        normalized = endpoint.strip().rstrip("/")
        if not normalized:
            raise EventSinkError("Capture endpoint cannot be empty.")
        if not api_key.strip():
            raise EventSinkError("Capture API key cannot be empty.")
        self._url = f"{normalized}/capture/"
        self._api_key = api_key
        self._client = httpx.AsyncClient(timeout=timeout_seconds, transport=transport)

    async def ingest(self, event_name: str, properties: Mapping[str, Any]) -> None:
        body = {
            "api_key": self._api_key,
            "event": event_name,
            "properties": dict(properties),
            "distinct_id": properties.get("distinct_id"),
            "timestamp": properties.get("timestamp") or datetime.now(tz=UTC).isoformat(),
        }
        try:
            response = await self._client.post(
                self._url,
                content=json.dumps(body, default=str),
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as exc:
            logger.warning("Capturing event %s failed: %s", event_name, exc)
            return
        if not response.is_success:
            logger.warning(
                "Capture endpoint rejected event %s: %s %s",
                event_name,
                response.status_code,
                response.text.strip() or "<no response body>",
            )

    async def close(self) -> None:
        await self._client.aclose()


__all__ = ["HttpCaptureEventSink"]
