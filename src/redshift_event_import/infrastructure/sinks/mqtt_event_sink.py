"""MQTT event sink."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from redshift_event_import.domain.errors import EventSinkError
from redshift_event_import.domain.import_types import IMPORT_SOURCE_MARKER
from redshift_event_import.domain.ports import EventSink

logger = logging.getLogger(__name__)


class MqttEventSink(EventSink):
    """Publish imported events to `{topic_prefix}/{table}/events`."""

    def __init__(
        self,
        table_name: str,
        broker_host: str,
        broker_port: int = 1883,
        topic_prefix: str = "redshift/import",
        qos: int = 0,
        username: str | None = None,
        password: str | None = None,
        client: Any | None = None,
    ) -> None:
        if not broker_host.strip():
            raise EventSinkError("broker_host cannot be empty.")
        if qos not in {0, 1, 2}:
            raise EventSinkError("qos must be one of 0, 1, 2.")

        self._topic = f"{topic_prefix.strip().strip('/')}/{table_name}/events"
        self._qos = qos

        if client is None:
            client = self._build_client(table_name)
            if username is not None:
                client.username_pw_set(username=username, password=password)
            self._connect_with_retry(
                client=client,
                broker_host=broker_host,
                broker_port=broker_port,
            )
            client.loop_start()
        self._client = client

    async def ingest(self, event_name: str, properties: Mapping[str, Any]) -> None:
        payload = {
            "event": event_name,
            "properties": dict(properties),
            "source": IMPORT_SOURCE_MARKER,
            "publishedAt": datetime.now(tz=UTC).isoformat(),
        }
        message = json.dumps(payload, separators=(",", ":"), default=str)
        try:
            await asyncio.to_thread(self._client.publish, self._topic, message, self._qos)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Publishing event %s to %s failed: %s", event_name, self._topic, exc)

    async def close(self) -> None:
        await asyncio.to_thread(self._client.loop_stop)
        await asyncio.to_thread(self._client.disconnect)

    def _build_client(self, table_name: str) -> Any:
        try:
            import paho.mqtt.client as mqtt  # type: ignore[import-untyped]
        except ModuleNotFoundError as exc:
            raise RuntimeError(
                "paho-mqtt is required for the MQTT event sink. "
                "Install project dependencies first."
            ) from exc

        client_id = f"redshift-import-{table_name}"
        try:
            return mqtt.Client(
                callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
                client_id=client_id,
            )
        except (AttributeError, TypeError):
            return mqtt.Client(client_id=client_id)

    def _connect_with_retry(
        self,
        client: Any,
        broker_host: str,
        broker_port: int,
        max_attempts: int = 20,
    ) -> None:
        """Connect to the broker with bounded backoff."""

        delay_seconds = 0.5
        last_error: Exception | None = None
        for attempt in range(1, max_attempts + 1):
            try:
                client.connect(host=broker_host, port=broker_port, keepalive=60)
                return
            except Exception as exc:  # noqa: BLE001
                last_error = exc
                if attempt == max_attempts:
                    break
                logger.info(
                    "MQTT broker %s:%s not reachable (attempt %s/%s), retrying.",
                    broker_host,
                    broker_port,
                    attempt,
                    max_attempts,
                )
                time.sleep(delay_seconds)
                delay_seconds = min(3.0, delay_seconds * 1.5)

        raise EventSinkError(
            f"Failed to connect to MQTT broker {broker_host}:{broker_port} "
            f"after {max_attempts} attempts."
        ) from last_error


__all__ = ["MqttEventSink"]
