"""Application settings."""

from enum import StrEnum
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from redshift_event_import.domain.import_types import (
    DEFAULT_STARTUP_DELAY_SECONDS,
    ImportMechanism,
)


class StateBackend(StrEnum):
    """Available adapters for the offset counter and durable import state."""

    IN_MEMORY = "in_memory"
    POSTGRES = "postgres"


class SinkBackend(StrEnum):
    """Available destinations for imported events."""

    IN_MEMORY = "in_memory"
    HTTP = "http"
    MQTT = "mqtt"


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    app_name: str = "Redshift Event Import"
    api_prefix: str = ""
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"

    cluster_host: str | None = None
    cluster_port: int | None = None
    db_name: str | None = None
    table_name: str | None = None
    db_username: str | None = None
    db_password: str | None = None
    events_to_ignore: Annotated[list[str], NoDecode] = Field(default_factory=list)
    order_by_column: str | None = None
    transformation_name: str = "default"
    import_mechanism: ImportMechanism = ImportMechanism.CONTINUOUS
    row_to_event_map_path: str | None = None

    startup_delay_seconds: float = DEFAULT_STARTUP_DELAY_SECONDS
    query_timeout_seconds: float = 30.0
    strict_identifiers: bool = True

    state_backend: StateBackend = StateBackend.IN_MEMORY
    state_postgres_dsn: str | None = None
    state_postgres_pool_min_size: int = 1
    state_postgres_pool_max_size: int = 5

    sink_backend: SinkBackend = SinkBackend.IN_MEMORY
    capture_endpoint: str | None = None
    capture_api_key: str | None = None
    capture_timeout_seconds: float = 10.0
    mqtt_host: str | None = None
    mqtt_port: int = 1883
    mqtt_username: str | None = None
    mqtt_password: str | None = None
    mqtt_topic_prefix: str = "redshift/import"
    mqtt_qos: int = 0

    aws_region: str | None = None

    @field_validator("events_to_ignore", mode="before")
    @classmethod
    def parse_csv_list(cls, value: object) -> object:
        """Support comma-separated env var values in addition to lists."""

        if not isinstance(value, str):
            return value
        return [item.strip() for item in value.split(",") if item.strip()]

    @model_validator(mode="after")
    def validate_backend_settings(self) -> "Settings":
        """Ensure backend-specific settings are valid."""

        if self.state_backend == StateBackend.POSTGRES and not self.state_postgres_dsn:
            raise ValueError(
                "REDSHIFT_IMPORT_STATE_POSTGRES_DSN is required when "
                "REDSHIFT_IMPORT_STATE_BACKEND=postgres."
            )
        if self.state_postgres_pool_min_size < 1:
            raise ValueError("REDSHIFT_IMPORT_STATE_POSTGRES_POOL_MIN_SIZE must be >= 1.")
        if self.state_postgres_pool_max_size < self.state_postgres_pool_min_size:
            raise ValueError(
                "REDSHIFT_IMPORT_STATE_POSTGRES_POOL_MAX_SIZE must be >= "
                "REDSHIFT_IMPORT_STATE_POSTGRES_POOL_MIN_SIZE."
            )
        if self.sink_backend == SinkBackend.HTTP:
            if not self.capture_endpoint:
                raise ValueError(
                    "REDSHIFT_IMPORT_CAPTURE_ENDPOINT is required when "
                    "REDSHIFT_IMPORT_SINK_BACKEND=http."
                )
            if not self.capture_api_key:
                raise ValueError(
                    "REDSHIFT_IMPORT_CAPTURE_API_KEY is required when "
                    "REDSHIFT_IMPORT_SINK_BACKEND=http."
                )
        if self.sink_backend == SinkBackend.MQTT and not self.mqtt_host:
            raise ValueError(
                "REDSHIFT_IMPORT_MQTT_HOST is required when REDSHIFT_IMPORT_SINK_BACKEND=mqtt."
            )
        if self.cluster_port is not None and self.cluster_port < 1:
            raise ValueError("REDSHIFT_IMPORT_CLUSTER_PORT must be >= 1.")
        if self.mqtt_port < 1:
            raise ValueError("REDSHIFT_IMPORT_MQTT_PORT must be >= 1.")
        if self.mqtt_qos not in {0, 1, 2}:
            raise ValueError("REDSHIFT_IMPORT_MQTT_QOS must be one of 0, 1, 2.")
        if self.capture_timeout_seconds <= 0:
            raise ValueError("REDSHIFT_IMPORT_CAPTURE_TIMEOUT_SECONDS must be > 0.")
        if self.query_timeout_seconds <= 0:
            raise ValueError("REDSHIFT_IMPORT_QUERY_TIMEOUT_SECONDS must be > 0.")
        if self.startup_delay_seconds < 0:
            raise ValueError("REDSHIFT_IMPORT_STARTUP_DELAY_SECONDS must be >= 0.")
        return self

    model_config = SettingsConfigDict(
        env_prefix="REDSHIFT_IMPORT_",
        env_file=".env",
        extra="ignore",
    )


__all__ = ["Settings", "SinkBackend", "StateBackend"]
