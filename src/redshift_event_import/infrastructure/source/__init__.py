"""Source store query executors."""

from redshift_event_import.infrastructure.source.postgres_query_executor import (
    PostgresQueryExecutor,
)

__all__ = ["PostgresQueryExecutor"]
