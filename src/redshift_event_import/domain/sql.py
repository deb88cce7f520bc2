"""SQL statements for the source table and the identifier sanitizer.

Table and column names come from configuration and cannot be bound as query
parameters, so they are sanitized and interpolated. Every value is bound.
"""

from __future__ import annotations

import logging
import re

from redshift_event_import.domain.errors import UnsafeIdentifierError
from redshift_event_import.domain.import_types import EVENTS_PER_BATCH

_DISALLOWED_IDENTIFIER_CHARS = re.compile(r"[^A-Za-z0-9_.]+")

logger = logging.getLogger(__name__)


def sanitize_identifier(identifier: str, *, strict: bool = True) -> str:
    """Return `identifier` restricted to `[A-Za-z0-9_.]`.

    In strict mode an identifier that would change is rejected instead of
    being stripped into a different name. An identifier that is empty after
    stripping is always rejected.
    """

    sanitized = _DISALLOWED_IDENTIFIER_CHARS.sub("", identifier)
    if not sanitized:
        raise UnsafeIdentifierError(f"Identifier {identifier!r} is empty after sanitization.")
    if sanitized != identifier:
        if strict:
            raise UnsafeIdentifierError(
                f"Identifier {identifier!r} contains characters outside [A-Za-z0-9_.]."
            )
        logger.warning("Identifier %r was sanitized to %r.", identifier, sanitized)
    return sanitized


def build_count_query(table_name: str, *, strict: bool = True) -> str:
    """Return the statement counting every row of the source table."""

    return f"SELECT COUNT(1) FROM {sanitize_identifier(table_name, strict=strict)}"


def build_batch_query(
    table_name: str,
    order_by_column: str,
    batch_size: int = EVENTS_PER_BATCH,
    *,
    strict: bool = True,
) -> str:
    """Return the statement fetching one batch; the offset is bound as `$1`."""

    table = sanitize_identifier(table_name, strict=strict)
    column = sanitize_identifier(order_by_column, strict=strict)
    return f"SELECT * FROM {table} ORDER BY {column} OFFSET $1 LIMIT {int(batch_size)}"


__all__ = ["build_batch_query", "build_count_query", "sanitize_identifier"]
