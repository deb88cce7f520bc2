from __future__ import annotations

import pytest

from redshift_event_import.domain.errors import UnsafeIdentifierError
from redshift_event_import.domain.sql import (
    build_batch_query,
    build_count_query,
    sanitize_identifier,
)


@pytest.mark.parametrize("identifier", ["events", "analytics.events", "Event_Log_2024"])
def test_sanitize_identifier_accepts_plain_identifiers(identifier: str) -> None:
    assert sanitize_identifier(identifier) == identifier


def test_sanitize_identifier_rejects_changed_identifier_in_strict_mode() -> None:
    with pytest.raises(UnsafeIdentifierError):
        sanitize_identifier("events; DROP TABLE users")


def test_sanitize_identifier_strips_in_lenient_mode(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("WARNING"):
        sanitized = sanitize_identifier('"events"', strict=False)

    assert sanitized == "events"
    assert "was sanitized" in caplog.text


@pytest.mark.parametrize("identifier", ["", "   ", ";--"])
def test_sanitize_identifier_always_rejects_empty_result(identifier: str) -> None:
    with pytest.raises(UnsafeIdentifierError):
        sanitize_identifier(identifier, strict=False)


def test_count_query() -> None:
    assert build_count_query("analytics.events") == "SELECT COUNT(1) FROM analytics.events"


def test_batch_query_binds_offset() -> None:
    assert (
        build_batch_query("events", "created_at")
        == "SELECT * FROM events ORDER BY created_at OFFSET $1 LIMIT 10"
    )
