from __future__ import annotations

import io
from pathlib import Path
from typing import Any

import pytest

from redshift_event_import.domain.errors import ImportConfigurationError
from redshift_event_import.infrastructure.attachments import AttachmentLoader


class FakeS3Client:
    def __init__(self, objects: dict[tuple[str, str], bytes]) -> None:
        self.objects = objects

    def get_object(self, Bucket: str, Key: str) -> dict[str, Any]:
        return {"Body": io.BytesIO(self.objects[(Bucket, Key)])}


def test_load_returns_none_without_location() -> None:
    assert AttachmentLoader().load(None) is None
    assert AttachmentLoader().load("  ") is None


def test_load_reads_local_file(tmp_path: Path) -> None:
    mapping = tmp_path / "row_to_event_map.json"
    mapping.write_bytes(b'{"action": "event"}')

    assert AttachmentLoader().load(str(mapping)) == b'{"action": "event"}'


def test_load_rejects_missing_local_file(tmp_path: Path) -> None:
    with pytest.raises(ImportConfigurationError):
        AttachmentLoader().load(str(tmp_path / "missing.json"))


def test_load_reads_s3_object() -> None:
    client = FakeS3Client({("config-bucket", "imports/map.json"): b'{"uid": "distinct_id"}'})

    contents = AttachmentLoader(s3_client=client).load("s3://config-bucket/imports/map.json")

    assert contents == b'{"uid": "distinct_id"}'


def test_load_reports_unreadable_s3_object() -> None:
    client = FakeS3Client({})

    with pytest.raises(ImportConfigurationError, match="s3://config-bucket/map.json"):
        AttachmentLoader(s3_client=client).load("s3://config-bucket/map.json")


def test_load_rejects_s3_uri_without_key() -> None:
    with pytest.raises(ImportConfigurationError):
        AttachmentLoader(s3_client=FakeS3Client({})).load("s3://config-bucket")
