"""Shared fixtures and in-memory doubles for the video-remuxer tests.

Provides:
- Recording storage, audit and transcoder doubles
- A remux configuration rooted in a temporary download directory
- A ready-to-use RemuxEventHandler wired to the doubles
"""

import logging
from pathlib import Path

import pytest
from remux_common import StorageDeleteError, StorageDownloadError, StorageUploadError
from remux_common.infrastructure import StorageClient

from config import RemuxConfig
from domain import RemuxEvent
from exceptions import AuditLogError, TranscodeError
from handlers import RemuxEventHandler
from infrastructure.interfaces import AuditRecorder, Transcoder

INPUT_BUCKET = "incoming-videos"
OUTPUT_BUCKET = "remuxed-videos"


# ============================================================================
# Doubles
# ============================================================================


class FakeStorage(StorageClient):
    """Storage double that records calls and can be told to fail."""

    def __init__(self, fail_download=False, fail_upload=False, fail_delete=False):
        self.fail_download = fail_download
        self.fail_upload = fail_upload
        self.fail_delete = fail_delete
        self.downloads: list[tuple[str, str]] = []
        self.uploads: list[tuple[str, str]] = []
        self.deletes: list[str] = []

    def download(self, object_name: str, local_path: str) -> None:
        self.downloads.append((object_name, local_path))
        if self.fail_download:
            raise StorageDownloadError(object_name, OSError("no such key"))
        Path(local_path).parent.mkdir(parents=True, exist_ok=True)
        Path(local_path).write_bytes(b"mp4 payload")

    def upload(self, object_name: str, local_path: str) -> None:
        self.uploads.append((object_name, local_path))
        if self.fail_upload or not Path(local_path).exists():
            raise StorageUploadError(object_name, OSError("upload refused"))

    def delete(self, object_name: str) -> None:
        self.deletes.append(object_name)
        if self.fail_delete:
            raise StorageDeleteError(object_name, OSError("access denied"))

    def ensure_bucket_exists(self) -> None:
        pass


class FakeAuditRecorder(AuditRecorder):
    """Audit double keeping records in a list."""

    def __init__(self, fail=False):
        self.fail = fail
        self.records: list[dict] = []

    def log_event(self, input_key, duration_ms, request_id, output_key, error_message):
        self.records.append(
            {
                "input_key": input_key,
                "duration_ms": duration_ms,
                "request_id": request_id,
                "output_key": output_key,
                "error": error_message,
            }
        )
        if self.fail:
            raise AuditLogError(input_key, RuntimeError("table unavailable"))


class FakeTranscoder(Transcoder):
    """Transcoder double that writes an output file, or fails without one."""

    def __init__(self, returncode=0):
        self.returncode = returncode
        self.calls: list[tuple[str, str]] = []

    def remux(self, input_path: str, output_path: str) -> None:
        self.calls.append((input_path, output_path))
        if self.returncode != 0:
            raise TranscodeError(input_path, self.returncode)
        Path(output_path).write_bytes(b"flv payload")


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def download_dir(tmp_path: Path) -> Path:
    path = tmp_path / "downloads"
    path.mkdir()
    return path


@pytest.fixture
def remux_config(download_dir: Path) -> RemuxConfig:
    return RemuxConfig(
        download_dir=download_dir,
        input_bucket_name=INPUT_BUCKET,
        output_bucket_name=OUTPUT_BUCKET,
    )


@pytest.fixture
def input_storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def output_storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def audit_recorder() -> FakeAuditRecorder:
    return FakeAuditRecorder()


@pytest.fixture
def transcoder() -> FakeTranscoder:
    return FakeTranscoder()


@pytest.fixture
def observer() -> logging.Logger:
    """Logger injected into the handler; propagates to caplog."""
    return logging.getLogger("tests.remux")


@pytest.fixture
def make_handler(input_storage, output_storage, transcoder, audit_recorder, observer):
    """Factory building a handler around the doubles with a given config."""

    def _make(config: RemuxConfig) -> RemuxEventHandler:
        return RemuxEventHandler(
            input_storage,
            output_storage,
            transcoder,
            audit_recorder,
            config,
            logger=observer,
        )

    return _make


@pytest.fixture
def handler(make_handler, remux_config) -> RemuxEventHandler:
    return make_handler(remux_config)


@pytest.fixture
def make_event():
    def _make(key: str = "folder/clip.mp4", bucket: str = INPUT_BUCKET) -> RemuxEvent:
        return RemuxEvent(source_bucket=bucket, source_key=key, request_id="req-1")

    return _make


@pytest.fixture
def make_notification():
    """Factory for S3-format object-created notification bodies."""

    def _make(bucket: str, key: str, request_id: str | None = "REQ123") -> dict:
        record = {
            "eventName": "s3:ObjectCreated:Put",
            "s3": {
                "bucket": {"name": bucket},
                "object": {"key": key, "size": 1024},
            },
        }
        if request_id is not None:
            record["responseElements"] = {"x-amz-request-id": request_id}
        return {
            "EventName": "s3:ObjectCreated:Put",
            "Key": f"{bucket}/{key}",
            "Records": [record],
        }

    return _make
