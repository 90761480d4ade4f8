"""Domain models for the video remux service."""

import time
import uuid
from pathlib import Path
from typing import Any
from urllib.parse import unquote_plus

from pydantic import BaseModel, Field

from exceptions import InvalidNotificationError


class RemuxEvent(BaseModel, frozen=True):
    """A single object-created notification for the input bucket."""

    source_bucket: str
    source_key: str
    request_id: str = Field(default_factory=lambda: str(uuid.uuid4()))

    @classmethod
    def from_notification(cls, payload: Any) -> "RemuxEvent":
        """
        Builds an event from an S3-format bucket notification.

        Only the first record is used. The object key arrives
        percent-encoded with ``+`` for spaces and is decoded here.

        Args:
            payload: The decoded JSON notification body.

        Returns:
            RemuxEvent for the first record.

        Raises:
            InvalidNotificationError: If bucket or key cannot be extracted.
        """
        try:
            record = payload["Records"][0]
            bucket = record["s3"]["bucket"]["name"]
            key = record["s3"]["object"]["key"]
        except (KeyError, IndexError, TypeError) as e:
            raise InvalidNotificationError(f"missing field {e}") from e

        if not isinstance(bucket, str) or not isinstance(key, str) or not key:
            raise InvalidNotificationError("bucket name and object key must be strings")

        fields: dict[str, str] = {
            "source_bucket": bucket,
            "source_key": unquote_plus(key),
        }
        response_elements = record.get("responseElements") or {}
        request_id = response_elements.get("x-amz-request-id")
        if request_id:
            fields["request_id"] = request_id

        return cls(**fields)


class RemuxJob(BaseModel, frozen=True):
    """Per-invocation working state: keys, temp paths and start time."""

    source_key: str
    dest_key: str
    local_input_path: Path
    local_output_path: Path
    start_time: float

    @classmethod
    def create(
        cls,
        source_key: str,
        download_dir: Path,
        target_extension: str,
        start_time: float | None = None,
    ) -> "RemuxJob":
        """Derives the destination key and fresh, collision-free temp paths."""
        source_extension = key_extension(source_key)
        return cls(
            source_key=source_key,
            dest_key=derive_destination_key(source_key, target_extension),
            local_input_path=download_dir / f"{uuid.uuid4()}{source_extension}",
            local_output_path=download_dir / f"{uuid.uuid4()}{target_extension}",
            start_time=time.monotonic() if start_time is None else start_time,
        )


class AuditRecord(BaseModel, frozen=True):
    """One immutable audit log entry describing the outcome of a job."""

    input_key: str
    output_key: str = ""
    duration_ms: int
    request_id: str
    error_message: str = ""
    timestamp: int = Field(default_factory=lambda: int(time.time()))

    @property
    def successful(self) -> bool:
        return self.error_message == ""


class RemuxResult(BaseModel, frozen=True):
    """Outcome of handling one remux event."""

    description: str
    source_bucket: str
    source_key: str
    dest_key: str = ""
    skipped: bool = False
    successful: bool = True


def key_extension(key: str) -> str:
    """Returns the extension of the last path segment, dot included, or ""."""
    name = key.rsplit("/", 1)[-1]
    dot = name.rfind(".")
    return name[dot:] if dot != -1 else ""


def has_extension(key: str, extension: str) -> bool:
    """Case-insensitive suffix check."""
    return key.lower().endswith(extension.lower())


def derive_destination_key(source_key: str, target_extension: str) -> str:
    """Replaces the last extension of ``source_key`` with ``target_extension``.

    ``"folder/clip.MP4"`` becomes ``"folder/clip.flv"``.
    """
    stem = source_key.removesuffix(key_extension(source_key))
    return stem + target_extension.lower()
