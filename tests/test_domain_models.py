"""Tests for notification parsing, key derivation and job construction."""

from pathlib import Path

import pytest

from domain import (
    AuditRecord,
    RemuxEvent,
    RemuxJob,
    derive_destination_key,
    has_extension,
    key_extension,
)
from exceptions import InvalidNotificationError


class TestRemuxEventFromNotification:
    def test_decodes_percent_encoded_key(self, make_notification):
        event = RemuxEvent.from_notification(
            make_notification("incoming", "summer%2Fday+one%281%29.mp4")
        )

        assert event.source_bucket == "incoming"
        assert event.source_key == "summer/day one(1).mp4"

    def test_uses_request_id_from_response_elements(self, make_notification):
        event = RemuxEvent.from_notification(make_notification("incoming", "a.mp4"))

        assert event.request_id == "REQ123"

    def test_generates_request_id_when_missing(self, make_notification):
        first = RemuxEvent.from_notification(
            make_notification("incoming", "a.mp4", request_id=None)
        )
        second = RemuxEvent.from_notification(
            make_notification("incoming", "a.mp4", request_id=None)
        )

        assert first.request_id
        assert first.request_id != second.request_id

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"Records": []},
            {"Records": [{"s3": {"bucket": {"name": "b"}}}]},
            {"Records": [{"s3": {"bucket": {"name": "b"}, "object": {"key": ""}}}]},
            {"Records": [{"s3": {"bucket": {"name": 3}, "object": {"key": "a.mp4"}}}]},
            [],
            None,
        ],
    )
    def test_rejects_malformed_notifications(self, payload):
        with pytest.raises(InvalidNotificationError):
            RemuxEvent.from_notification(payload)

    def test_event_is_immutable(self, make_notification):
        event = RemuxEvent.from_notification(make_notification("incoming", "a.mp4"))

        with pytest.raises(Exception):
            event.source_key = "other.mp4"


class TestKeyHelpers:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("folder/clip.MP4", "folder/clip.flv"),
            ("clip.mp4", "clip.flv"),
            ("a.b/c.d.mp4", "a.b/c.d.flv"),
            ("videos/.mp4", "videos/.flv"),
        ],
    )
    def test_derive_destination_key(self, source, expected):
        assert derive_destination_key(source, ".flv") == expected

    def test_target_extension_is_lowercased(self):
        assert derive_destination_key("clip.mp4", ".FLV") == "clip.flv"

    def test_key_extension_ignores_dots_in_directories(self):
        assert key_extension("a.b/noext") == ""
        assert key_extension("a.b/clip.Mp4") == ".Mp4"

    def test_has_extension_is_case_insensitive(self):
        assert has_extension("CLIP.MP4", ".mp4")
        assert not has_extension("clip.mp4v", ".mp4")


class TestRemuxJob:
    def test_paths_keep_source_and_target_extensions(self, tmp_path):
        job = RemuxJob.create("folder/clip.MP4", tmp_path, ".flv")

        assert job.dest_key == "folder/clip.flv"
        assert job.local_input_path.parent == tmp_path
        assert job.local_input_path.suffix == ".MP4"
        assert job.local_output_path.suffix == ".flv"

    def test_paths_are_unique_per_job(self, tmp_path):
        jobs = [RemuxJob.create("clip.mp4", tmp_path, ".flv") for _ in range(20)]
        paths = {job.local_input_path for job in jobs} | {job.local_output_path for job in jobs}

        assert len(paths) == 40

    def test_uses_given_start_time(self):
        job = RemuxJob.create("clip.mp4", Path("/tmp"), ".flv", start_time=12.5)

        assert job.start_time == 12.5


class TestAuditRecord:
    def test_success_follows_error_message(self):
        ok = AuditRecord(input_key="a.mp4", duration_ms=10, request_id="r")
        failed = AuditRecord(
            input_key="a.mp4", duration_ms=10, request_id="r", error_message="download failed"
        )

        assert ok.successful is True
        assert failed.successful is False
        assert ok.timestamp > 0
