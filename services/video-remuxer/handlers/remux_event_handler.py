"""Handler that remuxes newly uploaded videos into the output bucket."""

import logging
import os
import time

from remux_common import (
    StorageDeleteError,
    StorageDownloadError,
    StorageUploadError,
    setup_logging,
)
from remux_common.infrastructure import StorageClient

from config import RemuxConfig
from domain import RemuxEvent, RemuxJob, RemuxResult, has_extension
from exceptions import AuditLogError, TranscodeError
from infrastructure.interfaces import AuditRecorder, Transcoder

UNSUPPORTED_INPUT = "not a supported input"
DOWNLOAD_FAILED = "download failed"
UPLOAD_FAILED = "could not upload file"


class RemuxEventHandler:
    """
    Orchestrates download, remux, upload, cleanup and source deletion.

    Every call to ``handle`` is independent: all per-job state lives in a
    ``RemuxJob`` that is created and discarded within the call.
    """

    def __init__(
        self,
        input_storage: StorageClient,
        output_storage: StorageClient,
        transcoder: Transcoder,
        audit_recorder: AuditRecorder,
        config: RemuxConfig,
        logger: logging.Logger | None = None,
    ):
        self._input_storage = input_storage
        self._output_storage = output_storage
        self._transcoder = transcoder
        self._audit_recorder = audit_recorder
        self._config = config
        self._logger = logger or setup_logging()

    def handle(self, event: RemuxEvent) -> RemuxResult:
        """
        Processes one object-created event.

        Args:
            event: The decoded bucket notification.

        Returns:
            RemuxResult describing the outcome. Upload, transcode and delete
            failures are reported through the audit log and the result, not
            raised.

        Raises:
            StorageDownloadError: If the source object cannot be downloaded.
            TranscoderUnavailableError: If the transcoder cannot be started.
        """
        start_time = time.monotonic()
        extra = {
            "source_bucket": event.source_bucket,
            "source_key": event.source_key,
            "destination_bucket": self._config.output_bucket_name,
            "request_id": event.request_id,
        }
        self._logger.info("Decoded input", extra=extra)

        if event.source_bucket != self._config.input_bucket_name:
            self._logger.warning("Source bucket not correct, stopping", extra=extra)
            return RemuxResult(
                description="skipped",
                source_bucket=event.source_bucket,
                source_key=event.source_key,
                skipped=True,
            )

        if not has_extension(event.source_key, self._config.source_extension):
            self._logger.warning("File type not supported, skipping", extra=extra)
            self._record(event, start_time, "", UNSUPPORTED_INPUT)
            return RemuxResult(
                description=f"not a {self._config.source_extension} file, skipped",
                source_bucket=event.source_bucket,
                source_key=event.source_key,
                skipped=True,
                successful=False,
            )

        job = RemuxJob.create(
            event.source_key,
            self._config.download_dir,
            self._config.target_extension,
            start_time=start_time,
        )
        extra = {
            **extra,
            "temp_file": str(job.local_input_path),
            "dest_key": job.dest_key,
            "dest_file": str(job.local_output_path),
        }

        try:
            self._input_storage.download(job.source_key, str(job.local_input_path))
        except StorageDownloadError:
            self._logger.exception("Could not download", extra=extra)
            self._record(event, start_time, job.dest_key, DOWNLOAD_FAILED)
            raise
        self._logger.info("File downloaded", extra=extra)

        successful = True
        try:
            self._remux(job, extra)

            self._logger.info("Starting remuxed upload", extra=extra)
            try:
                self._output_storage.upload(job.dest_key, str(job.local_output_path))
            except StorageUploadError:
                self._logger.warning("Could not upload file", exc_info=True, extra=extra)
                self._record(event, start_time, job.dest_key, UPLOAD_FAILED)
                successful = False
            else:
                self._logger.info("Completed remux upload", extra=extra)
        finally:
            self._remove_temp_file(job.local_output_path, extra)
            self._remove_temp_file(job.local_input_path, extra)

        self._logger.info("All done", extra=extra)

        if successful and self._config.delete_when_done:
            message = ""
            try:
                self._input_storage.delete(job.source_key)
            except StorageDeleteError as e:
                self._logger.warning("Could not delete source", exc_info=True, extra=extra)
                message = str(e)
            self._record(event, start_time, job.dest_key, message)

        return RemuxResult(
            description=f"{event.source_bucket} {event.source_key}",
            source_bucket=event.source_bucket,
            source_key=event.source_key,
            dest_key=job.dest_key,
            successful=successful,
        )

    def _remux(self, job: RemuxJob, extra: dict) -> None:
        # A failed remux is not fatal here; the upload that follows fails on
        # its own when no output was produced.
        self._logger.info("Starting remux", extra=extra)
        try:
            self._transcoder.remux(
                str(job.local_input_path), str(job.local_output_path)
            )
        except TranscodeError as e:
            self._logger.warning(
                "Remux failed, attempting upload anyway",
                extra={**extra, "returncode": e.returncode},
            )
            return
        self._logger.info("Finished remux", extra=extra)

    def _remove_temp_file(self, path, extra: dict) -> None:
        try:
            os.remove(path)
        except OSError:
            self._logger.warning(
                "Could not delete temp file",
                exc_info=True,
                extra={**extra, "path": str(path)},
            )
            return
        self._logger.info("Temp file deleted", extra={**extra, "path": str(path)})

    def _record(
        self, event: RemuxEvent, start_time: float, output_key: str, error: str
    ) -> None:
        duration_ms = int((time.monotonic() - start_time) * 1000)
        try:
            self._audit_recorder.log_event(
                event.source_key, duration_ms, event.request_id, output_key, error
            )
        except AuditLogError:
            self._logger.warning(
                "Could not record",
                exc_info=True,
                extra={
                    "input_key": event.source_key,
                    "output_key": output_key,
                    "error": error,
                },
            )
