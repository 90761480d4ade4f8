"""ffmpeg implementation of the Transcoder interface."""

import subprocess
import threading
from typing import IO

from remux_common import setup_logging

from exceptions import TranscodeError, TranscoderUnavailableError

from .interfaces import Transcoder

logger = setup_logging()


class FfmpegTranscoder(Transcoder):
    """Copies all streams into a new container with an external ffmpeg binary."""

    def __init__(self, executable_path: str, target_format: str = "flv"):
        self._executable_path = executable_path
        self._target_format = target_format

    def build_command(self, input_path: str, output_path: str) -> list[str]:
        """Returns the full argv: warnings only, no banner, stream copy."""
        return [
            self._executable_path,
            "-loglevel",
            "warning",
            "-hide_banner",
            "-i",
            str(input_path),
            "-c",
            "copy",
            "-f",
            self._target_format,
            str(output_path),
        ]

    def remux(self, input_path: str, output_path: str) -> None:
        """
        Runs ffmpeg and blocks until it exits.

        stderr is read as bytes on a background thread while the process
        runs, so a full pipe cannot stall ffmpeg; the thread is joined
        before returning so no diagnostic line is lost.

        Raises:
            TranscoderUnavailableError: If the process cannot be started.
            TranscodeError: If ffmpeg exits with a non-zero status.
        """
        extra = {"input_path": str(input_path), "output_path": str(output_path)}
        logger.info("Starting remux", extra=extra)

        try:
            process = subprocess.Popen(
                self.build_command(input_path, output_path),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            logger.critical(
                "Error starting ffmpeg",
                extra={**extra, "executable_path": self._executable_path},
            )
            raise TranscoderUnavailableError(self._executable_path, e) from e

        drain = threading.Thread(
            target=_forward_diagnostics,
            args=(process.stderr,),
            name="ffmpeg-stderr",
            daemon=True,
        )
        drain.start()

        returncode = process.wait()
        drain.join()
        process.stderr.close()

        if returncode != 0:
            logger.warning(
                "ffmpeg exited with an error",
                extra={**extra, "returncode": returncode},
            )
            raise TranscodeError(str(input_path), returncode)

        logger.info("Remux complete", extra=extra)


def _forward_diagnostics(stream: IO[bytes]) -> None:
    """
    Logs every non-blank line of ``stream`` at WARNING level.

    ffmpeg echoes metadata and file names as raw bytes, so each line is
    decoded on its own with replacement characters and the pipe keeps being
    read to EOF whatever it contains.
    """
    try:
        for raw_line in stream:
            line = raw_line.decode("utf-8", errors="replace").strip()
            if line:
                logger.warning(line)
    except (OSError, ValueError):
        logger.warning("Unable to read ffmpeg output", exc_info=True)
