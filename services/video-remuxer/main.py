"""
Video Remuxer Service.

Consumes object-created notifications for the input bucket and, for each
MP4, downloads it, remuxes it to FLV with ffmpeg, uploads the result to the
output bucket and records the outcome in the remux audit log.
"""

import sys

from ddtrace import patch_all
from remux_common.logging import setup_logging

from exceptions import MissingConfigurationError

logger = setup_logging()
patch_all()


def main():
    """Starts the video remuxer worker."""
    logger.info("Starting video-remuxer service")
    try:
        from dependencies import get_worker
    except MissingConfigurationError as e:
        logger.critical("Invalid configuration", extra={"error": str(e)})
        sys.exit(1)

    worker = get_worker()
    worker.start()


if __name__ == "__main__":
    main()
