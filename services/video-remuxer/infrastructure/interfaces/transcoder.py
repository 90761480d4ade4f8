"""Abstract interface for container remuxing."""

from abc import ABC, abstractmethod


class Transcoder(ABC):
    """Repackages a local media file into another container."""

    @abstractmethod
    def remux(self, input_path: str, output_path: str) -> None:
        """
        Remuxes ``input_path`` into ``output_path`` and waits for completion.

        Raises:
            TranscodeError: If the transcoder ran but failed.
            TranscoderUnavailableError: If the transcoder could not be started.
        """
