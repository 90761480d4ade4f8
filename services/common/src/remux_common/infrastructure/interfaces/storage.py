"""Abstract interface for file storage operations."""

from abc import ABC, abstractmethod


class StorageClient(ABC):
    """Abstract base class for file storage backends bound to one bucket."""

    @abstractmethod
    def download(self, object_name: str, local_path: str) -> None:
        """
        Downloads an object to a local file, creating parent directories.

        Args:
            object_name: The object path/name in storage.
            local_path: Destination path on the local filesystem.

        Raises:
            StorageDownloadError: If the download fails.
        """

    @abstractmethod
    def upload(self, object_name: str, local_path: str) -> None:
        """
        Uploads a local file, overwriting any existing object.

        Args:
            object_name: The destination path/name in storage.
            local_path: Source path on the local filesystem.

        Raises:
            StorageUploadError: If the upload fails.
        """

    @abstractmethod
    def delete(self, object_name: str) -> None:
        """
        Removes an object from storage.

        Args:
            object_name: The object path/name in storage.

        Raises:
            StorageDeleteError: If the removal fails.
        """

    @abstractmethod
    def ensure_bucket_exists(self) -> None:
        """Ensures the bound bucket exists, creating it if necessary."""
