from remux_common.config import MinioConfig, QueueConfig, RabbitMQConfig
from remux_common.exceptions import (
    EventPublishError,
    StorageDeleteError,
    StorageDownloadError,
    StorageUploadError,
)
from remux_common.logging import setup_logging

__all__ = [
    "setup_logging",
    "StorageDownloadError",
    "StorageUploadError",
    "StorageDeleteError",
    "EventPublishError",
    "MinioConfig",
    "QueueConfig",
    "RabbitMQConfig",
]
