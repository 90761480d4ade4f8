"""Infrastructure implementations."""

from .ffmpeg_transcoder import FfmpegTranscoder
from .minio_storage import MinioStorageClient
from .rabbitmq_broker import RabbitMQBroker
from .sql_audit_log import SqlAuditRecorder, build_remux_log_table

__all__ = [
    "FfmpegTranscoder",
    "MinioStorageClient",
    "RabbitMQBroker",
    "SqlAuditRecorder",
    "build_remux_log_table",
]
