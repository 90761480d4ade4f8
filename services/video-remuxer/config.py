"""Application configuration loaded from environment variables."""

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel
from remux_common import MinioConfig, QueueConfig, RabbitMQConfig, setup_logging

from exceptions import MissingConfigurationError

logger = setup_logging()


class RemuxConfig(BaseModel, frozen=True):
    """Settings that drive the remux workflow itself."""

    download_dir: Path
    input_bucket_name: str
    output_bucket_name: str
    delete_when_done: bool = False
    ffmpeg_path: str = "/opt/bin/ffmpeg"
    source_extension: str = ".mp4"
    target_extension: str = ".flv"
    target_format: str = "flv"


class PostgresConfig(BaseModel, frozen=True):
    """PostgreSQL connection configuration for the audit log."""

    host: str
    user: str
    password: str
    port: int
    database: str
    table_name: str


class NotificationConfig(BaseModel, frozen=True):
    """Where completion events are published; disabled without a routing key."""

    routing_key: str | None = None

    @property
    def enabled(self) -> bool:
        return bool(self.routing_key)


class AppConfig(BaseModel, frozen=True):
    """Root application configuration."""

    remux: RemuxConfig
    minio: MinioConfig
    rabbitmq: RabbitMQConfig
    postgres: PostgresConfig
    notification: NotificationConfig


def _require(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name, "")
    if not value:
        raise MissingConfigurationError(name)
    return value


def load_config(environ: Mapping[str, str] | None = None) -> AppConfig:
    """
    Loads configuration from environment variables.

    Args:
        environ: Mapping to read from; defaults to ``os.environ``.

    Returns:
        The frozen application configuration.

    Raises:
        MissingConfigurationError: If a required variable is absent or the
            download directory does not exist.
    """
    if environ is None:
        environ = os.environ

    download_dir = Path(_require(environ, "DOWNLOAD_DIR"))
    if not download_dir.is_dir():
        raise MissingConfigurationError("DOWNLOAD_DIR", "does not exist")

    output_bucket_name = _require(environ, "OUTPUT_BUCKET_NAME")
    input_bucket_name = _require(environ, "INPUT_BUCKET_NAME")
    table_name = _require(environ, "REMUX_LOG_TABLE_NAME")

    routing_key = environ.get("NOTIFICATION_ROUTING_KEY") or None
    if routing_key is None:
        logger.warning("NOTIFICATION_ROUTING_KEY not set. Will not send notifications")

    delete_when_done = environ.get("DELETE_WHEN_DONE") == "true"
    if delete_when_done:
        logger.info("Will delete source objects on completion")

    return AppConfig(
        remux=RemuxConfig(
            download_dir=download_dir,
            input_bucket_name=input_bucket_name,
            output_bucket_name=output_bucket_name,
            delete_when_done=delete_when_done,
            ffmpeg_path=environ.get("FFMPEG_PATH", "/opt/bin/ffmpeg"),
        ),
        minio=MinioConfig(
            endpoint=environ.get("MINIO_ENDPOINT", "minio:9000"),
            user=environ.get("MINIO_USER", ""),
            password=environ.get("MINIO_PASSWORD", ""),
        ),
        rabbitmq=RabbitMQConfig(
            host=environ.get("RABBITMQ_HOST", "rabbitmq"),
            user=environ.get("RABBITMQ_USER", ""),
            password=environ.get("RABBITMQ_PASSWORD", ""),
            queue_config=QueueConfig(
                name="video_remux_queue",
                queue_type="quorum",
                expected_routing_key="bucket.object.created",
                dlq_name="dlq_video_remuxer",
                dlq_exchange_name="dead_letter_exchange",
                dlq_routing_key="video.remux.failed",
            ),
        ),
        postgres=PostgresConfig(
            host=environ.get("POSTGRES_HOST", "postgres"),
            user=environ.get("POSTGRES_USER", ""),
            password=environ.get("POSTGRES_PASSWORD", ""),
            port=int(environ.get("POSTGRES_PORT", "5432")),
            database=environ.get("POSTGRES_DB", ""),
            table_name=table_name,
        ),
        notification=NotificationConfig(routing_key=routing_key),
    )
