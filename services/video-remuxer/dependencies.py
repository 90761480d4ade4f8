"""Dependency injection configuration for the video-remuxer service."""

from contextlib import contextmanager

import pika
from minio import Minio
from remux_common import setup_logging
from sqlmodel import Session, SQLModel, create_engine

from config import load_config
from handlers import RemuxEventHandler
from infrastructure import (
    FfmpegTranscoder,
    MinioStorageClient,
    RabbitMQBroker,
    SqlAuditRecorder,
    build_remux_log_table,
)
from worker import Worker

logger = setup_logging()

_config = load_config()

# MinIO storage, one client per bucket
_minio_client = Minio(
    endpoint=_config.minio.endpoint,
    access_key=_config.minio.user,
    secret_key=_config.minio.password,
    secure=_config.minio.secure,
)
_input_storage = MinioStorageClient(_minio_client, _config.remux.input_bucket_name)
_output_storage = MinioStorageClient(_minio_client, _config.remux.output_bucket_name)
_output_storage.ensure_bucket_exists()

# PostgreSQL audit log
_db_url = (
    f"postgresql+psycopg://{_config.postgres.user}:{_config.postgres.password}"
    f"@{_config.postgres.host}:{_config.postgres.port}/{_config.postgres.database}"
)
_db_engine = create_engine(_db_url)
_remux_log_table = build_remux_log_table(_config.postgres.table_name)
SQLModel.metadata.create_all(_db_engine)
logger.info(
    "Database initialized",
    extra={"host": _config.postgres.host, "table": _config.postgres.table_name},
)


@contextmanager
def _session_factory():
    """Creates a database session context manager."""
    with Session(_db_engine) as session:
        yield session


_audit_recorder = SqlAuditRecorder(_session_factory, _remux_log_table)

# RabbitMQ broker
_credentials = pika.PlainCredentials(_config.rabbitmq.user, _config.rabbitmq.password)
_parameters = pika.ConnectionParameters(
    host=_config.rabbitmq.host,
    credentials=_credentials,
    heartbeat=0,
)
_rabbit_connection = pika.BlockingConnection(_parameters)
_rabbit_channel = _rabbit_connection.channel()
_broker = RabbitMQBroker(_rabbit_channel, _config.rabbitmq)
_broker.setup_queue_infrastructure()

# Service composition
_transcoder = FfmpegTranscoder(
    _config.remux.ffmpeg_path, target_format=_config.remux.target_format
)
_handler = RemuxEventHandler(
    _input_storage,
    _output_storage,
    _transcoder,
    _audit_recorder,
    _config.remux,
)


def get_worker() -> Worker:
    """Returns the configured worker instance."""
    return Worker(
        _broker,
        _handler,
        _config.notification,
        _config.remux.output_bucket_name,
    )
