"""Abstract interfaces for infrastructure dependencies."""

from remux_common.infrastructure import MessageBroker, StorageClient

from .audit_recorder import AuditRecorder
from .transcoder import Transcoder

__all__ = ["AuditRecorder", "MessageBroker", "StorageClient", "Transcoder"]
