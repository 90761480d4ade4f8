from remux_common.infrastructure.interfaces.message_broker import (
    MessageBroker,
    MessagePublisher,
)
from remux_common.infrastructure.interfaces.storage import StorageClient

__all__ = [
    "StorageClient",
    "MessagePublisher",
    "MessageBroker",
]
