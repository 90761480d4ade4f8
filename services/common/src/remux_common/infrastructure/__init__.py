from remux_common.infrastructure.interfaces import (
    MessageBroker,
    MessagePublisher,
    StorageClient,
)

__all__ = [
    "StorageClient",
    "MessagePublisher",
    "MessageBroker",
]
