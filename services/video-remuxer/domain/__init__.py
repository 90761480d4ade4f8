"""Domain layer containing business logic and models."""

from .models import (
    AuditRecord,
    RemuxEvent,
    RemuxJob,
    RemuxResult,
    derive_destination_key,
    has_extension,
    key_extension,
)

__all__ = [
    "AuditRecord",
    "RemuxEvent",
    "RemuxJob",
    "RemuxResult",
    "derive_destination_key",
    "has_extension",
    "key_extension",
]
