"""Event handlers."""

from .remux_event_handler import RemuxEventHandler

__all__ = ["RemuxEventHandler"]
