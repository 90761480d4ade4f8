"""Abstract interface for the remux audit log."""

from abc import ABC, abstractmethod


class AuditRecorder(ABC):
    """Append-only sink for job outcome records."""

    @abstractmethod
    def log_event(
        self,
        input_key: str,
        duration_ms: int,
        request_id: str,
        output_key: str,
        error_message: str,
    ) -> None:
        """
        Appends one immutable audit record.

        Args:
            input_key: Source object key.
            duration_ms: Elapsed job time in milliseconds.
            request_id: Identifier of the triggering request.
            output_key: Destination object key, empty if none was derived.
            error_message: Failure description, empty on success.

        Raises:
            AuditLogError: If the record could not be stored.
        """
