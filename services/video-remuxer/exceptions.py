"""Custom exceptions for the video-remuxer service."""


class TranscodeError(Exception):
    """Raised when the transcoder exits with a non-zero status."""

    def __init__(self, file_name: str, returncode: int):
        self.file_name = file_name
        self.returncode = returncode
        super().__init__(
            f"Failed to remux '{file_name}' (transcoder exited with {returncode})"
        )


class TranscoderUnavailableError(Exception):
    """Raised when the transcoder process cannot be started at all."""

    def __init__(self, executable_path: str, cause: Exception | None = None):
        self.executable_path = executable_path
        self.cause = cause
        super().__init__(f"Could not start transcoder '{executable_path}'")


class AuditLogError(Exception):
    """Raised when writing an audit record fails."""

    def __init__(self, input_key: str, cause: Exception | None = None):
        self.input_key = input_key
        self.cause = cause
        super().__init__(f"Failed to record audit entry for '{input_key}'")


class InvalidNotificationError(Exception):
    """Raised when a bucket notification cannot be parsed into a remux event."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid bucket notification: {reason}")


class MissingConfigurationError(Exception):
    """Raised when a required setting is absent at startup."""

    def __init__(self, variable: str, reason: str = "not set"):
        self.variable = variable
        self.reason = reason
        super().__init__(f"{variable} {reason}")
