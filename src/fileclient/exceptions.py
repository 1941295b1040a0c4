"""
Custom exceptions for the file client.

Everything except StartupError is recovered at the command boundary and
turned into a failed CommandResult.
"""


class FileClientError(Exception):
    """Base exception class for file client errors."""

    pass


class StartupError(FileClientError):
    """Raised when the configured root cannot be used."""

    pass


class NotFoundError(FileClientError):
    """Raised when a virtual path does not exist."""

    pass


class NotADirectory(FileClientError):
    """Raised when a directory operation targets something else."""

    pass


class IsADirectory(FileClientError):
    """Raised when a content operation targets a directory."""

    pass


class InvalidArgument(FileClientError):
    """Raised for malformed command arguments."""

    pass


class OffsetOutOfRangeError(FileClientError):
    """Raised when a read starts beyond the end of a file."""

    pass


class BackendIOError(FileClientError):
    """Raised when the backend fails to perform an I/O operation."""

    pass


class EscapeAttempt(FileClientError):
    """Raised when a request would leave the confined root."""

    def __init__(self, raw_path: str):
        self.raw_path = raw_path
        super().__init__(
            f"Access denied: Cannot navigate above the root directory ({raw_path}).\n"
            "Current root directory restricts access to its subdirectories only."
        )
