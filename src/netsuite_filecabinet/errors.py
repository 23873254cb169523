"""Typed errors raised across the transport, resolver and adapter layers."""

from __future__ import annotations


class FileCabinetError(Exception):
    """Base class for every error raised by this package."""


class RemoteRequestFailed(FileCabinetError):
    """Raised when a SuiteTalk request fails at the transport or decoding level.

    Covers connection errors, timeouts, TLS failures, non-2xx responses and
    bodies that are not valid JSON. Rate limiting (429) is not distinguished.
    """

    def __init__(
        self,
        method: str,
        path: str,
        cause: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(f"Failed to {method} {path}: {cause}")
        self.method = method
        self.path = path
        self.cause = cause
        self.status_code = status_code


class MalformedResponse(FileCabinetError):
    """Raised when a decoded response lacks the fields its record type requires."""


class PathNotFound(FileCabinetError):
    """Raised when a logical path does not resolve to a remote record."""

    kind = "Path"

    def __init__(self, path: str) -> None:
        super().__init__(f"{self.kind} not found at path: {path}")
        self.path = path


class DirectoryNotFound(PathNotFound):
    kind = "Directory"


class FileNotFound(PathNotFound):
    kind = "File"


class OperationFailed(FileCabinetError):
    """Base for operation-level failures; the underlying error is the __cause__."""

    action = "process"

    def __init__(self, path: str, reason: str | None = None) -> None:
        message = f"Failed to {self.action}: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.path = path
        self.reason = reason


class WriteFailed(OperationFailed):
    action = "write file"


class ReadFailed(OperationFailed):
    action = "read file"


class DeleteFailed(OperationFailed):
    action = "delete file"


class CreateDirectoryFailed(OperationFailed):
    action = "create directory"


class DeleteDirectoryFailed(OperationFailed):
    action = "delete directory"


class _TransferFailed(OperationFailed):
    def __init__(self, source: str, destination: str, reason: str | None = None) -> None:
        super().__init__(f"{source} -> {destination}", reason)
        self.source = source
        self.destination = destination


class MoveFailed(_TransferFailed):
    action = "move file"


class CopyFailed(_TransferFailed):
    action = "copy file"


class UnsupportedOperation(FileCabinetError):
    """Raised for operations the FileCabinet has no concept of (e.g. visibility)."""
