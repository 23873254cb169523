"""Storage contract implemented by the FileCabinet adapter."""

from __future__ import annotations

import abc

from netsuite_filecabinet.filecabinet.models import StorageEntry


class StorageAdapter(abc.ABC):
    """Generic path-addressed file storage operations.

    Paths are slash-delimited and relative to the adapter root. Single-item
    operations raise typed errors from ``netsuite_filecabinet.errors``; only
    the existence checks map not-found to ``False``.
    """

    # --- Existence checks ---

    @abc.abstractmethod
    def file_exists(self, path: str) -> bool:
        """Return True if a file exists at ``path``."""

    @abc.abstractmethod
    def directory_exists(self, path: str) -> bool:
        """Return True if a directory exists at ``path``."""

    # --- File operations ---

    @abc.abstractmethod
    def write(self, path: str, contents: bytes | str, mime_type: str | None = None) -> None:
        """Write ``contents`` to ``path``, creating parent directories as needed."""

    @abc.abstractmethod
    def read(self, path: str) -> bytes:
        """Return the full contents of the file at ``path``."""

    @abc.abstractmethod
    def delete(self, path: str) -> None:
        """Delete the file at ``path``."""

    @abc.abstractmethod
    def copy(self, source: str, destination: str) -> None:
        """Copy a file; the source is left untouched."""

    @abc.abstractmethod
    def move(self, source: str, destination: str) -> None:
        """Rename and/or re-parent a file."""

    # --- Directory operations ---

    @abc.abstractmethod
    def create_directory(self, path: str) -> None:
        """Create ``path`` and any missing parents. Idempotent."""

    @abc.abstractmethod
    def delete_directory(self, path: str) -> None:
        """Delete the directory at ``path``."""

    @abc.abstractmethod
    def list_contents(
        self,
        path: str,
        recursive: bool = False,
        best_effort: bool = True,
    ) -> list[StorageEntry]:
        """List the entries under ``path``.

        Args:
            path: Directory to list.
            recursive: Descend into subdirectories.
            best_effort: Return an empty list instead of raising when any
                lookup fails during the walk.
        """

    # --- Metadata ---

    @abc.abstractmethod
    def file_size(self, path: str) -> int | None:
        """Return the size of the file in bytes."""

    @abc.abstractmethod
    def mime_type(self, path: str) -> str:
        """Return the MIME type of the file."""

    @abc.abstractmethod
    def last_modified(self, path: str) -> int | None:
        """Return the last-modified time as a Unix timestamp."""

    @abc.abstractmethod
    def visibility(self, path: str) -> str:
        """Return the visibility of the file."""

    @abc.abstractmethod
    def set_visibility(self, path: str, visibility: str) -> None:
        """Change the visibility of the file."""
