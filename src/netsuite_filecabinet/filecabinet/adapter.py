"""Storage adapter backed by the NetSuite FileCabinet."""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from netsuite_filecabinet.errors import (
    CopyFailed,
    CreateDirectoryFailed,
    DeleteDirectoryFailed,
    DeleteFailed,
    FileCabinetError,
    MoveFailed,
    PathNotFound,
    ReadFailed,
    UnsupportedOperation,
    WriteFailed,
)
from netsuite_filecabinet.filecabinet.interface import StorageAdapter
from netsuite_filecabinet.filecabinet.models import (
    DEFAULT_MIME_TYPE,
    DirectoryAttributes,
    FileAttributes,
    FileRecord,
    StorageEntry,
    parse_timestamp,
    record_id,
)
from netsuite_filecabinet.filecabinet.resolver import (
    PathPrefixer,
    PathResolver,
    join_path,
    split_path,
)
from netsuite_filecabinet.suitetalk.client import NetSuiteClient, client_from_config
from netsuite_filecabinet.suitetalk.models import (
    FILE_RECORD_PATH,
    FOLDER_RECORD_PATH,
    ConnectionResult,
)

if TYPE_CHECKING:
    from netsuite_filecabinet.config import NetSuiteConfig

logger = logging.getLogger(__name__)

VISIBILITY_PRIVATE = "private"

MIME_TYPES = {
    "txt": "text/plain",
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "zip": "application/zip",
    "csv": "text/csv",
    "json": "application/json",
    "xml": "application/xml",
}


def mime_type_for(filename: str) -> str:
    """Map a file name's extension to a MIME type; unknown extensions are binary."""
    _, dot, extension = filename.rpartition(".")
    if not dot:
        return DEFAULT_MIME_TYPE
    return MIME_TYPES.get(extension.lower(), DEFAULT_MIME_TYPE)


class FileCabinetAdapter(StorageAdapter):
    """Implements the storage contract in terms of PathResolver and NetSuiteClient.

    Writing to a path that already holds a file creates a second record with
    the same name; reads and metadata lookups then see the first match only.
    """

    def __init__(self, client: NetSuiteClient, resolver: PathResolver, prefix: str = "") -> None:
        """Initialise the adapter.

        Args:
            client: Authenticated SuiteTalk client.
            resolver: Path resolver bound to the same client.
            prefix: Path prefix applied to every operation.
        """
        self._client = client
        self._resolver = resolver
        self._prefixer = PathPrefixer(prefix)

    # --- Existence checks ---

    def file_exists(self, path: str) -> bool:
        return self._exists(self._resolver.file_metadata, path)

    def directory_exists(self, path: str) -> bool:
        return self._exists(self._resolver.folder_metadata, path)

    def _exists(self, lookup: Callable[[str], Any], path: str) -> bool:
        """Run a metadata lookup, mapping PathNotFound to False and re-raising the rest."""
        try:
            lookup(self._location(path))
        except PathNotFound:
            return False
        return True

    # --- File operations ---

    def write(self, path: str, contents: bytes | str, mime_type: str | None = None) -> None:
        """Create a file record holding ``contents``.

        Parent folders are created as needed. ``str`` contents are encoded
        as UTF-8; the MIME type defaults to one derived from the extension.

        Raises:
            WriteFailed: If folder creation or the record create call fails,
                or the response carries no new record id.
        """
        segments = split_path(self._location(path))
        if not segments:
            raise WriteFailed(path, "path has no file name")
        name = segments[-1]
        data = contents.encode("utf-8") if isinstance(contents, str) else contents

        try:
            folder_id = self._resolver.ensure_folder_path("/".join(segments[:-1]))
            body: dict[str, Any] = {
                "name": name,
                "content": base64.b64encode(data).decode("ascii"),
                "fileType": mime_type or mime_type_for(name),
            }
            if folder_id:
                body["folder"] = {"id": folder_id}
            response = self._client.post(FILE_RECORD_PATH, body)
        except FileCabinetError as exc:
            logger.error("[write] write failed; path:%s;error:%s", path, exc)
            raise WriteFailed(path, str(exc)) from exc

        file_id = record_id(response)
        if file_id is None:
            raise WriteFailed(path, "response lacks a record id")
        logger.info("[write] file written; path:%s;file_id:%s;bytes:%d", path, file_id, len(data))

    def read(self, path: str) -> bytes:
        """Fetch the full file record and decode its base64 content.

        Raises:
            FileNotFound: If nothing exists at ``path``.
            ReadFailed: If the fetch fails or the record has no valid content.
        """
        try:
            file_id = self._resolver.resolve_file_id(self._location(path))
            record = FileRecord.parse(self._client.get(f"{FILE_RECORD_PATH}/{file_id}"))
        except PathNotFound:
            raise
        except FileCabinetError as exc:
            logger.error("[read] read failed; path:%s;error:%s", path, exc)
            raise ReadFailed(path, str(exc)) from exc

        if record.content is None:
            raise ReadFailed(path, "file content not found")
        try:
            return base64.b64decode(record.content)
        except binascii.Error as exc:
            raise ReadFailed(path, "file content is not valid base64") from exc

    def delete(self, path: str) -> None:
        try:
            file_id = self._resolver.resolve_file_id(self._location(path))
            self._client.delete(f"{FILE_RECORD_PATH}/{file_id}")
        except PathNotFound:
            raise
        except FileCabinetError as exc:
            logger.error("[delete] delete failed; path:%s;error:%s", path, exc)
            raise DeleteFailed(path, str(exc)) from exc
        logger.info("[delete] file deleted; path:%s;file_id:%s", path, file_id)

    def copy(self, source: str, destination: str) -> None:
        """Read the source and write it to the destination. Not atomic."""
        try:
            contents = self.read(source)
            self.write(destination, contents)
        except PathNotFound:
            raise
        except FileCabinetError as exc:
            raise CopyFailed(source, destination, str(exc)) from exc

    def move(self, source: str, destination: str) -> None:
        """Rename and re-parent the existing record in place; content is not re-uploaded."""
        segments = split_path(self._location(destination))
        if not segments:
            raise MoveFailed(source, destination, "destination has no file name")

        try:
            file_id = self._resolver.resolve_file_id(self._location(source))
            folder_id = self._resolver.ensure_folder_path("/".join(segments[:-1]))
            body: dict[str, Any] = {"name": segments[-1]}
            if folder_id:
                body["folder"] = {"id": folder_id}
            self._client.put(f"{FILE_RECORD_PATH}/{file_id}", body)
        except PathNotFound:
            raise
        except FileCabinetError as exc:
            logger.error(
                "[move] move failed; source:%s;destination:%s;error:%s", source, destination, exc
            )
            raise MoveFailed(source, destination, str(exc)) from exc
        logger.info(
            "[move] file moved; source:%s;destination:%s;file_id:%s", source, destination, file_id
        )

    # --- Directory operations ---

    def create_directory(self, path: str) -> None:
        try:
            self._resolver.ensure_folder_path(self._location(path))
        except FileCabinetError as exc:
            raise CreateDirectoryFailed(path, str(exc)) from exc

    def delete_directory(self, path: str) -> None:
        """Delete a folder record. Children are handled by NetSuite, not recursed here."""
        location = self._location(path)
        if not split_path(location):
            raise DeleteDirectoryFailed(path, "cannot delete the root folder")
        try:
            folder_id = self._resolver.resolve_folder_id(location)
            self._client.delete(f"{FOLDER_RECORD_PATH}/{folder_id}")
        except PathNotFound:
            raise
        except FileCabinetError as exc:
            logger.error("[delete_directory] delete failed; path:%s;error:%s", path, exc)
            raise DeleteDirectoryFailed(path, str(exc)) from exc
        logger.info("[delete_directory] folder deleted; path:%s;folder_id:%s", path, folder_id)

    def list_contents(
        self,
        path: str,
        recursive: bool = False,
        best_effort: bool = True,
    ) -> list[StorageEntry]:
        """List files and folders under ``path``.

        Two queries are issued per folder visited. Entry paths are relative
        to the adapter root. In best-effort mode any failure during the walk
        produces an empty list rather than a partial one.
        """
        try:
            folder_id = self._resolver.resolve_folder_id(self._location(path))
            return self._collect(folder_id, join_path(path), recursive)
        except FileCabinetError as exc:
            if not best_effort:
                raise
            logger.warning(
                "[list_contents] listing failed; returning no entries; path:%s;error:%s",
                path,
                exc,
            )
            return []

    def _collect(self, folder_id: str, base: str, recursive: bool) -> list[StorageEntry]:
        files, folders = self._resolver.list_folder(folder_id)
        entries: list[StorageEntry] = [
            FileAttributes(
                path=join_path(base, record.name),
                file_size=record.size,
                last_modified=parse_timestamp(record.created),
                mime_type=record.file_type or DEFAULT_MIME_TYPE,
            )
            for record in files
        ]
        for folder in folders:
            folder_path = join_path(base, folder.name)
            entries.append(DirectoryAttributes(path=folder_path))
            if recursive:
                entries.extend(self._collect(folder.id, folder_path, recursive=True))
        return entries

    # --- Metadata ---

    def file_size(self, path: str) -> int | None:
        return self._resolver.file_metadata(self._location(path)).size

    def mime_type(self, path: str) -> str:
        return self._resolver.file_metadata(self._location(path)).file_type or DEFAULT_MIME_TYPE

    def last_modified(self, path: str) -> int | None:
        return parse_timestamp(self._resolver.file_metadata(self._location(path)).last_modified)

    def visibility(self, path: str) -> str:
        # FileCabinet files are only reachable through authenticated requests.
        return VISIBILITY_PRIVATE

    def set_visibility(self, path: str, visibility: str) -> None:
        raise UnsupportedOperation("NetSuite FileCabinet does not support visibility settings")

    # --- Diagnostics ---

    def test_connection(self) -> ConnectionResult:
        return self._client.test_connection()

    def _location(self, path: str) -> str:
        return self._prefixer.prefix_path(path)


def adapter_from_config(config: NetSuiteConfig) -> FileCabinetAdapter:
    """Construct a FileCabinetAdapter from adapter configuration.

    Creates a NetSuiteClient and a PathResolver bound to the configured
    root folder, then wires them into the adapter.

    Args:
        config: Adapter configuration instance.

    Returns:
        Configured FileCabinetAdapter instance.
    """
    client = client_from_config(config)
    resolver = PathResolver(client, root_folder_id=config.root_folder_id)
    return FileCabinetAdapter(client, resolver, prefix=config.prefix)
