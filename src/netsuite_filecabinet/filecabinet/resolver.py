"""Path-to-record resolution over SuiteQL queries."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from netsuite_filecabinet.errors import DirectoryNotFound, FileNotFound, MalformedResponse
from netsuite_filecabinet.filecabinet.models import (
    FileRecord,
    FolderRecord,
    QueryResult,
    record_id,
)
from netsuite_filecabinet.suitetalk.models import FOLDER_RECORD_PATH, QUERY_PARAM, SUITEQL_PATH

if TYPE_CHECKING:
    from netsuite_filecabinet.suitetalk.client import NetSuiteClient

logger = logging.getLogger(__name__)

FOLDER_TABLE = "mediaitemfolder"
FILE_TABLE = "file"
FOLDER_COLUMNS = "id, name, parent"
FILE_COLUMNS = "id, name, folder, filesize, filetype, lastmodifieddate, createddate"
OFFSET_PARAM = "offset"

_NUMERIC_ID = re.compile(r"^-?\d+$")


def split_path(path: str) -> list[str]:
    """Split a logical path into segments, dropping empty and ``.`` segments."""
    return [segment for segment in path.replace("\\", "/").split("/") if segment not in ("", ".")]


def join_path(*parts: str) -> str:
    return "/".join(segment for part in parts for segment in split_path(part))


def sql_literal(value: str) -> str:
    """Quote a string for SuiteQL, doubling embedded single quotes."""
    return "'" + value.replace("'", "''") + "'"


def sql_reference(column: str, record: str | None) -> str:
    """Build a ``column = id`` condition; an unset id means the provider root."""
    if not record:
        return f"{column} IS NULL"
    value = record if _NUMERIC_ID.match(record) else sql_literal(record)
    return f"{column} = {value}"


class PathPrefixer:
    """Applies a fixed path prefix to logical paths."""

    def __init__(self, prefix: str = "") -> None:
        self._prefix = join_path(prefix)

    def prefix_path(self, path: str) -> str:
        return join_path(self._prefix, path)


class PathResolver:
    """Maps slash-delimited paths onto FileCabinet folder and file internal ids.

    Nothing is cached: every call walks the path against the remote account,
    so a concurrent rename between resolution and use surfaces as a
    not-found error on the dependent call.
    """

    def __init__(self, client: NetSuiteClient, root_folder_id: str = "") -> None:
        """Initialise the resolver.

        Args:
            client: Authenticated SuiteTalk client.
            root_folder_id: Folder all paths resolve under. Empty means the
                provider root, where top-level folders have no parent.
        """
        self._client = client
        self._root_folder_id = root_folder_id

    @property
    def root_folder_id(self) -> str:
        return self._root_folder_id

    def resolve_folder_id(self, path: str) -> str:
        """Return the internal id of the folder at ``path``.

        Raises:
            DirectoryNotFound: If any segment of the path does not exist.
            RemoteRequestFailed: If a lookup query fails.
        """
        return self.folder_metadata(path).id

    def resolve_file_id(self, path: str) -> str:
        """Return the internal id of the file at ``path``.

        Raises:
            FileNotFound: If the file or its containing folder does not exist.
            RemoteRequestFailed: If a lookup query fails.
        """
        return self.file_metadata(path).id

    def folder_metadata(self, path: str) -> FolderRecord:
        """Walk ``path`` from the root folder one segment at a time.

        Each segment is matched by exact name and by the parent resolved for
        the previous segment, so same-named folders under different parents
        never collide. The root path short-circuits without a query.
        """
        folder = FolderRecord(id=self._root_folder_id, name="")
        for segment in split_path(path):
            child = self._find_child_folder(folder.id, segment)
            if child is None:
                raise DirectoryNotFound(path)
            folder = child
        return folder

    def file_metadata(self, path: str) -> FileRecord:
        """Resolve the containing folder, then look up the named file in it.

        When the folder holds several files with the same name (NetSuite
        does not prevent it) the first row returned is used.

        Raises:
            FileNotFound: If the file or its containing folder does not exist.
        """
        segments = split_path(path)
        if not segments:
            raise FileNotFound(path)
        try:
            folder_id = self.resolve_folder_id("/".join(segments[:-1]))
        except DirectoryNotFound as exc:
            raise FileNotFound(path) from exc

        name = segments[-1]
        files = self._query(
            f"SELECT {FILE_COLUMNS} FROM {FILE_TABLE} WHERE name = {sql_literal(name)}"
            f" AND {sql_reference('folder', folder_id)}"
        ).files()
        if not files:
            raise FileNotFound(path)
        if len(files) > 1:
            logger.warning(
                "[file_metadata] duplicate file names in folder; using first match;"
                " path:%s;folder_id:%s;match_count:%d",
                path,
                folder_id,
                len(files),
            )
        return files[0]

    def ensure_folder_path(self, path: str) -> str:
        """Return the id of the folder at ``path``, creating missing segments.

        Segments are resolved from the root; from the first missing one
        onward every remaining segment is created under the previous one.
        A second call for the same path creates nothing.
        """
        current = self._root_folder_id
        creating = False
        for segment in split_path(path):
            child = None if creating else self._find_child_folder(current, segment)
            if child is None:
                current = self._create_folder(current, segment)
                creating = True
            else:
                current = child.id
        return current

    def list_folder(self, folder_id: str) -> tuple[list[FileRecord], list[FolderRecord]]:
        """Return the direct child files and folders of a folder."""
        files = self._query(
            f"SELECT {FILE_COLUMNS} FROM {FILE_TABLE} WHERE {sql_reference('folder', folder_id)}"
        ).files()
        folders = self._query(
            f"SELECT {FOLDER_COLUMNS} FROM {FOLDER_TABLE}"
            f" WHERE {sql_reference('parent', folder_id)}"
        ).folders()
        return files, folders

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _find_child_folder(self, parent_id: str, name: str) -> FolderRecord | None:
        folders = self._query(
            f"SELECT {FOLDER_COLUMNS} FROM {FOLDER_TABLE} WHERE name = {sql_literal(name)}"
            f" AND {sql_reference('parent', parent_id)}"
        ).folders()
        if not folders:
            return None
        if len(folders) > 1:
            logger.warning(
                "[_find_child_folder] duplicate folder names; using first match;"
                " name:%s;parent_id:%s;match_count:%d",
                name,
                parent_id,
                len(folders),
            )
        return folders[0]

    def _create_folder(self, parent_id: str, name: str) -> str:
        body: dict[str, object] = {"name": name}
        if parent_id:
            body["parent"] = {"id": parent_id}
        response = self._client.post(FOLDER_RECORD_PATH, body)
        folder_id = record_id(response)
        if folder_id is None:
            raise MalformedResponse(f"Folder creation response lacks a record id: {name}")
        logger.info(
            "[_create_folder] created folder; name:%s;parent_id:%s;folder_id:%s",
            name,
            parent_id,
            folder_id,
        )
        return folder_id

    def _query(self, query: str) -> QueryResult:
        """Run a SuiteQL query, following ``hasMore`` pagination."""
        result = QueryResult.parse(self._client.get(SUITEQL_PATH, {QUERY_PARAM: query}))
        items = list(result.items)
        has_more = result.has_more
        while has_more:
            page = QueryResult.parse(
                self._client.get(SUITEQL_PATH, {QUERY_PARAM: query, OFFSET_PARAM: len(items)})
            )
            if not page.items:
                break
            items.extend(page.items)
            has_more = page.has_more
        return QueryResult(items=items, count=len(items), has_more=False)
