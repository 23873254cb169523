"""FileCabinet record models and the storage-facing attribute types.

SuiteTalk responses have no fixed schema: SuiteQL rows use lowercase column
names while REST records use camelCase and nest references. Everything is
mapped onto the dataclasses below at the resolver boundary so the rest of
the package never handles raw dicts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from netsuite_filecabinet.errors import MalformedResponse

# Record field names, SuiteQL column first, REST record alias second
FIELD_ID = ("id", "internalId")
FIELD_NAME = ("name",)
FIELD_PARENT = ("parent",)
FIELD_FOLDER = ("folder",)
FIELD_SIZE = ("filesize", "fileSize", "size")
FIELD_FILE_TYPE = ("filetype", "fileType", "mimeType")
FIELD_LAST_MODIFIED = ("lastmodifieddate", "lastModifiedDate", "lastModified")
FIELD_CREATED = ("createddate", "createdDate", "dateCreated")
FIELD_CONTENT = "content"

# SuiteQL result keys
FIELD_ITEMS = "items"
FIELD_COUNT = "count"
FIELD_HAS_MORE = "hasMore"

DEFAULT_MIME_TYPE = "application/octet-stream"


def _first(raw: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def _reference_id(value: Any) -> str | None:
    """Normalise a record reference, either a bare id or ``{"id": ...}``."""
    if isinstance(value, dict):
        value = _first(value, FIELD_ID)
    if value is None or value == "":
        return None
    return str(value)


def record_id(raw: Any) -> str | None:
    """Return the internal id carried by a create response or record, if any."""
    if not isinstance(raw, dict):
        return None
    return _reference_id(_first(raw, FIELD_ID))


def parse_timestamp(value: str | None) -> int | None:
    """Convert an ISO-8601 timestamp to Unix seconds; naive values are taken as UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp())


@dataclass
class FolderRecord:
    """A FileCabinet folder (``mediaitemfolder``)."""

    id: str
    name: str
    parent_id: str | None = None

    @classmethod
    def parse(cls, raw: Any) -> FolderRecord:
        if not isinstance(raw, dict) or record_id(raw) is None:
            raise MalformedResponse(f"Folder record without an id: {raw!r}")
        return cls(
            id=str(record_id(raw)),
            name=str(_first(raw, FIELD_NAME) or ""),
            parent_id=_reference_id(_first(raw, FIELD_PARENT)),
        )


@dataclass
class FileRecord:
    """A FileCabinet file. ``content`` is only populated by a full record fetch."""

    id: str
    name: str
    folder_id: str | None = None
    size: int | None = None
    file_type: str | None = None
    last_modified: str | None = None
    created: str | None = None
    content: str | None = None

    @classmethod
    def parse(cls, raw: Any) -> FileRecord:
        if not isinstance(raw, dict) or record_id(raw) is None:
            raise MalformedResponse(f"File record without an id: {raw!r}")
        size = _first(raw, FIELD_SIZE)
        try:
            size = int(size) if size is not None else None
        except (TypeError, ValueError) as exc:
            raise MalformedResponse(f"File record with a non-numeric size: {size!r}") from exc
        return cls(
            id=str(record_id(raw)),
            name=str(_first(raw, FIELD_NAME) or ""),
            folder_id=_reference_id(_first(raw, FIELD_FOLDER)),
            size=size,
            file_type=_first(raw, FIELD_FILE_TYPE),
            last_modified=_first(raw, FIELD_LAST_MODIFIED),
            created=_first(raw, FIELD_CREATED),
            content=raw.get(FIELD_CONTENT),
        )


@dataclass
class QueryResult:
    """Rows returned by a SuiteQL query."""

    items: list[dict[str, Any]] = field(default_factory=list)
    count: int = 0
    has_more: bool = False

    @classmethod
    def parse(cls, raw: Any) -> QueryResult:
        if not isinstance(raw, dict):
            raise MalformedResponse(f"SuiteQL response is not an object: {raw!r}")
        items = raw.get(FIELD_ITEMS) or []
        if not isinstance(items, list):
            raise MalformedResponse(f"SuiteQL items is not a list: {items!r}")
        return cls(
            items=[row for row in items if isinstance(row, dict)],
            count=int(raw.get(FIELD_COUNT) or len(items)),
            has_more=bool(raw.get(FIELD_HAS_MORE, False)),
        )

    def files(self) -> list[FileRecord]:
        return [FileRecord.parse(row) for row in self.items]

    def folders(self) -> list[FolderRecord]:
        return [FolderRecord.parse(row) for row in self.items]


@dataclass
class FileAttributes:
    """A file entry as seen by storage callers."""

    path: str
    file_size: int | None = None
    last_modified: int | None = None
    mime_type: str = DEFAULT_MIME_TYPE
    is_file: bool = field(default=True, init=False)


@dataclass
class DirectoryAttributes:
    """A directory entry as seen by storage callers."""

    path: str
    is_file: bool = field(default=False, init=False)


StorageEntry = FileAttributes | DirectoryAttributes
