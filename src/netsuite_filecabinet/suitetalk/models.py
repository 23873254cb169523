"""SuiteTalk endpoints, error bodies and the connectivity probe result."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# REST endpoints relative to the account base URL
SUITEQL_PATH = "/services/rest/query/v1/suiteql"
FILE_RECORD_PATH = "/services/rest/record/v1/file"
FOLDER_RECORD_PATH = "/services/rest/record/v1/folder"

# SuiteQL query string parameter
QUERY_PARAM = "q"

# FileCabinet root folder queried by the connectivity probe
PROBE_FOLDER_ID = -15
PROBE_QUERY = f"SELECT id, name FROM folder WHERE id = {PROBE_FOLDER_ID}"

# NetSuite error payload keys
FIELD_ERROR_DETAILS = "o:errorDetails"
FIELD_DETAIL = "detail"
FIELD_TITLE = "title"
FIELD_STATUS = "status"


@dataclass
class ErrorBody:
    """Error payload returned by SuiteTalk alongside a non-2xx status."""

    title: str
    detail: str
    status: int | None = None

    @classmethod
    def parse(cls, raw: Any) -> ErrorBody | None:
        """Map a decoded error payload to an ErrorBody, or None if it is not one."""
        if not isinstance(raw, dict) or not (FIELD_TITLE in raw or FIELD_ERROR_DETAILS in raw):
            return None
        details = raw.get(FIELD_ERROR_DETAILS) or []
        if isinstance(details, dict):
            details = [details]
        detail = ""
        if isinstance(details, list) and details and isinstance(details[0], dict):
            detail = str(details[0].get(FIELD_DETAIL, ""))
        status = raw.get(FIELD_STATUS)
        return cls(
            title=str(raw.get(FIELD_TITLE, "")),
            detail=detail,
            status=int(status) if isinstance(status, int | str) and str(status).isdigit() else None,
        )

    def message(self) -> str:
        return self.detail or self.title


@dataclass
class ConnectionResult:
    """Outcome of the connectivity probe."""

    success: bool
    message: str
    data: dict[str, Any] | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise to ``{success, message, data?, error?}``, omitting unset keys."""
        result: dict[str, Any] = {"success": self.success, "message": self.message}
        if self.data is not None:
            result["data"] = self.data
        if self.error is not None:
            result["error"] = self.error
        return result
