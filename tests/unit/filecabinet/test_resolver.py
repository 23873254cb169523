"""Unit tests for filecabinet/resolver.py — path walking, lookups and folder creation."""

import logging
from typing import Any
from unittest.mock import MagicMock

import pytest

from netsuite_filecabinet.errors import DirectoryNotFound, FileNotFound, MalformedResponse
from netsuite_filecabinet.filecabinet.models import FileRecord, FolderRecord
from netsuite_filecabinet.filecabinet.resolver import (
    PathPrefixer,
    PathResolver,
    join_path,
    split_path,
    sql_literal,
    sql_reference,
)

_SUITEQL = "/services/rest/query/v1/suiteql"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_resolver(root_folder_id: str = "") -> tuple[PathResolver, MagicMock]:
    """Return (resolver, mock_client)."""
    mock_client = MagicMock()
    return PathResolver(mock_client, root_folder_id=root_folder_id), mock_client


def _rows(*items: dict[str, Any], has_more: bool = False) -> dict[str, Any]:
    return {"items": list(items), "count": len(items), "hasMore": has_more}


def _folder_row(id: str, name: str, parent: str | None = None) -> dict[str, Any]:
    return {"id": id, "name": name, "parent": parent}


def _file_row(id: str, name: str, folder: str) -> dict[str, Any]:
    return {
        "id": id,
        "name": name,
        "folder": folder,
        "filesize": 5,
        "filetype": "application/pdf",
        "lastmodifieddate": "2024-01-15T10:30:00Z",
        "createddate": "2024-01-10T08:00:00Z",
    }


def _queries(mock_client: MagicMock) -> list[str]:
    """Return the SuiteQL query strings sent through client.get, in order."""
    return [c.args[1]["q"] for c in mock_client.get.call_args_list if c.args[0] == _SUITEQL]


# ---------------------------------------------------------------------------
# Path helper tests
# ---------------------------------------------------------------------------


class TestPathHelpers:
    def test_split_path_drops_empty_and_dot_segments(self) -> None:
        assert split_path("/a//b/./c/") == ["a", "b", "c"]
        assert split_path("") == []
        assert split_path(".") == []

    def test_join_path_normalises_segments(self) -> None:
        assert join_path("a/", "/b", "", "c.txt") == "a/b/c.txt"

    def test_prefixer_prepends_prefix(self) -> None:
        assert PathPrefixer("/exports/").prefix_path("a/b.txt") == "exports/a/b.txt"
        assert PathPrefixer().prefix_path("/a/b.txt") == "a/b.txt"

    def test_sql_literal_doubles_single_quotes(self) -> None:
        assert sql_literal("O'Brien.txt") == "'O''Brien.txt'"

    def test_sql_reference_handles_root_numeric_and_other_ids(self) -> None:
        assert sql_reference("parent", "") == "parent IS NULL"
        assert sql_reference("parent", "-15") == "parent = -15"
        assert sql_reference("folder", "abc") == "folder = 'abc'"


# ---------------------------------------------------------------------------
# resolve_folder_id tests
# ---------------------------------------------------------------------------


class TestResolveFolderId:
    @pytest.mark.parametrize("path", ["", "/", "."])
    def test_root_path_short_circuits_without_query(self, path: str) -> None:
        resolver, mock_client = _make_resolver(root_folder_id="812")

        assert resolver.resolve_folder_id(path) == "812"
        mock_client.get.assert_not_called()

    def test_walks_each_segment_filtering_by_parent(self) -> None:
        resolver, mock_client = _make_resolver()
        mock_client.get.side_effect = [
            _rows(_folder_row("10", "a")),
            _rows(_folder_row("20", "b", parent="10")),
        ]

        assert resolver.resolve_folder_id("a/b") == "20"
        assert _queries(mock_client) == [
            "SELECT id, name, parent FROM mediaitemfolder WHERE name = 'a' AND parent IS NULL",
            "SELECT id, name, parent FROM mediaitemfolder WHERE name = 'b' AND parent = 10",
        ]

    def test_first_segment_is_scoped_to_configured_root(self) -> None:
        resolver, mock_client = _make_resolver(root_folder_id="-15")
        mock_client.get.return_value = _rows(_folder_row("10", "a", parent="-15"))

        resolver.resolve_folder_id("a")

        assert _queries(mock_client)[0].endswith("WHERE name = 'a' AND parent = -15")

    def test_missing_segment_raises_directory_not_found(self) -> None:
        resolver, mock_client = _make_resolver()
        mock_client.get.side_effect = [_rows(_folder_row("10", "a")), _rows()]

        with pytest.raises(DirectoryNotFound) as exc_info:
            resolver.resolve_folder_id("a/missing")

        assert exc_info.value.path == "a/missing"
        assert "Directory not found at path: a/missing" in str(exc_info.value)

    def test_duplicate_folder_names_use_first_match(self, caplog: pytest.LogCaptureFixture) -> None:
        resolver, mock_client = _make_resolver()
        mock_client.get.return_value = _rows(_folder_row("10", "a"), _folder_row("11", "a"))

        with caplog.at_level(logging.WARNING):
            assert resolver.resolve_folder_id("a") == "10"

        assert "duplicate folder names" in caplog.text

    def test_folder_metadata_returns_record(self) -> None:
        resolver, mock_client = _make_resolver()
        mock_client.get.return_value = _rows(_folder_row("10", "a"))

        assert resolver.folder_metadata("a") == FolderRecord(id="10", name="a", parent_id=None)

    def test_folder_metadata_for_root_needs_no_query(self) -> None:
        resolver, mock_client = _make_resolver(root_folder_id="812")

        assert resolver.folder_metadata("") == FolderRecord(id="812", name="")
        mock_client.get.assert_not_called()


# ---------------------------------------------------------------------------
# resolve_file_id / file_metadata tests
# ---------------------------------------------------------------------------


class TestResolveFile:
    def test_queries_by_name_and_containing_folder(self) -> None:
        resolver, mock_client = _make_resolver()
        mock_client.get.side_effect = [
            _rows(_folder_row("10", "docs")),
            _rows(_file_row("500", "report.pdf", folder="10")),
        ]

        assert resolver.resolve_file_id("docs/report.pdf") == "500"
        assert _queries(mock_client)[1] == (
            "SELECT id, name, folder, filesize, filetype, lastmodifieddate, createddate"
            " FROM file WHERE name = 'report.pdf' AND folder = 10"
        )

    def test_file_in_root_queries_root_folder_only(self) -> None:
        resolver, mock_client = _make_resolver(root_folder_id="812")
        mock_client.get.return_value = _rows(_file_row("500", "a.txt", folder="812"))

        resolver.resolve_file_id("a.txt")

        assert len(_queries(mock_client)) == 1
        assert _queries(mock_client)[0].endswith("name = 'a.txt' AND folder = 812")

    def test_file_metadata_returns_all_fields(self) -> None:
        resolver, mock_client = _make_resolver(root_folder_id="812")
        mock_client.get.return_value = _rows(_file_row("500", "a.pdf", folder="812"))

        record = resolver.file_metadata("a.pdf")

        assert record == FileRecord(
            id="500",
            name="a.pdf",
            folder_id="812",
            size=5,
            file_type="application/pdf",
            last_modified="2024-01-15T10:30:00Z",
            created="2024-01-10T08:00:00Z",
        )

    def test_no_rows_raises_file_not_found(self) -> None:
        resolver, mock_client = _make_resolver(root_folder_id="812")
        mock_client.get.return_value = _rows()

        with pytest.raises(FileNotFound) as exc_info:
            resolver.resolve_file_id("missing.txt")

        assert exc_info.value.path == "missing.txt"

    def test_missing_folder_raises_file_not_found(self) -> None:
        resolver, mock_client = _make_resolver()
        mock_client.get.return_value = _rows()

        with pytest.raises(FileNotFound) as exc_info:
            resolver.resolve_file_id("nope/missing.txt")

        assert isinstance(exc_info.value.__cause__, DirectoryNotFound)

    def test_root_path_is_not_a_file(self) -> None:
        resolver, mock_client = _make_resolver()

        with pytest.raises(FileNotFound):
            resolver.file_metadata("/")
        mock_client.get.assert_not_called()

    def test_duplicate_file_names_use_first_match(self, caplog: pytest.LogCaptureFixture) -> None:
        resolver, mock_client = _make_resolver(root_folder_id="812")
        mock_client.get.return_value = _rows(
            _file_row("500", "a.txt", folder="812"),
            _file_row("501", "a.txt", folder="812"),
        )

        with caplog.at_level(logging.WARNING):
            assert resolver.resolve_file_id("a.txt") == "500"

        assert "duplicate file names" in caplog.text

    def test_single_quotes_in_names_are_escaped(self) -> None:
        resolver, mock_client = _make_resolver(root_folder_id="812")
        mock_client.get.return_value = _rows(_file_row("500", "O'Brien.txt", folder="812"))

        resolver.resolve_file_id("O'Brien.txt")

        assert "name = 'O''Brien.txt'" in _queries(mock_client)[0]


# ---------------------------------------------------------------------------
# ensure_folder_path tests
# ---------------------------------------------------------------------------


class TestEnsureFolderPath:
    def test_creates_missing_segments_under_last_resolved_parent(self) -> None:
        resolver, mock_client = _make_resolver()
        mock_client.get.side_effect = [_rows(_folder_row("10", "a")), _rows()]
        mock_client.post.side_effect = [{"id": "20"}, {"id": "30"}]

        assert resolver.ensure_folder_path("a/b/c") == "30"

        # Once a segment is created its children cannot exist yet.
        assert len(_queries(mock_client)) == 2
        assert mock_client.post.call_args_list[0].args == (
            "/services/rest/record/v1/folder",
            {"name": "b", "parent": {"id": "10"}},
        )
        assert mock_client.post.call_args_list[1].args == (
            "/services/rest/record/v1/folder",
            {"name": "c", "parent": {"id": "20"}},
        )

    def test_top_level_folder_under_provider_root_has_no_parent(self) -> None:
        resolver, mock_client = _make_resolver()
        mock_client.get.return_value = _rows()
        mock_client.post.return_value = {"id": "10"}

        resolver.ensure_folder_path("a")

        mock_client.post.assert_called_once_with("/services/rest/record/v1/folder", {"name": "a"})

    def test_existing_path_performs_no_creation(self) -> None:
        resolver, mock_client = _make_resolver(root_folder_id="-15")
        mock_client.get.side_effect = [
            _rows(_folder_row("10", "a", parent="-15")),
            _rows(_folder_row("20", "b", parent="10")),
        ]

        assert resolver.ensure_folder_path("a/b") == "20"
        mock_client.post.assert_not_called()

    def test_root_path_returns_root_without_calls(self) -> None:
        resolver, mock_client = _make_resolver(root_folder_id="812")

        assert resolver.ensure_folder_path("") == "812"
        mock_client.get.assert_not_called()
        mock_client.post.assert_not_called()

    def test_create_response_without_id_raises_malformed_response(self) -> None:
        resolver, mock_client = _make_resolver()
        mock_client.get.return_value = _rows()
        mock_client.post.return_value = {}

        with pytest.raises(MalformedResponse, match="lacks a record id"):
            resolver.ensure_folder_path("a")


# ---------------------------------------------------------------------------
# list_folder / pagination tests
# ---------------------------------------------------------------------------


class TestListFolder:
    def test_returns_child_files_and_folders(self) -> None:
        resolver, mock_client = _make_resolver()
        mock_client.get.side_effect = [
            _rows(_file_row("500", "a.pdf", folder="10")),
            _rows(_folder_row("20", "sub", parent="10")),
        ]

        files, folders = resolver.list_folder("10")

        assert [f.name for f in files] == ["a.pdf"]
        assert folders == [FolderRecord(id="20", name="sub", parent_id="10")]
        assert _queries(mock_client)[0].endswith("FROM file WHERE folder = 10")
        assert _queries(mock_client)[1].endswith("FROM mediaitemfolder WHERE parent = 10")

    def test_follows_has_more_pagination(self) -> None:
        resolver, mock_client = _make_resolver()
        mock_client.get.side_effect = [
            _rows(_file_row("500", "a.pdf", folder="10"), has_more=True),
            _rows(_file_row("501", "b.pdf", folder="10")),
            _rows(),
        ]

        files, _ = resolver.list_folder("10")

        assert [f.id for f in files] == ["500", "501"]
        second_page = mock_client.get.call_args_list[1].args[1]
        assert second_page["offset"] == 1

    def test_malformed_query_response_raises(self) -> None:
        resolver, mock_client = _make_resolver()
        mock_client.get.return_value = {"items": "oops"}

        with pytest.raises(MalformedResponse):
            resolver.list_folder("10")
