"""Tests for formatters/ — table and detail rendering, output dispatch."""

import json

from hoppscotch_cli.envelopes import build_document
from hoppscotch_cli.formatters import (
    _or_na,
    _sanitize_str,
    _table,
    _trunc,
    format_collection_detail,
    format_collections_table,
    format_environment_detail,
    format_environments_table,
    format_request_detail,
    format_request_search,
    format_requests_table,
    format_status,
    format_team_detail,
    format_teams_table,
    mutation_response,
    output,
)


def _row(kind, request_id="r1", **options):
    options.setdefault("title", "Sample")
    options.setdefault("url", "https://api.example.com/items")
    return {
        "id": request_id,
        "title": options["title"],
        "kind": kind,
        "envelope": build_document(kind, options),
    }


class TestTableHelpers:
    def test_trunc(self):
        assert _trunc("abcdef", 4) == "abc…"
        assert _trunc("abc", 4) == "abc"
        assert _trunc(None, 4) == ""

    def test_sanitize_strips_escape_sequences(self):
        assert _sanitize_str("\x1b[31mred\x1b[0m\x07") == "red"
        assert _sanitize_str("a\tb\nc") == "a\tb\nc"

    def test_or_na(self):
        assert _or_na(None) == "N/A"
        assert _or_na("") == "N/A"
        assert _or_na(0) == "0"

    def test_table_layout(self):
        text = _table([("ID", 4), ("Name", 0)], [("1", "one")], "Total: 1")
        lines = text.splitlines()
        assert lines[0] == "ID   Name"
        assert lines[1] == "-" * 72
        assert lines[2] == "1    one"
        assert lines[-1] == "Total: 1"


class TestOutput:
    def test_json_default(self, capsys):
        output({"a": 1})
        assert json.loads(capsys.readouterr().out) == {"a": 1}

    def test_table_uses_formatter(self, capsys):
        output([], format_teams_table, "table")
        assert capsys.readouterr().out == "No teams found.\n"

    def test_table_string_passthrough(self, capsys):
        output("plain", fmt="table")
        assert capsys.readouterr().out == "plain\n"

    def test_mutation_json(self, capsys):
        mutation_response("Created collection", "c1", "Docs", {"ok": True, "id": "c1"}, "json")
        assert json.loads(capsys.readouterr().out) == {"ok": True, "id": "c1"}

    def test_mutation_table(self, capsys):
        mutation_response("Created collection", "c1", "Docs", {"ok": True}, "table")
        assert capsys.readouterr().out == "OK: Created collection: c1: Docs\n"


class TestStatus:
    def test_ready(self):
        text = format_status({
            "endpoint": "https://h/graphql",
            "cookie_set": True,
            "cookie_length": 42,
            "team_id": "t1",
            "collection_id": None,
            "ready": True,
        })
        assert "Endpoint:      https://h/graphql" in text
        assert "[set] (42 chars)" in text
        assert "Collection ID: (not set)" in text
        assert text.endswith("Status: Ready")

    def test_not_configured(self):
        text = format_status({"cookie_set": False, "ready": False})
        assert "Cookie:        (not set)" in text
        assert "Status: Not configured" in text


class TestTeamsAndCollections:
    def test_teams_table(self):
        text = format_teams_table([{"id": "t1", "name": "Platform", "my_role": "OWNER"}])
        assert "Platform" in text
        assert "OWNER" in text
        assert "Total: 1 teams" in text

    def test_team_detail_missing_counts(self):
        text = format_team_detail({"id": "t1", "name": "Platform"})
        assert "Owners:  N/A" in text

    def test_collections_with_path(self):
        text = format_collections_table([{"id": "c1", "title": "B", "path": "A > B"}])
        assert "Path" in text
        assert "A > B" in text

    def test_collections_empty(self):
        assert format_collections_table([]) == "No collections found."

    def test_collection_detail(self):
        text = format_collection_detail(
            {"id": "c1", "title": "Root", "children": [{"id": "c2", "title": "Kid"}]}
        )
        assert "Parent:   (root)" in text
        assert "Children: 1" in text
        assert "- Kid (c2)" in text


class TestEnvironments:
    def test_table(self):
        text = format_environments_table(
            [{"id": "e1", "name": "Staging", "variables": [{"key": "A", "value": "1"}]}]
        )
        assert "Staging" in text
        assert "Total: 1 environments" in text

    def test_empty(self):
        assert format_environments_table([]) == "No environments found in this team."

    def test_detail(self):
        text = format_environment_detail(
            {"id": "e1", "name": "Staging", "variables": [{"key": "HOST", "value": ""}]}
        )
        assert "HOST = N/A" in text

    def test_detail_no_variables(self):
        assert "(none)" in format_environment_detail({"id": "e1", "name": "x", "variables": []})


class TestRequests:
    def test_http_table(self):
        text = format_requests_table([_row("http", method="POST")])
        header = text.splitlines()[0]
        assert header.split() == ["ID", "Title", "Method", "Endpoint"]
        assert "POST" in text
        assert "https://api.example.com/items" in text

    def test_http_table_unparseable_envelope(self):
        row = {"id": "r9", "title": "Broken", "kind": None, "envelope": None}
        text = format_requests_table([row])
        assert "r9" in text
        assert text.count("N/A") == 2

    def test_graphql_table(self):
        text = format_requests_table([_row("graphql", url="https://g")], kind="graphql")
        assert text.splitlines()[0].split() == ["ID", "Title", "URL"]
        assert "https://g" in text

    def test_realtime_table(self):
        text = format_requests_table([_row("realtime", type="mqtt")], kind="realtime")
        assert "mqtt" in text

    def test_empty(self):
        assert format_requests_table([], kind="graphql") == "No requests found."

    def test_search_mixes_kinds(self):
        text = format_request_search([_row("http", "r1"), _row("graphql", "r2")])
        assert "GET" in text
        assert "graphql" in text
        assert "Found 2 request(s)" in text

    def test_detail_http(self):
        text = format_request_detail(
            _row("http", headers='{"A": "1"}', auth_type="bearer", auth_token="x")
        )
        assert "Method:       GET" in text
        assert "Headers:      1" in text
        assert "Body type:    none" in text
        assert "Auth:         bearer" in text

    def test_detail_graphql_query_lines(self):
        text = format_request_detail(_row("graphql", query="query {\n  me\n}"))
        assert "    query {" in text
        assert "      me" in text

    def test_detail_socketio(self):
        text = format_request_detail(_row("realtime", type="socketio"))
        assert "Path:         /socket.io" in text
        assert "Version:      4" in text

    def test_detail_unparseable(self):
        text = format_request_detail(
            {"id": "r9", "title": "Broken", "kind": None, "envelope": None}
        )
        assert "could not be parsed" in text
        assert "Kind:         N/A" in text
