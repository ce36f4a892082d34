"""Tests for api.py — GraphQL transport, error classification, diagnostics."""

import io
import json
import socket
import urllib.error
from unittest.mock import patch

import pytest

from hoppscotch_cli import operations
from hoppscotch_cli.api import (
    _classify_network_error,
    _handle_graphql_response,
    _http_request,
    _sanitize_error,
    graphql_request,
)
from hoppscotch_cli.config import EffectiveConfig
from hoppscotch_cli.exceptions import (
    CliError,
    GraphQLError,
    HTTPError,
    NetworkError,
    SessionExpiredError,
    UnauthenticatedError,
    UnconfiguredError,
)

URL = "https://hopp.example.com/graphql"


def _respond(mock_urlopen, body, content_type="application/json"):
    mock_resp = mock_urlopen.return_value.__enter__.return_value
    mock_resp.headers.get.return_value = content_type
    mock_resp.read.return_value = body if isinstance(body, bytes) else json.dumps(body).encode()
    return mock_resp


def _http_error(code, body=b"", reason="Error"):
    return urllib.error.HTTPError(URL, code, reason, {}, io.BytesIO(body))


class TestSanitizeError:
    def test_strips_html(self):
        assert _sanitize_error("<h1>Bad</h1> <p>gateway</p>") == "Bad gateway"

    def test_truncates_long_body(self):
        result = _sanitize_error("x" * 600)
        assert result.endswith("... [truncated]")
        assert len(result) < 600

    def test_empty_body(self):
        assert _sanitize_error("") == ""
        assert _sanitize_error(None) == ""


class TestPreconditions:
    @patch("hoppscotch_cli.api.urllib.request.urlopen")
    def test_missing_endpoint(self, mock_urlopen):
        with pytest.raises(UnconfiguredError) as exc_info:
            graphql_request(operations.MY_TEAMS, cfg=EffectiveConfig(cookie="c"))
        assert "[SETUP_NEEDED]" in str(exc_info.value)
        assert "auth set-endpoint" in str(exc_info.value)
        mock_urlopen.assert_not_called()

    @patch("hoppscotch_cli.api.urllib.request.urlopen")
    def test_missing_cookie(self, mock_urlopen):
        with pytest.raises(UnauthenticatedError) as exc_info:
            graphql_request(operations.MY_TEAMS, cfg=EffectiveConfig(endpoint=URL))
        assert "auth set-cookie" in str(exc_info.value)
        mock_urlopen.assert_not_called()

    def test_resolves_config_when_not_given(self):
        # conftest points the store at an empty dir and clears env vars
        with pytest.raises(UnconfiguredError):
            graphql_request(operations.MY_TEAMS)


class TestGraphQLRequest:
    @patch("hoppscotch_cli.api.urllib.request.urlopen")
    def test_returns_data(self, mock_urlopen, cfg):
        _respond(mock_urlopen, {"data": {"myTeams": [{"id": "t1"}]}})
        assert graphql_request(operations.MY_TEAMS, cfg=cfg) == {"myTeams": [{"id": "t1"}]}

    @patch("hoppscotch_cli.api.urllib.request.urlopen")
    def test_sends_query_variables_and_cookie(self, mock_urlopen, cfg):
        _respond(mock_urlopen, {"data": {}})
        graphql_request(operations.TEAM, {"teamID": "t1"}, cfg)
        req = mock_urlopen.call_args[0][0]
        assert req.get_method() == "POST"
        assert req.full_url == URL
        assert req.get_header("Cookie") == cfg.cookie
        assert req.get_header("Content-type") == "application/json"
        sent = json.loads(req.data)
        assert sent == {"query": operations.TEAM, "variables": {"teamID": "t1"}}

    @patch("hoppscotch_cli.api.urllib.request.urlopen")
    def test_missing_data_is_empty(self, mock_urlopen, cfg):
        _respond(mock_urlopen, {"data": None})
        assert graphql_request(operations.MY_TEAMS, cfg=cfg) == {}

    @patch("hoppscotch_cli.api.urllib.request.urlopen")
    def test_graphql_errors(self, mock_urlopen, cfg):
        _respond(mock_urlopen, {"errors": [{"message": "team/not_found"}], "data": None})
        with pytest.raises(GraphQLError) as exc_info:
            graphql_request(operations.TEAM, {"teamID": "x"}, cfg)
        assert str(exc_info.value) == "[GRAPHQL_ERROR] team/not_found"
        assert exc_info.value.errors == [{"message": "team/not_found"}]
        assert exc_info.value.exit_code == 1

    @pytest.mark.parametrize("message", ["auth/fail", "Unauthorized", "Not authenticated"])
    @patch("hoppscotch_cli.api.urllib.request.urlopen")
    def test_auth_errors_mean_session_expired(self, mock_urlopen, message, cfg):
        _respond(mock_urlopen, {"errors": [{"message": message}]})
        with pytest.raises(SessionExpiredError) as exc_info:
            graphql_request(operations.MY_TEAMS, cfg=cfg)
        assert "[SESSION_EXPIRED]" in str(exc_info.value)
        assert exc_info.value.exit_code == 2

    @pytest.mark.parametrize("code", [401, 403])
    @patch("hoppscotch_cli.api.urllib.request.urlopen")
    def test_http_auth_status(self, mock_urlopen, code, cfg):
        mock_urlopen.side_effect = _http_error(code, b"denied")
        with pytest.raises(SessionExpiredError) as exc_info:
            graphql_request(operations.MY_TEAMS, cfg=cfg)
        assert f"HTTP {code}" in str(exc_info.value)

    @patch("hoppscotch_cli.api.urllib.request.urlopen")
    def test_http_error_with_graphql_body(self, mock_urlopen, cfg):
        body = json.dumps({"errors": [{"message": "Variable $teamID is invalid"}]}).encode()
        mock_urlopen.side_effect = _http_error(400, body, "Bad Request")
        with pytest.raises(GraphQLError) as exc_info:
            graphql_request(operations.TEAM, {"teamID": 1}, cfg)
        assert "Variable $teamID is invalid" in str(exc_info.value)

    @patch("hoppscotch_cli.api.urllib.request.urlopen")
    def test_http_server_error(self, mock_urlopen, cfg):
        mock_urlopen.side_effect = _http_error(500, b"<html>boom</html>", "Internal Server Error")
        with pytest.raises(CliError) as exc_info:
            graphql_request(operations.MY_TEAMS, cfg=cfg)
        message = str(exc_info.value)
        assert "HTTP 500" in message
        assert URL in message
        assert "boom" in message
        assert "<html>" not in message
        assert type(exc_info.value) is CliError


class TestNetworkErrors:
    @pytest.mark.parametrize(
        "reason,kind,fragment",
        [
            (socket.gaierror(-2, "Name or service not known"), "dns", "resolve host"),
            (ConnectionRefusedError(111, "Connection refused"), "refused", "refused"),
            (TimeoutError("timed out"), "timeout", "timed out"),
            (OSError("something odd"), "other", "failed"),
        ],
    )
    @patch("hoppscotch_cli.api.urllib.request.urlopen")
    def test_url_errors(self, mock_urlopen, reason, kind, fragment, cfg):
        mock_urlopen.side_effect = urllib.error.URLError(reason)
        with pytest.raises(NetworkError) as exc_info:
            graphql_request(operations.MY_TEAMS, cfg=cfg)
        assert exc_info.value.reason == kind
        assert fragment in str(exc_info.value)
        assert exc_info.value.exit_code == 1

    @patch("hoppscotch_cli.api.urllib.request.urlopen")
    def test_raw_timeout(self, mock_urlopen, cfg):
        mock_urlopen.side_effect = TimeoutError("timed out")
        with pytest.raises(NetworkError) as exc_info:
            graphql_request(operations.MY_TEAMS, cfg=cfg)
        assert exc_info.value.reason == "timeout"

    @patch("hoppscotch_cli.api.urllib.request.urlopen")
    def test_connection_reset(self, mock_urlopen, cfg):
        mock_urlopen.side_effect = ConnectionResetError(104, "reset")
        with pytest.raises(NetworkError) as exc_info:
            graphql_request(operations.MY_TEAMS, cfg=cfg)
        assert exc_info.value.reason == "other"

    def test_classify(self):
        assert _classify_network_error(socket.gaierror()) == "dns"
        assert _classify_network_error("plain string") == "other"

    def test_invalid_url(self):
        cfg = EffectiveConfig(endpoint="not a url", cookie="c")
        with pytest.raises(UnconfiguredError):
            graphql_request(operations.MY_TEAMS, cfg=cfg)


class TestHttpRequest:
    @patch("hoppscotch_cli.api.urllib.request.urlopen")
    def test_response_size_limit(self, mock_urlopen, monkeypatch):
        monkeypatch.setattr("hoppscotch_cli.api.config.HTTP_MAX_RESPONSE_BYTES", 4)
        _respond(mock_urlopen, b"12345")
        with pytest.raises(CliError) as exc_info:
            _http_request(URL, {}, {})
        assert "Response too large" in str(exc_info.value)

    @patch("hoppscotch_cli.api.urllib.request.urlopen")
    def test_html_content_type(self, mock_urlopen):
        _respond(mock_urlopen, b"<html>login</html>", "text/html; charset=utf-8")
        with pytest.raises(CliError) as exc_info:
            _http_request(URL, {}, {})
        assert "Content-Type" in str(exc_info.value)

    @patch("hoppscotch_cli.api.urllib.request.urlopen")
    def test_invalid_json(self, mock_urlopen):
        _respond(mock_urlopen, b"not json{{")
        with pytest.raises(CliError) as exc_info:
            _http_request(URL, {}, {})
        assert "not valid JSON" in str(exc_info.value)

    @patch("hoppscotch_cli.api.urllib.request.urlopen")
    def test_http_error_carries_body(self, mock_urlopen):
        mock_urlopen.side_effect = _http_error(502, b"bad gateway")
        with pytest.raises(HTTPError) as exc_info:
            _http_request(URL, {}, {})
        assert exc_info.value.code == 502
        assert exc_info.value.body == "bad gateway"


class TestHandleGraphQLResponse:
    def test_non_object(self):
        with pytest.raises(CliError, match="Unexpected GraphQL response shape"):
            _handle_graphql_response([1, 2])

    def test_multiple_messages_joined(self):
        with pytest.raises(GraphQLError) as exc_info:
            _handle_graphql_response({"errors": [{"message": "a"}, {"message": "b"}]})
        assert str(exc_info.value) == "[GRAPHQL_ERROR] a, b"


class TestVerboseLogging:
    @patch("hoppscotch_cli.api._http_request")
    def test_logs_request_with_masked_cookie(self, mock_http, cfg, capsys):
        mock_http.return_value = {"data": {"myTeams": []}}
        graphql_request(operations.MY_TEAMS, cfg=cfg, verbose=True)
        err = capsys.readouterr().err
        assert err.startswith("[HTTP] ")
        logged = json.loads(err.splitlines()[0][len("[HTTP] "):])
        assert logged["operation"] == "MyTeams"
        assert logged["url"] == cfg.endpoint
        assert "secretcookie123" not in err
        assert mock_http.call_args.kwargs["log"] is True

    @patch("hoppscotch_cli.api._http_request")
    def test_silent_by_default(self, mock_http, cfg, capsys):
        mock_http.return_value = {"data": {}}
        graphql_request(operations.MY_TEAMS, cfg=cfg)
        assert capsys.readouterr().err == ""
