"""Tests for envelopes.py — building, merging and inspecting request documents."""

import json

import pytest

from hoppscotch_cli import envelopes
from hoppscotch_cli.envelopes import (
    ApiKeyAuth,
    BearerAuth,
    NoAuth,
    build_auth,
    build_body,
    build_document,
    build_envelope,
    build_realtime_spec,
    decode_environment_variables,
    detect_kind,
    encode_environment_variables,
    envelope_to_options,
    merge_for_update,
    normalize_form_fields,
    normalize_key_values,
    normalize_method,
    parse_envelope,
)
from hoppscotch_cli.exceptions import UsageError


def _http(**options):
    return json.loads(build_envelope("http", options))


# ---------------------------------------------------------------------------
# Normalization helpers
# ---------------------------------------------------------------------------


class TestNormalizeMethod:
    def test_upper_cases(self):
        assert normalize_method("patch") == "PATCH"

    def test_rejects_unknown(self):
        with pytest.raises(UsageError, match="Invalid method 'FETCH'"):
            normalize_method("FETCH")


class TestNormalizeKeyValues:
    def test_object_form(self):
        assert normalize_key_values('{"X-Api": "1", "Accept": "*/*"}') == [
            {"key": "X-Api", "value": "1", "active": True},
            {"key": "Accept", "value": "*/*", "active": True},
        ]

    def test_array_keeps_inactive_and_fills_missing(self):
        entries = normalize_key_values([{"key": "a", "active": False}, {"key": "b", "value": "2"}])
        assert entries == [
            {"key": "a", "value": "", "active": False},
            {"key": "b", "value": "2", "active": True},
        ]

    def test_none_is_empty(self):
        assert normalize_key_values(None) == []

    def test_invalid_json(self):
        with pytest.raises(UsageError, match="Invalid JSON in headers"):
            normalize_key_values("{nope")

    def test_scalar_rejected(self):
        with pytest.raises(UsageError, match="expected JSON array or object"):
            normalize_key_values("42", "params")

    def test_entry_without_key_rejected(self):
        with pytest.raises(UsageError, match="'key'"):
            normalize_key_values([{"value": "x"}])


class TestNormalizeFormFields:
    def test_object_form(self):
        assert normalize_form_fields({"a": "1"}) == [
            {"key": "a", "value": "1", "isFile": False, "active": True}
        ]

    def test_file_entries_get_list_value(self):
        fields = normalize_form_fields([{"key": "upload", "isFile": True, "value": "ignored"}])
        assert fields == [{"key": "upload", "value": [], "isFile": True, "active": True}]


# ---------------------------------------------------------------------------
# Fresh envelopes
# ---------------------------------------------------------------------------


class TestBuildHttpEnvelope:
    def test_minimal_defaults(self):
        doc = _http(title="Ping", url="https://api.example.com/ping")
        assert doc == {
            "v": "5",
            "name": "Ping",
            "endpoint": "https://api.example.com/ping",
            "method": "GET",
            "headers": [],
            "params": [],
            "body": {"contentType": None, "body": None},
            "auth": {"authType": "none", "authActive": False},
            "preRequestScript": "",
            "testScript": "",
            "requestVariables": [],
        }

    def test_key_order(self):
        raw = build_envelope("http", {"title": "t", "url": "u"})
        assert list(json.loads(raw)) == [
            "v",
            "name",
            "endpoint",
            "method",
            "headers",
            "params",
            "body",
            "auth",
            "preRequestScript",
            "testScript",
            "requestVariables",
        ]

    def test_body_defaults_to_json_content_type(self):
        doc = _http(title="t", url="u", method="post", body='{"a": 1}')
        assert doc["method"] == "POST"
        assert doc["body"] == {"contentType": "application/json", "body": '{"a": 1}'}

    def test_explicit_body_type(self):
        doc = _http(title="t", url="u", body="hello", body_type="text/plain")
        assert doc["body"] == {"contentType": "text/plain", "body": "hello"}

    def test_form_implies_multipart(self):
        doc = _http(title="t", url="u", form='{"field": "v"}')
        assert doc["body"]["contentType"] == "multipart/form-data"
        assert doc["body"]["body"][0]["key"] == "field"

    def test_invalid_body_type(self):
        with pytest.raises(UsageError, match="Invalid body type"):
            _http(title="t", url="u", body_type="application/xml")

    def test_validate_body_rejects_bad_json(self):
        with pytest.raises(UsageError, match="Body is not valid JSON"):
            _http(title="t", url="u", body="{bad", validate_body=True)

    def test_validate_body_skips_empty_body(self):
        doc = _http(title="t", url="u", body="", body_type="application/json", validate_body=True)
        assert doc["body"]["body"] == ""

    def test_bad_json_body_accepted_without_validation(self):
        assert _http(title="t", url="u", body="{bad")["body"]["body"] == "{bad"

    @pytest.mark.parametrize(
        "options,expected",
        [
            (
                {"auth_type": "bearer", "auth_token": "tok"},
                {"authType": "bearer", "authActive": True, "token": "tok"},
            ),
            (
                {"auth_type": "basic", "auth_username": "u", "auth_password": "p"},
                {"authType": "basic", "authActive": True, "username": "u", "password": "p"},
            ),
            (
                {"auth_type": "api-key", "auth_key": "k", "auth_value": "v"},
                {"authType": "api-key", "authActive": True, "key": "k", "value": "v",
                 "addTo": "HEADERS"},
            ),
            ({"auth_type": "inherit"}, {"authType": "inherit", "authActive": True}),
        ],
    )
    def test_auth_variants(self, options, expected):
        assert _http(title="t", url="u", **options)["auth"] == expected

    def test_oauth2_fields(self):
        auth = _http(
            title="t",
            url="u",
            auth_type="oauth2",
            auth_token="tok",
            oauth_grant_type="CLIENT_CREDENTIALS",
            oauth_token_url="https://idp/token",
            oauth_client_id="cid",
            oauth_scope="read",
        )["auth"]
        assert auth["grantType"] == "CLIENT_CREDENTIALS"
        assert auth["tokenEndpoint"] == "https://idp/token"
        assert auth["clientID"] == "cid"
        assert auth["scopes"] == "read"
        assert auth["authEndpoint"] == ""

    def test_only_active_variant_fields_written(self):
        doc = _http(title="t", url="u", auth_type="bearer", auth_token="x", auth_username="ignored")
        assert "username" not in doc["auth"]

    def test_invalid_auth_type(self):
        with pytest.raises(UsageError, match="Invalid auth type"):
            _http(title="t", url="u", auth_type="digest")

    def test_invalid_api_key_target(self):
        with pytest.raises(UsageError, match="api-key target"):
            _http(title="t", url="u", auth_type="api-key", auth_add_to="BODY")

    def test_auth_active_override(self):
        doc = _http(title="t", url="u", auth_type="bearer", auth_token="x", auth_active=False)
        assert doc["auth"]["authActive"] is False


class TestBuildGraphQLEnvelope:
    def test_defaults(self):
        doc = json.loads(build_envelope("graphql", {"title": "Q", "url": "https://g"}))
        assert doc == {
            "v": "4",
            "name": "Q",
            "url": "https://g",
            "headers": [],
            "query": "",
            "variables": "{}",
        }

    def test_variables_object_serialized_to_text(self):
        doc = build_document("graphql", {"title": "Q", "url": "u", "variables": {"id": 1}})
        assert doc["variables"] == '{"id": 1}'

    def test_variables_text_validated(self):
        with pytest.raises(UsageError, match="Invalid JSON in variables"):
            build_document("graphql", {"title": "Q", "url": "u", "variables": "{x"})


class TestBuildRealtimeEnvelope:
    def test_websocket_default(self):
        doc = build_document("realtime", {"title": "WS", "url": "wss://x"})
        assert doc == {
            "v": "1",
            "name": "WS",
            "url": "wss://x",
            "headers": [],
            "type": "websocket",
            "protocols": [],
        }

    def test_socketio_version_coerced(self):
        options = {"title": "S", "url": "u", "type": "socketio", "version": 3}
        doc = build_document("realtime", options)
        assert doc["path"] == "/socket.io"
        assert doc["version"] == "3"

    def test_mqtt_fields(self):
        doc = build_document(
            "realtime",
            {"title": "M", "url": "u", "type": "mqtt", "topic": "a/b", "qos": "2",
             "client_id": "c"},
        )
        assert (doc["topic"], doc["qos"], doc["clientId"]) == ("a/b", 2, "c")

    def test_mqtt_bad_qos(self):
        with pytest.raises(UsageError, match="Invalid qos"):
            build_realtime_spec({"type": "mqtt", "qos": 5})

    def test_protocols_must_be_strings(self):
        with pytest.raises(UsageError, match="protocols"):
            build_realtime_spec({"protocols": "[1, 2]"})

    def test_sse_has_no_extra_keys(self):
        doc = build_document("realtime", {"title": "E", "url": "u", "type": "sse"})
        assert set(doc) == {"v", "name", "url", "headers", "type"}

    def test_invalid_type(self):
        with pytest.raises(UsageError, match="Invalid realtime type"):
            build_document("realtime", {"title": "x", "url": "u", "type": "grpc"})


class TestBuildDocumentKind:
    def test_unknown_kind(self):
        with pytest.raises(UsageError, match="Invalid request kind"):
            build_document("soap", {})


# ---------------------------------------------------------------------------
# Merging
# ---------------------------------------------------------------------------


@pytest.fixture
def stored_http():
    return _http(
        title="Orders",
        url="https://api/orders",
        method="POST",
        headers='{"Accept": "application/json"}',
        body='{"a": 1}',
        auth_type="bearer",
        auth_token="secret",
        pre_request_script="pw.env.set('x', 1)",
    )


STORED_DOCUMENTS = [
    ("graphql", {"title": "Me", "url": "https://g", "query": "{ me { id } }",
                 "variables": '{"a": 1}', "headers": '{"X": "1"}'}),
    ("realtime", {"title": "WS", "url": "wss://echo", "type": "websocket",
                  "protocols": '["chat"]'}),
    ("realtime", {"title": "Events", "url": "https://sse", "type": "sse"}),
    ("realtime", {"title": "IO", "url": "wss://io", "type": "socketio", "path": "/io",
                  "version": "3"}),
    ("realtime", {"title": "Broker", "url": "wss://mq", "type": "mqtt", "topic": "a/b",
                  "qos": "1", "client_id": "c1"}),
]


class TestMergeForUpdate:
    def test_empty_merge_is_identity(self, stored_http):
        merged = json.loads(merge_for_update("http", json.dumps(stored_http), {}))
        assert merged == stored_http

    @pytest.mark.parametrize("kind,options", STORED_DOCUMENTS)
    def test_empty_merge_is_identity_for_every_kind(self, kind, options):
        stored = build_document(kind, options)
        assert json.loads(merge_for_update(kind, json.dumps(stored), {})) == stored

    def test_title_only(self, stored_http):
        merged = json.loads(merge_for_update("http", stored_http, {"title": "Renamed"}))
        assert merged["name"] == "Renamed"
        assert {k: v for k, v in merged.items() if k != "name"} == {
            k: v for k, v in stored_http.items() if k != "name"
        }

    @pytest.mark.parametrize("kind,options", STORED_DOCUMENTS)
    def test_title_only_for_every_kind(self, kind, options):
        stored = build_document(kind, options)
        merged = json.loads(merge_for_update(kind, stored, {"title": "Renamed"}))
        assert merged["name"] == "Renamed"
        assert {k: v for k, v in merged.items() if k != "name"} == {
            k: v for k, v in stored.items() if k != "name"
        }

    @pytest.mark.parametrize("auth", [None, "bearer abc"])
    def test_non_object_stored_auth_survives_title_update(self, stored_http, auth):
        stored = dict(stored_http, auth=auth)
        merged = json.loads(merge_for_update("http", stored, {"title": "b"}))
        assert merged["name"] == "b"
        assert merged["auth"] == auth

    def test_non_object_stored_auth_rebuilt_when_auth_supplied(self, stored_http):
        stored = dict(stored_http, auth=None)
        merged = json.loads(merge_for_update("http", stored, {"auth_type": "bearer",
                                                              "auth_token": "t"}))
        assert merged["auth"] == {"authType": "bearer", "authActive": True, "token": "t"}

    def test_unknown_realtime_type_carried_over(self):
        stored = {"v": "1", "name": "Sub", "url": "wss://gql", "headers": [],
                  "type": "graphql-ws", "protocols": ["graphql-transport-ws"]}
        assert json.loads(merge_for_update("realtime", stored, {})) == stored
        merged = json.loads(merge_for_update("realtime", stored, {"title": "Renamed"}))
        assert merged["type"] == "graphql-ws"
        assert merged["protocols"] == ["graphql-transport-ws"]

    def test_unknown_realtime_type_rejected_when_realtime_option_supplied(self):
        stored = {"v": "1", "name": "Sub", "url": "u", "headers": [], "type": "graphql-ws"}
        with pytest.raises(UsageError, match="Invalid realtime type 'graphql-ws'"):
            merge_for_update("realtime", stored, {"protocols": '["x"]'})

    def test_none_body_type_rejects_body(self, stored_http):
        with pytest.raises(UsageError, match="body type 'none'"):
            merge_for_update("http", stored_http, {"body_type": "none", "body": "{}"})

    def test_same_type_auth_keeps_unsupplied_fields(self):
        stored = _http(title="t", url="u", auth_type="basic", auth_username="alice",
                       auth_password="pw")
        merged = json.loads(merge_for_update("http", stored, {"auth_password": "new"}))
        assert merged["auth"] == {
            "authType": "basic",
            "authActive": True,
            "username": "alice",
            "password": "new",
        }

    def test_cross_type_auth_drops_old_fields(self, stored_http):
        merged = json.loads(
            merge_for_update(
                "http", stored_http, {"auth_type": "api-key", "auth_key": "k", "auth_value": "v"}
            )
        )
        assert merged["auth"] == {
            "authType": "api-key",
            "authActive": True,
            "key": "k",
            "value": "v",
            "addTo": "HEADERS",
        }

    def test_auth_active_carried_over(self):
        stored = _http(title="t", url="u", auth_type="bearer", auth_token="x", auth_active=False)
        merged = json.loads(merge_for_update("http", stored, {"auth_token": "y"}))
        assert merged["auth"] == {"authType": "bearer", "authActive": False, "token": "y"}

    def test_multipart_preserved_on_unrelated_update(self):
        stored = _http(title="t", url="u", form='[{"key": "f", "isFile": true}]')
        merged = json.loads(merge_for_update("http", stored, {"url": "https://new"}))
        assert merged["body"] == stored["body"]

    def test_body_replaced_keeps_type(self):
        stored = _http(title="t", url="u", body="plain", body_type="text/plain")
        merged = json.loads(merge_for_update("http", stored, {"body": "other"}))
        assert merged["body"] == {"contentType": "text/plain", "body": "other"}

    def test_switch_to_none_body(self, stored_http):
        merged = json.loads(merge_for_update("http", stored_http, {"body_type": "none"}))
        assert merged["body"] == {"contentType": None, "body": None}

    def test_switch_from_multipart_to_raw(self):
        stored = _http(title="t", url="u", form={"a": "1"})
        merged = json.loads(merge_for_update("http", stored, {"body_type": "text/plain"}))
        assert merged["body"] == {"contentType": "text/plain", "body": ""}

    def test_unknown_keys_preserved(self, stored_http):
        stored = dict(stored_http, _ref_id="req_123", responses={})
        merged = json.loads(merge_for_update("http", stored, {"method": "put"}))
        assert merged["_ref_id"] == "req_123"
        assert merged["responses"] == {}
        assert merged["method"] == "PUT"

    def test_stored_values_carried_verbatim(self):
        stored = {"v": "5", "name": "legacy", "endpoint": "u", "method": "fetch",
                  "headers": [{"key": "a"}], "params": [], "body": {"contentType": None,
                  "body": None}, "auth": {"authType": "weird"}}
        merged = json.loads(merge_for_update("http", stored, {"title": "renamed"}))
        assert merged["method"] == "fetch"
        assert merged["headers"] == [{"key": "a"}]
        assert merged["auth"] == {"authType": "weird"}

    def test_headers_replaced_wholesale(self, stored_http):
        merged = json.loads(merge_for_update("http", stored_http, {"headers": '{"X": "1"}'}))
        assert merged["headers"] == [{"key": "X", "value": "1", "active": True}]

    def test_unparseable_existing_treated_as_empty(self):
        merged = json.loads(merge_for_update("graphql", "{broken", {"title": "Q"}))
        assert merged["name"] == "Q"
        assert merged["variables"] == "{}"

    def test_realtime_type_switch_drops_old_fields(self):
        stored = build_document("realtime", {"title": "x", "url": "u", "type": "mqtt",
                                             "topic": "t"})
        merged = json.loads(merge_for_update("realtime", stored, {"type": "sse"}))
        assert "topic" not in merged
        assert "qos" not in merged
        assert merged["type"] == "sse"

    def test_realtime_same_type_keeps_fields(self):
        stored = build_document("realtime", {"title": "x", "url": "u", "type": "socketio",
                                             "path": "/ws"})
        merged = json.loads(merge_for_update("realtime", stored, {"version": "2"}))
        assert merged["path"] == "/ws"
        assert merged["version"] == "2"

    def test_graphql_query_update(self):
        stored = build_document("graphql", {"title": "Q", "url": "u", "variables": '{"a": 1}'})
        merged = json.loads(merge_for_update("graphql", stored, {"query": "{ me { id } }"}))
        assert merged["query"] == "{ me { id } }"
        assert merged["variables"] == '{"a": 1}'


class TestBuildAuthAndBody:
    def test_build_auth_defaults_to_none(self):
        assert build_auth({}) == NoAuth()

    def test_build_auth_from_existing_tag(self):
        auth = build_auth({"auth_token": "t"}, {"authType": "bearer", "token": "old"})
        assert auth == BearerAuth(token="t")

    def test_api_key_query_params(self):
        auth = build_auth({"auth_type": "api-key", "auth_add_to": "QUERY_PARAMS"})
        assert auth == ApiKeyAuth(add_to="QUERY_PARAMS")

    def test_build_body_none(self):
        assert build_body({}).to_dict() == {"contentType": None, "body": None}

    def test_build_body_non_string_serialized(self):
        assert build_body({"body": {"a": 1}}).to_dict() == {
            "contentType": "application/json",
            "body": '{"a": 1}',
        }


# ---------------------------------------------------------------------------
# Inspection
# ---------------------------------------------------------------------------


class TestParseEnvelope:
    def test_valid(self):
        assert parse_envelope('{"v": "5"}') == {"v": "5"}

    def test_dict_passthrough(self):
        data = {"v": "1"}
        assert parse_envelope(data) is data

    @pytest.mark.parametrize("raw", ["{bad", "[1, 2]", "null", None, 42])
    def test_unparseable(self, raw):
        assert parse_envelope(raw) is None


class TestDetectKind:
    @pytest.mark.parametrize(
        "envelope,kind",
        [
            ({"v": "5", "endpoint": "u", "method": "GET"}, "http"),
            ({"v": "4", "url": "u", "query": "{ a }"}, "graphql"),
            ({"v": "1", "url": "u", "type": "mqtt"}, "realtime"),
            ({"type": "sse"}, "realtime"),
            ({"v": "4"}, "graphql"),
            ({"name": "old"}, "http"),
            (None, None),
        ],
    )
    def test_detection(self, envelope, kind):
        assert detect_kind(envelope) == kind


class TestEnvelopeToOptions:
    def test_http_inverse(self, stored_http):
        options = envelope_to_options("http", stored_http)
        assert options["title"] == "Orders"
        assert options["url"] == "https://api/orders"
        assert options["method"] == "POST"
        assert options["body_type"] == "application/json"
        assert options["body"] == '{"a": 1}'
        assert options["auth_type"] == "bearer"
        assert options["auth_token"] == "secret"
        assert options["pre_request_script"] == "pw.env.set('x', 1)"

    def test_rebuild_from_options_is_stable(self, stored_http):
        options = envelope_to_options("http", stored_http)
        rebuilt = json.loads(build_envelope("http", {k: v for k, v in options.items()
                                                     if v is not None}))
        assert rebuilt == stored_http

    def test_multipart_maps_to_form(self):
        stored = _http(title="t", url="u", form={"a": "1"})
        options = envelope_to_options("http", stored)
        assert "body" not in options
        assert options["form"][0]["key"] == "a"

    def test_no_body_reports_none_type(self):
        assert envelope_to_options("http", _http(title="t", url="u"))["body_type"] == "none"

    def test_realtime_variant_fields(self):
        stored = build_document("realtime", {"title": "m", "url": "u", "type": "mqtt",
                                             "client_id": "abc"})
        options = envelope_to_options(None, stored)
        assert options["type"] == "mqtt"
        assert options["client_id"] == "abc"
        assert options["qos"] == 0

    def test_graphql(self):
        options = envelope_to_options("graphql", {"name": "Q", "url": "u", "query": "{a}"})
        assert options == {
            "title": "Q",
            "headers": None,
            "url": "u",
            "query": "{a}",
            "variables": None,
        }

    def test_non_dict(self):
        assert envelope_to_options("http", None) == {}


class TestEnvironmentVariables:
    def test_encode_object(self):
        assert json.loads(encode_environment_variables('{"HOST": "x", "PORT": "1"}')) == [
            {"key": "HOST", "value": "x"},
            {"key": "PORT", "value": "1"},
        ]

    def test_encode_array_fills_value(self):
        assert json.loads(encode_environment_variables([{"key": "A"}])) == [
            {"key": "A", "value": ""}
        ]

    def test_encode_rejects_scalar(self):
        with pytest.raises(UsageError, match="Invalid variables"):
            encode_environment_variables("3")

    def test_encode_rejects_entry_without_key(self):
        with pytest.raises(UsageError, match="'key'"):
            encode_environment_variables('[{"value": "x"}]')

    def test_decode(self):
        assert decode_environment_variables('[{"key": "A", "value": "1"}, 5]') == [
            {"key": "A", "value": "1"}
        ]

    @pytest.mark.parametrize("raw", ["{bad", '{"a": 1}', None])
    def test_decode_bad_data(self, raw):
        assert decode_environment_variables(raw) == []


class TestOptionNames:
    def test_all_variant_options_are_known(self):
        for cls in list(envelopes.AUTH_VARIANTS.values()) + list(
            envelopes.REALTIME_VARIANTS.values()
        ):
            for opt in cls.OPTIONS.values():
                assert opt in envelopes.OPTION_NAMES
