"""
Request document codec.

A saved request is stored server-side as an opaque JSON string (the
``request`` field). This module owns that JSON shape for the three request
kinds and knows how to:

- build a fresh envelope from a flat option bag (``build_envelope``),
- parse a stored envelope leniently for display (``parse_envelope``),
- merge a partial option bag into a stored envelope (``merge_for_update``).

Option bags are plain dicts keyed by CLI option names (``title``, ``url``,
``method``, ``headers``, ``body_type``, ``auth_type`` ...). ``None`` means
"not supplied". JSON-shaped options may be raw JSON text (CLI) or already
parsed values (MCP / programmatic callers).

Tagged unions (auth, body, realtime sub-type) are modelled as one frozen
dataclass per tag; only the active variant's fields are ever written.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from hoppscotch_cli import config
from hoppscotch_cli._utils import _safe_json_parse, _try_json
from hoppscotch_cli.exceptions import UsageError

# Every option-bag key the builders understand.
OPTION_NAMES = (
    "title",
    "url",
    "method",
    "headers",
    "params",
    "body",
    "body_type",
    "form",
    "auth_type",
    "auth_active",
    "auth_token",
    "auth_username",
    "auth_password",
    "auth_key",
    "auth_value",
    "auth_add_to",
    "oauth_grant_type",
    "oauth_auth_url",
    "oauth_token_url",
    "oauth_client_id",
    "oauth_scope",
    "pre_request_script",
    "test_script",
    "request_variables",
    "query",
    "variables",
    "type",
    "protocols",
    "path",
    "version",
    "topic",
    "qos",
    "client_id",
    "validate_body",
)

# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def validate_choice(value, valid, field_name):
    """Raise UsageError unless *value* is one of *valid*."""
    if value not in valid:
        raise UsageError(
            f"[ERROR] Invalid {field_name} '{value}'. Valid: {', '.join(str(v) for v in valid)}"
        )
    return value


def normalize_method(method):
    """Upper-case an HTTP method and check it against the supported verbs."""
    normalized = str(method).strip().upper()
    if normalized not in config.VALID_METHODS:
        raise UsageError(
            f"[ERROR] Invalid method '{method}'. Valid: {', '.join(config.VALID_METHODS)}"
        )
    return normalized


def _parse_json_option(value, context):
    """Parse raw JSON text; pass already-parsed values through."""
    if isinstance(value, str):
        return _safe_json_parse(value, context)
    return value


def normalize_key_values(value, context="headers"):
    """Normalize header/param style input into ``[{key, value, active}]``.

    A JSON object becomes one active entry per property. A JSON array keeps
    its entries and order, filling ``active: true`` where it is missing.
    """
    if value is None:
        return []
    parsed = _parse_json_option(value, context)
    if isinstance(parsed, dict):
        return [{"key": k, "value": v, "active": True} for k, v in parsed.items()]
    if not isinstance(parsed, list):
        raise UsageError(
            f"[ERROR] Invalid {context}: expected JSON array or object, "
            f"got {type(parsed).__name__}."
        )
    entries = []
    for entry in parsed:
        if not isinstance(entry, dict) or "key" not in entry:
            raise UsageError(
                f"[ERROR] Invalid {context}: each entry must be an object with a 'key'."
            )
        item = dict(entry)
        item.setdefault("value", "")
        item["active"] = True if item.get("active") is None else bool(item["active"])
        entries.append(item)
    return entries


def normalize_form_fields(value, context="form"):
    """Normalize multipart form input into ``[{key, value, isFile, active}]``."""
    if value is None:
        return []
    parsed = _parse_json_option(value, context)
    if isinstance(parsed, dict):
        return [
            {"key": k, "value": v, "isFile": False, "active": True} for k, v in parsed.items()
        ]
    if not isinstance(parsed, list):
        raise UsageError(
            f"[ERROR] Invalid {context}: expected JSON array or object, "
            f"got {type(parsed).__name__}."
        )
    fields_out = []
    for entry in parsed:
        if not isinstance(entry, dict) or "key" not in entry:
            raise UsageError(
                f"[ERROR] Invalid {context}: each entry must be an object with a 'key'."
            )
        is_file = bool(entry.get("isFile", False))
        value_out = entry.get("value", [] if is_file else "")
        if is_file and not isinstance(value_out, list):
            value_out = []
        fields_out.append(
            {
                "key": entry["key"],
                "value": value_out,
                "isFile": is_file,
                "active": True if entry.get("active") is None else bool(entry["active"]),
            }
        )
    return fields_out


def _parse_protocols(value):
    parsed = _parse_json_option(value, "protocols")
    if not isinstance(parsed, list) or not all(isinstance(p, str) for p in parsed):
        raise UsageError("[ERROR] Invalid protocols: expected a JSON array of strings.")
    return parsed


def _parse_qos(value):
    try:
        qos = int(value)
    except (TypeError, ValueError):
        valid = ", ".join(str(q) for q in config.VALID_MQTT_QOS)
        raise UsageError(f"[ERROR] Invalid qos '{value}'. Valid: {valid}") from None
    return validate_choice(qos, config.VALID_MQTT_QOS, "qos")


def _encode_variables(value):
    """GraphQL variables are stored as JSON text, never as a parsed object."""
    if isinstance(value, str):
        _safe_json_parse(value, "variables")
        return value
    return json.dumps(value)


# ---------------------------------------------------------------------------
# Auth variants
# ---------------------------------------------------------------------------


class _Variant:
    """Shared serialization for tagged variants.

    KEYS maps dataclass attribute -> envelope key,
    OPTIONS maps dataclass attribute -> option-bag name.
    """

    TAG: ClassVar[str] = ""
    KEYS: ClassVar[dict[str, str]] = {}
    OPTIONS: ClassVar[dict[str, str]] = {}

    def _field_dict(self):
        return {key: getattr(self, attr) for attr, key in self.KEYS.items()}

    @classmethod
    def _collect(cls, options, fallback):
        """Pick each field from *options*, else from *fallback* (same-variant envelope)."""
        values = {}
        for attr, opt in cls.OPTIONS.items():
            value = options.get(opt)
            if value is None and fallback:
                value = fallback.get(cls.KEYS[attr])
            if value is not None:
                values[attr] = value
        return values


@dataclass(frozen=True)
class NoAuth(_Variant):
    active: bool = False
    TAG: ClassVar[str] = "none"


@dataclass(frozen=True)
class InheritAuth(_Variant):
    active: bool = True
    TAG: ClassVar[str] = "inherit"


@dataclass(frozen=True)
class BearerAuth(_Variant):
    token: str = ""
    active: bool = True
    TAG: ClassVar[str] = "bearer"
    KEYS: ClassVar[dict[str, str]] = {"token": "token"}
    OPTIONS: ClassVar[dict[str, str]] = {"token": "auth_token"}


@dataclass(frozen=True)
class BasicAuth(_Variant):
    username: str = ""
    password: str = ""
    active: bool = True
    TAG: ClassVar[str] = "basic"
    KEYS: ClassVar[dict[str, str]] = {"username": "username", "password": "password"}
    OPTIONS: ClassVar[dict[str, str]] = {"username": "auth_username", "password": "auth_password"}


@dataclass(frozen=True)
class ApiKeyAuth(_Variant):
    key: str = ""
    value: str = ""
    add_to: str = "HEADERS"
    active: bool = True
    TAG: ClassVar[str] = "api-key"
    KEYS: ClassVar[dict[str, str]] = {"key": "key", "value": "value", "add_to": "addTo"}
    OPTIONS: ClassVar[dict[str, str]] = {
        "key": "auth_key",
        "value": "auth_value",
        "add_to": "auth_add_to",
    }

    def __post_init__(self):
        validate_choice(self.add_to, config.VALID_API_KEY_TARGETS, "api-key target")


@dataclass(frozen=True)
class OAuth2Auth(_Variant):
    token: str = ""
    grant_type: str = "AUTHORIZATION_CODE"
    auth_endpoint: str = ""
    token_endpoint: str = ""
    client_id: str = ""
    scopes: str = ""
    active: bool = True
    TAG: ClassVar[str] = "oauth2"
    KEYS: ClassVar[dict[str, str]] = {
        "token": "token",
        "grant_type": "grantType",
        "auth_endpoint": "authEndpoint",
        "token_endpoint": "tokenEndpoint",
        "client_id": "clientID",
        "scopes": "scopes",
    }
    OPTIONS: ClassVar[dict[str, str]] = {
        "token": "auth_token",
        "grant_type": "oauth_grant_type",
        "auth_endpoint": "oauth_auth_url",
        "token_endpoint": "oauth_token_url",
        "client_id": "oauth_client_id",
        "scopes": "oauth_scope",
    }


Auth = Union[NoAuth, InheritAuth, BearerAuth, BasicAuth, ApiKeyAuth, OAuth2Auth]

AUTH_VARIANTS: dict[str, type] = {
    cls.TAG: cls for cls in (NoAuth, InheritAuth, BearerAuth, BasicAuth, ApiKeyAuth, OAuth2Auth)
}

AUTH_OPTION_NAMES = frozenset(
    {"auth_type", "auth_active"}
    | {opt for cls in AUTH_VARIANTS.values() for opt in cls.OPTIONS.values()}
)


def auth_to_dict(auth: Auth) -> dict:
    return {"authType": auth.TAG, "authActive": auth.active, **auth._field_dict()}


def build_auth(options, existing=None) -> Auth:
    """Build the auth variant for ``options['auth_type']`` (or the existing tag).

    Unsupplied fields fall back to *existing* only when it carries the same
    tag; fields of other variants never carry over.
    """
    existing = existing if isinstance(existing, dict) else {}
    existing_type = existing.get("authType")
    auth_type = options.get("auth_type") or existing_type or "none"
    validate_choice(auth_type, config.VALID_AUTH_TYPES, "auth type")
    cls = AUTH_VARIANTS[auth_type]
    fallback = existing if existing_type == auth_type else None
    values = cls._collect(options, fallback)
    active = options.get("auth_active")
    if active is None and fallback and fallback.get("authActive") is not None:
        active = fallback["authActive"]
    if active is not None:
        values["active"] = bool(active)
    return cls(**values)


# ---------------------------------------------------------------------------
# Body variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NoBody:
    TAG: ClassVar[str] = "none"

    def to_dict(self):
        return {"contentType": None, "body": None}


@dataclass(frozen=True)
class RawBody:
    content_type: str = "application/json"
    body: str = ""

    def to_dict(self):
        return {"contentType": self.content_type, "body": self.body}


@dataclass(frozen=True)
class FormDataBody:
    fields: list = field(default_factory=list)
    TAG: ClassVar[str] = "multipart/form-data"

    def to_dict(self):
        return {"contentType": self.TAG, "body": list(self.fields)}


Body = Union[NoBody, RawBody, FormDataBody]

BODY_OPTION_NAMES = frozenset({"body", "body_type", "form"})


def _validate_json_body(text):
    try:
        json.loads(text)
    except json.JSONDecodeError as e:
        raise UsageError(f"[ERROR] Body is not valid JSON: {e.msg} at position {e.pos}") from None


def build_body(options, existing=None) -> Body:
    """Build the body variant from options, falling back to the stored body."""
    existing = existing if isinstance(existing, dict) else {}
    body_type = options.get("body_type")
    if body_type is not None:
        validate_choice(body_type, config.VALID_BODY_TYPES, "body type")
    new_form = options.get("form")
    new_body = options.get("body")
    old_type = existing.get("contentType") or "none"
    old_body = existing.get("body")

    if body_type is None:
        if new_form is not None:
            body_type = "multipart/form-data"
        elif new_body is not None and old_type == "none":
            body_type = "application/json"
        else:
            body_type = old_type
        if body_type not in config.VALID_BODY_TYPES:
            body_type = "application/json"

    if body_type == "none":
        if new_body is not None or new_form is not None:
            raise UsageError("[ERROR] A body or form cannot be combined with body type 'none'")
        return NoBody()

    if body_type == "multipart/form-data":
        source = new_form if new_form is not None else new_body
        if source is not None:
            return FormDataBody(normalize_form_fields(source))
        # Keep a stored form list when nothing new was supplied.
        return FormDataBody(list(old_body) if isinstance(old_body, list) else [])

    if new_body is not None:
        text = new_body if isinstance(new_body, str) else json.dumps(new_body)
    elif isinstance(old_body, str):
        text = old_body
    else:
        text = ""
    if options.get("validate_body") and body_type == "application/json" and text.strip():
        _validate_json_body(text)
    return RawBody(content_type=body_type, body=text)


# ---------------------------------------------------------------------------
# Realtime variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WebSocketSpec(_Variant):
    protocols: list = field(default_factory=list)
    TAG: ClassVar[str] = "websocket"
    KEYS: ClassVar[dict[str, str]] = {"protocols": "protocols"}
    OPTIONS: ClassVar[dict[str, str]] = {"protocols": "protocols"}


@dataclass(frozen=True)
class SseSpec(_Variant):
    TAG: ClassVar[str] = "sse"


@dataclass(frozen=True)
class SocketIOSpec(_Variant):
    path: str = "/socket.io"
    version: str = "4"
    TAG: ClassVar[str] = "socketio"
    KEYS: ClassVar[dict[str, str]] = {"path": "path", "version": "version"}
    OPTIONS: ClassVar[dict[str, str]] = {"path": "path", "version": "version"}


@dataclass(frozen=True)
class MqttSpec(_Variant):
    topic: str = ""
    qos: int = 0
    client_id: str = ""
    TAG: ClassVar[str] = "mqtt"
    KEYS: ClassVar[dict[str, str]] = {"topic": "topic", "qos": "qos", "client_id": "clientId"}
    OPTIONS: ClassVar[dict[str, str]] = {"topic": "topic", "qos": "qos", "client_id": "client_id"}


RealtimeSpec = Union[WebSocketSpec, SseSpec, SocketIOSpec, MqttSpec]

REALTIME_VARIANTS: dict[str, type] = {
    cls.TAG: cls for cls in (WebSocketSpec, SseSpec, SocketIOSpec, MqttSpec)
}

REALTIME_KEYS = frozenset(key for cls in REALTIME_VARIANTS.values() for key in cls.KEYS.values())
REALTIME_OPTION_NAMES = frozenset(
    {"type"} | {opt for cls in REALTIME_VARIANTS.values() for opt in cls.OPTIONS.values()}
)


@dataclass(frozen=True)
class _StoredRealtime:
    """Stored sub-type and its keys, carried over verbatim (no realtime option supplied)."""

    raw: dict

    @property
    def TAG(self):
        return self.raw["type"]

    def _field_dict(self):
        return {key: self.raw[key] for key in sorted(REALTIME_KEYS) if key in self.raw}


def build_realtime_spec(options, existing=None) -> RealtimeSpec:
    existing = existing if isinstance(existing, dict) else {}
    existing_type = existing.get("type")
    rt_type = options.get("type") or existing_type or "websocket"
    validate_choice(rt_type, config.VALID_REALTIME_TYPES, "realtime type")
    cls = REALTIME_VARIANTS[rt_type]
    fallback = existing if existing_type == rt_type else None
    supplied = {attr for attr, opt in cls.OPTIONS.items() if options.get(opt) is not None}
    values = cls._collect(options, fallback)
    if "protocols" in supplied:
        values["protocols"] = _parse_protocols(values["protocols"])
    if "qos" in supplied:
        values["qos"] = _parse_qos(values["qos"])
    if "version" in values:
        values["version"] = str(values["version"])
    return cls(**values)


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HttpRequestDoc:
    name: str
    endpoint: str
    method: str
    headers: list
    params: list
    body: Body
    auth: Any
    pre_request_script: str = ""
    test_script: str = ""
    request_variables: list = field(default_factory=list)

    def to_dict(self):
        auth = auth_to_dict(self.auth) if isinstance(self.auth, _Variant) else self.auth
        return {
            "v": config.ENVELOPE_VERSIONS["http"],
            "name": self.name,
            "endpoint": self.endpoint,
            "method": self.method,
            "headers": self.headers,
            "params": self.params,
            "body": self.body.to_dict(),
            "auth": auth,
            "preRequestScript": self.pre_request_script,
            "testScript": self.test_script,
            "requestVariables": self.request_variables,
        }


@dataclass(frozen=True)
class GraphQLRequestDoc:
    name: str
    url: str
    headers: list
    query: str = ""
    variables: str = "{}"

    def to_dict(self):
        return {
            "v": config.ENVELOPE_VERSIONS["graphql"],
            "name": self.name,
            "url": self.url,
            "headers": self.headers,
            "query": self.query,
            "variables": self.variables,
        }


@dataclass(frozen=True)
class RealtimeRequestDoc:
    name: str
    url: str
    headers: list
    spec: RealtimeSpec | _StoredRealtime = field(default_factory=WebSocketSpec)

    def to_dict(self):
        return {
            "v": config.ENVELOPE_VERSIONS["realtime"],
            "name": self.name,
            "url": self.url,
            "headers": self.headers,
            "type": self.spec.TAG,
            **self.spec._field_dict(),
        }


_KNOWN_KEYS = {
    "http": frozenset(
        {
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
        }
    ),
    "graphql": frozenset({"v", "name", "url", "headers", "query", "variables"}),
    "realtime": frozenset({"v", "name", "url", "headers", "type"}) | REALTIME_KEYS,
}


def _pick(options, option_name, existing, key, default):
    """Explicit option, else the stored value, else *default*. Returns (value, supplied)."""
    value = options.get(option_name)
    if value is not None:
        return value, True
    if key in existing:
        return existing[key], False
    return default, False


def _key_values(options, option_name, existing, key, context):
    value, supplied = _pick(options, option_name, existing, key, [])
    return normalize_key_values(value, context) if supplied else value


def _build_http(options, existing):
    method, supplied = _pick(options, "method", existing, "method", "GET")
    if supplied:
        method = normalize_method(method)
    if any(options.get(name) is not None for name in AUTH_OPTION_NAMES) or "auth" not in existing:
        auth = build_auth(options, existing.get("auth"))
    else:
        auth = existing["auth"]
    if any(options.get(name) is not None for name in BODY_OPTION_NAMES) or "body" not in existing:
        body = build_body(options, existing.get("body"))
    else:
        body = _StoredBody(existing["body"])
    return HttpRequestDoc(
        name=_pick(options, "title", existing, "name", "")[0],
        endpoint=_pick(options, "url", existing, "endpoint", "")[0],
        method=method,
        headers=_key_values(options, "headers", existing, "headers", "headers"),
        params=_key_values(options, "params", existing, "params", "params"),
        body=body,
        auth=auth,
        pre_request_script=_pick(
            options, "pre_request_script", existing, "preRequestScript", ""
        )[0],
        test_script=_pick(options, "test_script", existing, "testScript", "")[0],
        request_variables=_key_values(
            options, "request_variables", existing, "requestVariables", "request variables"
        ),
    )


@dataclass(frozen=True)
class _StoredBody:
    """A stored body carried over verbatim (no body option supplied)."""

    raw: Any

    def to_dict(self):
        return self.raw


def _build_graphql(options, existing):
    variables, supplied = _pick(options, "variables", existing, "variables", "{}")
    return GraphQLRequestDoc(
        name=_pick(options, "title", existing, "name", "")[0],
        url=_pick(options, "url", existing, "url", "")[0],
        headers=_key_values(options, "headers", existing, "headers", "headers"),
        query=_pick(options, "query", existing, "query", "")[0],
        variables=_encode_variables(variables) if supplied else variables,
    )


def _build_realtime(options, existing):
    if any(options.get(name) is not None for name in REALTIME_OPTION_NAMES) or (
        "type" not in existing
    ):
        spec: RealtimeSpec | _StoredRealtime = build_realtime_spec(options, existing)
    else:
        spec = _StoredRealtime(existing)
    return RealtimeRequestDoc(
        name=_pick(options, "title", existing, "name", "")[0],
        url=_pick(options, "url", existing, "url", "")[0],
        headers=_key_values(options, "headers", existing, "headers", "headers"),
        spec=spec,
    )


_BUILDERS = {"http": _build_http, "graphql": _build_graphql, "realtime": _build_realtime}


def _check_kind(kind):
    return validate_choice(kind, config.VALID_REQUEST_KINDS, "request kind")


def build_document(kind, options, existing=None):
    """Return the envelope dict for *kind* built from options (+ stored fallback)."""
    _check_kind(kind)
    existing = existing if isinstance(existing, dict) else {}
    doc = _BUILDERS[kind](options or {}, existing).to_dict()
    # Unknown top-level keys of a stored envelope survive updates.
    for key, value in existing.items():
        if key not in _KNOWN_KEYS[kind]:
            doc[key] = value
    return doc


def build_envelope(kind, options) -> str:
    """Build a fresh envelope for *kind* and serialize it to JSON text."""
    return json.dumps(build_document(kind, options))


def merge_for_update(kind, existing, options) -> str:
    """Merge a partial option bag into a stored envelope; unsupplied fields carry over."""
    if isinstance(existing, str):
        existing = parse_envelope(existing)
    return json.dumps(build_document(kind, options, existing or {}))


def parse_envelope(raw) -> dict | None:
    """Parse a stored envelope. Malformed or non-object data yields None."""
    if isinstance(raw, dict):
        return raw
    parsed = _try_json(raw)
    return parsed if isinstance(parsed, dict) else None


# ---------------------------------------------------------------------------
# Inspection helpers (display side)
# ---------------------------------------------------------------------------


def detect_kind(envelope):
    """Guess the request kind of a parsed envelope. None when unparseable."""
    if not isinstance(envelope, dict):
        return None
    if "method" in envelope or "endpoint" in envelope:
        return "http"
    version = str(envelope.get("v", ""))
    if envelope.get("type") in config.VALID_REALTIME_TYPES or version == "1":
        return "realtime"
    if "query" in envelope or version == "4":
        return "graphql"
    return "http"


def _variant_options(cls, data):
    return {opt: data.get(cls.KEYS[attr]) for attr, opt in cls.OPTIONS.items()}


def envelope_to_options(kind, envelope):
    """Flatten a parsed envelope back into an option bag.

    The inverse of build_envelope for the known fields; missing data comes
    back as None so display code can print placeholders.
    """
    if not isinstance(envelope, dict):
        return {}
    kind = kind or detect_kind(envelope)
    options: dict[str, Any] = {
        "title": envelope.get("name"),
        "headers": envelope.get("headers"),
    }
    if kind == "http":
        body = envelope.get("body") if isinstance(envelope.get("body"), dict) else None
        auth = envelope.get("auth") if isinstance(envelope.get("auth"), dict) else {}
        content_type = (body.get("contentType") or "none") if body is not None else None
        options.update(
            url=envelope.get("endpoint"),
            method=envelope.get("method"),
            params=envelope.get("params"),
            body_type=content_type,
            body=body.get("body") if body is not None else None,
            auth_type=auth.get("authType"),
            auth_active=auth.get("authActive"),
            pre_request_script=envelope.get("preRequestScript"),
            test_script=envelope.get("testScript"),
            request_variables=envelope.get("requestVariables"),
        )
        if content_type == "multipart/form-data":
            options["form"] = options.pop("body")
        variant = AUTH_VARIANTS.get(auth.get("authType"))
        if variant is not None:
            options.update(_variant_options(variant, auth))
    elif kind == "graphql":
        options.update(
            url=envelope.get("url"),
            query=envelope.get("query"),
            variables=envelope.get("variables"),
        )
    else:
        options.update(url=envelope.get("url"), type=envelope.get("type"))
        variant = REALTIME_VARIANTS.get(envelope.get("type"))
        if variant is not None:
            options.update(_variant_options(variant, envelope))
    return options


# ---------------------------------------------------------------------------
# Environment variables
# ---------------------------------------------------------------------------


def encode_environment_variables(value) -> str:
    """Normalize environment variable input to the stored JSON text.

    Accepts a JSON array of ``{key, value}`` or a JSON object (one entry per
    property, in key order).
    """
    parsed = _parse_json_option(value, "variables")
    if isinstance(parsed, dict):
        entries = [{"key": k, "value": v} for k, v in parsed.items()]
    elif isinstance(parsed, list):
        entries = []
        for entry in parsed:
            if not isinstance(entry, dict) or "key" not in entry:
                raise UsageError(
                    "[ERROR] Invalid variables: each entry must be an object with a 'key'."
                )
            entries.append(dict(entry, value=entry.get("value", "")))
    else:
        raise UsageError("[ERROR] Invalid variables: expected JSON array or object.")
    return json.dumps(entries)


def decode_environment_variables(raw) -> list:
    """Decode stored environment variables for display; bad data yields []."""
    parsed = raw if isinstance(raw, list) else _try_json(raw)
    if not isinstance(parsed, list):
        return []
    return [entry for entry in parsed if isinstance(entry, dict)]
