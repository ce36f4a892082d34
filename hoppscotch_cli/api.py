"""
GraphQL transport layer for agent-hoppscotch.

One POST per operation, no retries. Failures are normalized into the
exception taxonomy in exceptions.py.
"""

import json
import re
import socket
import sys
import time
import urllib.error
import urllib.request
from http.client import HTTPException

from hoppscotch_cli import config
from hoppscotch_cli._utils import _mask_token
from hoppscotch_cli.exceptions import (
    CliError,
    GraphQLError,
    HTTPError,
    NetworkError,
    SessionExpiredError,
    UnauthenticatedError,
    UnconfiguredError,
)
from hoppscotch_cli.operations import operation_name

SET_ENDPOINT_HINT = f'Run: {config.CLI_NAME} auth set-endpoint "<url>"'
SET_COOKIE_HINT = f'Run: {config.CLI_NAME} auth set-cookie "<cookie>"'


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _sanitize_error(body, max_len=500):
    """Truncate and clean error body for safe display."""
    if not body:
        return ""
    cleaned = re.sub(r"<[^>]+>", "", body)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    if len(cleaned) > max_len:
        return cleaned[:max_len] + "... [truncated]"
    return cleaned


def _log_http_event(enabled, **fields):
    """Emit structured HTTP diagnostics to stderr when enabled."""
    if not (enabled or config.HTTP_LOG_ENABLED):
        return
    print("[HTTP] " + json.dumps(fields, ensure_ascii=False, sort_keys=True), file=sys.stderr)


def _classify_network_error(reason):
    """Map a low-level connection failure onto dns/refused/timeout/other."""
    if isinstance(reason, socket.gaierror):
        return "dns"
    if isinstance(reason, ConnectionRefusedError):
        return "refused"
    if isinstance(reason, TimeoutError):
        return "timeout"
    return "other"


def _network_error(url, reason, timeout):
    kind = _classify_network_error(reason)
    if kind == "dns":
        message = (
            f"[ERROR] Could not resolve host for {url} ({reason}). "
            "Check the endpoint URL."
        )
    elif kind == "refused":
        message = f"[ERROR] Connection refused by {url}. Is the Hoppscotch backend running?"
    elif kind == "timeout":
        message = (
            f"[ERROR] Request to {url} timed out after {timeout} seconds. "
            "Is the network reachable?"
        )
    else:
        message = f"[ERROR] Connection to {url} failed: {reason}"
    return NetworkError(message, reason=kind)


# ---------------------------------------------------------------------------
# HTTP request layer
# ---------------------------------------------------------------------------


def _http_request(url, data, headers, log=False):
    """POST *data* as JSON and return the parsed JSON response.
    Raises HTTPError for HTTP status errors (caller handles specific codes).
    Raises NetworkError for connectivity failures, CliError for bad payloads."""
    body = json.dumps(data).encode("utf-8")
    timeout = max(1, config.HTTP_TIMEOUT_SECONDS)
    start = time.perf_counter()
    try:
        req = urllib.request.Request(url, data=body, headers=headers, method="POST")
    except ValueError as e:
        raise UnconfiguredError(
            f"[SETUP_NEEDED] Invalid endpoint URL {url!r}: {e}\n  {SET_ENDPOINT_HINT}"
        ) from e
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            content_type = resp.headers.get("Content-Type", "")
            raw = resp.read(config.HTTP_MAX_RESPONSE_BYTES + 1)
            if len(raw) > config.HTTP_MAX_RESPONSE_BYTES:
                raise CliError(
                    "[ERROR] Response too large from Hoppscotch API "
                    f"(>{config.HTTP_MAX_RESPONSE_BYTES} bytes)."
                )
            _log_http_event(
                log,
                phase="response",
                url=url,
                status=getattr(resp, "status", 200),
                content_type=content_type,
                bytes=len(raw),
                latency_ms=round((time.perf_counter() - start) * 1000, 2),
                body=raw.decode("utf-8", errors="replace"),
            )
            try:
                return json.loads(raw.decode("utf-8"))
            except (json.JSONDecodeError, UnicodeDecodeError):
                if content_type and "json" not in content_type.lower():
                    raise CliError(
                        f"[ERROR] Unexpected Content-Type from {url} "
                        f"({content_type}). Is the endpoint a GraphQL API?"
                    ) from None
                raise CliError(
                    "[ERROR] Unexpected response from Hoppscotch API (not valid JSON)."
                ) from None
    except urllib.error.HTTPError as e:
        error_body = (
            e.read(config.HTTP_MAX_RESPONSE_BYTES).decode("utf-8", errors="replace")
            if e.fp
            else ""
        )
        _log_http_event(
            log,
            phase="response",
            url=url,
            status=e.code,
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
            body=error_body,
        )
        raise HTTPError(e.code, e.reason, error_body, headers=e.headers) from e
    except urllib.error.URLError as e:
        _log_http_event(log, phase="network_error", url=url, error=f"url_error: {e.reason}")
        raise _network_error(url, e.reason, timeout) from e
    except TimeoutError as e:
        _log_http_event(log, phase="network_error", url=url, error="timeout")
        raise _network_error(url, e, timeout) from e
    except (ConnectionError, HTTPException) as e:
        _log_http_event(log, phase="network_error", url=url, error=repr(e))
        raise _network_error(url, e, timeout) from e


# ---------------------------------------------------------------------------
# GraphQL layer
# ---------------------------------------------------------------------------


def _check_config(cfg):
    """Fail before any network call when endpoint or cookie is missing."""
    if not cfg.endpoint:
        raise UnconfiguredError(f"[SETUP_NEEDED] Endpoint not configured.\n  {SET_ENDPOINT_HINT}")
    if not cfg.cookie:
        raise UnauthenticatedError(
            "[SETUP_NEEDED] Authentication required. No session cookie stored.\n  "
            f"{SET_COOKIE_HINT}"
        )


def _is_auth_error(error):
    message = error.get("message", "") if isinstance(error, dict) else str(error)
    return any(marker in (message or "") for marker in config.AUTH_ERROR_MARKERS)


def _handle_graphql_response(result):
    """Return ``data`` from a GraphQL response or raise the matching error."""
    if not isinstance(result, dict):
        raise CliError(
            "[ERROR] Unexpected GraphQL response shape: "
            f"expected JSON object, got {type(result).__name__}."
        )
    errors = result.get("errors")
    if errors:
        if not isinstance(errors, list):
            errors = [errors]
        if any(_is_auth_error(e) for e in errors):
            raise SessionExpiredError(
                "[SESSION_EXPIRED] Session expired or invalid. "
                f"Refresh the cookie.\n  {SET_COOKIE_HINT}"
            )
        messages = [
            str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors
        ]
        raise GraphQLError(f"[GRAPHQL_ERROR] {', '.join(messages)}", errors=errors)
    return result.get("data") or {}


def graphql_request(operation, variables=None, cfg=None, *, verbose=False):
    """Execute one GraphQL operation against ``cfg.endpoint`` with ``cfg.cookie``.

    Returns the response ``data`` object unchanged.
    """
    if cfg is None:
        cfg = config.resolve_config()
    _check_config(cfg)
    variables = variables or {}
    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "Cookie": cfg.cookie,
    }
    _log_http_event(
        verbose,
        phase="request",
        url=cfg.endpoint,
        operation=operation_name(operation),
        query=operation,
        variables=variables,
        cookie=_mask_token(cfg.cookie),
    )
    request_body = {"query": operation, "variables": variables}
    try:
        result = _http_request(cfg.endpoint, request_body, headers, log=verbose)
    except HTTPError as e:
        try:
            payload = json.loads(e.body) if e.body else None
        except json.JSONDecodeError:
            payload = None
        if isinstance(payload, dict) and payload.get("errors"):
            return _handle_graphql_response(payload)
        if e.code in (401, 403):
            raise SessionExpiredError(
                f"[SESSION_EXPIRED] Server rejected the session (HTTP {e.code}). "
                f"Refresh the cookie.\n  {SET_COOKIE_HINT}"
            ) from e
        detail = _sanitize_error(e.body)
        message = f"[ERROR] HTTP {e.code}: {e.reason} (endpoint={cfg.endpoint})"
        if detail:
            message += f"\n{detail}"
        raise CliError(message) from e
    return _handle_graphql_response(result)
