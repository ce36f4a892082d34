"""Core helpers: client caching, _call dispatcher, response contract."""

from __future__ import annotations

from hoppscotch_cli import CliError, HoppscotchClient
from hoppscotch_cli.config import CONTRACT_SCHEMA_VERSION, MCP_RESPONSE_MODE

_client: HoppscotchClient | None = None


def _get_client() -> HoppscotchClient:
    """Return a cached HoppscotchClient, creating one on first use."""
    global _client
    if _client is None:
        _client = HoppscotchClient()
    return _client


def _contract_error(message: str, error_type: str = "error") -> dict:
    """Return a stable MCP error envelope with legacy compatibility fields."""
    return {
        "ok": False,
        "schema_version": CONTRACT_SCHEMA_VERSION,
        "type": error_type,  # legacy
        "error": message,  # legacy
        "error_detail": {
            "type": error_type,
            "message": message,
        },
    }


def _ensure_contract_dict(payload: dict) -> dict:
    """Add stable contract metadata to dict responses."""
    out = dict(payload)
    out.setdefault("schema_version", CONTRACT_SCHEMA_VERSION)
    if out.get("ok") is False:
        error_type = str(out.get("type", "error"))
        error_message = out.get("error", "Unknown error")
        if not isinstance(error_message, str):
            error_message = str(error_message)
            out["error"] = error_message
        out.setdefault("error_detail", {"type": error_type, "message": error_message})
        return out
    out.setdefault("ok", True)
    return out


def _finalize_tool_result(result):
    """Finalize tool response based on configured MCP response mode.

    Modes:
        - legacy (default): lists pass through; dicts gain ok/schema_version.
        - envelope: always return {"ok", "schema_version", "data"} for success.
    """
    if isinstance(result, dict):
        normalized = _ensure_contract_dict(result)
        if normalized.get("ok") is False:
            return normalized
        if MCP_RESPONSE_MODE == "envelope":
            data = dict(normalized)
            data.pop("ok", None)
            data.pop("schema_version", None)
            return {"ok": True, "schema_version": CONTRACT_SCHEMA_VERSION, "data": data}
        return normalized
    if MCP_RESPONSE_MODE == "envelope":
        return {"ok": True, "schema_version": CONTRACT_SCHEMA_VERSION, "data": result}
    return result


_ALLOWED_METHODS = {
    "status",
    "set_defaults",
    "list_teams",
    "find_teams",
    "get_team",
    "list_collections",
    "find_collections",
    "get_collection",
    "create_collection",
    "delete_collection",
    "export_collections",
    "list_requests",
    "find_requests",
    "get_request",
    "create_request",
    "update_request",
    "delete_request",
    "move_request",
    "list_environments",
    "get_environment",
    "create_environment",
    "update_environment",
    "delete_environment",
}


def _call(method_name: str, *args, **kwargs):
    """Call a HoppscotchClient method, converting exceptions to error dicts."""
    if method_name not in _ALLOWED_METHODS:
        return _contract_error(f"Unknown method: {method_name}", "error")
    try:
        client = _get_client()
        return getattr(client, method_name)(*args, **kwargs)
    except CliError as e:
        return _contract_error(str(e), e.error_type)
    except Exception as e:
        return _contract_error(f"Unexpected error: {e}", "error")
