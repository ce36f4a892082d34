"""Write tools: defaults, collections, requests and environments."""

from __future__ import annotations

from typing import Any, Literal

from hoppscotch_cli import CliError, UsageError
from hoppscotch_cli.envelopes import OPTION_NAMES
from hoppscotch_cli.mcp_server._core import _call, _contract_error, _finalize_tool_result
from hoppscotch_cli.mcp_server._security import _validate_input

# Option-bag keys that carry free text and get length/control-char checks.
_TEXT_OPTIONS = ("title", "url", "query", "body")


def _request_options(options: dict | None, **named: Any) -> dict:
    """Merge named tool arguments into the option bag and validate keys."""
    merged = dict(options or {})
    unknown = sorted(set(merged) - set(OPTION_NAMES))
    if unknown:
        raise UsageError(
            f"[ERROR] Unknown request option(s): {', '.join(unknown)}. "
            f"Valid: {', '.join(OPTION_NAMES)}"
        )
    merged.update({k: v for k, v in named.items() if v is not None})
    for key in _TEXT_OPTIONS:
        if isinstance(merged.get(key), str):
            merged[key] = _validate_input(merged[key], key)
    return merged


def set_defaults(team: str | None = None, collection: str | None = None) -> dict:
    """Persist default team and/or collection ids used when a tool omits them."""
    return _finalize_tool_result(_call("set_defaults", team=team, collection=collection))


def create_collection(title: str, team: str | None = None, parent: str | None = None) -> dict:
    """Create a root collection in a team, or a child collection under ``parent``.

    Returns:
        Dict with ok, id, title and parent_id.
    """
    try:
        title = _validate_input(title, "title")
    except CliError as e:
        return _finalize_tool_result(_contract_error(str(e), e.error_type))
    return _finalize_tool_result(_call("create_collection", title, team=team, parent=parent))


def delete_collection(collection_id: str) -> dict:
    """Delete a collection and everything nested under it. Irreversible."""
    return _finalize_tool_result(_call("delete_collection", collection_id))


def create_request(
    kind: Literal["http", "graphql", "realtime"],
    title: str,
    url: str,
    collection: str | None = None,
    team: str | None = None,
    method: str | None = None,
    realtime_type: Literal["websocket", "sse", "socketio", "mqtt"] | None = None,
    options: dict | None = None,
) -> dict:
    """Create a request. http needs method; realtime needs realtime_type.

    Args:
        kind: http, graphql or realtime.
        title: Request title (max 500 chars).
        url: Endpoint URL; may contain {{variable}} placeholders.
        method: HTTP verb for kind=http.
        realtime_type: websocket, sse, socketio or mqtt for kind=realtime.
        options: Further envelope fields, e.g. headers (list of {key, value} or
            object), params, body, body_type, auth_type, auth_token, query,
            variables, protocols, path, version, topic, qos, client_id.

    Returns:
        Dict with ok, id, title, kind and collection_id.
    """
    try:
        bag = _request_options(options, title=title, url=url, method=method, type=realtime_type)
    except CliError as e:
        return _finalize_tool_result(_contract_error(str(e), e.error_type))
    return _finalize_tool_result(
        _call("create_request", kind, collection=collection, team=team, **bag)
    )


def update_request(
    kind: Literal["http", "graphql", "realtime"],
    request_id: str,
    title: str | None = None,
    url: str | None = None,
    method: str | None = None,
    options: dict | None = None,
) -> dict:
    """Update a request. Only supplied fields change; the rest keep stored values.

    Auth fields fall back to stored values only when auth_type is unchanged.
    """
    try:
        bag = _request_options(options, title=title, url=url, method=method)
    except CliError as e:
        return _finalize_tool_result(_contract_error(str(e), e.error_type))
    if not bag:
        return _finalize_tool_result(
            _contract_error("[ERROR] Nothing to update. Supply at least one field.", "usage")
        )
    return _finalize_tool_result(_call("update_request", kind, request_id, **bag))


def delete_request(request_id: str) -> dict:
    """Delete a request. Irreversible."""
    return _finalize_tool_result(_call("delete_request", request_id))


def move_request(request_id: str, dest_collection: str) -> dict:
    """Move a request into another collection."""
    return _finalize_tool_result(_call("move_request", request_id, dest_collection))


def create_environment(name: str, variables: list | dict, team: str | None = None) -> dict:
    """Create a team environment.

    Args:
        name: Environment name.
        variables: List of {key, value} or an object of key -> value.
    """
    try:
        name = _validate_input(name, "name")
    except CliError as e:
        return _finalize_tool_result(_contract_error(str(e), e.error_type))
    return _finalize_tool_result(_call("create_environment", name, variables, team=team))


def update_environment(
    env_id: str,
    name: str | None = None,
    variables: list | dict | None = None,
    team: str | None = None,
) -> dict:
    """Rename an environment and/or replace all of its variables."""
    try:
        if name is not None:
            name = _validate_input(name, "name")
    except CliError as e:
        return _finalize_tool_result(_contract_error(str(e), e.error_type))
    return _finalize_tool_result(
        _call("update_environment", env_id, name=name, variables=variables, team=team)
    )


def delete_environment(env_id: str) -> dict:
    """Delete an environment. Irreversible."""
    return _finalize_tool_result(_call("delete_environment", env_id))


def register(mcp):
    """Register all write tools with the FastMCP instance."""
    mcp.tool()(set_defaults)
    mcp.tool()(create_collection)
    mcp.tool()(delete_collection)
    mcp.tool()(create_request)
    mcp.tool()(update_request)
    mcp.tool()(delete_request)
    mcp.tool()(move_request)
    mcp.tool()(create_environment)
    mcp.tool()(update_environment)
    mcp.tool()(delete_environment)
