"""Read tools: configuration status, teams, collections, requests, environments."""

from __future__ import annotations

from typing import Literal

from hoppscotch_cli import CliError
from hoppscotch_cli.mcp_server._core import _call, _contract_error, _finalize_tool_result
from hoppscotch_cli.mcp_server._security import _sanitize_result, _validate_input


def get_status() -> dict:
    """Show the effective endpoint, whether a cookie is set, and default ids.

    Returns:
        Dict with endpoint, cookie_set, team_id, collection_id, ready.
    """
    return _finalize_tool_result(_call("status"))


def list_teams() -> list | dict:
    """List teams the session user belongs to (id, name, my_role)."""
    return _finalize_tool_result(_sanitize_result(_call("list_teams")))


def find_teams(term: str) -> list | dict:
    """Case-insensitive substring search over team names."""
    try:
        term = _validate_input(term, "term")
    except CliError as e:
        return _finalize_tool_result(_contract_error(str(e), e.error_type))
    return _finalize_tool_result(_sanitize_result(_call("find_teams", term)))


def get_team(team_id: str) -> dict:
    """Get one team with owner/editor/viewer counts."""
    return _finalize_tool_result(_sanitize_result(_call("get_team", team_id)))


def list_collections(
    team: str | None = None,
    parent: str | None = None,
    cursor: str | None = None,
    take: int | None = None,
) -> list | dict:
    """List root collections of a team, or the direct children of ``parent``.

    Args:
        team: Team id (defaults to the configured default team).
        parent: Collection id whose children to list.
        cursor/take: Server-side pagination for root collections.
    """
    return _finalize_tool_result(
        _sanitize_result(
            _call("list_collections", team=team, parent=parent, cursor=cursor, take=take)
        )
    )


def find_collections(term: str, team: str | None = None) -> list | dict:
    """Search the whole collection tree by title. Hits carry a " > " joined path.

    Issues one request per collection in the team; prefer list_collections
    when the parent is known.
    """
    try:
        term = _validate_input(term, "term")
    except CliError as e:
        return _finalize_tool_result(_contract_error(str(e), e.error_type))
    return _finalize_tool_result(_sanitize_result(_call("find_collections", term, team=team)))


def get_collection(collection_id: str) -> dict:
    """Get one collection with its direct children."""
    return _finalize_tool_result(_sanitize_result(_call("get_collection", collection_id)))


def export_collections(team: str | None = None, collection: str | None = None) -> dict:
    """Export a team's collections (or one collection) as Hoppscotch JSON."""
    return _finalize_tool_result(_call("export_collections", team=team, collection=collection))


def list_requests(
    kind: Literal["http", "graphql", "realtime"] = "http",
    collection: str | None = None,
    realtime_type: Literal["websocket", "sse", "socketio", "mqtt"] | None = None,
    cursor: str | None = None,
    take: int | None = None,
) -> list | dict:
    """List requests of one kind in a collection, with parsed envelopes.

    ``envelope`` is null when the stored request data cannot be parsed.
    """
    return _finalize_tool_result(
        _sanitize_result(
            _call(
                "list_requests",
                kind=kind,
                collection=collection,
                realtime_type=realtime_type,
                cursor=cursor,
                take=take,
            )
        )
    )


def find_requests(
    term: str, team: str | None = None, cursor: str | None = None, take: int | None = None
) -> list | dict:
    """Search requests of every kind in a team by title."""
    try:
        term = _validate_input(term, "term")
    except CliError as e:
        return _finalize_tool_result(_contract_error(str(e), e.error_type))
    return _finalize_tool_result(
        _sanitize_result(_call("find_requests", term, team=team, cursor=cursor, take=take))
    )


def get_request(request_id: str) -> dict:
    """Get one request with its kind and parsed envelope."""
    return _finalize_tool_result(_sanitize_result(_call("get_request", request_id)))


def list_environments(team: str | None = None) -> list | dict:
    """List a team's environments with decoded variables."""
    return _finalize_tool_result(_sanitize_result(_call("list_environments", team=team)))


def get_environment(env_id: str, team: str | None = None) -> dict:
    """Get one environment by id."""
    return _finalize_tool_result(_sanitize_result(_call("get_environment", env_id, team=team)))


def register(mcp):
    """Register all read tools with the FastMCP instance."""
    mcp.tool()(get_status)
    mcp.tool()(list_teams)
    mcp.tool()(find_teams)
    mcp.tool()(get_team)
    mcp.tool()(list_collections)
    mcp.tool()(find_collections)
    mcp.tool()(get_collection)
    mcp.tool()(export_collections)
    mcp.tool()(list_requests)
    mcp.tool()(find_requests)
    mcp.tool()(get_request)
    mcp.tool()(list_environments)
    mcp.tool()(get_environment)
