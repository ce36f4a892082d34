"""
Command implementations for agent-hoppscotch.
Each cmd_*() function receives an argparse.Namespace and handles one CLI command.

Business logic lives in client.py (HoppscotchClient). These thin wrappers
handle argparse → keyword args, format selection, and formatter dispatch.
"""

from functools import partial

from hoppscotch_cli.client import HoppscotchClient
from hoppscotch_cli.envelopes import OPTION_NAMES
from hoppscotch_cli.exceptions import UsageError
from hoppscotch_cli.formatters import (
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

REQUEST_OPTION_NAMES = tuple(name for name in OPTION_NAMES if name != "validate_body")


def _client(ns):
    return HoppscotchClient(
        overrides=getattr(ns, "overrides", None), verbose=getattr(ns, "verbose", False)
    )


def _read_text_file(path, flag):
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise UsageError(f"[ERROR] Cannot read {flag} {path}: {e.strerror or e}") from None


def _request_options(ns):
    """Collect supplied envelope options; file flags are read here."""
    options = {}
    for name in REQUEST_OPTION_NAMES:
        value = getattr(ns, name, None)
        if value is not None:
            options[name] = value
    query_file = getattr(ns, "query_file", None)
    if query_file:
        options["query"] = _read_text_file(query_file, "--query-file")
    variables_file = getattr(ns, "variables_file", None)
    if variables_file:
        options["variables"] = _read_text_file(variables_file, "--variables-file")
    if getattr(ns, "validate_body", False):
        options["validate_body"] = True
    return options


# ---------------------------------------------------------------------------
# auth
# ---------------------------------------------------------------------------


def cmd_auth_set_cookie(ns):
    result = _client(ns).set_cookie(ns.cookie_value)
    mutation_response("Cookie saved", details=result["path"], data=result, fmt=ns.format)


def cmd_auth_set_endpoint(ns):
    result = _client(ns).set_endpoint(ns.url)
    mutation_response("Endpoint saved", details=result["endpoint"], data=result, fmt=ns.format)


def cmd_auth_set_default(ns):
    result = _client(ns).set_defaults(team=ns.team, collection=ns.collection)
    parts = []
    if ns.team:
        parts.append(f"team {ns.team}")
    if ns.collection:
        parts.append(f"collection {ns.collection}")
    mutation_response("Defaults saved", details=", ".join(parts), data=result, fmt=ns.format)


def cmd_auth_status(ns):
    output(_client(ns).status(), format_status, ns.format)


def cmd_auth_clear(ns):
    result = _client(ns).clear_config()
    mutation_response("All credentials cleared", data=result, fmt=ns.format)


# ---------------------------------------------------------------------------
# team
# ---------------------------------------------------------------------------


def cmd_team_list(ns):
    output(_client(ns).list_teams(), format_teams_table, ns.format)


def cmd_team_find(ns):
    output(_client(ns).find_teams(ns.term), format_teams_table, ns.format)


def cmd_team_get(ns):
    output(_client(ns).get_team(ns.team_id), format_team_detail, ns.format)


# ---------------------------------------------------------------------------
# collection
# ---------------------------------------------------------------------------


def cmd_collection_list(ns):
    rows = _client(ns).list_collections(
        team=ns.team, parent=ns.parent, cursor=ns.cursor, take=ns.take
    )
    output(rows, format_collections_table, ns.format)


def cmd_collection_find(ns):
    output(_client(ns).find_collections(ns.term, team=ns.team), format_collections_table, ns.format)


def cmd_collection_get(ns):
    output(_client(ns).get_collection(ns.collection_id), format_collection_detail, ns.format)


def cmd_collection_create(ns):
    result = _client(ns).create_collection(ns.title, team=ns.team, parent=ns.parent)
    mutation_response("Created collection", result["id"], result["title"], result, ns.format)


def cmd_collection_delete(ns):
    result = _client(ns).delete_collection(ns.collection_id)
    mutation_response("Deleted collection", ns.collection_id, data=result, fmt=ns.format)


def cmd_collection_export(ns):
    result = _client(ns).export_collections(team=ns.team, collection=ns.collection)
    # Export is already Hoppscotch JSON; print it as-is in both formats.
    output(result["export"], fmt="json")


# ---------------------------------------------------------------------------
# request / graphql / realtime (ns.kind selects the envelope kind)
# ---------------------------------------------------------------------------


def cmd_request_list(ns):
    rows = _client(ns).list_requests(
        kind=ns.kind,
        collection=ns.collection,
        realtime_type=getattr(ns, "realtime_type", None),
        cursor=ns.cursor,
        take=ns.take,
    )
    output(rows, partial(format_requests_table, kind=ns.kind), ns.format)


def cmd_request_find(ns):
    rows = _client(ns).find_requests(ns.term, team=ns.team, cursor=ns.cursor, take=ns.take)
    output(rows, format_request_search, ns.format)


def cmd_request_get(ns):
    output(_client(ns).get_request(ns.request_id), format_request_detail, ns.format)


def cmd_request_create(ns):
    result = _client(ns).create_request(
        ns.kind, collection=ns.collection, team=ns.team, **_request_options(ns)
    )
    action = f"Created {ns.kind} request"
    mutation_response(action, result["id"], result["title"], result, ns.format)


def cmd_request_update(ns):
    options = _request_options(ns)
    if not options or set(options) == {"validate_body"}:
        raise UsageError("[ERROR] Nothing to update. Supply at least one field option.")
    result = _client(ns).update_request(ns.kind, ns.request_id, **options)
    action = f"Updated {ns.kind} request"
    mutation_response(action, result["id"], result["title"], result, ns.format)


def cmd_request_delete(ns):
    result = _client(ns).delete_request(ns.request_id)
    mutation_response("Deleted request", ns.request_id, data=result, fmt=ns.format)


def cmd_request_move(ns):
    result = _client(ns).move_request(ns.request_id, ns.to)
    details = f"to collection {result['collection_id']}"
    mutation_response("Moved request", ns.request_id, details, result, ns.format)


# ---------------------------------------------------------------------------
# env
# ---------------------------------------------------------------------------


def cmd_env_list(ns):
    output(_client(ns).list_environments(team=ns.team), format_environments_table, ns.format)


def cmd_env_get(ns):
    output(
        _client(ns).get_environment(ns.env_id, team=ns.team), format_environment_detail, ns.format
    )


def cmd_env_create(ns):
    result = _client(ns).create_environment(ns.name, ns.variables, team=ns.team)
    mutation_response("Created environment", result["id"], result["name"], result, ns.format)


def cmd_env_update(ns):
    if ns.name is None and ns.variables is None:
        raise UsageError("[ERROR] Nothing to update. Supply --name and/or --variables.")
    result = _client(ns).update_environment(
        ns.env_id, name=ns.name, variables=ns.variables, team=ns.team
    )
    mutation_response("Updated environment", result["id"], result["name"], result, ns.format)


def cmd_env_delete(ns):
    result = _client(ns).delete_environment(ns.env_id)
    mutation_response("Deleted environment", ns.env_id, data=result, fmt=ns.format)
