"""
agent-hoppscotch — CLI tool for managing Hoppscotch teams, collections and requests
"""

import argparse
import json
import sys

from hoppscotch_cli import config
from hoppscotch_cli.commands import (
    cmd_auth_clear,
    cmd_auth_set_cookie,
    cmd_auth_set_default,
    cmd_auth_set_endpoint,
    cmd_auth_status,
    cmd_collection_create,
    cmd_collection_delete,
    cmd_collection_export,
    cmd_collection_find,
    cmd_collection_get,
    cmd_collection_list,
    cmd_env_create,
    cmd_env_delete,
    cmd_env_get,
    cmd_env_list,
    cmd_env_update,
    cmd_request_create,
    cmd_request_delete,
    cmd_request_find,
    cmd_request_get,
    cmd_request_list,
    cmd_request_move,
    cmd_request_update,
    cmd_team_find,
    cmd_team_get,
    cmd_team_list,
)
from hoppscotch_cli.exceptions import CliError, UsageError

HELP_TEXT = f"""\
Usage: {config.CLI_NAME} [global flags] <group> <command> [options]

Global flags (accepted anywhere):
  --json                  Output JSON (same as --format json)
  --format json|table     Output format (default: table)
  --verbose, -v           Log GraphQL requests/responses to stderr
  --cookie <str>          Session cookie for this invocation
  --endpoint <url>        GraphQL endpoint for this invocation
  --version               Show version number
  --help, -h              Show this help

Configuration precedence: flags > HOPPSCOTCH_ENDPOINT / HOPPSCOTCH_COOKIE
> ~/.hoppscotch/auth.json and defaults.json

auth
  set-cookie <cookie>     Store the session cookie
  set-endpoint <url>      Store the GraphQL endpoint
  set-default             Store default ids (--team <id>, --collection <id>)
  status                  Show current configuration
  clear                   Remove all stored credentials and defaults

team
  list | find <term> | get <team_id>

collection
  list                    Root collections (--team) or children (--parent)
  find <term>             Search the whole tree by title (--team)
  get <collection_id>
  create                  --title <t> [--team <id> | --parent <id>]
  delete <collection_id>
  export                  [--team <id>] [--collection <id>]

request                   HTTP requests
  list                    [--collection <id>] [--cursor <id>] [--take <n>]
  find <term>             Search all request kinds by title (--team)
  get <request_id>
  create                  --title --method --url [--collection --team]
    --headers <json>        JSON array [{{"key","value","active"}}] or object
    --params <json>         Same shapes as --headers
    --body <text>           Body text (--body-type defaults to application/json)
    --body-type <type>      {", ".join(config.VALID_BODY_TYPES)} (none rejects --body/--form)
    --form <json>           Multipart fields (implies multipart/form-data)
    --auth-type <type>      {", ".join(config.VALID_AUTH_TYPES)}
    --auth-token / --auth-username / --auth-password
    --auth-key / --auth-value / --auth-add-to HEADERS|QUERY_PARAMS
    --oauth-grant-type / --oauth-auth-url / --oauth-token-url
    --oauth-client-id / --oauth-scope
    --auth-active true|false
    --pre-request-script <js> / --test-script <js>
    --request-variables <json>
    --validate-body         Require the JSON body to parse
  update <request_id>     Same options as create; unset fields keep their values
  delete <request_id>
  move <request_id> --to <collection_id>

graphql                   GraphQL requests
  list | get <id> | delete <id>
  create                  --title --url [--query <q> | --query-file <path>]
                          [--variables <json> | --variables-file <path>] [--headers]
  update <id>             Same options as create

realtime                  WebSocket / SSE / Socket.IO / MQTT requests
  list                    [--type {"|".join(config.VALID_REALTIME_TYPES)}]
  get <id> | delete <id>
  create                  --title --type --url [--headers]
    --protocols <json>      websocket: JSON array of sub-protocols
    --path / --version      socketio (defaults /socket.io, 4)
    --topic / --qos 0|1|2 / --client-id   mqtt
  update <id>             Same options as create

env
  list | get <env_id>     [--team <id>]
  create                  --name <n> --variables <json> [--team <id>]
  update <env_id>         [--name <n>] [--variables <json>] [--team <id>]
  delete <env_id>

Exit codes: 0 ok, 1 error, 2 setup needed / session expired, 3 not found, 4 usage
"""


# ---------------------------------------------------------------------------
# Global flag extraction (before argparse, so flags work after subcommands)
# ---------------------------------------------------------------------------


def _extract_global_flags(argv):
    """Extract global flags from argv regardless of position.

    Returns (format_str, verbose, overrides, show_help, show_version, remaining_argv).
    ``--version`` is only global before the group name; after it, it is the
    Socket.IO protocol version of ``realtime create/update``.
    """
    fmt = "table"
    verbose = False
    show_help = False
    show_version = False
    overrides = {}
    remaining = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--version" and not remaining:
            show_version = True
        elif arg in ("--help", "-h"):
            show_help = True
        elif arg == "--json":
            fmt = "json"
        elif arg in ("--verbose", "-v"):
            verbose = True
        elif arg in ("--format", "--cookie", "--endpoint") or arg.startswith(
            ("--format=", "--cookie=", "--endpoint=")
        ):
            if "=" in arg:
                name, value = arg.split("=", 1)
            elif i + 1 < len(argv):
                name, value = arg, argv[i + 1]
                i += 1
            else:
                raise UsageError(f"[ERROR] {arg} requires a value")
            if name == "--format":
                if value not in ("json", "table"):
                    raise UsageError(f"[ERROR] Invalid format '{value}'. Use: json, table")
                fmt = value
            else:
                overrides[name[2:]] = value
        else:
            remaining.append(arg)
        i += 1
    return fmt, verbose, overrides, show_help, show_version, remaining


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


class _SubcommandParser(argparse.ArgumentParser):
    """Subparser that raises UsageError instead of printing full help text."""

    def error(self, message):
        raise UsageError(f"[ERROR] {message}")


def _positive_int(value):
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a positive integer") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return parsed


def _bool_value(value):
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes", "on"):
        return True
    if lowered in ("false", "0", "no", "off"):
        return False
    raise argparse.ArgumentTypeError("must be true or false")


def _add_paging(p):
    p.add_argument("--cursor")
    p.add_argument("--take", type=_positive_int)


def _add_http_options(p):
    p.add_argument("--title")
    p.add_argument("--method")
    p.add_argument("--url")
    p.add_argument("--headers")
    p.add_argument("--params")
    p.add_argument("--body")
    p.add_argument("--body-type", dest="body_type")
    p.add_argument("--form")
    p.add_argument("--auth-type", dest="auth_type")
    p.add_argument("--auth-active", dest="auth_active", type=_bool_value)
    for flag in (
        "auth-token",
        "auth-username",
        "auth-password",
        "auth-key",
        "auth-value",
        "auth-add-to",
        "oauth-grant-type",
        "oauth-auth-url",
        "oauth-token-url",
        "oauth-client-id",
        "oauth-scope",
        "pre-request-script",
        "test-script",
        "request-variables",
    ):
        p.add_argument(f"--{flag}", dest=flag.replace("-", "_"))
    p.add_argument("--validate-body", dest="validate_body", action="store_true")


def _add_graphql_options(p):
    p.add_argument("--title")
    p.add_argument("--url")
    p.add_argument("--headers")
    p.add_argument("--query")
    p.add_argument("--query-file", dest="query_file")
    p.add_argument("--variables")
    p.add_argument("--variables-file", dest="variables_file")


def _add_realtime_options(p):
    p.add_argument("--title")
    p.add_argument("--type", choices=config.VALID_REALTIME_TYPES)
    p.add_argument("--url")
    p.add_argument("--headers")
    p.add_argument("--protocols")
    p.add_argument("--path")
    p.add_argument("--version")
    p.add_argument("--topic")
    p.add_argument("--qos", type=int)
    p.add_argument("--client-id", dest="client_id")


_KIND_OPTIONS = {
    "http": _add_http_options,
    "graphql": _add_graphql_options,
    "realtime": _add_realtime_options,
}


def _add_request_group(sub, group, kind):
    """Register list/get/create/update/delete (+ find/move for HTTP) for one kind."""
    gp = sub.add_parser(group)
    gsub = gp.add_subparsers(dest="verb", parser_class=_SubcommandParser)
    gp.set_defaults(kind=kind)

    p = gsub.add_parser("list")
    p.add_argument("--collection")
    _add_paging(p)
    if kind == "realtime":
        p.add_argument("--type", dest="realtime_type", choices=config.VALID_REALTIME_TYPES)
    p.set_defaults(func=cmd_request_list, kind=kind)

    p = gsub.add_parser("get")
    p.add_argument("request_id")
    p.set_defaults(func=cmd_request_get, kind=kind)

    p = gsub.add_parser("create")
    p.add_argument("--collection")
    p.add_argument("--team")
    _KIND_OPTIONS[kind](p)
    p.set_defaults(func=cmd_request_create, kind=kind)

    p = gsub.add_parser("update")
    p.add_argument("request_id")
    _KIND_OPTIONS[kind](p)
    p.set_defaults(func=cmd_request_update, kind=kind)

    p = gsub.add_parser("delete")
    p.add_argument("request_id")
    p.set_defaults(func=cmd_request_delete, kind=kind)

    if kind == "http":
        p = gsub.add_parser("find")
        p.add_argument("term")
        p.add_argument("--team")
        _add_paging(p)
        p.set_defaults(func=cmd_request_find, kind=kind)

        p = gsub.add_parser("move")
        p.add_argument("request_id")
        p.add_argument("--to", required=True)
        p.set_defaults(func=cmd_request_move, kind=kind)


def build_parser():
    parser = _SubcommandParser(
        prog=config.CLI_NAME,
        description="CLI tool for managing Hoppscotch teams, collections and requests",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    sub = parser.add_subparsers(dest="group", parser_class=_SubcommandParser)

    # --- auth ---
    gp = sub.add_parser("auth")
    gsub = gp.add_subparsers(dest="verb", parser_class=_SubcommandParser)
    p = gsub.add_parser("set-cookie")
    p.add_argument("cookie_value")
    p.set_defaults(func=cmd_auth_set_cookie)
    p = gsub.add_parser("set-endpoint")
    p.add_argument("url")
    p.set_defaults(func=cmd_auth_set_endpoint)
    p = gsub.add_parser("set-default")
    p.add_argument("--team")
    p.add_argument("--collection")
    p.set_defaults(func=cmd_auth_set_default)
    gsub.add_parser("status").set_defaults(func=cmd_auth_status)
    gsub.add_parser("clear").set_defaults(func=cmd_auth_clear)

    # --- team ---
    gp = sub.add_parser("team")
    gsub = gp.add_subparsers(dest="verb", parser_class=_SubcommandParser)
    gsub.add_parser("list").set_defaults(func=cmd_team_list)
    p = gsub.add_parser("find")
    p.add_argument("term")
    p.set_defaults(func=cmd_team_find)
    p = gsub.add_parser("get")
    p.add_argument("team_id")
    p.set_defaults(func=cmd_team_get)

    # --- collection ---
    gp = sub.add_parser("collection")
    gsub = gp.add_subparsers(dest="verb", parser_class=_SubcommandParser)
    p = gsub.add_parser("list")
    p.add_argument("--team")
    p.add_argument("--parent")
    _add_paging(p)
    p.set_defaults(func=cmd_collection_list)
    p = gsub.add_parser("find")
    p.add_argument("term")
    p.add_argument("--team")
    p.set_defaults(func=cmd_collection_find)
    p = gsub.add_parser("get")
    p.add_argument("collection_id")
    p.set_defaults(func=cmd_collection_get)
    p = gsub.add_parser("create")
    p.add_argument("--title")
    p.add_argument("--team")
    p.add_argument("--parent")
    p.set_defaults(func=cmd_collection_create)
    p = gsub.add_parser("delete")
    p.add_argument("collection_id")
    p.set_defaults(func=cmd_collection_delete)
    p = gsub.add_parser("export")
    p.add_argument("--team")
    p.add_argument("--collection")
    p.set_defaults(func=cmd_collection_export)

    # --- request / graphql / realtime ---
    _add_request_group(sub, "request", "http")
    _add_request_group(sub, "graphql", "graphql")
    _add_request_group(sub, "realtime", "realtime")

    # --- env ---
    gp = sub.add_parser("env")
    gsub = gp.add_subparsers(dest="verb", parser_class=_SubcommandParser)
    p = gsub.add_parser("list")
    p.add_argument("--team")
    p.set_defaults(func=cmd_env_list)
    p = gsub.add_parser("get")
    p.add_argument("env_id")
    p.add_argument("--team")
    p.set_defaults(func=cmd_env_get)
    p = gsub.add_parser("create")
    p.add_argument("--name")
    p.add_argument("--variables")
    p.add_argument("--team")
    p.set_defaults(func=cmd_env_create)
    p = gsub.add_parser("update")
    p.add_argument("env_id")
    p.add_argument("--name")
    p.add_argument("--variables")
    p.add_argument("--team")
    p.set_defaults(func=cmd_env_update)
    p = gsub.add_parser("delete")
    p.add_argument("env_id")
    p.set_defaults(func=cmd_env_delete)

    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------


def _emit_cli_error(err, fmt):
    msg = str(err)
    if fmt == "json":
        error = {
            "type": getattr(err, "error_type", "error"),
            "message": msg,
            "exit_code": getattr(err, "exit_code", 1),
        }
        if getattr(err, "reason", None):
            error["reason"] = err.reason
        payload = {"ok": False, "schema_version": config.CONTRACT_SCHEMA_VERSION, "error": error}
        print(json.dumps(payload, ensure_ascii=False), file=sys.stderr)
        return
    print(msg, file=sys.stderr)


def main(argv=None):
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")

    argv = sys.argv[1:] if argv is None else argv
    fmt = "json" if "--json" in argv else "table"
    try:
        fmt, verbose, overrides, show_help, show_version, remaining = _extract_global_flags(argv)

        if show_version:
            print(f"{config.CLI_NAME} {config.VERSION}")
            return
        if show_help or not remaining:
            print(HELP_TEXT)
            return

        ns = build_parser().parse_args(remaining)
        ns.format = fmt
        ns.verbose = verbose
        ns.overrides = overrides

        handler = getattr(ns, "func", None)
        if handler is None:
            raise UsageError(
                f"[ERROR] Missing command for '{ns.group}'. Run: {config.CLI_NAME} --help"
            )
        handler(ns)

    except CliError as e:
        _emit_cli_error(e, fmt)
        sys.exit(e.exit_code)


if __name__ == "__main__":
    main()
