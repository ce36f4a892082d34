"""Formatters for HTTP, GraphQL and realtime requests.

Rows come from HoppscotchClient with the stored envelope already parsed
(``envelope`` is None when the stored JSON is malformed). Missing data is
shown as N/A instead of failing the whole listing.
"""

from hoppscotch_cli.envelopes import envelope_to_options
from hoppscotch_cli.formatters._table import _or_na, _table, _trunc


def _options(row):
    return envelope_to_options(row.get("kind"), row.get("envelope"))


def _count(value):
    return str(len(value)) if isinstance(value, list) else "0"


def format_requests_table(rows, kind="http"):
    """Format request rows of one kind as a table."""
    if not rows:
        return "No requests found."
    if kind == "graphql":
        cols = [("ID", 28), ("Title", 30), ("URL", 0)]
        table_rows = [
            (r.get("id", ""), _trunc(r.get("title", ""), 30), _or_na(_options(r).get("url")))
            for r in rows
        ]
    elif kind == "realtime":
        cols = [("ID", 28), ("Title", 30), ("Type", 10), ("URL", 0)]
        table_rows = []
        for r in rows:
            opts = _options(r)
            table_rows.append(
                (
                    r.get("id", ""),
                    _trunc(r.get("title", ""), 30),
                    _or_na(opts.get("type")),
                    _or_na(opts.get("url")),
                )
            )
    else:
        cols = [("ID", 28), ("Title", 30), ("Method", 8), ("Endpoint", 0)]
        table_rows = []
        for r in rows:
            opts = _options(r)
            table_rows.append(
                (
                    r.get("id", ""),
                    _trunc(r.get("title", ""), 30),
                    _or_na(opts.get("method")),
                    _or_na(_trunc(opts.get("url") or "", 50)),
                )
            )
    return _table(cols, table_rows, f"Total: {len(rows)} requests")


def format_request_search(rows):
    """Format find results, which mix all request kinds."""
    if not rows:
        return "No requests found."
    cols = [("ID", 28), ("Kind", 9), ("Method", 8), ("Title", 0)]
    table_rows = [
        (
            r.get("id", ""),
            _or_na(r.get("kind")),
            _or_na(_options(r).get("method")) if r.get("kind") == "http" else "-",
            r.get("title", ""),
        )
        for r in rows
    ]
    return _table(cols, table_rows, f"Found {len(rows)} request(s)")


def format_request_detail(row):
    """Format one request with the fields of its kind."""
    kind = row.get("kind")
    opts = _options(row)
    lines = [f"Request: {row.get('title', '')}"]
    lines.append(f"  ID:           {row.get('id', '')}")
    lines.append(f"  Collection:   {_or_na(row.get('collection_id'))}")
    lines.append(f"  Team:         {_or_na(row.get('team_id'))}")
    if row.get("envelope") is None:
        lines.append(f"  Kind:         {_or_na(kind)}")
        lines.append("  Envelope:     N/A (stored request data could not be parsed)")
        return "\n".join(lines)
    lines.append(f"  Kind:         {kind}")
    if kind == "http":
        lines.append(f"  Method:       {_or_na(opts.get('method'))}")
        lines.append(f"  Endpoint:     {_or_na(opts.get('url'))}")
        lines.append(f"  Headers:      {_count(opts.get('headers'))}")
        lines.append(f"  Params:       {_count(opts.get('params'))}")
        lines.append(f"  Body type:    {opts.get('body_type') or 'none'}")
        lines.append(f"  Auth:         {opts.get('auth_type') or 'none'}")
    elif kind == "graphql":
        lines.append(f"  URL:          {_or_na(opts.get('url'))}")
        lines.append(f"  Headers:      {_count(opts.get('headers'))}")
        lines.append(f"  Variables:    {_or_na(opts.get('variables'))}")
        lines.append("  Query:")
        for query_line in (opts.get("query") or "N/A").splitlines():
            lines.append(f"    {query_line}")
    else:
        rt_type = opts.get("type")
        lines.append(f"  Type:         {_or_na(rt_type)}")
        lines.append(f"  URL:          {_or_na(opts.get('url'))}")
        lines.append(f"  Headers:      {_count(opts.get('headers'))}")
        if rt_type == "websocket":
            protocols = opts.get("protocols")
            shown = ", ".join(protocols) if isinstance(protocols, list) else ""
            lines.append(f"  Protocols:    {_or_na(shown)}")
        elif rt_type == "socketio":
            lines.append(f"  Path:         {_or_na(opts.get('path'))}")
            lines.append(f"  Version:      {_or_na(opts.get('version'))}")
        elif rt_type == "mqtt":
            lines.append(f"  Topic:        {_or_na(opts.get('topic'))}")
            lines.append(f"  QoS:          {_or_na(opts.get('qos'))}")
            lines.append(f"  Client ID:    {_or_na(opts.get('client_id'))}")
    return "\n".join(lines)
