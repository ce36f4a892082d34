"""Formatters for configuration status, teams, collections and environments."""

from hoppscotch_cli.formatters._table import _or_na, _table, _trunc


def format_status(status):
    """Format HoppscotchClient.status() as readable text."""
    cookie = "(not set)"
    if status.get("cookie_set"):
        cookie = f"[set] ({status.get('cookie_length', 0)} chars)"
    lines = [
        "Configuration:",
        f"  Endpoint:      {status.get('endpoint') or '(not set)'}",
        f"  Cookie:        {cookie}",
        f"  Config file:   {status.get('auth_file', '')}",
        "",
        "Defaults:",
        f"  Team ID:       {status.get('team_id') or '(not set)'}",
        f"  Collection ID: {status.get('collection_id') or '(not set)'}",
        f"  Config file:   {status.get('defaults_file', '')}",
        "",
        f"Status: {'Ready' if status.get('ready') else 'Not configured'}",
    ]
    return "\n".join(lines)


def format_teams_table(teams):
    """Format teams as a readable table.

    Accepts list of flat dicts from HoppscotchClient.list_teams().
    """
    if not teams:
        return "No teams found."
    cols = [("ID", 28), ("Role", 10), ("Name", 0)]
    rows = [(t.get("id", ""), _or_na(t.get("my_role")), t.get("name", "")) for t in teams]
    return _table(cols, rows, f"Total: {len(teams)} teams")


def format_team_detail(team):
    lines = [f"Team: {team.get('name', '')}"]
    lines.append(f"  ID:      {team.get('id', '')}")
    lines.append(f"  Role:    {_or_na(team.get('my_role'))}")
    lines.append(f"  Owners:  {_or_na(team.get('owners_count'))}")
    lines.append(f"  Editors: {_or_na(team.get('editors_count'))}")
    lines.append(f"  Viewers: {_or_na(team.get('viewers_count'))}")
    return "\n".join(lines)


def format_collections_table(collections):
    """Format collection rows (list or find results) as a table."""
    if not collections:
        return "No collections found."
    with_path = any("path" in c for c in collections)
    if with_path:
        cols = [("ID", 28), ("Path", 0)]
        rows = [(c.get("id", ""), c.get("path", "")) for c in collections]
    else:
        cols = [("ID", 28), ("Title", 0)]
        rows = [(c.get("id", ""), _trunc(c.get("title", ""), 60)) for c in collections]
    return _table(cols, rows, f"Total: {len(collections)} collections")


def format_collection_detail(collection):
    children = collection.get("children") or []
    lines = [f"Collection: {collection.get('title', '')}"]
    lines.append(f"  ID:       {collection.get('id', '')}")
    lines.append(f"  Parent:   {collection.get('parent_id') or '(root)'}")
    lines.append(f"  Children: {len(children)}")
    for child in children:
        lines.append(f"    - {child.get('title', '')} ({child.get('id', '')})")
    return "\n".join(lines)


def format_environments_table(environments):
    if not environments:
        return "No environments found in this team."
    cols = [("ID", 28), ("Variables", 10), ("Name", 0)]
    rows = [
        (e.get("id", ""), str(len(e.get("variables") or [])), e.get("name", ""))
        for e in environments
    ]
    return _table(cols, rows, f"Total: {len(environments)} environments")


def format_environment_detail(environment):
    lines = [f"Environment: {environment.get('name', '')}"]
    lines.append(f"  ID: {environment.get('id', '')}")
    lines.append("  Variables:")
    variables = environment.get("variables") or []
    if not variables:
        lines.append("    (none)")
    for var in variables:
        lines.append(f"    {var.get('key', '')} = {_or_na(var.get('value'))}")
    return "\n".join(lines)
