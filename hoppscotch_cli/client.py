"""
HoppscotchClient — public Python API for a Hoppscotch team workspace.

Single entry point for the CLI, the MCP server and programmatic use.
All methods return flat dicts suitable for JSON serialization.
"""

from __future__ import annotations

from typing import Any

from hoppscotch_cli import config, operations
from hoppscotch_cli._utils import _contains_ci, _try_json
from hoppscotch_cli.api import graphql_request
from hoppscotch_cli.envelopes import (
    build_envelope,
    decode_environment_variables,
    detect_kind,
    encode_environment_variables,
    merge_for_update,
    parse_envelope,
    validate_choice,
)
from hoppscotch_cli.exceptions import CliError, NotFoundError, UsageError

# Options that must be present when creating a request of each kind.
REQUIRED_CREATE_OPTIONS = {
    "http": ("title", "method", "url"),
    "graphql": ("title", "url"),
    "realtime": ("title", "type", "url"),
}

# ---------------------------------------------------------------------------
# Row helpers
# ---------------------------------------------------------------------------


def _flag(option_name):
    return "--" + option_name.replace("_", "-")


def _page_vars(cursor, take):
    variables = {}
    if cursor is not None:
        variables["cursor"] = cursor
    if take is not None:
        variables["take"] = int(take)
    return variables


def _team_row(team):
    row = {"id": team.get("id"), "name": team.get("name"), "my_role": team.get("myRole")}
    for key, camel in (
        ("owners_count", "ownersCount"),
        ("editors_count", "editorsCount"),
        ("viewers_count", "viewersCount"),
    ):
        if camel in team:
            row[key] = team[camel]
    return row


def _collection_row(collection):
    row = {"id": collection.get("id"), "title": collection.get("title")}
    if "parentID" in collection:
        row["parent_id"] = collection.get("parentID")
    if "children" in collection:
        row["children"] = [
            {"id": c.get("id"), "title": c.get("title")} for c in collection.get("children") or []
        ]
    if collection.get("data") is not None:
        row["data"] = collection.get("data")
    return row


def _request_row(request):
    """Flatten a request entity; the stored envelope is parsed leniently."""
    envelope = parse_envelope(request.get("request"))
    row = {
        "id": request.get("id"),
        "title": request.get("title"),
        "kind": detect_kind(envelope),
        "envelope": envelope,
    }
    if "collectionID" in request:
        row["collection_id"] = request.get("collectionID")
    if "teamID" in request:
        row["team_id"] = request.get("teamID")
    return row


def _environment_row(environment):
    return {
        "id": environment.get("id"),
        "name": environment.get("name"),
        "variables": decode_environment_variables(environment.get("variables")),
    }


# ---------------------------------------------------------------------------
# HoppscotchClient
# ---------------------------------------------------------------------------


class HoppscotchClient:
    """Public API surface for Hoppscotch teams, collections, requests and environments.

    Configuration is resolved once at construction (override > environment >
    persisted file) and reused for every call. Raises CliError subclasses on
    failure.
    """

    def __init__(self, *, overrides=None, environ=None, store=None, verbose=False):
        """Initialize the client.

        Args:
            overrides: Call-time values for ``endpoint``, ``cookie``, ``team``
                and ``collection`` (e.g. CLI global flags).
            environ: Environment mapping, defaults to ``os.environ``.
            store: ConfigStore for the persisted JSON files.
            verbose: Emit ``[HTTP]`` diagnostics on stderr.
        """
        self._overrides = dict(overrides or {})
        self._environ = environ
        self.store = store or config.ConfigStore(config.default_config_dir(environ))
        self.verbose = verbose
        self.cfg = config.resolve_config(self._overrides, environ, self.store)

    # -------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------

    def _reload(self):
        self.cfg = config.resolve_config(self._overrides, self._environ, self.store)

    def _gql(self, operation: str, variables: dict | None = None) -> dict[str, Any]:
        return graphql_request(operation, variables, self.cfg, verbose=self.verbose)

    def _require_team(self, team: str | None) -> str:
        team_id = team or self.cfg.team_id
        if not team_id:
            raise UsageError(
                "[ERROR] --team required "
                f"(or set default: {config.CLI_NAME} auth set-default --team <id>)"
            )
        return team_id

    def _require_collection(self, collection: str | None) -> str:
        collection_id = collection or self.cfg.collection_id
        if not collection_id:
            raise UsageError(
                "[ERROR] --collection required "
                f"(or set default: {config.CLI_NAME} auth set-default --collection <id>)"
            )
        return collection_id

    def _fetch_collection(self, collection_id):
        data = self._gql(operations.COLLECTION, {"collectionID": collection_id})
        collection = data.get("collection")
        if not collection:
            raise NotFoundError(f"[ERROR] Collection not found: {collection_id}")
        return collection

    def _fetch_request(self, request_id):
        data = self._gql(operations.REQUEST, {"requestID": request_id})
        request = data.get("request")
        if not request:
            raise NotFoundError(f"[ERROR] Request not found: {request_id}")
        return request

    def _fetch_environments(self, team_id):
        data = self._gql(operations.TEAM_WITH_ENVIRONMENTS, {"teamID": team_id})
        team = data.get("team")
        if not team:
            raise NotFoundError(f"[ERROR] Team not found: {team_id}")
        return team.get("teamEnvironments") or []

    def _find_environment(self, env_id, team_id):
        for environment in self._fetch_environments(team_id):
            if environment.get("id") == env_id:
                return environment
        raise NotFoundError(f"[ERROR] Environment not found: {env_id}")

    # -------------------------------------------------------------------
    # Auth / configuration (no network)
    # -------------------------------------------------------------------

    def status(self) -> dict[str, Any]:
        """Report the effective configuration.

        Returns:
            dict with endpoint, cookie_set, cookie_length, team_id,
            collection_id, auth_file, defaults_file and ready.
        """
        cookie = self.cfg.cookie or ""
        return {
            "endpoint": self.cfg.endpoint,
            "cookie_set": bool(cookie),
            "cookie_length": len(cookie),
            "team_id": self.cfg.team_id,
            "collection_id": self.cfg.collection_id,
            "auth_file": self.store.auth_path,
            "defaults_file": self.store.defaults_path,
            "ready": bool(self.cfg.endpoint and cookie),
        }

    def set_cookie(self, cookie: str) -> dict[str, Any]:
        """Persist the session cookie to auth.json."""
        if not cookie or not cookie.strip():
            raise UsageError("[ERROR] Cookie cannot be empty.")
        self.store.write_auth(cookie=cookie.strip())
        self._reload()
        return {"ok": True, "path": self.store.auth_path, "cookie_length": len(cookie.strip())}

    def set_endpoint(self, url: str) -> dict[str, Any]:
        """Persist the GraphQL endpoint URL to auth.json."""
        if not url or not url.strip():
            raise UsageError("[ERROR] Endpoint URL cannot be empty.")
        self.store.write_auth(endpoint=url.strip())
        self._reload()
        return {"ok": True, "path": self.store.auth_path, "endpoint": url.strip()}

    def set_defaults(
        self, team: str | None = None, collection: str | None = None
    ) -> dict[str, Any]:
        """Persist default team and/or collection ids to defaults.json."""
        if not team and not collection:
            raise UsageError("[ERROR] Provide --team and/or --collection")
        self.store.write_defaults(team_id=team, collection_id=collection)
        self._reload()
        return {
            "ok": True,
            "path": self.store.defaults_path,
            "team_id": team,
            "collection_id": collection,
        }

    def clear_config(self) -> dict[str, Any]:
        """Remove both persisted files."""
        removed = self.store.clear()
        self._reload()
        return {"ok": True, "removed": removed}

    # -------------------------------------------------------------------
    # Teams
    # -------------------------------------------------------------------

    def list_teams(self) -> list[dict[str, Any]]:
        """List the teams the session user belongs to."""
        data = self._gql(operations.MY_TEAMS)
        return [_team_row(t) for t in data.get("myTeams") or []]

    def find_teams(self, term: str) -> list[dict[str, Any]]:
        """Case-insensitive substring match on team name."""
        return [t for t in self.list_teams() if _contains_ci(t.get("name"), term)]

    def get_team(self, team_id: str) -> dict[str, Any]:
        """Get one team with its member counts.

        Raises:
            NotFoundError: the team does not exist or is not visible.
        """
        data = self._gql(operations.TEAM, {"teamID": team_id})
        team = data.get("team")
        if not team:
            raise NotFoundError(f"[ERROR] Team not found: {team_id}")
        return _team_row(team)

    # -------------------------------------------------------------------
    # Collections
    # -------------------------------------------------------------------

    def list_collections(
        self,
        team: str | None = None,
        parent: str | None = None,
        cursor: str | None = None,
        take: int | None = None,
    ) -> list[dict[str, Any]]:
        """List root collections of a team, or the children of *parent*."""
        if parent:
            collection = self._fetch_collection(parent)
            return [
                {"id": c.get("id"), "title": c.get("title"), "parent_id": parent}
                for c in collection.get("children") or []
            ]
        team_id = self._require_team(team)
        variables = {"teamID": team_id, **_page_vars(cursor, take)}
        data = self._gql(operations.ROOT_COLLECTIONS_OF_TEAM, variables)
        return [
            {"id": c.get("id"), "title": c.get("title"), "parent_id": None}
            for c in data.get("rootCollectionsOfTeam") or []
        ]

    def find_collections(self, term: str, team: str | None = None) -> list[dict[str, Any]]:
        """Search the whole collection tree of a team by title.

        Depth-first, sibling order preserved, one Collection fetch per
        visited node. Each hit carries ``path``, the ancestor titles joined
        by " > ".
        """
        team_id = self._require_team(team)
        data = self._gql(operations.ROOT_COLLECTIONS_OF_TEAM, {"teamID": team_id})
        results: list[dict[str, Any]] = []

        def _walk(nodes, parent_id, parent_path):
            for node in nodes:
                title = node.get("title") or ""
                path = f"{parent_path} > {title}" if parent_path else title
                if _contains_ci(title, term):
                    results.append(
                        {"id": node.get("id"), "title": title, "parent_id": parent_id, "path": path}
                    )
                detail = self._gql(operations.COLLECTION, {"collectionID": node.get("id")})
                children = (detail.get("collection") or {}).get("children") or []
                if children:
                    _walk(children, node.get("id"), path)

        _walk(data.get("rootCollectionsOfTeam") or [], None, "")
        return results

    def get_collection(self, collection_id: str) -> dict[str, Any]:
        """Get one collection with its direct children."""
        return _collection_row(self._fetch_collection(collection_id))

    def create_collection(
        self, title: str, team: str | None = None, parent: str | None = None
    ) -> dict[str, Any]:
        """Create a root collection in a team, or a child under *parent*.

        Returns:
            dict with ok=True, id, title and parent_id.
        """
        if not title:
            raise UsageError("[ERROR] --title required")
        if parent:
            data = self._gql(
                operations.CREATE_CHILD_COLLECTION, {"collectionID": parent, "childTitle": title}
            )
            created = data.get("createChildCollection") or {}
        else:
            team_id = self._require_team(team)
            data = self._gql(operations.CREATE_ROOT_COLLECTION, {"teamID": team_id, "title": title})
            created = data.get("createRootCollection") or {}
        if not created.get("id"):
            raise CliError(
                "[ERROR] Collection creation failed: API response missing 'id'. "
                f"Response: {str(data)[:200]}"
            )
        return {
            "ok": True,
            "id": created["id"],
            "title": created.get("title", title),
            "parent_id": parent,
        }

    def delete_collection(self, collection_id: str) -> dict[str, Any]:
        """Delete a collection and everything under it."""
        data = self._gql(operations.DELETE_COLLECTION, {"collectionID": collection_id})
        return {"ok": True, "id": collection_id, "deleted": bool(data.get("deleteCollection"))}

    def export_collections(
        self, team: str | None = None, collection: str | None = None
    ) -> dict[str, Any]:
        """Export a team's collections (or a single one) as Hoppscotch JSON."""
        team_id = self._require_team(team)
        if collection:
            data = self._gql(
                operations.EXPORT_COLLECTION_TO_JSON,
                {"teamID": team_id, "collectionID": collection},
            )
            raw = data.get("exportCollectionToJSON")
        else:
            data = self._gql(operations.EXPORT_COLLECTIONS_TO_JSON, {"teamID": team_id})
            raw = data.get("exportCollectionsToJSON")
        parsed = _try_json(raw)
        return {
            "team_id": team_id,
            "collection_id": collection,
            "export": parsed if parsed is not None else raw,
        }

    # -------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------

    def list_requests(
        self,
        kind: str = "http",
        collection: str | None = None,
        realtime_type: str | None = None,
        cursor: str | None = None,
        take: int | None = None,
    ) -> list[dict[str, Any]]:
        """List requests of one kind in a collection.

        Envelopes that cannot be parsed are listed with the HTTP kind.
        """
        validate_choice(kind, config.VALID_REQUEST_KINDS, "request kind")
        if realtime_type is not None:
            validate_choice(realtime_type, config.VALID_REALTIME_TYPES, "realtime type")
        collection_id = self._require_collection(collection)
        variables = {"collectionID": collection_id, **_page_vars(cursor, take)}
        data = self._gql(operations.REQUESTS_IN_COLLECTION, variables)
        rows = []
        for request in data.get("requestsInCollection") or []:
            row = _request_row(request)
            if (row["kind"] or "http") != kind:
                continue
            if realtime_type and (row["envelope"] or {}).get("type") != realtime_type:
                continue
            rows.append(row)
        return rows

    def find_requests(
        self,
        term: str,
        team: str | None = None,
        cursor: str | None = None,
        take: int | None = None,
    ) -> list[dict[str, Any]]:
        """Server-side title search across all request kinds in a team."""
        team_id = self._require_team(team)
        variables = {"teamID": team_id, "searchTerm": term, **_page_vars(cursor, take)}
        data = self._gql(operations.SEARCH_FOR_REQUEST, variables)
        return [_request_row(r) for r in data.get("searchForRequest") or []]

    def get_request(self, request_id: str) -> dict[str, Any]:
        """Get one request with its parsed envelope (None when malformed)."""
        return _request_row(self._fetch_request(request_id))

    def create_request(
        self,
        kind: str,
        *,
        collection: str | None = None,
        team: str | None = None,
        **options: Any,
    ) -> dict[str, Any]:
        """Create a request of *kind* in a collection.

        Args:
            kind: One of http, graphql, realtime.
            collection: Target collection id (falls back to the default).
            team: Owning team id (falls back to the default).
            **options: Flat envelope options (title, url, method, headers ...).

        Returns:
            dict with ok=True, id, title, kind and collection_id.
        """
        validate_choice(kind, config.VALID_REQUEST_KINDS, "request kind")
        collection_id = self._require_collection(collection)
        team_id = self._require_team(team)
        for name in REQUIRED_CREATE_OPTIONS[kind]:
            if options.get(name) in (None, ""):
                raise UsageError(f"[ERROR] {_flag(name)} required")
        envelope = build_envelope(kind, options)
        data = self._gql(
            operations.CREATE_REQUEST_IN_COLLECTION,
            {
                "collectionID": collection_id,
                "data": {"teamID": team_id, "title": options["title"], "request": envelope},
            },
        )
        created = data.get("createRequestInCollection") or {}
        if not created.get("id"):
            raise CliError(
                "[ERROR] Request creation failed: API response missing 'id'. "
                f"Response: {str(data)[:200]}"
            )
        return {
            "ok": True,
            "id": created["id"],
            "title": created.get("title", options["title"]),
            "kind": kind,
            "collection_id": collection_id,
        }

    def update_request(self, kind: str, request_id: str, **options: Any) -> dict[str, Any]:
        """Merge the supplied options into a stored request.

        Unsupplied fields keep their stored values. The top-level title is
        only sent when ``title`` is supplied.
        """
        validate_choice(kind, config.VALID_REQUEST_KINDS, "request kind")
        existing = self._fetch_request(request_id)
        envelope = parse_envelope(existing.get("request")) or {}
        stored_kind = detect_kind(envelope) if envelope else None
        if stored_kind and stored_kind != kind:
            raise UsageError(
                f"[ERROR] Request {request_id} is a {stored_kind} request, not {kind}."
            )
        update: dict[str, Any] = {"request": merge_for_update(kind, envelope, options)}
        if options.get("title") is not None:
            update["title"] = options["title"]
        data = self._gql(operations.UPDATE_REQUEST, {"requestID": request_id, "data": update})
        updated = data.get("updateRequest") or {}
        return {
            "ok": True,
            "id": updated.get("id", request_id),
            "title": updated.get("title", existing.get("title")),
            "kind": kind,
        }

    def delete_request(self, request_id: str) -> dict[str, Any]:
        """Delete a request."""
        data = self._gql(operations.DELETE_REQUEST, {"requestID": request_id})
        return {"ok": True, "id": request_id, "deleted": bool(data.get("deleteRequest"))}

    def move_request(self, request_id: str, dest_collection: str) -> dict[str, Any]:
        """Move a request into another collection."""
        if not dest_collection:
            raise UsageError("[ERROR] --to required")
        data = self._gql(
            operations.MOVE_REQUEST, {"requestID": request_id, "destCollID": dest_collection}
        )
        moved = data.get("moveRequest") or {}
        return {
            "ok": True,
            "id": moved.get("id", request_id),
            "collection_id": moved.get("collectionID", dest_collection),
        }

    # -------------------------------------------------------------------
    # Environments
    # -------------------------------------------------------------------

    def list_environments(self, team: str | None = None) -> list[dict[str, Any]]:
        """List a team's environments with decoded variables."""
        team_id = self._require_team(team)
        return [_environment_row(e) for e in self._fetch_environments(team_id)]

    def get_environment(self, env_id: str, team: str | None = None) -> dict[str, Any]:
        team_id = self._require_team(team)
        return _environment_row(self._find_environment(env_id, team_id))

    def create_environment(
        self, name: str, variables: Any, team: str | None = None
    ) -> dict[str, Any]:
        """Create a team environment.

        Args:
            name: Environment name.
            variables: JSON array of {key, value} or JSON object (text or parsed).
            team: Owning team id (falls back to the default).
        """
        team_id = self._require_team(team)
        if not name:
            raise UsageError("[ERROR] --name required")
        if variables is None:
            raise UsageError("[ERROR] --variables required")
        encoded = encode_environment_variables(variables)
        data = self._gql(
            operations.CREATE_TEAM_ENVIRONMENT,
            {"teamID": team_id, "name": name, "variables": encoded},
        )
        created = data.get("createTeamEnvironment") or {}
        if not created.get("id"):
            raise CliError(
                "[ERROR] Environment creation failed: API response missing 'id'. "
                f"Response: {str(data)[:200]}"
            )
        return {"ok": True, **_environment_row(created)}

    def update_environment(
        self,
        env_id: str,
        name: str | None = None,
        variables: Any = None,
        team: str | None = None,
    ) -> dict[str, Any]:
        """Rename an environment and/or replace its variables.

        The current environment is fetched first; unsupplied fields keep
        their stored values.
        """
        team_id = self._require_team(team)
        current = self._find_environment(env_id, team_id)
        encoded = (
            encode_environment_variables(variables)
            if variables is not None
            else current.get("variables") or "[]"
        )
        data = self._gql(
            operations.UPDATE_TEAM_ENVIRONMENT,
            {"id": env_id, "name": name or current.get("name"), "variables": encoded},
        )
        updated = data.get("updateTeamEnvironment") or {}
        return {"ok": True, **_environment_row(updated or current)}

    def delete_environment(self, env_id: str) -> dict[str, Any]:
        """Delete an environment."""
        data = self._gql(operations.DELETE_TEAM_ENVIRONMENT, {"id": env_id})
        return {"ok": True, "id": env_id, "deleted": bool(data.get("deleteTeamEnvironment"))}
