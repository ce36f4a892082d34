"""Typed response definitions for HoppscotchClient methods.

These TypedDicts document the shape of dicts returned by public API methods.
They are optional — runtime behavior is unchanged (plain dicts).
"""

from __future__ import annotations

from typing import Any, TypedDict

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class StatusResult(TypedDict):
    """Return type of HoppscotchClient.status()."""

    endpoint: str | None
    cookie_set: bool
    cookie_length: int
    team_id: str | None
    collection_id: str | None
    auth_file: str
    defaults_file: str
    ready: bool


# ---------------------------------------------------------------------------
# Teams and collections
# ---------------------------------------------------------------------------


class TeamRow(TypedDict, total=False):
    id: str
    name: str
    my_role: str | None
    owners_count: int
    editors_count: int
    viewers_count: int


class CollectionChild(TypedDict):
    id: str
    title: str


class CollectionRow(TypedDict, total=False):
    """Collection summary; ``children`` only present on get_collection()."""

    id: str
    title: str
    parent_id: str | None
    children: list[CollectionChild]
    data: str


class CollectionMatch(TypedDict):
    """One hit of HoppscotchClient.find_collections()."""

    id: str
    title: str
    parent_id: str | None
    path: str


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class RequestRow(TypedDict, total=False):
    """Request entity with its parsed envelope (None when malformed)."""

    id: str
    title: str
    kind: str | None
    envelope: dict[str, Any] | None
    collection_id: str | None
    team_id: str | None


class EnvironmentVariable(TypedDict):
    key: str
    value: Any


class EnvironmentRow(TypedDict):
    id: str
    name: str
    variables: list[EnvironmentVariable]


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


class MutationResult(TypedDict, total=False):
    """Common shape for create/update/delete/move results."""

    ok: bool
    id: str
    title: str
    kind: str
    collection_id: str | None
    parent_id: str | None
    deleted: bool
