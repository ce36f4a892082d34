"""agent-hoppscotch — CLI tool for managing Hoppscotch teams, collections and requests."""

from hoppscotch_cli.client import HoppscotchClient
from hoppscotch_cli.config import VERSION
from hoppscotch_cli.exceptions import (
    CliError,
    GraphQLError,
    NetworkError,
    NotFoundError,
    SessionExpiredError,
    SetupError,
    UnauthenticatedError,
    UnconfiguredError,
    UsageError,
)
from hoppscotch_cli.types import (
    CollectionMatch,
    CollectionRow,
    EnvironmentRow,
    MutationResult,
    RequestRow,
    StatusResult,
    TeamRow,
)

__all__ = [
    "VERSION",
    "HoppscotchClient",
    "CliError",
    "GraphQLError",
    "NetworkError",
    "NotFoundError",
    "SessionExpiredError",
    "SetupError",
    "UnauthenticatedError",
    "UnconfiguredError",
    "UsageError",
    "CollectionMatch",
    "CollectionRow",
    "EnvironmentRow",
    "MutationResult",
    "RequestRow",
    "StatusResult",
    "TeamRow",
]
