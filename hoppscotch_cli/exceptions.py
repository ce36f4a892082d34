"""
agent-hoppscotch exception hierarchy.

All custom exceptions live here to avoid circular imports.
Every CLI-facing class carries ``exit_code`` and ``error_type`` so callers
can match on the kind without isinstance chains.
"""


class CliError(Exception):
    """Exit code 1 — generic failure (GraphQL, network, unexpected response)."""

    exit_code = 1
    error_type = "error"


class GraphQLError(CliError):
    """The server answered with ``errors`` unrelated to authentication."""

    error_type = "graphql"

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = errors or []


class NetworkError(CliError):
    """Connectivity failure. ``reason`` is one of dns, refused, timeout, other."""

    error_type = "network"

    def __init__(self, message, reason="other"):
        super().__init__(message)
        self.reason = reason


class SetupError(CliError):
    """Exit code 2 — local configuration incomplete or session rejected."""

    exit_code = 2
    error_type = "setup_needed"


class UnconfiguredError(SetupError):
    """No endpoint configured."""

    error_type = "unconfigured"


class UnauthenticatedError(SetupError):
    """No session cookie configured."""

    error_type = "unauthenticated"


class SessionExpiredError(SetupError):
    """A cookie was sent but the server rejected the session."""

    error_type = "session_expired"


class NotFoundError(CliError):
    """Exit code 3 — the requested entity does not exist."""

    exit_code = 3
    error_type = "not_found"


class UsageError(CliError):
    """Exit code 4 — invalid or missing caller input. Raised before any network call."""

    exit_code = 4
    error_type = "usage"


class HTTPError(Exception):
    """Raised by _http_request for HTTP errors that callers want to handle."""

    def __init__(self, code, reason, body, headers=None):
        self.code = code
        self.reason = reason
        self.body = body
        self.headers = headers or {}
