"""
agent-hoppscotch shared configuration, constants, and persisted state.
Standalone module — no imports from other project files.

Persisted state lives in two JSON files under ~/.hoppscotch/:
auth.json ({endpoint, cookie}) and defaults.json ({teamId, collectionId}).
Nothing here is process-wide mutable state: callers resolve an
EffectiveConfig once and pass it along.
"""

import json
import os
import tempfile
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Environment helpers
# ---------------------------------------------------------------------------

ENV_ENDPOINT = "HOPPSCOTCH_ENDPOINT"
ENV_COOKIE = "HOPPSCOTCH_COOKIE"
ENV_CONFIG_DIR = "HOPPSCOTCH_CONFIG_DIR"


def _env_bool(key, default=False):
    """Parse common boolean env formats."""
    raw = os.environ.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(key, default):
    """Parse integer env values with fallback."""
    raw = os.environ.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VERSION = "1.0.0"
CONTRACT_SCHEMA_VERSION = "1.0"

VALID_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")
VALID_AUTH_TYPES = ("none", "bearer", "basic", "api-key", "oauth2", "inherit")
VALID_BODY_TYPES = (
    "application/json",
    "application/x-www-form-urlencoded",
    "multipart/form-data",
    "text/plain",
    "none",
)
VALID_REALTIME_TYPES = ("websocket", "sse", "socketio", "mqtt")
VALID_MQTT_QOS = (0, 1, 2)
VALID_API_KEY_TARGETS = ("HEADERS", "QUERY_PARAMS")
VALID_REQUEST_KINDS = ("http", "graphql", "realtime")

ENVELOPE_VERSIONS = {"http": "5", "graphql": "4", "realtime": "1"}

# Substrings (case-sensitive) that mark a GraphQL error as a rejected session.
AUTH_ERROR_MARKERS = ("auth", "Unauthorized", "Not authenticated")

CLI_NAME = "agent-hoppscotch"

HTTP_TIMEOUT_SECONDS = _env_int("HOPPSCOTCH_HTTP_TIMEOUT_SECONDS", 30)
HTTP_MAX_RESPONSE_BYTES = _env_int("HOPPSCOTCH_HTTP_MAX_RESPONSE_BYTES", 5_000_000)
HTTP_LOG_ENABLED = _env_bool("HOPPSCOTCH_HTTP_LOG", False)

MCP_RESPONSE_MODE = os.environ.get("HOPPSCOTCH_MCP_RESPONSE_MODE", "legacy").strip().lower()
if MCP_RESPONSE_MODE not in {"legacy", "envelope"}:
    MCP_RESPONSE_MODE = "legacy"


# ---------------------------------------------------------------------------
# Persisted state
# ---------------------------------------------------------------------------


def default_config_dir(environ=None):
    environ = os.environ if environ is None else environ
    return environ.get(ENV_CONFIG_DIR) or os.path.join(os.path.expanduser("~"), ".hoppscotch")


def _write_json_atomic(path, data):
    """Write JSON to *path* (atomic write-then-rename, owner-only permissions)."""
    target_dir = os.path.dirname(path) or "."
    fd, tmp_path = tempfile.mkstemp(dir=target_dir, prefix=".hoppscotch_tmp_")
    try:
        with os.fdopen(fd, "w") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, path)
    except Exception:
        try:
            os.remove(tmp_path)
        except OSError:
            pass
        raise
    # Restrict to owner-only on Unix/Mac. No-op on Windows.
    try:
        os.chmod(path, 0o600)
    except (OSError, NotImplementedError):
        pass


class ConfigStore:
    """File-system port for the two persisted JSON files."""

    AUTH_FILENAME = "auth.json"
    DEFAULTS_FILENAME = "defaults.json"

    def __init__(self, config_dir=None):
        self.config_dir = config_dir or default_config_dir()

    @property
    def auth_path(self):
        return os.path.join(self.config_dir, self.AUTH_FILENAME)

    @property
    def defaults_path(self):
        return os.path.join(self.config_dir, self.DEFAULTS_FILENAME)

    def _ensure_dir(self):
        os.makedirs(self.config_dir, mode=0o700, exist_ok=True)

    @staticmethod
    def _read(path):
        if not os.path.exists(path):
            return {}
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            return {}
        return data if isinstance(data, dict) else {}

    def _merge_write(self, path, values):
        self._ensure_dir()
        merged = self._read(path)
        merged.update({k: v for k, v in values.items() if v is not None})
        _write_json_atomic(path, merged)
        return merged

    def read_auth(self):
        return self._read(self.auth_path)

    def write_auth(self, endpoint=None, cookie=None):
        return self._merge_write(self.auth_path, {"endpoint": endpoint, "cookie": cookie})

    def read_defaults(self):
        return self._read(self.defaults_path)

    def write_defaults(self, team_id=None, collection_id=None):
        return self._merge_write(
            self.defaults_path, {"teamId": team_id, "collectionId": collection_id}
        )

    def clear(self):
        """Remove both files. Returns the list of paths actually removed."""
        removed = []
        for path in (self.auth_path, self.defaults_path):
            if os.path.exists(path):
                os.remove(path)
                removed.append(path)
        return removed


# ---------------------------------------------------------------------------
# Effective configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EffectiveConfig:
    """Resolved {endpoint, cookie, teamId, collectionId} snapshot for one invocation."""

    endpoint: str | None = None
    cookie: str | None = None
    team_id: str | None = None
    collection_id: str | None = None


def _first(*values):
    for value in values:
        if value:
            return value
    return None


def resolve_config(overrides=None, environ=None, store=None):
    """Merge call-time overrides, environment and persisted files.

    Precedence per field: override > environment > persisted file.
    Team and collection ids have no environment source.
    """
    overrides = overrides or {}
    environ = os.environ if environ is None else environ
    store = store or ConfigStore(default_config_dir(environ))
    auth = store.read_auth()
    defaults = store.read_defaults()
    return EffectiveConfig(
        endpoint=_first(overrides.get("endpoint"), environ.get(ENV_ENDPOINT), auth.get("endpoint")),
        cookie=_first(overrides.get("cookie"), environ.get(ENV_COOKIE), auth.get("cookie")),
        team_id=_first(overrides.get("team"), defaults.get("teamId")),
        collection_id=_first(overrides.get("collection"), defaults.get("collectionId")),
    )
