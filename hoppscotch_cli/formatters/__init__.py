"""Output formatting package for agent-hoppscotch.

Re-exports all public names so consumers can do:
    from hoppscotch_cli.formatters import format_teams_table
"""

from hoppscotch_cli.formatters._core import (
    mutation_response,
    output,
    pretty_print,
)
from hoppscotch_cli.formatters._entities import (
    format_collection_detail,
    format_collections_table,
    format_environment_detail,
    format_environments_table,
    format_status,
    format_team_detail,
    format_teams_table,
)
from hoppscotch_cli.formatters._requests import (
    format_request_detail,
    format_request_search,
    format_requests_table,
)
from hoppscotch_cli.formatters._table import (
    _CONTROL_RE,
    PLACEHOLDER,
    _or_na,
    _sanitize_str,
    _table,
    _trunc,
)

__all__ = [
    "_CONTROL_RE",
    "PLACEHOLDER",
    "_or_na",
    "_sanitize_str",
    "_table",
    "_trunc",
    "format_collection_detail",
    "format_collections_table",
    "format_environment_detail",
    "format_environments_table",
    "format_request_detail",
    "format_request_search",
    "format_requests_table",
    "format_status",
    "format_team_detail",
    "format_teams_table",
    "mutation_response",
    "output",
    "pretty_print",
]
