"""
Shared pure-utility functions for agent-hoppscotch.

These helpers have no business logic and no side effects.
They are used across envelopes.py, client.py, and formatters.
"""

import json

from hoppscotch_cli.exceptions import UsageError


def _safe_json_parse(text, context="input"):
    """Parse JSON with friendly error message on failure."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise UsageError(
            f"[ERROR] Invalid JSON in {context}: {e.msg} at position {e.pos}"
        ) from None


def _try_json(text):
    """Parse JSON text, returning None instead of raising."""
    if not isinstance(text, str):
        return None
    try:
        return json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None


def _contains_ci(haystack, needle):
    """Case-insensitive substring test that tolerates None."""
    return (needle or "").lower() in (haystack or "").lower()


def _mask_token(token):
    """Show only first 6 chars of a token for safe logging."""
    if not token:
        return ""
    return token[:6] + "..." if len(token) > 6 else token
