"""Low-level table rendering helpers (stdlib only)."""

import re

_CONTROL_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]|[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

PLACEHOLDER = "N/A"


def _trunc(s, maxlen):
    """Truncate string with ellipsis indicator."""
    if not s:
        return ""
    return s[: maxlen - 1] + "…" if len(s) > maxlen else s


def _sanitize_str(s):
    """Strip ANSI escape sequences and control chars from table output.
    Preserves newlines (\\n) and tabs (\\t)."""
    if not s:
        return s
    return _CONTROL_RE.sub("", str(s))


def _or_na(value):
    """Display value for a field that may be missing from stored data."""
    if value is None or value == "":
        return PLACEHOLDER
    return str(value)


def _table(columns, rows, footer=None):
    """Build a formatted table string.
    columns: list of (name, width) tuples. Last column has no width (fills).
    rows: list of tuples matching columns.
    footer: optional footer line."""
    header = " ".join(
        name if i == len(columns) - 1 else f"{name:<{width}}"
        for i, (name, width) in enumerate(columns)
    )
    lines = [header, "-" * max(len(header), 72)]
    for row in rows:
        cells = []
        for i, val in enumerate(row):
            safe = _sanitize_str(val) if isinstance(val, str) else str(val)
            cells.append(safe if i == len(columns) - 1 else f"{safe:<{columns[i][1]}}")
        lines.append(" ".join(cells))
    if footer:
        lines.append(f"\n{footer}")
    return "\n".join(lines)
