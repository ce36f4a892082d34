"""Security: injection detection, output tagging, input validation."""

from __future__ import annotations

import re

from hoppscotch_cli import UsageError

_INJECTION_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (
        re.compile(r"^(system|assistant|user)\s*:", re.IGNORECASE | re.MULTILINE),
        "role label",
    ),
    (
        re.compile(
            r"<\s*/?\s*(system|instruction|admin|prompt|tool_call|function_call)",
            re.IGNORECASE,
        ),
        "XML-like directive tag",
    ),
    (
        re.compile(
            r"ignore\s+(all\s+)?(previous|prior|above)\s+(instructions|prompts|rules)",
            re.IGNORECASE,
        ),
        "override directive",
    ),
    (
        re.compile(
            r"you\s+are\s+now\s+(in\s+)?(admin|root|debug|developer|unrestricted)",
            re.IGNORECASE,
        ),
        "mode switching",
    ),
    (
        re.compile(r"(execute|call|invoke|run)\s+the\s+(tool|function|command)", re.IGNORECASE),
        "tool invocation directive",
    ),
]


def _check_injection(text: str) -> list[str]:
    """Check text for common prompt injection patterns.

    Returns list of matched pattern descriptions (empty if clean).
    Short strings (< 10 chars) are skipped.
    """
    if len(text) < 10:
        return []
    return [desc for pattern, desc in _INJECTION_PATTERNS if pattern.search(text)]


def _tag_user_text(text: str | None) -> str | None:
    """Wrap user-authored text in [USER_DATA] boundary markers."""
    if text is None:
        return None
    return f"[USER_DATA]{text}[/USER_DATA]"


# Names and titles are authored by workspace members, not by this tool.
_USER_TEXT_FIELDS = ("title", "name", "path")


def _tag_fields(entity: dict, warnings: list[str], prefix: str = "") -> dict:
    out = dict(entity)
    for field in _USER_TEXT_FIELDS:
        if isinstance(out.get(field), str):
            for desc in _check_injection(out[field]):
                warnings.append(f"{prefix}{field}: {desc}")
            out[field] = _tag_user_text(out[field])
    return out


def _sanitize_entity(entity: dict) -> dict:
    """Tag user-editable fields and add _safety_warnings if injection detected."""
    if not isinstance(entity, dict):
        return entity
    warnings: list[str] = []
    out = _tag_fields(entity, warnings)
    if isinstance(out.get("children"), list):
        out["children"] = [
            _tag_fields(c, warnings, "child.") if isinstance(c, dict) else c
            for c in out["children"]
        ]
    if isinstance(out.get("envelope"), dict):
        out["envelope"] = _tag_fields(out["envelope"], warnings, "envelope.")
    if warnings:
        out["_safety_warnings"] = warnings
    return out


def _sanitize_result(result):
    """Apply _sanitize_entity to a dict result or to each row of a list result."""
    if isinstance(result, list):
        return [_sanitize_entity(r) for r in result]
    if isinstance(result, dict) and result.get("ok") is not False:
        return _sanitize_entity(result)
    return result


_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_INPUT_LIMITS = {
    "title": 500,
    "name": 500,
    "term": 500,
    "url": 8_000,
    "query": 200_000,
    "body": 1_000_000,
}


def _validate_input(text: str, field: str) -> str:
    """Strip control characters and enforce length limits.

    Raises UsageError if text is not a string or exceeds the field limit.
    """
    if not isinstance(text, str):
        raise UsageError(f"[ERROR] {field} must be a string")
    cleaned = _CONTROL_RE.sub("", text)
    limit = _INPUT_LIMITS.get(field, 50_000)
    if len(cleaned) > limit:
        raise UsageError(f"[ERROR] {field} exceeds maximum length of {limit} characters")
    return cleaned
