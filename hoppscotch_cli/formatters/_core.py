"""Core output dispatchers."""

import json


def pretty_print(data):
    print(json.dumps(data, indent=2, ensure_ascii=False))


def output(data, formatter=None, fmt="json"):
    """Output data in requested format."""
    if fmt == "table" and formatter:
        print(formatter(data))
    elif fmt == "table" and isinstance(data, str):
        print(data)
    else:
        pretty_print(data)


def mutation_response(action, entity_id=None, details=None, data=None, fmt="json"):
    """Print a mutation confirmation.

    JSON mode prints the client result as-is; table mode prints a one-line
    ``OK: <action>: <id>: <details>`` summary.
    """
    if fmt == "json":
        pretty_print(data if data is not None else {"ok": True, "action": action, "id": entity_id})
        return
    parts = [action]
    if entity_id:
        parts.append(str(entity_id))
    if details:
        parts.append(details)
    print(f"OK: {': '.join(parts)}")
