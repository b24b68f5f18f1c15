"""
Section Kernel -- Schema Merger

Pure functions over a theme's aggregate settings schema (a JSON array of
objects) and one section's schema fragment (a JSON object with a `name`).

Merge policy is append-if-absent by `name`: if an entry with the fragment's
name is already present the array comes back unchanged, first write wins.
Re-installs are idempotent, but an edited fragment is NOT propagated to a
theme that already has the old entry. Callers that need the update must
remove the stale entry first.

No IO. Inputs are never mutated.
"""

from __future__ import annotations

import json
from typing import Any

from engine.kernel.errors import SchemaMergeError


def parse_fragment(text: str) -> dict[str, Any]:
    """
    Parse a section's schema.json.

    Raises:
        SchemaMergeError: if the text is not a JSON object with a non-empty
            string `name`
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaMergeError(f"schema fragment is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise SchemaMergeError("schema fragment must be a JSON object")
    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise SchemaMergeError("schema fragment has no 'name'")
    return data


def parse_settings_schema(text: str) -> list[Any]:
    """
    Parse the theme's config/settings_schema.json.

    Raises:
        SchemaMergeError: if the text is not a JSON array
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaMergeError(f"settings schema is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise SchemaMergeError("settings schema must be a JSON array")
    return data


def has_entry(schema: list[Any], name: str) -> bool:
    """True if any object in schema carries this name."""
    return any(isinstance(item, dict) and item.get("name") == name for item in schema)


def count_entries(schema: list[Any], name: str) -> int:
    return sum(1 for item in schema if isinstance(item, dict) and item.get("name") == name)


def merge_fragment(schema: list[Any], fragment: dict[str, Any]) -> tuple[list[Any], bool]:
    """
    Append fragment to schema unless an entry with the same name exists.

    Returns:
        (merged, changed). When changed is False, merged is an equal copy of
        schema and nothing needs to be written back.
    """
    name = fragment.get("name")
    if not isinstance(name, str) or not name:
        raise SchemaMergeError("schema fragment has no 'name'")

    merged = list(schema)
    if has_entry(merged, name):
        return merged, False
    merged.append(fragment)
    return merged, True


def dump_settings_schema(schema: list[Any]) -> str:
    """Serialize the aggregate schema the way themes store it (2-space indent)."""
    return json.dumps(schema, indent=2, ensure_ascii=False)
