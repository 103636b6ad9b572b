"""Column-name resolution for opaque column metadata."""

from __future__ import annotations

from typing import Any

# Data Cloud has shipped each of these across API versions.
_COLUMN_NAME_KEYS = ("name", "label", "displayName", "columnName", "fieldName")
_FIELD_NAME_KEYS = ("name", "label", "fieldName")


def _first_name(entry: Any, keys: tuple[str, ...]) -> str:
    if isinstance(entry, dict):
        for key in keys:
            value = entry.get(key)
            if value is not None:
                return str(value)
    return str(entry)


def resolve_column_names(metadata: Any) -> list[str]:
    """Extract ordered column names from whatever shape the metadata has.

    Accepts a list of column descriptors (or plain names), or an object with
    a ``fields`` list. Anything else yields no columns.
    """
    if isinstance(metadata, list):
        return [_first_name(col, _COLUMN_NAME_KEYS) for col in metadata]
    if isinstance(metadata, dict) and isinstance(metadata.get("fields"), list):
        return [_first_name(f, _FIELD_NAME_KEYS) for f in metadata["fields"]]
    return []


def record_columns(records: list[Any]) -> list[str]:
    """Column names of REST query records: first record's keys minus ``attributes``."""
    if not records or not isinstance(records[0], dict):
        return []
    return [key for key in records[0] if key != "attributes"]
