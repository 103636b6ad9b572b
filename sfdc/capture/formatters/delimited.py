"""Delimited-text (CSV) export for both result shapes.

Enveloped rows arrive as ``{"row": [v1, v2, ...]}`` (or bare lists) and are
written positionally under the resolved column names. Tabular rows are REST
records: the ``attributes`` key is dropped, the remaining keys of the first
record become the header, and nested relationship objects are written as
JSON text.

Output starts with a UTF-8 BOM by default so spreadsheet tools detect the
encoding.
"""

from __future__ import annotations

import csv
import io
import json
from datetime import UTC, datetime
from typing import Any

from ..connectors.rest.config import RECORD_ATTRIBUTES_KEY
from ..core.enums import ResultShape
from ..models import QueryResult, record_columns, resolve_column_names

BOM = "\ufeff"
LINE_TERMINATOR = "\r\n"


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, dict | list):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return value


def _is_record(row: Any) -> bool:
    return isinstance(row, dict) and "row" not in row


def _row_values(row: Any) -> list[Any]:
    if isinstance(row, dict) and isinstance(row.get("row"), list):
        return row["row"]
    if isinstance(row, list | tuple):
        return list(row)
    return [row]


class CsvFormatter:
    """Formats result rows as CSV text."""

    def __init__(self, *, delimiter: str = ",", bom: bool = True) -> None:
        if len(delimiter) != 1:
            raise ValueError("delimiter must be a single character")
        self._delimiter = delimiter
        self._bom = bom

    def format(self, rows: list[Any], column_metadata: Any) -> str:
        """Render rows under a header resolved from ``column_metadata``.

        Record rows (dicts without a ``row`` key) use their own keys as the
        header when the metadata resolves to nothing.
        """
        buffer = io.StringIO()
        writer = csv.writer(
            buffer,
            delimiter=self._delimiter,
            lineterminator=LINE_TERMINATOR,
            quoting=csv.QUOTE_MINIMAL,
        )

        if rows and _is_record(rows[0]):
            columns = resolve_column_names(column_metadata) or record_columns(rows)
            writer.writerow(columns)
            for record in rows:
                writer.writerow([_cell(record.get(col)) for col in columns])
        else:
            columns = resolve_column_names(column_metadata)
            if columns:
                writer.writerow(columns)
            for row in rows:
                writer.writerow([_cell(v) for v in _row_values(row)])

        text = buffer.getvalue()
        return BOM + text if self._bom else text


def default_filename(result: QueryResult, *, now: datetime | None = None) -> str:
    """Download filename for a result.

    Enveloped results use the last eight characters of the query id;
    tabular results use the lower-cased object type of the first record.
    """
    ts = (now or datetime.now(UTC)).strftime("%Y-%m-%d-%H-%M-%S")

    if result.shape == ResultShape.TABULAR:
        object_type = "soql"
        if result.rows and isinstance(result.rows[0], dict):
            attributes = result.rows[0].get(RECORD_ATTRIBUTES_KEY) or {}
            object_type = str(attributes.get("type") or object_type)
        return f"{object_type.lower()}-query-{ts}.csv"

    short_id = str(result.query_id)[-8:] if result.query_id else "query"
    return f"dc-query-{short_id}-{ts}.csv"
