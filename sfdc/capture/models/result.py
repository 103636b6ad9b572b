"""Finished query result emitted to sinks."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Final

from ..core.enums import CompletionKind, ResultShape
from .columns import resolve_column_names
from .replay import ReplayContext

# Explicit marker for "server has not declared a total". Compares greater
# than any row count, so completion checks need no special case.
UNBOUNDED: Final = math.inf


@dataclass(frozen=True)
class QueryResult:
    """A logical query result, reassembled from one or more pages.

    Attributes:
        query_id: Correlation id, or None for self-contained results
        rows: Row records in arrival order
        column_metadata: Opaque column descriptors (first non-empty seen)
        returned_row_count: Number of rows in ``rows``
        total_row_count: Server-declared total, or None if never declared
        completion: How the result was completed
        shape: Wire shape the rows arrived in
        replay_context: Context for fetching the remainder, if captured
    """

    query_id: str | None
    rows: list[Any]
    column_metadata: Any
    returned_row_count: int
    total_row_count: int | None
    completion: CompletionKind
    shape: ResultShape = ResultShape.ENVELOPED
    replay_context: ReplayContext | None = field(default=None, compare=False)

    @property
    def is_limited(self) -> bool:
        """True if the host delivered fewer rows than actually exist (or may exist)."""
        if self.completion == CompletionKind.LIMITED:
            return True
        if self.total_row_count is None:
            return False
        return self.returned_row_count < self.total_row_count

    @property
    def can_fetch_all(self) -> bool:
        return self.is_limited and self.replay_context is not None

    @property
    def column_names(self) -> list[str]:
        return resolve_column_names(self.column_metadata)

    @property
    def column_count(self) -> int:
        return len(self.column_names)
