"""Per-context result counter."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CountedResult:
    row_count: int
    column_count: int


class QueryCounter:
    """Counts finished results for one capture context.

    The count is what a badge next to the host page would display; the
    history keeps the shape of each counted result.
    """

    def __init__(self) -> None:
        self._history: list[CountedResult] = []

    def record(self, row_count: int, column_count: int) -> None:
        if row_count < 0 or column_count < 0:
            raise ValueError("row_count and column_count must be non-negative")
        self._history.append(CountedResult(row_count=row_count, column_count=column_count))

    @property
    def count(self) -> int:
        return len(self._history)

    @property
    def history(self) -> list[CountedResult]:
        return list(self._history)

    @property
    def last(self) -> CountedResult | None:
        return self._history[-1] if self._history else None

    def badge_text(self) -> str:
        """Count as short text; empty when nothing was counted."""
        return str(self.count) if self._history else ""

    def reset(self) -> None:
        self._history.clear()
