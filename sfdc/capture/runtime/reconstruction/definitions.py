"""Page plans, page data, progress events and run results."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ...core.enums import StopReason


@dataclass(frozen=True)
class PagePlan:
    """Plan for a single page.

    Attributes:
        page_index: Zero-based index of this page in the run
        limit: Rows requested (None when the server picks the page size)
        offset: Row offset for offset-based protocols
        locator: Page URL for locator-based protocols
    """

    page_index: int = 0
    limit: int | None = None
    offset: int = 0
    locator: str | None = None


@dataclass(frozen=True)
class PageData:
    """One fetched page, normalized across protocols.

    Attributes:
        rows: Rows in this page
        declared_total: Total row count the server reported, if any
        done: Server says this is the last page
        next_locator: Locator of the following page, if any
        column_metadata: Column descriptors, if the page carries them
    """

    rows: list[Any]
    declared_total: int | None = None
    done: bool = False
    next_locator: str | None = None
    column_metadata: Any = None


@dataclass(frozen=True)
class ReconstructionProgress:
    """Progress event emitted after every page.

    Attributes:
        page_index: Index of the page just fetched
        rows_fetched: Rows accumulated so far (seed rows included)
        total_row_count: Best-known total, or None if unknown
        batch: Rows of the page just fetched
    """

    page_index: int
    rows_fetched: int
    total_row_count: int | None
    batch: list[Any] = field(default_factory=list)


ProgressCallback = Callable[[ReconstructionProgress], None]


@dataclass
class ReconstructionResult:
    """Result of a complete reconstruction run.

    Attributes:
        rows: Every row, seed rows first
        total_row_count: Best-known total at the end of the run
        pages_fetched: Number of page requests issued
        stop_reason: Termination condition that ended the run
        column_metadata: First column metadata seen in the fetched pages
    """

    rows: list[Any]
    total_row_count: int | None
    pages_fetched: int
    stop_reason: StopReason
    column_metadata: Any = None

    @property
    def row_count(self) -> int:
        return len(self.rows)
