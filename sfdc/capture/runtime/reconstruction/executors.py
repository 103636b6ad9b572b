"""Sequential page execution.

The PageExecutor drives one reconstruction run: fetch a page, append its
rows, report progress, check termination, plan the next page. Protocol
variants only supply ``fetch_page`` and ``plan_next``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from time import perf_counter
from typing import Any

from ...core.enums import StopReason
from .definitions import (
    PageData,
    PagePlan,
    ProgressCallback,
    ReconstructionProgress,
    ReconstructionResult,
)
from .telemetry import log_page_completed, log_page_error, log_reconstruction_complete


def stop_reason(plan: PagePlan, page: PageData, rows_fetched: int, total: int | None) -> StopReason | None:
    """Termination check after a page; first match wins."""
    if total is not None and rows_fetched >= total:
        return StopReason.TOTAL_REACHED
    if plan.limit is not None and len(page.rows) < plan.limit:
        return StopReason.SHORT_PAGE
    if not page.rows:
        return StopReason.EMPTY_PAGE
    if page.done:
        return StopReason.DONE
    return None


class PageExecutor:
    """Executes pages strictly one after another and aggregates rows.

    At most one page request is outstanding at any time, which keeps
    offset bookkeeping trivially consistent. Any exception from
    ``fetch_page`` aborts the run; rows gathered so far are discarded with
    the executor's locals, so callers see either a full result or an error.
    """

    def __init__(self, *, endpoint_id: str = "unknown") -> None:
        self._endpoint_id = endpoint_id

    async def execute(
        self,
        *,
        first: PagePlan,
        fetch_page: Callable[[PagePlan], Awaitable[PageData]],
        plan_next: Callable[[PagePlan, PageData], PagePlan],
        seed_rows: Iterable[Any] = (),
        total_hint: int | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ReconstructionResult:
        """Run pages until a termination condition matches.

        Args:
            first: Plan for the first page
            fetch_page: Async function that fetches and normalizes one page
            plan_next: Builds the next plan from the current plan and page
            seed_rows: Rows already held by the caller, kept in front
            total_hint: Best-known total before the run starts
            on_progress: Called after every page

        Returns:
            ReconstructionResult with every row
        """
        rows: list[Any] = list(seed_rows)
        total = total_hint
        column_metadata: Any = None
        pages_fetched = 0
        plan = first
        run_start = perf_counter()

        while True:
            page_start = perf_counter()
            try:
                page = await fetch_page(plan)
            except Exception as e:
                log_page_error(
                    endpoint_id=self._endpoint_id,
                    page_index=plan.page_index,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                raise
            pages_fetched += 1

            rows.extend(page.rows)
            if page.declared_total is not None and (total is None or page.declared_total > total):
                total = page.declared_total
            if column_metadata is None and page.column_metadata:
                column_metadata = page.column_metadata

            log_page_completed(
                endpoint_id=self._endpoint_id,
                page_index=plan.page_index,
                page_rows=len(page.rows),
                rows_fetched=len(rows),
                total_row_count=total,
                latency_ms=(perf_counter() - page_start) * 1000.0,
            )
            if on_progress is not None:
                on_progress(
                    ReconstructionProgress(
                        page_index=plan.page_index,
                        rows_fetched=len(rows),
                        total_row_count=total,
                        batch=list(page.rows),
                    )
                )

            reason = stop_reason(plan, page, len(rows), total)
            if reason is not None:
                break
            plan = plan_next(plan, page)

        result = ReconstructionResult(
            rows=rows,
            total_row_count=total,
            pages_fetched=pages_fetched,
            stop_reason=reason,
            column_metadata=column_metadata,
        )
        log_reconstruction_complete(
            endpoint_id=self._endpoint_id,
            result=result,
            total_latency_ms=(perf_counter() - run_start) * 1000.0,
        )
        return result
