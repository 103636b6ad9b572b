"""Per-query page accumulation with quiet-period completion.

The host fetches a query in several pages sharing one queryId. The store
merges them and decides when the result is finished:

    - Declared total reached: finished immediately, as COMPLETE.
    - Otherwise a flush timer is (re)armed on every page. If it fires with
      no intervening page, the result is finished as LIMITED with whatever
      arrived. The host can cap a result without any terminal signal, and
      real multi-page delivery finishes within milliseconds, so a short quiet
      period separates "capped" from "more pages coming".

Invariants:
    - At most one live accumulator per queryId.
    - ``len(rows) == returned_row_count``.
    - An accumulator leaves the store exactly once, at completion or at the
      timer, and its timer is cancelled whenever a page arrives or it
      completes.
    - ``total_row_count`` never decreases.

Pages for one queryId are assumed to arrive in order and only once.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..core.config import DEFAULT_FLUSH_DELAY
from ..core.enums import CompletionKind, MergeStatus, ResultShape
from ..core.scheduler import Scheduler, TimerHandle
from ..models import UNBOUNDED, QueryResult, ReplayContext

logger = logging.getLogger(__name__)

FlushCallback = Callable[[QueryResult], None]


@dataclass
class QueryAccumulator:
    """Mutable merge state for one queryId."""

    query_id: str
    shape: ResultShape = ResultShape.ENVELOPED
    rows: list[Any] = field(default_factory=list)
    column_metadata: Any = None
    returned_row_count: int = 0
    total_row_count: float = UNBOUNDED
    replay_context: ReplayContext | None = None
    pending_flush: TimerHandle | None = None

    @property
    def is_complete(self) -> bool:
        return self.returned_row_count >= self.total_row_count

    def cancel_flush(self) -> None:
        if self.pending_flush is not None:
            self.pending_flush.cancel()
            self.pending_flush = None

    def snapshot(self, completion: CompletionKind) -> QueryResult:
        return QueryResult(
            query_id=self.query_id,
            rows=list(self.rows),
            column_metadata=self.column_metadata,
            returned_row_count=self.returned_row_count,
            total_row_count=None if self.total_row_count == UNBOUNDED else int(self.total_row_count),
            completion=completion,
            shape=self.shape,
            replay_context=self.replay_context,
        )


@dataclass(frozen=True)
class MergeOutcome:
    """Result of one merge: COMPLETE carries the finished result."""

    status: MergeStatus
    query_id: str
    returned_row_count: int
    result: QueryResult | None = None


class AccumulatorStore:
    """Keyed accumulators with scheduler-driven inactivity flushes."""

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        flush_delay: float = DEFAULT_FLUSH_DELAY,
        on_flush: FlushCallback | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            scheduler: Schedules the inactivity flush timers
            flush_delay: Quiet period (seconds) before a capped result is flushed
            on_flush: Receives results finished by the timer (LIMITED)
        """
        self._scheduler = scheduler
        self._flush_delay = flush_delay
        self._on_flush = on_flush
        self._accumulators: dict[str, QueryAccumulator] = {}

    def __contains__(self, query_id: str) -> bool:
        return query_id in self._accumulators

    def __len__(self) -> int:
        return len(self._accumulators)

    def pending(self) -> list[str]:
        """Query ids still accumulating."""
        return list(self._accumulators)

    def merge(
        self,
        query_id: str,
        rows: list[Any],
        declared_total: int | None = None,
        metadata: Any = None,
        replay_context: ReplayContext | None = None,
        *,
        shape: ResultShape = ResultShape.ENVELOPED,
    ) -> MergeOutcome:
        """Merge one page into the accumulator for ``query_id``.

        Returns:
            MergeOutcome; COMPLETE outcomes carry the finished result and the
            accumulator is already gone from the store
        """
        acc = self._accumulators.get(query_id)
        if acc is None:
            acc = QueryAccumulator(query_id=query_id, shape=shape)
            self._accumulators[query_id] = acc
            logger.debug("Accumulator created", extra={"query_id": query_id})

        acc.rows.extend(rows)
        acc.returned_row_count += len(rows)

        if declared_total is not None and (
            acc.total_row_count == UNBOUNDED or declared_total > acc.total_row_count
        ):
            acc.total_row_count = declared_total

        if not acc.column_metadata and metadata:
            acc.column_metadata = metadata

        if acc.replay_context is None and replay_context is not None:
            acc.replay_context = replay_context

        if acc.is_complete:
            acc.cancel_flush()
            del self._accumulators[query_id]
            logger.info(
                "Query complete",
                extra={"query_id": query_id, "rows": acc.returned_row_count},
            )
            return MergeOutcome(
                status=MergeStatus.COMPLETE,
                query_id=query_id,
                returned_row_count=acc.returned_row_count,
                result=acc.snapshot(CompletionKind.COMPLETE),
            )

        acc.cancel_flush()
        acc.pending_flush = self._scheduler.call_later(
            self._flush_delay, lambda: self._flush(query_id, acc)
        )
        return MergeOutcome(
            status=MergeStatus.PENDING,
            query_id=query_id,
            returned_row_count=acc.returned_row_count,
        )

    def _flush(self, query_id: str, acc: QueryAccumulator) -> None:
        # Stale timer for an accumulator that already left the store
        if self._accumulators.get(query_id) is not acc:
            return
        del self._accumulators[query_id]
        acc.pending_flush = None

        if acc.returned_row_count == 0:
            logger.debug("Dropping empty accumulator", extra={"query_id": query_id})
            return

        logger.info(
            "Query flushed after inactivity",
            extra={
                "query_id": query_id,
                "rows": acc.returned_row_count,
                "total": None if acc.total_row_count == UNBOUNDED else acc.total_row_count,
            },
        )
        if self._on_flush is not None:
            self._on_flush(acc.snapshot(CompletionKind.LIMITED))

    def close(self) -> None:
        """Cancel every pending flush and drop all state without emitting."""
        for acc in self._accumulators.values():
            acc.cancel_flush()
        self._accumulators.clear()
