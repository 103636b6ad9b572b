"""Capture session: the wiring between interception and finished results.

Architecture:
    CaptureSession owns every stateful piece of one capture context:
    - InterceptingTransport around the host's transport
    - ResponseClassifier with its PreflightGate
    - AccumulatorStore with the injected Scheduler
    - Reconstructor bound to the raw (unobserved) transport
    - Result sinks, the notifier, the counter and the formatter

    Finished results (completed, flushed, self-contained or reconstructed)
    all leave through ``emit()``.

Design Decisions:
    - No module-level state: two sessions in one process never share
      accumulators, gates or timers
    - Collaborators are Protocols; any object with the right methods works
    - Sink fan-out is isolated per sink: one failing sink is logged and the
      others still receive the result
    - Counter and notifier failures are logged and counted, never raised
      out of emit()
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any, Protocol

from ..core.config import CaptureConfig
from ..core.enums import ClassificationKind, CompletionKind, MergeStatus
from ..core.exceptions import ProtocolError
from ..core.scheduler import AsyncioScheduler, Scheduler
from ..models import AuraReplayContext, Exchange, QueryResult
from .accumulator import AccumulatorStore
from .classifier import Classification, ResponseClassifier
from .interceptor import InterceptingTransport
from .reconstruction import ProgressCallback, Reconstructor
from .transport import HTTPClient, Transport

logger = logging.getLogger(__name__)

FetchAll = Callable[[], Awaitable[QueryResult]]


class ResultSink(Protocol):
    """Receives every finished result."""

    def publish(self, result: QueryResult) -> None: ...


class Formatter(Protocol):
    """Renders rows as text for download."""

    def format(self, rows: list[Any], column_metadata: Any) -> str: ...


class Notifier(Protocol):
    """Tells the user a result is ready.

    ``on_fetch_all`` is None unless the result is limited and replayable.
    """

    def notify(
        self,
        result: QueryResult,
        on_download: Callable[[], str],
        on_fetch_all: FetchAll | None,
    ) -> None: ...


class CounterSink(Protocol):
    """Counts finished results (row and column totals)."""

    def record(self, row_count: int, column_count: int) -> None: ...


@dataclass
class SessionMetrics:
    """Counters for one capture session."""

    results_emitted: int = 0
    results_reconstructed: int = 0
    exchanges_ignored: int = 0
    sink_errors: int = 0
    collaborator_errors: int = 0


class CaptureSession:
    """Observes a host transport and turns query pages into finished results."""

    def __init__(
        self,
        transport: Transport | None = None,
        *,
        config: CaptureConfig | None = None,
        scheduler: Scheduler | None = None,
        sinks: Iterable[ResultSink] = (),
        notifier: Notifier | None = None,
        counter: CounterSink | None = None,
        formatter: Formatter | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            transport: Host transport to observe (defaults to a new HTTPClient)
            config: Session tunables (defaults to CaptureConfig())
            scheduler: Timer source for inactivity flushes (defaults to asyncio)
            sinks: Result sinks receiving every finished result
            notifier: Optional user notification collaborator
            counter: Optional result counter
            formatter: Formatter used by ``export()``
        """
        self._config = config or CaptureConfig()
        raw = transport or HTTPClient(timeout=self._config.http_timeout)
        self._transport = InterceptingTransport(raw, self.observe)
        self._classifier = ResponseClassifier(gated_families=self._config.gated_families)
        self._store = AccumulatorStore(
            scheduler or AsyncioScheduler(),
            flush_delay=self._config.flush_delay,
            on_flush=self.emit,
        )
        self._reconstructor = Reconstructor(raw, batch_size=self._config.batch_size)
        self._sinks: list[ResultSink] = list(sinks)
        self._notifier = notifier
        self._counter = counter
        self._formatter = formatter
        self._metrics = SessionMetrics()

    @property
    def transport(self) -> InterceptingTransport:
        """Transport the host should issue its requests through."""
        return self._transport

    @property
    def classifier(self) -> ResponseClassifier:
        return self._classifier

    @property
    def store(self) -> AccumulatorStore:
        return self._store

    @property
    def config(self) -> CaptureConfig:
        return self._config

    @property
    def metrics(self) -> SessionMetrics:
        return self._metrics

    def add_sink(self, sink: ResultSink) -> None:
        self._sinks.append(sink)
        logger.info(f"Added sink: {sink.__class__.__name__}")

    def remove_sink(self, sink: ResultSink) -> None:
        if sink in self._sinks:
            self._sinks.remove(sink)
            logger.info(f"Removed sink: {sink.__class__.__name__}")

    def observe(self, exchange: Exchange) -> None:
        """Route one observed exchange (the interceptor's callback)."""
        classification = self._classifier.classify(exchange)

        if classification.kind == ClassificationKind.IGNORE:
            self._metrics.exchanges_ignored += 1
            logger.debug("Ignored %s: %s", exchange.url, classification.reason)
            return

        if classification.kind == ClassificationKind.MERGE:
            outcome = self._store.merge(
                classification.query_id,
                classification.rows,
                declared_total=classification.declared_total,
                metadata=classification.column_metadata,
                replay_context=classification.replay_context,
                shape=classification.shape,
            )
            if outcome.status == MergeStatus.COMPLETE and outcome.result is not None:
                self.emit(outcome.result)
            return

        self.emit(self._self_contained_result(classification))

    def emit(self, result: QueryResult) -> None:
        """Deliver a finished result to sinks, the counter and the notifier."""
        self._metrics.results_emitted += 1
        logger.info(
            "Result ready",
            extra={
                "query_id": result.query_id,
                "rows": result.returned_row_count,
                "total": result.total_row_count,
                "completion": result.completion.value,
            },
        )

        for sink in self._sinks:
            try:
                sink.publish(result)
            except Exception as e:
                self._metrics.sink_errors += 1
                logger.error(f"Sink {sink.__class__.__name__} failed: {e}", exc_info=True)

        if self._counter is not None:
            try:
                self._counter.record(result.returned_row_count, result.column_count)
            except Exception as e:
                self._metrics.collaborator_errors += 1
                logger.error(f"Counter {self._counter.__class__.__name__} failed: {e}", exc_info=True)

        if self._notifier is not None:
            on_fetch_all = self._fetch_all_callback(result) if result.can_fetch_all else None
            try:
                self._notifier.notify(result, lambda: self.export(result), on_fetch_all)
            except Exception as e:
                self._metrics.collaborator_errors += 1
                logger.error(f"Notifier {self._notifier.__class__.__name__} failed: {e}", exc_info=True)

    async def fetch_all(
        self,
        result: QueryResult,
        on_progress: ProgressCallback | None = None,
        *,
        seed_rows: list[Any] | None = None,
    ) -> QueryResult:
        """Retrieve every row of a limited result and emit the reconstruction.

        By default Aura replays start over at offset 0 and continuation
        replays keep the records already captured and fetch only the rest.

        Args:
            result: Limited result carrying a replay context
            on_progress: Called after every fetched page
            seed_rows: Rows already held from an earlier attempt. An Aura
                replay resumes at offset ``len(seed_rows)``.

        Raises:
            ProtocolError: If the result carries no replay context
            AuthError, ServerError, ParseError, TransportError: On a failed page
        """
        context = result.replay_context
        if context is None:
            raise ProtocolError("Result has no replay context")

        if seed_rows is None:
            seed_rows = [] if isinstance(context, AuraReplayContext) else list(result.rows)
        else:
            seed_rows = list(seed_rows)
        logger.info(
            "Fetching all rows",
            extra={
                "query_id": result.query_id,
                "seed_rows": len(seed_rows),
                "total": result.total_row_count,
            },
        )
        reconstruction = await self._reconstructor.run(
            context,
            seed_rows=seed_rows,
            total_hint=result.total_row_count,
            on_progress=on_progress,
        )

        rebuilt = QueryResult(
            query_id=result.query_id,
            rows=reconstruction.rows,
            column_metadata=result.column_metadata or reconstruction.column_metadata,
            returned_row_count=reconstruction.row_count,
            total_row_count=reconstruction.total_row_count,
            completion=CompletionKind.RECONSTRUCTED,
            shape=result.shape,
        )
        self._metrics.results_reconstructed += 1
        self.emit(rebuilt)
        return rebuilt

    def export(self, result: QueryResult) -> str:
        """Render a result with the session's formatter.

        Raises:
            ValueError: If the session has no formatter
        """
        if self._formatter is None:
            raise ValueError("No formatter configured for this session")
        return self._formatter.format(result.rows, result.column_metadata)

    async def close(self) -> None:
        """Drop pending accumulators and close the transport."""
        self._store.close()
        self._classifier.gate.reset()
        await self._transport.close()

    async def __aenter__(self) -> CaptureSession:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _fetch_all_callback(self, result: QueryResult) -> FetchAll:
        async def fetch() -> QueryResult:
            return await self.fetch_all(result)

        return fetch

    @staticmethod
    def _self_contained_result(classification: Classification) -> QueryResult:
        rows = classification.rows
        total = classification.declared_total
        return QueryResult(
            query_id=classification.query_id,
            rows=list(rows),
            column_metadata=classification.column_metadata,
            returned_row_count=len(rows),
            total_row_count=total if total is not None else len(rows),
            completion=(
                CompletionKind.SELF_CONTAINED if classification.done else CompletionKind.LIMITED
            ),
            shape=classification.shape,
            replay_context=classification.replay_context,
        )
