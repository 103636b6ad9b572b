"""Query-resubmission variant: replays an Aura query action with LIMIT/OFFSET."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from ...connectors.aura import (
    AuraPageAdapter,
    build_replay_request,
    paginate_query,
    strip_pagination,
)
from ...core.config import DEFAULT_BATCH_SIZE
from ...core.exceptions import ProtocolError, error_for_status
from ...models import AuraReplayContext
from ..transport import Transport
from .definitions import PageData, PagePlan, ProgressCallback, ReconstructionResult
from .executors import PageExecutor

logger = logging.getLogger(__name__)


class QueryResubmissionPaginator:
    """Fetches a Data Cloud query in explicit LIMIT/OFFSET batches.

    The captured query has any trailing LIMIT/OFFSET removed, then each page
    resubmits ``<base> LIMIT <batch> OFFSET <offset>`` through the same
    action descriptor with the original correlation tokens.
    """

    endpoint_id = "aura.query"

    def __init__(self, transport: Transport, *, batch_size: int = DEFAULT_BATCH_SIZE) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self._transport = transport
        self._batch_size = batch_size
        self._adapter = AuraPageAdapter()

    async def run(
        self,
        context: AuraReplayContext,
        *,
        seed_rows: Iterable[Any] = (),
        total_hint: int | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ReconstructionResult:
        """Fetch every row of the captured query.

        Args:
            context: Captured Aura action
            seed_rows: Rows already held; the first page starts at their count
            total_hint: Best-known total before the run
            on_progress: Called after every page

        Raises:
            ProtocolError: If the captured query is empty
            AuthError, ServerError, ParseError, TransportError: On a failed page
        """
        base_query = strip_pagination(context.query)
        if not base_query:
            raise ProtocolError("Captured Aura query is empty")

        seed = list(seed_rows)
        logger.info(
            "Resubmitting query in batches",
            extra={"batch_size": self._batch_size, "start_offset": len(seed)},
        )

        async def fetch_page(plan: PagePlan) -> PageData:
            request = build_replay_request(
                context,
                query=paginate_query(base_query, plan.limit, plan.offset),
                row_limit=plan.limit,
                action_id=f"{plan.page_index + 1};a",
            )
            response = await self._transport.send(request)
            if not response.ok:
                raise error_for_status(
                    response.status, f"Aura replay page {plan.page_index} returned {response.status}"
                )
            page = self._adapter.parse(response.json())
            return PageData(
                rows=page.data_rows,
                declared_total=page.row_count,
                column_metadata=page.metadata,
            )

        def plan_next(plan: PagePlan, page: PageData) -> PagePlan:
            return PagePlan(
                page_index=plan.page_index + 1,
                limit=plan.limit,
                offset=plan.offset + len(page.rows),
            )

        executor = PageExecutor(endpoint_id=self.endpoint_id)
        return await executor.execute(
            first=PagePlan(page_index=0, limit=self._batch_size, offset=len(seed)),
            fetch_page=fetch_page,
            plan_next=plan_next,
            seed_rows=seed,
            total_hint=total_hint,
            on_progress=on_progress,
        )
