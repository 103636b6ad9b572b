"""Continuation-locator variant: follows ``nextRecordsUrl`` until done."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from ...connectors.rest import RestQueryAdapter, resolve_locator
from ...connectors.rest.config import AUTHORIZATION_HEADER
from ...core.exceptions import ProtocolError, error_for_status
from ...models import ContinuationReplayContext, HTTPRequest, record_columns
from ..transport import Transport
from .definitions import PageData, PagePlan, ProgressCallback, ReconstructionResult
from .executors import PageExecutor


class ContinuationPaginator:
    """Fetches the remaining pages of a REST query result.

    Session cookies are not enough for the query endpoint family, so every
    page carries the Authorization header captured from the original request.
    """

    endpoint_id = "rest.query"

    def __init__(self, transport: Transport) -> None:
        self._transport = transport
        self._adapter = RestQueryAdapter()

    async def run(
        self,
        context: ContinuationReplayContext,
        *,
        seed_rows: Iterable[Any] = (),
        total_hint: int | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ReconstructionResult:
        """Follow locators from ``context.next_url`` to the last page.

        Args:
            context: Captured continuation locator and credential
            seed_rows: Records already delivered to the host
            total_hint: ``totalSize`` of the first page
            on_progress: Called after every page

        Raises:
            ProtocolError: If no credential was captured or a locator repeats
            AuthError, ServerError, ParseError, TransportError: On a failed page
        """
        if not context.next_url:
            raise ProtocolError("Continuation context has no next locator")
        if not context.authorization:
            raise ProtocolError("No Authorization credential captured for continuation")

        visited: set[str] = set()

        async def fetch_page(plan: PagePlan) -> PageData:
            if plan.locator in visited:
                raise ProtocolError(f"Continuation locator repeated: {plan.locator}")
            visited.add(plan.locator)

            request = HTTPRequest(
                method="GET",
                url=plan.locator,
                headers={
                    AUTHORIZATION_HEADER: context.authorization,
                    "Accept": "application/json",
                },
            )
            response = await self._transport.send(request)
            if not response.ok:
                raise error_for_status(
                    response.status, f"Continuation page {plan.page_index} returned {response.status}"
                )
            page = self._adapter.parse(response.json())
            next_locator = (
                resolve_locator(plan.locator, page.next_records_url) if page.next_records_url else None
            )
            return PageData(
                rows=page.records,
                declared_total=page.total_size,
                # A page without a successor is the last one, whatever ``done`` says
                done=page.done or next_locator is None,
                next_locator=next_locator,
                column_metadata=record_columns(page.records),
            )

        def plan_next(plan: PagePlan, page: PageData) -> PagePlan:
            return PagePlan(page_index=plan.page_index + 1, locator=page.next_locator)

        executor = PageExecutor(endpoint_id=self.endpoint_id)
        return await executor.execute(
            first=PagePlan(page_index=0, locator=context.next_url),
            fetch_page=fetch_page,
            plan_next=plan_next,
            seed_rows=seed_rows,
            total_hint=total_hint,
            on_progress=on_progress,
        )
