"""Variant dispatch for pagination reconstruction."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from ...core.config import DEFAULT_BATCH_SIZE
from ...core.exceptions import ProtocolError
from ...models import AuraReplayContext, ContinuationReplayContext, ReplayContext
from ..transport import Transport
from .continuation import ContinuationPaginator
from .definitions import ProgressCallback, ReconstructionResult
from .query_resubmission import QueryResubmissionPaginator


class Reconstructor:
    """Picks the pagination variant matching the captured replay context.

    The transport passed here must be the raw transport, not the
    intercepting one, so replayed pages are never classified again.
    """

    def __init__(self, transport: Transport, *, batch_size: int = DEFAULT_BATCH_SIZE) -> None:
        self._resubmission = QueryResubmissionPaginator(transport, batch_size=batch_size)
        self._continuation = ContinuationPaginator(transport)

    async def run(
        self,
        context: ReplayContext | None,
        *,
        seed_rows: Iterable[Any] = (),
        total_hint: int | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ReconstructionResult:
        """Run the matching variant to completion.

        Raises:
            ProtocolError: If there is no usable replay context
        """
        if isinstance(context, AuraReplayContext):
            return await self._resubmission.run(
                context, seed_rows=seed_rows, total_hint=total_hint, on_progress=on_progress
            )
        if isinstance(context, ContinuationReplayContext):
            return await self._continuation.run(
                context, seed_rows=seed_rows, total_hint=total_hint, on_progress=on_progress
            )
        if context is None:
            raise ProtocolError("Result has no replay context")
        raise ProtocolError(f"Unsupported replay context: {type(context).__name__}")
