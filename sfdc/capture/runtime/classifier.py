"""Response classifier.

Decides, for one observed exchange, whether it is noise, a page to merge
into an accumulator, or a complete single-exchange result.

Shapes:
    - Enveloped (Aura): ``actions[0].returnValue.dataRows``; pages sharing a
      queryId are merged. Without a queryId the page must carry metadata to
      stand on its own.
    - Tabular (REST query): ``{totalSize, done, records}``; always a single
      exchange from the host's point of view, limited when ``done`` is false.

Tabular false-positive guards, in order:
    1. Metadata-only preflight requests (``columns=true``) are ignored, and
       arm the preflight gate for their endpoint family.
    2. Continuation-locator URLs are ignored; those pages belong to a
       pagination run, not to a new top-level result.
    3. Data responses from a gated (background) family are ignored unless
       the family's gate is armed; accepting one consumes the gate.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from ..connectors.aura import AuraPageAdapter, extract_replay_context, query_id_from_url
from ..connectors.rest import (
    RestQueryAdapter,
    is_continuation_locator,
    is_preflight,
    match_family,
    resolve_locator,
)
from ..connectors.rest.config import AUTHORIZATION_HEADER
from ..core.config import DEFAULT_GATED_FAMILIES
from ..core.enums import ClassificationKind, ResultShape
from ..core.exceptions import ProtocolError
from ..models import ContinuationReplayContext, Exchange, ReplayContext, record_columns
from .gate import PreflightGate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Classification:
    """Routing decision for one exchange.

    Attributes:
        kind: IGNORE, MERGE or SELF_CONTAINED
        shape: Wire shape recognized (None when ignored)
        query_id: Accumulator key for MERGE
        rows: Rows carried by this page
        column_metadata: Column descriptors, if this page carries them
        declared_total: Server-declared total row count, if present
        done: False when the server says more pages exist
        replay_context: Captured from the originating request, if possible
        reason: Why the exchange was ignored
    """

    kind: ClassificationKind
    shape: ResultShape | None = None
    query_id: str | None = None
    rows: list[Any] = field(default_factory=list)
    column_metadata: Any = None
    declared_total: int | None = None
    done: bool = True
    replay_context: ReplayContext | None = None
    reason: str | None = None


def ignored(reason: str) -> Classification:
    return Classification(kind=ClassificationKind.IGNORE, reason=reason)


class ResponseClassifier:
    """Classifies observed exchanges into ignore / merge / self-contained."""

    def __init__(
        self,
        *,
        gate: PreflightGate | None = None,
        gated_families: Iterable[str] = DEFAULT_GATED_FAMILIES,
    ) -> None:
        self._gate = gate or PreflightGate()
        self._gated_families = frozenset(gated_families)
        self._aura = AuraPageAdapter()
        self._rest = RestQueryAdapter()

    @property
    def gate(self) -> PreflightGate:
        return self._gate

    def classify(self, exchange: Exchange) -> Classification:
        """Classify one exchange.

        Raises:
            ParseError: If a recognized shape fails validation (callers on the
                passive path absorb this)
        """
        body = exchange.response_json
        if self._aura.matches(body):
            return self._classify_enveloped(exchange)
        return self._classify_tabular(exchange)

    def _classify_enveloped(self, exchange: Exchange) -> Classification:
        page = self._aura.parse(exchange.response_json)
        query_id = page.query_id or query_id_from_url(exchange.url)

        if query_id:
            return Classification(
                kind=ClassificationKind.MERGE,
                shape=ResultShape.ENVELOPED,
                query_id=query_id,
                rows=page.data_rows,
                column_metadata=page.metadata,
                declared_total=page.row_count,
                replay_context=self._aura_replay_context(exchange),
            )

        # Without metadata there are no column headers to stand on
        if not page.metadata:
            return ignored("enveloped page without queryId or metadata")

        return Classification(
            kind=ClassificationKind.SELF_CONTAINED,
            shape=ResultShape.ENVELOPED,
            rows=page.data_rows,
            column_metadata=page.metadata,
            declared_total=len(page.data_rows),
        )

    def _classify_tabular(self, exchange: Exchange) -> Classification:
        url = exchange.url
        family = match_family(url)
        gated = family is not None and family.name in self._gated_families

        if is_preflight(url):
            if gated:
                self._gate.arm(family.name)
            return ignored("metadata preflight")

        if is_continuation_locator(url):
            return ignored("continuation locator")

        if not self._rest.matches(exchange.response_json):
            return ignored("unrecognized shape")

        if gated and not self._gate.consume(family.name):
            return ignored(f"{family.name} request without preflight")

        page = self._rest.parse(exchange.response_json)
        if not page.records:
            return ignored("empty tabular page")

        # Continuation pages need the captured credential; cookie-only pages stay limited
        replay: ContinuationReplayContext | None = None
        authorization = exchange.request_header(AUTHORIZATION_HEADER)
        if not page.done and page.next_records_url and authorization:
            replay = ContinuationReplayContext(
                next_url=resolve_locator(url, page.next_records_url),
                authorization=authorization,
                origin_url=url,
            )

        return Classification(
            kind=ClassificationKind.SELF_CONTAINED,
            shape=ResultShape.TABULAR,
            rows=page.records,
            column_metadata=record_columns(page.records),
            declared_total=page.total_size,
            done=page.done,
            replay_context=replay,
        )

    def _aura_replay_context(self, exchange: Exchange) -> ReplayContext | None:
        # Follow-up actions carry only the queryId; absence is normal
        try:
            return extract_replay_context(exchange.url, exchange.request_body)
        except ProtocolError as e:
            logger.debug("No replay context for %s: %s", exchange.url, e)
            return None
