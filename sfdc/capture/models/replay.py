"""Replay contexts: what a reconstruction run needs from the originating request."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class AuraReplayContext:
    """Captured Aura action that can be resubmitted with LIMIT/OFFSET.

    Attributes:
        endpoint_url: URL the original action was posted to
        descriptor: Action descriptor (controller method)
        calling_descriptor: Calling component descriptor, forwarded verbatim
        params: Original action params; only the query and row limit are replaced
        query_key: Name of the param that held the query text
        query: Query text as originally submitted
        aura_context: Opaque ``aura.context`` token, forwarded verbatim
        aura_token: Opaque ``aura.token`` CSRF token, forwarded verbatim
        page_uri: ``aura.pageURI`` if the original request carried one
    """

    endpoint_url: str
    descriptor: str
    query_key: str
    query: str
    aura_context: str
    aura_token: str
    calling_descriptor: str = "UNKNOWN"
    params: dict[str, Any] = field(default_factory=dict)
    page_uri: str | None = None


@dataclass(frozen=True)
class ContinuationReplayContext:
    """Server-supplied locator for the next page of a tabular result.

    Attributes:
        next_url: Absolute URL of the next page
        authorization: ``Authorization`` header of the originating request
        origin_url: URL of the request that produced the first page
    """

    next_url: str
    authorization: str | None = None
    origin_url: str | None = None


ReplayContext = AuraReplayContext | ContinuationReplayContext
