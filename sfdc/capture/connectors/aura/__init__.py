"""Aura (Lightning / Data Cloud query editor) connector."""

from .adapter import AuraPageAdapter, query_id_from_url
from .request import (
    build_replay_request,
    extract_replay_context,
    paginate_query,
    strip_pagination,
)
from .schemas import AuraAction, AuraEnvelope, AuraQueryPage, AuraQueryStatus

__all__ = [
    "AuraAction",
    "AuraEnvelope",
    "AuraPageAdapter",
    "AuraQueryPage",
    "AuraQueryStatus",
    "build_replay_request",
    "extract_replay_context",
    "paginate_query",
    "query_id_from_url",
    "strip_pagination",
]
