"""Data models for observed exchanges, replay contexts and finished results.

Design Decisions:
    - Dataclasses for internal values and events
    - Pydantic models only at the wire boundary (see ``connectors.*.schemas``)
    - Frozen where the value crosses a component boundary
"""

from .columns import record_columns, resolve_column_names
from .exchange import Exchange, HTTPRequest, HTTPResponse
from .replay import AuraReplayContext, ContinuationReplayContext, ReplayContext
from .result import UNBOUNDED, QueryResult

__all__ = [
    "AuraReplayContext",
    "ContinuationReplayContext",
    "Exchange",
    "HTTPRequest",
    "HTTPResponse",
    "QueryResult",
    "ReplayContext",
    "UNBOUNDED",
    "record_columns",
    "resolve_column_names",
]
