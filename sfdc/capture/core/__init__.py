"""Core components."""

from .config import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_FLUSH_DELAY,
    DEFAULT_GATED_FAMILIES,
    DEFAULT_HTTP_TIMEOUT,
    CaptureConfig,
)
from .enums import (
    ClassificationKind,
    CompletionKind,
    GateState,
    MergeStatus,
    ResultShape,
    StopReason,
)
from .exceptions import (
    AuthError,
    CaptureError,
    ParseError,
    ProtocolError,
    ResponseError,
    ServerError,
    TransportError,
    error_for_status,
)
from .scheduler import AsyncioScheduler, ManualScheduler, Scheduler, TimerHandle

__all__ = [
    "CaptureConfig",
    "DEFAULT_BATCH_SIZE",
    "DEFAULT_FLUSH_DELAY",
    "DEFAULT_GATED_FAMILIES",
    "DEFAULT_HTTP_TIMEOUT",
    "ClassificationKind",
    "CompletionKind",
    "GateState",
    "MergeStatus",
    "ResultShape",
    "StopReason",
    "CaptureError",
    "TransportError",
    "ResponseError",
    "AuthError",
    "ServerError",
    "ParseError",
    "ProtocolError",
    "error_for_status",
    "Scheduler",
    "TimerHandle",
    "AsyncioScheduler",
    "ManualScheduler",
]
