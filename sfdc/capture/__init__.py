"""SFDC Capture - Query result capture and pagination reconstruction for Salesforce."""

from .core import (
    AsyncioScheduler,
    AuthError,
    CaptureConfig,
    CaptureError,
    CompletionKind,
    ManualScheduler,
    ParseError,
    ProtocolError,
    ResponseError,
    ResultShape,
    ServerError,
    TransportError,
)
from .formatters import CsvFormatter, default_filename
from .models import (
    UNBOUNDED,
    AuraReplayContext,
    ContinuationReplayContext,
    Exchange,
    HTTPRequest,
    HTTPResponse,
    QueryResult,
)
from .runtime import (
    AccumulatorStore,
    CaptureSession,
    HTTPClient,
    InterceptingTransport,
    PreflightGate,
    ReconstructionProgress,
    Reconstructor,
    ResponseClassifier,
)
from .sinks import InMemorySink, QueryCounter

__version__ = "0.1.0"

__all__ = [
    # Session
    "CaptureSession",
    "CaptureConfig",
    # Runtime
    "AccumulatorStore",
    "HTTPClient",
    "InterceptingTransport",
    "PreflightGate",
    "ReconstructionProgress",
    "Reconstructor",
    "ResponseClassifier",
    # Scheduling
    "AsyncioScheduler",
    "ManualScheduler",
    # Models
    "AuraReplayContext",
    "CompletionKind",
    "ContinuationReplayContext",
    "Exchange",
    "HTTPRequest",
    "HTTPResponse",
    "QueryResult",
    "ResultShape",
    "UNBOUNDED",
    # Sinks and formatters
    "CsvFormatter",
    "InMemorySink",
    "QueryCounter",
    "default_filename",
    # Exceptions
    "CaptureError",
    "TransportError",
    "ResponseError",
    "AuthError",
    "ServerError",
    "ParseError",
    "ProtocolError",
]
