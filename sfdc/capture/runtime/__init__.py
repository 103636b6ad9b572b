"""Runtime components: interception, classification, accumulation, reconstruction."""

from .accumulator import AccumulatorStore, MergeOutcome, QueryAccumulator
from .classifier import Classification, ResponseClassifier
from .gate import PreflightGate
from .interceptor import ExchangeObserver, InterceptingTransport, InterceptorMetrics
from .reconstruction import (
    ContinuationPaginator,
    QueryResubmissionPaginator,
    ReconstructionProgress,
    ReconstructionResult,
    Reconstructor,
)
from .session import (
    CaptureSession,
    CounterSink,
    Formatter,
    Notifier,
    ResultSink,
    SessionMetrics,
)
from .transport import HTTPClient, StreamingResponse, Transport

__all__ = [
    "AccumulatorStore",
    "CaptureSession",
    "Classification",
    "ContinuationPaginator",
    "CounterSink",
    "ExchangeObserver",
    "Formatter",
    "HTTPClient",
    "InterceptingTransport",
    "InterceptorMetrics",
    "MergeOutcome",
    "Notifier",
    "PreflightGate",
    "QueryAccumulator",
    "QueryResubmissionPaginator",
    "ReconstructionProgress",
    "ReconstructionResult",
    "Reconstructor",
    "ResponseClassifier",
    "ResultSink",
    "SessionMetrics",
    "StreamingResponse",
    "Transport",
]
