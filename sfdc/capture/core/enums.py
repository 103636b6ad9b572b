"""Core enumerations shared by the classifier, store and reconstructor.

Key Types:
    - ResultShape: Which wire protocol a result arrived in
    - CompletionKind: How a finished result came to be finished
    - ClassificationKind: What the classifier decided for one exchange
    - MergeStatus: Outcome of merging one page into the store
    - GateState: State of the preflight arm/consume gate
    - StopReason: Why a reconstruction loop terminated
"""

from enum import Enum


class ResultShape(str, Enum):
    """Wire shape a result was recognized in."""

    ENVELOPED = "enveloped"  # Aura action/returnValue envelope
    TABULAR = "tabular"  # REST query page (records/totalSize/done)


class CompletionKind(str, Enum):
    """How a finished result was completed."""

    COMPLETE = "complete"  # Declared total reached
    LIMITED = "limited"  # Quiet period elapsed, or server says more pages exist
    SELF_CONTAINED = "self_contained"  # Single exchange, nothing to accumulate
    RECONSTRUCTED = "reconstructed"  # Produced by a reconstruction run


class ClassificationKind(str, Enum):
    """Routing decision for one observed exchange."""

    IGNORE = "ignore"
    MERGE = "merge"
    SELF_CONTAINED = "self_contained"


class MergeStatus(str, Enum):
    """Outcome of AccumulatorStore.merge()."""

    COMPLETE = "complete"
    PENDING = "pending"


class GateState(str, Enum):
    """Preflight correlation gate state.

    IDLE -> ARMED when a preflight request is seen for the family.
    ARMED -> IDLE when the first qualifying data response consumes it.
    """

    IDLE = "idle"
    ARMED = "armed"


class StopReason(str, Enum):
    """Termination condition of a reconstruction run (first match wins)."""

    TOTAL_REACHED = "total_reached"
    SHORT_PAGE = "short_page"
    EMPTY_PAGE = "empty_page"
    DONE = "done"
