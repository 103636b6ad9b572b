"""Pagination reconstruction for capped query results.

This package fetches the rows a host application left out, independently of
the host's own pagination.

Architecture:
    - definitions.py: Page plans, page data, progress and result structures
    - executors.py: Sequential page loop with termination checks
    - query_resubmission.py: Aura variant (LIMIT/OFFSET resubmission)
    - continuation.py: REST variant (nextRecordsUrl locators)
    - reconstructor.py: Picks the variant from the replay context type
    - telemetry.py: Structured logging

Termination (checked after every page, first match wins): declared total
reached, short page, empty page, server done flag. Any failed page aborts
the run with a typed CaptureError; there is no partial success.
"""

from __future__ import annotations

from .continuation import ContinuationPaginator
from .definitions import (
    PageData,
    PagePlan,
    ProgressCallback,
    ReconstructionProgress,
    ReconstructionResult,
)
from .executors import PageExecutor, stop_reason
from .query_resubmission import QueryResubmissionPaginator
from .reconstructor import Reconstructor

__all__ = [
    "ContinuationPaginator",
    "PageData",
    "PageExecutor",
    "PagePlan",
    "ProgressCallback",
    "QueryResubmissionPaginator",
    "ReconstructionProgress",
    "ReconstructionResult",
    "Reconstructor",
    "stop_reason",
]
