"""Structured logging for reconstruction runs.

This module provides telemetry hooks for page fetching, emitting
structured logs for observability.
"""

from __future__ import annotations

import logging

from .definitions import ReconstructionResult

logger = logging.getLogger(__name__)


def log_page_completed(
    *,
    endpoint_id: str,
    page_index: int,
    page_rows: int,
    rows_fetched: int,
    total_row_count: int | None,
    latency_ms: float | None = None,
) -> None:
    """Log completion of a single page.

    Args:
        endpoint_id: Protocol variant identifier
        page_index: Zero-based index of the page
        page_rows: Rows in this page
        rows_fetched: Rows accumulated so far
        total_row_count: Best-known total
        latency_ms: Latency in milliseconds (optional)
    """
    logger.info(
        "page_completed",
        extra={
            "endpoint_id": endpoint_id,
            "page_index": page_index,
            "page_rows": page_rows,
            "rows_fetched": rows_fetched,
            "total_row_count": total_row_count,
            "latency_ms": latency_ms,
        },
    )


def log_page_error(
    *,
    endpoint_id: str,
    page_index: int,
    error_type: str,
    error_message: str,
) -> None:
    """Log a page fetch that aborted the run.

    Args:
        endpoint_id: Protocol variant identifier
        page_index: Zero-based index of the page that failed
        error_type: Exception class name (e.g., "AuthError", "ParseError")
        error_message: Error message
    """
    logger.error(
        "page_error",
        extra={
            "endpoint_id": endpoint_id,
            "page_index": page_index,
            "error_type": error_type,
            "error_message": error_message,
        },
    )


def log_reconstruction_complete(
    *,
    endpoint_id: str,
    result: ReconstructionResult,
    total_latency_ms: float | None = None,
) -> None:
    logger.info(
        "reconstruction_complete",
        extra={
            "endpoint_id": endpoint_id,
            "pages_fetched": result.pages_fetched,
            "rows": result.row_count,
            "total_row_count": result.total_row_count,
            "stop_reason": result.stop_reason.value,
            "total_latency_ms": total_latency_ms,
        },
    )
