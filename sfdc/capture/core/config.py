"""Session-level tunables.

Protocol constants (URL patterns, parameter names) live in the per-connector
``config`` modules; this module only holds values a caller may want to tune
per session.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# Quiet period after the last page before a capped result is flushed.
# Normal multi-page delivery completes within milliseconds.
DEFAULT_FLUSH_DELAY = 2.0

# Rows requested per reconstruction page. Data Cloud rejects rowLimit >= 50000.
DEFAULT_BATCH_SIZE = 49_999

DEFAULT_HTTP_TIMEOUT = 30.0

# Endpoint families whose data responses are only accepted right after
# their own metadata preflight.
DEFAULT_GATED_FAMILIES = frozenset({"tooling"})


@dataclass(frozen=True)
class CaptureConfig:
    """Tunables for a CaptureSession.

    Attributes:
        flush_delay: Seconds of inactivity before a capped result is flushed
        batch_size: Rows per page when reconstructing a query
        http_timeout: Total timeout for one HTTP exchange (seconds)
        gated_families: Endpoint families that require a preceding preflight
    """

    flush_delay: float = DEFAULT_FLUSH_DELAY
    batch_size: int = DEFAULT_BATCH_SIZE
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    gated_families: frozenset[str] = field(default_factory=lambda: DEFAULT_GATED_FAMILIES)

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.flush_delay <= 0:
            raise ValueError("flush_delay must be positive")
        if self.batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if self.http_timeout <= 0:
            raise ValueError("http_timeout must be positive")
        if not isinstance(self.gated_families, frozenset):
            object.__setattr__(self, "gated_families", frozenset(self.gated_families))
