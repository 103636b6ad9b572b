"""Result sinks and counters."""

from .counter import CountedResult, QueryCounter
from .in_memory import InMemorySink

__all__ = ["CountedResult", "InMemorySink", "QueryCounter"]
