"""REST query API (Developer Console SOQL) connector."""

from .adapter import RestQueryAdapter
from .endpoints import (
    ENDPOINT_FAMILIES,
    EndpointFamily,
    is_continuation_locator,
    is_preflight,
    match_family,
    resolve_locator,
)
from .schemas import RestQueryPage

__all__ = [
    "ENDPOINT_FAMILIES",
    "EndpointFamily",
    "RestQueryAdapter",
    "RestQueryPage",
    "is_continuation_locator",
    "is_preflight",
    "match_family",
    "resolve_locator",
]
