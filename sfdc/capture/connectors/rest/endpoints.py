"""URL classification for the REST query endpoint families."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import parse_qs, urljoin, urlsplit

from .config import (
    CONTINUATION_LOCATOR_PATTERN,
    ENDPOINT_FAMILY_PATTERNS,
    PREFLIGHT_PARAM,
    PREFLIGHT_VALUE,
)


@dataclass(frozen=True)
class EndpointFamily:
    """A group of query URLs sharing one preflight gate."""

    name: str
    pattern: re.Pattern[str]

    def matches(self, url: str) -> bool:
        return self.pattern.search(url) is not None


ENDPOINT_FAMILIES = tuple(EndpointFamily(name, pattern) for name, pattern in ENDPOINT_FAMILY_PATTERNS)


def match_family(url: str) -> EndpointFamily | None:
    """Return the endpoint family a URL belongs to, if any."""
    for family in ENDPOINT_FAMILIES:
        if family.matches(url):
            return family
    return None


def is_preflight(url: str) -> bool:
    """True for metadata-only requests (``columns=true``)."""
    query = urlsplit(url).query
    if not query:
        return False
    values = parse_qs(query).get(PREFLIGHT_PARAM, [])
    return any(v.lower() == PREFLIGHT_VALUE for v in values)


def is_continuation_locator(url: str) -> bool:
    """True for ``nextRecordsUrl``-style page locators."""
    return CONTINUATION_LOCATOR_PATTERN.search(urlsplit(url).path + "?") is not None


def resolve_locator(origin_url: str, locator: str) -> str:
    """Make a (usually root-relative) locator absolute against the origin request."""
    return urljoin(origin_url, locator)
