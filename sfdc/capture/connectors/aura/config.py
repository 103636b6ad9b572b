"""Aura (Lightning) protocol constants.

The Data Cloud query editor runs queries as Aura actions posted to
``/aura``. The first action returns the initial batch with metadata and the
query status; follow-up actions return the remaining rows for the same
queryId, usually without metadata.
"""

from __future__ import annotations

import re

# Form fields of an Aura POST body (application/x-www-form-urlencoded)
MESSAGE_FIELD = "message"
CONTEXT_FIELD = "aura.context"
TOKEN_FIELD = "aura.token"
PAGE_URI_FIELD = "aura.pageURI"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded;charset=UTF-8"

# Action param names that have carried the query text
QUERY_PARAM_KEYS = ("query", "sql", "queryText")
ROW_LIMIT_PARAM = "rowLimit"

DEFAULT_CALLING_DESCRIPTOR = "UNKNOWN"

# Aura marks failed actions with state "ERROR" and an ``error`` list
ERROR_STATE = "ERROR"

# queryId fallbacks when the response body has no status block:
#   /services/data/v1/query/0Lf...      /query/0Lf.../results
#   /api/v1/query/results/0Lf...        ?queryId=0Lf...
QUERY_ID_URL_PATTERNS = (
    re.compile(r"/query/([A-Za-z0-9_-]{10,})(?:/|$|\?)", re.IGNORECASE),
    re.compile(r"[?&]queryId=([A-Za-z0-9_-]+)", re.IGNORECASE),
)

# Trailing pagination clauses stripped before resubmission, applied
# repeatedly so "LIMIT n OFFSET m" and "OFFSET m LIMIT n" both go.
TRAILING_CLAUSE_PATTERN = re.compile(r"\s+(?:LIMIT|OFFSET)\s+\d+\s*$", re.IGNORECASE)
TRAILING_TERMINATOR_PATTERN = re.compile(r"\s*;\s*$")
