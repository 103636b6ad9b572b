"""REST query API constants.

The Developer Console runs SOQL through ``/services/data/vXX.X/query`` and
polls the tooling API (``/tooling/query``) in the background. Result pages
beyond the first are addressed by ``nextRecordsUrl`` locators of the form
``/services/data/vXX.X/query/<cursor>-<offset>``.
"""

from __future__ import annotations

import re

# Metadata-only preflight: ``?columns=true&q=...`` returns column info, no rows
PREFLIGHT_PARAM = "columns"
PREFLIGHT_VALUE = "true"

CONTINUATION_LOCATOR_PATTERN = re.compile(
    r"/query(?:All)?/[A-Za-z0-9]{15,18}-\d+(?:$|[/?#])", re.IGNORECASE
)

# Ordered: the tooling path also contains "/query", so it is tried first.
ENDPOINT_FAMILY_PATTERNS = (
    ("tooling", re.compile(r"/services/data/v\d+\.\d+/tooling/query(?:All)?/?(?:\?|$)", re.IGNORECASE)),
    ("query", re.compile(r"/services/data/v\d+\.\d+/query(?:All)?/?(?:\?|$)", re.IGNORECASE)),
)

AUTHORIZATION_HEADER = "Authorization"

# Attribute key Salesforce adds to every record; not a selected column
RECORD_ATTRIBUTES_KEY = "attributes"
