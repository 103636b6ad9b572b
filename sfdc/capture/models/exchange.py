"""HTTP request/response value objects and the observed Exchange."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from ..core.exceptions import ParseError


@dataclass(frozen=True)
class HTTPRequest:
    """Outbound request as issued by the host application or the reconstructor."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | str | None = None

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None


@dataclass(frozen=True)
class HTTPResponse:
    """Fully-read response."""

    url: str
    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def content_type(self) -> str:
        for key, value in self.headers.items():
            if key.lower() == "content-type":
                return value
        return ""

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises:
            ParseError: If the body is not valid UTF-8 JSON
        """
        try:
            return json.loads(self.body)
        except (ValueError, UnicodeDecodeError) as e:
            raise ParseError(f"Response from {self.url} is not valid JSON: {e}") from e


@dataclass(frozen=True)
class Exchange:
    """One observed request/response pair, normalized for classification.

    Only lives for the duration of one interception callback.
    """

    url: str
    request_body: bytes | str | None
    response_json: Any
    status: int
    content_type: str
    request_headers: dict[str, str] = field(default_factory=dict)

    def request_header(self, name: str) -> str | None:
        lowered = name.lower()
        for key, value in self.request_headers.items():
            if key.lower() == lowered:
                return value
        return None

    def request_text(self) -> str:
        """Request body as text (empty string when absent)."""
        if self.request_body is None:
            return ""
        if isinstance(self.request_body, bytes):
            return self.request_body.decode("utf-8", errors="replace")
        return self.request_body
