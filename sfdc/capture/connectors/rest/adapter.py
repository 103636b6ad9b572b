"""REST query page adapter."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from sfdc.capture.core.exceptions import ParseError

from .schemas import RestQueryPage


class RestQueryAdapter:
    """Recognizes and parses tabular query pages."""

    def matches(self, body: Any) -> bool:
        return (
            isinstance(body, dict)
            and isinstance(body.get("records"), list)
            and isinstance(body.get("totalSize"), int)
            and isinstance(body.get("done"), bool)
        )

    def parse(self, body: Any) -> RestQueryPage:
        """Validate a tabular page.

        Raises:
            ParseError: If the body is not a query page
        """
        try:
            return RestQueryPage.model_validate(body)
        except ValidationError as e:
            raise ParseError(f"Not a REST query page: {e}") from e
