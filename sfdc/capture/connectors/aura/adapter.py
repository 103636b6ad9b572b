"""Aura envelope adapter: recognizes and unwraps query pages."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from sfdc.capture.core.exceptions import ParseError, ServerError

from .config import ERROR_STATE, QUERY_ID_URL_PATTERNS
from .schemas import AuraEnvelope, AuraQueryPage


def query_id_from_url(url: str | None) -> str | None:
    """Recover a queryId from the request URL when the body lacks one."""
    if not isinstance(url, str):
        return None
    for pattern in QUERY_ID_URL_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def _action_error_message(errors: list[Any]) -> str:
    messages = []
    for err in errors:
        if isinstance(err, dict) and err.get("message"):
            messages.append(str(err["message"]))
        else:
            messages.append(str(err))
    return "; ".join(messages) or "unknown error"


class AuraPageAdapter:
    """Adapter for Aura query action responses.

    Only ``dataRows`` being a list is required to match. The remaining-rows
    action omits ``metadata`` and often ``status``; those are filled in by
    the accumulator from earlier pages.
    """

    def matches(self, body: Any) -> bool:
        if not isinstance(body, dict):
            return False
        actions = body.get("actions")
        if not isinstance(actions, list) or not actions:
            return False
        first = actions[0]
        if not isinstance(first, dict):
            return False
        return_value = first.get("returnValue")
        return isinstance(return_value, dict) and isinstance(return_value.get("dataRows"), list)

    def parse(self, body: Any) -> AuraQueryPage:
        """Unwrap the first action's returnValue.

        Raises:
            ServerError: If the action reports state ERROR
            ParseError: If the envelope or page does not have the expected shape
        """
        try:
            envelope = AuraEnvelope.model_validate(body)
        except ValidationError as e:
            raise ParseError(f"Not an Aura envelope: {e}") from e

        action = envelope.actions[0]
        if action.state == ERROR_STATE:
            raise ServerError(f"Aura action failed: {_action_error_message(action.error)}")

        try:
            return AuraQueryPage.model_validate(action.return_value)
        except ValidationError as e:
            raise ParseError(f"Aura action returned no query page: {e}") from e
