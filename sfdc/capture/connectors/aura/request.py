"""Aura request-side parsing and replay request construction."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import parse_qs, urlencode

from sfdc.capture.core.exceptions import ProtocolError
from sfdc.capture.models import AuraReplayContext, HTTPRequest

from .config import (
    CONTEXT_FIELD,
    DEFAULT_CALLING_DESCRIPTOR,
    FORM_CONTENT_TYPE,
    MESSAGE_FIELD,
    PAGE_URI_FIELD,
    QUERY_PARAM_KEYS,
    ROW_LIMIT_PARAM,
    TOKEN_FIELD,
    TRAILING_CLAUSE_PATTERN,
    TRAILING_TERMINATOR_PATTERN,
)


def _form_value(form: dict[str, list[str]], name: str) -> str | None:
    values = form.get(name)
    return values[0] if values else None


def _find_query_action(actions: list[Any]) -> tuple[dict[str, Any], str] | None:
    for action in actions:
        if not isinstance(action, dict):
            continue
        params = action.get("params")
        if not isinstance(params, dict):
            continue
        for key in QUERY_PARAM_KEYS:
            if isinstance(params.get(key), str) and params[key].strip():
                return action, key
    return None


def extract_replay_context(
    url: str, body: bytes | str | None
) -> AuraReplayContext:
    """Capture what is needed to resubmit an Aura query action.

    Args:
        url: URL the action was posted to
        body: Form-encoded request body

    Returns:
        AuraReplayContext for the first action carrying query text

    Raises:
        ProtocolError: If the body has no message, no query action, or lacks
            the context/token pair
    """
    if body is None:
        raise ProtocolError("Aura request has no body")
    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
    form = parse_qs(text, keep_blank_values=True)

    raw_message = _form_value(form, MESSAGE_FIELD)
    if not raw_message:
        raise ProtocolError("Aura request has no message field")
    try:
        message = json.loads(raw_message)
    except ValueError as e:
        raise ProtocolError(f"Aura message is not JSON: {e}") from e

    actions = message.get("actions") if isinstance(message, dict) else None
    found = _find_query_action(actions) if isinstance(actions, list) else None
    if found is None:
        raise ProtocolError("Aura message carries no query action")
    action, query_key = found

    descriptor = action.get("descriptor")
    if not isinstance(descriptor, str) or not descriptor:
        raise ProtocolError("Aura query action has no descriptor")

    aura_context = _form_value(form, CONTEXT_FIELD)
    aura_token = _form_value(form, TOKEN_FIELD)
    if not aura_context or not aura_token:
        raise ProtocolError("Aura request is missing aura.context or aura.token")

    return AuraReplayContext(
        endpoint_url=url,
        descriptor=descriptor,
        calling_descriptor=action.get("callingDescriptor") or DEFAULT_CALLING_DESCRIPTOR,
        params=dict(action["params"]),
        query_key=query_key,
        query=action["params"][query_key],
        aura_context=aura_context,
        aura_token=aura_token,
        page_uri=_form_value(form, PAGE_URI_FIELD),
    )


def strip_pagination(query: str) -> str:
    """Remove trailing LIMIT/OFFSET clauses and statement terminator."""
    base = TRAILING_TERMINATOR_PATTERN.sub("", query.strip())
    while True:
        stripped = TRAILING_CLAUSE_PATTERN.sub("", base)
        if stripped == base:
            return base
        base = TRAILING_TERMINATOR_PATTERN.sub("", stripped)


def paginate_query(base_query: str, limit: int, offset: int) -> str:
    return f"{base_query} LIMIT {limit} OFFSET {offset}"


def build_replay_request(
    context: AuraReplayContext,
    *,
    query: str,
    row_limit: int,
    action_id: str = "1;a",
) -> HTTPRequest:
    """Build a POST that resubmits the captured action with a new query.

    The descriptor, every original param, and both correlation tokens are
    forwarded unchanged; only the query text and row limit are replaced.
    """
    params = {**context.params, context.query_key: query, ROW_LIMIT_PARAM: row_limit}
    message = {
        "actions": [
            {
                "id": action_id,
                "descriptor": context.descriptor,
                "callingDescriptor": context.calling_descriptor,
                "params": params,
            }
        ]
    }
    form = {
        MESSAGE_FIELD: json.dumps(message, separators=(",", ":")),
        CONTEXT_FIELD: context.aura_context,
    }
    if context.page_uri is not None:
        form[PAGE_URI_FIELD] = context.page_uri
    form[TOKEN_FIELD] = context.aura_token

    return HTTPRequest(
        method="POST",
        url=context.endpoint_url,
        headers={"Content-Type": FORM_CONTENT_TYPE, "Accept": "application/json"},
        body=urlencode(form),
    )
