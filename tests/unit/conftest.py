"""Shared fakes and payload builders for unit tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import urlencode

import pytest

from sfdc.capture.core.scheduler import ManualScheduler
from sfdc.capture.models import Exchange, HTTPRequest, HTTPResponse

AURA_URL = "https://example.lightning.force.com/aura?r=12&ui-cdp.QueryEditor=1"
REST_QUERY_URL = "https://example.my.salesforce.com/services/data/v59.0/query?q=SELECT+Id,Name+FROM+Account"
TOOLING_QUERY_URL = "https://example.my.salesforce.com/services/data/v59.0/tooling/query?q=SELECT+Id+FROM+ApexClass"
DESCRIPTOR = "aura://CdpQueryEditorController/ACTION$runQuery"


def json_response(payload: Any, *, url: str = AURA_URL, status: int = 200) -> HTTPResponse:
    return HTTPResponse(
        url=url,
        status=status,
        headers={"Content-Type": "application/json;charset=UTF-8"},
        body=json.dumps(payload).encode(),
    )


def aura_body(
    rows: list[Any],
    *,
    metadata: Any = None,
    query_id: str | None = None,
    row_count: int | None = None,
    state: str = "SUCCESS",
    error: list[Any] | None = None,
) -> dict[str, Any]:
    return_value: dict[str, Any] = {"dataRows": rows, "returnedRows": len(rows)}
    if metadata is not None:
        return_value["metadata"] = metadata
    if query_id is not None or row_count is not None:
        return_value["status"] = {"queryId": query_id, "rowCount": row_count}
    action: dict[str, Any] = {"id": "1;a", "state": state, "returnValue": return_value}
    if error is not None:
        action["error"] = error
        action["returnValue"] = None
    return {"actions": [action]}


def aura_rows(count: int, *, start: int = 0, width: int = 5) -> list[dict[str, Any]]:
    return [{"row": [f"r{i}c{c}" for c in range(width)]} for i in range(start, start + count)]


def aura_metadata(width: int = 5) -> list[dict[str, Any]]:
    return [{"name": f"col_{c}", "type": "VARCHAR"} for c in range(width)]


def aura_request_body(
    query: str = "SELECT * FROM Account__dlm",
    *,
    params: dict[str, Any] | None = None,
    context: str | None = '{"mode":"PROD","fwuid":"abc"}',
    token: str | None = "tok-123",
    page_uri: str | None = "/lightning/n/QueryEditor",
) -> str:
    message = {
        "actions": [
            {
                "id": "101;a",
                "descriptor": DESCRIPTOR,
                "callingDescriptor": "markup://cdp:queryEditor",
                "params": {"query": query, "dataspace": "default", "rowLimit": 1000, **(params or {})},
            }
        ]
    }
    form: dict[str, str] = {"message": json.dumps(message)}
    if context is not None:
        form["aura.context"] = context
    if page_uri is not None:
        form["aura.pageURI"] = page_uri
    if token is not None:
        form["aura.token"] = token
    return urlencode(form)


def rest_body(
    records: list[Any],
    *,
    total: int | None = None,
    done: bool = True,
    next_url: str | None = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "totalSize": len(records) if total is None else total,
        "done": done,
        "records": records,
    }
    if next_url is not None:
        body["nextRecordsUrl"] = next_url
    return body


def rest_records(count: int, *, start: int = 0, sobject: str = "Account") -> list[dict[str, Any]]:
    return [
        {
            "attributes": {"type": sobject, "url": f"/services/data/v59.0/sobjects/{sobject}/001{i:015d}"},
            "Id": f"001{i:015d}",
            "Name": f"Account {i}",
        }
        for i in range(start, start + count)
    ]


def make_exchange(
    body: Any,
    *,
    url: str = AURA_URL,
    request_body: str | None = None,
    request_headers: dict[str, str] | None = None,
) -> Exchange:
    return Exchange(
        url=url,
        request_body=request_body,
        response_json=body,
        status=200,
        content_type="application/json",
        request_headers=request_headers or {},
    )


class FakeStream:
    """StreamingResponse over a fixed body, delivered in two chunks."""

    def __init__(self, response: HTTPResponse) -> None:
        self.url = response.url
        self.status = response.status
        self.headers = dict(response.headers)
        self._body = response.body

    async def iter_chunks(self):
        middle = len(self._body) // 2
        for chunk in (self._body[:middle], self._body[middle:]):
            if chunk:
                yield chunk


class FakeTransport:
    """Transport that answers from a handler or a list of canned responses.

    Exceptions in the response list (or returned by the handler) are raised.
    """

    def __init__(
        self,
        responses: list[Any] | None = None,
        *,
        handler: Callable[[HTTPRequest], Any] | None = None,
    ) -> None:
        self.requests: list[HTTPRequest] = []
        self._responses = list(responses or [])
        self._handler = handler
        self.closed = False

    async def send(self, request: HTTPRequest) -> HTTPResponse:
        self.requests.append(request)
        result = self._handler(request) if self._handler else self._responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    @asynccontextmanager
    async def stream(self, request: HTTPRequest):
        response = await self.send(request)
        yield FakeStream(response)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def fake_transport_factory():
    return FakeTransport


@pytest.fixture
def payloads():
    """Payload builders, grouped for tests that need several of them."""

    class Payloads:
        AURA_URL = AURA_URL
        REST_QUERY_URL = REST_QUERY_URL
        TOOLING_QUERY_URL = TOOLING_QUERY_URL
        DESCRIPTOR = DESCRIPTOR

        json_response = staticmethod(json_response)
        aura_body = staticmethod(aura_body)
        aura_rows = staticmethod(aura_rows)
        aura_metadata = staticmethod(aura_metadata)
        aura_request_body = staticmethod(aura_request_body)
        rest_body = staticmethod(rest_body)
        rest_records = staticmethod(rest_records)
        make_exchange = staticmethod(make_exchange)

    return Payloads
