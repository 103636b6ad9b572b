"""Unit tests for InterceptingTransport."""

from __future__ import annotations

import pytest

from sfdc.capture.models import HTTPRequest, HTTPResponse
from sfdc.capture.runtime import InterceptingTransport


def _request(url: str = "https://example.com/aura", body: str | None = "message=%7B%7D") -> HTTPRequest:
    return HTTPRequest(method="POST", url=url, headers={"Authorization": "Bearer t"}, body=body)


class TestInterceptingTransportSend:
    """Test observation of full-body requests."""

    @pytest.mark.asyncio
    async def test_json_exchange_observed(self, fake_transport_factory, payloads):
        """A 2xx JSON response is reported once, unchanged for the caller."""
        response = payloads.json_response({"a": 1})
        observed = []
        transport = InterceptingTransport(fake_transport_factory([response]), observed.append)

        result = await transport.send(_request())

        assert result is response
        assert len(observed) == 1
        exchange = observed[0]
        assert exchange.url == "https://example.com/aura"
        assert exchange.response_json == {"a": 1}
        assert exchange.request_body == "message=%7B%7D"
        assert exchange.request_header("authorization") == "Bearer t"
        assert transport.metrics.exchanges_seen == 1
        assert transport.metrics.exchanges_observed == 1

    @pytest.mark.asyncio
    async def test_non_json_not_observed(self, fake_transport_factory):
        """Non-JSON responses never reach the observer."""
        response = HTTPResponse(
            url="https://example.com/page", status=200, headers={"Content-Type": "text/html"}, body=b"<html>"
        )
        observed = []
        transport = InterceptingTransport(fake_transport_factory([response]), observed.append)

        await transport.send(_request())

        assert observed == []
        assert transport.metrics.exchanges_seen == 1
        assert transport.metrics.exchanges_observed == 0

    @pytest.mark.asyncio
    async def test_error_status_not_observed(self, fake_transport_factory, payloads):
        """Non-2xx responses never reach the observer."""
        observed = []
        transport = InterceptingTransport(
            fake_transport_factory([payloads.json_response({"error": "x"}, status=500)]), observed.append
        )

        result = await transport.send(_request())

        assert result.status == 500
        assert observed == []

    @pytest.mark.asyncio
    async def test_observer_failure_is_absorbed(self, fake_transport_factory, payloads):
        """An exception in the observer is counted, not raised."""
        response = payloads.json_response({"a": 1})

        def observer(exchange):
            raise RuntimeError("classifier bug")

        transport = InterceptingTransport(fake_transport_factory([response]), observer)

        result = await transport.send(_request())

        assert result is response
        assert transport.metrics.observation_errors == 1
        assert transport.metrics.exchanges_observed == 0

    @pytest.mark.asyncio
    async def test_invalid_json_is_absorbed(self, fake_transport_factory):
        """A JSON content type with a broken body is absorbed."""
        response = HTTPResponse(
            url="https://example.com/aura",
            status=200,
            headers={"Content-Type": "application/json"},
            body=b"{broken",
        )
        observed = []
        transport = InterceptingTransport(fake_transport_factory([response]), observed.append)

        result = await transport.send(_request())

        assert result is response
        assert observed == []
        assert transport.metrics.observation_errors == 1

    @pytest.mark.asyncio
    async def test_transport_errors_propagate(self, fake_transport_factory):
        """Failures of the inner transport reach the caller unchanged."""
        transport = InterceptingTransport(fake_transport_factory([ConnectionResetError("reset")]), lambda e: None)

        with pytest.raises(ConnectionResetError):
            await transport.send(_request())


class TestInterceptingTransportStream:
    """Test observation of progressively delivered bodies."""

    @pytest.mark.asyncio
    async def test_observed_after_full_consumption(self, fake_transport_factory, payloads):
        """The exchange is reported once the caller has read every chunk."""
        observed = []
        transport = InterceptingTransport(
            fake_transport_factory([payloads.json_response({"rows": [1, 2, 3]})]), observed.append
        )

        chunks = []
        async with transport.stream(_request()) as stream:
            async for chunk in stream.iter_chunks():
                assert observed == []
                chunks.append(chunk)

        assert len(chunks) == 2
        assert len(observed) == 1
        assert observed[0].response_json == {"rows": [1, 2, 3]}

    @pytest.mark.asyncio
    async def test_abandoned_stream_not_observed(self, fake_transport_factory, payloads):
        """A stream the caller stops reading is never reported."""
        observed = []
        transport = InterceptingTransport(
            fake_transport_factory([payloads.json_response({"rows": [1, 2, 3]})]), observed.append
        )

        async with transport.stream(_request()) as stream:
            async for _ in stream.iter_chunks():
                break

        assert observed == []


class TestInterceptingTransportLifecycle:
    """Test passthrough of inner transport lifecycle."""

    @pytest.mark.asyncio
    async def test_inner_and_close(self, fake_transport_factory):
        """inner exposes the raw transport and close() reaches it."""
        inner = fake_transport_factory()
        transport = InterceptingTransport(inner, lambda e: None)

        assert transport.inner is inner
        await transport.close()
        assert inner.closed
