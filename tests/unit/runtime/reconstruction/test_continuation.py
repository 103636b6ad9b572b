"""Unit tests for the REST continuation-locator paginator."""

from __future__ import annotations

import pytest

from sfdc.capture.core import AuthError, ParseError, ProtocolError, StopReason
from sfdc.capture.models import ContinuationReplayContext
from sfdc.capture.runtime.reconstruction import ContinuationPaginator

HOST = "https://example.my.salesforce.com"
CURSOR = "01gD0000002HU6KIAW"


def _locator(offset: int) -> str:
    return f"/services/data/v59.0/query/{CURSOR}-{offset}"


def _context(authorization: str | None = "Bearer 00D!session") -> ContinuationReplayContext:
    return ContinuationReplayContext(
        next_url=f"{HOST}{_locator(2000)}",
        authorization=authorization,
        origin_url=f"{HOST}/services/data/v59.0/query?q=SELECT+Id,Name+FROM+Account",
    )


class TestContinuationPaginator:
    """Test locator following."""

    @pytest.mark.asyncio
    async def test_follows_locators_to_total(self, payloads, fake_transport_factory):
        """Seed records are kept and the remaining pages appended in order."""
        pages = [
            payloads.json_response(
                payloads.rest_body(
                    payloads.rest_records(2000, start=2000), total=5000, done=False, next_url=_locator(4000)
                ),
                url=f"{HOST}{_locator(2000)}",
            ),
            payloads.json_response(
                payloads.rest_body(payloads.rest_records(1000, start=4000), total=5000, done=True),
                url=f"{HOST}{_locator(4000)}",
            ),
        ]
        transport = fake_transport_factory(pages)
        seed = payloads.rest_records(2000)
        progress = []

        result = await ContinuationPaginator(transport).run(
            _context(), seed_rows=seed, total_hint=5000, on_progress=progress.append
        )

        assert [r.url for r in transport.requests] == [f"{HOST}{_locator(2000)}", f"{HOST}{_locator(4000)}"]
        for request in transport.requests:
            assert request.method == "GET"
            assert request.header("Authorization") == "Bearer 00D!session"
        assert result.row_count == 5000
        assert [r["Name"] for r in result.rows[1999:2001]] == ["Account 1999", "Account 2000"]
        assert result.stop_reason == StopReason.TOTAL_REACHED
        assert result.column_metadata == ["Id", "Name"]
        assert [p.rows_fetched for p in progress] == [4000, 5000]

    @pytest.mark.asyncio
    async def test_done_flag_ends_run(self, payloads, fake_transport_factory):
        """done=true stops even when the total is not reached."""
        transport = fake_transport_factory(
            [payloads.json_response(payloads.rest_body(payloads.rest_records(5), total=100, done=True))]
        )

        result = await ContinuationPaginator(transport).run(_context(), seed_rows=payloads.rest_records(10))

        assert result.row_count == 15
        assert result.stop_reason == StopReason.DONE

    @pytest.mark.asyncio
    async def test_missing_next_locator_is_last_page(self, payloads, fake_transport_factory):
        """A page without nextRecordsUrl is treated as the last one."""
        transport = fake_transport_factory(
            [payloads.json_response(payloads.rest_body(payloads.rest_records(5), total=100, done=False))]
        )

        result = await ContinuationPaginator(transport).run(_context())

        assert len(transport.requests) == 1
        assert result.stop_reason == StopReason.DONE

    @pytest.mark.asyncio
    async def test_empty_page_ends_run(self, payloads, fake_transport_factory):
        """An empty page stops the loop."""
        transport = fake_transport_factory(
            [payloads.json_response(payloads.rest_body([], total=100, done=False, next_url=_locator(4000)))]
        )

        result = await ContinuationPaginator(transport).run(_context())

        assert result.stop_reason == StopReason.EMPTY_PAGE
        assert result.row_count == 0

    @pytest.mark.asyncio
    async def test_missing_authorization(self, fake_transport_factory):
        """Without the captured credential nothing is sent."""
        transport = fake_transport_factory()

        with pytest.raises(ProtocolError, match="Authorization"):
            await ContinuationPaginator(transport).run(_context(authorization=None))
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_repeated_locator(self, payloads, fake_transport_factory):
        """A server that points back at a visited page is a ProtocolError."""
        looping = payloads.json_response(
            payloads.rest_body(payloads.rest_records(10), total=10_000, done=False, next_url=_locator(2000))
        )
        transport = fake_transport_factory([looping, looping])

        with pytest.raises(ProtocolError, match="repeated"):
            await ContinuationPaginator(transport).run(_context())
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_auth_failure(self, payloads, fake_transport_factory):
        """An expired session aborts with AuthError."""
        transport = fake_transport_factory(
            [payloads.json_response([{"errorCode": "INVALID_SESSION_ID"}], status=401)]
        )

        with pytest.raises(AuthError):
            await ContinuationPaginator(transport).run(_context())

    @pytest.mark.asyncio
    async def test_unexpected_shape(self, payloads, fake_transport_factory):
        """A body that is not a query page is a ParseError."""
        transport = fake_transport_factory([payloads.json_response({"records": "nope"})])

        with pytest.raises(ParseError):
            await ContinuationPaginator(transport).run(_context())
