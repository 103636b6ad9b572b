"""Unit tests for reconstruction variant dispatch."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from sfdc.capture.core import ProtocolError
from sfdc.capture.models import AuraReplayContext, ContinuationReplayContext
from sfdc.capture.runtime.reconstruction import Reconstructor


class TestReconstructor:
    """Test dispatch on replay context type."""

    @pytest.mark.asyncio
    async def test_aura_context_uses_resubmission(self, fake_transport_factory):
        """Aura contexts go to the query-resubmission variant."""
        reconstructor = Reconstructor(fake_transport_factory(), batch_size=10)
        reconstructor._resubmission.run = AsyncMock(return_value="aura")
        reconstructor._continuation.run = AsyncMock(return_value="rest")
        context = AuraReplayContext(
            endpoint_url="https://x/aura", descriptor="d", query_key="query", query="SELECT 1",
            aura_context="c", aura_token="t",
        )

        assert await reconstructor.run(context, total_hint=5) == "aura"
        reconstructor._resubmission.run.assert_awaited_once_with(
            context, seed_rows=(), total_hint=5, on_progress=None
        )
        reconstructor._continuation.run.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_continuation_context_uses_locators(self, fake_transport_factory):
        """Continuation contexts go to the locator variant."""
        reconstructor = Reconstructor(fake_transport_factory())
        reconstructor._continuation.run = AsyncMock(return_value="rest")
        context = ContinuationReplayContext(next_url="https://x/next", authorization="Bearer t")

        assert await reconstructor.run(context, seed_rows=[1]) == "rest"

    @pytest.mark.asyncio
    async def test_missing_context(self, fake_transport_factory):
        """No context means nothing to replay."""
        with pytest.raises(ProtocolError):
            await Reconstructor(fake_transport_factory()).run(None)

    @pytest.mark.asyncio
    async def test_unsupported_context(self, fake_transport_factory):
        """Unknown context types are rejected."""
        with pytest.raises(ProtocolError, match="Unsupported"):
            await Reconstructor(fake_transport_factory()).run({"next_url": "https://x"})
