"""Intercepting transport decorator.

Wraps any Transport and reports each successful JSON exchange to an
observer, without changing what the caller receives.

Architecture:
    The interceptor is registered when the host's transport is built
    (``InterceptingTransport(HTTPClient(), observer)``) instead of patching a
    global network primitive. Both call styles are normalized into one
    Exchange:
    - send(): observed as soon as the full body is read
    - stream(): chunks pass through untouched; observed once the caller has
      consumed the stream to the end (an abandoned stream is never observed)

Design Decisions:
    - Observation is best-effort. Any exception raised while parsing or
      classifying is logged at DEBUG, counted, and dropped; the caller's
      result is exactly what the inner transport produced.
    - ``inner`` is exposed so the reconstructor can issue its own requests
      without feeding them back into classification.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass

from ..models import Exchange, HTTPRequest, HTTPResponse
from .transport import StreamingResponse, Transport

logger = logging.getLogger(__name__)

ExchangeObserver = Callable[[Exchange], None]


@dataclass
class InterceptorMetrics:
    """Counters for observed traffic."""

    exchanges_seen: int = 0
    exchanges_observed: int = 0
    observation_errors: int = 0


def _is_json(content_type: str) -> bool:
    return "json" in content_type.lower()


class _ObservedStream:
    """Pass-through stream that buffers chunks for observation on completion."""

    def __init__(
        self,
        inner: StreamingResponse,
        on_complete: Callable[[bytes], None],
    ) -> None:
        self._inner = inner
        self._on_complete = on_complete
        self.url = inner.url
        self.status = inner.status
        self.headers = inner.headers

    async def iter_chunks(self) -> AsyncIterator[bytes]:
        buffer: list[bytes] = []
        async for chunk in self._inner.iter_chunks():
            buffer.append(chunk)
            yield chunk
        self._on_complete(b"".join(buffer))


class InterceptingTransport:
    """Transport decorator that observes responses for an ExchangeObserver."""

    def __init__(self, inner: Transport, observer: ExchangeObserver) -> None:
        self._inner = inner
        self._observer = observer
        self._metrics = InterceptorMetrics()

    @property
    def inner(self) -> Transport:
        """Underlying transport; requests sent here are not observed."""
        return self._inner

    @property
    def metrics(self) -> InterceptorMetrics:
        return self._metrics

    async def send(self, request: HTTPRequest) -> HTTPResponse:
        response = await self._inner.send(request)
        self._observe(request, response)
        return response

    @asynccontextmanager
    async def stream(self, request: HTTPRequest) -> AsyncIterator[StreamingResponse]:
        async with self._inner.stream(request) as response:

            def on_complete(body: bytes) -> None:
                self._observe(
                    request,
                    HTTPResponse(
                        url=response.url,
                        status=response.status,
                        headers=dict(response.headers),
                        body=body,
                    ),
                )

            yield _ObservedStream(response, on_complete)

    async def close(self) -> None:
        close = getattr(self._inner, "close", None)
        if close is not None:
            await close()

    def _observe(self, request: HTTPRequest, response: HTTPResponse) -> None:
        self._metrics.exchanges_seen += 1
        if not response.ok or not _is_json(response.content_type):
            return
        try:
            exchange = Exchange(
                url=request.url,
                request_body=request.body,
                request_headers=dict(request.headers),
                response_json=response.json(),
                status=response.status,
                content_type=response.content_type,
            )
            self._observer(exchange)
            self._metrics.exchanges_observed += 1
        except Exception:
            # Never let observation break the host's own request handling
            self._metrics.observation_errors += 1
            logger.debug("Observation failed for %s", request.url, exc_info=True)
