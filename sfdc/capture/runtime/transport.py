"""Transport capability and its aiohttp implementation."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Protocol

import aiohttp

from ..core.config import DEFAULT_HTTP_TIMEOUT
from ..core.exceptions import TransportError
from ..models import HTTPRequest, HTTPResponse


class StreamingResponse(Protocol):
    """Response whose body is delivered incrementally."""

    url: str
    status: int
    headers: dict[str, str]

    def iter_chunks(self) -> AsyncIterator[bytes]: ...


class Transport(Protocol):
    """Anything that can carry an HTTPRequest.

    ``send`` reads the whole body before returning. ``stream`` yields a
    StreamingResponse whose chunks arrive as progress events.
    """

    async def send(self, request: HTTPRequest) -> HTTPResponse: ...

    def stream(self, request: HTTPRequest) -> AbstractAsyncContextManager[StreamingResponse]: ...


class _AiohttpStream:
    def __init__(self, response: aiohttp.ClientResponse, chunk_size: int) -> None:
        self._response = response
        self._chunk_size = chunk_size
        self.url = str(response.url)
        self.status = response.status
        self.headers = dict(response.headers)

    async def iter_chunks(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._response.content.iter_chunked(self._chunk_size):
                yield chunk
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"Stream from {self.url} failed: {e}") from e


class HTTPClient:
    """Async HTTP client wrapper.

    Status codes are returned, not raised; deciding what a 4xx means is up
    to the caller.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        chunk_size: int = 64 * 1024,
    ) -> None:
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.chunk_size = chunk_size
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    def _resolve(self, url: str) -> str:
        # If base_url is set and url is relative, combine them
        if self.base_url and not url.startswith("http"):
            return f"{self.base_url}{url}"
        return url

    async def send(self, request: HTTPRequest) -> HTTPResponse:
        """Issue a request and read the full body.

        Raises:
            TransportError: On connection failure or timeout
        """
        url = self._resolve(request.url)
        try:
            async with self.session.request(
                request.method, url, headers=request.headers, data=request.body
            ) as response:
                body = await response.read()
                return HTTPResponse(
                    url=str(response.url),
                    status=response.status,
                    headers=dict(response.headers),
                    body=body,
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"{request.method} {url} failed: {e}") from e

    @asynccontextmanager
    async def stream(self, request: HTTPRequest) -> AsyncIterator[_AiohttpStream]:
        """Issue a request and expose the body as a chunk stream.

        Raises:
            TransportError: On connection failure or timeout
        """
        url = self._resolve(request.url)
        try:
            response = await self.session.request(
                request.method, url, headers=request.headers, data=request.body
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"{request.method} {url} failed: {e}") from e
        try:
            yield _AiohttpStream(response, self.chunk_size)
        finally:
            response.release()

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
