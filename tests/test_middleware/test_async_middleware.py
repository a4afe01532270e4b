"""Tests for the asynchronous caching middleware."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from cacheable.context import with_cache_config
from cacheable.keys import compute_key
from cacheable.middleware import async_cacheable_middleware
from cacheable.models import CacheConfig


@pytest.fixture
def async_sender() -> AsyncMock:
    sender = AsyncMock()
    sender.return_value = httpx.Response(200, content=b"ok")
    return sender


@pytest.mark.asyncio
async def test_hit_short_circuits_sender(mock_provider: MagicMock, async_sender: AsyncMock) -> None:
    cached = httpx.Response(200, content=b"cached")
    mock_provider.get.return_value = cached
    send = async_cacheable_middleware(mock_provider)(async_sender)

    response = await send(httpx.Request("GET", "https://localhost"))

    assert response is cached
    async_sender.assert_not_awaited()


@pytest.mark.asyncio
async def test_miss_stores_with_computed_key(mock_provider: MagicMock, async_sender: AsyncMock) -> None:
    request = httpx.Request("GET", "https://localhost/users")
    send = async_cacheable_middleware(mock_provider, ttl=30)(async_sender)

    response = await send(request)

    async_sender.assert_awaited_once_with(request)
    mock_provider.set.assert_called_once_with(compute_key(request), response, timedelta(seconds=30))


@pytest.mark.asyncio
async def test_stored_response_body_is_read(mock_provider: MagicMock) -> None:
    async def body():
        yield b"streamed"

    async def sender(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=body())

    send = async_cacheable_middleware(mock_provider)(sender)
    await send(httpx.Request("GET", "https://localhost"))

    stored = mock_provider.set.call_args.args[1]
    assert stored.content == b"streamed"


@pytest.mark.asyncio
async def test_invalid_response_not_stored(mock_provider: MagicMock, async_sender: AsyncMock) -> None:
    async_sender.return_value = httpx.Response(500)
    send = async_cacheable_middleware(mock_provider)(async_sender)

    response = await send(httpx.Request("GET", "https://localhost"))

    assert response.status_code == 500
    mock_provider.set.assert_not_called()


@pytest.mark.asyncio
async def test_sender_error_propagates(mock_provider: MagicMock, async_sender: AsyncMock) -> None:
    async_sender.side_effect = httpx.ReadTimeout("slow")
    send = async_cacheable_middleware(mock_provider)(async_sender)

    with pytest.raises(httpx.ReadTimeout):
        await send(httpx.Request("GET", "https://localhost"))

    mock_provider.set.assert_not_called()


@pytest.mark.asyncio
async def test_async_body_hashed_and_kept(mock_provider: MagicMock, async_sender: AsyncMock) -> None:
    async def body():
        yield b'{"limit":1}'

    request = httpx.Request("POST", "https://localhost", content=body(), headers={"Content-Length": "11"})
    buffered = httpx.Request("POST", "https://localhost", content=b'{"limit":1}')
    send = async_cacheable_middleware(mock_provider)(async_sender)

    await send(request)

    mock_provider.get.assert_called_once_with(compute_key(buffered))
    assert request.content == b'{"limit":1}'


@pytest.mark.asyncio
async def test_override_key_and_ttl(mock_provider: MagicMock, async_sender: AsyncMock) -> None:
    request = with_cache_config(
        httpx.Request("GET", "https://localhost"),
        CacheConfig(key="fixed", ttl=timedelta(seconds=5)),
    )
    send = async_cacheable_middleware(mock_provider, ttl=300)(async_sender)

    response = await send(request)

    mock_provider.set.assert_called_once_with("fixed", response, timedelta(seconds=5))


@pytest.mark.asyncio
async def test_broken_body_still_sent(mock_provider: MagicMock) -> None:
    async def body():
        yield b"par"
        raise OSError("connection reset")

    async def echo(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=await request.aread())

    request = httpx.Request("POST", "https://localhost", content=body(), headers={"Content-Length": "3"})
    send = async_cacheable_middleware(mock_provider)(echo)

    response = await send(request)

    assert response.content == b"par"
    mock_provider.set.assert_called_once()
