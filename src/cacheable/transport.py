"""httpx transports that cache responses.

Mounting a :class:`CacheTransport` on a client adds caching without changing
a single call site::

    client = httpx.Client(transport=CacheTransport(DiskCacheProvider(path), ttl=60))
    client.get("https://api.example.com/users")   # network
    client.get("https://api.example.com/users")   # cache

The transports are thin adapters: all caching decisions live in
:mod:`cacheable.middleware`.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional, Union

import httpx

from cacheable.middleware import (
    DEFAULT_TTL,
    Validator,
    async_cacheable_middleware,
    cacheable_middleware,
    status_code_validator,
)
from cacheable.providers.base import CacheProvider


class CacheTransport(httpx.BaseTransport):
    """Caching wrapper around a synchronous httpx transport.

    Args:
        provider: Where responses are looked up and stored.
        transport: The transport that actually sends requests. Defaults to
            a new :class:`httpx.HTTPTransport`.
        ttl: Default time-to-live for stored responses.
        is_valid: Decides whether a response is stored.
    """

    def __init__(
        self,
        provider: CacheProvider,
        transport: Optional[httpx.BaseTransport] = None,
        ttl: Union[timedelta, float] = DEFAULT_TTL,
        is_valid: Validator = status_code_validator,
    ) -> None:
        self._transport = transport or httpx.HTTPTransport()
        self._send = cacheable_middleware(provider, ttl, is_valid)(
            self._transport.handle_request
        )

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        return self._send(request)

    def close(self) -> None:
        self._transport.close()


class AsyncCacheTransport(httpx.AsyncBaseTransport):
    """Caching wrapper around an asynchronous httpx transport.

    Takes the same arguments as :class:`CacheTransport`; *transport*
    defaults to a new :class:`httpx.AsyncHTTPTransport`.
    """

    def __init__(
        self,
        provider: CacheProvider,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        ttl: Union[timedelta, float] = DEFAULT_TTL,
        is_valid: Validator = status_code_validator,
    ) -> None:
        self._transport = transport or httpx.AsyncHTTPTransport()
        self._send = async_cacheable_middleware(provider, ttl, is_valid)(
            self._transport.handle_async_request
        )

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self._send(request)

    async def aclose(self) -> None:
        await self._transport.aclose()
