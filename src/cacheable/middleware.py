"""Response caching middleware for request senders.

A *sender* is any callable that turns an :class:`httpx.Request` into an
:class:`httpx.Response`, raising on failure: a transport's
``handle_request``, a client's ``send``, or another middleware layer.
:func:`cacheable_middleware` builds a :data:`Middleware` that wraps a
sender in a caching sender with the same signature, so layers compose by
plain function application::

    middleware = cacheable_middleware(provider, ttl=60)
    send = middleware(transport.handle_request)
    response = send(request)

Per call the caching sender:

1. resolves the key -- the override key from
   :func:`~cacheable.context.get_cache_config` when non-empty, otherwise
   :func:`~cacheable.keys.compute_key`;
2. asks the provider once; a hit is returned and the wrapped sender is
   never called;
3. on a miss calls the wrapped sender once; its exceptions propagate
   unchanged and nothing is stored;
4. stores the response when the validator accepts it, with the override
   TTL when one is set (zero included) or the default TTL otherwise.

The middleware holds no mutable state and performs no locking. Two
concurrent misses for one key both reach the sender and both store.
Provider errors are not caught.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import Union

import httpx

from cacheable.context import get_cache_config
from cacheable.keys import acompute_key, compute_key
from cacheable.providers.base import CacheProvider

logger = logging.getLogger(__name__)

Sender = Callable[[httpx.Request], httpx.Response]
AsyncSender = Callable[[httpx.Request], Awaitable[httpx.Response]]
Middleware = Callable[[Sender], Sender]
AsyncMiddleware = Callable[[AsyncSender], AsyncSender]
Validator = Callable[[httpx.Response], bool]

DEFAULT_TTL = timedelta(seconds=300)


def status_code_validator(response: httpx.Response) -> bool:
    """Accept responses whose status code is in the 2xx range."""
    return 200 <= response.status_code <= 299


def cacheable_middleware(
    provider: CacheProvider,
    ttl: Union[timedelta, float] = DEFAULT_TTL,
    is_valid: Validator = status_code_validator,
) -> Middleware:
    """Create a middleware that caches responses in *provider*.

    Args:
        provider: Where responses are looked up and stored.
        ttl: Default time-to-live, as a :class:`~datetime.timedelta` or
            seconds. Requests may override it.
        is_valid: Decides whether a response is stored. Replaces the
            default 2xx check entirely.

    Returns:
        A function wrapping a sender in a caching sender.
    """
    default_ttl = _as_timedelta(ttl)

    def middleware(send: Sender) -> Sender:
        def cached_send(request: httpx.Request) -> httpx.Response:
            key = _resolve_key(request) or compute_key(request)

            cached = provider.get(key)
            if cached is not None:
                logger.debug("Cache hit: %s %s", request.method, request.url)
                return cached

            logger.debug("Cache miss: %s %s", request.method, request.url)
            response = send(request)

            if is_valid(response):
                _store(provider, key, request, response, default_ttl)
            else:
                logger.debug(
                    "Not caching %s %s: status %d rejected by validator",
                    request.method, request.url, response.status_code,
                )
            return response

        return cached_send

    return middleware


def async_cacheable_middleware(
    provider: CacheProvider,
    ttl: Union[timedelta, float] = DEFAULT_TTL,
    is_valid: Validator = status_code_validator,
) -> AsyncMiddleware:
    """Async counterpart of :func:`cacheable_middleware`.

    The wrapped sender is awaited. A response about to be stored has its
    body read asynchronously first, so providers may call
    :meth:`httpx.Response.read` on it.
    """
    default_ttl = _as_timedelta(ttl)

    def middleware(send: AsyncSender) -> AsyncSender:
        async def cached_send(request: httpx.Request) -> httpx.Response:
            key = _resolve_key(request) or await acompute_key(request)

            cached = provider.get(key)
            if cached is not None:
                logger.debug("Cache hit: %s %s", request.method, request.url)
                return cached

            logger.debug("Cache miss: %s %s", request.method, request.url)
            response = await send(request)

            if is_valid(response):
                await response.aread()
                _store(provider, key, request, response, default_ttl)
            else:
                logger.debug(
                    "Not caching %s %s: status %d rejected by validator",
                    request.method, request.url, response.status_code,
                )
            return response

        return cached_send

    return middleware


def resolve_ttl(request: httpx.Request, default: timedelta) -> timedelta:
    """Return the override TTL for *request*, or *default* when unset."""
    ttl = get_cache_config(request).ttl
    return default if ttl is None else ttl


def _resolve_key(request: httpx.Request) -> str:
    return get_cache_config(request).key


def _store(
    provider: CacheProvider,
    key: str,
    request: httpx.Request,
    response: httpx.Response,
    default_ttl: timedelta,
) -> None:
    ttl = resolve_ttl(request, default_ttl)
    provider.set(key, response, ttl)
    logger.debug("Cached %s %s for %ss", request.method, request.url, ttl.total_seconds())


def _as_timedelta(ttl: Union[timedelta, float]) -> timedelta:
    if isinstance(ttl, timedelta):
        return ttl
    return timedelta(seconds=ttl)
