"""Deterministic cache keys for :class:`httpx.Request` objects.

A key is the base64-encoded SHA-1 digest of, in order:

1. the HTTP method,
2. the target ``host[:port]``,
3. the URL path,
4. every query parameter as ``name=value1,value2``, sorted,
5. every header as ``name=value1,value2``, sorted,
6. the raw request body, if any.

Query parameters and headers are sorted so that two requests differing only
in ordering share a key. Nothing else is normalised: header values, path
casing and body bytes are hashed verbatim. The ``Host`` header httpx derives
from the URL is left out; an explicit one naming another host is hashed.

The digest algorithm is fixed. Changing it would orphan every key already
persisted by a provider.
"""

from __future__ import annotations

import base64
import hashlib
import logging
from collections.abc import AsyncIterable, Iterable
from typing import Any

import httpx

logger = logging.getLogger(__name__)


def compute_key(request: httpx.Request) -> str:
    """Return the cache key for *request*.

    The body is buffered with :meth:`httpx.Request.read`, so the request can
    still be sent afterwards. If the body fails part way, the bytes read so far
    are hashed and left on the request in place of the broken stream.

    Args:
        request: The outgoing request.

    Returns:
        The padded, standard-alphabet base64 SHA-1 digest.
    """
    digest = _digest_head(request)
    digest.update(_read_body(request))
    return base64.b64encode(digest.digest()).decode("ascii")


async def acompute_key(request: httpx.Request) -> str:
    """Async variant of :func:`compute_key` for requests with async bodies."""
    digest = _digest_head(request)
    digest.update(await _aread_body(request))
    return base64.b64encode(digest.digest()).decode("ascii")


def sorted_params(request: httpx.Request) -> list[str]:
    """Return the query parameters as sorted ``name=v1,v2`` strings."""
    return _join_sorted(request.url.params.multi_items())


def sorted_headers(request: httpx.Request) -> list[str]:
    """Return the headers as sorted ``name=v1,v2`` strings.

    A ``Host`` header naming the URL authority adds nothing and is skipped.
    One that points elsewhere is kept, since it selects a different resource.
    """
    authority = request.url.netloc.decode("ascii")
    return _join_sorted(
        (name, value)
        for name, value in request.headers.multi_items()
        if not (name == "host" and value == authority)
    )


def _digest_head(request: httpx.Request) -> Any:
    digest = hashlib.sha1()
    digest.update(request.method.encode())
    digest.update(request.url.netloc)
    digest.update(request.url.path.encode())
    for item in sorted_params(request):
        digest.update(item.encode())
    for item in sorted_headers(request):
        digest.update(item.encode())
    return digest


def _join_sorted(items: Iterable[tuple[str, str]]) -> list[str]:
    grouped: dict[str, list[str]] = {}
    for name, value in items:
        grouped.setdefault(name, []).append(value)
    return sorted(f"{name}={','.join(values)}" for name, values in grouped.items())


def _read_body(request: httpx.Request) -> bytes:
    if not isinstance(request.stream, Iterable):
        logger.debug("Body of %s %s is async-only; hashing it as empty", request.method, request.url)
        return b""
    chunks: list[bytes] = []
    try:
        for chunk in request.stream:
            chunks.append(chunk)
    except Exception as exc:
        # Best effort: keep whatever arrived so the request can still be sent.
        logger.debug("Could not read body of %s %s for hashing: %s", request.method, request.url, exc)
    body = b"".join(chunks)
    request.stream = httpx.ByteStream(body)
    request.read()
    return body


async def _aread_body(request: httpx.Request) -> bytes:
    if not isinstance(request.stream, AsyncIterable):
        logger.debug("Body of %s %s is sync-only; hashing it as empty", request.method, request.url)
        return b""
    chunks: list[bytes] = []
    try:
        async for chunk in request.stream:
            chunks.append(chunk)
    except Exception as exc:
        logger.debug("Could not read body of %s %s for hashing: %s", request.method, request.url, exc)
    body = b"".join(chunks)
    request.stream = httpx.ByteStream(body)
    await request.aread()
    return body
