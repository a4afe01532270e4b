"""Disk-backed cache provider built on :mod:`diskcache`.

Responses are stored as plain dicts (``status_code``, ``headers``,
``content``, ``http_version``) so they survive pickling, and are rebuilt
into a fresh :class:`httpx.Response` on every hit. The TTL given by the
middleware becomes the entry's ``expire`` time; :mod:`diskcache` enforces
it.

The stored content is the decoded body, so headers describing the wire
encoding (``Content-Encoding``, ``Content-Length``, ``Transfer-Encoding``)
are dropped before storing. httpx recomputes ``Content-Length`` when the
response is rebuilt.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Any, Optional

import diskcache
import httpx

_WIRE_HEADERS = frozenset({"content-encoding", "content-length", "transfer-encoding"})


class DiskCacheProvider:
    """Store HTTP responses in a :class:`diskcache.Cache` directory.

    Args:
        directory: Root directory for the cache. A ``responses/``
            subdirectory is created inside it.

    Example::

        provider = DiskCacheProvider("/tmp/http-cache")
        client = httpx.Client(transport=CacheTransport(provider, ttl=60))
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory) / "responses"
        self._cache = diskcache.Cache(str(self._directory))

    def get(self, key: str) -> Optional[httpx.Response]:
        """Return the response stored under *key*, or ``None`` on a miss."""
        entry = self._cache.get(key)
        if entry is None:
            return None
        return httpx.Response(
            status_code=entry["status_code"],
            headers=entry["headers"],
            content=entry["content"],
            extensions={"http_version": entry["http_version"]},
        )

    def set(self, key: str, response: httpx.Response, ttl: timedelta) -> None:
        """Store *response* under *key*, expiring after *ttl*.

        The response body is read (and kept on the response) if it has not
        been read yet.
        """
        content = response.read()
        entry = {
            "status_code": response.status_code,
            "headers": [
                (name, value)
                for name, value in response.headers.multi_items()
                if name not in _WIRE_HEADERS
            ],
            "content": content,
            "http_version": response.http_version.encode("ascii"),
        }
        self._cache.set(key, entry, expire=ttl.total_seconds())

    def invalidate(self, key: str) -> bool:
        """Remove the entry stored under *key*.

        Returns:
            ``True`` if an entry was removed.
        """
        return self._cache.delete(key)

    def clear(self) -> int:
        """Remove all entries and return how many were removed."""
        return self._cache.clear()

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``size`` (number of entries), ``volume`` (bytes
            on disk) and ``directory`` (str path).
        """
        return {
            "size": len(self._cache),
            "volume": self._cache.volume(),
            "directory": str(self._directory),
        }

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release resources."""
        self._cache.close()

    def __enter__(self) -> DiskCacheProvider:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
