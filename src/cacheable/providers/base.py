"""The cache provider interface consumed by the middleware.

The middleware never stores anything itself. It talks to a provider
through two operations:

- ``get(key)`` returns the stored :class:`httpx.Response`, or ``None`` when
  nothing is stored under *key*.
- ``set(key, response, ttl)`` stores *response* under *key*. The TTL is
  advisory; expiry is entirely the provider's business and the middleware
  never re-checks it.

Any object with these two methods is a provider; subclassing is not
required.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional, Protocol, runtime_checkable

import httpx


@runtime_checkable
class CacheProvider(Protocol):
    """Storage for cached HTTP responses."""

    def get(self, key: str) -> Optional[httpx.Response]: ...

    def set(self, key: str, response: httpx.Response, ttl: timedelta) -> None: ...
