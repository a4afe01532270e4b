"""cacheable -- transparent response caching for httpx clients.

The package wraps any request sender in a caching layer: each request is
reduced to a deterministic key, looked up in a pluggable provider, and
either answered from the cache or sent and conditionally stored.

Typical use::

    import httpx
    from cacheable import CacheTransport, DiskCacheProvider

    client = httpx.Client(transport=CacheTransport(DiskCacheProvider("/tmp/cache"), ttl=60))

Modules:
    keys: Cache key computation.
    middleware: The caching decorator for sync and async senders.
    context: Per-request key/TTL overrides.
    transport: httpx transports applying the middleware.
    providers: The provider interface and a diskcache implementation.
    config: XDG-aware settings and client wiring.
    app: Typer command line.
"""

__version__ = "0.3.0"

from cacheable.context import cache_config_scope, get_cache_config, with_cache_config  # noqa: E402
from cacheable.keys import acompute_key, compute_key  # noqa: E402
from cacheable.middleware import (  # noqa: E402
    async_cacheable_middleware,
    cacheable_middleware,
    status_code_validator,
)
from cacheable.models import CacheConfig  # noqa: E402
from cacheable.providers import CacheProvider, DiskCacheProvider  # noqa: E402
from cacheable.transport import AsyncCacheTransport, CacheTransport  # noqa: E402

__all__ = [
    "AsyncCacheTransport",
    "CacheConfig",
    "CacheProvider",
    "CacheTransport",
    "DiskCacheProvider",
    "acompute_key",
    "async_cacheable_middleware",
    "cache_config_scope",
    "cacheable_middleware",
    "compute_key",
    "get_cache_config",
    "status_code_validator",
    "with_cache_config",
]
