"""Per-request cache overrides.

A :class:`~cacheable.models.CacheConfig` can reach the middleware two ways:

- attached to one request through ``request.extensions["cache_config"]``,
  either with :func:`with_cache_config` or by passing
  ``extensions={"cache_config": ...}`` to any :class:`httpx.Client` method;
- installed for a block of code with :func:`cache_config_scope`, which
  applies to every request sent from the current thread or task.

A request-level override wins over the ambient one. With neither, the
empty default applies (computed key, middleware TTL).
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from cacheable.models import CacheConfig

EXTENSION_KEY = "cache_config"
"""Key under which a :class:`CacheConfig` is stored in ``request.extensions``."""

_DEFAULT = CacheConfig()

_scoped_config: ContextVar[Optional[CacheConfig]] = ContextVar(
    "cacheable_cache_config", default=None
)


def with_cache_config(request: httpx.Request, config: CacheConfig) -> httpx.Request:
    """Attach *config* to *request* and return the same request.

    Example::

        request = client.build_request("GET", "/users")
        with_cache_config(request, CacheConfig(ttl=timedelta(seconds=5)))
        client.send(request)
    """
    request.extensions[EXTENSION_KEY] = config
    return request


@contextmanager
def cache_config_scope(config: CacheConfig) -> Iterator[CacheConfig]:
    """Apply *config* to every request sent inside the ``with`` block.

    Example::

        with cache_config_scope(CacheConfig(key="dashboard")):
            client.get("/dashboard")
    """
    token = _scoped_config.set(config)
    try:
        yield config
    finally:
        _scoped_config.reset(token)


def get_cache_config(request: httpx.Request) -> CacheConfig:
    """Return the override that applies to *request*.

    Extension values that are neither a :class:`CacheConfig` nor a mapping
    that validates into one are ignored.
    """
    config = _coerce(request.extensions.get(EXTENSION_KEY))
    if config is not None:
        return config
    scoped = _scoped_config.get()
    if scoped is not None:
        return scoped
    return _DEFAULT


def _coerce(value: Any) -> Optional[CacheConfig]:
    if isinstance(value, CacheConfig):
        return value
    if isinstance(value, dict):
        try:
            return CacheConfig.model_validate(value)
        except ValidationError:
            return None
    return None
