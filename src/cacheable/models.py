"""Pydantic models shared across cacheable.

**Per-request override** -- :class:`CacheConfig`, attached to a single
request (or an ambient scope) to force a cache key and/or TTL.

**Configuration models** -- serialised as JSON in the user's config
directory: :class:`CacheSettings` inside :class:`GlobalConfig`.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Per-request override ---


class CacheConfig(BaseModel):
    """Optional per-request configuration altering caching behaviour.

    An empty ``key`` means "compute the key from the request". A ``ttl`` of
    ``None`` means "use the middleware default"; any other value, including
    ``timedelta(0)``, is passed to the provider as is.

    Instances are immutable and created once per request.

    Example::

        CacheConfig(key="users:page-1", ttl=timedelta(seconds=5))
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field(default="", description="Explicit cache key; empty to compute one")
    ttl: Optional[timedelta] = Field(
        default=None, description="Explicit TTL; None to use the middleware default"
    )


# --- Configuration ---


class CacheSettings(BaseModel):
    """Disk cache settings stored in :class:`GlobalConfig`."""

    enabled: bool = Field(default=True, description="Enable response caching")
    ttl_seconds: int = Field(default=300, ge=0, description="Default cache TTL in seconds")
    directory: Optional[str] = Field(
        default=None, description="Cache directory; defaults to the XDG cache dir"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/cacheable/config.json``.

    Loaded and saved by :func:`~cacheable.config.load_global_config` and
    :func:`~cacheable.config.save_global_config`. See
    :func:`~cacheable.config.resolve_settings` for how environment variables
    and CLI flags override these values.
    """

    cache: CacheSettings = Field(default_factory=CacheSettings)
