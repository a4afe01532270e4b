"""Cache providers for the caching middleware.

:class:`CacheProvider` is the two-method interface the middleware consumes.
:class:`DiskCacheProvider` is a ready-made implementation persisting
responses with :mod:`diskcache`; any object with matching ``get`` and
``set`` methods works just as well.
"""

from cacheable.providers.base import CacheProvider
from cacheable.providers.disk import DiskCacheProvider

__all__ = ["CacheProvider", "DiskCacheProvider"]
