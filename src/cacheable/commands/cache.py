"""Cache commands -- inspect and empty the disk response cache.

Provides the ``cacheable cache`` sub-command group operating on the
:class:`~cacheable.providers.DiskCacheProvider` directory selected by
the resolved settings (``--cache-dir``, ``CACHEABLE_CACHE_DIR``, config file,
then the XDG cache directory).
"""

from __future__ import annotations

from typing import Optional

import typer

from cacheable.output import format_response, info, success, warning


cache_app = typer.Typer(no_args_is_help=True)

_CACHE_DIR_OPTION = typer.Option(
    None, "--cache-dir", help="Cache directory (overrides config and env)."
)


def _open_provider(cache_dir: Optional[str]):
    from cacheable.config import cache_directory, resolve_settings
    from cacheable.providers import DiskCacheProvider

    settings = resolve_settings(cli_cache_dir=cache_dir)
    return DiskCacheProvider(cache_directory(settings))


@cache_app.command("stats")
def cache_stats(cache_dir: Optional[str] = _CACHE_DIR_OPTION) -> None:
    """Show the number of entries and disk usage of the cache."""
    with _open_provider(cache_dir) as provider:
        format_response(provider.stats())


@cache_app.command("clear")
def cache_clear(cache_dir: Optional[str] = _CACHE_DIR_OPTION) -> None:
    """Remove every cached response."""
    with _open_provider(cache_dir) as provider:
        removed = provider.clear()
    success(f"Removed {removed} cached response(s).")


@cache_app.command("invalidate")
def cache_invalidate(
    key: str = typer.Argument(help="Cache key as printed by 'cacheable key'."),
    cache_dir: Optional[str] = _CACHE_DIR_OPTION,
) -> None:
    """Remove the response stored under KEY."""
    with _open_provider(cache_dir) as provider:
        removed = provider.invalidate(key)
    if removed:
        success(f"Removed {key}")
    else:
        warning(f"No cached response for {key}")
        info("Keys are printed by 'cacheable key METHOD URL'.")
