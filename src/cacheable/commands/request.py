"""Request commands -- compute cache keys and fetch through the cache.

``cacheable key`` prints the key a request would be stored under, which is
what ``cacheable cache invalidate`` expects. ``cacheable fetch`` sends a
request through a caching client and prints the response body on stdout,
reporting hit or miss on stderr.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

import httpx
import typer

from cacheable.exceptions import ConnectionError_, InvalidUsageError
from cacheable.models import CacheConfig
from cacheable.output import debug, format_response, info, print_data, warning


def _parse_headers(values: Optional[list[str]]) -> list[tuple[str, str]]:
    """Parse ``Name: value`` strings into header pairs."""
    headers: list[tuple[str, str]] = []
    for raw in values or []:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise InvalidUsageError(f"Invalid header (expected 'Name: value'): {raw}")
        headers.append((name.strip(), value.strip()))
    return headers


def _build_request(
    method: str,
    url: str,
    headers: Optional[list[str]],
    data: Optional[str],
) -> httpx.Request:
    try:
        return httpx.Request(
            method.upper(),
            url,
            headers=_parse_headers(headers),
            content=data.encode() if data is not None else None,
        )
    except httpx.InvalidURL as exc:
        raise InvalidUsageError(f"Invalid URL {url!r}: {exc}") from exc


class _RecordingProvider:
    """Delegating provider that remembers whether the last lookup hit."""

    def __init__(self, provider) -> None:
        self._provider = provider
        self.hit = False

    def get(self, key: str) -> Optional[httpx.Response]:
        response = self._provider.get(key)
        self.hit = response is not None
        return response

    def set(self, key: str, response: httpx.Response, ttl: timedelta) -> None:
        self._provider.set(key, response, ttl)


def _send(client: httpx.Client, request: httpx.Request) -> httpx.Response:
    try:
        return client.send(request)
    except httpx.TransportError as exc:
        raise ConnectionError_(f"{request.method} {request.url} failed: {exc}") from exc


def key_command(
    method: str = typer.Argument(help="HTTP method, e.g. GET."),
    url: str = typer.Argument(help="Absolute request URL."),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Request header 'Name: value' (repeatable)."
    ),
    data: Optional[str] = typer.Option(None, "--data", "-d", help="Raw request body."),
) -> None:
    """Print the cache key of a request.

    Example::

        cacheable key GET "https://api.example.com/users?page=2" -H "Accept: application/json"
    """
    from cacheable.keys import compute_key, sorted_headers, sorted_params

    request = _build_request(method, url, header, data)
    debug(f"Params: {sorted_params(request)}")
    debug(f"Headers: {sorted_headers(request)}")
    print_data(compute_key(request))


def fetch_command(
    url: str = typer.Argument(help="Absolute request URL."),
    method: str = typer.Option("GET", "--request", "-X", help="HTTP method."),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Request header 'Name: value' (repeatable)."
    ),
    data: Optional[str] = typer.Option(None, "--data", "-d", help="Raw request body."),
    key: str = typer.Option("", "--key", help="Store under this key instead of a computed one."),
    ttl: Optional[int] = typer.Option(
        None, "--ttl", min=0, help="TTL in seconds for this response (0 is honoured)."
    ),
    cache_dir: Optional[str] = typer.Option(
        None, "--cache-dir", help="Cache directory (overrides config and env)."
    ),
) -> None:
    """Send a request through the response cache and print the body.

    Example::

        cacheable fetch https://api.example.com/users --ttl 60
    """
    from cacheable.config import cache_directory, create_client, resolve_settings
    from cacheable.context import with_cache_config
    from cacheable.providers import DiskCacheProvider

    settings = resolve_settings(cli_cache_dir=cache_dir)
    request = _build_request(method, url, header, data)
    override = CacheConfig(key=key, ttl=timedelta(seconds=ttl) if ttl is not None else None)
    with_cache_config(request, override)

    if settings.enabled:
        with DiskCacheProvider(cache_directory(settings)) as disk:
            provider = _RecordingProvider(disk)
            with create_client(settings, provider=provider) as client:
                response = _send(client, request)
        info(f"Cache {'hit' if provider.hit else 'miss'}: {request.method} {request.url}")
    else:
        with create_client(settings) as client:
            response = _send(client, request)

    if not response.is_success:
        warning(f"HTTP {response.status_code}")
    format_response(response.text)
