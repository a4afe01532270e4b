"""Settings for the ``cacheable`` CLI.

The global config is a JSON :class:`~cacheable.models.GlobalConfig` under the
XDG config directory (``~/.cacheable/`` outside Linux/BSD). Effective cache
settings are resolved from CLI flags, then ``CACHEABLE_*`` environment
variables, then that file.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from cacheable.exceptions import ConfigError
from cacheable.models import CacheSettings, GlobalConfig
from cacheable.providers.base import CacheProvider
from cacheable.providers.disk import DiskCacheProvider
from cacheable.transport import CacheTransport

_APP_NAME = "cacheable"
_CONFIG_FILENAME = "config.json"

ENV_TTL_SECONDS = "CACHEABLE_TTL_SECONDS"
ENV_CACHE_DIR = "CACHEABLE_CACHE_DIR"
ENV_DISABLED = "CACHEABLE_DISABLED"


def _is_xdg_platform() -> bool:
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _app_dir(xdg_var: str, xdg_default: str, fallback: str) -> Path:
    if _is_xdg_platform():
        path = Path(os.environ.get(xdg_var) or Path.home() / xdg_default) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / fallback
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Return ``$XDG_CONFIG_HOME/cacheable``, creating it if necessary."""
    return _app_dir("XDG_CONFIG_HOME", ".config", "")


def get_cache_dir() -> Path:
    """Return the default response cache directory, creating it if necessary."""
    return _app_dir("XDG_CACHE_HOME", ".cache", "cache")


def get_data_dir() -> Path:
    """Return the directory crash logs are written to."""
    return _app_dir("XDG_DATA_HOME", ".local/share", "logs")


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to a sibling temp file, then rename it over *path*."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = tempfile.NamedTemporaryFile(
        "w", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False, encoding="utf-8"
    )
    try:
        with tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp.name, path)
    except BaseException:
        Path(tmp.name).unlink(missing_ok=True)
        raise


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global config, or defaults when no file exists.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


def resolve_settings(
    cli_cache_dir: Optional[str] = None,
    config: Optional[GlobalConfig] = None,
) -> CacheSettings:
    """Resolve the effective cache settings.

    ``--cache-dir`` wins over ``CACHEABLE_CACHE_DIR``, and the environment
    wins over the config file. ``CACHEABLE_DISABLED`` accepts ``1``,
    ``true`` or ``yes``.

    Raises:
        ConfigError: If an environment variable holds an invalid value.
    """
    if config is None:
        config = load_global_config()
    data: dict[str, Any] = config.cache.model_dump()

    env_ttl = os.environ.get(ENV_TTL_SECONDS)
    if env_ttl:
        data["ttl_seconds"] = env_ttl
    env_dir = os.environ.get(ENV_CACHE_DIR)
    if env_dir:
        data["directory"] = env_dir
    if os.environ.get(ENV_DISABLED, "").lower() in ("1", "true", "yes"):
        data["enabled"] = False
    if cli_cache_dir is not None:
        data["directory"] = cli_cache_dir

    try:
        return CacheSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid cache settings: {exc}") from exc


def cache_directory(settings: CacheSettings) -> Path:
    """Return the directory the disk provider should use for *settings*."""
    if settings.directory:
        return Path(settings.directory).expanduser()
    return get_cache_dir()


def create_client(
    settings: CacheSettings,
    provider: Optional[CacheProvider] = None,
    transport: Optional[httpx.BaseTransport] = None,
    **client_kwargs: Any,
) -> httpx.Client:
    """Build an :class:`httpx.Client` that caches according to *settings*.

    When caching is disabled a plain client over *transport* is returned.
    Without a *provider*, a :class:`~cacheable.providers.DiskCacheProvider`
    is opened on :func:`cache_directory`. Extra keyword arguments are
    passed to :class:`httpx.Client`.
    """
    if not settings.enabled:
        return httpx.Client(transport=transport, **client_kwargs)
    if provider is None:
        provider = DiskCacheProvider(cache_directory(settings))
    cache_transport = CacheTransport(provider, transport, ttl=settings.ttl_seconds)
    return httpx.Client(transport=cache_transport, **client_kwargs)
