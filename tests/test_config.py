"""Tests for cacheable.config -- XDG paths, atomic writes, settings precedence, wiring."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from cacheable.config import (
    _atomic_write,
    cache_directory,
    create_client,
    get_cache_dir,
    get_config_dir,
    load_global_config,
    resolve_settings,
    save_global_config,
)
from cacheable.exceptions import ConfigError
from cacheable.models import CacheSettings, GlobalConfig
from cacheable.transport import CacheTransport


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestPaths:
    def test_config_dir_uses_xdg(self, isolated_config: Path) -> None:
        assert get_config_dir() == isolated_config / "config" / "cacheable"
        assert get_config_dir().is_dir()

    def test_cache_dir_uses_xdg(self, isolated_config: Path) -> None:
        assert get_cache_dir() == isolated_config / "cache" / "cacheable"

    def test_fallback_on_non_xdg(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("cacheable.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert get_cache_dir() == tmp_path / ".cacheable" / "cache"


# ---------------------------------------------------------------------------
# Atomic writes and global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_atomic_write_leaves_no_temp_files(self, tmp_path: Path) -> None:
        target = tmp_path / "out.json"
        _atomic_write(target, "{}")
        assert target.read_text() == "{}"
        assert [p.name for p in tmp_path.iterdir()] == ["out.json"]

    def test_missing_file_gives_defaults(self, isolated_config: Path) -> None:
        assert load_global_config() == GlobalConfig()

    def test_round_trip(self, isolated_config: Path) -> None:
        config = GlobalConfig()
        config.cache.ttl_seconds = 42
        save_global_config(config)
        assert load_global_config().cache.ttl_seconds == 42

    def test_invalid_json_raises(self, isolated_config: Path) -> None:
        (get_config_dir() / "config.json").write_text("{not json")
        with pytest.raises(ConfigError):
            load_global_config()

    def test_invalid_value_raises(self, isolated_config: Path) -> None:
        (get_config_dir() / "config.json").write_text(json.dumps({"cache": {"ttl_seconds": -1}}))
        with pytest.raises(ConfigError):
            load_global_config()


# ---------------------------------------------------------------------------
# Settings precedence
# ---------------------------------------------------------------------------


class TestResolveSettings:
    def test_defaults(self, isolated_config: Path) -> None:
        assert resolve_settings() == CacheSettings()

    def test_config_file(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig.model_validate({"cache": {"ttl_seconds": 60}}))
        assert resolve_settings().ttl_seconds == 60

    def test_env_beats_config(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        save_global_config(GlobalConfig.model_validate({"cache": {"ttl_seconds": 60}}))
        monkeypatch.setenv("CACHEABLE_TTL_SECONDS", "90")
        monkeypatch.setenv("CACHEABLE_CACHE_DIR", "/tmp/elsewhere")
        settings = resolve_settings()
        assert settings.ttl_seconds == 90
        assert settings.directory == "/tmp/elsewhere"

    def test_cli_beats_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CACHEABLE_CACHE_DIR", "/tmp/elsewhere")
        assert resolve_settings(cli_cache_dir="/tmp/here").directory == "/tmp/here"

    def test_disabled_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CACHEABLE_DISABLED", "true")
        assert resolve_settings().enabled is False

    def test_invalid_env_raises(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CACHEABLE_TTL_SECONDS", "soon")
        with pytest.raises(ConfigError):
            resolve_settings()

    def test_cache_directory_default(self, isolated_config: Path) -> None:
        assert cache_directory(CacheSettings()) == get_cache_dir()

    def test_cache_directory_explicit(self, tmp_path: Path) -> None:
        assert cache_directory(CacheSettings(directory=str(tmp_path))) == tmp_path


# ---------------------------------------------------------------------------
# Client wiring
# ---------------------------------------------------------------------------


class TestCreateClient:
    def test_enabled_client_caches(self, tmp_path: Path) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, text="hello")

        settings = CacheSettings(directory=str(tmp_path), ttl_seconds=60)
        with create_client(settings, transport=httpx.MockTransport(handler)) as client:
            assert isinstance(client._transport, CacheTransport)
            client.get("https://api.example.com/")
            assert client.get("https://api.example.com/").text == "hello"

        assert len(calls) == 1

    def test_disabled_client_does_not_cache(self, tmp_path: Path) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200)

        settings = CacheSettings(enabled=False, directory=str(tmp_path))
        with create_client(settings, transport=httpx.MockTransport(handler)) as client:
            client.get("https://api.example.com/")
            client.get("https://api.example.com/")

        assert len(calls) == 2
