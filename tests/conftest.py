"""Fixtures shared by the cacheable test suites."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import httpx
import pytest

from cacheable.output import reset_output
from cacheable.providers import CacheProvider


@pytest.fixture(autouse=True)
def _fresh_output() -> None:
    """Drop the global OutputManager, whose consoles outlive CliRunner's streams."""
    yield
    reset_output()


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every XDG directory into *tmp_path* and clear ``CACHEABLE_*`` variables."""
    monkeypatch.setattr("cacheable.config._is_xdg_platform", lambda: True)
    for var, sub in (("XDG_CONFIG_HOME", "config"), ("XDG_CACHE_HOME", "cache"), ("XDG_DATA_HOME", "data")):
        monkeypatch.setenv(var, str(tmp_path / sub))
    for var in ("CACHEABLE_TTL_SECONDS", "CACHEABLE_CACHE_DIR", "CACHEABLE_DISABLED"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def mock_provider() -> MagicMock:
    """A provider that misses on every key."""
    provider = MagicMock(spec=CacheProvider)
    provider.get.return_value = None
    return provider


@pytest.fixture
def mock_sender() -> MagicMock:
    sender = MagicMock()
    sender.return_value = httpx.Response(200, content=b"ok")
    return sender


@pytest.fixture
def cli_runner():
    from typer.testing import CliRunner

    return CliRunner()
