"""Tests for schemecache.config -- XDG paths and cache directory precedence."""

from __future__ import annotations

from pathlib import Path

import pytest

from schemecache.config import get_cache_dir, resolve_cache_config, resolve_cache_dir
from schemecache.exceptions import ConfigError
from schemecache.models import CacheConfig


# ------------------------------------------------------------------ #
# XDG paths
# ------------------------------------------------------------------ #


class TestXDGPathsLinux:
    """On Linux, XDG_CACHE_HOME is honoured."""

    def test_cache_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("schemecache.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CACHE_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_cache_dir() == tmp_path / ".cache" / "schemecache"

    def test_cache_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom-cache"
        monkeypatch.setattr("schemecache.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CACHE_HOME", str(custom))
        assert get_cache_dir() == custom / "schemecache"

    def test_empty_xdg_value_uses_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("schemecache.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CACHE_HOME", "")
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_cache_dir() == tmp_path / ".cache" / "schemecache"

    def test_cache_dir_not_created(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("schemecache.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))
        assert not get_cache_dir().exists()


class TestXDGPathsFallback:
    """On macOS/Windows, a dotdir under home is used."""

    def test_cache_dir_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("schemecache.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_cache_dir() == tmp_path / ".schemecache" / "cache"


# ------------------------------------------------------------------ #
# Precedence
# ------------------------------------------------------------------ #


class TestResolveCacheDir:
    def test_explicit_wins(self, isolated_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCHEMECACHE_DIR", str(isolated_env / "from-env"))
        assert resolve_cache_dir(str(isolated_env / "explicit")) == isolated_env / "explicit"

    def test_environment_over_default(self, isolated_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCHEMECACHE_DIR", str(isolated_env / "from-env"))
        assert resolve_cache_dir() == isolated_env / "from-env"

    def test_default_when_nothing_set(self, isolated_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("schemecache.config._is_xdg_platform", lambda: True)
        assert resolve_cache_dir() == isolated_env / "xdg-cache" / "schemecache"

    def test_tilde_expanded(self, isolated_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOME", str(isolated_env))
        assert resolve_cache_dir("~/feeds") == isolated_env / "feeds"

    @pytest.mark.parametrize("value", ["", "   "])
    def test_blank_explicit_rejected(self, isolated_env: Path, value: str) -> None:
        with pytest.raises(ConfigError, match="cache directory is required"):
            resolve_cache_dir(value)

    def test_empty_environment_rejected(self, isolated_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCHEMECACHE_DIR", "")
        with pytest.raises(ConfigError, match="SCHEMECACHE_DIR is set but empty"):
            resolve_cache_dir()


class TestResolveCacheConfig:
    def test_builds_config(self, isolated_env: Path) -> None:
        config = resolve_cache_config(str(isolated_env / "c"))
        assert isinstance(config, CacheConfig)
        assert config.directory == str(isolated_env / "c")
        assert config.path == isolated_env / "c"

    def test_errors_propagate(self, isolated_env: Path) -> None:
        with pytest.raises(ConfigError):
            resolve_cache_config("")
