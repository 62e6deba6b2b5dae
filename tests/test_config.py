"""Tests for cfcli.config -- XDG paths, global config, precedence and credentials."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from cfcli.config import (
    atomic_write,
    default_tree_path,
    get_config_dir,
    get_data_dir,
    load_global_config,
    resolve_credential,
    resolve_settings,
    save_global_config,
)
from cfcli.exceptions import ConfigError
from cfcli.models import GlobalConfig, RequestConfig


# ---------------------------------------------------------------------------
# Directories
# ---------------------------------------------------------------------------


class TestDirectories:
    def test_xdg_dirs(self, isolated_config: Path) -> None:
        assert get_config_dir() == isolated_config / "config" / "cfcli"
        assert get_data_dir() == isolated_config / "data" / "cfcli"
        assert get_config_dir().is_dir()
        assert get_data_dir().is_dir()

    def test_default_tree_path(self, isolated_config: Path) -> None:
        assert default_tree_path() == isolated_config / "data" / "cfcli" / "command_tree.json"

    def test_non_xdg_fallback(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("cfcli.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", lambda: isolated_config / "home")
        assert get_config_dir() == isolated_config / "home" / ".cfcli"
        assert get_data_dir() == isolated_config / "home" / ".cfcli" / "data"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_writes_and_creates_parents(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "file.json"
        atomic_write(target, "{}\n")
        assert target.read_text(encoding="utf-8") == "{}\n"

    def test_failure_keeps_original(self, tmp_path: Path) -> None:
        target = tmp_path / "file.json"
        target.write_text("original", encoding="utf-8")
        with patch("cfcli.config.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                atomic_write(target, "new")
        assert target.read_text(encoding="utf-8") == "original"
        assert [p.name for p in tmp_path.iterdir()] == ["file.json"]


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_defaults_when_missing(self, isolated_config: Path) -> None:
        config = load_global_config()
        assert config == GlobalConfig()
        assert config.token_source == "env:CLOUDFLARE_API_TOKEN"

    def test_save_and_load(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(zone_id="z1", request=RequestConfig(timeout=9)))
        loaded = load_global_config()
        assert loaded.zone_id == "z1"
        assert loaded.request.timeout == 9

    def test_invalid_json(self, isolated_config: Path) -> None:
        path = get_config_dir() / "config.json"
        path.write_text("{oops", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_invalid_shape(self, isolated_config: Path) -> None:
        path = get_config_dir() / "config.json"
        path.write_text(json.dumps({"request": {"timeout": "slow"}}), encoding="utf-8")
        with pytest.raises(ConfigError):
            load_global_config()


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveSettings:
    def test_defaults(self, isolated_config: Path) -> None:
        settings = resolve_settings()
        assert settings.endpoint is None
        assert settings.tree_path == str(default_tree_path())
        assert settings.account_id is None
        assert settings.zone_id is None
        assert settings.pretty is False

    def test_config_layer(self, isolated_config: Path) -> None:
        save_global_config(
            GlobalConfig(endpoint="https://cfg", tree_path="/cfg/tree.json", account_id="acc-cfg")
        )
        settings = resolve_settings()
        assert settings.endpoint == "https://cfg"
        assert settings.tree_path == "/cfg/tree.json"
        assert settings.account_id == "acc-cfg"

    def test_env_beats_config(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        save_global_config(
            GlobalConfig(endpoint="https://cfg", tree_path="/cfg/tree.json", zone_id="zone-cfg")
        )
        monkeypatch.setenv("CLOUDFLARE_API_URL", "https://env")
        monkeypatch.setenv("CFCLI_TREE", "/env/tree.json")
        monkeypatch.setenv("CLOUDFLARE_ZONE_ID", "zone-env")
        settings = resolve_settings()
        assert settings.endpoint == "https://env"
        assert settings.tree_path == "/env/tree.json"
        assert settings.zone_id == "zone-env"

    def test_flags_beat_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CLOUDFLARE_API_URL", "https://env")
        monkeypatch.setenv("CFCLI_TREE", "/env/tree.json")
        settings = resolve_settings(cli_endpoint="https://flag", cli_tree="/flag/tree.json")
        assert settings.endpoint == "https://flag"
        assert settings.tree_path == "/flag/tree.json"


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


class TestResolveCredential:
    def test_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CLOUDFLARE_API_TOKEN", "tok")
        assert resolve_credential("env:CLOUDFLARE_API_TOKEN") == "tok"

    def test_env_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CLOUDFLARE_API_TOKEN", raising=False)
        with pytest.raises(ConfigError, match="CLOUDFLARE_API_TOKEN missing"):
            resolve_credential("env:CLOUDFLARE_API_TOKEN")

    def test_env_empty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CLOUDFLARE_API_TOKEN", "")
        with pytest.raises(ConfigError):
            resolve_credential("env:CLOUDFLARE_API_TOKEN")

    def test_file(self, tmp_path: Path) -> None:
        path = tmp_path / "token"
        path.write_text("  file-token\n", encoding="utf-8")
        assert resolve_credential(f"file:{path}") == "file-token"

    def test_file_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            resolve_credential(f"file:{tmp_path / 'absent'}")

    def test_prompt_requires_tty(self) -> None:
        with patch("cfcli.config.sys.stdin") as stdin:
            stdin.isatty.return_value = False
            with pytest.raises(ConfigError, match="not a TTY"):
                resolve_credential("prompt")

    def test_prompt(self) -> None:
        with patch("cfcli.config.sys.stdin") as stdin, patch(
            "cfcli.config.getpass.getpass", return_value="typed"
        ):
            stdin.isatty.return_value = True
            assert resolve_credential("prompt") == "typed"

    def test_unknown_format(self) -> None:
        with pytest.raises(ConfigError, match="Unknown credential source"):
            resolve_credential("vault:secret")
