"""Tests for layered config loading."""

import json
from pathlib import Path

import pytest

from sockrpc.config.loader import _overlay, _read_layer, load_config
from sockrpc.config.schema import Config
from sockrpc.core.errors import ConfigError, LoadError


@pytest.fixture
def global_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the global config layer at a temp file (not created)."""
    path = tmp_path / "home" / ".sockrpc" / "config.json"
    monkeypatch.setattr("sockrpc.config.loader.get_default_config_path", lambda: path)
    return path


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    project = tmp_path / "project"
    project.mkdir()
    return project


def _write(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))


class TestReadLayer:
    """Tests for reading a single config file."""

    def test_optional_layer_missing_is_none(self, tmp_path: Path) -> None:
        assert _read_layer(tmp_path / "missing.json") is None

    def test_required_layer_missing_raises(self, tmp_path: Path) -> None:
        with pytest.raises(LoadError, match="not found"):
            _read_layer(tmp_path / "missing.json", required=True)

    def test_empty_file_is_empty_layer(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("  \n")
        assert _read_layer(path) == {}

    def test_byte_order_mark_is_accepted(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_bytes(b'\xef\xbb\xbf{"client": {"timeout": 1}}')
        assert _read_layer(path) == {"client": {"timeout": 1}}

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("not json")
        with pytest.raises(LoadError, match="Invalid JSON"):
            _read_layer(path)

    def test_non_object_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")
        with pytest.raises(LoadError, match="must contain an object"):
            _read_layer(path)


class TestOverlay:
    """Tests for section-wise layer merging."""

    def test_section_keys_merge(self) -> None:
        base = {"server": {"socket_path": "/a", "keep_alive": True}}
        layer = {"server": {"socket_path": "/b"}, "client": {"timeout": 3}}
        assert _overlay(base, layer) == {
            "server": {"socket_path": "/b", "keep_alive": True},
            "client": {"timeout": 3},
        }

    def test_non_object_section_replaces(self) -> None:
        assert _overlay({"server": {"socket_path": "/a"}}, {"server": None}) == {"server": None}

    def test_inputs_not_modified(self) -> None:
        base = {"server": {"socket_path": "/a"}}
        _overlay(base, {"server": {"socket_path": "/b"}})
        assert base == {"server": {"socket_path": "/a"}}


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_files(self, global_config: Path, project_dir: Path) -> None:
        config = load_config(cwd=project_dir)
        assert config == Config()
        assert config.server.socket_path == "/tmp/rpc.sock"
        assert config.server.keep_alive is False
        assert config.server.max_line_length == 16 * 1024 * 1024
        assert config.logging.log_dir is None
        assert config.client.timeout == 10.0

    def test_global_layer(self, global_config: Path, project_dir: Path) -> None:
        _write(global_config, {"server": {"socket_path": "/run/global.sock"}})
        assert load_config(cwd=project_dir).server.socket_path == "/run/global.sock"

    def test_local_overrides_global(self, global_config: Path, project_dir: Path) -> None:
        _write(global_config, {"server": {"socket_path": "/run/global.sock", "keep_alive": True}})
        _write(project_dir / ".sockrpc" / "config.json", {"server": {"socket_path": "/run/local.sock"}})
        config = load_config(cwd=project_dir)
        assert config.server.socket_path == "/run/local.sock"
        assert config.server.keep_alive is True

    def test_env_overrides_files(
        self, global_config: Path, project_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write(project_dir / ".sockrpc" / "config.json", {"server": {"socket_path": "/run/local.sock"}})
        monkeypatch.setenv("SOCKRPC_SOCKET_PATH", "/run/env.sock")
        assert load_config(cwd=project_dir).server.socket_path == "/run/env.sock"

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.json"
        _write(path, {"client": {"timeout": 2.5}, "logging": {"level": "DEBUG"}})
        config = load_config(path)
        assert config.client.timeout == 2.5
        assert config.logging.level == "DEBUG"

    def test_explicit_missing_path_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.json")

    def test_unknown_keys_rejected(self, global_config: Path, project_dir: Path) -> None:
        _write(global_config, {"server": {"port": 8765}})
        with pytest.raises(ConfigError, match="validation failed"):
            load_config(cwd=project_dir)

    def test_invalid_values_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        _write(path, {"server": {"max_line_length": 0}})
        with pytest.raises(ConfigError):
            load_config(path)

    def test_invalid_json_in_layer_raises_config_error(
        self, global_config: Path, project_dir: Path
    ) -> None:
        global_config.parent.mkdir(parents=True)
        global_config.write_text("{broken")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(cwd=project_dir)
