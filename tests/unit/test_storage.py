"""Unit tests for ConfigStorage and Settings."""
from __future__ import annotations

import ipaddress
from pathlib import Path

import pytest
import yaml

from hostctl.exceptions import HostctlConfigError
from hostctl.models import Config, Environment, HostEntry
from hostctl.settings import Settings, default_config_dir
from hostctl.storage import ConfigStorage

pytestmark = pytest.mark.unit


def _sample_config() -> Config:
    config = Config()
    env = Environment("demo", description="Demo environment")
    env.add_entry(HostEntry(ipaddress.ip_address("192.168.1.100"), "app.demo", "Application server"))
    env.add_entry(HostEntry(ipaddress.ip_address("::1"), "v6.demo", ""))
    config.add_environment(env)
    config.add_environment(Environment("prod"))
    config.current_environment = "demo"
    return config


class TestConfigStorage:

    def test_config_path(self, config_dir: Path):
        storage = ConfigStorage(config_dir)
        assert storage.config_path == config_dir / "config.yaml"

    def test_missing_file_loads_empty_config(self, config_dir: Path):
        config = ConfigStorage(config_dir).load_config()
        assert config == Config()
        assert not config_dir.exists()

    def test_save_creates_directory_and_round_trips(self, config_dir: Path):
        storage = ConfigStorage(config_dir)
        storage.save_config(_sample_config())

        assert storage.config_path.exists()
        assert storage.load_config() == _sample_config()

    def test_yaml_layout(self, config_dir: Path):
        storage = ConfigStorage(config_dir)
        storage.save_config(_sample_config())

        text = storage.config_path.read_text(encoding="utf-8")
        for expected in ("current_environment", "environments", "Demo environment", "192.168.1.100", "app.demo"):
            assert expected in text

        data = yaml.safe_load(text)
        assert data["current_environment"] == "demo"
        assert data["environments"]["prod"] == {"name": "prod", "description": None, "entries": []}
        assert data["environments"]["demo"]["entries"][1]["comment"] == ""

    def test_empty_file_loads_empty_config(self, config_dir: Path):
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("", encoding="utf-8")
        assert ConfigStorage(config_dir).load_config() == Config()

    def test_malformed_yaml(self, config_dir: Path):
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("environments: [unclosed\n", encoding="utf-8")
        with pytest.raises(HostctlConfigError, match="Failed to parse config file"):
            ConfigStorage(config_dir).load_config()

    def test_non_mapping_yaml(self, config_dir: Path):
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(HostctlConfigError, match="expected a mapping"):
            ConfigStorage(config_dir).load_config()

    def test_invalid_ip_in_config(self, config_dir: Path):
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text(
            "environments:\n  dev:\n    entries:\n    - ip: not-an-ip\n      hostname: api\n",
            encoding="utf-8",
        )
        with pytest.raises(HostctlConfigError, match="Invalid configuration"):
            ConfigStorage(config_dir).load_config()

    def test_write_failure_reports_path(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        storage = ConfigStorage(blocker / "config")
        with pytest.raises(HostctlConfigError, match="Failed to create config directory"):
            storage.save_config(Config())


class TestSettings:

    def test_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.setattr("hostctl.hosts_manager.sys.platform", "linux")
        monkeypatch.setattr("hostctl.settings.sys.platform", "linux")
        settings = Settings.from_env(env_file=None, environ={})
        assert settings.config_dir == default_config_dir()
        assert settings.config_dir.parts[-2:] == (".config", "hostctl")
        assert settings.hosts_file == Path("/etc/hosts")
        assert settings.log_level == "INFO"

    def test_environment_overrides(self, tmp_path: Path):
        settings = Settings.from_env(
            env_file=None,
            environ={
                "HOSTCTL_CONFIG_DIR": str(tmp_path / "cfg"),
                "HOSTCTL_HOSTS_FILE": str(tmp_path / "hosts"),
                "HOSTCTL_LOG_LEVEL": "debug",
            },
        )
        assert ConfigStorage(settings.config_dir).config_path == tmp_path / "cfg" / "config.yaml"
        assert settings.log_file == tmp_path / "cfg" / "hostctl.log"
        assert settings.hosts_file == tmp_path / "hosts"
        assert settings.log_level == "DEBUG"

    def test_dotenv_file_is_read_and_environment_wins(self, tmp_path: Path):
        env_file = tmp_path / ".env.hostctl"
        env_file.write_text(
            f"HOSTCTL_CONFIG_DIR={tmp_path / 'from-dotenv'}\nHOSTCTL_HOSTS_FILE={tmp_path / 'dotenv-hosts'}\n",
            encoding="utf-8",
        )
        settings = Settings.from_env(
            env_file=str(env_file),
            environ={"HOSTCTL_HOSTS_FILE": str(tmp_path / "env-hosts")},
        )
        assert settings.config_dir == tmp_path / "from-dotenv"
        assert settings.hosts_file == tmp_path / "env-hosts"

    def test_missing_dotenv_file_is_ignored(self, tmp_path: Path):
        settings = Settings.from_env(
            env_file=str(tmp_path / "absent.env"),
            environ={"HOSTCTL_CONFIG_DIR": str(tmp_path)},
        )
        assert settings.config_dir == tmp_path

    def test_invalid_log_level(self):
        with pytest.raises(HostctlConfigError, match="Invalid HOSTCTL_LOG_LEVEL: LOUD"):
            Settings.from_env(env_file=None, environ={"HOSTCTL_LOG_LEVEL": "loud"})
