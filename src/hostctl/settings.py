"""Runtime settings resolved from defaults, a dotenv file and the environment."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import dotenv_values

from .exceptions import HostctlConfigError
from .hosts_manager import default_hosts_path

__all__ = ["Settings", "default_config_dir", "DEFAULT_ENV_FILE"]

DEFAULT_ENV_FILE = ".env.hostctl"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_config_dir() -> Path:
    """Return the per-user directory holding ``config.yaml``."""
    if sys.platform.startswith("win"):
        base = os.environ.get("APPDATA") or r"C:\ProgramData"
        return Path(base) / "hostctl"
    return Path.home() / ".config" / "hostctl"


@dataclass
class Settings:
    """Where hostctl keeps its configuration and which hosts file it manages."""

    config_dir: Path
    hosts_file: Path
    log_level: str = "INFO"

    @property
    def log_file(self) -> Path:
        return self.config_dir / "hostctl.log"

    @classmethod
    def from_env(
        cls,
        env_file: Optional[str] = DEFAULT_ENV_FILE,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "Settings":
        """
        Build settings from the process environment.

        Variables (process environment wins over *env_file*):
            HOSTCTL_CONFIG_DIR: configuration directory (default: ~/.config/hostctl)
            HOSTCTL_HOSTS_FILE: hosts file to manage (default: /etc/hosts)
            HOSTCTL_LOG_LEVEL: log level (default: INFO)
        """
        values: Dict[str, Optional[str]] = {}
        if env_file and Path(env_file).exists():
            values.update(dotenv_values(env_file))
        values.update(os.environ if environ is None else environ)

        config_dir = values.get("HOSTCTL_CONFIG_DIR")
        hosts_file = values.get("HOSTCTL_HOSTS_FILE")
        settings = cls(
            config_dir=Path(config_dir).expanduser() if config_dir else default_config_dir(),
            hosts_file=Path(hosts_file).expanduser() if hosts_file else default_hosts_path(),
            log_level=(values.get("HOSTCTL_LOG_LEVEL") or "INFO").upper(),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if self.log_level not in VALID_LOG_LEVELS:
            raise HostctlConfigError(
                f"Invalid HOSTCTL_LOG_LEVEL: {self.log_level}. "
                f"Must be one of: {', '.join(VALID_LOG_LEVELS)}",
                {"log_level": self.log_level},
            )
