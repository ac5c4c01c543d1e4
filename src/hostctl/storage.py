"""YAML persistence of the hostctl configuration."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml

from .exceptions import ErrorHandler, HostctlConfigError
from .models import Config
from .settings import default_config_dir

logger = logging.getLogger("hostctl.storage")

__all__ = ["ConfigStorage"]

CONFIG_FILE_NAME = "config.yaml"


class ConfigStorage:
    """Load and save :class:`~hostctl.models.Config` as ``config.yaml``.

    A missing file loads as an empty configuration; the directory is created
    on the first save.
    """

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        self.config_dir = Path(config_dir) if config_dir is not None else default_config_dir()
        self._errors = ErrorHandler(logger)

    @property
    def config_path(self) -> Path:
        return self.config_dir / CONFIG_FILE_NAME

    def ensure_config_dir(self) -> None:
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self._errors.log_and_raise(
                HostctlConfigError,
                f"Failed to create config directory: {self.config_dir}",
                e,
                {"path": str(self.config_dir)},
            )

    def load_config(self) -> Config:
        path = self.config_path
        if not path.exists():
            logger.debug(f"No config file at {path}, starting with an empty configuration")
            return Config()

        try:
            with path.open("r", encoding="utf-8") as fp:
                data = yaml.safe_load(fp)
        except (OSError, UnicodeDecodeError) as e:
            self._errors.log_and_raise(
                HostctlConfigError, f"Failed to read config file: {path}", e, {"path": str(path)}
            )
        except yaml.YAMLError as e:
            self._errors.log_and_raise(
                HostctlConfigError, f"Failed to parse config file: {path}", e, {"path": str(path)}
            )

        if data is None:
            return Config()
        if not isinstance(data, dict):
            raise HostctlConfigError(
                f"Failed to parse config file: {path} (expected a mapping)", {"path": str(path)}
            )

        try:
            config = Config.from_dict(data)
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            self._errors.log_and_raise(
                HostctlConfigError, f"Invalid configuration in {path}", e, {"path": str(path)}
            )

        logger.debug(f"Loaded {len(config.environments)} environment(s) from {path}")
        return config

    def save_config(self, config: Config) -> None:
        self.ensure_config_dir()
        path = self.config_path
        content = yaml.safe_dump(config.to_dict(), sort_keys=False, allow_unicode=True)
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            self._errors.log_and_raise(
                HostctlConfigError, f"Failed to write config file: {path}", e, {"path": str(path)}
            )
        logger.info(f"💾 Saved {len(config.environments)} environment(s) to {path}")
