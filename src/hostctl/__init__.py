"""hostctl - switch the hosts file between named environments"""
from __future__ import annotations

__version__ = "0.1.0"

from .models import Config, Environment, HostEntry  # noqa: E402
from .codec import parse_line, to_line  # noqa: E402
from .hosts_manager import HostsManager  # noqa: E402
from .storage import ConfigStorage  # noqa: E402
from .validation import is_valid_hostname, is_valid_ip  # noqa: E402

__all__: list[str] = [
    "Config",
    "Environment",
    "HostEntry",
    "HostsManager",
    "ConfigStorage",
    "parse_line",
    "to_line",
    "is_valid_hostname",
    "is_valid_ip",
]
