"""Data model for hostctl: host entries, environments and the configuration.

A :class:`Config` owns every :class:`Environment` by name, and each
environment owns its ordered list of :class:`HostEntry` objects. Nothing here
touches the filesystem; see :mod:`hostctl.storage` for persistence.
"""

from __future__ import annotations

import ipaddress
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union

logger = logging.getLogger("hostctl.models")

__all__ = ["IPAddress", "HostEntry", "Environment", "Config"]

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


@dataclass
class HostEntry:
    """A single IP-to-hostname mapping, optionally annotated with a comment.

    ``comment=None`` and ``comment=""`` are different states: the latter is
    what a hosts line ending in a bare ``#`` parses to.
    """

    ip: IPAddress
    hostname: str
    comment: Optional[str] = None

    def to_line(self) -> str:
        """Return the hosts-file form: ``<ip> <hostname>[ # <comment>]``."""
        if self.comment is not None:
            return f"{self.ip} {self.hostname} # {self.comment}"
        return f"{self.ip} {self.hostname}"

    def to_dict(self) -> Dict[str, Any]:
        return {"ip": str(self.ip), "hostname": self.hostname, "comment": self.comment}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HostEntry":
        comment = data.get("comment")
        return cls(
            ip=ipaddress.ip_address(str(data["ip"])),
            hostname=str(data["hostname"]),
            comment=None if comment is None else str(comment),
        )

    def __str__(self) -> str:
        return self.to_line()


@dataclass
class Environment:
    """A named, ordered collection of host entries.

    Hostnames need not be unique; lookups and removals act on the first
    match in insertion order.
    """

    name: str
    description: Optional[str] = None
    entries: List[HostEntry] = field(default_factory=list)

    def add_entry(self, entry: HostEntry) -> None:
        self.entries.append(entry)

    def remove_entry(self, hostname: str) -> bool:
        """Remove the first entry for *hostname*; return whether one was removed."""
        for index, entry in enumerate(self.entries):
            if entry.hostname == hostname:
                del self.entries[index]
                return True
        return False

    def find_entry(self, hostname: str) -> Optional[HostEntry]:
        return next((e for e in self.entries if e.hostname == hostname), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "entries": [entry.to_dict() for entry in self.entries],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Environment":
        description = data.get("description")
        return cls(
            name=str(data["name"]),
            description=None if description is None else str(description),
            entries=[HostEntry.from_dict(item) for item in data.get("entries") or []],
        )


@dataclass
class Config:
    """All environments keyed by name plus the currently active one.

    Callers must not rely on any ordering of :meth:`environment_names`.
    """

    current_environment: Optional[str] = None
    environments: Dict[str, Environment] = field(default_factory=dict)

    def add_environment(self, env: Environment) -> None:
        """Insert *env*, silently replacing any environment of the same name."""
        self.environments[env.name] = env

    def remove_environment(self, name: str) -> bool:
        removed = self.environments.pop(name, None) is not None
        if removed and self.current_environment == name:
            logger.info(f"Active environment '{name}' removed, clearing current environment")
            self.current_environment = None
        return removed

    def get_environment(self, name: str) -> Optional[Environment]:
        """Return the owned environment for *name*; mutations are visible in the config."""
        return self.environments.get(name)

    def environment_names(self) -> Iterator[str]:
        return iter(self.environments.keys())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_environment": self.current_environment,
            "environments": {name: env.to_dict() for name, env in self.environments.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        config = cls(current_environment=data.get("current_environment"))
        for key, raw_env in (data.get("environments") or {}).items():
            # The map key wins over a stale "name" field.
            config.add_environment(Environment.from_dict({**(raw_env or {}), "name": key}))
        if config.current_environment is not None and config.current_environment not in config.environments:
            logger.warning(
                f"Current environment '{config.current_environment}' is not defined in the configuration"
            )
        return config
