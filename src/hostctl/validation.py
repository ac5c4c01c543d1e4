"""Hostname and IP address checks used before state is mutated."""

from __future__ import annotations

import ipaddress
import logging
from typing import List, Optional

import regex

from .exceptions import HostctlValidationError
from .models import Environment, HostEntry, IPAddress

logger = logging.getLogger("hostctl.validation")

__all__ = [
    "MAX_HOSTNAME_LENGTH",
    "MAX_LABEL_LENGTH",
    "is_valid_hostname",
    "is_valid_ip",
    "address_from_text",
    "parse_ip",
    "build_entry",
    "validate_environment",
]

MAX_HOSTNAME_LENGTH = 253
MAX_LABEL_LENGTH = 63

# Unicode Alphabetic (letters plus combining vowel signs) or Numeric, or a hyphen
LABEL_CHARS = regex.compile(r"[\p{Alphabetic}\p{N}-]+")


def _byte_length(value: str) -> int:
    return len(value.encode("utf-8"))


def is_valid_hostname(hostname: str) -> bool:
    """Return ``True`` if *hostname* is a syntactically valid host name.

    Labels are separated by ``.``; each must be 1-63 bytes of alphanumeric
    characters (unicode included) or ``-``, and may not start or end with a
    hyphen. The whole name is limited to 253 bytes.
    """
    if not hostname or _byte_length(hostname) > MAX_HOSTNAME_LENGTH:
        return False

    for label in hostname.split("."):
        if not label or _byte_length(label) > MAX_LABEL_LENGTH:
            return False
        if label.startswith("-") or label.endswith("-"):
            return False
        if LABEL_CHARS.fullmatch(label) is None:
            return False

    return True


def address_from_text(value: str) -> Optional[IPAddress]:
    """Parse a dotted-quad or colon-hex address, or return ``None``.

    IPv6 zone suffixes such as ``fe80::1%eth0`` are not standard notation
    and are rejected.
    """
    if not isinstance(value, str) or "%" in value:
        return None
    try:
        return ipaddress.ip_address(value)
    except ValueError:
        return None


def is_valid_ip(value: str) -> bool:
    """Return ``True`` if *value* is an IPv4 or IPv6 address in textual form."""
    return address_from_text(value) is not None


def parse_ip(value: str) -> IPAddress:
    """Parse *value* into an address object or raise a validation error."""
    address = address_from_text(value)
    if address is None:
        raise HostctlValidationError(f"Invalid IP address: {value}", {"ip": value})
    return address


def build_entry(ip: str, hostname: str, comment: Optional[str] = None) -> HostEntry:
    """Create a :class:`HostEntry` from user input, validating both fields."""
    address = parse_ip(ip)
    if not is_valid_hostname(hostname):
        raise HostctlValidationError(f"Invalid hostname: {hostname}", {"hostname": hostname})
    return HostEntry(ip=address, hostname=hostname, comment=comment)


def validate_environment(env: Environment) -> List[str]:
    """Return the hostnames in *env* that fail validation, in entry order.

    This is a pure check; an empty list means the environment may be applied.
    """
    violations = [entry.hostname for entry in env.entries if not is_valid_hostname(entry.hostname)]
    if violations:
        logger.debug(f"Environment '{env.name}' has {len(violations)} invalid hostname(s): {violations}")
    return violations
