"""Parse and serialize single hosts-file lines.

Grammar::

    <ws>? <IP> <ws> <hostname> [<ws> extra tokens] [<ws>? # <comment>]

Blank lines, comment lines and anything that does not match the grammar are
not data: :func:`parse_line` returns ``None`` for them.
"""

from __future__ import annotations

from typing import Optional

from .models import HostEntry
from .validation import address_from_text

__all__ = ["parse_line", "to_line"]


def parse_line(line: str) -> Optional[HostEntry]:
    """Return the entry described by *line*, or ``None`` if it carries no data.

    Only the first hostname on a line is kept; aliases after it are dropped.
    A trailing ``#`` with nothing after it yields ``comment == ""``.
    """
    line = line.strip()
    if not line or line.startswith("#"):
        return None

    content, sep, remainder = line.partition("#")
    comment = remainder.strip() if sep else None

    tokens = content.split()
    if len(tokens) < 2:
        return None

    ip = address_from_text(tokens[0])
    if ip is None:
        return None

    return HostEntry(ip=ip, hostname=tokens[1], comment=comment)


def to_line(entry: HostEntry) -> str:
    """Serialize *entry* as a hosts-file line (without the newline)."""
    return entry.to_line()
