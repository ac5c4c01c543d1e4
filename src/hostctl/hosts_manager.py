"""Switch the system hosts file between environments.

The hosts file is split into *foreign* entries (everything before the
hostctl marker line) and the *managed* section after it. Applying an
environment keeps the foreign entries, drops the old managed section and
writes the environment's entries after a fresh separator line. A timestamped
backup of the previous file is taken before anything is overwritten.
"""

from __future__ import annotations

import logging
import shutil
import sys
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from .codec import parse_line, to_line
from .exceptions import ErrorHandler, HostctlHostsFileError, HostctlValidationError
from .models import Environment, HostEntry
from .validation import validate_environment

logger = logging.getLogger("hostctl.hosts_manager")

__all__ = ["HostsFileIO", "HostsManager", "default_hosts_path"]

MARKER = "hostctl managed entries"
SEPARATOR = f"# ===== {MARKER} ====="
BACKUP_PREFIX = "hosts.backup."
BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def split_lines(content: str) -> List[str]:
    r"""Split on ``\n`` only, dropping a trailing ``\r`` from each line."""
    return [line.rstrip("\r") for line in content.split("\n")]


def default_hosts_path() -> Path:
    """Return the platform's conventional hosts file location."""
    if sys.platform.startswith("win"):
        return Path(r"C:\Windows\System32\drivers\etc\hosts")
    return Path("/etc/hosts")


class HostsFileIO:
    """Whole-file read/write/copy over the hosts file.

    Kept as a separate object so tests can substitute a recording stub.
    """

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def write_text(self, path: Path, content: str) -> None:
        path.write_text(content, encoding="utf-8")

    def copy(self, src: Path, dst: Path) -> None:
        shutil.copy2(src, dst)


class HostsManager:
    """Read, split, rebuild and overwrite the system hosts file.

    Parameters
    ----------
    hosts_path:
        The hosts file to manage. Defaults to :func:`default_hosts_path`.
    file_io:
        File access collaborator, :class:`HostsFileIO` by default.
    clock:
        Callable returning the current time, used to name backups.
    """

    marker = MARKER
    separator = SEPARATOR

    def __init__(
        self,
        hosts_path: Optional[Path] = None,
        file_io: Optional[HostsFileIO] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.hosts_path = Path(hosts_path) if hosts_path is not None else default_hosts_path()
        self.file_io = file_io or HostsFileIO()
        self.clock = clock
        self._errors = ErrorHandler(logger)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read(self) -> str:
        try:
            return self.file_io.read_text(self.hosts_path)
        except (OSError, UnicodeDecodeError) as e:
            self._errors.log_and_raise(
                HostctlHostsFileError,
                f"Failed to read hosts file: {self.hosts_path}",
                e,
                {"path": str(self.hosts_path)},
            )

    def _check(self, env: Environment) -> None:
        violations = validate_environment(env)
        if violations:
            raise HostctlValidationError(
                f"Invalid hostname in environment '{env.name}': {', '.join(violations)}",
                {"environment": env.name, "violations": violations},
            )

    @staticmethod
    def separate_entries(content: str) -> Tuple[List[HostEntry], List[HostEntry]]:
        """Split *content* into ``(foreign, managed)`` entries.

        Every parseable line after the first line containing the marker text
        belongs to the managed section. Non-entry lines are dropped.
        """
        foreign: List[HostEntry] = []
        managed: List[HostEntry] = []
        in_managed_section = False

        for line in split_lines(content):
            if MARKER in line:
                in_managed_section = True
                continue

            entry = parse_line(line)
            if entry is None:
                continue
            if in_managed_section:
                managed.append(entry)
            else:
                foreign.append(entry)

        return foreign, managed

    @staticmethod
    def build_content(foreign: List[HostEntry], env: Environment) -> str:
        """Return the new hosts file text for *foreign* entries plus *env*."""
        lines = [to_line(entry) for entry in foreign]
        lines.append("")
        lines.append(SEPARATOR)
        lines.extend(to_line(entry) for entry in env.entries)
        return "".join(f"{line}\n" for line in lines)

    def backup_path(self) -> Path:
        timestamp = self.clock().strftime(BACKUP_TIMESTAMP_FORMAT)
        return self.hosts_path.with_name(f"{BACKUP_PREFIX}{timestamp}")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def read_current_hosts(self) -> List[HostEntry]:
        """Return every parseable entry of the live hosts file, in file order."""
        entries = [e for e in map(parse_line, split_lines(self._read())) if e is not None]
        logger.debug(f"Read {len(entries)} entries from {self.hosts_path}")
        return entries

    def read_sections(self) -> Tuple[List[HostEntry], List[HostEntry]]:
        """Return the ``(foreign, managed)`` split of the live hosts file."""
        return self.separate_entries(self._read())

    def backup_hosts_file(self) -> Path:
        """Copy the hosts file to a timestamped sibling and return its path."""
        backup_path = self.backup_path()
        try:
            self.file_io.copy(self.hosts_path, backup_path)
        except OSError as e:
            self._errors.log_and_raise(
                HostctlHostsFileError,
                f"Failed to create backup: {backup_path}",
                e,
                {"path": str(backup_path)},
            )
        logger.info(f"💾 Backed up {self.hosts_path} to {backup_path}")
        return backup_path

    def render(self, env: Environment) -> Tuple[str, str]:
        """Return ``(current, proposed)`` hosts file text without writing anything."""
        self._check(env)
        current = self._read()
        foreign, _managed = self.separate_entries(current)
        return current, self.build_content(foreign, env)

    def apply_environment(self, env: Environment) -> Path:
        """Make *env* the managed section of the hosts file.

        Validation runs before any side effect; if a hostname is invalid
        nothing is backed up or written. Returns the backup path. A failed
        write leaves the backup in place for manual recovery.
        """
        self._check(env)

        backup_path = self.backup_hosts_file()

        foreign, managed = self.separate_entries(self._read())
        logger.debug(
            f"Found {len(foreign)} foreign and {len(managed)} previously managed entries"
        )

        content = self.build_content(foreign, env)
        try:
            self.file_io.write_text(self.hosts_path, content)
        except OSError as e:
            self._errors.log_and_raise(
                HostctlHostsFileError,
                f"Failed to write hosts file: {self.hosts_path}",
                e,
                {"path": str(self.hosts_path), "backup": str(backup_path)},
            )

        logger.info(
            f"✅ Applied environment '{env.name}' ({len(env.entries)} entries, "
            f"{len(content.encode('utf-8'))} bytes) to {self.hosts_path}"
        )
        return backup_path
