"""Pytest configuration and reusable fixtures for hostctl tests."""
from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

# ---------------------------------------------------------------------------
# Test path setup – make sure `src/` is importable when tests are invoked from
# the project root without an editable install.
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"

if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from hostctl.hosts_manager import HostsFileIO  # noqa: E402

SAMPLE_HOSTS = """\
127.0.0.1 localhost
# The following lines are desirable for IPv6 capable hosts
::1     ip6-localhost ip6-loopback
192.168.1.1\trouter # Local router

# ===== hostctl managed entries =====
10.0.0.1 api.old
10.0.0.2 db.old
"""


class RecordingFileIO(HostsFileIO):
    """In-memory file collaborator that records every call."""

    def __init__(self, files: Optional[Dict[str, str]] = None, fail_on: Tuple[str, ...] = ()) -> None:
        self.files: Dict[str, str] = dict(files or {})
        self.fail_on = fail_on
        self.calls: List[Tuple[str, str]] = []

    def _maybe_fail(self, op: str, path: Path) -> None:
        self.calls.append((op, str(path)))
        if op in self.fail_on:
            raise PermissionError(13, "Permission denied", str(path))

    def read_text(self, path: Path) -> str:
        self._maybe_fail("read", path)
        try:
            return self.files[str(path)]
        except KeyError:
            raise FileNotFoundError(2, "No such file or directory", str(path)) from None

    def write_text(self, path: Path, content: str) -> None:
        self._maybe_fail("write", path)
        self.files[str(path)] = content

    def copy(self, src: Path, dst: Path) -> None:
        self._maybe_fail("copy", dst)
        self.files[str(dst)] = self.read_text(src)

    def ops(self) -> List[str]:
        return [op for op, _ in self.calls]


# ---------------------------------------------------------------------------
# Generic fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def fixed_clock():
    """Clock returning 2024-01-15 14:30:22 for predictable backup names."""
    return lambda: datetime(2024, 1, 15, 14, 30, 22)


@pytest.fixture()
def hosts_file(tmp_path: Path) -> Path:
    """A real hosts file on disk pre-filled with ``SAMPLE_HOSTS``."""
    path = tmp_path / "etc" / "hosts"
    path.parent.mkdir()
    path.write_text(SAMPLE_HOSTS, encoding="utf-8")
    return path


@pytest.fixture()
def config_dir(tmp_path: Path) -> Path:
    return tmp_path / "config"


@pytest.fixture()
def recording_io() -> RecordingFileIO:
    return RecordingFileIO({"/etc/hosts": SAMPLE_HOSTS})


@pytest.fixture(autouse=True)
def reset_hostctl_logger():
    """Drop handlers installed by ``setup_logging`` during a test."""
    yield
    logger = logging.getLogger("hostctl")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture()
def file_io_factory():
    """Return the recording file collaborator class for custom setups."""
    return RecordingFileIO
