"""Pytest configuration and shared fixtures for inisupport tests."""

import syslog
import tempfile
from pathlib import Path
from typing import Any, Iterator, List, Tuple

import pytest
from inisupport import ConfigStore


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def store() -> ConfigStore:
    """Create an initialized ConfigStore with no file loaded."""
    config_store = ConfigStore()
    config_store.initialize()
    return config_store


class SyslogRecorder:
    """Stands in for the platform syslog calls and records them."""

    def __init__(self):
        self.opened: List[Tuple[Any, ...]] = []
        self.messages: List[Tuple[int, str]] = []
        self.closed = 0

    def openlog(self, *args: Any) -> None:
        self.opened.append(args)

    def syslog(self, priority: int, message: str) -> None:
        self.messages.append((priority, message))

    def closelog(self) -> None:
        self.closed += 1


@pytest.fixture
def syslog_recorder(monkeypatch: pytest.MonkeyPatch) -> SyslogRecorder:
    """Replace openlog/syslog/closelog so tests never write to the system log."""
    recorder = SyslogRecorder()
    monkeypatch.setattr(syslog, "openlog", recorder.openlog)
    monkeypatch.setattr(syslog, "syslog", recorder.syslog)
    monkeypatch.setattr(syslog, "closelog", recorder.closelog)
    return recorder


def write_ini_file(file_path: Path, content: str) -> None:
    """Write INI text to a file.

    Args:
        file_path: Path to write file
        content: INI document
    """
    with open(file_path, "w", encoding="utf-8") as f:
        f.write(content)
