"""
Shared pytest fixtures for the chaos test suite.

  - MemoryFileSystem -> stands in for chaos.utils.file_utils.FileSystem
  - counting_rng     -> deterministic random source, different bytes per call
  - data_dir         -> temporary data directory for command line tests
"""

import pytest


class MemoryFileSystem:
    """In-memory replacement for FileSystem with the same methods."""

    def __init__(self):
        self.files = {}
        self.modes = {}
        self.dirs = set()
        self.writes = 0

    def exists(self, path) -> bool:
        return str(path) in self.files or str(path) in self.dirs

    def read_text(self, path) -> str:
        try:
            return self.files[str(path)]
        except KeyError:
            raise FileNotFoundError(str(path)) from None

    def write_text(self, path, data: str, mode: int = 0o600) -> None:
        self.files[str(path)] = data
        self.modes[str(path)] = mode
        self.writes += 1

    def set_mode(self, path, mode: int) -> None:
        self.modes[str(path)] = mode

    def make_dirs(self, path, mode: int) -> None:
        self.dirs.add(str(path))
        self.modes[str(path)] = mode


class CountingRandom:
    """Returns n bytes starting at an offset that moves on every call."""

    def __init__(self):
        self.calls = 0

    def __call__(self, n: int) -> bytes:
        start = self.calls
        self.calls += 1
        return bytes((start + i) % 256 for i in range(n))


@pytest.fixture
def memory_fs():
    return MemoryFileSystem()


@pytest.fixture
def counting_rng():
    return CountingRandom()


@pytest.fixture
def key():
    return bytes(range(1, 33))


@pytest.fixture
def salt():
    return bytes(range(1, 25))


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "chaos"
