from __future__ import annotations

import pytest

from netapi.config import settings
from netapi.directory import Directories, reset_directories, set_directories
from netapi.directory.memory import MemoryContainerDirectory, MemoryNetworkDirectory


@pytest.fixture(autouse=True)
def _memory_backend(monkeypatch):
    """Never let a test reach for the local Docker daemon by accident."""
    monkeypatch.setattr(settings, "directory_backend", "memory")
    reset_directories()
    yield
    reset_directories()


@pytest.fixture
def networks() -> MemoryNetworkDirectory:
    return MemoryNetworkDirectory()


@pytest.fixture
def containers(networks: MemoryNetworkDirectory) -> MemoryContainerDirectory:
    return MemoryContainerDirectory(networks)


@pytest.fixture
def directories(networks, containers) -> Directories:
    dirs = Directories(networks=networks, containers=containers, backend="memory")
    set_directories(dirs)
    return dirs


@pytest.fixture
def sequential_ids(monkeypatch):
    """Make generated IDs predictable: the test supplies them in order."""
    queue: list[str] = []

    def _next_id() -> str:
        return queue.pop(0)

    monkeypatch.setattr("netapi.directory.memory._generate_id", _next_id)
    return queue
