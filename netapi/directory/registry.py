"""Directory backend registry and selector."""

from __future__ import annotations

import logging
from typing import Callable, Generic, TypeVar

from netapi.config import settings
from netapi.directory.base import Directories

logger = logging.getLogger(__name__)

T = TypeVar("T")

SUPPORTED_BACKENDS = ("docker", "memory")


class LazySingleton(Generic[T]):
    """Build an instance from ``factory`` on first use; overridable in tests."""

    def __init__(self, factory: Callable[[], T]):
        self._factory = factory
        self._instance: T | None = None

    def get(self) -> T:
        if self._instance is None:
            self._instance = self._factory()
        return self._instance

    def set(self, instance: T) -> None:
        self._instance = instance

    def reset(self) -> None:
        self._instance = None


def _build_memory() -> Directories:
    from netapi.directory.memory import MemoryContainerDirectory, MemoryNetworkDirectory

    networks = MemoryNetworkDirectory()
    return Directories(
        networks=networks,
        containers=MemoryContainerDirectory(networks),
        backend="memory",
    )


def _build_docker() -> Directories:
    import docker

    from netapi.directory.docker import DockerContainerDirectory, DockerNetworkDirectory

    client = docker.DockerClient(base_url=settings.docker_socket, timeout=settings.docker_timeout)
    return Directories(
        networks=DockerNetworkDirectory(client),
        containers=DockerContainerDirectory(client),
        backend="docker",
    )


def _build_directories() -> Directories:
    backend_name = (settings.directory_backend or "docker").lower()
    if backend_name not in SUPPORTED_BACKENDS:
        logger.warning(f"Unsupported directory backend '{backend_name}', falling back to 'docker'")
        backend_name = "docker"

    logger.info(f"Using '{backend_name}' directory backend")
    if backend_name == "memory":
        return _build_memory()
    return _build_docker()


_directories_singleton = LazySingleton(_build_directories)


def get_directories() -> Directories:
    """Return the configured directories singleton."""
    return _directories_singleton.get()


def set_directories(directories: Directories) -> None:
    """Install a prebuilt pair of directories (tests, embedding)."""
    _directories_singleton.set(directories)


def reset_directories() -> None:
    """Reset the singleton (mainly for testing)."""
    _directories_singleton.reset()
