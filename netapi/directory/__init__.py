"""Network and container directory contracts and backends."""

from netapi.directory.base import (
    Container,
    ContainerDirectory,
    Directories,
    Endpoint,
    EndpointInfo,
    InterfaceInfo,
    Network,
    NetworkDirectory,
    Sandbox,
)
from netapi.directory.registry import get_directories, reset_directories, set_directories

__all__ = [
    "Container",
    "ContainerDirectory",
    "Directories",
    "Endpoint",
    "EndpointInfo",
    "InterfaceInfo",
    "Network",
    "NetworkDirectory",
    "Sandbox",
    "get_directories",
    "reset_directories",
    "set_directories",
]
