"""Directory contracts consumed by the network services.

A directory owns the authoritative network and container state. The
services only query it and ask it to act; they never cache what it returns.
Concrete backends (memory, docker) implement these interfaces.
"""

from __future__ import annotations

import ipaddress
from abc import ABC, abstractmethod
from dataclasses import dataclass

from netapi.errors import AmbiguousNetworkID, NetworkNotFound


@dataclass(frozen=True)
class Sandbox:
    """A container's network namespace."""

    container_id: str


@dataclass(frozen=True)
class InterfaceInfo:
    """Addressing of an attached endpoint. Unset fields are None."""

    mac_address: str | None = None
    address: ipaddress.IPv4Interface | None = None
    address_ipv6: ipaddress.IPv6Interface | None = None


@dataclass(frozen=True)
class EndpointInfo:
    sandbox: Sandbox | None = None
    iface: InterfaceInfo | None = None


class Endpoint(ABC):
    """A container's attachment point within one network."""

    @property
    @abstractmethod
    def id(self) -> str:
        """Endpoint ID, unique within its network."""

    @abstractmethod
    def info(self) -> EndpointInfo:
        """Current sandbox and interface information."""


class Network(ABC):
    """A logical network. Identity is ``id``; ``name`` is not unique."""

    @property
    @abstractmethod
    def id(self) -> str: ...

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def driver(self) -> str: ...

    @property
    @abstractmethod
    def options(self) -> dict[str, str]: ...

    @abstractmethod
    def endpoints(self) -> list[Endpoint]:
        """Endpoints currently present on this network."""

    @abstractmethod
    def delete(self) -> None:
        """Remove the network. Raises if the directory refuses."""


class NetworkDirectory(ABC):
    """Lookup and creation of networks."""

    name: str = ""

    @abstractmethod
    def find_by_name(self, name: str) -> Network:
        """Return a network with exactly this name.

        Raises NetworkNotFound when none exists. When several networks share
        the name, the first one in directory order is returned.
        """

    @abstractmethod
    def find_by_id_prefix(self, prefix: str) -> list[Network]:
        """Return networks whose ID starts with ``prefix``.

        An exact ID match is returned on its own. An empty prefix returns
        every network.
        """

    @abstractmethod
    def create(self, name: str, driver: str, options: dict[str, str]) -> Network:
        """Create a new network. Names are never checked for uniqueness here."""

    def find(self, identifier: str) -> Network:
        """Resolve a name, full ID or unique ID prefix to a network."""
        try:
            return self.find_by_name(identifier)
        except NetworkNotFound:
            pass

        if not identifier:
            raise NetworkNotFound(identifier)
        matches = self.find_by_id_prefix(identifier)
        if not matches:
            raise NetworkNotFound(identifier)
        if len(matches) > 1:
            raise AmbiguousNetworkID(identifier, len(matches))
        return matches[0]


class Container(ABC):
    """A container as seen by the network services."""

    @property
    @abstractmethod
    def id(self) -> str: ...

    @abstractmethod
    def connect_to_network(self, network_name: str) -> None:
        """Attach the container to the named network."""

    @abstractmethod
    def disconnect_from_network(self, network: Network) -> None:
        """Detach the container from ``network``."""


class ContainerDirectory(ABC):
    """Lookup of containers by name, ID or ID prefix."""

    @abstractmethod
    def find(self, identifier: str) -> Container:
        """Return the container or raise a DirectoryError (ContainerNotFound)."""


@dataclass
class Directories:
    """The pair of directories a service set is built over."""

    networks: NetworkDirectory
    containers: ContainerDirectory
    backend: str = ""
